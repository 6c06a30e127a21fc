"""
Data-quality report for the fighter collection.

Usage:
    python -m scraper.runners.quality_report
    python -m scraper.runners.quality_report --source db
    python -m scraper.runners.quality_report --input data/sample.json --output-dir reports
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from backend.db.connection import create_tables, get_engine, get_session_factory
from backend.db.repositories import FighterRepository
from scraper.config import settings
from scraper.enrichment.merge import DataQualityReport, build_quality_report
from scraper.pipelines.storage import DEFAULT_EXPORT_FILENAME

logger = logging.getLogger(__name__)


def load_export_entries(path: Path) -> list[dict[str, Any]]:
    return json.loads(path.read_text(encoding="utf-8"))


async def load_store_entries(
    session_factory: sessionmaker[AsyncSession] | None = None,
) -> list[dict[str, Any]]:
    if session_factory is None:
        await create_tables(get_engine())
        session_factory = get_session_factory()
    async with session_factory() as session:
        fighters = await FighterRepository(session).export_all()
        return [
            {
                "name": fighter.name,
                "photo_url": fighter.photo_url,
                "biography": fighter.biography,
                "birth_date": fighter.birth_date,
                "height": fighter.height,
                "weight": fighter.weight,
                "reach": fighter.reach,
                "nationality": fighter.nationality,
            }
            for fighter in fighters
        ]


def write_report(report: DataQualityReport, output_dir: Path, *, today: date | None = None) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"quality-report-{(today or date.today()).isoformat()}.json"
    payload = {"timestamp": (today or date.today()).isoformat(), **report.model_dump(mode="json")}
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def render_report(console: Console, report: DataQualityReport) -> None:
    console.print(f"[bold]Total fighters:[/bold] {report.total_fighters}")
    if not report.total_fighters:
        return

    table = Table(title="Field completeness")
    table.add_column("Field", style="cyan")
    table.add_column("Fighters", justify="right")
    table.add_column("Coverage", justify="right", style="green")
    for label, count in report.completeness.items():
        table.add_row(label, str(count), f"{report.percentage(label):.1f}%")
    console.print(table)

    console.print(
        f"[bold]Quality score:[/bold] {report.quality_score}/100 ({report.quality_level})"
    )

    if report.missing_data_fighters:
        console.print("\n[bold]Fighters missing key data:[/bold]")
        for entry in report.missing_data_fighters:
            console.print(f"  {entry.name}: {', '.join(entry.missing)}")

    if report.duplicates:
        console.print("\n[bold yellow]Duplicate names:[/bold yellow]")
        for duplicate in report.duplicates:
            console.print(f"  {duplicate.name} ({duplicate.count} entries)")

    console.print("\n[bold]Recommendations:[/bold]")
    for recommendation in report.recommendations:
        console.print(f"  - {recommendation}")


@click.command()
@click.option(
    "--source",
    type=click.Choice(["export", "db"]),
    default="export",
    help="Read fighters from the JSON export or from the record store",
)
@click.option(
    "--input",
    "input_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON export to analyse (export source only)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where to write the dated report file",
)
def main(source: str, input_path: Path | None, output_dir: Path | None) -> None:
    """Print a completeness report and save it as JSON."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = Console()
    output_dir = output_dir or Path(settings.output_dir)

    if source == "db":
        entries = asyncio.run(load_store_entries())
    else:
        input_path = input_path or Path(settings.output_dir) / DEFAULT_EXPORT_FILENAME
        if not input_path.exists():
            raise click.ClickException(f"Export not found: {input_path}")
        entries = load_export_entries(input_path)

    report = build_quality_report(entries)
    render_report(console, report)
    path = write_report(report, output_dir)
    console.print(f"\nReport saved to: [bold]{path}[/bold]")


if __name__ == "__main__":
    main()
