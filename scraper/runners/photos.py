"""
Backfill missing fighter photos in the record store.

Usage:
    python -m scraper.runners.photos
    python -m scraper.runners.photos --limit 20 --delay 2
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from backend.db.connection import create_tables, get_engine, get_session_factory
from backend.db.repositories import FighterRepository
from scraper.config import settings
from scraper.enrichment.photos import PhotoFinder
from scraper.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)


@dataclass
class PhotoBackfillResult:
    checked: int = 0
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


async def backfill_missing_photos(
    finder: PhotoFinder,
    session_factory: sessionmaker[AsyncSession],
    *,
    limit: int | None = None,
    delay_seconds: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    progress: Progress | None = None,
) -> PhotoBackfillResult:
    """Look up a photo for every stored fighter without one and save hits."""
    result = PhotoBackfillResult()
    async with session_factory() as session:
        repository = FighterRepository(session)
        fighters = list(await repository.list_missing_photos(limit))
        task = progress.add_task("Finding photos...", total=len(fighters)) if progress else None

        for index, fighter in enumerate(fighters):
            if index and delay_seconds > 0:
                await sleep(delay_seconds)
            result.checked += 1
            photo_url = await finder.find_fighter_photo(fighter.name, fighter.source_url)
            if photo_url:
                await repository.update(fighter.id, {"photo_url": photo_url})
                await session.commit()
                result.found.append(fighter.name)
            else:
                result.missing.append(fighter.name)
            if progress is not None and task is not None:
                progress.advance(task)

    return result


async def run_backfill(limit: int | None, delay_seconds: float, console: Console) -> PhotoBackfillResult:
    await create_tables(get_engine())
    async with DocumentFetcher() as fetcher:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            result = await backfill_missing_photos(
                PhotoFinder(fetcher),
                get_session_factory(),
                limit=limit,
                delay_seconds=delay_seconds,
                progress=progress,
            )

    console.print("\n[bold]Final Results:[/bold]")
    console.print(f"  [green]✓[/green] Found: {len(result.found)}/{result.checked}")
    console.print(f"  [red]✗[/red] Still missing: {len(result.missing)}/{result.checked}")
    return result


@click.command()
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Max fighters to check")
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between fighters",
)
def main(limit: int | None, delay: float | None) -> None:
    """Search for photos of stored fighters that have none."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = Console()
    delay_seconds = settings.delay_seconds if delay is None else delay
    asyncio.run(run_backfill(limit, delay_seconds, console))


if __name__ == "__main__":
    main()
