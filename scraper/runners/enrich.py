"""
Build the enriched fighter collection: list crawl, biography enrichment, export.

Usage:
    python -m scraper.runners.enrich small
    python -m scraper.runners.enrich large --save-to-db
    python -m scraper.runners.enrich --limit 20 --delay 0.5 --output data/sample.json
"""

from __future__ import annotations

import asyncio
import logging
import math
import signal
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import click
from rich.console import Console
from rich.table import Table

from backend.services.fighter_sink import FighterStoreSink
from backend.settings import get_settings
from scraper.config import settings
from scraper.enrichment.enricher import FighterEnricher
from scraper.enrichment.merge import merge_fighter_records
from scraper.fetcher import DocumentFetcher
from scraper.models.fighter import BasicFighterRecord, EnrichedFighterRecord, EnrichmentRecord
from scraper.pipelines.storage import JsonExportSink
from scraper.utils.parser import parse_fighter_list

logger = logging.getLogger(__name__)

MODES: dict[str, int] = {"small": 50, "medium": 200, "large": 500, "full": 0}
CONFIRMATION_THRESHOLD = 100


class RecordSink(Protocol):
    async def save(self, records: Sequence[EnrichedFighterRecord]) -> None: ...


@dataclass
class BatchResult:
    records: list[EnrichedFighterRecord] = field(default_factory=list)
    interrupted: bool = False

    @property
    def enriched_count(self) -> int:
        return sum(1 for record in self.records if record.data_quality.secondary_source_present)

    @property
    def basic_only_count(self) -> int:
        return len(self.records) - self.enriched_count

    def summary_lines(self) -> list[str]:
        lines = [
            f"Processed: {len(self.records)} fighters",
            f"Enriched: {self.enriched_count}",
            f"Basic only: {self.basic_only_count}",
        ]
        if self.interrupted:
            lines.append("Stopped early; partial results were saved")
        return lines


class EnrichmentRunner:
    """Run one enrichment batch from the primary listing to the sinks.

    Fighters are handled one at a time with a pause between them. Whatever has
    been accumulated is handed to every sink exactly once when the batch ends,
    whether it finished, was asked to stop, or was cancelled. A failed listing
    fetch is the only fatal error and nothing is saved in that case.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        enricher: FighterEnricher,
        sinks: Sequence[RecordSink] = (),
        *,
        delay_seconds: float | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        list_url: str | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._enricher = enricher
        self._sinks = list(sinks)
        self._delay = settings.delay_seconds if delay_seconds is None else delay_seconds
        self._sleep = sleep or self._wait_for_stop
        self._list_url = list_url or settings.fighters_url
        self._stop = asyncio.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def request_stop(self) -> None:
        """Finish the current fighter, then save and return."""
        if not self._stop.is_set():
            logger.info("Stop requested; finishing current fighter")
        self._stop.set()

    async def run(self, limit: int | None = None) -> BatchResult:
        fighters = await self._fetch_basic_list(limit)
        result = BatchResult()
        try:
            for index, basic in enumerate(fighters):
                if index and self._delay > 0:
                    await self._sleep(self._delay)
                if self._stop.is_set():
                    result.interrupted = True
                    break
                logger.info("%d/%d: %s", index + 1, len(fighters), basic.name)
                enrichment = await self._enrich(basic)
                result.records.append(merge_fighter_records(basic, enrichment))
        except asyncio.CancelledError:
            result.interrupted = True
            raise
        finally:
            await self._persist(result.records)
        return result

    async def _fetch_basic_list(self, limit: int | None) -> list[BasicFighterRecord]:
        try:
            response = await self._fetcher.fetch(self._list_url)
        except Exception:
            logger.error("Could not fetch the fighter list from %s", self._list_url)
            raise
        fighters = parse_fighter_list(response, base_url=settings.base_url)
        if limit:
            fighters = fighters[:limit]
        logger.info("Found %d fighters to process", len(fighters))
        return fighters

    async def _enrich(self, basic: BasicFighterRecord) -> EnrichmentRecord | None:
        try:
            return await self._enricher.enrich(basic.name, basic.source_url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Enrichment failed for %s, keeping basic data: %s", basic.name, exc)
            return None

    async def _persist(self, records: list[EnrichedFighterRecord]) -> None:
        failures: list[Exception] = []
        for sink in self._sinks:
            try:
                await sink.save(records)
            except Exception as exc:
                logger.exception("Saving %d fighters with %s failed", len(records), type(sink).__name__)
                failures.append(exc)
        if failures:
            raise failures[0]

    async def _wait_for_stop(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except TimeoutError:
            pass


def estimated_minutes(limit: int, delay_seconds: float) -> int:
    return math.ceil(limit * delay_seconds / 60)


def render_summary(console: Console, result: BatchResult, outputs: Sequence[str]) -> None:
    table = Table(title="Enrichment summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Fighters processed", str(len(result.records)))
    table.add_row("Enriched", str(result.enriched_count))
    table.add_row("Basic only", str(result.basic_only_count))
    console.print(table)
    if result.interrupted:
        console.print("[yellow]Stopped early; partial results were saved.[/yellow]")
    for output in outputs:
        console.print(f"Saved to: [bold]{output}[/bold]")


async def run_enrichment(
    limit: int,
    *,
    output: Path | None,
    save_to_db: bool,
    delay_seconds: float,
    console: Console,
) -> BatchResult:
    json_sink = JsonExportSink(output)
    sinks: list[RecordSink] = [json_sink]
    outputs = [str(json_sink.path)]
    if save_to_db:
        sinks.append(FighterStoreSink())
        outputs.append("record store")

    async with DocumentFetcher() as fetcher:
        runner = EnrichmentRunner(
            fetcher, FighterEnricher(fetcher), sinks, delay_seconds=delay_seconds
        )
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, runner.request_stop)
        try:
            result = await runner.run(limit)
        finally:
            loop.remove_signal_handler(signal.SIGINT)

    render_summary(console, result, outputs)
    return result


@click.command()
@click.argument("mode", type=click.Choice(list(MODES)), default="medium")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Fighters to process, overriding MODE (0 = all)",
)
@click.option("--save-to-db", is_flag=True, help="Also replace the fighters in the record store")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON export path (default: <output dir>/enhanced-fighters.json)",
)
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between fighters",
)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt for large runs")
def main(
    mode: str,
    limit: int | None,
    save_to_db: bool,
    output: Path | None,
    delay: float | None,
    yes: bool,
) -> None:
    """
    Scrape the fighter list, enrich each fighter and save the collection.

    Modes: small (50), medium (200), large (500), full (all fighters).
    Ctrl+C stops after the current fighter and still saves partial results.
    """
    logging.basicConfig(
        level=get_settings().log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = Console()
    target = MODES[mode] if limit is None else limit
    delay_seconds = settings.delay_seconds if delay is None else delay

    console.print(f"[bold]Mode:[/bold] {mode}")
    console.print(f"[bold]Target:[/bold] {'all fighters' if target == 0 else f'{target} fighters'}")
    if target == 0 or target > CONFIRMATION_THRESHOLD:
        if target:
            console.print(f"Estimated time: {estimated_minutes(target, delay_seconds)} minutes")
        console.print("You can stop anytime with Ctrl+C and still keep partial data.")
        if not yes:
            click.confirm("Continue?", default=True, abort=True)

    asyncio.run(
        run_enrichment(
            target,
            output=output,
            save_to_db=save_to_db,
            delay_seconds=delay_seconds,
            console=console,
        )
    )


if __name__ == "__main__":
    main()
