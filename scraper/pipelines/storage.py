from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from scraper.config import settings
from scraper.models.fighter import EnrichedFighterRecord

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILENAME = "enhanced-fighters.json"


class StoragePipeline:
    def __init__(self, output_dir: Path | str | None = None) -> None:
        self.output_dir = Path(output_dir or Path(settings.output_dir) / "processed")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.fighters_list_file = self.output_dir / "fighters_list.jsonl"
        self._seen_fighters: set[str] = set()

    def open_spider(self, spider):  # noqa: D401, ANN001
        """Called when the spider opens; rotate list file for fresh crawls."""
        if self.fighters_list_file.exists():
            backup_path = self.fighters_list_file.with_suffix(".jsonl.bak")
            self.fighters_list_file.replace(backup_path)
        self._seen_fighters.clear()

    def process_item(self, item: dict[str, Any], spider):  # noqa: D401, ANN001
        """Append each fighter once to the JSON Lines list file."""
        name = item.get("name")
        if not name or name in self._seen_fighters:
            return item
        self._seen_fighters.add(name)
        with self.fighters_list_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(item) + "\n")
        return item


class JsonExportSink:
    """Write a finished batch as a single JSON array, replacing any previous export."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path or Path(settings.output_dir) / DEFAULT_EXPORT_FILENAME)

    async def save(self, records: Sequence[EnrichedFighterRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [record.model_dump(mode="json") for record in records]
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        await asyncio.to_thread(self.path.write_text, text, encoding="utf-8")
        logger.info("Saved %d fighters to %s", len(payload), self.path)


def load_export(path: Path | str) -> list[EnrichedFighterRecord]:
    """Read a JSON export written by :class:`JsonExportSink`."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return [EnrichedFighterRecord.model_validate(entry) for entry in raw]
