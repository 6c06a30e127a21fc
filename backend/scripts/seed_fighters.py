#!/usr/bin/env python
"""Seed enriched fighter records into the record store.

Each fighter replaces any stored fighter with the same name, so seeding the
same export twice leaves one row per fighter.

Usage:
    python -m backend.scripts.seed_fighters
    python -m backend.scripts.seed_fighters ./data/enhanced-fighters.json --clear
    python -m backend.scripts.seed_fighters ./data/processed/fighters_list.jsonl --limit 50
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from backend.db.connection import (
    create_tables,
    get_database_type,
    get_engine,
    get_session_factory,
)
from backend.db.repositories import FighterRepository
from scraper.enrichment.merge import merge_fighter_records
from scraper.models.fighter import BasicFighterRecord, EnrichedFighterRecord

DEFAULT_SEED_PATH = Path("./data/enhanced-fighters.json")


@dataclass
class SeedSummary:
    loaded: int = 0
    skipped: int = 0
    with_photos: int = 0
    with_biography: int = 0


def read_entries(path: Path) -> list[dict[str, Any]]:
    """Return raw fighter dicts from a JSON array export or a JSON Lines file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a JSON array of fighters")
    return payload


def to_record(entry: dict[str, Any]) -> EnrichedFighterRecord:
    """Validate one entry; list-crawl entries without quality metadata become basic-only records."""
    entry = {key: value for key, value in entry.items() if key != "item_type"}
    if "data_quality" in entry:
        return EnrichedFighterRecord.model_validate(entry)
    return merge_fighter_records(BasicFighterRecord.model_validate(entry))


async def seed_fighters(
    path: Path,
    *,
    clear: bool = False,
    limit: int | None = None,
    dry_run: bool = False,
    session_factory: sessionmaker[AsyncSession] | None = None,
) -> SeedSummary:
    """Load fighters from ``path`` into the record store."""
    summary = SeedSummary()
    records: list[EnrichedFighterRecord] = []
    for index, entry in enumerate(read_entries(path), 1):
        if limit and len(records) >= limit:
            break
        try:
            records.append(to_record(entry))
        except ValidationError as e:
            print(f"⚠️  Entry {index}: invalid fighter data, skipping ({e.error_count()} errors)")
            summary.skipped += 1

    if dry_run:
        summary.loaded = len(records)
        return summary

    if session_factory is None:
        await create_tables(get_engine())
        session_factory = get_session_factory()

    async with session_factory() as session:
        repository = FighterRepository(session)
        try:
            if clear:
                removed = await repository.delete_all()
                print(f"🗑️  Cleared {removed} existing fighters")
            for record in records:
                await repository.replace_by_name(record)
                summary.loaded += 1
                summary.with_photos += bool(record.photo_url)
                summary.with_biography += bool(record.biography)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return summary


def _percentage(part: int, whole: int) -> str:
    return f"{part / whole * 100:.1f}%" if whole else "0.0%"


async def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Seed enriched fighter data into the record store")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=DEFAULT_SEED_PATH,
        help=f"JSON export or JSONL list file (default: {DEFAULT_SEED_PATH})",
    )
    parser.add_argument("--clear", action="store_true", help="Delete all fighters before seeding")
    parser.add_argument("--limit", type=int, help="Maximum number of fighters to load")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate data without writing to the database",
    )
    args = parser.parse_args()

    if not args.path.exists():
        print(f"❌ File not found: {args.path}", file=sys.stderr)
        print("💡 Run `python -m scraper.runners.enrich small` first", file=sys.stderr)
        return 1

    print(f"🗄️  Database type detected: {get_database_type().upper()}")
    print(f"📂 Seed source: {args.path}")
    if args.dry_run:
        print("🔍 Dry run mode (no changes will be made)")
    print()

    summary = await seed_fighters(
        args.path, clear=args.clear, limit=args.limit, dry_run=args.dry_run
    )

    print()
    print("=" * 50)
    if args.dry_run:
        print(f"✓ Validated {summary.loaded} fighters")
    else:
        print(f"✅ Loaded {summary.loaded} fighters")
        print(f"📸 With photos: {summary.with_photos} ({_percentage(summary.with_photos, summary.loaded)})")
        print(
            f"📝 With biography: {summary.with_biography} "
            f"({_percentage(summary.with_biography, summary.loaded)})"
        )
    if summary.skipped > 0:
        print(f"⚠️  Skipped {summary.skipped} records")
    print("=" * 50)

    return 0 if summary.skipped == 0 else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
