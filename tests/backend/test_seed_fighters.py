from __future__ import annotations

import json

import pytest

pytest.importorskip("aiosqlite")

from backend.db.repositories import FighterRepository  # noqa: E402
from backend.scripts.seed_fighters import read_entries, seed_fighters, to_record  # noqa: E402

ENRICHED_ENTRY = {
    "name": "Jon Jones",
    "weight_class": "LIGHT_HEAVYWEIGHT",
    "height": 193,
    "weight": 93,
    "reach": 213,
    "wins": 26,
    "losses": 1,
    "draws": 0,
    "photo_url": "https://img/x.jpg",
    "biography": "Jon Jones is an American mixed martial artist.",
    "data_quality": {
        "primary_source_present": True,
        "secondary_source_present": True,
        "last_updated": "2025-01-01T00:00:00Z",
    },
}
LIST_ENTRY = {"item_type": "fighter_basic", "name": "Kamaru Usman", "weight_class": "WELTERWEIGHT"}


def test_read_entries_supports_json_array_and_json_lines(tmp_path):
    array_path = tmp_path / "export.json"
    array_path.write_text(json.dumps([ENRICHED_ENTRY]), encoding="utf-8")
    lines_path = tmp_path / "fighters_list.jsonl"
    lines_path.write_text(json.dumps(LIST_ENTRY) + "\n\n" + json.dumps(LIST_ENTRY) + "\n", encoding="utf-8")
    object_path = tmp_path / "object.json"
    object_path.write_text("{}", encoding="utf-8")

    assert read_entries(array_path) == [ENRICHED_ENTRY]
    assert len(read_entries(lines_path)) == 2
    with pytest.raises(ValueError):
        read_entries(object_path)


def test_to_record_keeps_quality_metadata_or_builds_basic_record():
    enriched = to_record(ENRICHED_ENTRY)
    basic = to_record(LIST_ENTRY)

    assert enriched.data_quality.secondary_source_present is True
    assert enriched.photo_url == "https://img/x.jpg"
    assert basic.name == "Kamaru Usman"
    assert basic.data_quality.secondary_source_present is False


@pytest.mark.asyncio
async def test_seed_fighters_is_idempotent_and_skips_invalid_entries(tmp_path, session_factory):
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps([ENRICHED_ENTRY, LIST_ENTRY, {"name": "", "weight_class": "FLYWEIGHT"}]),
        encoding="utf-8",
    )

    first = await seed_fighters(path, session_factory=session_factory)
    second = await seed_fighters(path, session_factory=session_factory)

    assert (first.loaded, first.skipped, first.with_photos, first.with_biography) == (2, 1, 1, 1)
    assert second.loaded == 2
    async with session_factory() as session:
        fighters = await FighterRepository(session).export_all()
    assert sorted(fighter.name for fighter in fighters) == ["Jon Jones", "Kamaru Usman"]


@pytest.mark.asyncio
async def test_seed_fighters_dry_run_clear_and_limit(tmp_path, session_factory):
    path = tmp_path / "export.json"
    path.write_text(json.dumps([ENRICHED_ENTRY, LIST_ENTRY]), encoding="utf-8")

    dry = await seed_fighters(path, dry_run=True, session_factory=session_factory)
    assert dry.loaded == 2
    async with session_factory() as session:
        assert await FighterRepository(session).count() == 0

    await seed_fighters(path, session_factory=session_factory)
    cleared = await seed_fighters(path, clear=True, limit=1, session_factory=session_factory)

    assert cleared.loaded == 1
    async with session_factory() as session:
        fighters = await FighterRepository(session).export_all()
    assert [fighter.name for fighter in fighters] == ["Jon Jones"]
