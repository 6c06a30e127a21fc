from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime

import pytest

pytest.importorskip("itemadapter")

from pydantic import ValidationError

from scraper.enrichment.merge import merge_fighter_records
from scraper.models.fighter import BasicFighterRecord, EnrichmentRecord, WeightClass
from scraper.pipelines.storage import JsonExportSink, StoragePipeline, load_export
from scraper.pipelines.validation import ValidationPipeline


def _basic_item(**overrides) -> dict:
    item = {
        "item_type": "fighter_basic",
        "name": "John Doe",
        "nickname": "",
        "weight_class": "MIDDLEWEIGHT",
        "height": 183,
        "weight": 84,
        "reach": 191,
        "wins": 10,
        "losses": 2,
        "draws": 0,
        "stance": "Orthodox",
        "source_url": "http://www.ufcstats.com/fighter-details/aaaa",
    }
    item.update(overrides)
    return item


def test_validation_pipeline_preserves_item_type():
    validated = ValidationPipeline().process_item(_basic_item(), spider=None)

    assert validated["item_type"] == "fighter_basic"
    assert validated["weight_class"] == "MIDDLEWEIGHT"
    assert validated["nickname"] is None
    assert "data_quality" not in validated


def test_validation_pipeline_handles_enriched_items():
    item = _basic_item(item_type="fighter_enriched", photo_url="https://img/x.jpg")

    validated = ValidationPipeline().process_item(item, spider=None)

    assert validated["item_type"] == "fighter_enriched"
    assert validated["photo_url"] == "https://img/x.jpg"
    assert validated["data_quality"]["primary_source_present"] is True


def test_validation_pipeline_rejects_invalid_items():
    with pytest.raises(ValidationError):
        ValidationPipeline().process_item(_basic_item(name=""), spider=None)
    with pytest.raises(ValidationError):
        ValidationPipeline().process_item(_basic_item(weight_class="CRUISERWEIGHT"), spider=None)


def test_storage_pipeline_rotates_and_dedupes(tmp_path):
    pipeline = StoragePipeline(tmp_path)
    pipeline.fighters_list_file.write_text('{"name": "stale"}\n', encoding="utf-8")

    pipeline.open_spider(spider=None)
    pipeline.process_item({"name": "John Doe"}, spider=None)
    pipeline.process_item({"name": "John Doe"}, spider=None)
    pipeline.process_item({"name": "Jane Roe"}, spider=None)

    lines = pipeline.fighters_list_file.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["name"] for line in lines] == ["John Doe", "Jane Roe"]
    assert (tmp_path / "fighters_list.jsonl.bak").read_text(encoding="utf-8") == '{"name": "stale"}\n'


@pytest.mark.asyncio
async def test_json_export_sink_writes_readable_array(tmp_path):
    now = datetime(2025, 1, 1, tzinfo=UTC)
    records = [
        merge_fighter_records(
            BasicFighterRecord(name="Jiří Procházka", weight_class=WeightClass.LIGHT_HEAVYWEIGHT),
            EnrichmentRecord(photo_url="https://img/jp.jpg"),
            now=now,
        ),
        merge_fighter_records(
            BasicFighterRecord(name="Alex Pereira", weight_class=WeightClass.LIGHT_HEAVYWEIGHT),
            now=now,
        ),
    ]
    path = tmp_path / "nested" / "export.json"

    await JsonExportSink(path).save(records)

    text = path.read_text(encoding="utf-8")
    assert "Jiří Procházka" in text
    assert text.startswith("[\n  {")
    loaded = load_export(path)
    assert [record.name for record in loaded] == ["Jiří Procházka", "Alex Pereira"]
    assert loaded[0].data_quality.secondary_source_present is True
    assert loaded[0].data_quality.last_updated == now


@pytest.mark.asyncio
async def test_json_export_sink_replaces_previous_export(tmp_path):
    path = tmp_path / "export.json"
    sink = JsonExportSink(path)
    record = merge_fighter_records(BasicFighterRecord(name="A", weight_class=WeightClass.FLYWEIGHT))

    await sink.save([record, record])
    await sink.save([])

    assert json.loads(path.read_text(encoding="utf-8")) == []


@pytest.mark.asyncio
async def test_json_export_sink_writes_off_the_event_loop(tmp_path, monkeypatch):
    path = tmp_path / "export.json"
    calls: list[tuple[object, str]] = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        calls.append((func.__self__, func.__name__))
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr("scraper.pipelines.storage.asyncio.to_thread", recording_to_thread)

    await JsonExportSink(path).save([])

    assert calls == [(path, "write_text")]
    assert json.loads(path.read_text(encoding="utf-8")) == []
