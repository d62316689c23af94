"""Coverage for the fixture-backed catalog."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

import pytest

from gallery_catalog.catalog.config import DEFAULT_FIXTURE_PATH
from gallery_catalog.catalog.fixture import (
    FixtureCatalog,
    FixtureLoadError,
    load_raw_artworks,
)
from gallery_catalog.catalog.models import Category

FIXTURE_ENTRIES = [
    {
        "id": "b1",
        "title": "Morning Birds",
        "category": "birds",
        "dimensions": "40cm X 40cm",
        "medium": "Acrylic on Canvas",
        "price": 450,
        "image": "images/artwork/birds/Image1.webp",
        "featured": True,
    },
    {
        "id": "f1",
        "title": "Peonies in Bloom",
        "category": "floral",
        "dimensions": "60cm X 60cm",
        "medium": "Oil on Canvas",
        "price": 950,
        "image": "images/artwork/floral/Image1.webp",
        "featured": False,
    },
    {
        "id": "t1",
        "title": "Old Town Rooftops",
        "category": "towns",
        "dimensions": "garbled",
        "price": None,
        "image": "images/artwork/towns/Image1.webp",
        "featured": True,
    },
    {
        "id": "f2",
        "title": "Wild Poppies",
        "category": "flowers",
        "dimensions": "20cm X 20cm",
        "price": 180,
        "image": "images/artwork/floral/Image2.webp",
    },
]


def _write_fixture(tmp_path: Path, entries: object = None) -> Path:
    path = tmp_path / "artwork-data.json"
    payload = {"artworks": FIXTURE_ENTRIES} if entries is None else entries
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_raw_artworks_accepts_wrapped_and_bare_lists(tmp_path: Path) -> None:
    wrapped = load_raw_artworks(_write_fixture(tmp_path))
    bare = load_raw_artworks(_write_fixture(tmp_path, FIXTURE_ENTRIES))

    assert [raw.id for raw in wrapped] == ["b1", "f1", "t1", "f2"]
    assert wrapped == bare


def test_load_raw_artworks_skips_entries_without_title(tmp_path: Path, caplog) -> None:
    path = _write_fixture(tmp_path, {"artworks": [{"id": "x"}, FIXTURE_ENTRIES[0]]})

    with caplog.at_level(logging.WARNING):
        raws = load_raw_artworks(path)

    assert [raw.id for raw in raws] == ["b1"]
    assert "Skipping fixture entry 0" in caplog.text


def test_load_raw_artworks_reports_missing_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(FixtureLoadError):
        load_raw_artworks(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(FixtureLoadError):
        load_raw_artworks(broken)

    with pytest.raises(FixtureLoadError):
        load_raw_artworks(_write_fixture(tmp_path, {"artworks": "nope"}))


def test_fixture_catalog_preserves_source_order(tmp_path: Path) -> None:
    catalog = FixtureCatalog(_write_fixture(tmp_path))

    available = catalog.get_available_artworks()

    assert [record.id for record in available] == ["b1", "f1", "t1", "f2"]
    assert [record.gallery_order for record in available] == [1, 2, 3, 4]


def test_fixture_catalog_filters_by_category_with_aliases(tmp_path: Path) -> None:
    catalog = FixtureCatalog(_write_fixture(tmp_path))

    flowers = catalog.get_artworks_by_category("flowers")
    floral = catalog.get_artworks_by_category("floral")

    assert [record.id for record in flowers] == ["f1", "f2"]
    assert floral == flowers
    assert all(record.category is Category.FLOWERS for record in flowers)
    assert catalog.get_artworks_by_category("portraits") == []


def test_fixture_catalog_lookups_return_none_when_missing(tmp_path: Path) -> None:
    catalog = FixtureCatalog(_write_fixture(tmp_path))

    assert catalog.get_artwork_by_id("t1").title == "Old Town Rooftops"
    assert catalog.get_artwork_by_id("does-not-exist") is None
    assert catalog.get_artwork_by_slug("wild-poppies").id == "f2"
    assert catalog.get_artwork_by_slug("missing") is None


def test_fixture_catalog_featured_search_and_stats(tmp_path: Path) -> None:
    catalog = FixtureCatalog(_write_fixture(tmp_path))

    assert [record.id for record in catalog.get_featured_artworks()] == ["b1", "t1"]
    assert [record.id for record in catalog.search_artworks("  OIL ")] == ["f1"]
    assert [record.id for record in catalog.search_artworks("serenity")] == ["t1"]
    assert catalog.search_artworks("   ") == []
    assert catalog.list_slugs() == [
        "morning-birds",
        "peonies-in-bloom",
        "old-town-rooftops",
        "wild-poppies",
    ]

    stats = catalog.get_catalog_stats()
    assert stats.total == 4
    assert stats.by_category == {"birds": 1, "flowers": 2, "towns": 1}
    assert stats.featured == 2


def test_fixture_catalog_builds_records_once(tmp_path: Path) -> None:
    fixture_path = _write_fixture(tmp_path)
    calls: list[Path] = []

    def counting_loader(path: Path):
        calls.append(path)
        return load_raw_artworks(path)

    catalog = FixtureCatalog(fixture_path, loader=counting_loader)
    threads = [threading.Thread(target=catalog.get_available_artworks) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    first = catalog.records
    assert catalog.records is first
    assert calls == [fixture_path]


def test_bundled_fixture_normalizes_cleanly() -> None:
    catalog = FixtureCatalog(DEFAULT_FIXTURE_PATH)

    records = catalog.records

    assert records
    assert [record.gallery_order for record in records] == list(range(1, len(records) + 1))
    assert {record.category for record in records} <= set(Category)
    assert len({record.slug for record in records}) == len(records)
    assert all(record.dimensions.width > 0 and record.dimensions.height > 0 for record in records)
