"""Coverage for backend selection and the module-level query surface."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from gallery_catalog.catalog import accessor
from gallery_catalog.catalog.accessor import (
    CatalogAccessor,
    CatalogMode,
    QueryResult,
    run_query,
)
from gallery_catalog.catalog.config import CatalogConfig
from gallery_catalog.catalog.database import (
    CatalogQueryError,
    DatabaseCatalog,
    create_catalog_engine,
    create_schema,
    seed_from_fixture,
)
from gallery_catalog.catalog.fixture import FixtureCatalog, load_raw_artworks
from gallery_catalog.catalog.models import ArtworkRecord

ENTRIES = [
    {"id": "b1", "title": "Morning Birds", "category": "birds", "dimensions": "40cm X 40cm", "price": 450},
    {"id": "f1", "title": "Peonies", "category": "floral", "dimensions": "60cm X 60cm", "featured": True},
    {"id": "t1", "title": "Harbour Lights", "category": "towns", "dimensions": "nonsense", "price": 820},
]


@pytest.fixture()
def fixture_path(tmp_path: Path) -> Path:
    path = tmp_path / "artwork-data.json"
    path.write_text(json.dumps({"artworks": ENTRIES}), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_process_catalog():
    accessor.reset_catalog()
    yield
    accessor.reset_catalog()


def _database_accessor(fixture_path: Path) -> CatalogAccessor:
    engine = create_catalog_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as session, session.begin():
        seed_from_fixture(session, load_raw_artworks(fixture_path))
    return CatalogAccessor(
        CatalogConfig(database_url="sqlite://"),
        backend=DatabaseCatalog(engine=engine),
    )


def test_mode_follows_database_url_presence(fixture_path: Path) -> None:
    fixture_mode = CatalogAccessor(CatalogConfig(fixture_path=fixture_path))
    database_mode = CatalogAccessor(CatalogConfig(database_url="sqlite://", fixture_path=fixture_path))

    assert fixture_mode.mode is CatalogMode.FIXTURE
    assert isinstance(fixture_mode.backend, FixtureCatalog)
    assert database_mode.mode is CatalogMode.DATABASE
    assert isinstance(database_mode.backend, DatabaseCatalog)
    database_mode.backend.dispose()


def test_results_have_identical_shape_in_both_modes(fixture_path: Path) -> None:
    fixture_mode = CatalogAccessor(CatalogConfig(fixture_path=fixture_path))
    database_mode = _database_accessor(fixture_path)

    from_fixture = fixture_mode.get_available_artworks()
    from_database = database_mode.get_available_artworks()

    assert all(isinstance(record, ArtworkRecord) for record in from_fixture + from_database)
    assert {type(record) for record in from_fixture} == {type(record) for record in from_database}
    assert sorted(from_fixture, key=lambda record: record.id) == sorted(
        from_database, key=lambda record: record.id
    )
    fixture_keys = {frozenset(record.model_dump()) for record in from_fixture}
    database_keys = {frozenset(record.model_dump()) for record in from_database}
    assert fixture_keys == database_keys


@pytest.mark.parametrize("mode", ["fixture", "database"])
def test_missing_ids_and_unknown_categories_are_not_errors(mode: str, fixture_path: Path) -> None:
    if mode == "fixture":
        catalog = CatalogAccessor(CatalogConfig(fixture_path=fixture_path))
    else:
        catalog = _database_accessor(fixture_path)

    assert catalog.get_artwork_by_id("does-not-exist") is None
    assert catalog.get_artworks_by_category("sculpture") == []
    assert [record.id for record in catalog.get_artworks_by_category("floral")] == ["f1"]
    assert [record.id for record in catalog.get_featured_artworks()] == ["f1"]
    assert catalog.get_catalog_stats().total == 3


def test_get_catalog_is_created_once(monkeypatch, fixture_path: Path) -> None:
    created: list[CatalogAccessor] = []

    def fake_config() -> CatalogConfig:
        return CatalogConfig(fixture_path=fixture_path)

    original_init = CatalogAccessor.__init__

    def tracking_init(self, *args, **kwargs) -> None:
        original_init(self, *args, **kwargs)
        created.append(self)

    monkeypatch.setattr(accessor, "get_config", fake_config)
    monkeypatch.setattr(CatalogAccessor, "__init__", tracking_init)

    first = accessor.get_catalog()
    second = accessor.get_catalog()

    assert first is second
    assert len(created) == 1
    assert [record.id for record in accessor.get_available_artworks()] == ["b1", "f1", "t1"]
    assert accessor.get_artwork_by_id("t1").dimensions.width == 40
    assert accessor.get_artwork_by_slug("harbour-lights").id == "t1"
    assert accessor.list_slugs() == ["morning-birds", "peonies", "harbour-lights"]
    assert [record.id for record in accessor.search_artworks("birds")] == ["b1"]


def test_run_query_wraps_success_and_failure(caplog) -> None:
    def failing() -> list[ArtworkRecord]:
        raise CatalogQueryError("database is unreachable")

    success = run_query(lambda: [1, 2])
    with caplog.at_level(logging.ERROR):
        failure = run_query(failing)

    assert success == QueryResult(data=[1, 2])
    assert success.ok is True
    assert failure.ok is False
    assert failure.data is None
    assert failure.error == "database is unreachable"
    assert "database is unreachable" in caplog.text


def test_run_query_reports_database_outage() -> None:
    engine = create_catalog_engine("sqlite://")
    catalog = CatalogAccessor(CatalogConfig(database_url="sqlite://"), backend=DatabaseCatalog(engine=engine))

    result = run_query(catalog.get_available_artworks)

    assert result.ok is False
    assert "no such table" in result.error
    engine.dispose()
