"""Serve the catalog from the static JSON fixture when no database is configured."""

from __future__ import annotations

import json
import logging
import threading
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from .models import ArtworkRecord, Category, RawArtwork, ValidationError
from .normalize import normalize_artworks, resolve_category_filter


class FixtureLoadError(RuntimeError):
    """Raised when the fixture file is missing or is not valid JSON."""


@dataclass(frozen=True)
class CatalogStats:
    """Summary counts for a record set."""

    total: int
    by_category: dict[str, int]
    featured: int

    @classmethod
    def from_records(cls, records: Sequence[ArtworkRecord]) -> "CatalogStats":
        counts = Counter(record.category for record in records)
        return cls(
            total=len(records),
            by_category={category.value: counts.get(category, 0) for category in Category},
            featured=sum(1 for record in records if record.featured),
        )


def _extract_entries(payload: Any) -> list[Any]:
    if isinstance(payload, dict):
        entries = payload.get("artworks", [])
    else:
        entries = payload
    if not isinstance(entries, list):
        raise FixtureLoadError("fixture must contain a list of artworks")
    return entries


def load_raw_artworks(path: Path, *, logger: logging.Logger | None = None) -> list[RawArtwork]:
    """Read ``path`` and return its entries as :class:`RawArtwork` models.

    Both ``{"artworks": [...]}`` and a bare list are accepted. Entries lacking
    an ``id`` or ``title`` cannot become records and are skipped with a
    warning; every other defect is left for the normalizer to default.
    """

    log = logger or logging.getLogger(__name__)
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as error:
        raise FixtureLoadError(f"could not read fixture {path}: {error}") from error

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise FixtureLoadError(f"fixture {path} is not valid JSON: {error}") from error

    raw_artworks: list[RawArtwork] = []
    for position, entry in enumerate(_extract_entries(payload)):
        try:
            raw_artworks.append(RawArtwork.model_validate(entry))
        except ValidationError as error:
            log.warning("Skipping fixture entry %s: %s", position, error.errors()[0]["msg"])
    return raw_artworks


class FixtureCatalog:
    """Answer catalog queries from the normalized fixture held in memory.

    The record set is built on first access and shared by all readers. It is a
    tuple of frozen models and is never mutated afterwards, so only the build
    itself is guarded by a lock. Results keep fixture order since fixture
    entries carry no creation timestamp.
    """

    def __init__(
        self,
        fixture_path: Path,
        *,
        loader: Callable[[Path], Sequence[RawArtwork]] = load_raw_artworks,
        logger: logging.Logger | None = None,
    ) -> None:
        self.fixture_path = Path(fixture_path)
        self.loader = loader
        self.logger = logger or logging.getLogger(__name__)
        self._records: tuple[ArtworkRecord, ...] | None = None
        self._lock = threading.Lock()

    @property
    def records(self) -> tuple[ArtworkRecord, ...]:
        records = self._records
        if records is not None:
            return records
        with self._lock:
            if self._records is None:
                self._records = normalize_artworks(self.loader(self.fixture_path))
                stats = CatalogStats.from_records(self._records)
                self.logger.info(
                    "Loaded %s artwork(s) from %s (by category: %s, featured: %s)",
                    stats.total,
                    self.fixture_path,
                    stats.by_category,
                    stats.featured,
                )
            return self._records

    def get_available_artworks(self) -> list[ArtworkRecord]:
        return [record for record in self.records if record.is_available]

    def get_artworks_by_category(self, category: str) -> list[ArtworkRecord]:
        resolved = resolve_category_filter(category)
        if resolved is None:
            return []
        return [
            record
            for record in self.records
            if record.category is resolved and record.is_available
        ]

    def get_artwork_by_id(self, artwork_id: str) -> ArtworkRecord | None:
        return next((record for record in self.records if record.id == artwork_id), None)

    def get_artwork_by_slug(self, slug: str) -> ArtworkRecord | None:
        return next((record for record in self.records if record.slug == slug), None)

    def list_slugs(self) -> list[str]:
        return [record.slug for record in self.records]

    def get_featured_artworks(self) -> list[ArtworkRecord]:
        return [record for record in self.records if record.featured and record.is_available]

    def search_artworks(self, term: str) -> list[ArtworkRecord]:
        needle = term.strip().lower()
        if not needle:
            return []
        return [
            record
            for record in self.records
            if record.is_available and any(needle in tag for tag in record.search_tags)
        ]

    def get_catalog_stats(self) -> CatalogStats:
        return CatalogStats.from_records(self.records)


__all__ = ["CatalogStats", "FixtureCatalog", "FixtureLoadError", "load_raw_artworks"]
