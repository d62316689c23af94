"""Select the catalog backend once per process and expose the query surface.

Callers use the functions in this module only. Which backend answers them is
decided when the accessor is created, from ``DATABASE_URL``:

- set: :class:`DatabaseCatalog`, ``get_available_artworks`` newest first
- unset: :class:`FixtureCatalog`, ``get_available_artworks`` in fixture order

Both return :class:`ArtworkRecord` instances, so callers never branch on the
mode. The differing order of available artworks is part of each mode's
contract; fixture entries have no creation time to sort by.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, Protocol, TypeVar

from .config import CatalogConfig, get_config
from .database import DatabaseCatalog
from .fixture import CatalogStats, FixtureCatalog
from .models import ArtworkRecord

T = TypeVar("T")


class CatalogMode(str, Enum):
    DATABASE = "database"
    FIXTURE = "fixture"


class CatalogBackend(Protocol):
    def get_available_artworks(self) -> list[ArtworkRecord]: ...

    def get_artworks_by_category(self, category: str) -> list[ArtworkRecord]: ...

    def get_artwork_by_id(self, artwork_id: str) -> Optional[ArtworkRecord]: ...

    def get_artwork_by_slug(self, slug: str) -> Optional[ArtworkRecord]: ...

    def list_slugs(self) -> list[str]: ...

    def get_featured_artworks(self) -> list[ArtworkRecord]: ...

    def search_artworks(self, term: str) -> list[ArtworkRecord]: ...

    def get_catalog_stats(self) -> CatalogStats: ...


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a catalog query: ``data`` on success, ``error`` otherwise."""

    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_query(operation: Callable[[], T], *, logger: logging.Logger | None = None) -> QueryResult[T]:
    """Run ``operation`` and report failures as a :class:`QueryResult`.

    Nothing raised by ``operation`` escapes; the presentation layer decides
    what to show when ``result.ok`` is false.
    """

    log = logger or logging.getLogger(__name__)
    try:
        return QueryResult(data=operation())
    except Exception as error:
        log.error("Catalog query error: %s", error)
        message = str(error) or type(error).__name__
        return QueryResult(error=message)


class CatalogAccessor:
    """Route catalog queries to the backend chosen at construction time."""

    def __init__(
        self,
        config: CatalogConfig | None = None,
        *,
        backend: CatalogBackend | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        if backend is not None:
            self.backend = backend
            self.mode = (
                CatalogMode.DATABASE if isinstance(backend, DatabaseCatalog) else CatalogMode.FIXTURE
            )
        elif self.config.uses_database:
            self.backend = DatabaseCatalog(
                self.config.database_url,
                query_timeout_seconds=self.config.query_timeout_seconds,
                echo=self.config.database_echo,
            )
            self.mode = CatalogMode.DATABASE
        else:
            self.backend = FixtureCatalog(self.config.fixture_path)
            self.mode = CatalogMode.FIXTURE
        self.logger.info("Catalog running in %s mode", self.mode.value)

    def get_available_artworks(self) -> list[ArtworkRecord]:
        return self.backend.get_available_artworks()

    def get_artworks_by_category(self, category: str) -> list[ArtworkRecord]:
        return self.backend.get_artworks_by_category(category)

    def get_artwork_by_id(self, artwork_id: str) -> Optional[ArtworkRecord]:
        return self.backend.get_artwork_by_id(artwork_id)

    def get_artwork_by_slug(self, slug: str) -> Optional[ArtworkRecord]:
        return self.backend.get_artwork_by_slug(slug)

    def list_slugs(self) -> list[str]:
        return self.backend.list_slugs()

    def get_featured_artworks(self) -> list[ArtworkRecord]:
        return self.backend.get_featured_artworks()

    def search_artworks(self, term: str) -> list[ArtworkRecord]:
        return self.backend.search_artworks(term)

    def get_catalog_stats(self) -> CatalogStats:
        return self.backend.get_catalog_stats()


_catalog: CatalogAccessor | None = None
_catalog_lock = threading.Lock()


def get_catalog() -> CatalogAccessor:
    """Return the process-wide accessor, creating it on first use."""

    global _catalog
    catalog = _catalog
    if catalog is not None:
        return catalog
    with _catalog_lock:
        if _catalog is None:
            _catalog = CatalogAccessor()
        return _catalog


def reset_catalog(catalog: CatalogAccessor | None = None) -> None:
    """Replace the process-wide accessor; ``None`` forces re-detection on next use."""

    global _catalog
    with _catalog_lock:
        _catalog = catalog


def get_available_artworks() -> list[ArtworkRecord]:
    return get_catalog().get_available_artworks()


def get_artworks_by_category(category: str) -> list[ArtworkRecord]:
    return get_catalog().get_artworks_by_category(category)


def get_artwork_by_id(artwork_id: str) -> Optional[ArtworkRecord]:
    return get_catalog().get_artwork_by_id(artwork_id)


def get_artwork_by_slug(slug: str) -> Optional[ArtworkRecord]:
    return get_catalog().get_artwork_by_slug(slug)


def list_slugs() -> list[str]:
    return get_catalog().list_slugs()


def get_featured_artworks() -> list[ArtworkRecord]:
    return get_catalog().get_featured_artworks()


def search_artworks(term: str) -> list[ArtworkRecord]:
    return get_catalog().search_artworks(term)


def get_catalog_stats() -> CatalogStats:
    return get_catalog().get_catalog_stats()


__all__ = [
    "CatalogAccessor",
    "CatalogMode",
    "QueryResult",
    "get_artwork_by_id",
    "get_artwork_by_slug",
    "get_artworks_by_category",
    "get_available_artworks",
    "get_catalog",
    "get_catalog_stats",
    "get_featured_artworks",
    "list_slugs",
    "reset_catalog",
    "run_query",
    "search_artworks",
]
