"""Persist artworks with SQLAlchemy and answer catalog queries from the database."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, TypeVar

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
    func,
    select,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .fixture import CatalogStats
from .models import (
    ArtworkRecord,
    AvailabilityStatus,
    Category,
    Dimensions,
    Pricing,
    PrimaryImage,
    RawArtwork,
    ValidationError,
)
from .normalize import normalize_artworks, normalize_category, resolve_category_filter

Base = declarative_base()

T = TypeVar("T")


class CatalogQueryError(RuntimeError):
    """Raised when the database cannot answer a catalog query."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArtworkRow(Base):
    __tablename__ = "artworks"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    category = Column(String(32), nullable=False, index=True)
    subcategory = Column(String(255))
    medium = Column(String(255), nullable=False)

    # JSON-valued columns mirror the nested record shapes (camelCase keys)
    dimensions = Column(JSON, nullable=False)
    pricing = Column(JSON, nullable=False)
    primary_image = Column(JSON, nullable=False)
    emotional_tags = Column(JSON, nullable=False, default=list)
    search_tags = Column(JSON, nullable=False, default=list)

    story_behind_brushstroke = Column(Text, nullable=False)
    inspiration_source = Column(String(255))
    seo_description = Column(Text)
    creation_year = Column(Integer)
    availability_status = Column(
        String(16), nullable=False, default=AvailabilityStatus.AVAILABLE.value, index=True
    )
    is_original = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    gallery_order = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


def row_to_record(row: ArtworkRow) -> ArtworkRecord:
    """Map a persisted row onto the canonical :class:`ArtworkRecord`.

    Stored categories go through the same normalization as fixture entries,
    so legacy labels such as ``"floral"`` land in the closed enumeration.
    """

    return ArtworkRecord(
        id=row.id,
        title=row.title,
        slug=row.slug,
        category=normalize_category(row.category),
        subcategory=row.subcategory,
        medium=row.medium,
        dimensions=Dimensions.model_validate(row.dimensions),
        pricing=Pricing.model_validate(row.pricing or {}),
        emotional_tags=tuple(row.emotional_tags or ()),
        story_behind_brushstroke=row.story_behind_brushstroke,
        primary_image=PrimaryImage.model_validate(row.primary_image),
        availability_status=row.availability_status,
        featured=bool(row.featured),
        search_tags=tuple(row.search_tags or ()),
        gallery_order=row.gallery_order,
        inspiration_source=row.inspiration_source,
        seo_description=row.seo_description,
        creation_year=row.creation_year,
        is_original=bool(row.is_original),
    )


def record_to_row(record: ArtworkRecord) -> ArtworkRow:
    return ArtworkRow(
        id=record.id,
        title=record.title,
        slug=record.slug,
        category=record.category.value,
        subcategory=record.subcategory,
        medium=record.medium,
        dimensions=record.dimensions.model_dump(mode="json", by_alias=True),
        pricing=record.pricing.model_dump(mode="json", by_alias=True),
        primary_image=record.primary_image.model_dump(mode="json", by_alias=True),
        emotional_tags=list(record.emotional_tags),
        search_tags=list(record.search_tags),
        story_behind_brushstroke=record.story_behind_brushstroke,
        inspiration_source=record.inspiration_source,
        seo_description=record.seo_description,
        creation_year=record.creation_year,
        availability_status=record.availability_status.value,
        is_original=record.is_original,
        featured=record.featured,
        gallery_order=record.gallery_order,
    )


def create_catalog_engine(
    database_url: str,
    *,
    query_timeout_seconds: float = 10.0,
    echo: bool = False,
) -> Engine:
    """Create the process-wide engine for ``database_url``.

    The timeout bounds how long a query waits, both for a pooled connection
    and, on PostgreSQL, for the statement itself.
    """

    url = make_url(database_url)
    backend = url.get_backend_name()
    options: dict = {"echo": echo, "pool_pre_ping": True}

    if backend == "sqlite":
        options["connect_args"] = {"timeout": query_timeout_seconds}
    else:
        options["pool_timeout"] = query_timeout_seconds
        if backend == "postgresql":
            timeout_ms = int(query_timeout_seconds * 1000)
            options["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}

    return create_engine(url, **options)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def seed_from_fixture(
    session: Session,
    raw_artworks: Iterable[RawArtwork],
    *,
    logger: logging.Logger | None = None,
) -> int:
    """Upsert the normalized fixture into the ``artworks`` table.

    Rows are matched on ``id`` so reseeding updates existing artworks in place.
    Returns the number of artworks written. The caller owns the transaction.
    """

    log = logger or logging.getLogger(__name__)
    written = 0
    for record in normalize_artworks(raw_artworks):
        session.merge(record_to_row(record))
        written += 1
        log.debug("Seeded %s (%s)", record.title, record.id)
    session.flush()
    log.info("Seeded %s artwork(s)", written)
    return written


class DatabaseCatalog:
    """Answer catalog queries from the ``artworks`` table.

    ``get_available_artworks`` orders by creation time, newest first. Every
    result is converted to :class:`ArtworkRecord` before leaving this class.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: Engine | None = None,
        query_timeout_seconds: float = 10.0,
        echo: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if engine is None:
            if database_url is None:
                raise ValueError("database_url or engine is required")
            engine = create_catalog_engine(
                database_url, query_timeout_seconds=query_timeout_seconds, echo=echo
            )
        self.engine = engine
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.logger = logger or logging.getLogger(__name__)

    def _run(self, operation: Callable[[Session], T]) -> T:
        try:
            with self.session_factory() as session:
                return operation(session)
        except (SQLAlchemyError, ValidationError) as error:
            self.logger.error("Database query failed: %s", error)
            raise CatalogQueryError(str(error)) from error

    def _convert_rows(self, rows: Iterable[ArtworkRow]) -> list[ArtworkRecord]:
        records: list[ArtworkRecord] = []
        for row in rows:
            try:
                records.append(row_to_record(row))
            except ValidationError as error:
                self.logger.warning("Skipping malformed artwork row %s: %s", row.id, error)
        return records

    def _select_records(self, statement) -> list[ArtworkRecord]:
        return self._run(lambda session: self._convert_rows(session.scalars(statement)))

    def _available(self):
        return (
            select(ArtworkRow)
            .where(ArtworkRow.availability_status == AvailabilityStatus.AVAILABLE.value)
            .order_by(ArtworkRow.created_at.desc(), ArtworkRow.gallery_order)
        )

    def get_available_artworks(self) -> list[ArtworkRecord]:
        return self._select_records(self._available())

    def get_artworks_by_category(self, category: str) -> list[ArtworkRecord]:
        resolved = resolve_category_filter(category)
        if resolved is None:
            return []
        # stored labels may be legacy aliases
        return [record for record in self.get_available_artworks() if record.category is resolved]

    def get_artwork_by_id(self, artwork_id: str) -> ArtworkRecord | None:
        def _load(session: Session) -> ArtworkRecord | None:
            row = session.get(ArtworkRow, artwork_id)
            return row_to_record(row) if row is not None else None

        return self._run(_load)

    def get_artwork_by_slug(self, slug: str) -> ArtworkRecord | None:
        def _load(session: Session) -> ArtworkRecord | None:
            row = session.scalars(select(ArtworkRow).where(ArtworkRow.slug == slug)).first()
            return row_to_record(row) if row is not None else None

        return self._run(_load)

    def list_slugs(self) -> list[str]:
        statement = select(ArtworkRow.slug).order_by(ArtworkRow.gallery_order)
        return self._run(lambda session: list(session.scalars(statement)))

    def get_featured_artworks(self) -> list[ArtworkRecord]:
        return self._select_records(self._available().where(ArtworkRow.featured.is_(True)))

    def search_artworks(self, term: str) -> list[ArtworkRecord]:
        # JSON containment differs per dialect; tags are matched after loading.
        needle = term.strip().lower()
        if not needle:
            return []
        return [
            record
            for record in self.get_available_artworks()
            if any(needle in tag for tag in record.search_tags)
        ]

    def get_catalog_stats(self) -> CatalogStats:
        def _count(session: Session) -> CatalogStats:
            by_category = {category.value: 0 for category in Category}
            for label, count in session.execute(
                select(ArtworkRow.category, func.count()).group_by(ArtworkRow.category)
            ):
                by_category[normalize_category(label).value] += count
            featured = session.scalar(
                select(func.count()).select_from(ArtworkRow).where(ArtworkRow.featured.is_(True))
            )
            return CatalogStats(
                total=sum(by_category.values()),
                by_category=by_category,
                featured=featured or 0,
            )

        return self._run(_count)

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = [
    "ArtworkRow",
    "Base",
    "CatalogQueryError",
    "DatabaseCatalog",
    "create_catalog_engine",
    "create_schema",
    "record_to_row",
    "row_to_record",
    "seed_from_fixture",
]
