"""Define typed models representing gallery artwork records."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel


def _normalize_optional_text(value: str | None) -> str | None:
    """Collapse blank strings to ``None`` for optional text fields."""

    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class Category(str, Enum):
    """Closed set of gallery categories."""

    BIRDS = "birds"
    FLOWERS = "flowers"
    TOWNS = "towns"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    RESERVED = "reserved"
    INQUIRE = "inquire"


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Dimensions(_RecordModel):
    """Physical size of a canvas."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    unit: str = "cm"


class Pricing(_RecordModel):
    original: float | None = Field(
        default=None,
        description="Price of the original work. ``None`` when unpriced.",
    )


class PrimaryImage(_RecordModel):
    url: str
    alt_text: str
    color_profile: str = "sRGB"


class ArtworkRecord(_RecordModel):
    """Canonical artwork shape returned by every catalog backend."""

    id: str = Field(..., description="Stable identifier from the fixture or the database key.")
    title: str
    slug: str = Field(..., description="URL-safe identifier derived from the title.")
    category: Category
    subcategory: str | None = None
    medium: str
    dimensions: Dimensions
    pricing: Pricing = Field(default_factory=Pricing)
    emotional_tags: tuple[str, ...] = ()
    story_behind_brushstroke: str
    primary_image: PrimaryImage
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    featured: bool = False
    search_tags: tuple[str, ...] = ()
    gallery_order: int = Field(..., ge=1)
    inspiration_source: str | None = None
    seo_description: str | None = None
    creation_year: int | None = None
    is_original: bool = True

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value: str) -> str:
        """Ensure the title is populated after trimming whitespace."""

        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title must not be empty")
        return cleaned

    @field_validator("subcategory", mode="before")
    @classmethod
    def _strip_subcategory(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _normalize_optional_text(value)
        return value

    @property
    def is_available(self) -> bool:
        return self.availability_status is AvailabilityStatus.AVAILABLE


class RawArtwork(BaseModel):
    """Loosely typed artwork entry as found in the static JSON fixture.

    Only ``id`` and ``title`` are required. Every other field tolerates being
    absent, null or of the wrong type; the normalizer resolves such values to
    documented defaults instead of rejecting the row.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    title: str
    category: str | None = None
    subcategory: str | None = None
    dimensions: str | None = None
    medium: str | None = None
    price: float | None = None
    description: str | None = None
    image: str | None = None
    featured: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        """Accept numeric identifiers from hand-edited fixtures."""

        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(
        "category", "subcategory", "dimensions", "medium", "description", "image", mode="before"
    )
    @classmethod
    def _drop_non_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return None

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Any:
        """Normalize prices such as ``"$1,250"``; unparseable values become ``None``."""

        if value in (None, "") or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            normalized = value.strip().replace("$", "").replace(",", "")
            try:
                return float(normalized)
            except ValueError:
                return None
        return None

    @field_validator("featured", mode="before")
    @classmethod
    def _coerce_featured(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"true", "yes", "1"}
        return bool(value)


__all__ = [
    "ArtworkRecord",
    "AvailabilityStatus",
    "Category",
    "Dimensions",
    "Pricing",
    "PrimaryImage",
    "RawArtwork",
    "ValidationError",
]
