"""Transform raw fixture entries into canonical artwork records."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping

from .models import (
    ArtworkRecord,
    AvailabilityStatus,
    Category,
    Dimensions,
    Pricing,
    PrimaryImage,
    RawArtwork,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY: Category = Category.FLOWERS
DEFAULT_MEDIUM = "Acrylic on Canvas"
DEFAULT_DIMENSIONS = Dimensions(width=40, height=40, unit="cm")
DEFAULT_CREATION_YEAR = 2023
FALLBACK_SLUG = "artwork"

# Keys are lowercase; callers go through ``normalize_category``.
CATEGORY_ALIASES: Mapping[str, Category] = {
    "birds": Category.BIRDS,
    "flowers": Category.FLOWERS,
    "floral": Category.FLOWERS,
    "towns": Category.TOWNS,
}

EMOTIONAL_TAGS_BY_CATEGORY: Mapping[Category, tuple[str, ...]] = {
    Category.BIRDS: ("freedom", "joy", "flight", "nature"),
    Category.FLOWERS: ("growth", "beauty", "renewal", "healing"),
    Category.TOWNS: ("serenity", "memories", "warmth", "peace"),
}
FALLBACK_EMOTIONAL_TAGS: tuple[str, ...] = ("beauty", "art")

STORY_TEMPLATES: Mapping[Category, str] = {
    Category.BIRDS: (
        "This {title_lower} represents the essence of freedom and the boundless "
        "spirit that soars within us all."
    ),
    Category.FLOWERS: (
        "The delicate beauty of {title_lower} captures nature's healing power "
        "and the promise of renewal."
    ),
    Category.TOWNS: (
        "{title} invites us to find peace in the simple moments and cherish the "
        "places that hold our memories."
    ),
}

SOURCE_IMAGE_PREFIX = "images/artwork/"
PUBLIC_IMAGE_PREFIX = "/artwork/"
SOURCE_IMAGE_EXTENSION = ".webp"
PUBLIC_IMAGE_EXTENSION = ".jpg"

_SLUG_SEPARATOR_PATTERN = re.compile(r"[^a-z0-9]+")
_DIMENSIONS_PATTERN = re.compile(r"(\d+)\s*cm\s*[xX]\s*(\d+)\s*cm", re.IGNORECASE)


def slugify(title: str, fallback: str | None = None) -> str:
    """Return a URL-safe slug for ``title``.

    Runs of characters outside ``[a-z0-9]`` collapse into a single hyphen and
    edge hyphens are stripped. When nothing survives (a punctuation-only
    title, for instance) the slug of ``fallback`` is used instead, and failing
    that the literal ``"artwork"``.
    """

    slug = _SLUG_SEPARATOR_PATTERN.sub("-", (title or "").lower()).strip("-")
    if slug:
        return slug
    if fallback:
        fallback_slug = _SLUG_SEPARATOR_PATTERN.sub("-", fallback.lower()).strip("-")
        if fallback_slug:
            return fallback_slug
    return FALLBACK_SLUG


def resolve_category_filter(value: str | None) -> Category | None:
    """Return the category ``value`` names, or ``None`` when it is not recognised."""

    if value is None:
        return None
    if isinstance(value, Category):
        return value
    return CATEGORY_ALIASES.get(value.strip().lower())


def normalize_category(value: str | None) -> Category:
    """Map a raw fixture category onto the closed enumeration.

    Values are lowercased before the alias lookup; anything unrecognised
    resolves to :data:`DEFAULT_CATEGORY`.
    """

    category = resolve_category_filter(value)
    if category is None:
        logger.debug("Unrecognised category %r; using %s", value, DEFAULT_CATEGORY.value)
        return DEFAULT_CATEGORY
    return category


def parse_dimensions(text: Any) -> Dimensions:
    """Parse ``"<w>cm X <h>cm"`` into :class:`Dimensions`, defaulting to 40x40 cm."""

    if not isinstance(text, str):
        return DEFAULT_DIMENSIONS

    match = _DIMENSIONS_PATTERN.search(text)
    if match is None:
        logger.debug("Could not parse dimensions %r; using default", text)
        return DEFAULT_DIMENSIONS

    try:
        width = int(match.group(1))
        height = int(match.group(2))
    except ValueError:  # pragma: no cover - the pattern only captures digits
        return DEFAULT_DIMENSIONS

    if width <= 0 or height <= 0:
        logger.debug("Non-positive dimensions in %r; using default", text)
        return DEFAULT_DIMENSIONS
    return Dimensions(width=width, height=height, unit="cm")


def rewrite_image_path(path: str | None) -> str:
    """Rewrite a fixture asset path to the public asset convention.

    ``"images/artwork/birds/Image1.webp"`` becomes ``"/artwork/birds/Image1.jpg"``.
    No filesystem access is performed.
    """

    if not path:
        return ""
    rewritten = path.replace(SOURCE_IMAGE_PREFIX, PUBLIC_IMAGE_PREFIX, 1)
    if rewritten.endswith(SOURCE_IMAGE_EXTENSION):
        rewritten = rewritten[: -len(SOURCE_IMAGE_EXTENSION)] + PUBLIC_IMAGE_EXTENSION
    return rewritten


def emotional_tags_for(category: Category | None) -> tuple[str, ...]:
    return EMOTIONAL_TAGS_BY_CATEGORY.get(category, FALLBACK_EMOTIONAL_TAGS)


def story_for(title: str, category: Category, description: str | None = None) -> str:
    """Return the artwork narrative, preferring a non-blank ``description``."""

    if description and description.strip():
        return description.strip()
    template = STORY_TEMPLATES.get(category, STORY_TEMPLATES[DEFAULT_CATEGORY])
    return template.format(title=title, title_lower=title.lower())


def normalize_artwork(raw: RawArtwork | Mapping[str, Any], index: int) -> ArtworkRecord:
    """Return the canonical :class:`ArtworkRecord` for ``raw``.

    ``index`` is the 0-based position of the entry in its source sequence and
    becomes the 1-based ``gallery_order``. Missing or malformed optional fields
    resolve to defaults, so a single bad row never blanks the gallery.

    A plain mapping is validated into :class:`RawArtwork` first and raises
    :class:`ValidationError` when ``id`` or ``title`` is missing.
    """

    if not isinstance(raw, RawArtwork):
        raw = RawArtwork.model_validate(raw)

    title = raw.title.strip() or raw.id.strip() or "Untitled"
    category = normalize_category(raw.category)
    medium = (raw.medium or "").strip() or DEFAULT_MEDIUM
    emotional_tags = emotional_tags_for(category)
    raw_dimensions = (raw.dimensions or "").strip()

    seo_description = f"{title} - Original {medium}."
    if raw_dimensions:
        seo_description = f"{seo_description} {raw_dimensions}."

    return ArtworkRecord(
        id=raw.id,
        title=title,
        slug=slugify(title, fallback=raw.id),
        category=category,
        subcategory=raw.subcategory,
        medium=medium,
        dimensions=parse_dimensions(raw.dimensions),
        pricing=Pricing(original=raw.price),
        emotional_tags=emotional_tags,
        story_behind_brushstroke=story_for(title, category, raw.description),
        primary_image=PrimaryImage(
            url=rewrite_image_path(raw.image),
            alt_text=f"{title} - {medium}",
            color_profile="sRGB",
        ),
        availability_status=AvailabilityStatus.AVAILABLE,
        featured=raw.featured,
        search_tags=(category.value, title.lower(), medium.lower(), *emotional_tags),
        gallery_order=index + 1,
        inspiration_source=f"Artist's {category.value} collection",
        seo_description=seo_description,
        creation_year=DEFAULT_CREATION_YEAR,
        is_original=True,
    )


def normalize_artworks(raws: Iterable[RawArtwork | Mapping[str, Any]]) -> tuple[ArtworkRecord, ...]:
    return tuple(normalize_artwork(raw, index) for index, raw in enumerate(raws))


def record_to_mapping(record: ArtworkRecord) -> dict[str, Any]:
    """Return a JSON-serializable camelCase mapping for ``record``."""

    return record.model_dump(mode="json", by_alias=True)


__all__ = [
    "CATEGORY_ALIASES",
    "DEFAULT_CATEGORY",
    "DEFAULT_DIMENSIONS",
    "DEFAULT_MEDIUM",
    "emotional_tags_for",
    "normalize_artwork",
    "normalize_artworks",
    "normalize_category",
    "parse_dimensions",
    "record_to_mapping",
    "resolve_category_filter",
    "rewrite_image_path",
    "slugify",
    "story_for",
]
