"""Compress artwork imagery into web-ready JPEG and WebP variants."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from PIL import Image as PILImage
from PIL import ImageOps

DEFAULT_MAX_DIMENSION = 1200
DEFAULT_JPEG_QUALITY = 85
DEFAULT_WEBP_QUALITY = 90
DEFAULT_CATEGORY_DIRECTORIES: Sequence[str] = ("birds", "floral", "towns")
SOURCE_EXTENSIONS: Sequence[str] = (".jpg", ".jpeg", ".png", ".webp")


class ImageCompressionError(RuntimeError):
    """Raised when a source image cannot be read or written."""


@dataclass(frozen=True)
class CompressedVariant:
    path: Path
    size_bytes: int
    reduction_percent: float


@dataclass(frozen=True)
class ImageCompressionReport:
    """Sizes before and after compressing a single source image."""

    source: Path
    original_size_bytes: int
    original_dimensions: tuple[int, int]
    jpeg: CompressedVariant
    webp: CompressedVariant


@dataclass
class CategoryCompressionReport:
    """Aggregate results for one category directory."""

    category: str
    reports: list[ImageCompressionReport] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def original_size_bytes(self) -> int:
        return sum(report.original_size_bytes for report in self.reports)

    @property
    def compressed_size_bytes(self) -> int:
        # JPEG is the primary served format
        return sum(report.jpeg.size_bytes for report in self.reports)

    @property
    def reduction_percent(self) -> float:
        return _reduction(self.original_size_bytes, self.compressed_size_bytes)


def _reduction(original: int, compressed: int) -> float:
    if original <= 0:
        return 0.0
    return round((original - compressed) / original * 100, 1)


def _variant(path: Path, original_size: int) -> CompressedVariant:
    size = path.stat().st_size
    return CompressedVariant(path=path, size_bytes=size, reduction_percent=_reduction(original_size, size))


def compress_image(
    source_path: Path,
    output_directory: Path,
    *,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    webp_quality: int = DEFAULT_WEBP_QUALITY,
) -> ImageCompressionReport:
    """Write resized JPEG and WebP copies of ``source_path`` into ``output_directory``.

    Images are auto-rotated from EXIF data and shrunk to fit within
    ``max_dimension`` pixels on both sides; smaller images are never enlarged.
    """

    source_path = Path(source_path)
    output_directory = Path(output_directory)
    try:
        original_size = source_path.stat().st_size
        with PILImage.open(source_path) as source_image:
            original_dimensions = source_image.size
            image = ImageOps.exif_transpose(source_image)
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            image.thumbnail((max_dimension, max_dimension), PILImage.Resampling.LANCZOS)
    except OSError as error:
        raise ImageCompressionError(f"could not read {source_path}: {error}") from error

    output_directory.mkdir(parents=True, exist_ok=True)
    jpeg_path = output_directory / f"{source_path.stem}.jpg"
    webp_path = output_directory / f"{source_path.stem}.webp"
    try:
        image.save(jpeg_path, "JPEG", quality=jpeg_quality, optimize=True, progressive=True)
        image.save(webp_path, "WEBP", quality=webp_quality, method=6)
    except OSError as error:
        raise ImageCompressionError(f"could not write variants for {source_path}: {error}") from error

    return ImageCompressionReport(
        source=source_path,
        original_size_bytes=original_size,
        original_dimensions=original_dimensions,
        jpeg=_variant(jpeg_path, original_size),
        webp=_variant(webp_path, original_size),
    )


def _iter_source_images(directory: Path) -> Iterable[Path]:
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix.lower() in SOURCE_EXTENSIONS:
            yield path


def compress_category_tree(
    input_root: Path,
    output_root: Path,
    *,
    categories: Sequence[str] = DEFAULT_CATEGORY_DIRECTORIES,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    logger: logging.Logger | None = None,
) -> list[CategoryCompressionReport]:
    """Compress every image under ``input_root/<category>`` into ``output_root/<category>``.

    A file that fails is recorded on its category report and the walk moves on.
    Missing category directories produce an empty report.
    """

    log = logger or logging.getLogger(__name__)
    results: list[CategoryCompressionReport] = []
    for category in categories:
        report = CategoryCompressionReport(category=category)
        results.append(report)
        category_input = Path(input_root) / category
        if not category_input.is_dir():
            log.warning("Category directory %s not found; skipping", category_input)
            continue

        category_output = Path(output_root) / category
        for source_path in _iter_source_images(category_input):
            try:
                image_report = compress_image(
                    source_path, category_output, max_dimension=max_dimension
                )
            except ImageCompressionError as error:
                log.error("Compression failed for %s: %s", source_path, error)
                report.errors.append((source_path, str(error)))
                continue
            report.reports.append(image_report)
            log.info(
                "Compressed %s: JPEG %s%% smaller, WebP %s%% smaller",
                source_path.name,
                image_report.jpeg.reduction_percent,
                image_report.webp.reduction_percent,
            )

        log.info(
            "Category %s: %s image(s), %s%% total reduction",
            category,
            len(report.reports),
            report.reduction_percent,
        )
    return results


__all__ = [
    "CategoryCompressionReport",
    "CompressedVariant",
    "ImageCompressionError",
    "ImageCompressionReport",
    "compress_category_tree",
    "compress_image",
]
