"""Compose the admin inventory workbook summarizing catalog artworks."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.drawing.image import Image as ExcelImage
from openpyxl.styles import Alignment
from openpyxl.worksheet.worksheet import Worksheet
from PIL import Image as PILImage

from .formatting import format_dimensions, format_pricing
from .models import ArtworkRecord

DEFAULT_SHEET_NAME = "Inventory"
DEFAULT_MAX_IMAGE_DIMENSION = 160
INVENTORY_COLUMNS: Sequence[str] = (
    "image",
    "title",
    "slug",
    "category",
    "size",
    "medium",
    "price",
    "status",
    "featured",
    "story",
)
_SLUG_COLUMN = INVENTORY_COLUMNS.index("slug") + 1


def export_inventory(
    records: Iterable[ArtworkRecord],
    workbook_path: Path,
    *,
    asset_root: Path | None = None,
    sheet_name: str = DEFAULT_SHEET_NAME,
    max_image_dimension: int = DEFAULT_MAX_IMAGE_DIMENSION,
) -> int:
    """Append ``records`` to ``workbook_path`` and return how many rows were added.

    The workbook is created when missing and headers are enforced on every
    call. Records whose slug already appears in the sheet are skipped. When
    ``asset_root`` is given, each record's public image path is resolved under
    it and a thumbnail is embedded in the first column if the file exists.
    """

    workbook_path = Path(workbook_path)
    workbook_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = _load_or_create_workbook(workbook_path, sheet_name)
    try:
        worksheet = _get_or_create_worksheet(workbook, sheet_name)
        _ensure_headers(worksheet)

        existing_slugs = _collect_existing_slugs(worksheet)
        added = 0
        for record in records:
            slug_key = record.slug.casefold()
            if slug_key in existing_slugs:
                continue
            existing_slugs.add(slug_key)

            worksheet.append(_build_row_payload(record))
            row_index = worksheet.max_row
            _wrap_story(worksheet, row_index)

            if asset_root is not None and record.primary_image.url:
                image_path = Path(asset_root) / record.primary_image.url.lstrip("/")
                excel_image = _load_image_for_excel(image_path, max_image_dimension)
                if excel_image is not None:
                    worksheet.add_image(excel_image, f"A{row_index}")
                    worksheet.row_dimensions[row_index].height = max(
                        worksheet.row_dimensions[row_index].height or 0,
                        excel_image.height * 0.75,
                    )
            added += 1

        workbook.save(workbook_path)
    finally:
        workbook.close()
    return added


def _load_or_create_workbook(path: Path, sheet_name: str) -> Workbook:
    if path.exists():
        return load_workbook(path)

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name
    return workbook


def _get_or_create_worksheet(workbook: Workbook, sheet_name: str) -> Worksheet:
    if sheet_name in workbook.sheetnames:
        return workbook[sheet_name]
    return workbook.create_sheet(title=sheet_name)


def _ensure_headers(worksheet: Worksheet) -> None:
    header_values = [worksheet.cell(row=1, column=index + 1).value for index in range(len(INVENTORY_COLUMNS))]
    if header_values != list(INVENTORY_COLUMNS):
        for column_index, header in enumerate(INVENTORY_COLUMNS, start=1):
            worksheet.cell(row=1, column=column_index, value=header)

    worksheet.column_dimensions["A"].width = 24
    worksheet.freeze_panes = "B2"


def _collect_existing_slugs(worksheet: Worksheet) -> set[str]:
    slugs: set[str] = set()
    for (slug,) in worksheet.iter_rows(
        min_row=2, min_col=_SLUG_COLUMN, max_col=_SLUG_COLUMN, values_only=True
    ):
        if isinstance(slug, str) and slug:
            slugs.add(slug.casefold())
    return slugs


def _build_row_payload(record: ArtworkRecord) -> Sequence[str | None]:
    return (
        None,
        record.title,
        record.slug,
        record.category.value,
        format_dimensions(record.dimensions),
        record.medium,
        format_pricing(record.pricing),
        record.availability_status.value,
        "yes" if record.featured else "no",
        record.story_behind_brushstroke,
    )


def _wrap_story(worksheet: Worksheet, row_index: int) -> None:
    column_index = INVENTORY_COLUMNS.index("story") + 1
    worksheet.cell(row=row_index, column=column_index).alignment = Alignment(wrap_text=True)


def _load_image_for_excel(image_path: Path, max_dimension: int) -> ExcelImage | None:
    if not image_path.exists() or max_dimension <= 0:
        return None

    try:
        with PILImage.open(image_path) as source_image:
            image = source_image.copy()
    except OSError:
        return None

    image.thumbnail((max_dimension, max_dimension))

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    buffer.seek(0)

    excel_image = ExcelImage(buffer)
    excel_image.width, excel_image.height = image.size
    return excel_image


__all__ = ["DEFAULT_SHEET_NAME", "INVENTORY_COLUMNS", "export_inventory"]
