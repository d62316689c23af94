"""Unit coverage for the inventory workbook export."""
from __future__ import annotations

from pathlib import Path

from openpyxl import load_workbook
from PIL import Image as PILImage

from gallery_catalog.catalog.models import RawArtwork
from gallery_catalog.catalog.normalize import normalize_artwork
from gallery_catalog.catalog.spreadsheet import (
    DEFAULT_SHEET_NAME,
    INVENTORY_COLUMNS,
    export_inventory,
)


def _record(artwork_id: str, title: str, index: int = 0, **overrides: object):
    payload: dict[str, object] = {
        "id": artwork_id,
        "title": title,
        "category": "birds",
        "dimensions": "50cm X 70cm",
        "price": 780,
        "image": f"images/artwork/birds/{artwork_id}.webp",
    }
    payload.update(overrides)
    return normalize_artwork(RawArtwork.model_validate(payload), index)


def test_export_creates_workbook_and_embeds_thumbnail(tmp_path: Path) -> None:
    asset_root = tmp_path / "public"
    image_path = asset_root / "artwork" / "birds" / "b1.jpg"
    image_path.parent.mkdir(parents=True)
    PILImage.new("RGB", (640, 480), color=(12, 34, 56)).save(image_path)
    workbook_path = tmp_path / "inventory.xlsx"

    added = export_inventory([_record("b1", "Heron at Dusk")], workbook_path, asset_root=asset_root)

    assert added == 1
    workbook = load_workbook(workbook_path)
    worksheet = workbook.active
    assert worksheet.title == DEFAULT_SHEET_NAME
    header_values = [worksheet.cell(row=1, column=index + 1).value for index in range(len(INVENTORY_COLUMNS))]
    assert header_values == list(INVENTORY_COLUMNS)

    row_values = [worksheet.cell(row=2, column=index + 1).value for index in range(len(INVENTORY_COLUMNS))]
    assert row_values[:9] == [
        None,
        "Heron at Dusk",
        "heron-at-dusk",
        "birds",
        "50cm × 70cm",
        "Acrylic on Canvas",
        "$780",
        "available",
        "no",
    ]
    assert worksheet.cell(row=2, column=len(INVENTORY_COLUMNS)).alignment.wrapText is True

    images = getattr(worksheet, "_images", [])
    assert len(images) == 1
    assert images[0].anchor._from.row == 1
    assert images[0].anchor._from.col == 0
    workbook.close()


def test_export_skips_existing_slugs(tmp_path: Path) -> None:
    workbook_path = tmp_path / "inventory.xlsx"
    first = _record("b1", "First Light")
    second = _record("b2", "Second Wind", 1, price=None, featured=True)

    assert export_inventory([first], workbook_path) == 1
    assert export_inventory([first, second, second], workbook_path) == 1

    workbook = load_workbook(workbook_path)
    worksheet = workbook.active
    assert worksheet.max_row == 3  # header + two unique artworks
    assert [worksheet.cell(row=row, column=2).value for row in (2, 3)] == ["First Light", "Second Wind"]
    assert worksheet.cell(row=3, column=7).value == "Price on request"
    assert worksheet.cell(row=3, column=9).value == "yes"
    assert getattr(worksheet, "_images", []) == []
    workbook.close()
