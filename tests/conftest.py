"""Pytest configuration and shared fixtures."""

import struct
import zipfile
from io import BytesIO
from typing import Any, Callable, Optional

import pytest
import xlwt
from openpyxl import Workbook
from openpyxl.utils.datetime import CALENDAR_MAC_1904

from deckfill.config import Settings
from deckfill.sheets.models import CellData, SheetSnapshot
from deckfill.sheets.refs import parse_cell_notation, col_letter_to_index

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>'
)
PRESENTATION = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<p:presentation xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"/>'
)
# Not a real image; only needs to survive the round trip untouched
IMAGE_BYTES = bytes(range(256)) * 4
# Extended timestamp record (header 0x5455) carried on the image entry
IMAGE_EXTRA = struct.pack("<HHBl", 0x5455, 5, 1, 1682942400)


def slide_xml(text: str) -> str:
    """Minimal slide part with one text run."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
        'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">'
        f"<p:cSld><p:spTree><p:sp><p:txBody><a:p><a:r><a:t>{text}</a:t></a:r></a:p>"
        "</p:txBody></p:sp></p:spTree></p:cSld></p:sld>"
    )


@pytest.fixture
def make_pptx() -> Callable[..., bytes]:
    """Factory building a small .pptx-like container in memory."""

    def _make(slides: dict[int, str], extra: Optional[dict[str, bytes]] = None) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", CONTENT_TYPES)
            archive.writestr("ppt/presentation.xml", PRESENTATION)
            for page, text in slides.items():
                archive.writestr(f"ppt/slides/slide{page}.xml", slide_xml(text))
            image = zipfile.ZipInfo("ppt/media/image1.png", date_time=(2023, 5, 1, 12, 0, 0))
            image.compress_type = zipfile.ZIP_STORED
            image.extra = IMAGE_EXTRA
            archive.writestr(image, IMAGE_BYTES)
            for name, data in (extra or {}).items():
                archive.writestr(name, data)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    """Factory building an .xlsx workbook in memory with openpyxl."""

    def _make(
        cells: dict[str, Any],
        number_formats: Optional[dict[str, str]] = None,
        other_sheets: Optional[dict[str, dict[str, Any]]] = None,
        dates_1904: bool = False,
    ) -> bytes:
        workbook = Workbook()
        if dates_1904:
            workbook.epoch = CALENDAR_MAC_1904
        worksheet = workbook.active
        worksheet.title = "Projects"
        for ref, value in cells.items():
            worksheet[ref] = value
        for ref, number_format in (number_formats or {}).items():
            worksheet[ref].number_format = number_format
        for title, sheet_cells in (other_sheets or {}).items():
            sheet = workbook.create_sheet(title)
            for ref, value in sheet_cells.items():
                sheet[ref] = value
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_xls() -> Callable[..., bytes]:
    """Factory building a legacy .xls workbook in memory with xlwt."""

    def _make(
        sheets: dict[str, dict[str, Any]],
        number_formats: Optional[dict[str, str]] = None,
        dates_1904: bool = False,
    ) -> bytes:
        workbook = xlwt.Workbook()
        workbook.dates_1904 = dates_1904
        formats = number_formats or {}
        for title, cells in sheets.items():
            sheet = workbook.add_sheet(title)
            for ref, value in cells.items():
                col, row = parse_cell_notation(ref)
                style = xlwt.easyxf(num_format_str=formats.get(ref, "General"))
                sheet.write(row - 1, col_letter_to_index(col), value, style)
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _make


def build_sheet(cells: dict[str, Any], formatted: Optional[dict[str, str]] = None) -> SheetSnapshot:
    """SheetSnapshot from raw values, with optional display-text overrides."""
    formatted = formatted or {}
    data = {}
    for ref, value in cells.items():
        col, row = parse_cell_notation(ref)
        display = formatted.get(ref)
        if display is None and value is not None:
            display = str(value)
        data[f"{col}{row}"] = CellData(
            cell=f"{col}{row}",
            row=row,
            col=col_letter_to_index(col),
            value=value,
            formatted_value=display,
        )
    return SheetSnapshot(sheet_name="Sheet1", cells=data)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with test values."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=False,
        cors_allow_origins=["*"],
        default_mapping_set="org_change",
        output_filename="generated.pptx",
        max_upload_bytes=5 * 1024 * 1024,
    )


def read_entries(data: bytes) -> dict[str, bytes]:
    """All entries of a ZIP container, by name."""
    with zipfile.ZipFile(BytesIO(data)) as archive:
        return {info.filename: archive.read(info) for info in archive.infolist()}
