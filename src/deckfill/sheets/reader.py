"""Load the first worksheet of an uploaded workbook into a SheetSnapshot."""

import logging
from io import BytesIO
from typing import Optional

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.datetime import CALENDAR_MAC_1904

from .display import render_display_text
from .models import CellData, SheetSnapshot, WorkbookReadError
from .refs import cell_ref

logger = logging.getLogger(__name__)

ZIP_SIGNATURE = b"PK\x03\x04"
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def load_first_sheet(data: bytes, filename: Optional[str] = None) -> SheetSnapshot:
    """
    Parse a workbook and return its first worksheet.

    The container format is detected from the content, not the file name:
    Office Open XML workbooks are read with openpyxl, legacy BIFF
    workbooks with xlrd. Any further worksheets are ignored.

    Args:
        data: Raw workbook bytes
        filename: Original file name, used only in log and error messages

    Returns:
        SheetSnapshot with every non-empty cell of the first sheet

    Raises:
        WorkbookReadError: If the bytes are not a readable workbook
    """
    label = filename or "workbook"
    if data.startswith(ZIP_SIGNATURE):
        snapshot = _load_xlsx(data, label)
    elif data.startswith(OLE2_SIGNATURE):
        snapshot = _load_xls(data, label)
    else:
        raise WorkbookReadError(f"{label} is not an Excel workbook")

    logger.info(
        f"Loaded sheet '{snapshot.sheet_name}' from {label} ({len(snapshot)} non-empty cells)"
    )
    return snapshot


def _load_xlsx(data: bytes, label: str) -> SheetSnapshot:
    """Read the first worksheet of an .xlsx/.xlsm workbook."""
    try:
        workbook = load_workbook(BytesIO(data), data_only=True)
    except Exception as e:
        raise WorkbookReadError(f"Could not read {label}: {e}") from e

    try:
        if not workbook.worksheets:
            raise WorkbookReadError(f"{label} contains no worksheets")
        worksheet = workbook.worksheets[0]
        cells = {}
        for row in worksheet.iter_rows():
            for cell in row:
                if cell.value is None:
                    continue
                ref = cell_ref(cell.row, cell.column - 1)
                cells[ref] = CellData(
                    cell=ref,
                    row=cell.row,
                    col=cell.column - 1,
                    value=cell.value,
                    formatted_value=render_display_text(cell.value, cell.number_format),
                    number_format=cell.number_format or "General",
                )
        epoch = 1904 if workbook.epoch == CALENDAR_MAC_1904 else 1900
        return SheetSnapshot(sheet_name=worksheet.title, cells=cells, epoch=epoch)
    finally:
        workbook.close()


def _load_xls(data: bytes, label: str) -> SheetSnapshot:
    """Read the first worksheet of a legacy .xls workbook."""
    try:
        book = xlrd.open_workbook(file_contents=data, formatting_info=True)
    except Exception as e:
        raise WorkbookReadError(f"Could not read {label}: {e}") from e

    try:
        if book.nsheets == 0:
            raise WorkbookReadError(f"{label} contains no worksheets")
        sheet = book.sheet_by_index(0)
        cells = {}
        for row_index in range(sheet.nrows):
            for col_index in range(sheet.ncols):
                cell = sheet.cell(row_index, col_index)
                value = _xls_value(cell, book.datemode)
                if value is None:
                    continue
                number_format = _xls_number_format(book, sheet, row_index, col_index)
                ref = cell_ref(row_index + 1, col_index)
                cells[ref] = CellData(
                    cell=ref,
                    row=row_index + 1,
                    col=col_index,
                    value=value,
                    formatted_value=render_display_text(value, number_format),
                    number_format=number_format,
                )
        epoch = 1904 if book.datemode == 1 else 1900
        return SheetSnapshot(sheet_name=sheet.name, cells=cells, epoch=epoch)
    finally:
        book.release_resources()


def _xls_value(cell, datemode: int):
    """Convert an xlrd cell into the same raw value types openpyxl produces."""
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (xlrd.xldate.XLDateError, OverflowError, ValueError):
            return cell.value
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def _xls_number_format(book, sheet, row: int, col: int) -> str:
    """Look up the number-format string attached to an .xls cell."""
    try:
        xf = book.xf_list[sheet.cell_xf_index(row, col)]
        return book.format_map[xf.format_key].format_str or "General"
    except (IndexError, KeyError):
        return "General"
