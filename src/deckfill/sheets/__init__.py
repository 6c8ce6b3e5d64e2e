"""Spreadsheet input: cell model and workbook loading."""

from .models import CellData, SheetSnapshot, WorkbookReadError
from .reader import load_first_sheet
from .refs import col_letter_to_index, index_to_col_letter, parse_cell_notation

__all__ = [
    "CellData",
    "SheetSnapshot",
    "WorkbookReadError",
    "load_first_sheet",
    "col_letter_to_index",
    "index_to_col_letter",
    "parse_cell_notation",
]
