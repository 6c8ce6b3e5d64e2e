"""Data models for spreadsheet cells."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from .refs import normalize_ref


class CellData(BaseModel):
    """Represents data from a single cell."""

    model_config = ConfigDict(frozen=True)

    cell: str  # A1 notation, e.g., "A1", "B2"
    row: int  # 1-based
    col: int  # 0-based
    value: Any = None  # Raw value: str, int, float, bool, datetime/date/time
    formatted_value: Optional[str] = None  # Text as the spreadsheet application shows it
    number_format: str = "General"

    @property
    def display_text(self) -> str:
        """Rendered text, falling back to the raw value."""
        if self.formatted_value is not None:
            return self.formatted_value
        if self.value is None:
            return ""
        return str(self.value)

    @property
    def is_blank(self) -> bool:
        return self.value is None or str(self.value).strip() == ""


class SheetSnapshot(BaseModel):
    """Immutable view of the first worksheet of a workbook."""

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    cells: dict[str, CellData] = Field(default_factory=dict)
    epoch: int = 1900  # Date system of the workbook (1900 or 1904)

    def get(self, ref: str) -> Optional[CellData]:
        """Look up a cell by A1 reference, returning None when it holds nothing."""
        return self.cells.get(normalize_ref(ref))

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, ref: str) -> bool:
        return self.get(ref) is not None


class WorkbookReadError(Exception):
    """Exception raised when a workbook cannot be parsed."""

    pass
