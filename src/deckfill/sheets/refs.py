"""A1 notation helpers."""

import re

CELL_PATTERN = re.compile(r"^\$?([A-Za-z]{1,3})\$?(\d+)$")


def col_letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    result = 0
    for char in col.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def index_to_col_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def parse_cell_notation(cell: str) -> tuple[str, int]:
    """Parse A1 notation into column letters and row number.

    Absolute markers (``$B$2``) are accepted and dropped.
    """
    match = CELL_PATTERN.match(cell.strip())
    if not match or int(match.group(2)) < 1:
        raise ValueError(f"Invalid cell notation: {cell}")
    return match.group(1).upper(), int(match.group(2))


def normalize_ref(cell: str) -> str:
    """Return the canonical upper-case, non-absolute form of a cell reference."""
    col, row = parse_cell_notation(cell)
    return f"{col}{row}"


def cell_ref(row: int, col: int) -> str:
    """Build an A1 reference from a 1-based row and 0-based column."""
    return f"{index_to_col_letter(col)}{row}"
