"""Placeholder specs and their resolution.

A placeholder spec describes where the text for one template token comes
from: a single cell, a constant, several cells joined together, or the
month and year of a date-like cell.
"""

from .models import (
    NA,
    CellSpec,
    ConstSpec,
    JoinSpec,
    MonthYearFormat,
    MonthYearSpec,
    PlaceholderSpec,
    cell,
    const,
    join,
    month_year,
)
from .dates import extract_month_year, format_month_year, parse_date_text, serial_to_date
from .resolver import PlaceholderResolver

__all__ = [
    "NA",
    "CellSpec",
    "ConstSpec",
    "JoinSpec",
    "MonthYearFormat",
    "MonthYearSpec",
    "PlaceholderSpec",
    "cell",
    "const",
    "join",
    "month_year",
    "extract_month_year",
    "format_month_year",
    "parse_date_text",
    "serial_to_date",
    "PlaceholderResolver",
]
