"""Month/year extraction from date-like cells."""

import logging
import re
from datetime import date, datetime, time
from typing import Optional, Union

from openpyxl.utils.datetime import CALENDAR_MAC_1904, CALENDAR_WINDOWS_1900, from_excel

from ..sheets.models import CellData
from .models import NA, MonthYearFormat

logger = logging.getLogger(__name__)

MONTH_SHORT = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
MONTH_LONG = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# month/day/year prefix; anything after the year (e.g. a time of day) is ignored
DATE_TEXT_PATTERN = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})(?!\d)")


def serial_to_date(serial: Union[int, float], epoch: int = 1900) -> Optional[datetime]:
    """
    Decode a spreadsheet date serial.

    The 1900 date system counts the non-existent 1900-02-29 as serial 60,
    so serials from 61 on are one day ahead of a plain day count. Serial
    60 itself still lands in February 1900. In the 1904 system serial 0 is
    1904-01-01.

    Args:
        serial: Day count, fractional part being the time of day
        epoch: 1900 or 1904, the workbook's date system

    Returns:
        The decoded datetime, or None if the serial is out of range
    """
    calendar = CALENDAR_MAC_1904 if epoch == 1904 else CALENDAR_WINDOWS_1900
    try:
        if serial < 0:
            return None
        decoded = from_excel(serial, epoch=calendar)
    except (OverflowError, ValueError, TypeError) as e:
        logger.debug(f"Cannot decode date serial {serial!r}: {e}")
        return None
    if isinstance(decoded, datetime):
        return decoded
    if isinstance(decoded, date):
        return datetime(decoded.year, decoded.month, decoded.day)
    if isinstance(decoded, time) and epoch == 1904:
        # Day 0 of the 1904 system is 1904-01-01 itself
        return datetime.combine(CALENDAR_MAC_1904, decoded)
    # In the 1900 system serials below 1 are a bare time of day
    return None


def parse_date_text(text: str) -> Optional[tuple[int, int]]:
    """Parse a ``month/day/year`` prefix into (month, year)."""
    match = DATE_TEXT_PATTERN.match(text or "")
    if not match:
        return None
    month, day, year_text = int(match.group(1)), int(match.group(2)), match.group(3)
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    year = int(year_text)
    if len(year_text) == 2:
        year += 2000
    return month, year


def extract_month_year(cell: Optional[CellData], epoch: int = 1900) -> Optional[tuple[int, int]]:
    """
    Derive (month, year) from a cell.

    Precedence, first success wins:
    1. a native date/datetime value
    2. a numeric value read as a date serial
    3. the display text read as ``m/d/yy`` or ``m/d/yyyy``
    """
    if cell is None or cell.value is None:
        return None

    value = cell.value
    if isinstance(value, (datetime, date)):
        return value.month, value.year

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        decoded = serial_to_date(value, epoch)
        if decoded is not None:
            return decoded.month, decoded.year

    return parse_date_text(cell.display_text)


def format_month_year(month: int, year: int, fmt: MonthYearFormat) -> str:
    """Render a month/year pair in one of the supported formats."""
    fmt = MonthYearFormat(fmt)
    if fmt == MonthYearFormat.MM_YYYY:
        return f"{month:02d}/{year:04d}"
    if fmt == MonthYearFormat.MMMM_YYYY:
        return f"{MONTH_LONG[month - 1]} {year:04d}"
    return f"{MONTH_SHORT[month - 1]} {year:04d}"


def month_year_text(
    cell: Optional[CellData],
    fmt: MonthYearFormat = MonthYearFormat.MON_YYYY,
    epoch: int = 1900,
) -> str:
    """Formatted month/year for a cell, or the N/A sentinel."""
    parts = extract_month_year(cell, epoch)
    if parts is None:
        return NA
    return format_month_year(parts[0], parts[1], fmt)
