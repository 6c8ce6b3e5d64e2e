"""Render raw cell values as the spreadsheet application would display them.

Only the subset of number-format codes that shows up in ordinary business
workbooks is covered: ``General``, text (``@``), fixed-decimal and grouped
numbers, thousands scaling, scientific notation, percentages, literal
prefixes/suffixes, and date/time codes. Fractions, engineering notation and
anything more exotic degrade to the ``General`` rendering.
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from openpyxl.styles.numbers import is_date_format

logger = logging.getLogger(__name__)

GENERAL = "General"

# Built-in short date (numFmtId 14) is stored as "mm-dd-yy" but displayed
# by the application as a locale short date.
DISPLAY_ALIASES = {
    "mm-dd-yy": "m/d/yy",
}

DEFAULT_DATE_FORMAT = "m/d/yy"

_BRACKET_PATTERN = re.compile(r"\[([^\]]*)\]")
_DATE_TOKEN_PATTERN = re.compile(
    r"(y+|m+|d+|h+|s+|am/pm|a/p|\.0+)",
    re.IGNORECASE,
)
_NUMBER_BODY_PATTERN = re.compile(r"[0#?][0#?,]*(?:\.[0#?]*)?|\.[0#?]+")
_SCIENTIFIC_PATTERN = re.compile(r"([0#?][0#?,]*)(?:\.([0#?]*))?[eE]([+-])([0#?]+)")
_FRACTION_PATTERN = re.compile(r"[0#?]\s*/\s*[0#?\d]")

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def split_sections(code: str) -> list[str]:
    """Split a format code on unquoted ``;`` separators."""
    sections = []
    current = []
    in_quotes = False
    escaped = False
    for char in code:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\":
            current.append(char)
            escaped = True
            continue
        if char == '"':
            in_quotes = not in_quotes
        if char == ";" and not in_quotes:
            sections.append("".join(current))
            current = []
            continue
        current.append(char)
    sections.append("".join(current))
    return sections


def _strip_brackets(section: str) -> str:
    """Drop colour/condition/locale brackets, keeping currency symbols."""

    def _replace(match: re.Match) -> str:
        inner = match.group(1)
        if inner.startswith("$"):
            return inner[1:].split("-", 1)[0]
        return ""

    return _BRACKET_PATTERN.sub(_replace, section)


def _literal_text(fragment: str) -> str:
    """Render the literal parts of a format fragment."""
    out = []
    i = 0
    while i < len(fragment):
        char = fragment[i]
        if char == '"':
            end = fragment.find('"', i + 1)
            if end == -1:
                end = len(fragment)
            out.append(fragment[i + 1 : end])
            i = end + 1
            continue
        if char == "\\" and i + 1 < len(fragment):
            out.append(fragment[i + 1])
            i += 2
            continue
        if char == "_" and i + 1 < len(fragment):
            out.append(" ")
            i += 2
            continue
        if char == "*" and i + 1 < len(fragment):
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def format_general(value: Any) -> str:
    """Render a number the way the ``General`` format does."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        text = f"{value:.11g}"
        if "e" in text:
            mantissa, exponent = text.split("e")
            text = f"{mantissa}E{exponent[0]}{int(exponent[1:]):02d}"
        return text
    return str(value)


def _tokenize_date(section: str) -> list[tuple[str, str]]:
    """Split a date/time section into ("token", text) and ("literal", text) parts."""
    tokens: list[tuple[str, str]] = []
    i = 0
    while i < len(section):
        char = section[i]
        if char == '"':
            end = section.find('"', i + 1)
            if end == -1:
                end = len(section)
            tokens.append(("literal", section[i + 1 : end]))
            i = end + 1
            continue
        if char == "\\" and i + 1 < len(section):
            tokens.append(("literal", section[i + 1]))
            i += 2
            continue
        if char in "_*" and i + 1 < len(section):
            tokens.append(("literal", " " if char == "_" else ""))
            i += 2
            continue
        match = _DATE_TOKEN_PATTERN.match(section, i)
        if match:
            tokens.append(("token", match.group(0)))
            i = match.end()
            continue
        tokens.append(("literal", char))
        i += 1
    return tokens


def _mark_minutes(tokens: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Reclassify ``m``/``mm`` tokens that sit next to hours or seconds as minutes."""
    indexes = [i for i, (kind, _) in enumerate(tokens) if kind == "token"]
    result = list(tokens)
    for position, index in enumerate(indexes):
        text = tokens[index][1].lower()
        if text not in ("m", "mm"):
            continue
        previous = tokens[indexes[position - 1]][1].lower() if position > 0 else ""
        following = (
            tokens[indexes[position + 1]][1].lower() if position + 1 < len(indexes) else ""
        )
        if previous.startswith("h") or following.startswith("s"):
            result[index] = ("minute", text)
    return result


def format_datetime(value: Any, code: str) -> str:
    """Render a date, time or datetime with a date/time format code."""
    if isinstance(value, time):
        value = datetime.combine(date(1899, 12, 31), value)
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    section = _strip_brackets(split_sections(code)[0])
    tokens = _mark_minutes(_tokenize_date(section))
    twelve_hour = any(
        kind == "token" and text.lower() in ("am/pm", "a/p") for kind, text in tokens
    )

    out = []
    for kind, text in tokens:
        if kind == "literal":
            out.append(text)
            continue
        if kind == "minute":
            out.append(f"{value.minute:02d}" if len(text) == 2 else str(value.minute))
            continue
        lower = text.lower()
        if lower[0] == "y":
            out.append(f"{value.year % 100:02d}" if len(lower) <= 2 else f"{value.year:04d}")
        elif lower[0] == "m":
            if len(lower) == 1:
                out.append(str(value.month))
            elif len(lower) == 2:
                out.append(f"{value.month:02d}")
            elif len(lower) == 3:
                out.append(_MONTH_NAMES[value.month - 1][:3])
            elif len(lower) == 4:
                out.append(_MONTH_NAMES[value.month - 1])
            else:
                out.append(_MONTH_NAMES[value.month - 1][0])
        elif lower[0] == "d":
            if len(lower) == 1:
                out.append(str(value.day))
            elif len(lower) == 2:
                out.append(f"{value.day:02d}")
            elif len(lower) == 3:
                out.append(_DAY_NAMES[value.weekday()][:3])
            else:
                out.append(_DAY_NAMES[value.weekday()])
        elif lower[0] == "h":
            hour = value.hour
            if twelve_hour:
                hour = hour % 12 or 12
            out.append(f"{hour:02d}" if len(lower) >= 2 else str(hour))
        elif lower[0] == "s":
            out.append(f"{value.second:02d}" if len(lower) >= 2 else str(value.second))
        elif lower == "am/pm":
            out.append("AM" if value.hour < 12 else "PM")
        elif lower == "a/p":
            out.append("A" if value.hour < 12 else "P")
        elif lower.startswith("."):
            digits = len(lower) - 1
            out.append("." + f"{value.microsecond:06d}"[:digits])
    return "".join(out)


def _format_scientific(value: float, section: str, match: re.Match) -> str:
    """Render a ``0.00E+00`` style section."""
    integer, fraction, exponent_sign, exponent_body = match.groups()
    if sum(1 for c in integer if c in "0#?") > 1:
        # Engineering notation (##0.0E+0) is not rendered
        return format_general(value)

    decimals = sum(1 for c in fraction or "" if c in "0#?")
    mantissa, exponent = f"{abs(value):.{decimals}E}".split("E")
    exponent_value = int(exponent)
    if exponent_value < 0:
        sign = "-"
    else:
        sign = "+" if exponent_sign == "+" else ""
    digits = f"{abs(exponent_value):0{len(exponent_body)}d}"

    prefix = _literal_text(section[: match.start()])
    suffix = _literal_text(section[match.end() :])
    negative = "-" if value < 0 else ""
    return f"{negative}{prefix}{mantissa}E{sign}{digits}{suffix}"


def format_number(value: float, code: str) -> str:
    """Render a number with a numeric format code."""
    sections = split_sections(code)
    negative = value < 0
    section = sections[0]
    if negative and len(sections) > 1 and sections[1].strip():
        section = sections[1]
        value = abs(value)
        negative = False
    elif value == 0 and len(sections) > 2 and sections[2].strip():
        section = sections[2]

    section = _strip_brackets(section)
    if section.strip().lower() == "general" or not section.strip():
        return format_general(value)

    # Digit placeholders are only looked for outside of quoted literals
    unquoted = re.sub(r'"[^"]*"|\\.', lambda m: "\x00" * len(m.group(0)), section)

    scientific = _SCIENTIFIC_PATTERN.search(unquoted)
    if scientific:
        return _format_scientific(value, section, scientific)
    if _FRACTION_PATTERN.search(unquoted):
        return format_general(value)

    match = _NUMBER_BODY_PATTERN.search(unquoted)
    if not match:
        return _literal_text(section)

    # Commas right after the digits scale by a thousand each
    end = match.end()
    while end < len(unquoted) and unquoted[end] == ",":
        end += 1

    body = section[match.start() : end]
    prefix = _literal_text(section[: match.start()])
    suffix = _literal_text(section[end:])

    if "%" in prefix or "%" in suffix:
        value = value * 100

    integer_part, _, fraction_part = body.partition(".")
    scaling = len(integer_part) - len(integer_part.rstrip(","))
    scaling += len(fraction_part) - len(fraction_part.rstrip(","))
    if scaling:
        value = value / 1000 ** scaling

    decimals = sum(1 for c in fraction_part if c in "0#?")
    grouping = "," in integer_part.rstrip(",")

    magnitude = abs(value)
    number = f"{magnitude:,.{decimals}f}" if grouping else f"{magnitude:.{decimals}f}"
    sign = "-" if negative and float(number.replace(",", "")) != 0 else ""
    return f"{sign}{prefix}{number}{suffix}"


def render_display_text(value: Any, number_format: Optional[str] = None) -> Optional[str]:
    """
    Render a raw cell value as display text.

    Args:
        value: Raw cell value
        number_format: Format code attached to the cell

    Returns:
        The display text, or None for an empty cell
    """
    if value is None:
        return None

    code = DISPLAY_ALIASES.get(number_format or GENERAL, number_format or GENERAL)

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (datetime, date, time)):
        if not is_date_format(code):
            code = DEFAULT_DATE_FORMAT
        return format_datetime(value, code)
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, (int, float)):
        if code == "@" or code.lower() == "general":
            return format_general(value)
        try:
            return format_number(value, code)
        except (ValueError, IndexError) as e:
            logger.debug(f"Falling back to General for format {code!r}: {e}")
            return format_general(value)
    return str(value)
