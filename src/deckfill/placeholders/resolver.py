"""Resolver turning placeholder specs into replacement text."""

import logging

from ..sheets import SheetSnapshot
from .dates import month_year_text
from .models import (
    NA,
    CellSpec,
    ConstSpec,
    JoinSpec,
    MonthYearFormat,
    MonthYearSpec,
    PlaceholderSpec,
)

logger = logging.getLogger(__name__)


class PlaceholderResolver:
    """Resolve placeholder specs against the first sheet of a workbook."""

    def __init__(self, sheet: SheetSnapshot):
        """
        Initialize the resolver.

        Args:
            sheet: Parsed first worksheet; never modified
        """
        self.sheet = sheet

    def get_cell(self, ref: str) -> str:
        """
        Trimmed display text of a cell, or N/A.

        Absent cells, cells whose raw value is empty and cells whose
        display text is blank all resolve to N/A.
        """
        cell = self.sheet.get(ref)
        if cell is None or cell.is_blank:
            return NA

        value = cell.display_text.strip()
        return value if value else NA

    def month_year(self, ref: str, fmt: MonthYearFormat = MonthYearFormat.MON_YYYY) -> str:
        """Month and year of a date-like cell, or N/A."""
        return month_year_text(self.sheet.get(ref), fmt, self.sheet.epoch)

    def join(self, refs: list[str], join_with: str) -> str:
        """Join the non-empty, non-N/A values of several cells."""
        parts = [self.get_cell(ref).strip() for ref in refs]
        parts = [part for part in parts if part and part != NA]
        if not parts:
            return NA
        return join_with.join(parts)

    def resolve(self, spec: PlaceholderSpec) -> str:
        """
        Resolve a single spec to its replacement text.

        Args:
            spec: One of CellSpec, ConstSpec, JoinSpec or MonthYearSpec

        Returns:
            The resolved string; resolution gaps yield N/A
        """
        if isinstance(spec, ConstSpec):
            return spec.value

        try:
            if isinstance(spec, CellSpec):
                return self.get_cell(spec.ref)

            elif isinstance(spec, JoinSpec):
                return self.join(spec.refs, spec.join_with)

            elif isinstance(spec, MonthYearSpec):
                return self.month_year(spec.ref, spec.format)

        except Exception as e:
            logger.error(f"Error resolving {spec!r}: {e}")
            return NA

        raise TypeError(f"Unknown placeholder spec: {spec!r}")

    def resolve_all(self, placeholders: dict[str, PlaceholderSpec]) -> dict[str, str]:
        """Resolve every spec of a placeholder set, keeping declared token order."""
        resolved = {}
        for token, spec in placeholders.items():
            resolved[token] = self.resolve(spec)
            logger.debug(f"Resolved {token!r} -> {resolved[token]!r}")
        return resolved
