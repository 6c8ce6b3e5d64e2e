"""Results and errors of deck generation."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class RewriteResult:
    """Result of rewriting the slides of a template container."""

    content: bytes
    pages_rewritten: list[int] = field(default_factory=list)
    pages_skipped: list[int] = field(default_factory=list)  # Mapped but absent from the template
    replacements: int = 0  # Token occurrences substituted across all pages


@dataclass
class GenerationResult:
    """Outcome of one generate request; content is only set on success."""

    success: bool
    mapping_set_id: str
    filename: str
    content: Optional[bytes] = None
    error: Optional[str] = None
    invalid_input: bool = False  # True when the error is an input validation message
    pages_rewritten: list[int] = field(default_factory=list)
    pages_skipped: list[int] = field(default_factory=list)


class DeckFillError(Exception):
    """Base exception for deck generation failures."""

    pass


class InputValidationError(DeckFillError):
    """Exception raised when uploads are missing or of the wrong kind.

    The message is meant to be shown to the user as-is.
    """

    pass


class TemplateReadError(DeckFillError):
    """Exception raised when the template is not a readable container."""

    pass
