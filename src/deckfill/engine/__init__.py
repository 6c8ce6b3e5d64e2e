"""Deck generation engine."""

from .generator import PPTX_MEDIA_TYPE, DeckGenerator
from .models import (
    DeckFillError,
    GenerationResult,
    InputValidationError,
    RewriteResult,
    TemplateReadError,
)
from .rewriter import DocumentRewriter, escape_xml, slide_part_path, substitute_tokens

__all__ = [
    "PPTX_MEDIA_TYPE",
    "DeckGenerator",
    "DeckFillError",
    "GenerationResult",
    "InputValidationError",
    "RewriteResult",
    "TemplateReadError",
    "DocumentRewriter",
    "escape_xml",
    "slide_part_path",
    "substitute_tokens",
]
