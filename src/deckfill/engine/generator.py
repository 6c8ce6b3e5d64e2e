"""Deck generation: template + workbook + mapping set -> filled deck."""

import logging
from pathlib import PurePath
from typing import Optional

from ..config import Settings, settings as default_settings
from ..mapping import get_mapping_table
from ..placeholders import PlaceholderResolver
from ..sheets import load_first_sheet
from .models import GenerationResult, InputValidationError
from .rewriter import DocumentRewriter

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSIONS = (".pptx",)
WORKBOOK_EXTENSIONS = (".xlsx", ".xls")

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


class DeckGenerator:
    """
    Fills a deck template with values from the first sheet of a workbook.

    Each call to generate() is a self-contained, synchronous transform:
    the inputs are never modified and nothing is shared between calls
    except the read-only mapping registry.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rewriter: Optional[DocumentRewriter] = None,
    ):
        self.settings = settings or default_settings
        self.rewriter = rewriter or DocumentRewriter()

    def validate_inputs(
        self,
        template: Optional[bytes],
        workbook: Optional[bytes],
        template_filename: Optional[str] = None,
        workbook_filename: Optional[str] = None,
    ) -> None:
        """
        Check that both uploads are present and of an accepted kind.

        File names are optional; when given, their extensions are checked.

        Raises:
            InputValidationError: With a message suitable for the user
        """
        if not template:
            raise InputValidationError("Missing 'template' file upload.")
        if not workbook:
            raise InputValidationError("Missing 'excel' file upload.")

        if template_filename and not _has_extension(template_filename, TEMPLATE_EXTENSIONS):
            raise InputValidationError("Template must be a .pptx file.")
        if workbook_filename and not _has_extension(workbook_filename, WORKBOOK_EXTENSIONS):
            raise InputValidationError("Excel must be a .xlsx or .xls file.")

        limit = self.settings.max_upload_bytes
        for label, data in (("Template", template), ("Excel file", workbook)):
            if limit and len(data) > limit:
                raise InputValidationError(
                    f"{label} is too large ({len(data)} bytes, limit {limit} bytes)."
                )

    def generate(
        self,
        mapping_set_id: Optional[str],
        template: Optional[bytes],
        workbook: Optional[bytes],
        template_filename: Optional[str] = None,
        workbook_filename: Optional[str] = None,
        output_filename: Optional[str] = None,
    ) -> GenerationResult:
        """
        Produce a filled deck.

        Args:
            mapping_set_id: Registered mapping table id; unknown ids use the default
            template: Raw .pptx bytes
            workbook: Raw .xlsx/.xls bytes
            template_filename: Upload name of the template, if known
            workbook_filename: Upload name of the workbook, if known
            output_filename: Name to suggest for the result

        Returns:
            GenerationResult; on failure content is None and error holds the message
        """
        table = get_mapping_table(mapping_set_id, default=self.settings.default_mapping_set)
        filename = output_filename or self.settings.output_filename

        try:
            self.validate_inputs(template, workbook, template_filename, workbook_filename)
        except InputValidationError as e:
            logger.info(f"Rejected generate request: {e}")
            return GenerationResult(
                success=False,
                mapping_set_id=table.id,
                filename=filename,
                error=str(e),
                invalid_input=True,
            )

        try:
            logger.info(f"Generating deck with mapping set '{table.id}'")
            sheet = load_first_sheet(workbook, workbook_filename)
            resolver = PlaceholderResolver(sheet)
            rewrite = self.rewriter.rewrite(template, table, resolver.resolve)

            return GenerationResult(
                success=True,
                mapping_set_id=table.id,
                filename=filename,
                content=rewrite.content,
                pages_rewritten=rewrite.pages_rewritten,
                pages_skipped=rewrite.pages_skipped,
            )

        except Exception as e:
            logger.error(f"Deck generation failed: {e}")
            return GenerationResult(
                success=False,
                mapping_set_id=table.id,
                filename=filename,
                error=f"Generate failed: {e}",
            )


def _has_extension(filename: str, extensions: tuple[str, ...]) -> bool:
    return PurePath(filename).suffix.lower() in extensions
