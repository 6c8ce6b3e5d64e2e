"""Slide text rewriting inside a presentation container."""

import logging
import struct
import zipfile
from io import BytesIO
from typing import Callable
from xml.sax.saxutils import escape

from ..mapping.models import MappingTable
from ..placeholders.models import PlaceholderSpec
from .models import RewriteResult, TemplateReadError

logger = logging.getLogger(__name__)

SLIDE_PART_TEMPLATE = "ppt/slides/slide{page}.xml"

ZIP64_EXTRA_ID = 0x0001

# "&", "<" and ">" are always handled by escape()
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Escape the five XML reserved characters, ampersand first."""
    return escape(text, _XML_ENTITIES)


def slide_part_path(page: int) -> str:
    """Container entry path of a slide number."""
    return SLIDE_PART_TEMPLATE.format(page=page)


def substitute_tokens(text: str, replacements: dict[str, str]) -> tuple[str, int]:
    """
    Replace every literal occurrence of each token, one token at a time.

    Tokens are applied in the dict's order, each against the text left by
    the previous one. A replacement value that contains a later token will
    therefore have that token replaced too.

    Args:
        text: Slide XML
        replacements: token -> already-escaped replacement value

    Returns:
        Tuple of (rewritten text, number of occurrences replaced)
    """
    count = 0
    for token, value in replacements.items():
        occurrences = text.count(token)
        if occurrences:
            text = text.replace(token, value)
            count += occurrences
    return text, count


class DocumentRewriter:
    """
    Rewrites slide parts of a .pptx container in memory.

    Only the slide parts named by the mapping table are decoded and
    rewritten; every other entry is copied through with its original
    content, order, timestamp and compression method.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def rewrite(
        self,
        template: bytes,
        table: MappingTable,
        resolve: Callable[[PlaceholderSpec], str],
    ) -> RewriteResult:
        """
        Fill the template's slides according to a mapping table.

        Args:
            template: Raw .pptx bytes
            table: Slide mappings, processed in declared order
            resolve: Turns a placeholder spec into unescaped text

        Returns:
            RewriteResult with the new container bytes

        Raises:
            TemplateReadError: If the template is not a readable ZIP container
        """
        try:
            source = zipfile.ZipFile(BytesIO(template))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise TemplateReadError(f"Template is not a valid .pptx file: {e}") from e

        with source:
            names = set(source.namelist())
            rewritten: dict[str, bytes] = {}
            result = RewriteResult(content=b"")

            for slide in table.slides:
                path = slide_part_path(slide.page)
                if path not in names:
                    logger.debug(f"Template has no {path}, skipping slide {slide.page}")
                    result.pages_skipped.append(slide.page)
                    continue

                xml = self._read_text(source, path)
                replacements = {
                    token: escape_xml(resolve(spec)) for token, spec in slide.placeholders.items()
                }
                xml, count = substitute_tokens(xml, replacements)

                rewritten[path] = xml.encode(self.encoding)
                result.pages_rewritten.append(slide.page)
                result.replacements += count
                logger.debug(f"Slide {slide.page}: {count} replacements")

            result.content = self._repackage(source, rewritten)

        logger.info(
            f"Rewrote {len(result.pages_rewritten)} slides "
            f"({result.replacements} replacements, {len(result.pages_skipped)} skipped)"
        )
        return result

    def _read_text(self, source: zipfile.ZipFile, path: str) -> str:
        try:
            return source.read(path).decode(self.encoding)
        except (zipfile.BadZipFile, UnicodeDecodeError) as e:
            raise TemplateReadError(f"Cannot read {path} from template: {e}") from e

    def _repackage(self, source: zipfile.ZipFile, rewritten: dict[str, bytes]) -> bytes:
        """Write every entry of the source into a new container."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w") as target:
            target.comment = source.comment
            for info in source.infolist():
                data = rewritten.get(info.filename)
                if data is None:
                    data = source.read(info)
                target.writestr(self._copy_info(info), data)
        return buffer.getvalue()

    @staticmethod
    def _copy_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
        """Fresh ZipInfo carrying the entry's name, timestamp, method, attributes and extra field."""
        copy = zipfile.ZipInfo(info.filename, date_time=info.date_time)
        copy.compress_type = info.compress_type
        copy.external_attr = info.external_attr
        copy.create_system = info.create_system
        copy.comment = info.comment
        copy.extra = strip_zip64_extra(info.extra)
        return copy


def strip_zip64_extra(extra: bytes) -> bytes:
    """
    Drop the zip64 record from a ZIP extra field, keeping every other record.

    zipfile writes its own zip64 record when an entry needs one.
    """
    kept = []
    offset = 0
    while offset + 4 <= len(extra):
        header_id, size = struct.unpack("<HH", extra[offset : offset + 4])
        end = offset + 4 + size
        if header_id != ZIP64_EXTRA_ID:
            kept.append(extra[offset:end])
        offset = end
    # Trailing bytes too short for a record header are kept as they were
    kept.append(extra[offset:])
    return b"".join(kept)
