"""Tests for the slide rewriter."""

import struct
import zipfile
from io import BytesIO

import pytest

from deckfill.engine import (
    DocumentRewriter,
    TemplateReadError,
    escape_xml,
    slide_part_path,
    substitute_tokens,
)
from deckfill.engine.rewriter import strip_zip64_extra
from deckfill.mapping import MappingTable, SlideMapping
from deckfill.placeholders import PlaceholderResolver, cell, const

from conftest import IMAGE_BYTES, IMAGE_EXTRA, build_sheet, read_entries, slide_xml


def _table(slides: dict[int, dict]) -> MappingTable:
    return MappingTable(
        id="test",
        label="Test",
        slides=[SlideMapping(page=page, placeholders=p) for page, p in slides.items()],
    )


def _const_resolve(spec) -> str:
    return spec.value


@pytest.fixture
def rewriter():
    return DocumentRewriter()


class TestEscapeXml:
    """Test markup escaping."""

    def test_reserved_characters(self):
        """Test all five characters are mapped."""
        assert escape_xml("<a&b>") == "&lt;a&amp;b&gt;"
        assert escape_xml("\"it's\"") == "&quot;it&apos;s&quot;"

    def test_plain_text_untouched(self):
        """Test text without reserved characters passes through."""
        assert escape_xml("Mar 2024 / N/A") == "Mar 2024 / N/A"

    def test_existing_entities_escaped_again(self):
        """Test escaping is applied exactly once to whatever it is given."""
        assert escape_xml("&amp;") == "&amp;amp;"


class TestSubstituteTokens:
    """Test literal token substitution."""

    def test_all_occurrences(self):
        """Test every occurrence of a token is replaced."""
        assert substitute_tokens("[1] and [1]", {"[1]": "Z"}) == ("Z and Z", 2)

    def test_tokens_are_not_patterns(self):
        """Test regex metacharacters are matched literally."""
        text, count = substitute_tokens("a.c abc [L2/L3]", {"a.c": "X", "[L2/L3]": "Y"})

        assert text == "X abc Y"
        assert count == 2

    def test_declared_order_applies(self):
        """Test a value containing a later token is rewritten by that token."""
        text, _ = substitute_tokens("[1] [2]", {"[1]": "see [2]", "[2]": "two"})

        assert text == "see two two"

    def test_value_containing_same_token_not_rematched(self):
        """Test one pass per token."""
        text, count = substitute_tokens("[1]", {"[1]": "[1][1]"})

        assert text == "[1][1]"
        assert count == 1

    def test_missing_token(self):
        """Test tokens absent from the text are ignored."""
        assert substitute_tokens("nothing", {"[9]": "x"}) == ("nothing", 0)


class TestDocumentRewriter:
    """Test rewriting of template containers."""

    def test_slide_part_path(self):
        """Test the slide naming convention."""
        assert slide_part_path(7) == "ppt/slides/slide7.xml"

    def test_end_to_end_skips_absent_page(self, rewriter, make_pptx):
        """Test page 1 is filled and page 2 is neither created nor altered."""
        template = make_pptx({1: "...X..."})
        table = _table({1: {"X": const("hi")}, 2: {"Y": cell("A1")}})
        resolver = PlaceholderResolver(build_sheet({"A1": "value"}))

        result = rewriter.rewrite(template, table, resolver.resolve)
        entries = read_entries(result.content)

        assert entries["ppt/slides/slide1.xml"].decode() == slide_xml("...hi...")
        assert "ppt/slides/slide2.xml" not in entries
        assert result.pages_rewritten == [1]
        assert result.pages_skipped == [2]
        assert result.replacements == 1

    def test_other_entries_identical(self, rewriter, make_pptx):
        """Test untouched entries keep content, order and compression."""
        template = make_pptx({1: "[1]", 3: "[1] untouched"})
        table = _table({1: {"[1]": const("Z")}, 5: {"[1]": const("Q")}})

        result = rewriter.rewrite(template, table, _const_resolve)

        before = read_entries(template)
        after = read_entries(result.content)
        assert list(after) == list(before)
        for name in before:
            if name != "ppt/slides/slide1.xml":
                assert after[name] == before[name]
        assert after["ppt/media/image1.png"] == IMAGE_BYTES

        with zipfile.ZipFile(BytesIO(template)) as src, zipfile.ZipFile(
            BytesIO(result.content)
        ) as out:
            for old, new in zip(src.infolist(), out.infolist()):
                assert new.filename == old.filename
                assert new.compress_type == old.compress_type
                assert new.date_time == old.date_time
                assert new.extra == old.extra
            assert out.getinfo("ppt/media/image1.png").extra == IMAGE_EXTRA

    def test_only_absent_pages_leaves_container_unchanged(self, rewriter, make_pptx):
        """Test a table naming only missing pages changes no entry."""
        template = make_pptx({1: "[1]"})
        table = _table({4: {"[1]": const("Z")}})

        result = rewriter.rewrite(template, table, _const_resolve)

        assert read_entries(result.content) == read_entries(template)
        assert result.pages_rewritten == []

    def test_values_escaped(self, rewriter, make_pptx):
        """Test resolved values are escaped before substitution."""
        template = make_pptx({1: "[Owner]"})
        table = _table({1: {"[Owner]": const("R&D <Ops>")}})

        result = rewriter.rewrite(template, table, _const_resolve)

        slide = read_entries(result.content)["ppt/slides/slide1.xml"].decode()
        assert "<a:t>R&amp;D &lt;Ops&gt;</a:t>" in slide

    def test_non_ascii_text(self, rewriter, make_pptx):
        """Test slide text round-trips as UTF-8."""
        template = make_pptx({1: "Café [1]"})
        table = _table({1: {"[1]": const("Zürich – Q3")}})

        result = rewriter.rewrite(template, table, _const_resolve)

        slide = read_entries(result.content)["ppt/slides/slide1.xml"].decode("utf-8")
        assert "Café Zürich – Q3" in slide

    def test_resolve_called_only_for_present_pages(self, rewriter, make_pptx):
        """Test specs of absent pages are never resolved."""
        template = make_pptx({1: "[1]"})
        table = _table({1: {"[1]": const("a")}, 2: {"[1]": const("b")}})
        seen = []

        def _resolve(spec):
            seen.append(spec.value)
            return spec.value

        rewriter.rewrite(template, table, _resolve)

        assert seen == ["a"]

    def test_invalid_template(self, rewriter):
        """Test non-ZIP templates raise TemplateReadError."""
        with pytest.raises(TemplateReadError):
            rewriter.rewrite(b"not a zip", _table({1: {}}), _const_resolve)

    def test_input_not_mutated(self, rewriter, make_pptx):
        """Test the template bytes are left as they were."""
        template = make_pptx({1: "[1]"})
        snapshot = bytes(template)

        rewriter.rewrite(template, _table({1: {"[1]": const("Z")}}), _const_resolve)

        assert template == snapshot


class TestStripZip64Extra:
    """Test cleaning of ZIP extra fields before an entry is copied."""

    def test_zip64_record_removed(self):
        """Test the zip64 record is dropped and other records kept in order."""
        zip64 = struct.pack("<HHQQ", 0x0001, 16, 10, 20)
        unix = struct.pack("<HH", 0x7875, 3) + b"\x01\x00\x00"

        assert strip_zip64_extra(IMAGE_EXTRA + zip64 + unix) == IMAGE_EXTRA + unix

    def test_without_zip64(self):
        """Test fields without a zip64 record are unchanged."""
        assert strip_zip64_extra(IMAGE_EXTRA) == IMAGE_EXTRA
        assert strip_zip64_extra(b"") == b""
