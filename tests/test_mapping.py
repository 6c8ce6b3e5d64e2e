"""Tests for slide mapping tables and the registry."""

import logging

import pytest
from pydantic import ValidationError

from deckfill.mapping import (
    DEFAULT_MAPPING_SET,
    MAPPING_TABLES,
    NEW_TOOLS,
    ORG_CHANGE,
    MappingTable,
    SlideMapping,
    get_mapping_table,
    list_mapping_sets,
)
from deckfill.placeholders import CellSpec, ConstSpec, JoinSpec, cell, const, join


class TestMappingModels:
    """Test SlideMapping and MappingTable validation."""

    def test_pages_must_be_positive(self):
        """Test page numbers start at 1."""
        with pytest.raises(ValidationError):
            SlideMapping(page=0, placeholders={"X": const("a")})

    def test_tokens_must_be_non_empty(self):
        """Test empty tokens are rejected."""
        with pytest.raises(ValidationError):
            SlideMapping(page=1, placeholders={"": const("a")})

    def test_duplicate_pages_rejected(self):
        """Test a table cannot describe the same slide twice."""
        with pytest.raises(ValidationError):
            MappingTable(
                id="dup",
                label="Duplicate",
                slides=[SlideMapping(page=2), SlideMapping(page=2)],
            )

    def test_specs_parse_from_dicts(self):
        """Test tables can be declared as plain data."""
        table = MappingTable(
            id="plain",
            label="Plain",
            slides=[
                {
                    "page": 1,
                    "placeholders": {
                        "X": {"type": "const", "value": "hi"},
                        "Y": {"type": "cell", "ref": "A1"},
                    },
                }
            ],
        )

        assert isinstance(table.get(1).placeholders["X"], ConstSpec)
        assert isinstance(table.get(1).placeholders["Y"], CellSpec)
        assert table.get(2) is None

    def test_pages_and_token_count(self):
        """Test helpers on MappingTable."""
        table = MappingTable(
            id="t",
            label="T",
            slides=[
                SlideMapping(page=3, placeholders={"A": cell("A1"), "B": cell("B1")}),
                SlideMapping(page=1, placeholders={"C": cell("C1")}),
            ],
        )

        assert table.pages() == [3, 1]
        assert table.token_count == 3


class TestRegistry:
    """Test the registered mapping tables."""

    def test_registered_ids(self):
        """Test both template families are registered."""
        assert set(MAPPING_TABLES) == {"org_change", "new_tools"}
        assert DEFAULT_MAPPING_SET == "org_change"

    def test_registry_is_read_only(self):
        """Test the registry cannot be modified."""
        with pytest.raises(TypeError):
            MAPPING_TABLES["other"] = ORG_CHANGE

    def test_lookup(self):
        """Test lookup by id."""
        assert get_mapping_table("new_tools") is NEW_TOOLS
        assert get_mapping_table(" org_change ") is ORG_CHANGE

    def test_unknown_id_falls_back(self, caplog):
        """Test unknown ids use the default table."""
        with caplog.at_level(logging.WARNING):
            table = get_mapping_table("quarterly_review")

        assert table is ORG_CHANGE
        assert "quarterly_review" in caplog.text

    def test_empty_id_falls_back(self):
        """Test missing ids use the default table."""
        assert get_mapping_table(None) is ORG_CHANGE
        assert get_mapping_table("") is ORG_CHANGE

    def test_custom_default(self):
        """Test the fallback id can be overridden."""
        assert get_mapping_table("nope", default="new_tools") is NEW_TOOLS
        assert get_mapping_table("nope", default="also_nope") is ORG_CHANGE

    def test_org_change_catalogue(self):
        """Test representative entries of the org change table."""
        assert ORG_CHANGE.pages() == [1, 3, 4, 5, 6, 7, 8, 9, 10, 11]
        assert ORG_CHANGE.get(1).placeholders["NAME OF PROJECT"] == cell("F2")
        assert ORG_CHANGE.get(6).placeholders["[3]"] == join("S2", "T2")
        assert ORG_CHANGE.get(11).placeholders["[2]"] == cell("DI2")

    def test_new_tools_catalogue(self):
        """Test representative entries of the new tools table."""
        assert NEW_TOOLS.pages() == [1, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13]
        assert NEW_TOOLS.get(4).placeholders["[2]"] == const("N/A")
        assert isinstance(NEW_TOOLS.get(8).placeholders["[2]"], JoinSpec)
        assert list(NEW_TOOLS.get(10).placeholders) == [f"[{i}]" for i in range(1, 8)]

    def test_list_mapping_sets(self):
        """Test the registry summary."""
        infos = {info.id: info for info in list_mapping_sets()}

        assert infos["org_change"].label == "Organization Change"
        assert infos["org_change"].page_count == 10
        assert infos["new_tools"].page_count == 12
        assert infos["new_tools"].token_count == NEW_TOOLS.token_count
