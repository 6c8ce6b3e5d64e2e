"""Registered mapping tables, one per deck template family.

Each table lists, per slide, the literal tokens found in the template and
where their text comes from in the first sheet of the uploaded workbook
(row 2 holds the project being reported on). Adding a template family
means adding a table here.
"""

import logging
from types import MappingProxyType
from typing import Optional

from ..placeholders.models import PlaceholderSpec, cell, const, join
from .models import MappingSetInfo, MappingTable, SlideMapping

logger = logging.getLogger(__name__)

DEFAULT_MAPPING_SET = "org_change"


def _table(
    table_id: str,
    label: str,
    description: str,
    slides: dict[int, dict[str, PlaceholderSpec]],
) -> MappingTable:
    return MappingTable(
        id=table_id,
        label=label,
        description=description,
        slides=[
            SlideMapping(page=page, placeholders=placeholders)
            for page, placeholders in slides.items()
        ],
    )


ORG_CHANGE = _table(
    "org_change",
    "Organization Change",
    "Upload the org change PPTX template + Excel file to generate the filled deck.",
    {
        1: {
            "NAME OF PROJECT": cell("F2"),
            "TYPE OF PROJECT": cell("K2"),
        },
        3: {
            "[Description]": cell("M2"),
        },
        4: {
            "[L2/L3]": cell("I2"),
            "[Owner]": cell("G2"),
            "[Lead]": cell("H2"),
            "[Comms]": cell("J2"),
        },
        5: {
            "[Date]": cell("N2"),
            "[Phases]": cell("P2"),
        },
        6: {
            "[1]": cell("Q2"),
            "[2]": cell("R2"),
            "[3]": join("S2", "T2"),
            "[4]": cell("V2"),
        },
        7: {
            "[1]": cell("W2"),
        },
        8: {
            "[1]": cell("L2"),
            "[2]": join("AA2", "AB2"),
            "[3]": cell("Y2"),
        },
        9: {
            "[1]": cell("Z2"),
            "[2]": cell("AD2"),
        },
        10: {
            "[1]": cell("AF2"),
            "[2]": cell("AG2"),
        },
        11: {
            "[1]": cell("DG2"),
            "[2]": cell("DI2"),
        },
    },
)

NEW_TOOLS = _table(
    "new_tools",
    "New Tools / Surveys / Trainings",
    "Upload the New Tools/Surveys/Trainings template + Excel file to generate the filled deck.",
    {
        1: {
            "NAME OF PROJECT": cell("F2"),
            "TYPE OF PROJECT": cell("K2"),
        },
        3: {
            "[1]": cell("BZ2"),
        },
        4: {
            "[1]": cell("I2"),
            "[2]": const("N/A"),
            "[3]": cell("G2"),
            "[4]": cell("H2"),
            "[5]": cell("J2"),
        },
        5: {
            "[1]": cell("CA2"),
            "[2]": const("N/A"),
        },
        6: {
            "[1]": const("N/A"),
            "[2]": const("N/A"),
            "[3]": const("N/A"),
            "[4]": const("N/A"),
        },
        7: {
            "[1]": const("N/A"),
        },
        8: {
            "[1]": cell("BW2"),
            # join_with="\n" gives a line break instead
            "[2]": join("CD2", "CE2"),
            "[3]": cell("CC2"),
        },
        9: {
            "[1]": cell("BX2"),
            "[2]": cell("CH2"),
            "[3]": cell("CI2"),
            "[4]": cell("BN2"),
        },
        10: {
            "[1]": cell("CJ2"),
            "[2]": cell("CK2"),
            "[3]": cell("CL2"),
            "[4]": cell("CM2"),
            "[5]": cell("CN2"),
            "[6]": cell("CO2"),
            "[7]": cell("CP2"),
        },
        11: {
            "[1]": cell("CQ2"),
            "[2]": cell("CR2"),
            "[3]": cell("CS2"),
            "[4]": cell("CT2"),
            "[5]": cell("CU2"),
            "[6]": cell("CV2"),
            "[7]": cell("CX2"),
        },
        12: {
            "[1]": cell("CY2"),
            "[2]": cell("CZ2"),
            "[3]": cell("DB2"),
            "[4]": cell("DC2"),
        },
        13: {
            "[1]": cell("DG2"),
            "[2]": cell("DI2"),
        },
    },
)

MAPPING_TABLES = MappingProxyType({table.id: table for table in (ORG_CHANGE, NEW_TOOLS)})


def get_mapping_table(mapping_set_id: Optional[str], default: str = DEFAULT_MAPPING_SET) -> MappingTable:
    """
    Look up a mapping table by id.

    Unknown or empty ids fall back to the default table rather than failing.

    Args:
        mapping_set_id: Caller-supplied table id (e.g. "new_tools")
        default: Id used when mapping_set_id is not registered

    Returns:
        The registered MappingTable
    """
    key = (mapping_set_id or "").strip()
    table = MAPPING_TABLES.get(key)
    if table is not None:
        return table

    if key:
        logger.warning(f"Unknown mapping set '{key}', using '{default}'")
    return MAPPING_TABLES.get(default, MAPPING_TABLES[DEFAULT_MAPPING_SET])


def list_mapping_sets() -> list[MappingSetInfo]:
    """Summaries of every registered table, in registration order."""
    return [
        MappingSetInfo(
            id=table.id,
            label=table.label,
            description=table.description,
            page_count=len(table.slides),
            token_count=table.token_count,
        )
        for table in MAPPING_TABLES.values()
    ]
