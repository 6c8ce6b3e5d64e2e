"""Slide mapping tables for deck templates."""

from .models import MappingSetInfo, MappingTable, SlideMapping
from .registry import (
    DEFAULT_MAPPING_SET,
    MAPPING_TABLES,
    NEW_TOOLS,
    ORG_CHANGE,
    get_mapping_table,
    list_mapping_sets,
)

__all__ = [
    "MappingSetInfo",
    "MappingTable",
    "SlideMapping",
    "DEFAULT_MAPPING_SET",
    "MAPPING_TABLES",
    "NEW_TOOLS",
    "ORG_CHANGE",
    "get_mapping_table",
    "list_mapping_sets",
]
