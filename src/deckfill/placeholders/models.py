"""Data models for placeholder specs."""

from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

# Canonical "no value" text substituted whenever a spec cannot produce content
NA = "N/A"


class MonthYearFormat(str, Enum):
    """Rendering of a month/year pair."""

    MON_YYYY = "Mon YYYY"  # Mar 2024
    MMMM_YYYY = "MMMM YYYY"  # March 2024
    MM_YYYY = "MM/YYYY"  # 03/2024


class CellSpec(BaseModel):
    """Display text of one cell."""

    model_config = ConfigDict(frozen=True)

    type: Literal["cell"] = "cell"
    ref: str  # A1 reference on the first sheet


class ConstSpec(BaseModel):
    """Fixed literal, independent of the workbook."""

    model_config = ConfigDict(frozen=True)

    type: Literal["const"] = "const"
    value: str


class JoinSpec(BaseModel):
    """Several cells joined with a separator, N/A values dropped."""

    model_config = ConfigDict(frozen=True)

    type: Literal["join"] = "join"
    refs: list[str]
    join_with: str = " "


class MonthYearSpec(BaseModel):
    """Month and year taken from a date-like cell."""

    model_config = ConfigDict(frozen=True)

    type: Literal["month_year"] = "month_year"
    ref: str
    format: MonthYearFormat = MonthYearFormat.MON_YYYY


PlaceholderSpec = Annotated[
    Union[CellSpec, ConstSpec, JoinSpec, MonthYearSpec],
    Field(discriminator="type"),
]


def cell(ref: str) -> CellSpec:
    return CellSpec(ref=ref)


def const(value: str) -> ConstSpec:
    return ConstSpec(value=value)


def join(*refs: str, join_with: str = " ") -> JoinSpec:
    return JoinSpec(refs=list(refs), join_with=join_with)


def month_year(ref: str, format: MonthYearFormat = MonthYearFormat.MON_YYYY) -> MonthYearSpec:
    return MonthYearSpec(ref=ref, format=format)
