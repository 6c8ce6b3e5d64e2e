"""Data models for slide mapping tables."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..placeholders.models import PlaceholderSpec


class SlideMapping(BaseModel):
    """Placeholder tokens of one slide and the spec each resolves from."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=1)  # Slide number, matches ppt/slides/slide<page>.xml
    placeholders: dict[str, PlaceholderSpec] = Field(default_factory=dict)

    @field_validator("placeholders")
    @classmethod
    def _tokens_not_empty(cls, value: dict[str, PlaceholderSpec]) -> dict[str, PlaceholderSpec]:
        if any(not token for token in value):
            raise ValueError("Placeholder tokens must be non-empty strings")
        return value


class MappingTable(BaseModel):
    """Ordered slide mappings for one template family."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    slides: list[SlideMapping] = Field(default_factory=list)

    @field_validator("slides")
    @classmethod
    def _pages_unique(cls, value: list[SlideMapping]) -> list[SlideMapping]:
        pages = [slide.page for slide in value]
        duplicates = sorted({page for page in pages if pages.count(page) > 1})
        if duplicates:
            raise ValueError(f"Duplicate slide pages in mapping table: {duplicates}")
        return value

    def pages(self) -> list[int]:
        """Slide numbers in declared order."""
        return [slide.page for slide in self.slides]

    def get(self, page: int) -> Optional[SlideMapping]:
        return next((slide for slide in self.slides if slide.page == page), None)

    @property
    def token_count(self) -> int:
        return sum(len(slide.placeholders) for slide in self.slides)


class MappingSetInfo(BaseModel):
    """Summary of a registered mapping table."""

    id: str
    label: str
    description: str = ""
    page_count: int
    token_count: int
