"""Heading and table-of-contents models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HeadingDescriptor(BaseModel):
    """One recognized heading line, in document order.

    Attributes:
        markdown_level: Raw heading depth as written (number of ``#``).
        logical_level: 0 for a level-1 heading, otherwise ``markdown_level - 1``.
        text: Heading text without the ``#`` marker or surrounding whitespace.
        numbering: Synthesized hierarchical label, empty when not numbered.
        anchor: In-document link target derived from numbering and text.
    """

    model_config = ConfigDict(frozen=True)

    markdown_level: int = Field(..., ge=1, le=6)
    logical_level: int = Field(..., ge=0, le=5)
    text: str
    numbering: str = ""
    anchor: str = ""

    @property
    def label(self) -> str:
        """Numbering followed by text, or just the text when not numbered."""
        return f"{self.numbering} {self.text}" if self.numbering else self.text


class PublicHeading(BaseModel):
    """Externally consumed heading whose page is filled in after rendering."""

    model_config = ConfigDict(validate_assignment=True)

    level: int = Field(..., ge=1)
    label: str
    anchor: str = ""
    page: int = Field(default=0, ge=0)

    @property
    def href(self) -> str:
        return f"#{self.anchor}"


class TocNode(BaseModel):
    """A hierarchical table-of-contents entry."""

    level: int
    title: str
    href: str
    children: list["TocNode"] = Field(default_factory=list)
