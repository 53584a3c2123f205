"""Shared schemas for mdbinder."""

from mdbinder.schemas.export import ExportResult
from mdbinder.schemas.headings import HeadingDescriptor, PublicHeading, TocNode
from mdbinder.schemas.options import (
    ExportOptions,
    FormattingOptions,
    LeaderStyle,
    PageNumberPosition,
    TocStyle,
)

__all__ = [
    "ExportOptions",
    "ExportResult",
    "FormattingOptions",
    "HeadingDescriptor",
    "LeaderStyle",
    "PageNumberPosition",
    "PublicHeading",
    "TocNode",
    "TocStyle",
]
