"""mdbinder: bind Markdown files into one numbered, bookmarked PDF."""

from mdbinder.assembler import DocumentAssembler
from mdbinder.exceptions import (
    ConversionError,
    MdBinderError,
    PdfAccessError,
    PdfMutationError,
    RenderError,
    RendererNotAvailableError,
)
from mdbinder.export import export_pdf
from mdbinder.outline import inject_outline
from mdbinder.resolver import resolve_heading_pages
from mdbinder.schemas import (
    ExportOptions,
    ExportResult,
    FormattingOptions,
    HeadingDescriptor,
    PublicHeading,
)

__all__ = [
    "ConversionError",
    "DocumentAssembler",
    "ExportOptions",
    "ExportResult",
    "FormattingOptions",
    "HeadingDescriptor",
    "MdBinderError",
    "PdfAccessError",
    "PdfMutationError",
    "PublicHeading",
    "RenderError",
    "RendererNotAvailableError",
    "export_pdf",
    "inject_outline",
    "resolve_heading_pages",
]
