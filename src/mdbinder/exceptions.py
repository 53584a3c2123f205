"""Custom exceptions for mdbinder."""


class MdBinderError(Exception):
    """Base exception for mdbinder operations."""


class ConversionError(MdBinderError):
    """Error during Markdown to HTML conversion."""


class RenderError(MdBinderError):
    """Error while rendering HTML into a PDF."""


class RendererNotAvailableError(RenderError):
    """No usable rendering backend was found."""


class PdfAccessError(MdBinderError):
    """The rendered PDF could not be opened or read."""


class PdfMutationError(PdfAccessError):
    """Writing outline entries or drawing on the PDF failed."""
