"""Abstract base classes for document editing and rendering strategies."""

from docpdf.interfaces.document import (
    BaseDocumentEditor,
    BookmarkNotFoundError,
    DocumentError,
    DocumentOpenError,
    ImageFileMissingError,
    TemplateNotFoundError,
    UnsupportedImageFormatError,
)
from docpdf.interfaces.renderer import (
    BaseRenderer,
    ConversionJob,
    ConversionState,
    RendererError,
    RendererExitError,
    RendererNotFoundError,
    RendererOutputMissingError,
    RendererTimeoutError,
)

__all__ = [
    "BaseDocumentEditor",
    "BaseRenderer",
    "ConversionJob",
    "ConversionState",
    "DocumentError",
    "TemplateNotFoundError",
    "DocumentOpenError",
    "UnsupportedImageFormatError",
    "ImageFileMissingError",
    "BookmarkNotFoundError",
    "RendererError",
    "RendererNotFoundError",
    "RendererTimeoutError",
    "RendererExitError",
    "RendererOutputMissingError",
]
