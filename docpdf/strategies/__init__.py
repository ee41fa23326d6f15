"""Concrete strategy implementations."""

from docpdf.strategies.docx import (
    DocxDocumentEditor,
)
from docpdf.strategies.renderers import (
    LibreOfficeRenderer,
)

__all__ = [
    "DocxDocumentEditor",
    "LibreOfficeRenderer",
]
