"""Application services."""

from docpdf.services.pdf_generator import GeneratedPdf, PdfGenerator

__all__ = [
    "GeneratedPdf",
    "PdfGenerator",
]
