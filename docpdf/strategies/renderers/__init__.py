"""Concrete PDF renderer implementations."""

from docpdf.strategies.renderers.libreoffice import LibreOfficeRenderer

__all__ = [
    "LibreOfficeRenderer",
]
