"""Document PDF API.

Fills Word (.docx) templates with variables, bookmark text and images,
and renders them to PDF with a headless LibreOffice.
"""

__version__ = "0.1.0"
