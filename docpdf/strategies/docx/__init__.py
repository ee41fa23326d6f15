"""Word-processing (.docx) document strategies.

Variable substitution, bookmark replacement and image injection over
python-docx.
"""

from docpdf.strategies.docx.editor import DocxDocumentEditor

__all__ = [
    "DocxDocumentEditor",
]
