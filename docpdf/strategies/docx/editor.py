"""python-docx document editor strategy.

Implements the document mutation API on top of the package helpers. The
blocking open/mutate/save cycle of each operation runs on a worker thread.
"""

import asyncio
import logging

from docpdf.interfaces.document import BaseDocumentEditor
from docpdf.strategies.docx import bookmarks, images
from docpdf.strategies.docx.package import open_document
from docpdf.strategies.docx.substitutor import substitute_variables

logger = logging.getLogger(__name__)


class DocxDocumentEditor(BaseDocumentEditor):
    """Edits .docx packages in place using python-docx.

    Every mutating operation saves the document exactly once, at the end of
    a successful run. Missing bookmarks are skipped unless ``strict`` is set.
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize the editor.

        Args:
            strict: Raise BookmarkNotFoundError for bookmarks that cannot be
                located instead of skipping them.
        """
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    async def replace_variables(self, document_path: str, variables: dict[str, str]) -> None:
        await asyncio.to_thread(self._replace_variables, document_path, variables)

    async def replace_bookmark_text(
        self, document_path: str, bookmark_values: dict[str, str]
    ) -> list[str]:
        return await asyncio.to_thread(self._replace_bookmark_text, document_path, bookmark_values)

    async def replace_image(self, document_path: str, bookmark_name: str, image_path: str) -> bool:
        return await asyncio.to_thread(self._replace_image, document_path, bookmark_name, image_path)

    async def list_bookmarks(self, document_path: str) -> list[str]:
        return await asyncio.to_thread(self._list_bookmarks, document_path)

    def _replace_variables(self, document_path: str, variables: dict[str, str]) -> None:
        with open_document(document_path) as document:
            changed = substitute_variables(document, variables)
            document.save(document_path)

        logger.info(
            f"Successfully replaced variables in document: {document_path} "
            f"({changed} text leaves changed)"
        )

    def _replace_bookmark_text(self, document_path: str, bookmark_values: dict[str, str]) -> list[str]:
        with open_document(document_path) as document:
            replaced = bookmarks.replace_bookmark_text(document, bookmark_values, strict=self._strict)
            document.save(document_path)

        logger.info(
            f"Successfully replaced bookmarks in document: {document_path} "
            f"({len(replaced)}/{len(bookmark_values)} replaced)"
        )
        return replaced

    def _replace_image(self, document_path: str, bookmark_name: str, image_path: str) -> bool:
        # Format and existence checks happen before the document is touched.
        images.validate_image(image_path)

        with open_document(document_path) as document:
            inserted = images.replace_image(document, bookmark_name, image_path, strict=self._strict)
            if inserted:
                document.save(document_path)

        if inserted:
            logger.info(f"Successfully replaced image in document: {document_path}")
        return inserted

    def _list_bookmarks(self, document_path: str) -> list[str]:
        with open_document(document_path) as document:
            return bookmarks.list_bookmarks(document)

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}
