"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from docpdf.core.config import Settings, get_settings
from docpdf.interfaces.document import BaseDocumentEditor
from docpdf.interfaces.renderer import BaseRenderer
from docpdf.services.pdf_generator import PdfGenerator
from docpdf.strategies.docx import DocxDocumentEditor
from docpdf.strategies.renderers import LibreOfficeRenderer

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        editor = factory.get_document_editor()
        renderer = factory.get_renderer()
        generator = factory.get_pdf_generator()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._editor_cache: BaseDocumentEditor | None = None
        self._renderer_cache: BaseRenderer | None = None
        self._generator_cache: PdfGenerator | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_document_editor(self) -> BaseDocumentEditor:
        """Get the document editor instance.

        Returns:
            A BaseDocumentEditor implementation instance.
        """
        if self._editor_cache is None:
            logger.info(f"Instantiating document editor (strict={self._settings.strict_bookmarks})")

            self._editor_cache = DocxDocumentEditor(strict=self._settings.strict_bookmarks)

        return self._editor_cache

    def get_renderer(self) -> BaseRenderer:
        """Get the PDF renderer instance.

        Returns:
            A BaseRenderer implementation instance.

        Raises:
            ValueError: If the renderer configuration is invalid.
        """
        if self._renderer_cache is None:
            logger.info("Instantiating LibreOffice renderer")

            self._renderer_cache = LibreOfficeRenderer(
                timeout=self._settings.conversion_timeout_seconds,
                settle_delay=self._settings.conversion_settle_seconds,
                executable_path=self._settings.renderer_path,
                max_concurrent=self._settings.max_concurrent_conversions,
                isolate_profile=self._settings.isolate_renderer_profile,
            )

        return self._renderer_cache

    def get_pdf_generator(self) -> PdfGenerator:
        """Get the PDF generator wired with the configured strategies.

        Returns:
            A PdfGenerator instance.
        """
        if self._generator_cache is None:
            self._generator_cache = PdfGenerator(
                editor=self.get_document_editor(),
                renderer=self.get_renderer(),
                templates_dir=self._settings.templates_dir,
                output_dir=self._settings.output_dir,
                keep_output_files=self._settings.keep_output_files,
            )

        return self._generator_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._editor_cache = None
        self._renderer_cache = None
        self._generator_cache = None
        logger.debug("Component factory cache cleared")
