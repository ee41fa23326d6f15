"""PDF generation service.

Orchestrates a single generation request: copy the template to a working
file, fill it, render it to PDF and hand the bytes back.
"""

import logging
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from docpdf.interfaces.document import BaseDocumentEditor, TemplateNotFoundError
from docpdf.interfaces.renderer import BaseRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedPdf:
    """Result of a generation request.

    Attributes:
        content: The PDF bytes.
        filename: Download name derived from the template's base name.
    """

    content: bytes
    filename: str


class PdfGenerator:
    """Fills .docx templates and renders them to PDF.

    Every request works on its own randomly named copy of the template in
    the output directory, so concurrent requests never share a document.
    """

    def __init__(
        self,
        editor: BaseDocumentEditor,
        renderer: BaseRenderer,
        templates_dir: Path,
        output_dir: Path,
        keep_output_files: bool = False,
    ) -> None:
        """Initialize the generator.

        Args:
            editor: Document editing strategy.
            renderer: PDF rendering strategy.
            templates_dir: Directory templates are resolved against.
            output_dir: Directory for working copies and PDFs.
            keep_output_files: Leave working files on disk after the request.
        """
        self._editor = editor
        self._renderer = renderer
        self._templates_dir = Path(templates_dir).resolve()
        self._output_dir = Path(output_dir).resolve()
        self._keep_output_files = keep_output_files

    @property
    def editor(self) -> BaseDocumentEditor:
        return self._editor

    @property
    def renderer(self) -> BaseRenderer:
        return self._renderer

    def resolve_template(self, template_name: str) -> Path:
        """Resolve a template name inside the templates directory.

        Names that escape the templates directory are treated as unknown.

        Raises:
            TemplateNotFoundError: If no such template file exists.
        """
        if not template_name or not template_name.strip():
            raise TemplateNotFoundError(template_name)

        candidate = (self._templates_dir / template_name).resolve()
        if not candidate.is_relative_to(self._templates_dir) or not candidate.is_file():
            raise TemplateNotFoundError(template_name)

        return candidate

    async def generate_pdf(
        self,
        template_name: str,
        variables: dict[str, str],
        bookmarks: dict[str, str] | None = None,
    ) -> GeneratedPdf:
        """Generate a PDF from a template.

        Args:
            template_name: Template file name relative to the templates directory.
            variables: Placeholder text to replacement text.
            bookmarks: Optional bookmark name to replacement text, applied
                after the variables.

        Returns:
            The generated PDF and its download name.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            DocumentError: If the working copy cannot be edited.
            RendererError: If the PDF conversion fails.
        """
        template_path = self.resolve_template(template_name)

        self._output_dir.mkdir(parents=True, exist_ok=True)
        working_copy = self._output_dir / f"{uuid.uuid4().hex}.docx"
        pdf_path = working_copy.with_suffix(".pdf")

        started = time.monotonic()
        logger.info(f"Generating PDF from template {template_name} ({working_copy.name})")

        try:
            shutil.copyfile(template_path, working_copy)

            await self._editor.replace_variables(str(working_copy), variables)
            if bookmarks:
                await self._editor.replace_bookmark_text(str(working_copy), bookmarks)

            await self._renderer.convert_to_pdf(str(working_copy), str(pdf_path))
            content = pdf_path.read_bytes()
        finally:
            if not self._keep_output_files:
                self._cleanup(working_copy, pdf_path)

        logger.info(
            f"Generated PDF for template {template_name}: {len(content)} bytes "
            f"in {time.monotonic() - started:.2f}s"
        )
        return GeneratedPdf(content=content, filename=f"{Path(template_name).stem}.pdf")

    async def list_template_bookmarks(self, template_name: str) -> list[str]:
        """Return the bookmark names of a template in document order.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        template_path = self.resolve_template(template_name)
        return await self._editor.list_bookmarks(str(template_path))

    @staticmethod
    def _cleanup(*paths: Path) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove {path}: {e}")
