"""Unit tests for the PDF generation service."""

import asyncio

import pytest

from docpdf.interfaces.document import TemplateNotFoundError
from docpdf.interfaces.renderer import RendererTimeoutError
from docpdf.services import GeneratedPdf, PdfGenerator
from docpdf.strategies.docx import DocxDocumentEditor


@pytest.fixture
def generator(template_dirs, dump_renderer) -> PdfGenerator:
    templates, output = template_dirs
    return PdfGenerator(
        editor=DocxDocumentEditor(),
        renderer=dump_renderer,
        templates_dir=templates,
        output_dir=output,
    )


class TestResolveTemplate:
    """Test suite for template name resolution."""

    def test_resolves_inside_templates_dir(self, generator, template_dirs):
        templates, _ = template_dirs

        assert generator.resolve_template("invoice.docx") == (templates / "invoice.docx").resolve()

    @pytest.mark.parametrize("name", ["missing.docx", "", "   ", "../templates"])
    def test_unknown_names(self, generator, name):
        with pytest.raises(TemplateNotFoundError):
            generator.resolve_template(name)

    def test_path_outside_templates_dir_is_not_found(self, generator, template_dirs, tmp_path):
        """Test that an existing file outside the templates directory is rejected."""
        (tmp_path / "secret.docx").write_bytes(b"PK")

        with pytest.raises(TemplateNotFoundError, match="secret.docx"):
            generator.resolve_template("../secret.docx")


class TestGeneratePdf:
    """Test suite for PdfGenerator.generate_pdf."""

    def test_fills_template_and_renders(self, generator, dump_renderer):
        result = asyncio.run(
            generator.generate_pdf(
                "invoice.docx",
                {"{{Date}}": "2024-01-01", "{{Total}}": "100"},
            )
        )

        assert isinstance(result, GeneratedPdf)
        assert result.filename == "invoice.pdf"
        assert result.content.startswith(b"%PDF-")
        text = result.content.decode("utf-8")
        assert "Invoice date: 2024-01-01" in text
        assert "Total due: 100 (100 incl. tax)" in text
        assert "Customer: ACME Corp" in text
        assert "CustomerName" in dump_renderer.bookmarks_seen

    def test_template_is_never_modified(self, generator, template_dirs):
        templates, _ = template_dirs
        before = (templates / "invoice.docx").read_bytes()

        asyncio.run(generator.generate_pdf("invoice.docx", {"{{Date}}": "2024-01-01"}))

        assert (templates / "invoice.docx").read_bytes() == before

    def test_applies_bookmarks_after_variables(self, generator):
        result = asyncio.run(
            generator.generate_pdf(
                "invoice.docx",
                {"{{Date}}": "2024-01-01"},
                bookmarks={"CustomerName": "Globex"},
            )
        )

        text = result.content.decode("utf-8")
        assert "Customer: Globex" in text
        assert "ACME Corp" not in text

    def test_working_files_are_unique_and_removed(self, generator, dump_renderer, template_dirs):
        _, output = template_dirs

        asyncio.run(generator.generate_pdf("invoice.docx", {}))
        asyncio.run(generator.generate_pdf("invoice.docx", {}))

        inputs = [call[0] for call in dump_renderer.calls]
        assert len(set(inputs)) == 2
        assert all(path.endswith(".docx") for path in inputs)
        assert list(output.iterdir()) == []

    def test_keep_output_files(self, template_dirs, dump_renderer):
        templates, output = template_dirs
        generator = PdfGenerator(
            editor=DocxDocumentEditor(),
            renderer=dump_renderer,
            templates_dir=templates,
            output_dir=output,
            keep_output_files=True,
        )

        asyncio.run(generator.generate_pdf("invoice.docx", {}))

        suffixes = sorted(path.suffix for path in output.iterdir())
        assert suffixes == [".docx", ".pdf"]

    def test_unknown_template_renders_nothing(self, generator, dump_renderer, template_dirs):
        _, output = template_dirs

        with pytest.raises(TemplateNotFoundError, match="Template not found: nope.docx"):
            asyncio.run(generator.generate_pdf("nope.docx", {}))

        assert dump_renderer.calls == []
        assert list(output.iterdir()) == []

    def test_renderer_failure_propagates_and_cleans_up(self, template_dirs, timing_out_renderer):
        templates, output = template_dirs
        generator = PdfGenerator(
            editor=DocxDocumentEditor(),
            renderer=timing_out_renderer,
            templates_dir=templates,
            output_dir=output,
        )

        with pytest.raises(RendererTimeoutError, match="timed out after 60 seconds"):
            asyncio.run(generator.generate_pdf("invoice.docx", {"{{Date}}": "x"}))

        assert list(output.iterdir()) == []

    def test_filename_uses_template_base_name(self, generator, template_dirs):
        templates, _ = template_dirs
        (templates / "letters").mkdir()
        (templates / "letters" / "welcome.docx").write_bytes((templates / "invoice.docx").read_bytes())

        result = asyncio.run(generator.generate_pdf("letters/welcome.docx", {}))

        assert result.filename == "welcome.pdf"


class TestListTemplateBookmarks:
    """Test suite for PdfGenerator.list_template_bookmarks."""

    def test_lists_bookmarks(self, generator):
        assert asyncio.run(generator.list_template_bookmarks("invoice.docx")) == ["CustomerName", "Logo"]

    def test_unknown_template(self, generator):
        with pytest.raises(TemplateNotFoundError):
            asyncio.run(generator.list_template_bookmarks("nope.docx"))
