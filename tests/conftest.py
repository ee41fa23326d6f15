"""Shared fixtures: sample .docx templates and stand-in renderers."""

from pathlib import Path

import pytest
from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from docpdf.interfaces.renderer import BaseRenderer, RendererTimeoutError
from docpdf.strategies.docx.bookmarks import list_bookmarks

# Smallest valid PNG: a single transparent pixel.
PNG_1X1 = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000a49444154789c6300010000050001"
    "0d0a2db40000000049454e44ae426082"
)


def add_bookmark(paragraph, name: str, bookmark_id: int, text: str | None = None):
    """Append a bookmark (optionally wrapping a run of text) to a paragraph."""
    start = OxmlElement("w:bookmarkStart")
    start.set(qn("w:id"), str(bookmark_id))
    start.set(qn("w:name"), name)
    paragraph._p.append(start)

    if text is not None:
        paragraph.add_run(text)

    end = OxmlElement("w:bookmarkEnd")
    end.set(qn("w:id"), str(bookmark_id))
    paragraph._p.append(end)
    return start, end


def build_invoice(path: Path) -> Path:
    """Write an invoice-like template exercising every text scope."""
    doc = Document()

    doc.add_paragraph("Invoice date: {{Date}}")

    customer = doc.add_paragraph("Customer: ")
    add_bookmark(customer, "CustomerName", 1, "ACME Corp")

    split = doc.add_paragraph()
    split.add_run("Reference {{Ref")
    split.add_run("No}}")

    doc.add_paragraph("Total due: {{Total}} ({{Total}} incl. tax)")

    logo = doc.add_paragraph()
    add_bookmark(logo, "Logo", 2, "[logo placeholder]")

    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Due"
    table.cell(0, 1).text = "{{Date}}"

    section = doc.sections[0]
    section.header.paragraphs[0].text = "Header issued {{Date}}"
    section.footer.paragraphs[0].text = "Footer {{Company}}"

    doc.save(str(path))
    return path


def read_body_text(path: Path) -> list[str]:
    return [p.text for p in Document(str(path)).paragraphs]


@pytest.fixture
def invoice_docx(tmp_path) -> Path:
    """An invoice template in a temporary directory."""
    return build_invoice(tmp_path / "invoice.docx")


@pytest.fixture
def png_image(tmp_path) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(PNG_1X1)
    return path


@pytest.fixture
def template_dirs(tmp_path):
    """Templates and output directories with invoice.docx installed."""
    templates = tmp_path / "templates"
    output = tmp_path / "output"
    templates.mkdir()
    output.mkdir()
    build_invoice(templates / "invoice.docx")
    return templates, output


class TextDumpRenderer(BaseRenderer):
    """Renderer stand-in producing a fake PDF from the document's text.

    The "PDF" is the ``%PDF-`` signature followed by the body paragraphs,
    which lets tests assert on the content that would have been rendered.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.bookmarks_seen: list[str] = []

    def locate_executable(self) -> str:
        return "/fake/soffice"

    async def convert_to_pdf(self, input_path: str, output_path: str) -> str:
        self.calls.append((input_path, output_path))
        document = Document(input_path)
        self.bookmarks_seen = list_bookmarks(document)
        text = "\n".join(p.text for p in document.paragraphs)
        Path(output_path).write_bytes(b"%PDF-1.4\n" + text.encode("utf-8"))
        return output_path


class TimingOutRenderer(BaseRenderer):
    """Renderer stand-in that always times out."""

    def locate_executable(self) -> str:
        return "/fake/soffice"

    async def convert_to_pdf(self, input_path: str, output_path: str) -> str:
        raise RendererTimeoutError(60)


@pytest.fixture
def dump_renderer() -> TextDumpRenderer:
    return TextDumpRenderer()


@pytest.fixture
def timing_out_renderer() -> TimingOutRenderer:
    return TimingOutRenderer()

