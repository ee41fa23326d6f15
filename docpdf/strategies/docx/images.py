"""Image injection at bookmarks.

Embeds an image file as a fresh media part of the main document part and
anchors a floating drawing that references it right after a bookmark's
start marker. Inside a paragraph the drawing goes in as a run; a marker at
block level gets a paragraph of its own.
"""

import logging
from pathlib import Path

from docx.document import Document as DocxDocument
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.parts.image import ImagePart
from lxml import etree

from docpdf.interfaces.document import (
    BookmarkNotFoundError,
    ImageFileMissingError,
    UnsupportedImageFormatError,
)
from docpdf.strategies.docx.package import find_bookmark, remove_between, text_scopes

logger = logging.getLogger(__name__)

# Placeholder size of injected images, in EMU (2,000,000 EMU on each side).
DEFAULT_IMAGE_EMU = 2_000_000

# extension -> (content type, media part extension)
IMAGE_FORMATS: dict[str, tuple[str, str]] = {
    ".jpg": ("image/jpeg", "jpeg"),
    ".jpeg": ("image/jpeg", "jpeg"),
    ".png": ("image/png", "png"),
    ".gif": ("image/gif", "gif"),
    ".bmp": ("image/bmp", "bmp"),
}

PICTURE_URI = "http://schemas.openxmlformats.org/drawingml/2006/picture"


def resolve_image_format(image_path: str) -> tuple[str, str]:
    """Map an image path to its content type and media extension.

    Raises:
        UnsupportedImageFormatError: For anything but jpeg, png, gif or bmp.
    """
    extension = Path(image_path).suffix.lower()
    try:
        return IMAGE_FORMATS[extension]
    except KeyError:
        raise UnsupportedImageFormatError(extension) from None


def validate_image(image_path: str) -> tuple[str, str]:
    """Check format and existence of an image before any document is opened.

    Returns:
        The (content type, media extension) pair.

    Raises:
        UnsupportedImageFormatError: If the extension is not supported.
        ImageFileMissingError: If the file does not exist.
    """
    image_format = resolve_image_format(image_path)
    if not Path(image_path).is_file():
        raise ImageFileMissingError(image_path)
    return image_format


def add_image_part(document: DocxDocument, image_path: str, content_type: str, ext: str) -> str:
    """Store the image bytes as a new media part and relate it to the document.

    Returns:
        The relationship id of the new part.
    """
    blob = Path(image_path).read_bytes()
    package = document.part.package
    partname = package.next_partname(f"/word/media/image%d.{ext}")
    image_part = ImagePart(partname, content_type, blob)
    return document.part.relate_to(image_part, RT.IMAGE)


def _next_docpr_id(document: DocxDocument) -> int:
    """Return a drawing id not used in the body, any header or any footer."""
    ids = [
        int(value)
        for _, root in text_scopes(document)
        for value in root.xpath(".//wp:docPr/@id")
        if str(value).isdigit()
    ]
    return max(ids, default=0) + 1


def build_anchored_drawing(rel_id: str, docpr_id: int, cx: int = DEFAULT_IMAGE_EMU, cy: int = DEFAULT_IMAGE_EMU) -> etree._Element:
    """Build a floating ``w:drawing`` centred on the margin with no text wrap."""
    name = f"Image {docpr_id}"
    xml = (
        f'<w:drawing {nsdecls("w", "wp", "a", "pic", "r")}>'
        f'<wp:anchor distT="0" distB="0" distL="114300" distR="114300" simplePos="0" '
        f'relativeHeight="251658240" behindDoc="0" locked="0" layoutInCell="1" allowOverlap="1">'
        f'<wp:simplePos x="0" y="0"/>'
        f'<wp:positionH relativeFrom="margin"><wp:align>center</wp:align></wp:positionH>'
        f'<wp:positionV relativeFrom="margin"><wp:align>center</wp:align></wp:positionV>'
        f'<wp:extent cx="{cx}" cy="{cy}"/>'
        f'<wp:effectExtent l="0" t="0" r="0" b="0"/>'
        f'<wp:wrapNone/>'
        f'<wp:docPr id="{docpr_id}" name="{name}"/>'
        f'<wp:cNvGraphicFramePr/>'
        f'<a:graphic><a:graphicData uri="{PICTURE_URI}">'
        f'<pic:pic>'
        f'<pic:nvPicPr><pic:cNvPr id="0" name="{name}"/><pic:cNvPicPr/></pic:nvPicPr>'
        f'<pic:blipFill><a:blip r:embed="{rel_id}"/><a:stretch><a:fillRect/></a:stretch></pic:blipFill>'
        f'<pic:spPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'
        f'<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></pic:spPr>'
        f'</pic:pic>'
        f'</a:graphicData></a:graphic>'
        f'</wp:anchor>'
        f'</w:drawing>'
    )
    return parse_xml(xml)


def replace_image(
    document: DocxDocument,
    bookmark_name: str,
    image_path: str,
    strict: bool = False,
) -> bool:
    """Replace a bookmark's content with an anchored image.

    The caller is expected to have run ``validate_image`` already; the
    format is resolved again here to pick the media part type.

    Args:
        document: An open python-docx Document.
        bookmark_name: Bookmark receiving the image.
        image_path: Path to the image file.
        strict: Raise instead of skipping a missing bookmark.

    Returns:
        True if the image was inserted, False if the bookmark was absent.

    Raises:
        BookmarkNotFoundError: If ``strict`` and the bookmark is missing.
    """
    content_type, ext = validate_image(image_path)

    markers = find_bookmark(document, bookmark_name)
    if markers is None:
        if strict:
            raise BookmarkNotFoundError(bookmark_name)
        logger.warning(f"Bookmark not found, skipping image: {bookmark_name}")
        return False

    start, end = markers
    remove_between(start, end)

    rel_id = add_image_part(document, image_path, content_type, ext)
    drawing = build_anchored_drawing(rel_id, _next_docpr_id(document))

    run = OxmlElement("w:r")
    run.append(drawing)
    if start.getparent().tag in (qn("w:p"), qn("w:hyperlink")):
        start.addnext(run)
    else:
        paragraph = OxmlElement("w:p")
        paragraph.append(OxmlElement("w:pPr"))
        paragraph.append(run)
        start.addnext(paragraph)

    logger.info(f"Replaced image in bookmark: {bookmark_name} ({rel_id})")
    return True
