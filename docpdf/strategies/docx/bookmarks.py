"""Bookmark listing and text replacement."""

import logging

from docx.document import Document as DocxDocument
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from lxml import etree

from docpdf.interfaces.document import BookmarkNotFoundError
from docpdf.strategies.docx.package import bookmark_name, find_bookmark, iter_bookmark_starts, remove_between

logger = logging.getLogger(__name__)


def list_bookmarks(document: DocxDocument) -> list[str]:
    """Return the names of all bookmarks in document order.

    Start markers with an empty or missing name are skipped.
    """
    return [name for name in map(bookmark_name, iter_bookmark_starts(document)) if name]


def new_text_run(text: str) -> etree._Element:
    """Build a ``w:r`` holding a whitespace-preserving ``w:t``."""
    run = OxmlElement("w:r")
    leaf = OxmlElement("w:t")
    leaf.set(qn("xml:space"), "preserve")
    leaf.text = text
    run.append(leaf)
    return run


def replace_bookmark_text(
    document: DocxDocument,
    bookmark_values: dict[str, str],
    strict: bool = False,
) -> list[str]:
    """Replace the content of each named bookmark with a single text run.

    Everything between the start and end markers is removed, then the new
    run is inserted right after the start marker. Both markers stay in place.

    Args:
        document: An open python-docx Document.
        bookmark_values: Mapping of bookmark name to replacement text.
        strict: Raise instead of skipping bookmarks that cannot be located.

    Returns:
        Names of the bookmarks that were replaced.

    Raises:
        BookmarkNotFoundError: If ``strict`` and a bookmark is missing.
    """
    replaced: list[str] = []

    for name, text in bookmark_values.items():
        markers = find_bookmark(document, name)
        if markers is None:
            if strict:
                raise BookmarkNotFoundError(name)
            logger.warning(f"Bookmark not found, skipping: {name}")
            continue

        start, end = markers
        removed = remove_between(start, end)
        start.addnext(new_text_run(text or ""))

        replaced.append(name)
        logger.info(f"Replaced bookmark: {name} ({removed} nodes removed)")

    return replaced
