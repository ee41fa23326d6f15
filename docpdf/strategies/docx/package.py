"""Package-level helpers over the python-docx object model.

Everything that touches the raw WordprocessingML tree goes through these
helpers: opening a package for mutation, enumerating the text scopes,
locating bookmark pairs and splicing siblings out of a parent.
"""

import logging
import threading
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from docx import Document
from docx.document import Document as DocxDocument
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn
from lxml import etree

from docpdf.interfaces.document import DocumentOpenError

logger = logging.getLogger(__name__)

_path_locks: dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _get_path_lock(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _path_locks_guard:
        if key not in _path_locks:
            _path_locks[key] = threading.Lock()
        return _path_locks[key]


@contextmanager
def open_document(document_path: str) -> Iterator[DocxDocument]:
    """Open a .docx package with exclusive access to its path.

    The document is only written back when the caller calls ``save`` inside
    the block, so an exception raised before that leaves the file untouched.

    Args:
        document_path: Path to the .docx file.

    Yields:
        The python-docx Document.

    Raises:
        DocumentOpenError: If the file is missing or is not a valid package.
    """
    path = Path(document_path)
    if not path.is_file():
        raise DocumentOpenError(f"Document not found: {document_path}")

    with _get_path_lock(path):
        try:
            document = Document(str(path))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError, etree.XMLSyntaxError) as e:
            logger.error(f"Failed to open document {document_path}: {e}")
            raise DocumentOpenError(f"Failed to open document {document_path}: {e}") from e

        yield document


def text_scopes(document: DocxDocument) -> Iterator[tuple[str, etree._Element]]:
    """Yield the root elements holding visible text.

    The body comes first, then every header part, then every footer part of
    the main document part.

    Yields:
        Tuples of (scope label, root element).
    """
    yield "body", document.element.body

    rels = [rel for rel in document.part.rels.values() if not rel.is_external]
    for reltype, label in ((RT.HEADER, "header"), (RT.FOOTER, "footer")):
        for rel in rels:
            if rel.reltype == reltype:
                yield f"{label}:{rel.target_part.partname}", rel.target_part.element


def bookmark_name(element: etree._Element) -> str:
    return element.get(qn("w:name")) or ""


def iter_bookmark_starts(document: DocxDocument) -> Iterator[etree._Element]:
    """Yield every bookmark start marker of the body in document order."""
    yield from document.element.body.iter(qn("w:bookmarkStart"))


def find_bookmark_end(document: DocxDocument, bookmark_id: str | None) -> etree._Element | None:
    """Return the first bookmark end marker sharing the given identifier."""
    if bookmark_id is None:
        return None
    for end in document.element.body.iter(qn("w:bookmarkEnd")):
        if end.get(qn("w:id")) == bookmark_id:
            return end
    return None


def find_bookmark(
    document: DocxDocument, name: str
) -> tuple[etree._Element, etree._Element] | None:
    """Locate the marker pair of a named bookmark.

    The first start marker with the name wins. Its end marker is the first
    one carrying the same ``w:id``.

    Returns:
        The (start, end) markers, or None if either is missing.
    """
    for start in iter_bookmark_starts(document):
        if bookmark_name(start) == name:
            end = find_bookmark_end(document, start.get(qn("w:id")))
            if end is None:
                logger.debug(f"Bookmark {name!r} has no matching end marker")
                return None
            return start, end
    return None


def remove_between(start: etree._Element, end: etree._Element) -> int:
    """Delete the siblings strictly between two markers.

    Walks the following siblings of ``start`` until ``end`` is reached. When
    ``end`` lives under another parent, everything after ``start`` in its
    own parent is removed.

    Returns:
        Number of removed nodes.
    """
    doomed = []
    current = start.getnext()
    while current is not None and current is not end:
        doomed.append(current)
        current = current.getnext()

    parent = start.getparent()
    for node in doomed:
        parent.remove(node)

    return len(doomed)
