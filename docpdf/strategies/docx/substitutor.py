"""Template variable substitution.

Replaces literal placeholder text inside individual text leaves (``w:t``)
of the body, headers and footers.
"""

import logging

from docx.document import Document as DocxDocument
from docx.oxml.ns import qn
from lxml import etree

from docpdf.strategies.docx.package import text_scopes

logger = logging.getLogger(__name__)


def _replace_in_leaf(leaf: etree._Element, variables: dict[str, str]) -> bool:
    """Apply every variable to a single text leaf.

    Keys are matched as plain substrings, in map-iteration order.

    Returns:
        True if the leaf text changed.
    """
    original = leaf.text or ""
    text = original
    for key, value in variables.items():
        if key and key in text:
            text = text.replace(key, value)

    if text == original:
        return False

    leaf.text = text
    if text != text.strip():
        leaf.set(qn("xml:space"), "preserve")
    return True


def substitute_in_element(root: etree._Element, variables: dict[str, str]) -> int:
    """Replace variables in every text leaf under ``root``.

    Paragraphs are visited in document order, then runs, then text leaves.
    Text split across two runs is not matched. Leaves reachable through
    nested paragraphs (text boxes) are only processed once.

    Returns:
        Number of text leaves changed.
    """
    seen: set[etree._Element] = set()
    changed = 0

    for paragraph in root.iter(qn("w:p")):
        for run in paragraph.iter(qn("w:r")):
            for leaf in run.iter(qn("w:t")):
                if leaf in seen:
                    continue
                seen.add(leaf)
                if _replace_in_leaf(leaf, variables):
                    changed += 1

    return changed


def substitute_variables(document: DocxDocument, variables: dict[str, str]) -> int:
    """Replace variables in the body and every header and footer part.

    Args:
        document: An open python-docx Document.
        variables: Mapping of placeholder text to replacement text.

    Returns:
        Total number of text leaves changed.
    """
    if not variables:
        return 0

    total = 0
    for label, root in text_scopes(document):
        changed = substitute_in_element(root, variables)
        if changed:
            logger.debug(f"Replaced variables in {changed} text leaves of {label}")
        total += changed

    return total
