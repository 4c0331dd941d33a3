"""HTML helpers shared by the extractors.

Docket pages are laid out with nested tables. The helpers here find the
cells and rows the extractors anchor on, always preferring the innermost
element so an outer layout table that merely contains the anchor text is
never picked.
"""

import re

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement

from scotus_dockets.common.exceptions import ScraperAssumptionException

WHITESPACE = re.compile(r"\s+")


def parse_html(content: bytes | str, url: str = "") -> HtmlElement:
    """Parse a docket page and normalize its whitespace.

    Every run of whitespace in every text node, non-breaking spaces
    included, is collapsed to a single space.

    Raises:
        ScraperAssumptionException: If lxml cannot parse the content.
    """
    try:
        doc = lxml_html.document_fromstring(content)
    except (ValueError, etree.ParserError) as e:
        raise ScraperAssumptionException(
            f"Failed to parse HTML: {e}",
            request_url=url,
            context={"error": str(e)},
        ) from e
    normalize_whitespace(doc)
    return doc


def normalize_whitespace(doc: HtmlElement) -> None:
    for el in doc.iter():
        if el.text:
            el.text = WHITESPACE.sub(" ", el.text)
        if el.tail:
            el.tail = WHITESPACE.sub(" ", el.tail)


def text_of(el: HtmlElement) -> str:
    return el.text_content().strip()


def find_cell(doc: HtmlElement, needle: str) -> HtmlElement | None:
    """Return the innermost ``td`` whose text contains ``needle``."""
    cells = doc.xpath(
        "//td[contains(., $needle)][not(.//td[contains(., $needle)])]",
        needle=needle,
    )
    return cells[0] if cells else None


def find_cell_starting_with(
    doc: HtmlElement, prefix: str
) -> HtmlElement | None:
    """Return the innermost ``td`` whose text starts with ``prefix``."""
    cells = doc.xpath(
        "//td[starts-with(normalize-space(.), $prefix)]"
        "[not(.//td[starts-with(normalize-space(.), $prefix)])]",
        prefix=prefix,
    )
    return cells[0] if cells else None


def find_row(doc: HtmlElement, needle: str) -> HtmlElement | None:
    """Return the innermost ``tr`` whose text contains ``needle``."""
    rows = doc.xpath(
        "//tr[contains(., $needle)][not(.//tr[contains(., $needle)])]",
        needle=needle,
    )
    return rows[0] if rows else None


def sibling_lines(row: HtmlElement) -> list[HtmlElement]:
    """Return the rows of the table ``row`` belongs to, minus headers.

    Rows that are blank or start with "~" (column header rows such as
    "~Name" and "~Proceedings") are skipped.
    """
    lines = []
    for child in row.getparent():
        if not isinstance(child.tag, str):
            continue
        text = text_of(child)
        if not text or text.startswith("~"):
            continue
        lines.append(child)
    return lines


def next_cell_text(cell: HtmlElement) -> str | None:
    sibling = cell.getnext()
    if sibling is None:
        return None
    return text_of(sibling)
