"""Party list extraction.

The party table lists counsel first and the party they represent last:

    Attorneys for Petitioner:            <- bold group header
    Jane Roe        | 1 Main St    | 555-0100
    Counsel of Record | Springfield, IL |
    Party name: John Smith             <- closes the party

Rows with several cells are accumulated until a single-cell "Party name:"
row arrives, which turns the accumulated rows into one PartyRecord.
"""

import logging
import re
from typing import Any

from lxml.html import HtmlElement

from scotus_dockets.common.models import PartyRecord
from scotus_dockets.parsers.html import find_row, sibling_lines, text_of

logger = logging.getLogger(__name__)

ATTORNEYS_FOR = re.compile(r"Attorneys? for ")
PARTY_NAME = re.compile(r"^\s*Party name:\s*")
PETITION_GROUP = re.compile(r"etition", re.IGNORECASE)
IN_RE = re.compile(r"^in re\.?\s+", re.IGNORECASE)
COUNSEL_OF_RECORD = re.compile(r"Counsel of Record", re.IGNORECASE)


def _cell_text(row: HtmlElement, index: int) -> str:
    cells = [child for child in row if isinstance(child.tag, str)]
    if index >= len(cells):
        return ""
    return text_of(cells[index])


def _joined_column(rows: list[HtmlElement], index: int) -> str | None:
    joined = "\n".join(_cell_text(row, index) for row in rows).strip()
    return joined or None


def _group_label(line: HtmlElement) -> str:
    group = ATTORNEYS_FOR.sub("", line.text_content(), count=1)
    return group.replace(":", "", 1).strip()


def _counsel_fields(partyset: list[HtmlElement]) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "address": _joined_column(partyset, 1),
        "phone": _joined_column(partyset, 2),
    }
    if partyset:
        fields["representative"] = _cell_text(partyset[0], 0) or None
    if len(partyset) > 1:
        fields["counsel_of_record"] = bool(
            COUNSEL_OF_RECORD.search(_cell_text(partyset[1], 0))
        )
    return fields


def parse_parties(
    doc: HtmlElement, header: dict[str, Any]
) -> list[PartyRecord] | None:
    """Extract the party list.

    Args:
        doc: The parsed docket page.
        header: Result of parse_header; its petitioner stands in for a blank
            party name under a petitioner group ("In re" petitions).

    Returns:
        The parties in page order, or None if the page has no party table.
    """
    row = find_row(doc, "~Name")
    if row is None:
        logger.info(
            "No party table on docket page",
            extra={"docket_id": header.get("id")},
        )
        return None

    group: str | None = None
    partyset: list[HtmlElement] = []
    parties: list[PartyRecord] = []

    for line in sibling_lines(row):
        if line.xpath(".//b"):
            group = _group_label(line)
            continue

        # Only "Party name: foo" rows have a single cell
        if len([c for c in line if isinstance(c.tag, str)]) != 1:
            partyset.append(line)
            continue

        name = PARTY_NAME.sub("", line.text_content(), count=1).strip()
        if not name and group and PETITION_GROUP.search(group):
            name = IN_RE.sub("", header.get("petitioner", ""))

        parties.append(
            PartyRecord(name=name, group=group, **_counsel_fields(partyset))
        )
        partyset = []

    return parties
