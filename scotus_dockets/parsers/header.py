"""Header metadata extraction.

Reads the docket id from the page title, dates and names from the page's
<meta> fields, and the lower court, lower-court case numbers and linked
dockets from the labeled cells of the header table.
"""

import logging
import re
from typing import Any

from lxml.html import HtmlElement

from scotus_dockets.common.dates import parse_meta_date
from scotus_dockets.common.exceptions import (
    HTMLStructuralAssumptionException,
)
from scotus_dockets.data_types import ParsedDate, UnparseableDate
from scotus_dockets.parsers.html import (
    WHITESPACE,
    find_cell,
    find_cell_starting_with,
    next_cell_text,
    text_of,
)

logger = logging.getLogger(__name__)

DATE_FIELDS = {"creation_date": "creation_date", "docketed_date": "Docketed"}
INTEGER_FIELDS = {"term": "Term", "number": "CaseNumber"}
TEXT_FIELDS = {
    "type": "CaseType",
    "petitioner": "Petitioner",
    "respondent": "Respondent",
}

LINKED_WITH = re.compile(r"^linked with:?", re.IGNORECASE)
LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def meta_content(doc: HtmlElement, name: str) -> str | None:
    values = doc.xpath("//meta[@name=$name]/@content", name=name)
    return WHITESPACE.sub(" ", values[0]).strip() if values else None


def _unique(tokens: list[str]) -> list[str]:
    return list(dict.fromkeys(tokens))


def parse_header(doc: HtmlElement, url: str = "") -> dict[str, Any]:
    """Extract the header metadata of a docket page.

    Optional fields that are empty, missing or unparseable are left out of
    the result. ``id``, ``term`` and ``number`` are always present.

    Raises:
        HTMLStructuralAssumptionException: If the title or the term/number
            meta fields are missing.
    """
    ret: dict[str, Any] = {}

    title = doc.findtext(".//title")
    if not title or not title.split():
        raise HTMLStructuralAssumptionException(
            "Docket page has no title", request_url=url
        )
    ret["id"] = title.split()[-1]

    for key, name in DATE_FIELDS.items():
        raw = meta_content(doc, name)
        if not raw:
            continue
        match parse_meta_date(raw):
            case ParsedDate(value):
                ret[key] = value
            case UnparseableDate(bad):
                logger.warning(
                    f"Ignoring unparseable {name} date {bad!r}",
                    extra={"docket_id": ret["id"], "field": key},
                )

    for key, name in INTEGER_FIELDS.items():
        raw = meta_content(doc, name)
        digits = LEADING_DIGITS.match(raw or "")
        if digits is None:
            raise HTMLStructuralAssumptionException(
                f"Docket page has no usable {name} meta field",
                request_url=url,
                context={"value": raw},
            )
        ret[key] = int(digits.group(1))

    for key, name in TEXT_FIELDS.items():
        value = meta_content(doc, name)
        if value:
            ret[key] = value

    lower_court_cell = find_cell(doc, "Lower Ct")
    if lower_court_cell is not None:
        lower_court = next_cell_text(lower_court_cell)
        if lower_court:
            ret["lower_court"] = lower_court

    case_nos_cell = find_cell(doc, "Case No")
    if case_nos_cell is not None:
        case_nos = next_cell_text(case_nos_cell)
        if case_nos:
            ret["case_nos"] = _unique(re.sub(r"[,()]", "", case_nos).split())

    linked_cell = find_cell_starting_with(doc, "Linked with")
    if linked_cell is not None:
        linked = LINKED_WITH.sub("", text_of(linked_cell)).replace(",", " ", 1)
        ret["linked_cases"] = _unique(linked.split())

    return ret
