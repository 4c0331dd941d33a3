"""Assembles the extractors into one CaseRecord."""

import logging

from lxml.html import HtmlElement

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig
from scotus_dockets.common.models import CaseRecord
from scotus_dockets.parsers.header import parse_header
from scotus_dockets.parsers.parties import parse_parties
from scotus_dockets.parsers.proceedings import parse_proceedings

logger = logging.getLogger(__name__)


def parse(
    doc: HtmlElement | None,
    config: DocketConfig = DEFAULT_CONFIG,
    url: str = "",
) -> CaseRecord | None:
    """Parse a docket page into a CaseRecord.

    Args:
        doc: The page as returned by parse_html, or None for a docket that
            does not exist.
        config: Roster and date tables.
        url: Where the page came from, for error messages.

    Returns:
        The case record, or None if ``doc`` is None.
    """
    if doc is None:
        return None

    header = parse_header(doc, url=url)
    parties = parse_parties(doc, header)
    proceedings = parse_proceedings(doc, header, parties, config)

    logger.debug(
        f"Parsed docket {header['id']}",
        extra={
            "docket_id": header["id"],
            "party_count": len(parties or []),
            "proceeding_count": len(proceedings or []),
        },
    )
    return CaseRecord(**header, parties=parties, proceedings=proceedings)
