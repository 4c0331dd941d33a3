from pathlib import Path

import pytest
from lxml.html import HtmlElement

from scotus_dockets.parsers.header import parse_header
from scotus_dockets.parsers.html import parse_html
from scotus_dockets.parsers.proceedings import ProceedingsExtractor

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


@pytest.fixture
def docket_page() -> bytes:
    return (EXAMPLES_DIR / "12a45.htm").read_bytes()


@pytest.fixture
def docket_doc(docket_page: bytes) -> HtmlElement:
    return parse_html(docket_page)


@pytest.fixture
def header(docket_doc: HtmlElement) -> dict:
    return parse_header(docket_doc)


@pytest.fixture
def extractor() -> ProceedingsExtractor:
    """An extractor for docket 12A45 with a known lower court and party."""
    return ProceedingsExtractor(
        docket_id="12A45",
        docket_type="Application",
        lower_court="United States Court of Appeals for the Ninth Circuit",
        party_names=["John Smith", "Acme Widget Corp."],
    )
