"""Structured data from Supreme Court application and motion dockets.

Typical use:

    from scotus_dockets import DocketDriver

    with DocketDriver() as driver:
        case = driver.get_case(2011, 45)

or, for a page already on disk:

    from scotus_dockets import parse, parse_html

    case = parse(parse_html(open("12a45.htm", "rb").read()))
"""

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig, load_config
from scotus_dockets.common.models import CaseRecord, PartyRecord, ProceedingRecord
from scotus_dockets.data_types import DocketKind, DocketRequest
from scotus_dockets.driver.sync_driver import DocketDriver
from scotus_dockets.parsers.document import parse
from scotus_dockets.parsers.html import parse_html

__all__ = [
    "DEFAULT_CONFIG",
    "CaseRecord",
    "DocketConfig",
    "DocketDriver",
    "DocketKind",
    "DocketRequest",
    "PartyRecord",
    "ProceedingRecord",
    "load_config",
    "parse",
    "parse_html",
]
