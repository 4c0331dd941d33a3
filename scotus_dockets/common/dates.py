"""Date recognition for docket pages.

Docket pages write dates as "Month Day, Year" ("Jan 3, 2012",
"September 29 2005"). DateGrammar finds and converts those. Header meta
fields use a looser format, handled by parse_meta_date. ChiefJusticeResolver
turns "the Chief" into a surname for a given date.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date

from dateutil import parser as date_parser

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig
from scotus_dockets.common.exceptions import DataFormatAssumptionException
from scotus_dockets.data_types import (
    DateParseResult,
    ParsedDate,
    UnparseableDate,
)


@dataclass(frozen=True)
class DateMatch:
    """One "Month Day, Year" occurrence in a piece of text."""

    month: str
    day: int
    year: int
    start: int
    end: int


class DateGrammar:
    """Recognizes "<Month> <Day>[,] <Year>" dates.

    Month names come from the configuration and are matched case-sensitively.
    ``pattern`` is a non-capturing regular expression that other rules embed
    in their own patterns; wrap it in a group and hand the captured text to
    ``parse`` to get a date back.
    """

    def __init__(self, config: DocketConfig = DEFAULT_CONFIG) -> None:
        self.months = config.months
        # Longest first so "Sept" is tried before "Sep"
        names = sorted(self.months, key=len, reverse=True)
        month_alternation = "|".join(re.escape(name) for name in names)
        self.pattern = rf"(?:{month_alternation}) [0-9]{{1,2}},? [0-9]{{4}}"
        self._regex = re.compile(
            rf"({month_alternation}) ([0-9]{{1,2}}),? ([0-9]{{4}})"
        )

    def finditer(self, text: str) -> Iterator[DateMatch]:
        for m in self._regex.finditer(text):
            yield DateMatch(
                month=m.group(1),
                day=int(m.group(2)),
                year=int(m.group(3)),
                start=m.start(),
                end=m.end(),
            )

    def search(self, text: str) -> DateMatch | None:
        return next(self.finditer(text), None)

    def to_date(self, match: DateMatch) -> date:
        """Convert a match into a date.

        Raises:
            DataFormatAssumptionException: If the triple is not a real day,
                e.g. "Feb 30, 2012".
        """
        try:
            return date(match.year, self.months[match.month], match.day)
        except ValueError as e:
            raise DataFormatAssumptionException(
                f"Impossible date: {match.month} {match.day} {match.year}",
                text=f"{match.month} {match.day}, {match.year}",
            ) from e

    def parse(self, text: str) -> date:
        """Parse the first date found in ``text``.

        Raises:
            DataFormatAssumptionException: If ``text`` holds no date.
        """
        match = self.search(text)
        if match is None:
            raise DataFormatAssumptionException(
                "No date found", text=text
            )
        return self.to_date(match)


def parse_meta_date(raw: str) -> DateParseResult:
    """Parse a header date value.

    Header fields use either the written-out form ("Jan  2 2012") or
    MM/DD/YYYY. dateutil reads both, month first for numeric dates. A value
    it cannot read is reported as UnparseableDate, not raised.
    """
    try:
        return ParsedDate(date_parser.parse(raw, dayfirst=False).date())
    except (ValueError, OverflowError):
        return UnparseableDate(raw)


class ChiefJusticeResolver:
    """Maps dates to whoever was Chief Justice on that day."""

    _CHIEF_TOKEN = re.compile(r"(the )?chief", re.IGNORECASE)
    _TITLE = re.compile(r"Justice ?")

    def __init__(self, config: DocketConfig = DEFAULT_CONFIG) -> None:
        self.eras = config.chief_eras

    def chief(self, on: date) -> str:
        for era in self.eras[:-1]:
            if on < era.until:
                return era.name
        return self.eras[-1].name

    def resolve(self, token: str, on: date) -> str:
        """Turn a justice mention into a surname.

        "Justice Kagan" becomes "Kagan"; "The Chief Justice" becomes the
        Chief Justice's surname on the given date.
        """
        name = self._TITLE.sub("", token)
        name = self._CHIEF_TOKEN.sub(lambda _m: self.chief(on), name)
        return name.strip()
