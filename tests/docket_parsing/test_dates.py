"""Tests for date recognition and chief justice resolution.

Key behaviors tested:
- "Month Day[,] Year" dates are found with full and abbreviated month names
- Impossible dates are an error, not a silent default
- Header dates fall back to MM/DD/YYYY and report failure as a tagged value
- "The Chief Justice" resolves by date across the 2005 cutover
"""

import re
from datetime import date

import pytest

from scotus_dockets.common.config import ChiefEra, DocketConfig
from scotus_dockets.common.dates import (
    ChiefJusticeResolver,
    DateGrammar,
    parse_meta_date,
)
from scotus_dockets.common.exceptions import DataFormatAssumptionException
from scotus_dockets.data_types import ParsedDate, UnparseableDate


class TestDateGrammar:
    """Tests for the "Month Day, Year" grammar."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Jan 3, 2012", date(2012, 1, 3)),
            ("January 3 2012", date(2012, 1, 3)),
            ("Sep 30, 2005", date(2005, 9, 30)),
            ("Sept 9 2010", date(2010, 9, 9)),
            ("filed December 25, 2009 by counsel", date(2009, 12, 25)),
        ],
    )
    def test_parses_month_day_year(self, text: str, expected: date) -> None:
        """The grammar shall read full and abbreviated month names."""
        assert DateGrammar().parse(text) == expected

    def test_finds_every_date_in_order(self) -> None:
        """finditer shall yield each date with its position."""
        text = "from Jan 3 2012 to Feb 10, 2012"
        matches = list(DateGrammar().finditer(text))
        assert [(m.month, m.day, m.year) for m in matches] == [
            ("Jan", 3, 2012),
            ("Feb", 10, 2012),
        ]
        assert text[matches[0].start : matches[0].end] == "Jan 3 2012"

    def test_month_names_are_case_sensitive(self) -> None:
        """Lowercase month names shall not be recognized."""
        assert DateGrammar().search("jan 3 2012") is None

    def test_impossible_date_is_an_error(self) -> None:
        """A triple that is not a calendar day shall raise."""
        with pytest.raises(DataFormatAssumptionException):
            DateGrammar().parse("Feb 30, 2012")

    def test_missing_date_is_an_error(self) -> None:
        """Text without a date shall raise."""
        with pytest.raises(DataFormatAssumptionException) as exc_info:
            DateGrammar().parse("Application granted")
        assert exc_info.value.text == "Application granted"

    def test_pattern_embeds_without_groups(self) -> None:
        """The embeddable pattern shall not add capture groups."""
        regex = re.compile(rf"until ({DateGrammar().pattern})")
        assert regex.search("until March 2 2012").groups() == ("March 2 2012",)


class TestMetaDates:
    """Tests for the two-stage header date parse."""

    def test_loose_format(self) -> None:
        """Textual dates shall parse with the primary parser."""
        assert parse_meta_date("Jan 2 2012") == ParsedDate(date(2012, 1, 2))

    def test_numeric_format_is_month_first(self) -> None:
        """MM/DD/YYYY dates shall parse with the month first."""
        assert parse_meta_date("01/02/2012") == ParsedDate(date(2012, 1, 2))
        assert parse_meta_date("12/25/2012") == ParsedDate(date(2012, 12, 25))

    def test_unparseable_is_tagged(self) -> None:
        """Garbage shall come back as UnparseableDate, not an exception."""
        assert parse_meta_date("TBD") == UnparseableDate("TBD")


class TestChiefJusticeResolver:
    """Tests for resolving the Chief Justice by date."""

    def test_before_cutover(self) -> None:
        """Dates before Sept 29, 2005 shall resolve to Rehnquist."""
        resolver = ChiefJusticeResolver()
        assert resolver.chief(date(2005, 9, 28)) == "Rehnquist"

    def test_on_and_after_cutover(self) -> None:
        """Dates on or after Sept 29, 2005 shall resolve to Roberts."""
        resolver = ChiefJusticeResolver()
        assert resolver.chief(date(2005, 9, 29)) == "Roberts"
        assert resolver.chief(date(2012, 1, 3)) == "Roberts"

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("Justice Kagan", "Kagan"),
            ("The Chief Justice", "Roberts"),
            ("the chief", "Roberts"),
            ("Chief", "Roberts"),
        ],
    )
    def test_resolve_tokens(self, token: str, expected: str) -> None:
        """Justice mentions shall resolve to surnames."""
        assert ChiefJusticeResolver().resolve(token, date(2012, 1, 3)) == expected

    def test_custom_eras(self) -> None:
        """Eras from the configuration shall be honored."""
        config = DocketConfig(
            chief_eras=(
                ChiefEra("Burger", until=date(1986, 9, 26)),
                ChiefEra("Rehnquist", until=date(2005, 9, 29)),
                ChiefEra("Roberts"),
            )
        )
        resolver = ChiefJusticeResolver(config)
        assert resolver.chief(date(1980, 1, 1)) == "Burger"
        assert resolver.chief(date(1990, 1, 1)) == "Rehnquist"
        assert resolver.chief(date(2010, 1, 1)) == "Roberts"
