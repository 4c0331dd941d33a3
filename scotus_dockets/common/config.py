"""Configuration tables for docket parsing.

Everything the extractors match against that is not derived from the page
itself lives here: the justice roster, the month-name table, the chief
justice eras, and where docket pages are published. The defaults cover the
Supreme Court's application and motion dockets from the 2003 term onward.

A TOML file can override any of the defaults:

    justices = ["Roberts", "Thomas", "Alito"]
    oldest_term = 2005

    [[chief_eras]]
    until = 2005-09-29
    name = "Rehnquist"

    [[chief_eras]]
    name = "Roberts"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields, replace
from datetime import date
from pathlib import Path
from typing import Any

# Since the 2003 term
JUSTICES: tuple[str, ...] = (
    "Souter",
    "Kagan",
    "O'Connor",
    "Sotomayor",
    "Rehnquist",
    "Alito",
    "Roberts",
    "Breyer",
    "Ginsburg",
    "Thomas",
    "Kennedy",
    "Scalia",
    "Stevens",
)

MONTHS: dict[str, int] = {
    "January": 1,
    "Jan": 1,
    "February": 2,
    "Feb": 2,
    "March": 3,
    "Mar": 3,
    "April": 4,
    "Apr": 4,
    "May": 5,
    "June": 6,
    "Jun": 6,
    "July": 7,
    "Jul": 7,
    "August": 8,
    "Aug": 8,
    "September": 9,
    "Sep": 9,
    "Sept": 9,
    "October": 10,
    "Oct": 10,
    "November": 11,
    "Nov": 11,
    "December": 12,
    "Dec": 12,
}


@dataclass(frozen=True)
class ChiefEra:
    """A span of time during which one justice held the center seat.

    Attributes:
        name: Surname of the Chief Justice.
        until: First day on which this justice was no longer Chief Justice,
            or None for the sitting Chief Justice.
    """

    name: str
    until: date | None = None


@dataclass(frozen=True)
class DocketConfig:
    """Tables used by the docket extractors and the fetcher.

    Attributes:
        justices: Surnames of every justice who may appear on a docket.
        chief_title: The literal used for the Chief Justice in place of a name.
        months: Month tokens accepted by the date grammar, mapped to month numbers.
        chief_eras: Chief Justice eras, oldest first. The last era is open-ended.
        docket_url: Template for a docket page; receives ``term`` (two digits),
            ``kind`` ("a" or "m") and ``number``.
        oldest_term: The first term for which docket pages are published.
        timeout_seconds: HTTP timeout used by the driver.
    """

    justices: tuple[str, ...] = JUSTICES
    chief_title: str = "The Chief Justice"
    months: dict[str, int] = field(default_factory=lambda: dict(MONTHS))
    chief_eras: tuple[ChiefEra, ...] = (
        ChiefEra("Rehnquist", until=date(2005, 9, 29)),
        ChiefEra("Roberts"),
    )
    docket_url: str = (
        "http://www.supremecourt.gov/docketfiles/{term}{kind}{number}.htm"
    )
    oldest_term: int = 2003
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if not self.justices:
            raise ValueError("The justice roster must not be empty")
        if not self.chief_eras or self.chief_eras[-1].until is not None:
            raise ValueError(
                "The last chief justice era must be open-ended (no 'until')"
            )
        if any(era.until is None for era in self.chief_eras[:-1]):
            raise ValueError(
                "Only the last chief justice era may be open-ended"
            )


DEFAULT_CONFIG = DocketConfig()


def _era_from_toml(raw: dict[str, Any]) -> ChiefEra:
    until = raw.get("until")
    if until is not None and not isinstance(until, date):
        until = date.fromisoformat(str(until))
    return ChiefEra(name=raw["name"], until=until)


def load_config(path: str | Path) -> DocketConfig:
    """Load a DocketConfig from a TOML file, starting from the defaults.

    Args:
        path: Path to a TOML file.

    Returns:
        A DocketConfig with the file's values applied over the defaults.

    Raises:
        ValueError: If the file names a key DocketConfig does not have.
    """
    with open(path, "rb") as f:
        raw = tomllib.load(f)

    known = {f.name for f in fields(DocketConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}"
        )

    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        match key:
            case "justices":
                overrides[key] = tuple(value)
            case "chief_eras":
                overrides[key] = tuple(_era_from_toml(era) for era in value)
            case "months":
                overrides[key] = {str(k): int(v) for k, v in value.items()}
            case _:
                overrides[key] = value
    return replace(DEFAULT_CONFIG, **overrides)
