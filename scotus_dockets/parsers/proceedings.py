"""Proceedings extraction.

Each docket entry is a line of prose such as

    Jan 3 2012 Application (12A45) submitted to Justice Kagan granted.

The line is run through RULES in order. A rule that matches records some
fields and hands back the line with the text it consumed removed, so every
later rule only sees what is left (the residual). Later patterns are written
against that residual: "by Justice Kagan" must be gone before party names
are looked for, the abstaining justice must be gone before the acting
justice is looked for, and so on. Whatever nothing consumed ends up as the
entry's event and comment.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from lxml.html import HtmlElement
from word2number import w2n

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig
from scotus_dockets.common.dates import ChiefJusticeResolver, DateGrammar
from scotus_dockets.common.exceptions import DataFormatAssumptionException
from scotus_dockets.common.models import PartyRecord, ProceedingRecord
from scotus_dockets.parsers.html import find_row, sibling_lines, text_of

logger = logging.getLogger(__name__)

PER_CURIAM = "per curiam"

BY_THE_COURT = re.compile(r"by the Court", re.IGNORECASE)
RESPONSE = re.compile(r"granted|denied", re.IGNORECASE)
DEADLINE = re.compile(r" (\S+) days after the entry of this order")
ORDERED_THAT = re.compile(r"ordered that ?", re.IGNORECASE)
IT_IS = re.compile(r"it is\s*$", re.IGNORECASE)
LEADING_FILLER = re.compile(r"^(?:to |for |a |the )+")
TRAILING_STRAY = re.compile(r"(?<=.)(?: in|\s?\.)$")
MULTIPLE_SPACES = re.compile(r" {2,}")


def normalize_text(text: str) -> str:
    """Apply the punctuation and spacing cleanup used on proceeding lines."""
    text = text.replace("Court of Court", "Court of")
    text = text.replace("\r", "").replace("\n", " ")
    text = text.replace(", ", " ").replace(". ", " ")
    return MULTIPLE_SPACES.sub(" ", text).strip()


def _cut(text: str, start: int, end: int) -> str:
    """Remove text[start:end] and tidy the seam."""
    return MULTIPLE_SPACES.sub(" ", text[:start] + text[end:]).strip()


def _cut_match(text: str, match: re.Match[str], group: int | str = 0) -> str:
    return _cut(text, match.start(group), match.end(group))


@dataclass(frozen=True)
class RuleResult:
    """What a rule found.

    Attributes:
        fields: Values to record on the proceeding being built.
        residual: The line with the consumed text removed.
    """

    fields: dict[str, Any]
    residual: str


RuleFunc = Callable[
    [str, dict[str, Any], "ProceedingsExtractor"], RuleResult | None
]


@dataclass(frozen=True)
class ProceedingRule:
    """A named step of the proceeding-line pipeline.

    ``apply`` receives the current residual, the fields recorded so far and
    the extractor (for per-document patterns). It returns None when the rule
    does not apply to the line.
    """

    name: str
    apply: RuleFunc


def leading_date(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult:
    match = ex.grammar.search(line)
    if match is None:
        raise DataFormatAssumptionException(
            "Proceeding line has no date",
            text=line,
            context={"docket_id": ex.docket_id},
        )
    return RuleResult(
        {"date": ex.grammar.to_date(match)},
        _cut(line, match.start, match.end),
    )


def docket_prefix(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = ex.prefix_regex.match(line)
    if match is None:
        return None
    return RuleResult({}, _cut_match(line, match))


def normalize(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult:
    return RuleResult({}, normalize_text(line))


def abstention(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = ex.abstention_regex.search(line)
    if match is None:
        return None
    justice = ex.chiefs.resolve(match.group("justice"), fields["date"])
    return RuleResult({"abstained": justice}, _cut_match(line, match))


def acting_justice(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = ex.justice_regex.search(line)
    if match is None:
        return None
    justice = ex.chiefs.resolve(match.group(0), fields["date"])
    for connector in ex.connector_regexes:
        found = connector.search(line)
        if found is not None:
            line = _cut_match(line, found)
    return RuleResult({"justice": justice}, line)


def per_curiam(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    if "justice" in fields:
        return None
    match = BY_THE_COURT.search(line)
    if match is None:
        return None
    return RuleResult({"justice": PER_CURIAM}, _cut_match(line, match))


def grant_or_deny(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = RESPONSE.search(line)
    if match is None:
        return None
    return RuleResult({"response": match.group(0)}, _cut_match(line, match))


def party_mentions(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    mentions: list[str] = []
    # Lower court first so a looser party name cannot swallow it
    for regex in ex.mention_regexes:
        found = [m.group("mention") for m in regex.finditer(line)]
        if found:
            mentions.extend(found)
            line = MULTIPLE_SPACES.sub(" ", regex.sub("", line)).strip()
    if not mentions:
        return None
    return RuleResult({"parties": fields.get("parties", []) + mentions}, line)


def date_range(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = ex.range_regex.search(line)
    if match is not None:
        return RuleResult(
            {
                "from_date": ex.grammar.parse(match.group("from")),
                "to_date": ex.grammar.parse(match.group("to")),
            },
            _cut_match(line, match),
        )
    match = ex.until_regex.search(line)
    if match is not None:
        return RuleResult(
            {"to_date": ex.grammar.parse(match.group("to"))},
            _cut_match(line, match),
        )
    return None


def relative_deadline(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = DEADLINE.search(line)
    if match is None:
        return None
    token = match.group(1)
    try:
        days = w2n.word_to_num(token.lower())
    except ValueError:
        logger.warning(
            f"Cannot read {token!r} as a number of days",
            extra={"docket_id": ex.docket_id, "line": line},
        )
        return None
    return RuleResult(
        {"effective_date": fields["date"] + timedelta(days=days)},
        _cut_match(line, match),
    )


def conference_date(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult | None:
    match = ex.conference_regex.search(line)
    if match is None:
        return None
    # Keep the word "conference"; it belongs to the event
    return RuleResult(
        {"effective_date": ex.grammar.parse(match.group("date"))},
        _cut_match(line, match, "tail"),
    )


def event_and_comment(
    line: str, fields: dict[str, Any], ex: ProceedingsExtractor
) -> RuleResult:
    match = ORDERED_THAT.search(line)
    if match is not None:
        event = line[match.end() :]
        comment = IT_IS.sub("", line[: match.start()]).strip() or None
    else:
        event = line
        comment = None
    event = LEADING_FILLER.sub("", event)
    event = TRAILING_STRAY.sub("", event).strip()
    return RuleResult({"event": event, "comment": comment}, "")


RULES: list[ProceedingRule] = [
    ProceedingRule("leading_date", leading_date),
    ProceedingRule("docket_prefix", docket_prefix),
    ProceedingRule("normalize", normalize),
    ProceedingRule("abstention", abstention),
    ProceedingRule("acting_justice", acting_justice),
    ProceedingRule("per_curiam", per_curiam),
    ProceedingRule("grant_or_deny", grant_or_deny),
    ProceedingRule("party_mentions", party_mentions),
    ProceedingRule("date_range", date_range),
    ProceedingRule("relative_deadline", relative_deadline),
    ProceedingRule("conference_date", conference_date),
    ProceedingRule("event_and_comment", event_and_comment),
]


@dataclass
class ProceedingsExtractor:
    """Turns docket entry lines into ProceedingRecords.

    Patterns that depend on the document (the docket prefix, the lower
    court and party names) and on the configuration (the justice roster,
    month names) are compiled once per document here.

    Attributes:
        docket_id: The docket id, e.g. "12A45".
        docket_type: The docket's case type, e.g. "Application".
        lower_court: Name of the lower court, if the header states one.
        party_names: Names from the party list.
        config: Roster and date tables.
        rules: The pipeline, in the order it runs.
    """

    docket_id: str
    docket_type: str | None = None
    lower_court: str | None = None
    party_names: list[str] = field(default_factory=list)
    config: DocketConfig = DEFAULT_CONFIG
    rules: list[ProceedingRule] = field(default_factory=lambda: list(RULES))

    def __post_init__(self) -> None:
        self.grammar = DateGrammar(self.config)
        self.chiefs = ChiefJusticeResolver(self.config)
        dates = self.grammar.pattern

        prefixes = [re.escape(self.docket_type)] if self.docket_type else []
        prefixes += ["application", "motion"]
        self.prefix_regex = re.compile(
            rf"(?:{'|'.join(prefixes)}) \({re.escape(self.docket_id)}\)",
            re.IGNORECASE,
        )

        justices = "|".join(
            [re.escape(f"Justice {name}") for name in self.config.justices]
            + [re.escape(self.config.chief_title)]
        )
        self.justice_regex = re.compile(rf"(?:{justices})")
        self.abstention_regex = re.compile(
            rf"(?P<justice>{justices}) took no part"
            rf"(?:(?!{justices})[^.])*\.?"
        )
        self.connector_regexes = [
            re.compile(rf"submitted to (?:{justices})"),
            re.compile(rf"by (?:{justices})"),
        ]

        self.mention_regexes = []
        for names in ([self.lower_court], self.party_names):
            alternation = self._alternation(names)
            if alternation:
                self.mention_regexes.append(
                    re.compile(
                        rf"(?<!\w)(?:to |by )?(?:the )?"
                        rf"(?P<mention>{alternation})(?!\w)"
                    )
                )

        self.range_regex = re.compile(
            rf"from (?P<from>{dates}) to (?P<to>{dates})"
        )
        self.until_regex = re.compile(rf"until (?P<to>{dates})")
        self.conference_regex = re.compile(
            rf"(?i:conference)(?P<tail> of (?P<date>{dates}))"
        )

    @classmethod
    def for_document(
        cls,
        header: dict[str, Any],
        parties: list[PartyRecord] | None,
        config: DocketConfig = DEFAULT_CONFIG,
    ) -> ProceedingsExtractor:
        names = [party.name for party in parties or []]
        for key in ("petitioner", "respondent"):
            if header.get(key):
                names.append(header[key])
        return cls(
            docket_id=header["id"],
            docket_type=header.get("type"),
            lower_court=header.get("lower_court"),
            party_names=names,
            config=config,
        )

    @staticmethod
    def _alternation(names: list[str | None]) -> str:
        # Names are matched against normalized lines, where "Corp. files"
        # has become "Corp files". Longest first so "Smith Corp" wins over
        # "Smith".
        cleaned = {normalize_text(name).rstrip(".,") for name in names if name}
        cleaned.discard("")
        ordered = sorted(cleaned, key=lambda n: (-len(n), n))
        return "|".join(re.escape(name) for name in ordered)

    def parse_line(self, line: str) -> ProceedingRecord:
        """Run one docket entry through the rule pipeline.

        Raises:
            DataFormatAssumptionException: If the line has no leading date
                or carries an impossible date.
        """
        fields: dict[str, Any] = {}
        residual = line
        for rule in self.rules:
            result = rule.apply(residual, fields, self)
            if result is None:
                continue
            logger.debug(
                f"Rule {rule.name} matched",
                extra={"docket_id": self.docket_id, "fields": result.fields},
            )
            fields.update(result.fields)
            residual = result.residual
        return ProceedingRecord(**fields)

    def parse(self, doc: HtmlElement) -> list[ProceedingRecord] | None:
        """Extract every docket entry of a page.

        Returns:
            The entries in page order, or None if the page has no
            proceedings table.
        """
        row = find_row(doc, "~Proceedings")
        if row is None:
            logger.info(
                "No proceedings table on docket page",
                extra={"docket_id": self.docket_id},
            )
            return None
        return [self.parse_line(text_of(line)) for line in sibling_lines(row)]


def parse_proceedings(
    doc: HtmlElement,
    header: dict[str, Any],
    parties: list[PartyRecord] | None,
    config: DocketConfig = DEFAULT_CONFIG,
) -> list[ProceedingRecord] | None:
    extractor = ProceedingsExtractor.for_document(header, parties, config)
    return extractor.parse(doc)
