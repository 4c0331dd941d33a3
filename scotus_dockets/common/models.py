"""Pydantic models for the records extracted from a docket page.

A field left as None means the page did not state it. to_dict() drops those
fields so the output only carries what the page says.
"""

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConsumerModel(BaseModel):
    """Base class for extracted records.

    Records are built once per page parse and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PartyRecord(ConsumerModel):
    """A party and the counsel listed for it."""

    name: str = Field(..., description="Party name")
    representative: str | None = Field(
        None, description="Name of counsel for the party"
    )
    counsel_of_record: bool = Field(
        False, description="Whether the representative is counsel of record"
    )
    address: str | None = Field(None, description="Counsel's address lines")
    phone: str | None = Field(None, description="Counsel's phone number")
    group: str | None = Field(
        None, description="Group header the party is listed under"
    )


class ProceedingRecord(ConsumerModel):
    """One docket entry."""

    date: datetime.date = Field(..., description="Date of the entry")
    justice: str | None = Field(
        None,
        description='Acting justice surname, or "per curiam" for the Court',
    )
    abstained: str | None = Field(
        None, description="Justice who took no part"
    )
    response: str | None = Field(None, description='"granted" or "denied"')
    parties: list[str] | None = Field(
        None, description="Parties and lower court named in the entry"
    )
    from_date: datetime.date | None = None
    to_date: datetime.date | None = None
    effective_date: datetime.date | None = None
    event: str = Field(..., description="The operative clause")
    comment: str | None = Field(
        None, description="Text preceding an 'ordered that' clause"
    )


class CaseRecord(ConsumerModel):
    """Everything extracted from one docket page."""

    id: str = Field(..., description="Docket id, e.g. 12A45")
    creation_date: datetime.date | None = None
    docketed_date: datetime.date | None = None
    term: int
    number: int
    type: str | None = None
    petitioner: str | None = None
    respondent: str | None = None
    lower_court: str | None = None
    case_nos: list[str] | None = None
    linked_cases: list[str] | None = None
    parties: list[PartyRecord] | None = None
    proceedings: list[ProceedingRecord] | None = None
