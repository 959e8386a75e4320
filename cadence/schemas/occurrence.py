# cadence/schemas/occurrence.py
"""
Occurrence schemas for the Cadence API.

This module contains Pydantic models for stateless occurrence queries:
a repetition rule plus either a date range or an anchor and a count.
"""

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from cadence.core.repetition import RepetitionRule


class RepetitionRuleSchema(BaseModel):
    """Repetition rule as sent by API clients."""

    type: str = Field(..., description="Repetition type: daily, weekly, monthly, ndom, yearly")
    moment: str = Field(
        "",
        description="Type-specific moment: ISO weekday, day of month, 'N,W' or YYYY-MM-DD",
    )
    skip: int = Field(0, ge=0, description="Candidates skipped between two occurrences")

    @field_validator("moment", mode="before")
    @classmethod
    def stringify_moment(cls, v: Any) -> str:
        """Accept numeric moments such as 5 for a weekly rule."""
        if v is None:
            return ""
        return str(v)

    def to_rule(self) -> RepetitionRule:
        return RepetitionRule(type=self.type, moment=self.moment, skip=self.skip)


class OccurrenceRangeRequest(BaseModel):
    """Request for all occurrences within a date range."""

    rule: RepetitionRuleSchema
    start: date = Field(..., description="First day of the range")
    end: date = Field(..., description="Last day of the range")


class OccurrenceCountRequest(BaseModel):
    """Request for the next N occurrences after an anchor date."""

    rule: RepetitionRuleSchema
    anchor: date = Field(..., description="Date after which occurrences are generated")
    count: int = Field(..., ge=0, description="Number of occurrences to generate")


class DescriptionRequest(BaseModel):
    """Request for a localized rule description."""

    rule: RepetitionRuleSchema
    locale: Optional[str] = Field(None, description="Locale such as 'en' or 'de'")


class OccurrenceList(BaseModel):
    """Calculated occurrence dates."""

    occurrences: List[date] = Field([], description="Ascending occurrence dates")


class DescriptionResponse(BaseModel):
    """Localized rule description."""

    description: str
    locale: str
