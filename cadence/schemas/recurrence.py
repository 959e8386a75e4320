# cadence/schemas/recurrence.py
"""
Recurrence schemas for the Cadence API.

This module contains Pydantic models for stored recurrences, their
repetitions and the occurrences calculated for them.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cadence.schemas.occurrence import RepetitionRuleSchema


class RecurrenceBase(BaseModel):
    """Base schema for recurrence data."""

    title: str = Field(..., min_length=1, max_length=255, description="Recurrence title")
    description: Optional[str] = Field(None, description="Recurrence description")
    first_date: date = Field(..., description="First date of the recurrence")
    repeat_until: Optional[date] = Field(None, description="Last date of the recurrence")
    repetitions: int = Field(0, ge=0, description="Number of repetitions, 0 = forever")
    active: bool = Field(True, description="Whether the recurrence is active")


class RecurrenceCreate(RecurrenceBase):
    """Schema for creating a new recurrence."""

    recurrence_repetitions: List[RepetitionRuleSchema] = Field(
        ..., min_length=1, description="Repetitions of the recurrence"
    )
    notes: Optional[str] = Field(None, description="Note text")


class RecurrenceUpdate(BaseModel):
    """Schema for updating recurrence information."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    first_date: Optional[date] = None
    repeat_until: Optional[date] = None
    repetitions: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None
    recurrence_repetitions: Optional[List[RepetitionRuleSchema]] = Field(
        None, min_length=1, description="Replaces all repetitions when given"
    )
    notes: Optional[str] = Field(None, description="Replaces the note when given")


class RecurrenceRepetition(BaseModel):
    """Schema for a stored repetition."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    repetition_type: str
    repetition_moment: str
    repetition_skip: int


class Recurrence(RecurrenceBase):
    """Schema for recurrence information."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    recurrence_repetitions: List[RecurrenceRepetition] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RepetitionOccurrences(BaseModel):
    """Occurrences and description of one repetition."""

    repetition_id: int
    description: str
    occurrences: List[date] = []


class RecurrenceOccurrences(BaseModel):
    """Occurrences of every repetition of a recurrence."""

    recurrence_id: int
    title: str
    note: str = ""
    repetitions: List[RepetitionOccurrences] = []
