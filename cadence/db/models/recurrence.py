# cadence/db/models/recurrence.py
"""
Database models for recurrences in Cadence.

This module defines the SQLAlchemy models for recurrences, their
repetitions and attached notes.
"""

from sqlalchemy import (
    Column,
    String,
    Boolean,
    Integer,
    ForeignKey,
    Date,
    Text,
)
from sqlalchemy.orm import relationship, validates

from cadence.core.repetition import RepetitionRule, RepetitionType
from cadence.db.models.base import AbstractBase, TimestampMixin


class Recurrence(AbstractBase, TimestampMixin):
    """
    Model for recurrences.

    A recurrence belongs to a user and carries one or more repetitions,
    each describing when it fires.
    """

    __tablename__ = "recurrences"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    first_date = Column(Date, nullable=False)
    repeat_until = Column(Date, nullable=True)
    repetitions = Column(Integer, default=0)  # 0 = repeat forever
    active = Column(Boolean, default=True, nullable=False)

    # Relationships
    user = relationship("User", back_populates="recurrences")
    recurrence_repetitions = relationship(
        "RecurrenceRepetition",
        back_populates="recurrence",
        cascade="all, delete-orphan",
        order_by="RecurrenceRepetition.id",
    )
    notes = relationship(
        "Note",
        back_populates="recurrence",
        cascade="all, delete-orphan",
        order_by="Note.id",
    )

    @validates("repetitions")
    def validate_repetitions(self, key, value):
        """Validate repetitions count."""
        if value is not None and value < 0:
            raise ValueError("Repetitions must be zero or greater")
        return value


class RecurrenceRepetition(AbstractBase, TimestampMixin):
    """
    Model for a single repetition of a recurrence.

    Stores the rule in its persisted form: a type tag, a moment string and
    a skip interval.
    """

    __tablename__ = "recurrence_repetitions"

    recurrence_id = Column(Integer, ForeignKey("recurrences.id"), nullable=False)
    repetition_type = Column(String(50), nullable=False)
    repetition_moment = Column(String(50), nullable=False, default="")
    repetition_skip = Column(Integer, nullable=False, default=0)

    recurrence = relationship("Recurrence", back_populates="recurrence_repetitions")

    @validates("repetition_type")
    def validate_repetition_type(self, key, value):
        """Validate repetition type."""
        valid_types = [t.value for t in RepetitionType]
        if str(value).lower() not in valid_types:
            raise ValueError(
                f"Invalid repetition_type: {value}. Must be one of {valid_types}"
            )
        return str(value).lower()

    @validates("repetition_skip")
    def validate_repetition_skip(self, key, value):
        """Validate repetition skip."""
        if value is None or value < 0:
            raise ValueError("Repetition skip must be zero or greater")
        return value

    def to_rule(self) -> RepetitionRule:
        """Build the immutable rule the occurrence calculator works on."""
        return RepetitionRule(
            type=self.repetition_type,
            moment=self.repetition_moment or "",
            skip=self.repetition_skip or 0,
        )


class Note(AbstractBase, TimestampMixin):
    """Free text attached to a recurrence."""

    __tablename__ = "notes"

    recurrence_id = Column(Integer, ForeignKey("recurrences.id"), nullable=False)
    text = Column(Text, nullable=False, default="")

    recurrence = relationship("Recurrence", back_populates="notes")
