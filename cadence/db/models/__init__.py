# cadence/db/models/__init__.py
"""
Database models for Cadence.

Importing this package registers every table on ``Base.metadata``.
"""

from cadence.db.models.base import Base, AbstractBase, TimestampMixin
from cadence.db.models.user import User
from cadence.db.models.recurrence import Recurrence, RecurrenceRepetition, Note

__all__ = [
    "Base",
    "AbstractBase",
    "TimestampMixin",
    "User",
    "Recurrence",
    "RecurrenceRepetition",
    "Note",
]
