# File: cadence/db/models/base.py
"""
Base models and mixins for Cadence.

This module provides the foundation for all database models in the system:
- Base SQLAlchemy model class
- Timestamp mixin shared by the recurrence tables
- Abstract base with the integer primary key
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, MetaData
from sqlalchemy.orm import declarative_base

# Create the SQLAlchemy base
Base = declarative_base(metadata=MetaData())


class TimestampMixin:
    """
    Mixin providing automatic timestamp functionality.

    Adds created_at and updated_at timestamps that are automatically
    maintained when records are created or updated.
    """

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class AbstractBase(Base):
    """
    Abstract base class for all model entities.

    Attributes:
        id: Primary key ID (auto-incremented)
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
