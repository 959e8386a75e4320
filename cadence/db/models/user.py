# cadence/db/models/user.py
"""
User model for Cadence.

Users own recurrences. Only the fields the recurrence layer reads are kept:
the language preference seeds the locale of repetition descriptions.
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship, validates

from cadence.db.models.base import AbstractBase, TimestampMixin


class User(AbstractBase, TimestampMixin):
    """Owner of recurrences."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    language = Column(String(10), nullable=True)
    is_active = Column(Boolean, default=True)

    recurrences = relationship(
        "Recurrence", back_populates="user", cascade="all, delete-orphan"
    )

    @validates("email")
    def validate_email(self, key, email):
        """Basic email sanity check."""
        if not email or "@" not in email:
            raise ValueError(f"Invalid email: {email}")
        return email.lower()
