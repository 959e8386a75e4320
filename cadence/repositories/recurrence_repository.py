# cadence/repositories/recurrence_repository.py
"""
Repository implementations for recurrences, repetitions and notes.

``RecurrenceRepository`` is scoped to one user. Besides data access it is the
entry point for everything a caller does with a stored repetition:
calculating occurrences and describing it in the user's language.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from cadence.core.config import settings
from cadence.core.exceptions import EntityNotFoundException
from cadence.db.models.recurrence import Note, Recurrence, RecurrenceRepetition
from cadence.db.models.user import User
from cadence.repositories.base_repository import BaseRepository
from cadence.services.description_service import RepetitionDescriptionService
from cadence.services.occurrence_calculator import OccurrenceCalculator

DateLike = Union[date, datetime]


class RecurrenceRepository(BaseRepository[Recurrence]):
    """Repository for recurrence entities belonging to a user."""

    def __init__(
        self,
        session: Session,
        user: Optional[User] = None,
        calculator: Optional[OccurrenceCalculator] = None,
        description_service: Optional[RepetitionDescriptionService] = None,
    ):
        """
        Initialize the RecurrenceRepository.

        Args:
            session: SQLAlchemy database session
            user: Owner whose recurrences are read
            calculator: Optional occurrence calculator
            description_service: Optional repetition description formatter
        """
        super().__init__(session, Recurrence)
        self.user = user
        self.calculator = calculator or OccurrenceCalculator()
        self.description_service = description_service or RepetitionDescriptionService()

    def set_user(self, user: User) -> None:
        """Set the user this repository reads recurrences for."""
        self.user = user

    def _require_user(self) -> User:
        if self.user is None:
            raise TypeError(f"No user set for {self.__class__.__name__}")
        return self.user

    def get_active(self) -> List[Recurrence]:
        """
        Return all of the user's active recurrences.

        Returns:
            Active recurrences with their repetitions and notes loaded
        """
        user = self._require_user()
        stmt = (
            select(Recurrence)
            .where(Recurrence.user_id == user.id, Recurrence.active.is_(True))
            .options(
                selectinload(Recurrence.recurrence_repetitions),
                selectinload(Recurrence.notes),
            )
            .order_by(Recurrence.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_note_text(self, recurrence: Recurrence) -> str:
        """
        Get the text of the first note of a recurrence.

        Returns:
            Note text, or an empty string if the recurrence has no note
        """
        stmt = (
            select(Note)
            .where(Note.recurrence_id == recurrence.id)
            .order_by(Note.id)
            .limit(1)
        )
        note = self.session.execute(stmt).scalar_one_or_none()
        if note is not None:
            return str(note.text or "")
        return ""

    def get_occurrences_in_range(
        self, repetition: RecurrenceRepetition, start: DateLike, end: DateLike
    ) -> List[date]:
        """
        Generate the occurrences of a repetition in a date range.

        Raises:
            UnsupportedRepetitionTypeException: If the repetition cannot be decoded
        """
        return self.calculator.occurrences_in_range(repetition.to_rule(), start, end)

    def get_x_occurrences(
        self, repetition: RecurrenceRepetition, anchor: DateLike, count: int
    ) -> List[DateLike]:
        """
        Calculate the next ``count`` occurrences after ``anchor``.

        Raises:
            UnsupportedRepetitionTypeException: If the repetition cannot be decoded
        """
        return self.calculator.occurrences_from_count(repetition.to_rule(), anchor, count)

    def repetition_description(
        self, repetition: RecurrenceRepetition, locale: Optional[str] = None
    ) -> str:
        """
        Describe a repetition in a human-readable way.

        Args:
            repetition: Repetition to describe
            locale: Explicit locale; defaults to the user's language, then to
                the configured default locale

        Raises:
            UnsupportedRepetitionTypeException: If the repetition cannot be decoded
        """
        if locale is None:
            locale = getattr(self.user, "language", None) or settings.DEFAULT_LOCALE
        return self.description_service.describe(repetition.to_rule(), locale)

    def store(self, data: Dict[str, Any]) -> Recurrence:
        """Create a recurrence for the user."""
        from cadence.services.recurrence_service import RecurrenceService

        user = self._require_user()
        return RecurrenceService(self.session, repository=self).create_recurrence(
            data, user.id
        )

    def update_recurrence(self, recurrence: Recurrence, data: Dict[str, Any]) -> Recurrence:
        """
        Update a recurrence of the user.

        Raises:
            TypeError: If no user is set
            EntityNotFoundException: If the recurrence belongs to another user
        """
        from cadence.services.recurrence_service import RecurrenceService

        user = self._require_user()
        if recurrence.user_id != user.id:
            raise EntityNotFoundException("Recurrence", recurrence.id)
        return RecurrenceService(self.session, repository=self).update_recurrence(
            recurrence.id, data
        )


class RecurrenceRepetitionRepository(BaseRepository[RecurrenceRepetition]):
    """Repository for recurrence repetition entities."""

    def __init__(self, session: Session):
        super().__init__(session, RecurrenceRepetition)


class NoteRepository(BaseRepository[Note]):
    """Repository for recurrence notes."""

    def __init__(self, session: Session):
        super().__init__(session, Note)
