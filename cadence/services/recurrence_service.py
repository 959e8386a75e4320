# cadence/services/recurrence_service.py
"""
Recurrence service for Cadence.

This module provides functionality for creating, updating and deleting
recurrences together with their repetitions and notes.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from cadence.core.exceptions import EntityNotFoundException, ValidationException
from cadence.core.repetition import RepetitionRule
from cadence.db.models.recurrence import Recurrence
from cadence.repositories.recurrence_repository import (
    NoteRepository,
    RecurrenceRepetitionRepository,
    RecurrenceRepository,
)
from cadence.repositories.user_repository import UserRepository
from cadence.services.base_service import BaseService

logger = logging.getLogger(__name__)


class RecurrenceService(BaseService[Recurrence]):
    """
    Service for managing recurrences.

    Repetitions are decoded before anything is written, so a recurrence with
    an unsupported repetition type or a malformed moment is never stored.
    """

    def __init__(
        self,
        session: Session,
        repository: Optional[RecurrenceRepository] = None,
        repetition_repository: Optional[RecurrenceRepetitionRepository] = None,
        note_repository: Optional[NoteRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        """
        Initialize RecurrenceService with dependencies.

        Args:
            session: Database session for persistence operations
            repository: Optional repository for recurrences
            repetition_repository: Optional repository for repetitions
            note_repository: Optional repository for notes
            user_repository: Optional repository for users
        """
        super().__init__(session, repository=repository or RecurrenceRepository(session))
        self.repetition_repository = (
            repetition_repository or RecurrenceRepetitionRepository(session)
        )
        self.note_repository = note_repository or NoteRepository(session)
        self.user_repository = user_repository or UserRepository(session)

    def get_recurrence(self, recurrence_id: int) -> Recurrence:
        """
        Get a recurrence by ID.

        Raises:
            EntityNotFoundException: If the recurrence does not exist
        """
        return self.get_or_raise(recurrence_id)

    def create_recurrence(self, data: Dict[str, Any], user_id: int) -> Recurrence:
        """
        Create a new recurrence with its repetitions and optional note.

        Args:
            data: Recurrence fields plus ``recurrence_repetitions`` (list of
                dicts with type, moment and skip) and an optional ``notes`` text
            user_id: ID of the owning user

        Returns:
            Created recurrence

        Raises:
            EntityNotFoundException: If the user does not exist
            ValidationException: If no repetition is given
            UnsupportedRepetitionTypeException: If a repetition cannot be decoded
        """
        data = dict(data)
        repetition_rows = self._repetition_rows(data.pop("recurrence_repetitions", None))
        note_text = data.pop("notes", None)

        if self.user_repository.get_by_id(user_id) is None:
            raise EntityNotFoundException("User", user_id)

        with self.transaction():
            data["user_id"] = user_id
            recurrence = self.repository.create(data)

            for row in repetition_rows:
                row["recurrence_id"] = recurrence.id
                self.repetition_repository.create(row)

            if note_text:
                self.note_repository.create(
                    {"recurrence_id": recurrence.id, "text": note_text}
                )

        logger.info(
            f"Created recurrence {recurrence.id} for user {user_id} "
            f"with {len(repetition_rows)} repetition(s)"
        )
        return recurrence

    def update_recurrence(self, recurrence_id: int, data: Dict[str, Any]) -> Recurrence:
        """
        Update a recurrence.

        Repetitions are replaced as a whole when ``recurrence_repetitions`` is
        given; the note is replaced when ``notes`` is given (an empty string
        removes it).

        Args:
            recurrence_id: ID of the recurrence to update
            data: Fields to update

        Returns:
            Updated recurrence

        Raises:
            EntityNotFoundException: If the recurrence does not exist
            UnsupportedRepetitionTypeException: If a repetition cannot be decoded
        """
        data = dict(data)
        data.pop("user_id", None)
        recurrence = self.get_or_raise(recurrence_id)

        repetitions_data = data.pop("recurrence_repetitions", None)
        repetition_rows = (
            self._repetition_rows(repetitions_data) if repetitions_data is not None else None
        )
        note_text = data.pop("notes", None)

        with self.transaction():
            if data:
                self.repository.update(recurrence_id, data)

            if repetition_rows is not None:
                for repetition in list(recurrence.recurrence_repetitions):
                    self.repetition_repository.delete(repetition.id)
                for row in repetition_rows:
                    row["recurrence_id"] = recurrence_id
                    self.repetition_repository.create(row)

            if note_text is not None:
                for note in list(recurrence.notes):
                    self.note_repository.delete(note.id)
                if note_text:
                    self.note_repository.create(
                        {"recurrence_id": recurrence_id, "text": note_text}
                    )

        self.session.refresh(recurrence)
        logger.info(f"Updated recurrence {recurrence_id}")
        return recurrence

    def delete_recurrence(self, recurrence_id: int) -> bool:
        """
        Delete a recurrence with its repetitions and notes.

        Raises:
            EntityNotFoundException: If the recurrence does not exist
        """
        self.get_or_raise(recurrence_id)
        with self.transaction():
            result = self.repository.delete(recurrence_id)
        logger.info(f"Deleted recurrence {recurrence_id}")
        return result

    def _repetition_rows(self, repetitions: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Decode every repetition and convert it to column values."""
        if not repetitions:
            raise ValidationException(
                "At least one repetition is required",
                {"recurrence_repetitions": ["This field is required"]},
            )

        rows = []
        for item in repetitions:
            rule = RepetitionRule(
                type=item.get("type"),
                moment=str(item.get("moment") or ""),
                skip=item.get("skip", 0),
            )
            rule.decode()
            rows.append(
                {
                    "repetition_type": rule.repetition_type.value,
                    "repetition_moment": rule.moment,
                    "repetition_skip": rule.skip,
                }
            )
        return rows
