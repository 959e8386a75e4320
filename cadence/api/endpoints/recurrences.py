# cadence/api/endpoints/recurrences.py
"""
Recurrence API endpoints for Cadence.

This module provides endpoints for managing a user's stored recurrences and
for calculating the occurrences of their repetitions.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.orm import Session

from cadence.api.deps import get_current_user
from cadence.core.config import settings
from cadence.core.exceptions import (
    EntityNotFoundException,
    UnsupportedRepetitionTypeException,
    ValidationException,
)
from cadence.db.models.recurrence import Recurrence as RecurrenceModel
from cadence.db.models.user import User
from cadence.db.session import get_db
from cadence.repositories.recurrence_repository import RecurrenceRepository
from cadence.schemas.recurrence import (
    Recurrence,
    RecurrenceCreate,
    RecurrenceOccurrences,
    RecurrenceUpdate,
    RepetitionOccurrences,
)
from cadence.services.recurrence_service import RecurrenceService

router = APIRouter()


def _get_owned_recurrence(db: Session, recurrence_id: int, user: User) -> RecurrenceModel:
    try:
        recurrence = RecurrenceService(db).get_recurrence(recurrence_id)
    except EntityNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    # Other users' recurrences are reported as missing
    if recurrence.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recurrence with ID {recurrence_id} not found",
        )
    return recurrence


@router.get("/", response_model=List[Recurrence])
def list_active_recurrences(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the active recurrences of the current user.

    Args:
        db: Database session
        current_user: User the request acts for

    Returns:
        Active recurrences with their repetitions
    """
    return RecurrenceRepository(db, current_user).get_active()


@router.post("/", response_model=Recurrence, status_code=status.HTTP_201_CREATED)
def create_recurrence(
    *,
    db: Session = Depends(get_db),
    recurrence_in: RecurrenceCreate,
    current_user: User = Depends(get_current_user),
):
    """
    Create a new recurrence.

    Args:
        db: Database session
        recurrence_in: Recurrence data with at least one repetition
        current_user: User the request acts for

    Returns:
        Created recurrence

    Raises:
        HTTPException: 422 if a repetition cannot be decoded
    """
    repository = RecurrenceRepository(db, current_user)
    try:
        return repository.store(recurrence_in.model_dump())
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/{recurrence_id}", response_model=Recurrence)
def get_recurrence(
    *,
    db: Session = Depends(get_db),
    recurrence_id: int = Path(..., description="The ID of the recurrence to retrieve"),
    current_user: User = Depends(get_current_user),
):
    """
    Get a recurrence of the current user.

    Raises:
        HTTPException: 404 if the recurrence doesn't exist
    """
    return _get_owned_recurrence(db, recurrence_id, current_user)


@router.patch("/{recurrence_id}", response_model=Recurrence)
def update_recurrence(
    *,
    db: Session = Depends(get_db),
    recurrence_id: int = Path(..., description="The ID of the recurrence to update"),
    recurrence_in: RecurrenceUpdate,
    current_user: User = Depends(get_current_user),
):
    """
    Update a recurrence.

    Args:
        db: Database session
        recurrence_id: ID of the recurrence to update
        recurrence_in: Fields to update; repetitions and note are replaced as a whole
        current_user: User the request acts for

    Returns:
        Updated recurrence

    Raises:
        HTTPException: 404 if the recurrence doesn't exist, 422 if a repetition
            cannot be decoded
    """
    recurrence = _get_owned_recurrence(db, recurrence_id, current_user)
    repository = RecurrenceRepository(db, current_user)
    try:
        return repository.update_recurrence(
            recurrence, recurrence_in.model_dump(exclude_unset=True)
        )
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.delete("/{recurrence_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurrence(
    *,
    db: Session = Depends(get_db),
    recurrence_id: int = Path(..., description="The ID of the recurrence to delete"),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a recurrence with its repetitions and notes.

    Raises:
        HTTPException: 404 if the recurrence doesn't exist
    """
    _get_owned_recurrence(db, recurrence_id, current_user)
    try:
        RecurrenceService(db).delete_recurrence(recurrence_id)
    except EntityNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recurrence_id}/occurrences", response_model=RecurrenceOccurrences)
def get_recurrence_occurrences(
    *,
    db: Session = Depends(get_db),
    recurrence_id: int = Path(..., description="The ID of the recurrence"),
    start: Optional[date] = Query(None, description="First day of the range"),
    end: Optional[date] = Query(None, description="Last day of the range"),
    anchor: Optional[date] = Query(None, description="Date after which to count, defaults to today"),
    count: Optional[int] = Query(None, ge=0, description="Number of occurrences per repetition"),
    locale: Optional[str] = Query(None, description="Locale of the descriptions"),
    current_user: User = Depends(get_current_user),
):
    """
    Calculate the occurrences of every repetition of a recurrence.

    Either ``start`` and ``end`` (range mode) or ``count`` (count mode) must
    be given.

    Returns:
        Note text plus occurrences and description per repetition

    Raises:
        HTTPException: 400 for a missing or oversized query, 404 if the
            recurrence doesn't exist, 422 if a stored repetition cannot be decoded
    """
    recurrence = _get_owned_recurrence(db, recurrence_id, current_user)
    repository = RecurrenceRepository(db, current_user)

    range_mode = start is not None and end is not None
    if not range_mode and count is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either start and end or count must be given",
        )
    if range_mode and (end - start).days > settings.MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Range spans more than {settings.MAX_RANGE_DAYS} days",
        )
    if not range_mode and count > settings.MAX_OCCURRENCE_COUNT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Count {count} exceeds the maximum of {settings.MAX_OCCURRENCE_COUNT}",
        )

    repetitions = []
    try:
        for repetition in recurrence.recurrence_repetitions:
            if range_mode:
                occurrences = repository.get_occurrences_in_range(repetition, start, end)
            else:
                occurrences = repository.get_x_occurrences(
                    repetition, anchor or date.today(), count
                )
            repetitions.append(
                RepetitionOccurrences(
                    repetition_id=repetition.id,
                    description=repository.repetition_description(repetition, locale),
                    occurrences=occurrences,
                )
            )
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)

    return RecurrenceOccurrences(
        recurrence_id=recurrence.id,
        title=recurrence.title,
        note=repository.get_note_text(recurrence),
        repetitions=repetitions,
    )
