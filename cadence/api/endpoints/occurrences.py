# cadence/api/endpoints/occurrences.py
"""
Occurrence API endpoints for Cadence.

Stateless endpoints: the client sends a repetition rule and gets occurrence
dates or a localized description back. Nothing is read from or written to
the database.
"""

from fastapi import APIRouter, HTTPException, status

from cadence.core.config import settings
from cadence.core.exceptions import UnsupportedRepetitionTypeException
from cadence.schemas.occurrence import (
    DescriptionRequest,
    DescriptionResponse,
    OccurrenceCountRequest,
    OccurrenceList,
    OccurrenceRangeRequest,
)
from cadence.services.description_service import RepetitionDescriptionService
from cadence.services.occurrence_calculator import OccurrenceCalculator

router = APIRouter()

calculator = OccurrenceCalculator()
description_service = RepetitionDescriptionService()


@router.post("/range", response_model=OccurrenceList)
def occurrences_in_range(*, request: OccurrenceRangeRequest):
    """
    Calculate all occurrences of a rule within a date range.

    Args:
        request: Rule plus first and last day of the range

    Returns:
        Ascending occurrence dates

    Raises:
        HTTPException: 400 if the range is too long, 422 if the rule cannot be used
    """
    span = (request.end - request.start).days
    if span > settings.MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Range spans {span} days, the maximum is {settings.MAX_RANGE_DAYS}",
        )
    try:
        occurrences = calculator.occurrences_in_range(
            request.rule.to_rule(), request.start, request.end
        )
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    return OccurrenceList(occurrences=occurrences)


@router.post("/count", response_model=OccurrenceList)
def occurrences_from_count(*, request: OccurrenceCountRequest):
    """
    Calculate the next occurrences of a rule after an anchor date.

    Args:
        request: Rule, anchor date and number of occurrences

    Returns:
        Ascending occurrence dates

    Raises:
        HTTPException: 400 if the count is too high, 422 if the rule cannot be used
    """
    if request.count > settings.MAX_OCCURRENCE_COUNT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Count {request.count} exceeds the maximum of {settings.MAX_OCCURRENCE_COUNT}",
        )
    try:
        occurrences = calculator.occurrences_from_count(
            request.rule.to_rule(), request.anchor, request.count
        )
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    return OccurrenceList(occurrences=occurrences)


@router.post("/describe", response_model=DescriptionResponse)
def describe_rule(*, request: DescriptionRequest):
    """
    Describe a rule in the requested locale.

    Raises:
        HTTPException: 422 if the rule cannot be used
    """
    locale = description_service.resolve_locale(request.locale)
    try:
        description = description_service.describe(request.rule.to_rule(), locale)
    except UnsupportedRepetitionTypeException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    return DescriptionResponse(description=description, locale=locale)
