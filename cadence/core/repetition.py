# File: cadence/core/repetition.py
"""
Repetition rules for Cadence.

A repetition rule is stored as three plain values: a type tag, a ``moment``
string whose grammar depends on the type, and a skip interval. This module
defines the immutable rule and the decoded, typed view of its moment:

    daily    -> DailyMoment()                 moment unused
    weekly   -> WeeklyMoment(weekday)         "5"           ISO weekday 1..7
    monthly  -> MonthlyMoment(day_of_month)   "31"          1..31
    ndom     -> NthWeekdayMoment(ordinal, w)  "1,1"         ordinal 1..5, weekday 1..7
    yearly   -> YearlyMoment(month, day)      "2018-03-05"  year is a template

The stored grammar is fixed; existing rules must keep parsing exactly.
"""

import calendar
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from cadence.core.exceptions import (
    InvalidRepetitionMomentException,
    UnsupportedRepetitionTypeException,
    ValidationException,
)


class RepetitionType(str, Enum):
    """Kinds of repetition, valued by their stored tag."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    NTH_WEEKDAY_OF_MONTH = "ndom"
    YEARLY = "yearly"


ISO_WEEKDAYS = range(1, 8)
ORDINALS = range(1, 6)

_YEARLY_MOMENT = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


@dataclass(frozen=True)
class DailyMoment:
    pass


@dataclass(frozen=True)
class WeeklyMoment:
    weekday: int  # ISO, Monday = 1


@dataclass(frozen=True)
class MonthlyMoment:
    day_of_month: int


@dataclass(frozen=True)
class NthWeekdayMoment:
    ordinal: int  # 1 = first .. 5 = fifth
    weekday: int  # ISO, Monday = 1


@dataclass(frozen=True)
class YearlyMoment:
    month: int
    day: int


Moment = Union[DailyMoment, WeeklyMoment, MonthlyMoment, NthWeekdayMoment, YearlyMoment]


def _parse_int(repetition_type: RepetitionType, moment: str, value: str, allowed: range) -> int:
    try:
        number = int(value.strip())
    except ValueError:
        raise InvalidRepetitionMomentException(
            repetition_type.value, moment, f"'{value}' is not a number"
        )
    if number not in allowed:
        raise InvalidRepetitionMomentException(
            repetition_type.value,
            moment,
            f"{number} is outside {allowed.start}..{allowed.stop - 1}",
        )
    return number


def parse_moment(repetition_type: RepetitionType, moment: str) -> Moment:
    """
    Decode a stored moment string according to its repetition type.

    Args:
        repetition_type: Type that determines the moment grammar
        moment: Stored moment string

    Returns:
        The decoded moment variant

    Raises:
        InvalidRepetitionMomentException: If the moment does not match the grammar
        UnsupportedRepetitionTypeException: If the type is unknown
    """
    if repetition_type == RepetitionType.DAILY:
        return DailyMoment()

    if moment is None or not str(moment).strip():
        raise InvalidRepetitionMomentException(repetition_type.value, moment, "moment is empty")
    moment = str(moment)

    if repetition_type == RepetitionType.WEEKLY:
        return WeeklyMoment(_parse_int(repetition_type, moment, moment, ISO_WEEKDAYS))

    if repetition_type == RepetitionType.MONTHLY:
        return MonthlyMoment(_parse_int(repetition_type, moment, moment, range(1, 32)))

    if repetition_type == RepetitionType.NTH_WEEKDAY_OF_MONTH:
        parts = moment.split(",")
        if len(parts) != 2:
            raise InvalidRepetitionMomentException(
                repetition_type.value, moment, "expected 'ordinal,weekday'"
            )
        return NthWeekdayMoment(
            ordinal=_parse_int(repetition_type, moment, parts[0], ORDINALS),
            weekday=_parse_int(repetition_type, moment, parts[1], ISO_WEEKDAYS),
        )

    if repetition_type == RepetitionType.YEARLY:
        match = _YEARLY_MOMENT.match(moment.strip())
        if not match:
            raise InvalidRepetitionMomentException(
                repetition_type.value, moment, "expected YYYY-MM-DD"
            )
        month, day = int(match.group(2)), int(match.group(3))
        if not 1 <= month <= 12:
            raise InvalidRepetitionMomentException(
                repetition_type.value, moment, f"month {month} is outside 1..12"
            )
        # The year is only a template, so Feb 29 is valid in any of them.
        if not 1 <= day <= calendar.monthrange(2000, month)[1]:
            raise InvalidRepetitionMomentException(
                repetition_type.value, moment, f"day {day} does not exist in month {month}"
            )
        return YearlyMoment(month=month, day=day)

    raise UnsupportedRepetitionTypeException(repetition_type)


def coerce_repetition_type(value: Any) -> RepetitionType:
    """Map a stored type tag onto RepetitionType, rejecting unknown tags."""
    if isinstance(value, RepetitionType):
        return value
    try:
        return RepetitionType(str(value).lower())
    except ValueError:
        raise UnsupportedRepetitionTypeException(value)


@dataclass(frozen=True)
class RepetitionRule:
    """
    Immutable description of a recurrence pattern.

    Attributes:
        type: Repetition type tag
        moment: Stored moment string, interpreted according to ``type``
        skip: Number of candidates skipped between two kept occurrences
    """

    type: Any
    moment: str = ""
    skip: int = 0

    def __post_init__(self):
        if self.skip is None or int(self.skip) < 0:
            raise ValidationException(
                "Repetition skip must be zero or greater",
                {"skip": [f"got {self.skip}"]},
            )
        object.__setattr__(self, "skip", int(self.skip))

    @property
    def skip_mod(self) -> int:
        """Stride modulus: 1 keeps every candidate, 2 every other one."""
        return self.skip + 1

    @property
    def repetition_type(self) -> RepetitionType:
        return coerce_repetition_type(self.type)

    def decode(self) -> Moment:
        """
        Decode the moment of this rule.

        Raises:
            UnsupportedRepetitionTypeException: For an unknown type or a moment
                that does not match the grammar of the type
        """
        return parse_moment(self.repetition_type, self.moment)
