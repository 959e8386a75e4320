# cadence/services/occurrence_calculator.py
"""
Occurrence calculation for Cadence.

Turns a repetition rule into concrete calendar dates, either all dates within
a range or the next N dates after an anchor. Both modes share one lazy
candidate stream per moment variant; they differ in how the stream is seeded,
whether the skip stride is applied, and when iteration stops.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from itertools import dropwhile, islice, takewhile
from typing import Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from cadence.core.config import settings
from cadence.core.exceptions import UnsupportedRepetitionTypeException
from cadence.core.repetition import (
    DailyMoment,
    MonthlyMoment,
    NthWeekdayMoment,
    RepetitionRule,
    WeeklyMoment,
    YearlyMoment,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]
D = TypeVar("D", date, datetime)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> int:
    """Clamp ``day`` to the last day of the given month."""
    return min(day, days_in_month(year, month))


def ordinal_weekday(year: int, month: int, ordinal: int, weekday: int) -> Optional[int]:
    """
    Resolve the day of the month of the N-th given weekday.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        ordinal: 1 for the first occurrence, up to 5 for the fifth
        weekday: ISO weekday, Monday = 1

    Returns:
        Day of the month, or None if the month has fewer than ``ordinal``
        such weekdays (e.g. a fifth Monday in a four-Monday month)
    """
    first_weekday = date(year, month, 1).isoweekday()
    day = 1 + (weekday - first_weekday) % 7 + 7 * (ordinal - 1)
    if day > days_in_month(year, month):
        return None
    return day


def first_weekday_after(cursor: D, weekday: int) -> D:
    """First date strictly after ``cursor`` that falls on ISO ``weekday``."""
    return cursor + timedelta(days=(weekday - cursor.isoweekday() - 1) % 7 + 1)


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _months_from(cursor: DateLike) -> Iterator[Tuple[int, int]]:
    year, month = cursor.year, cursor.month
    while True:
        yield year, month
        if month == 12:
            year, month = year + 1, 1
        else:
            month += 1


# --- Candidate streams ---
# Each stream is infinite and strictly ascending. Candidates are built from
# the seed with replace(), so a datetime seed keeps its time of day.


def _daily_candidates(seed: D) -> Iterator[D]:
    cursor = seed
    while True:
        yield cursor
        cursor += timedelta(days=1)


def _weekly_candidates(seed: D, moment: WeeklyMoment) -> Iterator[D]:
    cursor = first_weekday_after(seed, moment.weekday)
    while True:
        yield cursor
        cursor += timedelta(weeks=1)


def _monthly_candidates(seed: D, moment: MonthlyMoment) -> Iterator[D]:
    months = _months_from(seed)
    if seed.day > moment.day_of_month:
        # Day has passed already in the seed month.
        next(months)
    for year, month in months:
        yield seed.replace(
            year=year, month=month, day=clamp_day(year, month, moment.day_of_month)
        )


def _nth_weekday_candidates(seed: D, moment: NthWeekdayMoment) -> Iterator[D]:
    for year, month in _months_from(seed):
        day = ordinal_weekday(year, month, moment.ordinal, moment.weekday)
        if day is None:
            # No such weekday this month: not a candidate at all.
            continue
        yield seed.replace(year=year, month=month, day=day)


def _yearly_candidates(seed: D, moment: YearlyMoment) -> Iterator[D]:
    year = seed.year
    while True:
        # Feb 29 falls back to Feb 28 in common years.
        yield seed.replace(
            year=year, month=moment.month, day=clamp_day(year, moment.month, moment.day)
        )
        year += 1


def _admit(candidates: Iterable[D], skip_mod: int) -> Iterator[D]:
    """Keep every candidate whose attempt number is a multiple of ``skip_mod``."""
    return islice(candidates, 0, None, skip_mod)


class OccurrenceCalculator:
    """
    Calculates occurrence dates for repetition rules.

    The calculator only holds configuration, so one instance can be shared
    between threads. Every call decodes the rule before producing any date:
    it either returns the full list or raises.
    """

    def __init__(self, yearly_range_limit: Optional[int] = None):
        """
        Initialize the calculator.

        Args:
            yearly_range_limit: Maximum yearly matches per range query,
                defaults to settings.YEARLY_RANGE_MATCH_LIMIT
        """
        if yearly_range_limit is None:
            yearly_range_limit = settings.YEARLY_RANGE_MATCH_LIMIT
        self.yearly_range_limit = yearly_range_limit

    def occurrences_in_range(
        self, rule: RepetitionRule, start: DateLike, end: DateLike
    ) -> List[date]:
        """
        Generate the occurrences of a rule within a date range.

        Datetimes are truncated to their calendar day. Daily, weekly and
        nth-weekday occurrences may fall on ``end``; monthly ones must fall
        strictly before it. Nth-weekday and yearly rules ignore the skip
        interval in this mode, and yearly rules return at most
        ``yearly_range_limit`` dates.

        Args:
            rule: Repetition rule
            start: First day of the range
            end: Last day of the range

        Returns:
            Ascending list of occurrence dates

        Raises:
            UnsupportedRepetitionTypeException: If the rule cannot be decoded
        """
        moment = rule.decode()
        start, end = _as_date(start), _as_date(end)
        if start > end:
            return []

        def in_range(candidate: date) -> bool:
            return candidate <= end

        if isinstance(moment, DailyMoment):
            found = _admit(takewhile(in_range, _daily_candidates(start)), rule.skip_mod)
        elif isinstance(moment, WeeklyMoment):
            found = _admit(
                takewhile(in_range, _weekly_candidates(start, moment)), rule.skip_mod
            )
        elif isinstance(moment, MonthlyMoment):
            found = _admit(
                takewhile(lambda d: d < end, _monthly_candidates(start, moment)),
                rule.skip_mod,
            )
        elif isinstance(moment, NthWeekdayMoment):
            found = takewhile(
                in_range,
                dropwhile(lambda d: d < start, _nth_weekday_candidates(start, moment)),
            )
        elif isinstance(moment, YearlyMoment):
            found = islice(
                takewhile(
                    in_range,
                    dropwhile(lambda d: d < start, _yearly_candidates(start, moment)),
                ),
                self.yearly_range_limit,
            )
        else:
            raise UnsupportedRepetitionTypeException(rule.type)

        occurrences = list(found)
        logger.debug(
            f"Calculated {len(occurrences)} {rule.repetition_type.value} occurrences "
            f"between {start} and {end} (moment={rule.moment!r}, skip={rule.skip})"
        )
        return occurrences

    def occurrences_from_count(
        self, rule: RepetitionRule, anchor: D, count: int
    ) -> List[D]:
        """
        Generate the next ``count`` occurrences strictly after ``anchor``.

        The anchor itself is treated as already elapsed. The skip interval
        applies to every repetition type. Results have the same type as the
        anchor, and a datetime anchor keeps its time of day.

        Args:
            rule: Repetition rule
            anchor: Date after which occurrences are generated
            count: Number of occurrences to return; zero or less returns none

        Returns:
            Ascending list of exactly ``count`` occurrences

        Raises:
            UnsupportedRepetitionTypeException: If the rule cannot be decoded
        """
        moment = rule.decode()
        if count <= 0:
            return []

        def not_after_anchor(candidate) -> bool:
            return candidate <= anchor

        if isinstance(moment, DailyMoment):
            candidates = _daily_candidates(anchor + timedelta(days=1))
        elif isinstance(moment, WeeklyMoment):
            candidates = _weekly_candidates(anchor, moment)
        elif isinstance(moment, MonthlyMoment):
            candidates = _monthly_candidates(anchor + timedelta(days=1), moment)
        elif isinstance(moment, NthWeekdayMoment):
            candidates = dropwhile(
                not_after_anchor,
                _nth_weekday_candidates(anchor + timedelta(days=1), moment),
            )
        elif isinstance(moment, YearlyMoment):
            candidates = dropwhile(not_after_anchor, _yearly_candidates(anchor, moment))
        else:
            raise UnsupportedRepetitionTypeException(rule.type)

        occurrences = list(islice(_admit(candidates, rule.skip_mod), count))
        logger.debug(
            f"Calculated {len(occurrences)} {rule.repetition_type.value} occurrences "
            f"after {anchor} (moment={rule.moment!r}, skip={rule.skip})"
        )
        return occurrences


_default_calculator = OccurrenceCalculator()


def occurrences_in_range(rule: RepetitionRule, start: DateLike, end: DateLike) -> List[date]:
    """Occurrences of ``rule`` between ``start`` and ``end``."""
    return _default_calculator.occurrences_in_range(rule, start, end)


def occurrences_from_count(rule: RepetitionRule, anchor: D, count: int) -> List[D]:
    """The next ``count`` occurrences of ``rule`` after ``anchor``."""
    return _default_calculator.occurrences_from_count(rule, anchor, count)
