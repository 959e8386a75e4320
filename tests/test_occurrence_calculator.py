# tests/test_occurrence_calculator.py
from datetime import date, datetime

import pytest

from cadence.core.exceptions import (
    InvalidRepetitionMomentException,
    UnsupportedRepetitionTypeException,
)
from cadence.core.repetition import RepetitionRule
from cadence.services.occurrence_calculator import (
    OccurrenceCalculator,
    first_weekday_after,
    occurrences_from_count,
    occurrences_in_range,
    ordinal_weekday,
)


@pytest.fixture
def calculator():
    return OccurrenceCalculator(yearly_range_limit=10)


# --- Calendar helpers ---


def test_ordinal_weekday_resolves_first_monday():
    # March 2024 starts on a Friday
    assert ordinal_weekday(2024, 3, 1, 1) == 4


def test_ordinal_weekday_missing_fifth_weekday():
    assert ordinal_weekday(2024, 1, 5, 1) == 29
    assert ordinal_weekday(2024, 2, 5, 1) is None


def test_first_weekday_after_is_strict():
    friday = date(2024, 1, 5)
    assert first_weekday_after(friday, 5) == date(2024, 1, 12)
    assert first_weekday_after(date(2024, 1, 1), 5) == friday


# --- Range mode ---


def test_daily_range(calculator):
    rule = RepetitionRule("daily")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 1, 5)) == [
        date(2024, 1, 1),
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 4),
        date(2024, 1, 5),
    ]


def test_weekly_range_fridays(calculator):
    rule = RepetitionRule("weekly", "5")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 1, 31)) == [
        date(2024, 1, 5),
        date(2024, 1, 12),
        date(2024, 1, 19),
        date(2024, 1, 26),
    ]


def test_nth_weekday_range_first_monday(calculator):
    rule = RepetitionRule("ndom", "1,1")
    assert calculator.occurrences_in_range(rule, date(2024, 3, 1), date(2024, 5, 31)) == [
        date(2024, 3, 4),
        date(2024, 4, 1),
        date(2024, 5, 6),
    ]


def test_monthly_range_clamps_to_month_end(calculator):
    rule = RepetitionRule("monthly", "31")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 5, 1)) == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_monthly_range_excludes_end(calculator):
    rule = RepetitionRule("monthly", "30")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 3, 30)) == [
        date(2024, 1, 30),
        date(2024, 2, 29),
    ]


def test_daily_and_weekly_range_include_end(calculator):
    assert calculator.occurrences_in_range(
        RepetitionRule("daily"), date(2024, 1, 5), date(2024, 1, 5)
    ) == [date(2024, 1, 5)]
    assert calculator.occurrences_in_range(
        RepetitionRule("weekly", "5"), date(2024, 1, 1), date(2024, 1, 5)
    ) == [date(2024, 1, 5)]


def test_nth_weekday_range_skips_months_without_match(calculator):
    rule = RepetitionRule("ndom", "5,1")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 6, 30)) == [
        date(2024, 1, 29),
        date(2024, 4, 29),
    ]


def test_nth_weekday_range_stays_within_bounds(calculator):
    rule = RepetitionRule("ndom", "1,1")
    # First Monday of March 2024 is before the range, of May after it.
    assert calculator.occurrences_in_range(rule, date(2024, 3, 10), date(2024, 5, 5)) == [
        date(2024, 4, 1),
    ]


def test_yearly_range(calculator):
    rule = RepetitionRule("yearly", "2018-03-05")
    assert calculator.occurrences_in_range(rule, date(2024, 3, 6), date(2027, 3, 5)) == [
        date(2025, 3, 5),
        date(2026, 3, 5),
        date(2027, 3, 5),
    ]


def test_yearly_range_is_capped(calculator):
    rule = RepetitionRule("yearly", "2018-03-05")
    result = calculator.occurrences_in_range(rule, date(2000, 1, 1), date(2099, 12, 31))
    assert len(result) == 10
    assert result[0] == date(2000, 3, 5)
    assert result[-1] == date(2009, 3, 5)


def test_yearly_range_cap_is_configurable():
    rule = RepetitionRule("yearly", "2018-03-05")
    result = OccurrenceCalculator(yearly_range_limit=3).occurrences_in_range(
        rule, date(2000, 1, 1), date(2099, 12, 31)
    )
    assert result == [date(2000, 3, 5), date(2001, 3, 5), date(2002, 3, 5)]


def test_yearly_range_cap_of_zero_is_kept():
    calculator = OccurrenceCalculator(yearly_range_limit=0)
    assert calculator.yearly_range_limit == 0
    assert calculator.occurrences_in_range(
        RepetitionRule("yearly", "2018-03-05"), date(2000, 1, 1), date(2099, 12, 31)
    ) == []


def test_yearly_leap_day_range_clamps_in_common_years(calculator):
    rule = RepetitionRule("yearly", "2020-02-29")
    assert calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2025, 12, 31)) == [
        date(2024, 2, 29),
        date(2025, 2, 28),
    ]


def test_skip_stride_in_range(calculator):
    assert calculator.occurrences_in_range(
        RepetitionRule("daily", skip=1), date(2024, 1, 1), date(2024, 1, 7)
    ) == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5), date(2024, 1, 7)]
    assert calculator.occurrences_in_range(
        RepetitionRule("weekly", "5", skip=1), date(2024, 1, 1), date(2024, 1, 31)
    ) == [date(2024, 1, 5), date(2024, 1, 19)]
    assert calculator.occurrences_in_range(
        RepetitionRule("monthly", "31", skip=2), date(2024, 1, 1), date(2024, 12, 31)
    ) == [date(2024, 1, 31), date(2024, 4, 30), date(2024, 7, 31), date(2024, 10, 31)]


def test_range_ignores_skip_for_nth_weekday_and_yearly(calculator):
    assert calculator.occurrences_in_range(
        RepetitionRule("ndom", "1,1", skip=1), date(2024, 3, 1), date(2024, 5, 31)
    ) == [date(2024, 3, 4), date(2024, 4, 1), date(2024, 5, 6)]
    assert calculator.occurrences_in_range(
        RepetitionRule("yearly", "2018-03-05", skip=1), date(2024, 1, 1), date(2026, 12, 31)
    ) == [date(2024, 3, 5), date(2025, 3, 5), date(2026, 3, 5)]


def test_range_with_start_after_end_is_empty(calculator):
    assert calculator.occurrences_in_range(
        RepetitionRule("daily"), date(2024, 2, 1), date(2024, 1, 1)
    ) == []


def test_range_truncates_datetimes(calculator):
    result = calculator.occurrences_in_range(
        RepetitionRule("daily"), datetime(2024, 1, 1, 23, 0), datetime(2024, 1, 2, 1, 0)
    )
    assert result == [date(2024, 1, 1), date(2024, 1, 2)]
    assert all(type(d) is date for d in result)


@pytest.mark.parametrize(
    "rule",
    [
        RepetitionRule("daily", skip=3),
        RepetitionRule("weekly", "2", skip=1),
        RepetitionRule("monthly", "29"),
        RepetitionRule("ndom", "4,6"),
        RepetitionRule("yearly", "2020-02-29"),
    ],
)
def test_range_results_are_ascending_and_contained(calculator, rule):
    start, end = date(2023, 11, 15), date(2025, 6, 20)
    result = calculator.occurrences_in_range(rule, start, end)
    assert result
    assert all(a < b for a, b in zip(result, result[1:]))
    assert all(start <= d <= end for d in result)
    # Pure: same input, same output
    assert calculator.occurrences_in_range(rule, start, end) == result


# --- Count mode ---


def test_monthly_count_clamps_in_leap_year(calculator):
    rule = RepetitionRule("monthly", "31")
    assert calculator.occurrences_from_count(rule, date(2024, 1, 15), 3) == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
    ]


def test_monthly_count_clamps_in_common_year(calculator):
    rule = RepetitionRule("monthly", "31")
    assert calculator.occurrences_from_count(rule, date(2023, 1, 15), 3) == [
        date(2023, 1, 31),
        date(2023, 2, 28),
        date(2023, 3, 31),
    ]


def test_monthly_count_on_moment_day_starts_next_month(calculator):
    rule = RepetitionRule("monthly", "15")
    assert calculator.occurrences_from_count(rule, date(2024, 1, 15), 2) == [
        date(2024, 2, 15),
        date(2024, 3, 15),
    ]


def test_daily_count_starts_after_anchor(calculator):
    assert calculator.occurrences_from_count(RepetitionRule("daily"), date(2024, 12, 30), 3) == [
        date(2024, 12, 31),
        date(2025, 1, 1),
        date(2025, 1, 2),
    ]


def test_weekly_count_on_matching_weekday(calculator):
    # 2024-01-05 is a Friday; the anchor itself is never returned.
    assert calculator.occurrences_from_count(
        RepetitionRule("weekly", "5"), date(2024, 1, 5), 2
    ) == [date(2024, 1, 12), date(2024, 1, 19)]


def test_nth_weekday_count_skips_months_without_match(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("ndom", "5,1"), date(2024, 1, 1), 3
    ) == [date(2024, 1, 29), date(2024, 4, 29), date(2024, 7, 29)]


def test_nth_weekday_count_excludes_earlier_days_of_anchor_month(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("ndom", "1,1"), date(2024, 3, 4), 2
    ) == [date(2024, 4, 1), date(2024, 5, 6)]


def test_yearly_count_excludes_anchor_day(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("yearly", "2018-03-05"), date(2024, 3, 5), 2
    ) == [date(2025, 3, 5), date(2026, 3, 5)]


def test_yearly_leap_day_clamps_in_common_years(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("yearly", "2020-02-29"), date(2023, 1, 1), 3
    ) == [date(2023, 2, 28), date(2024, 2, 29), date(2025, 2, 28)]


def test_count_applies_skip_to_every_type(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("monthly", "31", skip=1), date(2024, 1, 15), 3
    ) == [date(2024, 1, 31), date(2024, 3, 31), date(2024, 5, 31)]
    assert calculator.occurrences_from_count(
        RepetitionRule("ndom", "1,1", skip=1), date(2024, 2, 29), 2
    ) == [date(2024, 3, 4), date(2024, 5, 6)]
    assert calculator.occurrences_from_count(
        RepetitionRule("yearly", "2018-03-05", skip=1), date(2024, 1, 1), 2
    ) == [date(2024, 3, 5), date(2026, 3, 5)]


@pytest.mark.parametrize(
    "rule",
    [
        RepetitionRule("daily"),
        RepetitionRule("weekly", "3", skip=2),
        RepetitionRule("monthly", "31"),
        RepetitionRule("ndom", "5,5"),
        RepetitionRule("yearly", "2018-12-31", skip=1),
    ],
)
def test_count_is_exact(calculator, rule):
    # Well beyond the yearly range cap
    result = calculator.occurrences_from_count(rule, date(2024, 6, 1), 25)
    assert len(result) == 25
    assert all(a < b for a, b in zip(result, result[1:]))
    assert result[0] > date(2024, 6, 1)


def test_count_zero_is_empty(calculator):
    assert calculator.occurrences_from_count(RepetitionRule("daily"), date(2024, 1, 1), 0) == []


def test_count_keeps_time_of_datetime_anchor(calculator):
    assert calculator.occurrences_from_count(
        RepetitionRule("daily"), datetime(2024, 1, 1, 9, 30), 2
    ) == [datetime(2024, 1, 2, 9, 30), datetime(2024, 1, 3, 9, 30)]


# --- Errors ---


def test_unsupported_type_raises_in_both_modes(calculator):
    rule = RepetitionRule("hourly", "1")
    with pytest.raises(UnsupportedRepetitionTypeException):
        calculator.occurrences_in_range(rule, date(2024, 1, 1), date(2024, 1, 31))
    with pytest.raises(UnsupportedRepetitionTypeException):
        calculator.occurrences_from_count(rule, date(2024, 1, 1), 3)


def test_malformed_moment_raises_before_empty_result(calculator):
    rule = RepetitionRule("weekly", "")
    with pytest.raises(InvalidRepetitionMomentException):
        calculator.occurrences_from_count(rule, date(2024, 1, 1), 0)
    with pytest.raises(InvalidRepetitionMomentException):
        calculator.occurrences_in_range(rule, date(2024, 2, 1), date(2024, 1, 1))


def test_module_level_helpers():
    rule = RepetitionRule("weekly", "1")
    assert occurrences_in_range(rule, date(2024, 1, 1), date(2024, 1, 8)) == [date(2024, 1, 8)]
    assert occurrences_from_count(rule, date(2024, 1, 1), 1) == [date(2024, 1, 8)]
