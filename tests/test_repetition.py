# tests/test_repetition.py
import pytest

from cadence.core.exceptions import (
    InvalidRepetitionMomentException,
    UnsupportedRepetitionTypeException,
    ValidationException,
)
from cadence.core.repetition import (
    DailyMoment,
    MonthlyMoment,
    NthWeekdayMoment,
    RepetitionRule,
    RepetitionType,
    WeeklyMoment,
    YearlyMoment,
)


@pytest.mark.parametrize(
    "repetition_type, moment, expected",
    [
        ("daily", "", DailyMoment()),
        ("daily", "ignored", DailyMoment()),
        ("weekly", "5", WeeklyMoment(weekday=5)),
        ("weekly", " 7 ", WeeklyMoment(weekday=7)),
        ("monthly", "31", MonthlyMoment(day_of_month=31)),
        ("ndom", "1,1", NthWeekdayMoment(ordinal=1, weekday=1)),
        ("ndom", "5, 7", NthWeekdayMoment(ordinal=5, weekday=7)),
        ("yearly", "2018-03-05", YearlyMoment(month=3, day=5)),
        # Template year 2019 has no Feb 29, the rule still does.
        ("yearly", "2019-02-29", YearlyMoment(month=2, day=29)),
    ],
)
def test_decode_stored_moments(repetition_type, moment, expected):
    assert RepetitionRule(repetition_type, moment).decode() == expected


def test_type_tag_is_case_insensitive():
    rule = RepetitionRule("WEEKLY", "5")
    assert rule.repetition_type is RepetitionType.WEEKLY
    assert rule.decode() == WeeklyMoment(weekday=5)


def test_ndom_tag_maps_to_nth_weekday_type():
    assert RepetitionRule("ndom", "2,3").repetition_type is RepetitionType.NTH_WEEKDAY_OF_MONTH


@pytest.mark.parametrize("repetition_type", ["hourly", "", None, "every-other-tuesday"])
def test_unknown_type_is_unsupported(repetition_type):
    with pytest.raises(UnsupportedRepetitionTypeException) as exc_info:
        RepetitionRule(repetition_type, "1").decode()
    assert exc_info.value.code == "RECURRENCE_001"


@pytest.mark.parametrize(
    "repetition_type, moment",
    [
        ("weekly", ""),
        ("weekly", "friday"),
        ("weekly", "0"),
        ("weekly", "8"),
        ("monthly", "0"),
        ("monthly", "32"),
        ("ndom", "1"),
        ("ndom", "1,2,3"),
        ("ndom", "6,1"),
        ("ndom", "1,"),
        ("yearly", "03-05"),
        ("yearly", "2018-13-01"),
        ("yearly", "2018-04-31"),
        ("yearly", "2018-02-30"),
    ],
)
def test_malformed_moment_raises(repetition_type, moment):
    with pytest.raises(InvalidRepetitionMomentException) as exc_info:
        RepetitionRule(repetition_type, moment).decode()
    assert exc_info.value.code == "RECURRENCE_002"
    assert exc_info.value.details["repetition_type"] == repetition_type


def test_malformed_moment_is_an_unsupported_repetition():
    with pytest.raises(UnsupportedRepetitionTypeException):
        RepetitionRule("monthly", "last").decode()


def test_skip_defines_stride():
    assert RepetitionRule("daily").skip_mod == 1
    assert RepetitionRule("daily", skip=2).skip_mod == 3


def test_negative_skip_is_rejected():
    with pytest.raises(ValidationException) as exc_info:
        RepetitionRule("daily", skip=-1)
    assert "skip" in exc_info.value.details["validation_errors"]


def test_rules_are_immutable_values():
    rule = RepetitionRule("weekly", "5", 1)
    assert rule == RepetitionRule("weekly", "5", 1)
    with pytest.raises(AttributeError):
        rule.skip = 3
