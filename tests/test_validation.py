"""Tests for record validation and normalization."""
from datetime import date

import pytest

from academic_planner.models import CustomName, DatedOverride, SubjectRef, Weekly
from academic_planner.validation import (
    ValidationError,
    build_grade,
    build_subject,
    build_timetable_entry,
    is_number,
    normalize_time,
    parse_date,
    try_normalize_time,
    validate_solver_inputs,
)


@pytest.mark.parametrize("raw, expected", [
    ("9:00", "09:00"),
    ("09:05", "09:05"),
    ("7:5", "07:05"),
    ("10:30:00", "10:30"),
    (" 23:59 ", "23:59"),
])
def test_normalize_time_pads_and_trims(raw: str, expected: str) -> None:
    assert normalize_time(raw) == expected


@pytest.mark.parametrize("raw", ["", "9", "24:00", "12:60", "ab:cd", None, 900])
def test_normalize_time_rejects_garbage(raw) -> None:
    with pytest.raises(ValidationError):
        normalize_time(raw)
    assert try_normalize_time(raw) is None


def test_is_number_excludes_bools_and_nan() -> None:
    assert is_number(3)
    assert is_number(2.5)
    assert not is_number(True)
    assert not is_number("3")
    assert not is_number(float("nan"))
    assert not is_number(float("inf"))


def test_parse_date() -> None:
    assert parse_date("2024-03-14") == date(2024, 3, 14)
    assert parse_date(date(2024, 3, 14)) == date(2024, 3, 14)
    with pytest.raises(ValidationError, match="week_start"):
        parse_date("14/03/2024", "week_start")


def test_recurring_entry_keeps_its_weekday() -> None:
    entry = build_timetable_entry({
        "id": "e1", "subject_id": "math", "day_of_week": 2,
        "start_time": "9:00", "end_time": "10:00",
    })
    assert entry.occupant == SubjectRef("math")
    assert entry.recurrence == Weekly()
    assert entry.day_of_week == 2
    assert entry.start_time == "09:00"
    assert not entry.is_override


def test_dated_entry_takes_weekday_from_date() -> None:
    # 2024-03-14 is a Thursday
    entry = build_timetable_entry({
        "custom_name": "Dentist", "day_of_week": 0, "date": "2024-03-14",
        "start_time": "11:00", "end_time": "12:00",
    })
    assert entry.occupant == CustomName("Dentist")
    assert entry.recurrence == DatedOverride(date(2024, 3, 14))
    assert entry.day_of_week == 3
    assert entry.to_record()["date"] == "2024-03-14"


def test_subject_wins_over_custom_name() -> None:
    entry = build_timetable_entry({
        "subject_id": "math", "custom_name": "Ignored", "day_of_week": 0,
        "start_time": "09:00", "end_time": "10:00",
    })
    assert entry.subject_id == "math"
    assert entry.custom_name is None


@pytest.mark.parametrize("record, message", [
    ({"day_of_week": 0, "start_time": "09:00", "end_time": "10:00"}, "Select a subject"),
    ({"subject_id": "s", "day_of_week": 0, "start_time": "10:00", "end_time": "10:00"}, "before end"),
    ({"subject_id": "s", "day_of_week": 0, "start_time": "11:00", "end_time": "10:00"}, "before end"),
    ({"subject_id": "s", "day_of_week": 5, "start_time": "09:00", "end_time": "10:00"}, "Day of week"),
    ({"subject_id": "s", "day_of_week": True, "start_time": "09:00", "end_time": "10:00"}, "Day of week"),
    ({"subject_id": "s", "date": "2024-03-16", "start_time": "09:00", "end_time": "10:00"}, "weekday"),
])
def test_invalid_timetable_entries(record: dict, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        build_timetable_entry(record)


def test_build_grade_defaults() -> None:
    grade = build_grade(
        {"title": "Quiz", "subject_id": "math", "score": 7},
        today=date(2024, 3, 1),
    )
    assert grade.weight == 1.0
    assert grade.max_score == 10.0
    assert grade.graded_at == date(2024, 3, 1)
    assert grade.score == 7.0


@pytest.mark.parametrize("record, message", [
    ({"subject_id": "math", "score": 7}, "required fields"),
    ({"title": "Quiz", "score": 7}, "required fields"),
    ({"title": "Quiz", "subject_id": "math", "score": "7"}, "required fields"),
    ({"title": "Quiz", "subject_id": "math", "score": 10.5}, "between 0 and 10"),
    ({"title": "Quiz", "subject_id": "math", "score": -1}, "between 0 and 10"),
    ({"title": "Quiz", "subject_id": "math", "score": 5, "weight": 0}, "positive"),
    ({"title": "Quiz", "subject_id": "math", "score": 5, "weight": "heavy"}, "positive"),
])
def test_invalid_grades(record: dict, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        build_grade(record)


def test_non_strict_grade_keeps_analysis_inputs() -> None:
    grade = build_grade(
        {"subject_id": "math", "score": 12, "weight": "n/a", "graded_at": "2024-01-10"},
        strict=False,
    )
    assert grade.score == 12.0
    assert grade.weight == 1.0
    assert grade.title == ""

    zero = build_grade({"subject_id": "math", "score": 5, "weight": 0}, strict=False)
    assert zero.weight == 0.0


def test_build_subject() -> None:
    subject = build_subject({"id": "s1", "name": " History "})
    assert subject.name == "History"
    assert subject.color == "#6366f1"
    with pytest.raises(ValidationError):
        build_subject({"name": "  "})


@pytest.mark.parametrize("args", [
    ("7", 40, 8),
    (7, 0, 8),
    (7, 120, 8),
    (11, 40, 8),
    (7, 40, -1),
])
def test_invalid_solver_inputs(args) -> None:
    with pytest.raises(ValidationError):
        validate_solver_inputs(*args)


def test_non_strict_grade_defaults_negative_weight() -> None:
    grade = build_grade({"subject_id": "math", "score": 5, "weight": -3}, strict=False)
    assert grade.weight == 1.0
