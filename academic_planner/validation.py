# -*- coding: utf-8 -*-
"""
Shared validation for timetable entries, grades, subjects and solver inputs.

Flat records coming from forms or from the record store are checked here and
turned into domain objects. Anything malformed raises ``ValidationError`` with a
message that can be shown to the user as is.
"""
from __future__ import annotations

import math
import typing as t
from datetime import date

from academic_planner.models import (
    DEFAULT_SUBJECT_COLOR,
    CustomName,
    DatedOverride,
    Grade,
    Subject,
    SubjectRef,
    TimetableEntry,
    Weekly,
)


MIN_SCORE = 0.0
MAX_SCORE = 10.0
DEFAULT_WEIGHT = 1.0


class ValidationError(ValueError):
    """Raised when user supplied data breaks a domain rule."""


def is_number(value: t.Any) -> bool:
    """True for real, finite numbers. Booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_time(value: t.Any) -> str:
    """Normalize a wall-clock time to zero padded "HH:MM".

    Accepts "9:5", "09:05" and "09:05:00" alike.

    Raises:
        ValidationError: If the value is not a valid 24-hour time.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Time is required (HH:MM)")
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return f"{hour:02d}:{minute:02d}"


def try_normalize_time(value: t.Any) -> t.Optional[str]:
    """Like ``normalize_time`` but returns None for anything unparseable."""
    try:
        return normalize_time(value)
    except ValidationError:
        return None


def parse_date(value: t.Any, field_name: str = "date") -> date:
    """Parse an ISO "YYYY-MM-DD" string (or pass a date through)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing {field_name}")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field_name} '{value}', expected YYYY-MM-DD")


def _clean_text(value: t.Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def build_timetable_entry(record: t.Mapping[str, t.Any]) -> TimetableEntry:
    """Build a ``TimetableEntry`` from a flat record.

    The record uses the persisted field names: ``subject_id``, ``custom_name``,
    ``day_of_week``, ``date``, ``start_time``, ``end_time`` and ``room``.
    A subject wins over a custom name when both are present. Dated entries take
    their weekday from the date.

    Raises:
        ValidationError: If the record cannot describe a valid slot.
    """
    subject_id = _clean_text(record.get("subject_id"))
    custom_name = _clean_text(record.get("custom_name"))
    if subject_id:
        occupant = SubjectRef(subject_id)
    elif custom_name:
        occupant = CustomName(custom_name)
    else:
        raise ValidationError("Select a subject or enter a name")

    start_time = normalize_time(record.get("start_time"))
    end_time = normalize_time(record.get("end_time"))
    if start_time >= end_time:
        raise ValidationError("Start time must be before end time")

    raw_date = record.get("date")
    if raw_date:
        entry_date = parse_date(raw_date)
        day_of_week = entry_date.weekday()
        if day_of_week > 4:
            raise ValidationError("Dated entries must fall on a weekday (Monday to Friday)")
        recurrence = DatedOverride(entry_date)
    else:
        day_of_week = record.get("day_of_week")
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 4:
            raise ValidationError("Day of week must be between 0 (Monday) and 4 (Friday)")
        recurrence = Weekly()

    return TimetableEntry(
        id=_clean_text(record.get("id")),
        occupant=occupant,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        recurrence=recurrence,
        room=_clean_text(record.get("room")),
    )


def build_grade(
        record: t.Mapping[str, t.Any],
        today: t.Optional[date] = None,
        strict: bool = True,
) -> Grade:
    """Build a ``Grade`` from a flat record.

    With ``strict=False`` (grades handed in only for analysis) the title is
    optional, the score range is not enforced and any non-numeric or negative
    weight counts as 1.0.

    Raises:
        ValidationError: On a missing title/subject, a score outside 0-10 or a
            non-positive weight.
    """
    title = _clean_text(record.get("title"))
    subject_id = _clean_text(record.get("subject_id"))
    score = record.get("score")
    if (strict and not title) or not subject_id or not is_number(score):
        raise ValidationError("Fill in all required fields (title, subject, score)")
    if strict and not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError("Score must be between 0 and 10")

    weight = record.get("weight")
    if weight is None or (not strict and (not is_number(weight) or weight < 0)):
        weight = DEFAULT_WEIGHT
    elif strict and (not is_number(weight) or weight <= 0):
        raise ValidationError("Weight must be a positive number")

    graded_at = record.get("graded_at")
    if graded_at:
        graded_at = parse_date(graded_at, "graded_at")
    else:
        graded_at = today or date.today()

    max_score = record.get("max_score")
    return Grade(
        id=_clean_text(record.get("id")),
        subject_id=subject_id,
        title=title,
        score=float(score),
        weight=float(weight),
        max_score=float(max_score) if is_number(max_score) else MAX_SCORE,
        graded_at=graded_at,
    )


def build_subject(record: t.Mapping[str, t.Any]) -> Subject:
    """Build a ``Subject`` from a flat record."""
    name = _clean_text(record.get("name"))
    if not name:
        raise ValidationError("Subject name is required")
    return Subject(
        id=_clean_text(record.get("id")),
        name=name,
        color=_clean_text(record.get("color")) or DEFAULT_SUBJECT_COLOR,
        teacher_name=_clean_text(record.get("teacher_name")),
        room=_clean_text(record.get("room")),
    )


def validate_solver_inputs(
        current_accumulated: t.Any,
        final_weight_percent: t.Any,
        target_average: t.Any,
) -> None:
    """Reject solver arguments before any arithmetic happens.

    Raises:
        ValidationError: If an argument is not a number or is out of range.
    """
    if not all(is_number(v) for v in (current_accumulated, final_weight_percent, target_average)):
        raise ValidationError("Enter numeric values for all fields")
    if not MIN_SCORE <= current_accumulated <= MAX_SCORE:
        raise ValidationError("Current average must be between 0 and 10")
    if not 0 < final_weight_percent <= 100:
        raise ValidationError("Final exam weight must be greater than 0 and at most 100")
    if not MIN_SCORE <= target_average <= MAX_SCORE:
        raise ValidationError("Target average must be between 0 and 10")
