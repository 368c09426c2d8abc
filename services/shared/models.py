"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the planner records and results,
ensuring consistent JSON serialization across the service, the MCP wrapper and
the command line client.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, Field


RequiredScoreOutcome = t.Literal["REACHABLE", "UNREACHABLE", "ALREADY_SECURED"]


class Subject(BaseModel):
    """A subject as stored."""
    id: str
    name: str
    color: str = "#6366f1"
    teacher_name: t.Optional[str] = None
    room: t.Optional[str] = None


class TimetableEntry(BaseModel):
    """
    A timetable slot as stored. Exactly one of subject_id / custom_name is set;
    a date makes it a one-off event instead of a weekly one.
    """
    id: str
    subject_id: t.Optional[str] = None
    custom_name: t.Optional[str] = None
    day_of_week: int = 0            # 0=Monday .. 4=Friday
    date: t.Optional[str] = None    # "YYYY-MM-DD"
    start_time: str = ""            # "HH:MM" 24h
    end_time: str = ""              # "HH:MM" 24h
    room: t.Optional[str] = None


class Grade(BaseModel):
    """A scored assessment as stored."""
    id: str
    subject_id: str
    title: str = ""
    score: float
    max_score: float = 10.0
    weight: float = 1.0
    graded_at: str = ""             # "YYYY-MM-DD"


# Request models: all fields optional so PATCH can reuse them
class SubjectFields(BaseModel):
    name: t.Optional[str] = None
    color: t.Optional[str] = None
    teacher_name: t.Optional[str] = None
    room: t.Optional[str] = None


class TimetableEntryFields(BaseModel):
    subject_id: t.Optional[str] = None
    custom_name: t.Optional[str] = None
    day_of_week: t.Optional[int] = None
    date: t.Optional[str] = None
    start_time: t.Optional[str] = None
    end_time: t.Optional[str] = None
    room: t.Optional[str] = None


class GradeFields(BaseModel):
    subject_id: t.Optional[str] = None
    title: t.Optional[str] = None
    score: t.Optional[float] = None
    max_score: t.Optional[float] = None
    weight: t.Optional[float] = None
    graded_at: t.Optional[str] = None


class DeleteResponse(BaseModel):
    deleted: bool


# Timetable results
class OccupiedCell(BaseModel):
    """One occupied cell of a resolved week."""
    day_index: int
    date: str
    slot: str
    label: str
    color: str
    room: str = ""
    is_override: bool = False
    entry: TimetableEntry


class WeekGridResponse(BaseModel):
    """Resolved week: the slot axis plus every occupied cell."""
    week_start: str
    dates: list[str] = Field(default_factory=list)
    slots: list[str] = Field(default_factory=list)
    cells: list[OccupiedCell] = Field(default_factory=list)


class AgendaResponse(BaseModel):
    day: str
    items: list[OccupiedCell] = Field(default_factory=list)


class FormattedTimetableResponse(BaseModel):
    formatted_timetable: str


# Grade results
class SubjectAverage(BaseModel):
    subject: Subject
    grades: list[Grade] = Field(default_factory=list)
    average: float
    band: str = ""


class GradeAveragesResponse(BaseModel):
    overall_average: float
    overall_band: str = ""
    subjects: list[SubjectAverage] = Field(default_factory=list)


class RequiredScoreRequest(BaseModel):
    """Inputs for the final exam solver."""
    current_accumulated: float
    final_weight_percent: float
    target_average: float


class RequiredScoreResponse(BaseModel):
    required_score: float
    outcome: RequiredScoreOutcome
