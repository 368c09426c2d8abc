# -*- coding: utf-8 -*-
"""
Data models for the academic planner core.

Subjects, timetable entries and grades are plain dataclasses built from the flat
records handed out by the record store. Timetable entries carry two tagged unions
instead of nullable field pairs: what occupies the slot (a subject or a custom
name) and how it recurs (every week or on one date only).
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


DEFAULT_SUBJECT_COLOR = "#6366f1"
PLACEHOLDER_LABEL = "Event"
DEFAULT_EVENT_COLOR = "var(--color-primary)"

DAY_LABELS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
DAY_SHORT = ["MON", "TUE", "WED", "THU", "FRI"]


@dataclass(frozen=True)
class Subject:
    """A subject the user follows within one academic-level bucket."""
    id: str
    name: str
    color: str = DEFAULT_SUBJECT_COLOR
    teacher_name: str = ""
    room: str = ""

    def to_record(self) -> dict[str, t.Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "teacher_name": self.teacher_name or None,
            "room": self.room or None,
        }


# What a timetable slot represents
@dataclass(frozen=True)
class SubjectRef:
    subject_id: str


@dataclass(frozen=True)
class CustomName:
    name: str


Occupant = t.Union[SubjectRef, CustomName]


# How a timetable slot recurs
@dataclass(frozen=True)
class Weekly:
    pass


@dataclass(frozen=True)
class DatedOverride:
    date: date


Recurrence = t.Union[Weekly, DatedOverride]


@dataclass(frozen=True)
class TimetableEntry:
    """
    One timetable slot, either recurring every week on ``day_of_week`` or tied to
    a single date. Times are normalized "HH:MM" strings.
    """
    id: str
    occupant: Occupant
    day_of_week: int  # 0=Monday .. 4=Friday
    start_time: str
    end_time: str
    recurrence: Recurrence = field(default_factory=Weekly)
    room: str = ""

    @property
    def subject_id(self) -> t.Optional[str]:
        if isinstance(self.occupant, SubjectRef):
            return self.occupant.subject_id
        return None

    @property
    def custom_name(self) -> t.Optional[str]:
        if isinstance(self.occupant, CustomName):
            return self.occupant.name
        return None

    @property
    def date(self) -> t.Optional[date]:
        if isinstance(self.recurrence, DatedOverride):
            return self.recurrence.date
        return None

    @property
    def is_override(self) -> bool:
        return isinstance(self.recurrence, DatedOverride)

    def to_record(self) -> dict[str, t.Any]:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "custom_name": self.custom_name,
            "day_of_week": self.day_of_week,
            "date": self.date.isoformat() if self.date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "room": self.room or None,
        }


@dataclass(frozen=True)
class Grade:
    """A scored assessment on the 0-10 scale."""
    id: str
    subject_id: str
    score: float
    graded_at: date
    weight: float = 1.0
    max_score: float = 10.0
    title: str = ""

    def to_record(self) -> dict[str, t.Any]:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "title": self.title,
            "score": self.score,
            "max_score": self.max_score,
            "weight": self.weight,
            "graded_at": self.graded_at.isoformat(),
        }


@dataclass(frozen=True)
class OccupantDisplay:
    """Label and color shown for an occupied cell."""
    label: str
    color: str
    room: str = ""


@dataclass
class WeekGrid:
    """Resolved timetable for one Monday-aligned week."""
    week_start: date
    dates: list[date]
    slots: list[str]
    cells: dict[tuple[int, str], t.Optional[TimetableEntry]] = field(default_factory=dict)

    def cell(self, day_index: int, slot: str) -> t.Optional[TimetableEntry]:
        return self.cells.get((day_index, slot))

    def row(self, slot: str) -> list[t.Optional[TimetableEntry]]:
        return [self.cells.get((day_index, slot)) for day_index in range(len(self.dates))]

    def occupied(self) -> list[tuple[int, str, TimetableEntry]]:
        """Occupied cells ordered by day then slot."""
        return [
            (day_index, slot, self.cells[(day_index, slot)])
            for day_index in range(len(self.dates))
            for slot in self.slots
            if self.cells.get((day_index, slot)) is not None
        ]


@dataclass
class SubjectAverage:
    """Grades of one subject, newest first, with their weighted average."""
    subject: Subject
    grades: list[Grade]
    average: float


class RequiredScoreOutcome(Enum):
    """How a required final score reads to the student."""
    REACHABLE = "REACHABLE"
    UNREACHABLE = "UNREACHABLE"
    ALREADY_SECURED = "ALREADY_SECURED"

    def __str__(self):
        return self.value


class GradeBand(Enum):
    """Score bands with the color used to paint them."""
    EXCELLENT = ("excellent", "#22c55e")
    GOOD = ("good", "#06b6d4")
    PASS = ("pass", "#f59e0b")
    FAIL = ("fail", "#ef4444")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]
