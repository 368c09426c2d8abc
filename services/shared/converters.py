"""
Conversions from planner domain results to their Pydantic REST shapes.

Used by the REST service and by the local MCP server so both surfaces return
identical payloads.
"""
from __future__ import annotations

import typing as t
from datetime import date

from academic_planner.analytics import averages_by_subject, grade_band, overall_average
from academic_planner.models import Grade, Subject, TimetableEntry, WeekGrid
from academic_planner.timetable import describe_occupant
from services.shared.models import (
    Grade as PydanticGrade,
    GradeAveragesResponse,
    OccupiedCell,
    Subject as PydanticSubject,
    SubjectAverage as PydanticSubjectAverage,
    TimetableEntry as PydanticTimetableEntry,
    WeekGridResponse,
)


def occupied_cell(
    entry: TimetableEntry,
    day_index: int,
    cell_date: date,
    slot: str,
    subjects_by_id: t.Mapping[str, Subject],
) -> OccupiedCell:
    display = describe_occupant(entry, subjects_by_id)
    return OccupiedCell(
        day_index=day_index,
        date=cell_date.isoformat(),
        slot=slot,
        label=display.label,
        color=display.color,
        room=display.room,
        is_override=entry.is_override,
        entry=PydanticTimetableEntry(**entry.to_record()),
    )


def week_grid_response(grid: WeekGrid, subjects_by_id: t.Mapping[str, Subject]) -> WeekGridResponse:
    """Convert a resolved ``WeekGrid`` into its REST shape (occupied cells only)."""
    return WeekGridResponse(
        week_start=grid.week_start.isoformat(),
        dates=[d.isoformat() for d in grid.dates],
        slots=list(grid.slots),
        cells=[
            occupied_cell(entry, day_index, grid.dates[day_index], slot, subjects_by_id)
            for day_index, slot, entry in grid.occupied()
        ],
    )


def grade_averages_response(grades: list[Grade], subjects: list[Subject]) -> GradeAveragesResponse:
    """Per-subject and overall averages in their REST shape."""
    overall = overall_average(grades)
    return GradeAveragesResponse(
        overall_average=overall,
        overall_band=grade_band(overall).label,
        subjects=[
            PydanticSubjectAverage(
                subject=PydanticSubject(**group.subject.to_record()),
                grades=[PydanticGrade(**g.to_record()) for g in group.grades],
                average=group.average,
                band=grade_band(group.average).label,
            )
            for group in averages_by_subject(grades, subjects)
        ],
    )
