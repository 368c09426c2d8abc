"""
FastAPI service for academic planner operations.

This service exposes the record store (subjects, timetable entries and grades,
scoped per owner and academic level) together with the timetable resolver and
grade analytics as REST API endpoints. All computations are fast and run on a
fresh snapshot of the caller's records for every request.
"""
from __future__ import annotations

import logging
import os
import typing as t
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Query

from academic_planner.analytics import classify_required_score, required_final_score
from academic_planner.timetable import (
    agenda_for_day,
    current_week_start,
    format_week_grid,
    resolve_week,
    subjects_lookup,
)
from academic_planner.validation import (
    ValidationError,
    build_grade,
    build_subject,
    build_timetable_entry,
    parse_date,
)
from planner_store.models import RecordKind
from planner_store.store import load_snapshot, store
from services.shared.models import (
    AgendaResponse,
    DeleteResponse,
    FormattedTimetableResponse,
    Grade as PydanticGrade,
    GradeAveragesResponse,
    GradeFields,
    RequiredScoreRequest,
    RequiredScoreResponse,
    Subject as PydanticSubject,
    SubjectFields,
    TimetableEntry as PydanticTimetableEntry,
    TimetableEntryFields,
    WeekGridResponse,
)
from services.shared.converters import grade_averages_response, occupied_cell, week_grid_response

logger = logging.getLogger(__name__)

PLANNER_DEFAULT_LEVEL = os.getenv("PLANNER_DEFAULT_LEVEL", "1º ESO")
PLANNER_SERVICE_PORT = int(os.getenv("PLANNER_SERVICE_PORT", "8004"))

# Builders normalize and validate a flat record for each kind
_BUILDERS: dict[str, t.Callable[[t.Mapping[str, t.Any]], t.Any]] = {
    "subjects": build_subject,
    "timetable_entries": build_timetable_entry,
    "grades": build_grade,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup and cleanup on shutdown."""
    logger.info("planner service starting (default level %s)", PLANNER_DEFAULT_LEVEL)
    yield


app = FastAPI(
    title="Academic Planner Service",
    description="REST API for subjects, weekly timetable and grade analytics",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "academic-planner-service"}


# ---------------------------------------------------------------------------
# Record CRUD
# ---------------------------------------------------------------------------

def _normalized_fields(kind: RecordKind, fields: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    """Validate ``fields`` for ``kind`` and return the normalized record body."""
    built = _BUILDERS[kind](fields)
    record = built.to_record()
    record.pop("id", None)
    return record


def _create(kind: RecordKind, owner_id: str, level: str, fields: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    try:
        record = store.create(kind, owner_id, level, _normalized_fields(kind, fields))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if record is None:
        raise HTTPException(status_code=500, detail=f"Error creating {kind} record")
    return record


def _update(kind: RecordKind, record_id: str, owner_id: str, changes: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    existing = store.get(kind, record_id, owner_id)
    if existing is None:
        raise HTTPException(status_code=404, detail=f"No {kind} record with id {record_id}")
    merged = {**existing, **changes}
    try:
        record = store.update(kind, record_id, owner_id, _normalized_fields(kind, merged))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail=f"No {kind} record with id {record_id}")
    return record


@app.get("/subjects", response_model=list[PydanticSubject])
async def list_subjects(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> list[PydanticSubject]:
    """List the owner's subjects in one academic level."""
    return [PydanticSubject(**r) for r in store.list_all("subjects", owner_id, level)]


@app.post("/subjects", response_model=PydanticSubject)
async def create_subject(
        request: SubjectFields, owner_id: str, level: str = PLANNER_DEFAULT_LEVEL
) -> PydanticSubject:
    """Create a subject."""
    return PydanticSubject(**_create("subjects", owner_id, level, request.model_dump(exclude_none=True)))


@app.patch("/subjects/{subject_id}", response_model=PydanticSubject)
async def update_subject(subject_id: str, request: SubjectFields, owner_id: str) -> PydanticSubject:
    """Update a subject. Timetable entries and grades keep referencing it by id."""
    return PydanticSubject(**_update("subjects", subject_id, owner_id, request.model_dump(exclude_unset=True)))


@app.delete("/subjects/{subject_id}", response_model=DeleteResponse)
async def delete_subject(subject_id: str, owner_id: str) -> DeleteResponse:
    """Delete a subject. Its entries and grades are orphaned, not removed."""
    return DeleteResponse(deleted=store.delete("subjects", subject_id, owner_id))


@app.get("/timetable-entries", response_model=list[PydanticTimetableEntry])
async def list_timetable_entries(
        owner_id: str, level: str = PLANNER_DEFAULT_LEVEL
) -> list[PydanticTimetableEntry]:
    """List recurring and dated timetable entries."""
    return [PydanticTimetableEntry(**r) for r in store.list_all("timetable_entries", owner_id, level)]


@app.post("/timetable-entries", response_model=PydanticTimetableEntry)
async def create_timetable_entry(
        request: TimetableEntryFields, owner_id: str, level: str = PLANNER_DEFAULT_LEVEL
) -> PydanticTimetableEntry:
    """Create a weekly slot, or a one-off event when a date is given."""
    record = _create("timetable_entries", owner_id, level, request.model_dump(exclude_none=True))
    return PydanticTimetableEntry(**record)


@app.patch("/timetable-entries/{entry_id}", response_model=PydanticTimetableEntry)
async def update_timetable_entry(
        entry_id: str, request: TimetableEntryFields, owner_id: str
) -> PydanticTimetableEntry:
    """Update a timetable entry. Send ``date: null`` to turn a one-off event into a weekly slot."""
    record = _update("timetable_entries", entry_id, owner_id, request.model_dump(exclude_unset=True))
    return PydanticTimetableEntry(**record)


@app.delete("/timetable-entries/{entry_id}", response_model=DeleteResponse)
async def delete_timetable_entry(entry_id: str, owner_id: str) -> DeleteResponse:
    return DeleteResponse(deleted=store.delete("timetable_entries", entry_id, owner_id))


@app.get("/grades", response_model=list[PydanticGrade])
async def list_grades(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> list[PydanticGrade]:
    return [PydanticGrade(**r) for r in store.list_all("grades", owner_id, level)]


@app.post("/grades", response_model=PydanticGrade)
async def create_grade(
        request: GradeFields, owner_id: str, level: str = PLANNER_DEFAULT_LEVEL
) -> PydanticGrade:
    """Record a grade on the 0-10 scale."""
    return PydanticGrade(**_create("grades", owner_id, level, request.model_dump(exclude_none=True)))


@app.patch("/grades/{grade_id}", response_model=PydanticGrade)
async def update_grade(grade_id: str, request: GradeFields, owner_id: str) -> PydanticGrade:
    return PydanticGrade(**_update("grades", grade_id, owner_id, request.model_dump(exclude_unset=True)))


@app.delete("/grades/{grade_id}", response_model=DeleteResponse)
async def delete_grade(grade_id: str, owner_id: str) -> DeleteResponse:
    return DeleteResponse(deleted=store.delete("grades", grade_id, owner_id))


# ---------------------------------------------------------------------------
# Timetable
# ---------------------------------------------------------------------------

def _parse_query_date(value: t.Optional[str], field_name: str) -> t.Optional[date]:
    if not value:
        return None
    try:
        return parse_date(value, field_name)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/timetable/week", response_model=WeekGridResponse)
async def get_week(
        owner_id: str,
        level: str = PLANNER_DEFAULT_LEVEL,
        week_start: t.Optional[str] = Query(default=None, description="Monday of the week, YYYY-MM-DD"),
) -> WeekGridResponse:
    """
    Resolve the timetable for one week.

    Defaults to the current week. Dated entries override weekly ones that start
    at the same time on the same day.
    """
    start = _parse_query_date(week_start, "week_start") or current_week_start()
    snapshot = load_snapshot(store, owner_id, level)
    grid = resolve_week(start, snapshot.entries)
    return week_grid_response(grid, subjects_lookup(snapshot.subjects))


@app.get("/timetable/week/text", response_model=FormattedTimetableResponse)
async def show_week(
        owner_id: str,
        level: str = PLANNER_DEFAULT_LEVEL,
        week_start: t.Optional[str] = None,
        compact: bool = False,
) -> FormattedTimetableResponse:
    """Resolved week as a fixed-width text table."""
    start = _parse_query_date(week_start, "week_start") or current_week_start()
    snapshot = load_snapshot(store, owner_id, level)
    grid = resolve_week(start, snapshot.entries)
    formatted = format_week_grid(grid, subjects_lookup(snapshot.subjects), show_empty_rows=not compact)
    return FormattedTimetableResponse(formatted_timetable=formatted)


@app.get("/timetable/agenda", response_model=AgendaResponse)
async def get_agenda(
        owner_id: str,
        level: str = PLANNER_DEFAULT_LEVEL,
        day: t.Optional[str] = None,
) -> AgendaResponse:
    """Entries happening on one day (today by default), ordered by start time."""
    target = _parse_query_date(day, "day") or date.today()
    snapshot = load_snapshot(store, owner_id, level)
    subjects_by_id = subjects_lookup(snapshot.subjects)
    return AgendaResponse(
        day=target.isoformat(),
        items=[
            occupied_cell(entry, target.weekday(), target, entry.start_time, subjects_by_id)
            for entry in agenda_for_day(target, snapshot.entries)
        ],
    )


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------

@app.get("/grades/averages", response_model=GradeAveragesResponse)
async def get_grade_averages(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> GradeAveragesResponse:
    """Weighted average per subject (subjects with grades only) and overall."""
    snapshot = load_snapshot(store, owner_id, level)
    return grade_averages_response(snapshot.grades, snapshot.subjects)


@app.post("/grades/required-score", response_model=RequiredScoreResponse)
async def post_required_score(request: RequiredScoreRequest) -> RequiredScoreResponse:
    """
    Solve for the final exam score needed to reach a target average.

    The raw value is returned together with its reading: above 10 is out of
    reach, 0 or below is already secured.
    """
    try:
        required = required_final_score(
            request.current_accumulated,
            request.final_weight_percent,
            request.target_average,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return RequiredScoreResponse(
        required_score=required,
        outcome=classify_required_score(required).value,
    )


if __name__ == "__main__":
    import uvicorn
    from services.shared.log_config import configure_logging

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=PLANNER_SERVICE_PORT)
