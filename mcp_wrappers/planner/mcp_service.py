"""
MCP wrapper for the academic planner service.

This module exposes planner operations as MCP tools but makes HTTP calls to the
planner REST service. Record listings are converted back into the dataclass
domain model so callers can run the resolver and analytics locally; when the
service cannot be reached they degrade to empty collections.
"""
from __future__ import annotations

import logging
import os
import typing as t

import httpx
from fastmcp import FastMCP

from academic_planner.models import Grade, Subject, TimetableEntry
from academic_planner.validation import build_grade, build_subject, build_timetable_entry
from planner_store.models import Snapshot
from planner_store.store import build_all
# Import Pydantic models for HTTP serialization
from services.shared.models import (
    AgendaResponse,
    FormattedTimetableResponse,
    GradeAveragesResponse,
    GradeFields,
    RequiredScoreRequest,
    RequiredScoreResponse,
    SubjectFields,
    TimetableEntryFields,
    WeekGridResponse,
)

logger = logging.getLogger(__name__)

mcp = FastMCP("AcademicPlannerMCPWrapper")

# Service URL - configurable via environment variable
PLANNER_SERVICE_URL = os.getenv("PLANNER_SERVICE_URL", "http://localhost:8004")
PLANNER_DEFAULT_LEVEL = os.getenv("PLANNER_DEFAULT_LEVEL", "1º ESO")

# Timeout settings (in seconds); every operation here is a fast CRUD or computation
STANDARD_TIMEOUT = 30.0

_COLLECTION_PATHS = {
    "subjects": "/subjects",
    "timetable_entries": "/timetable-entries",
    "grades": "/grades",
}


def _call(method: str, path: str, action: str, **kwargs: t.Any) -> t.Any:
    """Send one request to the planner service and return the decoded JSON body.

    Raises:
        RuntimeError: On timeouts, HTTP error statuses or transport failures.
    """
    try:
        with httpx.Client(timeout=STANDARD_TIMEOUT) as client:
            response = client.request(method, f"{PLANNER_SERVICE_URL}{path}", **kwargs)
            response.raise_for_status()
        return response.json()

    except httpx.TimeoutException:
        raise RuntimeError(f"{action} timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from planner service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        raise RuntimeError(f"Error calling planner service: {str(e)}")


def _collection_path(kind: str) -> str:
    try:
        return _COLLECTION_PATHS[kind]
    except KeyError:
        raise RuntimeError(f"Unknown record kind '{kind}', expected one of: {', '.join(_COLLECTION_PATHS)}")


def _list_records(kind: str, owner_id: str, level: str) -> list[dict[str, t.Any]]:
    """List raw records, or an empty list when the service is unavailable."""
    try:
        return _call(
            "GET", _collection_path(kind), f"Listing {kind}",
            params={"owner_id": owner_id, "level": level},
        )
    except RuntimeError as e:
        logger.warning("could not list %s, using an empty collection: %s", kind, e)
        return []


def _list_subjects(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> list[Subject]:
    return build_all(_list_records("subjects", owner_id, level), build_subject, "subjects")


def _list_timetable_entries(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> list[TimetableEntry]:
    return build_all(
        _list_records("timetable_entries", owner_id, level), build_timetable_entry, "timetable_entries"
    )


def _list_grades(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> list[Grade]:
    return build_all(_list_records("grades", owner_id, level), build_grade, "grades")


def _fetch_snapshot(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> Snapshot:
    """Read every collection of one owner and bucket for local resolution."""
    return Snapshot(
        subjects=_list_subjects(owner_id, level),
        entries=_list_timetable_entries(owner_id, level),
        grades=_list_grades(owner_id, level),
    )


def _create_subject(owner_id: str, fields: SubjectFields, level: str = PLANNER_DEFAULT_LEVEL) -> Subject:
    data = _call(
        "POST", "/subjects", "Subject creation",
        params={"owner_id": owner_id, "level": level},
        json=fields.model_dump(exclude_none=True),
    )
    return build_subject(data)


def _create_timetable_entry(
    owner_id: str,
    fields: TimetableEntryFields,
    level: str = PLANNER_DEFAULT_LEVEL,
) -> TimetableEntry:
    data = _call(
        "POST", "/timetable-entries", "Timetable entry creation",
        params={"owner_id": owner_id, "level": level},
        json=fields.model_dump(exclude_none=True),
    )
    return build_timetable_entry(data)


def _create_grade(owner_id: str, fields: GradeFields, level: str = PLANNER_DEFAULT_LEVEL) -> Grade:
    data = _call(
        "POST", "/grades", "Grade creation",
        params={"owner_id": owner_id, "level": level},
        json=fields.model_dump(exclude_none=True),
    )
    return build_grade(data)


def _update_record(kind: str, record_id: str, owner_id: str, changes: dict[str, t.Any]) -> dict[str, t.Any]:
    """Patch one record. Only the keys present in ``changes`` are touched."""
    return _call(
        "PATCH", f"{_collection_path(kind)}/{record_id}", f"Updating {kind} record",
        params={"owner_id": owner_id},
        json=changes,
    )


def _delete_record(kind: str, record_id: str, owner_id: str) -> bool:
    data = _call(
        "DELETE", f"{_collection_path(kind)}/{record_id}", f"Deleting {kind} record",
        params={"owner_id": owner_id},
    )
    return bool(data.get("deleted", False))


def _get_week_timetable(
    owner_id: str,
    level: str = PLANNER_DEFAULT_LEVEL,
    week_start: t.Optional[str] = None,
) -> WeekGridResponse:
    params = {"owner_id": owner_id, "level": level}
    if week_start:
        params["week_start"] = week_start
    return WeekGridResponse(**_call("GET", "/timetable/week", "Week resolution", params=params))


def _show_week_timetable(
    owner_id: str,
    level: str = PLANNER_DEFAULT_LEVEL,
    week_start: t.Optional[str] = None,
    compact: bool = False,
) -> str:
    params = {"owner_id": owner_id, "level": level, "compact": compact}
    if week_start:
        params["week_start"] = week_start
    result = FormattedTimetableResponse(**_call("GET", "/timetable/week/text", "Week rendering", params=params))
    return result.formatted_timetable


def _get_day_agenda(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL, day: t.Optional[str] = None) -> AgendaResponse:
    params = {"owner_id": owner_id, "level": level}
    if day:
        params["day"] = day
    return AgendaResponse(**_call("GET", "/timetable/agenda", "Agenda lookup", params=params))


def _get_grade_averages(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> GradeAveragesResponse:
    data = _call("GET", "/grades/averages", "Grade averages", params={"owner_id": owner_id, "level": level})
    return GradeAveragesResponse(**data)


def _required_final_score(
    current_accumulated: float,
    final_weight_percent: float,
    target_average: float,
) -> RequiredScoreResponse:
    request = RequiredScoreRequest(
        current_accumulated=current_accumulated,
        final_weight_percent=final_weight_percent,
        target_average=target_average,
    )
    data = _call("POST", "/grades/required-score", "Required score calculation", json=request.model_dump())
    return RequiredScoreResponse(**data)


# MCP tool wrappers that call the raw functions
@mcp.tool()
def get_week_timetable(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL, week_start: str = "") -> WeekGridResponse:
    """Resolve the weekly timetable (current week when week_start is empty)."""
    return _get_week_timetable(owner_id, level, week_start or None)


@mcp.tool()
def show_week_timetable(
    owner_id: str,
    level: str = PLANNER_DEFAULT_LEVEL,
    week_start: str = "",
    compact: bool = False,
) -> str:
    """Display the weekly timetable as a text table."""
    return _show_week_timetable(owner_id, level, week_start or None, compact)


@mcp.tool()
def get_day_agenda(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL, day: str = "") -> AgendaResponse:
    """List the entries of one day (today when day is empty)."""
    return _get_day_agenda(owner_id, level, day or None)


@mcp.tool()
def get_grade_averages(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL) -> GradeAveragesResponse:
    """Weighted grade averages per subject and overall."""
    return _get_grade_averages(owner_id, level)


@mcp.tool()
def required_final_score(
    current_accumulated: float,
    final_weight_percent: float,
    target_average: float,
) -> RequiredScoreResponse:
    """Score needed on the final exam to reach a target average."""
    return _required_final_score(current_accumulated, final_weight_percent, target_average)
