"""
MCP Gateway Server - Unified entry point for the academic planner.

This server imports the raw functions of the planner MCP wrapper and registers
them with a single FastMCP instance. Record tools go to the planner REST
service over HTTP; the week grid and grade analytics are resolved by the
service from the caller's stored records.
"""
from __future__ import annotations

from fastmcp import FastMCP

# Import the raw functions from the MCP wrapper (not the decorated versions)
# This allows us to register them with our own unified FastMCP instance
from mcp_wrappers.planner.mcp_service import (
    _create_grade, _create_subject, _create_timetable_entry,
    _delete_record, _update_record,
    _get_day_agenda, _get_grade_averages, _get_week_timetable,
    _required_final_score, _show_week_timetable,
    PLANNER_DEFAULT_LEVEL, PLANNER_SERVICE_URL,
)

# Import models for type hints
from services.shared.models import (
    AgendaResponse,
    Grade as PydanticGrade,
    GradeAveragesResponse,
    GradeFields,
    RequiredScoreResponse,
    Subject as PydanticSubject,
    SubjectFields,
    TimetableEntry as PydanticTimetableEntry,
    TimetableEntryFields,
    WeekGridResponse,
)

# Create the unified MCP server
mcp = FastMCP("AcademicPlannerGateway")


def get_service_status() -> dict[str, str]:
    """
    Get the status of the planner service configuration.

    This function reports the configured URL and default academic level to
    help with debugging and service discovery.
    """
    return {
        "planner_service": PLANNER_SERVICE_URL,
        "default_level": PLANNER_DEFAULT_LEVEL,
        "gateway_status": "running",
    }


# Record tools
@mcp.tool()
def create_subject(owner_id: str, fields: SubjectFields, level: str = PLANNER_DEFAULT_LEVEL) -> PydanticSubject:
    """Creates a subject in the given academic level."""
    return PydanticSubject(**_create_subject(owner_id, fields, level).to_record())


@mcp.tool()
def create_timetable_entry(
    owner_id: str,
    fields: TimetableEntryFields,
    level: str = PLANNER_DEFAULT_LEVEL,
) -> PydanticTimetableEntry:
    """Creates a weekly timetable slot, or a one-off event when a date is given."""
    return PydanticTimetableEntry(**_create_timetable_entry(owner_id, fields, level).to_record())


@mcp.tool()
def create_grade(owner_id: str, fields: GradeFields, level: str = PLANNER_DEFAULT_LEVEL) -> PydanticGrade:
    """Records a grade (score 0-10, positive weight)."""
    return PydanticGrade(**_create_grade(owner_id, fields, level).to_record())


@mcp.tool()
def update_record(kind: str, record_id: str, owner_id: str, changes: dict) -> dict:
    """Updates a subject, timetable entry or grade. kind is subjects, timetable_entries or grades."""
    return _update_record(kind, record_id, owner_id, changes)


@mcp.tool()
def delete_record(kind: str, record_id: str, owner_id: str) -> bool:
    """Deletes a subject, timetable entry or grade."""
    return _delete_record(kind, record_id, owner_id)


# Timetable tools
@mcp.tool()
def get_week_timetable(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL, week_start: str = "") -> WeekGridResponse:
    """Resolves one week of the timetable (current week when week_start is empty)."""
    return _get_week_timetable(owner_id, level, week_start or None)


@mcp.tool()
def show_week_timetable(
    owner_id: str,
    level: str = PLANNER_DEFAULT_LEVEL,
    week_start: str = "",
    compact: bool = False,
) -> str:
    """Displays one week of the timetable as a text table."""
    return _show_week_timetable(owner_id, level, week_start or None, compact)


@mcp.tool()
def get_day_agenda(owner_id: str, level: str = PLANNER_DEFAULT_LEVEL, day: str = "") -> AgendaResponse:
    """Lists what is on for one day (today when day is empty)."""
    return _get_day_agenda(owner_id, level, day or None)


# Grade tools
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


@mcp.tool()
def get_gateway_info() -> dict[str, str]:
    """
    Get information about the MCP Gateway and the planner service.
    """
    return get_service_status()


def available_tools() -> dict[str, list[str]]:
    """Tool names with a one-line description, grouped by area."""
    return {
        "records": [
            "create_subject - Create a subject",
            "create_timetable_entry - Create a weekly slot or a one-off event",
            "create_grade - Record a grade",
            "update_record - Update a subject, timetable entry or grade",
            "delete_record - Delete a subject, timetable entry or grade",
        ],
        "timetable": [
            "get_week_timetable - Resolve one week of the timetable",
            "show_week_timetable - Display one week as a text table",
            "get_day_agenda - List the entries of one day",
        ],
        "grades": [
            "get_grade_averages - Weighted averages per subject and overall",
            "required_final_score - Final exam score needed for a target average",
        ],
        "gateway_tools": [
            "get_gateway_info - Get gateway and service status information",
            "list_available_tools - List all available tools by area",
        ],
    }


@mcp.tool()
def list_available_tools() -> dict[str, list[str]]:
    """
    List all available tools organized by area.
    """
    return available_tools()


if __name__ == "__main__":
    print("🌟 Starting Academic Planner MCP Gateway")
    status = get_service_status()
    print(f"  • planner_service: {status['planner_service']}")
    print(f"  • default_level: {status['default_level']}")
    print("\nTools available:")
    tools = available_tools()
    for area, tool_list in tools.items():
        print(f"\n📦 {area}:")
        for tool in tool_list:
            print(f"    - {tool}")

    print(f"\n🌐 Starting MCP server...")
    mcp.run()
