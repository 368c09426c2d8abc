# -*- coding: utf-8 -*-
from datetime import date

from fastmcp import FastMCP

from academic_planner.analytics import classify_required_score, grade_band
from academic_planner.analytics import required_final_score as solve_required_final_score
from academic_planner.models import Grade, Subject, TimetableEntry
from academic_planner.timetable import current_week_start, format_week_grid, resolve_week, subjects_lookup
from academic_planner.validation import build_grade, build_subject, build_timetable_entry, parse_date
from planner_store.store import build_all
from services.shared.converters import grade_averages_response, week_grid_response
from services.shared.models import (
    Grade as PydanticGrade,
    GradeAveragesResponse,
    RequiredScoreResponse,
    Subject as PydanticSubject,
    TimetableEntry as PydanticTimetableEntry,
    WeekGridResponse,
)

mcp = FastMCP("AcademicPlanner")


def _subjects(subjects: list[PydanticSubject]) -> list[Subject]:
    return build_all([s.model_dump() for s in subjects], build_subject, "subjects")


def _entries(entries: list[PydanticTimetableEntry]) -> list[TimetableEntry]:
    return build_all([e.model_dump() for e in entries], build_timetable_entry, "timetable_entries")


def _grades(grades: list[PydanticGrade]) -> list[Grade]:
    return build_all(
        [g.model_dump() for g in grades], lambda r: build_grade(r, strict=False), "grades"
    )


def _week_start(week_start: str) -> date:
    return parse_date(week_start, "week_start") if week_start else current_week_start()


@mcp.tool()
def resolve_timetable_week(
        entries: list[PydanticTimetableEntry],
        subjects: list[PydanticSubject],
        week_start: str = "",
) -> WeekGridResponse:
    """Resolves which entry occupies every weekday/time cell of one week.

    One-off (dated) entries win over weekly entries starting at the same time on
    the same day. The time axis is 07:00-23:00 plus every entry's start time.

    :param entries: Timetable entries, weekly and dated.
    :param subjects: Subjects used to label entries.
    :param week_start: Monday of the week (YYYY-MM-DD); empty for the current week.
    :return: The resolved week with its occupied cells.
    """
    grid = resolve_week(_week_start(week_start), _entries(entries))
    return week_grid_response(grid, subjects_lookup(_subjects(subjects)))


@mcp.tool()
def show_week_timetable(
        entries: list[PydanticTimetableEntry],
        subjects: list[PydanticSubject],
        week_start: str = "",
        compact: bool = False,
) -> str:
    """Displays one week of the timetable as a text table.

    :param entries: Timetable entries, weekly and dated.
    :param subjects: Subjects used to label entries.
    :param week_start: Monday of the week (YYYY-MM-DD); empty for the current week.
    :param compact: Hide time rows that are empty all week.
    :return: Formatted table string.
    """
    grid = resolve_week(_week_start(week_start), _entries(entries))
    return format_week_grid(grid, subjects_lookup(_subjects(subjects)), show_empty_rows=not compact)


@mcp.tool()
def compute_grade_averages(
        grades: list[PydanticGrade],
        subjects: list[PydanticSubject],
) -> GradeAveragesResponse:
    """Computes weighted averages per subject and across all grades.

    :param grades: Grades on the 0-10 scale.
    :param subjects: Subjects to group by; subjects without grades are omitted.
    :return: Overall average and one group per graded subject.
    """
    return grade_averages_response(_grades(grades), _subjects(subjects))


@mcp.tool()
def required_final_score(
        current_accumulated: float,
        final_weight_percent: float,
        target_average: float,
) -> RequiredScoreResponse:
    """Computes the final exam score needed to reach a target average.

    :param current_accumulated: Average obtained so far (0-10).
    :param final_weight_percent: Weight of the final exam in percent (0-100].
    :param target_average: Desired final average (0-10).
    :return: The raw required score and whether it is reachable.
    """
    required = solve_required_final_score(current_accumulated, final_weight_percent, target_average)
    return RequiredScoreResponse(required_score=required, outcome=classify_required_score(required).value)


def show_grade_summary(grades: list[Grade], subjects: list[Subject]) -> str:
    """Formats grades grouped by subject with their averages as a text table.

    :param grades: Grades on the 0-10 scale.
    :param subjects: Subjects to group by.
    :return: Formatted table string.
    """
    report = grade_averages_response(grades, subjects)
    if not report.subjects:
        return "🎓 No grades yet."

    lines = []
    lines.append("🎓 GRADES SUMMARY")
    lines.append("=" * 80)
    lines.append(f"{'Subject / Title':<40} {'Score':<8} {'Weight':<8} {'Date':<12} {'Band':<10}")
    lines.append("-" * 80)

    for group in report.subjects:
        name = group.subject.name[:39] if len(group.subject.name) > 39 else group.subject.name
        lines.append(f"{name:<40} {group.average:<8.2f} {'':<8} {'':<12} {group.band:<10}")
        for grade in group.grades:
            title = grade.title[:35] if len(grade.title) > 35 else grade.title
            band = grade_band(grade.score).label
            lines.append(
                f"    {title:<36} {grade.score:<8.1f} {grade.weight:<8.1f} {grade.graded_at:<12} {band:<10}"
            )

    lines.append("=" * 80)
    lines.append(f"Overall average: {report.overall_average:.2f} ({report.overall_band})")
    return "\n".join(lines)


if __name__ == "__main__":
    mcp.run()
