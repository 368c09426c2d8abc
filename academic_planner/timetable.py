# -*- coding: utf-8 -*-
"""
Timetable resolution.

A week is resolved on demand from a snapshot of entries: nothing is expanded or
cached. Recurring entries apply to every week on their weekday; dated entries
apply to one date and win over a recurring entry starting at the same time.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import date, timedelta

from academic_planner.models import (
    DAY_SHORT,
    DEFAULT_EVENT_COLOR,
    PLACEHOLDER_LABEL,
    OccupantDisplay,
    Subject,
    TimetableEntry,
    WeekGrid,
)
from academic_planner.validation import try_normalize_time

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 5

# On-the-hour rows always shown, 07:00 to 23:00
BASE_TIME_SLOTS = [f"{hour:02d}:00" for hour in range(7, 24)]


def week_start_for(day: date) -> date:
    """Monday on or before ``day``. Sundays map to the previous Monday."""
    return day - timedelta(days=day.weekday())


def current_week_start(today: t.Optional[date] = None) -> date:
    return week_start_for(today or date.today())


def shift_week(week_start: date, weeks: int) -> date:
    return week_start + timedelta(weeks=weeks)


def week_dates(week_start: date) -> list[date]:
    """The five weekday dates of the week starting at ``week_start``."""
    return [week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def derive_time_slots(entries: t.Iterable[TimetableEntry]) -> list[str]:
    """Base hourly slots plus the start time of every entry, sorted.

    Entries from any week widen the axis. Zero padded "HH:MM" strings sort
    chronologically.
    """
    slots = set(BASE_TIME_SLOTS)
    for entry in entries:
        start = try_normalize_time(entry.start_time)
        if start:
            slots.add(start)
    return sorted(slots)


def _start_of(entry: TimetableEntry) -> str:
    return try_normalize_time(entry.start_time) or "00:00"


def resolve_cell(
        entries: t.Sequence[TimetableEntry],
        day_index: int,
        cell_date: date,
        slot: str,
) -> t.Optional[TimetableEntry]:
    """Pick the single occupant of one (day, slot) cell.

    A dated entry on ``cell_date`` beats a recurring entry on ``day_index``.
    Among entries of the same kind the first one in input order wins.
    """
    recurring_match = None
    for entry in entries:
        if _start_of(entry) != slot:
            continue
        if entry.is_override:
            if entry.date == cell_date:
                return entry
        elif recurring_match is None and entry.day_of_week == day_index:
            recurring_match = entry
    return recurring_match


def resolve_week(week_start: date, entries: t.Sequence[TimetableEntry]) -> WeekGrid:
    """Resolve the occupant of every weekday/slot cell of one week.

    ``week_start`` should be a Monday; any other day is aligned back to the
    Monday of its week. The input is snapshotted before resolving.

    Args:
        week_start: Monday of the week to resolve.
        entries: Recurring and dated entries, in store order.

    Returns:
        A ``WeekGrid`` whose ``cells`` map ``(day_index, "HH:MM")`` to an entry
        or None.
    """
    aligned = week_start_for(week_start)
    if aligned != week_start:
        logger.debug("aligning week start %s to Monday %s", week_start, aligned)
    snapshot = list(entries)
    dates = week_dates(aligned)
    slots = derive_time_slots(snapshot)

    grid = WeekGrid(week_start=aligned, dates=dates, slots=slots)
    for slot in slots:
        for day_index, cell_date in enumerate(dates):
            grid.cells[(day_index, slot)] = resolve_cell(snapshot, day_index, cell_date, slot)
    return grid


def agenda_for_day(day: date, entries: t.Sequence[TimetableEntry]) -> list[TimetableEntry]:
    """Entries taking place on ``day``, ordered by start time.

    Uses the same precedence as the week grid, one entry per start time.
    Weekends have no agenda.
    """
    day_index = day.weekday()
    if day_index >= DAYS_PER_WEEK:
        return []
    snapshot = list(entries)
    starts = sorted({_start_of(e) for e in snapshot})
    agenda = []
    for slot in starts:
        entry = resolve_cell(snapshot, day_index, day, slot)
        if entry is not None:
            agenda.append(entry)
    return agenda


def describe_occupant(
        entry: TimetableEntry,
        subjects_by_id: t.Mapping[str, Subject],
) -> OccupantDisplay:
    """Label and color for an entry; orphaned subject ids fall back quietly."""
    subject = subjects_by_id.get(entry.subject_id) if entry.subject_id else None
    if subject is not None:
        return OccupantDisplay(label=subject.name, color=subject.color, room=entry.room)
    return OccupantDisplay(
        label=entry.custom_name or PLACEHOLDER_LABEL,
        color=DEFAULT_EVENT_COLOR,
        room=entry.room,
    )


def subjects_lookup(subjects: t.Iterable[Subject]) -> dict[str, Subject]:
    return {subject.id: subject for subject in subjects}


def format_week_grid(
        grid: WeekGrid,
        subjects_by_id: t.Mapping[str, Subject],
        show_empty_rows: bool = True,
) -> str:
    """Render a resolved week as a fixed-width text table."""
    col_width = 16
    lines = []
    lines.append(
        f"🗓️  WEEK OF {grid.dates[0].strftime('%d %b %Y')} - {grid.dates[-1].strftime('%d %b %Y')}"
    )
    lines.append("=" * (7 + col_width * DAYS_PER_WEEK))
    header = f"{'':<7}" + "".join(
        f"{DAY_SHORT[i] + ' ' + d.strftime('%d/%m'):<{col_width}}" for i, d in enumerate(grid.dates)
    )
    lines.append(header)
    lines.append("-" * (7 + col_width * DAYS_PER_WEEK))

    for slot in grid.slots:
        row = grid.row(slot)
        if not show_empty_rows and all(entry is None for entry in row):
            continue
        cells = []
        for entry in row:
            if entry is None:
                cells.append(f"{'·':<{col_width}}")
                continue
            label = describe_occupant(entry, subjects_by_id).label
            if entry.is_override:
                label = "*" + label
            label = label[:col_width - 1] if len(label) > col_width - 1 else label
            cells.append(f"{label:<{col_width}}")
        lines.append(f"{slot:<7}" + "".join(cells))

    lines.append("=" * (7 + col_width * DAYS_PER_WEEK))
    lines.append(f"Total: {len(grid.occupied())} occupied slot(s)  (* = one-off event)")
    return "\n".join(lines)
