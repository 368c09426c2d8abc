"""Tests for the week resolver and its helpers."""
from datetime import date

from academic_planner.models import (
    DEFAULT_EVENT_COLOR,
    PLACEHOLDER_LABEL,
    CustomName,
    DatedOverride,
    Subject,
    SubjectRef,
    TimetableEntry,
    Weekly,
)
from academic_planner.timetable import (
    BASE_TIME_SLOTS,
    agenda_for_day,
    current_week_start,
    derive_time_slots,
    describe_occupant,
    format_week_grid,
    resolve_week,
    shift_week,
    subjects_lookup,
    week_dates,
    week_start_for,
)

MONDAY = date(2024, 3, 11)


def weekly(entry_id: str, day: int, start: str, end: str, subject_id: str = "math") -> TimetableEntry:
    return TimetableEntry(
        id=entry_id, occupant=SubjectRef(subject_id), day_of_week=day,
        start_time=start, end_time=end, recurrence=Weekly(),
    )


def one_off(entry_id: str, on: date, start: str, end: str, name: str) -> TimetableEntry:
    return TimetableEntry(
        id=entry_id, occupant=CustomName(name), day_of_week=on.weekday(),
        start_time=start, end_time=end, recurrence=DatedOverride(on),
    )


def test_week_start_for() -> None:
    assert week_start_for(date(2024, 3, 13)) == MONDAY
    assert week_start_for(MONDAY) == MONDAY
    # Sunday belongs to the week that started six days earlier
    assert week_start_for(date(2024, 3, 17)) == MONDAY
    assert current_week_start(date(2024, 3, 15)) == MONDAY


def test_week_navigation() -> None:
    assert shift_week(MONDAY, 1) == date(2024, 3, 18)
    assert shift_week(MONDAY, -1) == date(2024, 3, 4)
    assert week_dates(MONDAY) == [date(2024, 3, 11 + i) for i in range(5)]


def test_base_slots_cover_seven_to_twenty_three() -> None:
    assert BASE_TIME_SLOTS[0] == "07:00"
    assert BASE_TIME_SLOTS[-1] == "23:00"
    assert len(BASE_TIME_SLOTS) == 17
    assert derive_time_slots([]) == BASE_TIME_SLOTS


def test_dated_entry_overrides_recurring_in_its_week_only() -> None:
    maths = weekly("w1", 3, "09:00", "10:00")
    trip = one_off("d1", date(2024, 3, 14), "09:00", "12:00", "Museum trip")
    entries = [maths, trip]

    grid = resolve_week(MONDAY, entries)
    assert grid.cell(3, "09:00") is trip

    next_week = resolve_week(date(2024, 3, 18), entries)
    assert next_week.cell(3, "09:00") is maths


def test_off_grid_start_time_adds_a_slot() -> None:
    entries = [weekly("w1", 0, "10:30", "11:15")]
    grid = resolve_week(MONDAY, entries)

    assert "10:30" in grid.slots
    assert grid.slots.index("10:30") == grid.slots.index("10:00") + 1
    assert grid.cell(0, "10:30") is entries[0]
    # the new row is empty on the other days
    assert all(grid.cell(day, "10:30") is None for day in range(1, 5))


def test_unpadded_start_times_land_on_the_padded_slot() -> None:
    entry = weekly("w1", 1, "9:00", "10:00")
    grid = resolve_week(MONDAY, [entry])
    assert grid.cell(1, "09:00") is entry
    assert "9:00" not in grid.slots


def test_first_match_wins_for_same_kind() -> None:
    first = weekly("w1", 2, "12:00", "13:00", "math")
    second = weekly("w2", 2, "12:00", "13:00", "art")
    grid = resolve_week(MONDAY, [first, second])
    assert grid.cell(2, "12:00") is first

    d = date(2024, 3, 13)
    a = one_off("d1", d, "12:00", "13:00", "A")
    b = one_off("d2", d, "12:00", "13:00", "B")
    grid = resolve_week(MONDAY, [second, b, a])
    assert grid.cell(2, "12:00") is b


def test_resolve_week_aligns_to_monday() -> None:
    grid = resolve_week(date(2024, 3, 13), [])
    assert grid.week_start == MONDAY
    assert grid.dates[0] == MONDAY


def test_empty_week_has_only_empty_cells() -> None:
    grid = resolve_week(MONDAY, [])
    assert grid.occupied() == []
    assert len(grid.cells) == 5 * len(BASE_TIME_SLOTS)


def test_agenda_for_day() -> None:
    thursday = date(2024, 3, 14)
    maths = weekly("w1", 3, "09:00", "10:00")
    art = weekly("w2", 3, "08:00", "09:00", "art")
    trip = one_off("d1", thursday, "09:00", "12:00", "Museum trip")
    other_week = one_off("d2", date(2024, 3, 21), "15:00", "16:00", "Later")

    agenda = agenda_for_day(thursday, [maths, art, trip, other_week])

    assert agenda == [art, trip]
    assert agenda_for_day(date(2024, 3, 16), [maths]) == []


def test_describe_occupant_falls_back_for_missing_subjects() -> None:
    subjects = subjects_lookup([Subject(id="math", name="Maths", color="#ff0000")])

    shown = describe_occupant(weekly("w1", 0, "09:00", "10:00"), subjects)
    assert (shown.label, shown.color) == ("Maths", "#ff0000")

    orphan = describe_occupant(weekly("w2", 0, "09:00", "10:00", "deleted"), subjects)
    assert orphan.label == PLACEHOLDER_LABEL
    assert orphan.color == DEFAULT_EVENT_COLOR

    custom = describe_occupant(one_off("d1", MONDAY, "09:00", "10:00", "Dentist"), subjects)
    assert custom.label == "Dentist"


def test_format_week_grid() -> None:
    subjects = subjects_lookup([Subject(id="math", name="Maths")])
    entries = [
        weekly("w1", 0, "09:00", "10:00"),
        one_off("d1", date(2024, 3, 12), "10:30", "11:00", "Dentist"),
    ]
    grid = resolve_week(MONDAY, entries)

    full = format_week_grid(grid, subjects)
    assert "WEEK OF 11 Mar 2024" in full
    assert "MON 11/03" in full
    assert "*Dentist" in full
    assert "Total: 2 occupied slot(s)" in full

    compact = format_week_grid(grid, subjects, show_empty_rows=False)
    rows = [line for line in compact.splitlines() if line[:2].isdigit()]
    assert [row.split()[0] for row in rows] == ["09:00", "10:30"]


def test_monday_override_only_applies_to_its_week() -> None:
    recurring = weekly("w1", 0, "09:00", "10:00")
    dated = one_off("d1", MONDAY, "09:00", "10:00", "Assembly")
    entries = [recurring, dated]

    assert resolve_week(MONDAY, entries).cell(0, "09:00") is dated
    assert resolve_week(shift_week(MONDAY, -1), entries).cell(0, "09:00") is recurring
    assert resolve_week(shift_week(MONDAY, 3), entries).cell(0, "09:00") is recurring
