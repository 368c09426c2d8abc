"""
Record shapes kept by the planner record store.

Records are flat dictionaries using the persisted field names; every record is
stamped with its owner and academic-level bucket when created.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field

from academic_planner.models import Grade, Subject, TimetableEntry


RecordKind = t.Literal["subjects", "timetable_entries", "grades"]
RECORD_KINDS: tuple[str, ...] = t.get_args(RecordKind)

# Columns the store manages itself; callers cannot overwrite them
RESERVED_FIELDS = frozenset({"id", "owner_id", "academic_level", "created_at"})


@dataclass
class Snapshot:
    """Domain objects of one owner and bucket, read in a single pass."""
    subjects: list[Subject] = field(default_factory=list)
    entries: list[TimetableEntry] = field(default_factory=list)
    grades: list[Grade] = field(default_factory=list)
