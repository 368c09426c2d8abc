# -*- coding: utf-8 -*-
import copy
import logging
import threading
import typing as t
import uuid
from datetime import datetime, timezone

from academic_planner.validation import ValidationError, build_grade, build_subject, build_timetable_entry
from .models import RECORD_KINDS, RESERVED_FIELDS, RecordKind, Snapshot

logger = logging.getLogger(__name__)


# In-memory storage for planner records, keyed by kind
# In a real deployment this is a remote database scoped per user


class RecordStore:
    """Owner-scoped CRUD over flat records, partitioned by academic level."""

    def __init__(self) -> None:
        self._records: dict[str, list[dict[str, t.Any]]] = {kind: [] for kind in RECORD_KINDS}
        self._lock = threading.Lock()

    def list_all(self, kind: RecordKind, owner_id: str, level: str) -> list[dict[str, t.Any]]:
        """Return copies of every record of ``kind`` owned by ``owner_id`` in ``level``.

        Unknown kinds yield an empty list.
        """
        if kind not in self._records:
            logger.warning("list_all on unknown record kind %r", kind)
            return []
        with self._lock:
            return [
                copy.deepcopy(record) for record in self._records[kind]
                if record["owner_id"] == owner_id and record["academic_level"] == level
            ]

    def get(self, kind: RecordKind, record_id: str, owner_id: str) -> t.Optional[dict[str, t.Any]]:
        with self._lock:
            record = self._find(kind, record_id, owner_id)
            return copy.deepcopy(record) if record is not None else None

    def create(
            self,
            kind: RecordKind,
            owner_id: str,
            level: str,
            fields: t.Mapping[str, t.Any],
    ) -> t.Optional[dict[str, t.Any]]:
        """Store a new record and return it, or None if the kind is unknown."""
        if kind not in self._records:
            logger.warning("create on unknown record kind %r", kind)
            return None
        record = {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}
        record.update({
            "id": uuid.uuid4().hex,
            "owner_id": owner_id,
            "academic_level": level,
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        with self._lock:
            self._records[kind].append(record)
        logger.info("created %s record %s for owner %s (%s)", kind, record["id"], owner_id, level)
        return copy.deepcopy(record)

    def update(
            self,
            kind: RecordKind,
            record_id: str,
            owner_id: str,
            fields: t.Mapping[str, t.Any],
    ) -> t.Optional[dict[str, t.Any]]:
        """Apply ``fields`` to an owned record. Returns None when nothing matched."""
        with self._lock:
            record = self._find(kind, record_id, owner_id)
            if record is None:
                logger.warning("update of missing %s record %s for owner %s", kind, record_id, owner_id)
                return None
            record.update({k: v for k, v in fields.items() if k not in RESERVED_FIELDS})
            return copy.deepcopy(record)

    def delete(self, kind: RecordKind, record_id: str, owner_id: str) -> bool:
        """Delete an owned record. Dependent records are left as they are."""
        with self._lock:
            record = self._find(kind, record_id, owner_id)
            if record is None:
                return False
            self._records[kind].remove(record)
        logger.info("deleted %s record %s for owner %s", kind, record_id, owner_id)
        return True

    def clear(self) -> None:
        with self._lock:
            for records in self._records.values():
                records.clear()

    def _find(self, kind: str, record_id: str, owner_id: str) -> t.Optional[dict[str, t.Any]]:
        for record in self._records.get(kind, []):
            if record["id"] == record_id and record["owner_id"] == owner_id:
                return record
        return None


def build_all(records: list[dict[str, t.Any]], builder: t.Callable, kind: str) -> list:
    built = []
    for record in records:
        try:
            built.append(builder(record))
        except ValidationError as e:
            logger.warning("skipping malformed %s record %s: %s", kind, record.get("id"), e)
    return built


def load_snapshot(record_store: "RecordStore", owner_id: str, level: str) -> Snapshot:
    """Read subjects, timetable entries and grades into domain objects.

    Records that no longer validate are skipped rather than failing the read.
    """
    return Snapshot(
        subjects=build_all(record_store.list_all("subjects", owner_id, level), build_subject, "subjects"),
        entries=build_all(
            record_store.list_all("timetable_entries", owner_id, level), build_timetable_entry, "timetable_entries"
        ),
        grades=build_all(record_store.list_all("grades", owner_id, level), build_grade, "grades"),
    )


store = RecordStore()
