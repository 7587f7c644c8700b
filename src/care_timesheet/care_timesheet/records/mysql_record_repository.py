from __future__ import annotations

from dataclasses import fields
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import LeaveHoursType, LeaveType, RecordKind, RecordStatus, TrainingType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .kinds import RecordKindPolicy
from .model import HourBearingRecord
from .repository import RecordRepository

_COMMON_READERS: dict[str, Callable[[Any], Any]] = {
    "record_id": int,
    "user_id": str,
    "status": RecordStatus,
    "is_draft": bool,
    "deleted": bool,
}

_KIND_READERS: dict[RecordKind, dict[str, Callable[[Any], Any]]] = {
    RecordKind.WORK_ENTRY: {"start_time": normalize_mysql_time, "end_time": normalize_mysql_time},
    RecordKind.LEAVE_REQUEST: {"leave_type": LeaveType, "total_days": float},
    RecordKind.LEAVE_HOURS: {"leave_type": LeaveHoursType, "hours": float},
    RecordKind.TRAINING: {"training_type": TrainingType, "hours": float},
}


_TEXT_COLUMNS = {"reason", "description", "provider", "location"}


def _to_db(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class MySQLRecordRepository(RecordRepository):
    """One repository class for all four record kinds, driven by the kind policy."""

    def __init__(self, conn_factory: DatabaseConnection, policy: RecordKindPolicy):
        self._conn_factory = conn_factory
        self._policy = policy
        self._table = policy.table
        self._columns = [f.name for f in fields(policy.record_type)]
        self._readers = {**_COMMON_READERS, **_KIND_READERS[policy.kind]}

    def _row_to_record(self, row: Mapping[str, Any]) -> HourBearingRecord:
        values = {}
        for name in self._columns:
            value = row.get(name)
            reader = self._readers.get(name)
            if reader is not None and value is not None:
                value = reader(value)
            elif value is None and name in _TEXT_COLUMNS:
                value = ""
            values[name] = value
        return self._policy.record_type(**values)

    def create(self, record: HourBearingRecord) -> int:
        columns = [c for c in self._columns if c != "record_id"]
        placeholders = ",".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory, operation=f"insert {self._table}") as (_, cur):
            cur.execute(
                f"INSERT INTO {self._table}({', '.join(columns)}) VALUES({placeholders})",
                tuple(_to_db(getattr(record, c)) for c in columns),
            )
            return int(cur.lastrowid)

    def get(self, *, record_id: int) -> Optional[HourBearingRecord]:
        with db_cursor(self._conn_factory, operation=f"get {self._table} #{record_id}") as (_, cur):
            cur.execute(
                f"SELECT {', '.join(self._columns)} FROM {self._table} WHERE record_id=%s",
                (int(record_id),),
            )
            r = fetchone(cur)
            return self._row_to_record(r) if r else None

    def list_records(
        self,
        *,
        user_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_drafts: bool = False,
        status: Optional[RecordStatus] = None,
        include_deleted: bool = False,
        limit: Optional[int] = 500,
    ) -> Sequence[HourBearingRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        date_col = self._policy.date_column

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(str(user_id))
        if start is not None:
            clauses.append(f"{date_col}>=%s")
            params.append(start)
        if end is not None:
            clauses.append(f"{date_col}<=%s")
            params.append(end)
        if not include_drafts:
            clauses.append("is_draft=0")
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if not include_deleted:
            clauses.append("deleted=0")

        where = " AND ".join(clauses)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory, operation=f"list {self._table}") as (_, cur):
            cur.execute(
                f"""
                SELECT {', '.join(self._columns)}
                FROM {self._table}
                WHERE {where}
                ORDER BY created_at DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._row_to_record(r) for r in fetchall(cur)]

    def update(
        self,
        *,
        record_id: int,
        changes: Mapping[str, Any],
        expected_statuses: Sequence[RecordStatus],
    ) -> bool:
        if not changes or not expected_statuses:
            return False
        assignments = ", ".join(f"{name}=%s" for name in changes)
        status_marks = ",".join(["%s"] * len(expected_statuses))
        with db_cursor(self._conn_factory, operation=f"update {self._table} #{record_id}") as (_, cur):
            # single compare-and-swap statement: concurrent transitions cannot both win
            cur.execute(
                f"""
                UPDATE {self._table}
                SET {assignments}
                WHERE record_id=%s AND deleted=0 AND status IN ({status_marks})
                """,
                (
                    *(_to_db(v) for v in changes.values()),
                    int(record_id),
                    *(s.value for s in expected_statuses),
                ),
            )
            return cur.rowcount > 0

    def delete(self, *, record_id: int, expected_statuses: Sequence[RecordStatus]) -> bool:
        status_marks = ",".join(["%s"] * len(expected_statuses))
        with db_cursor(self._conn_factory, operation=f"delete {self._table} #{record_id}") as (_, cur):
            cur.execute(
                f"DELETE FROM {self._table} WHERE record_id=%s AND deleted=0 AND status IN ({status_marks})",
                (int(record_id), *(s.value for s in expected_statuses)),
            )
            return cur.rowcount > 0

    def count_active(self, *, user_id: str, start: date, end: date) -> int:
        date_col = self._policy.date_column
        with db_cursor(self._conn_factory, operation=f"count {self._table}") as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS n FROM {self._table}
                WHERE user_id=%s AND {date_col} BETWEEN %s AND %s AND is_draft=0 AND deleted=0
                """,
                (str(user_id), start, end),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
