from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WeeklySummary
from .repository import WeeklySummaryRepository


class MySQLWeeklySummaryRepository(WeeklySummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> WeeklySummary:
        return WeeklySummary(
            user_id=str(r["user_id"]),
            user_name=r["user_name"],
            start_date=r["start_date"],
            end_date=r["end_date"],
            total_minutes=int(r["total_minutes"]),
            updated_at=r.get("updated_at"),
        )

    def increment(
        self,
        *,
        user_id: str,
        user_name: str,
        start_date: date,
        end_date: date,
        minutes: int,
    ) -> None:
        with db_cursor(self._conn_factory, operation=f"increment weekly_summaries {user_id}") as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_summaries(user_id, user_name, start_date, end_date, total_minutes)
                VALUES(%s,%s,%s,%s,GREATEST(%s,0))
                ON DUPLICATE KEY UPDATE
                    total_minutes = GREATEST(total_minutes + %s, 0),
                    user_name = VALUES(user_name)
                """,
                (str(user_id), user_name, start_date, end_date, int(minutes), int(minutes)),
            )

    def get(self, *, user_id: str, start_date: date) -> Optional[WeeklySummary]:
        with db_cursor(self._conn_factory, operation=f"get weekly_summaries {user_id}") as (_, cur):
            cur.execute(
                """
                SELECT user_id, user_name, start_date, end_date, total_minutes, updated_at
                FROM weekly_summaries
                WHERE user_id=%s AND start_date=%s
                """,
                (str(user_id), start_date),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def delete(self, *, user_id: str, start_date: date) -> bool:
        with db_cursor(self._conn_factory, operation=f"delete weekly_summaries {user_id}") as (_, cur):
            cur.execute(
                "DELETE FROM weekly_summaries WHERE user_id=%s AND start_date=%s",
                (str(user_id), start_date),
            )
            return cur.rowcount > 0

    def list_for_cycle(self, *, start_date: date) -> Sequence[WeeklySummary]:
        with db_cursor(self._conn_factory, operation="list weekly_summaries") as (_, cur):
            cur.execute(
                """
                SELECT user_id, user_name, start_date, end_date, total_minutes, updated_at
                FROM weekly_summaries
                WHERE start_date=%s
                ORDER BY user_name
                """,
                (start_date,),
            )
            return [self._to_model(r) for r in fetchall(cur)]
