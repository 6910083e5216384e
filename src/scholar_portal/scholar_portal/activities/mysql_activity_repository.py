from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ActivityProgram
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        scholar_id: int,
        title: str,
        description: Optional[str],
        start_date: date,
        end_date: date,
        image_data: Optional[str],
        image_media_type: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_programs(
                    scholar_id, title, description, image_data, image_media_type,
                    start_date, end_date, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(scholar_id),
                    title,
                    description,
                    image_data,
                    image_media_type,
                    start_date,
                    end_date,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def list_for_scholar(self, scholar_id: int) -> Sequence[ActivityProgram]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT program_id, scholar_id, title, description, image_data, image_media_type,
                       start_date, end_date, created_at
                FROM activity_programs
                WHERE scholar_id=%s
                ORDER BY created_at DESC, program_id DESC
                """,
                (int(scholar_id),),
            )
            return [
                ActivityProgram(
                    program_id=int(r["program_id"]),
                    scholar_id=int(r["scholar_id"]),
                    title=r["title"],
                    description=r.get("description"),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    created_at=r["created_at"],
                    image_data=r.get("image_data"),
                    image_media_type=r.get("image_media_type"),
                )
                for r in fetchall(cur)
            ]
