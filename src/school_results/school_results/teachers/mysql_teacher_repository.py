from __future__ import annotations

import json
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Teacher
from .repository import TeacherRepository


def _parse_list(value) -> tuple[str, ...]:
    """subjects / assigned_forms are stored as a JSON array (older rows: comma separated)."""
    if not value:
        return ()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    text = str(value).strip()
    if text.startswith("["):
        return tuple(str(v).strip() for v in json.loads(text) if str(v).strip())
    return tuple(part.strip() for part in text.split(",") if part.strip())


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, full_name, subjects, assigned_forms, class_teacher_for, is_active
                FROM teachers
                WHERE teacher_id=%s
                """,
                (teacher_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Teacher(
                teacher_id=str(r["teacher_id"]),
                full_name=r["full_name"],
                subjects=_parse_list(r.get("subjects")),
                assigned_forms=_parse_list(r.get("assigned_forms")),
                class_teacher_for=r.get("class_teacher_for"),
                is_active=bool(r.get("is_active", 1)),
            )
