from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import StudentRef
from .repository import StudentRepository

_COLUMNS = "id, full_name, admission_no, class_name, form, year, is_active"


def _to_student(r: dict) -> StudentRef:
    return StudentRef(
        student_id=str(r["id"]),
        full_name=r["full_name"],
        admission_no=r.get("admission_no") or "",
        class_name=r.get("class_name") or "",
        form=r.get("form"),
        year=int(r["year"]) if r.get("year") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[StudentRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (student_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_by_class(self, class_name: str, *, year: int) -> Sequence[StudentRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE class_name=%s AND year=%s AND is_active=1
                ORDER BY admission_no
                """,
                (class_name, int(year)),
            )
            return [_to_student(r) for r in fetchall(cur)]
