from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, to_float
from .model import MarkKey, MarkRecord
from .repository import MarkRepository

_COLUMNS = """
    id, student_id, subject, term, year, exam_type,
    opening_marks, midterm_marks, final_exam_marks,
    total_marks, percentage, grade, points,
    teacher_id, teacher_comments, is_approved, approved_by, approval_date,
    created_at, updated_at
"""


def _to_record(r: dict) -> MarkRecord:
    return MarkRecord(
        mark_id=str(r["id"]),
        student_id=str(r["student_id"]),
        subject=r["subject"],
        term=int(r["term"]),
        year=int(r["year"]),
        exam_type=r["exam_type"],
        opening=to_float(r.get("opening_marks")),
        midterm=to_float(r.get("midterm_marks")),
        final=to_float(r.get("final_exam_marks")),
        total=to_float(r.get("total_marks")) or 0.0,
        percentage=to_float(r.get("percentage")) or 0.0,
        grade=r.get("grade") or "",
        points=int(r.get("points") or 0),
        teacher_id=r.get("teacher_id"),
        teacher_comments=r.get("teacher_comments"),
        is_approved=bool(r.get("is_approved")),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approval_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLMarkRepository(MarkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, mark_id: str) -> Optional[MarkRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM marks WHERE id=%s", (mark_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_key(self, key: MarkKey) -> Optional[MarkRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM marks
                WHERE student_id=%s AND subject=%s AND term=%s AND year=%s AND exam_type=%s
                """,
                (key.student_id, key.subject, key.term, key.year, key.exam_type),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_student(self, student_id: str, *, year: int, term: Optional[int] = None) -> Sequence[MarkRecord]:
        sql = f"SELECT {_COLUMNS} FROM marks WHERE student_id=%s AND year=%s"
        params: list = [student_id, int(year)]
        if term is not None:
            sql += " AND term=%s"
            params.append(int(term))
        sql += " ORDER BY term, subject"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_students(
        self,
        student_ids: Iterable[str],
        *,
        term: int,
        year: int,
        subject: Optional[str] = None,
        exam_type: Optional[str] = None,
        approved_only: bool = False,
    ) -> Sequence[MarkRecord]:
        ids = [str(s) for s in student_ids]
        if not ids:
            return []

        sql = f"SELECT {_COLUMNS} FROM marks WHERE student_id IN ({placeholders(len(ids))}) AND term=%s AND year=%s"
        params: list = [*ids, int(term), int(year)]
        if subject is not None:
            sql += " AND subject=%s"
            params.append(subject)
        if exam_type is not None:
            sql += " AND exam_type=%s"
            params.append(exam_type)
        if approved_only:
            sql += " AND is_approved=1"
        sql += " ORDER BY created_at, id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: MarkRecord) -> MarkRecord:
        created = replace(record, mark_id=record.mark_id or str(uuid.uuid4()))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO marks(
                    id, student_id, subject, term, year, exam_type,
                    opening_marks, midterm_marks, final_exam_marks,
                    total_marks, percentage, grade, points,
                    teacher_id, teacher_comments, is_approved, approved_by, approval_date,
                    created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    created.mark_id,
                    created.student_id,
                    created.subject,
                    created.term,
                    created.year,
                    created.exam_type,
                    created.opening,
                    created.midterm,
                    created.final,
                    created.total,
                    created.percentage,
                    created.grade,
                    created.points,
                    created.teacher_id,
                    created.teacher_comments,
                    int(created.is_approved),
                    created.approved_by,
                    created.approved_at,
                    created.created_at,
                    created.updated_at,
                ),
            )
        return created

    def update(self, record: MarkRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE marks
                SET opening_marks=%s, midterm_marks=%s, final_exam_marks=%s,
                    total_marks=%s, percentage=%s, grade=%s, points=%s,
                    teacher_id=%s, teacher_comments=%s,
                    is_approved=%s, approved_by=%s, approval_date=%s, updated_at=%s
                WHERE id=%s
                """,
                (
                    record.opening,
                    record.midterm,
                    record.final,
                    record.total,
                    record.percentage,
                    record.grade,
                    record.points,
                    record.teacher_id,
                    record.teacher_comments,
                    int(record.is_approved),
                    record.approved_by,
                    record.approved_at,
                    record.updated_at,
                    record.mark_id,
                ),
            )
            return cur.rowcount > 0
