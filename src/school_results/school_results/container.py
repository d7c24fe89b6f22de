from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .marks.locking import KeyedLock
from .marks.mysql_mark_repository import MySQLMarkRepository
from .marks.repository import MarkRepository
from .marks.service import MarksService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    marks_repo: MarkRepository
    students_repo: StudentRepository
    teachers_repo: TeacherRepository

    marks_service: MarksService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    marks_repo = MySQLMarkRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    teachers_repo = MySQLTeacherRepository(conn)

    # One lock table per process: marks for the same key are written one at a time.
    marks_service = MarksService(marks_repo, students_repo, teachers_repo, locks=KeyedLock())

    return Container(
        conn=conn,
        marks_repo=marks_repo,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        marks_service=marks_service,
    )
