from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import NamedTuple, Optional

from ..common.datetime_utils import iso_or_none
from ..core.constants import DEFAULT_EXAM_TYPE


class MarkKey(NamedTuple):
    """Natural key of a mark row: one record per student/subject/term/year/exam type."""

    student_id: str
    subject: str
    term: int
    year: int
    exam_type: str


@dataclass(frozen=True)
class MarkRecord:
    """Domain entity: one student's marks for one subject/term/year/exam type.

    total/percentage/grade/points are derived from the component scores and
    are only ever set through ``marks.aggregator.apply_totals``.
    """

    mark_id: Optional[str]
    student_id: str
    subject: str
    term: int
    year: int
    exam_type: str = DEFAULT_EXAM_TYPE
    opening: Optional[float] = None
    midterm: Optional[float] = None
    final: Optional[float] = None
    total: float = 0.0
    percentage: float = 0.0
    grade: str = ""
    points: int = 0
    teacher_id: Optional[str] = None
    teacher_comments: Optional[str] = None
    is_approved: bool = False
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> MarkKey:
        return MarkKey(self.student_id, self.subject, int(self.term), int(self.year), self.exam_type)

    def approve(self, approved_by: str, *, now: datetime) -> "MarkRecord":
        return replace(self, is_approved=True, approved_by=approved_by, approved_at=now, updated_at=now)

    def to_dict(self) -> dict:
        return {
            "mark_id": self.mark_id,
            "student_id": self.student_id,
            "subject": self.subject,
            "term": self.term,
            "year": self.year,
            "exam_type": self.exam_type,
            "opening": self.opening,
            "midterm": self.midterm,
            "final": self.final,
            "total": self.total,
            "percentage": self.percentage,
            "grade": self.grade,
            "points": self.points,
            "teacher_id": self.teacher_id,
            "teacher_comments": self.teacher_comments,
            "is_approved": self.is_approved,
            "approved_by": self.approved_by,
            "approved_at": iso_or_none(self.approved_at),
            "created_at": iso_or_none(self.created_at),
            "updated_at": iso_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class MarkEntryRequest:
    student_id: str
    subject: str
    teacher_id: str
    class_name: str
    term: int
    year: int
    opening: Optional[float] = None
    midterm: Optional[float] = None
    final: Optional[float] = None
    exam_type: Optional[str] = DEFAULT_EXAM_TYPE
    comments: Optional[str] = None

    @property
    def key(self) -> MarkKey:
        return MarkKey(
            self.student_id.strip(),
            self.subject.strip(),
            int(self.term),
            int(self.year),
            (self.exam_type or DEFAULT_EXAM_TYPE).strip() or DEFAULT_EXAM_TYPE,
        )


@dataclass(frozen=True)
class ClassMarkRow:
    """Read-model for a subject mark sheet: every roster student, marked or not."""

    student_id: str
    full_name: str
    admission_no: str
    class_name: str
    subject: str
    mark: Optional[MarkRecord] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "admission_no": self.admission_no,
            "class_name": self.class_name,
            "subject": self.subject,
            "mark": self.mark.to_dict() if self.mark else None,
        }
