from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import TrendLabel


@dataclass(frozen=True)
class SubjectPerformance:
    subject: str
    marks: float
    grade: str
    points: int = 0

    def to_dict(self) -> dict:
        return {"subject": self.subject, "marks": self.marks, "grade": self.grade, "points": self.points}


@dataclass(frozen=True)
class StudentPerformance:
    """One student's standing for a term.

    Placeholders (roster students without approved marks) have
    ``has_marks=False`` and no position.
    """

    student_id: str
    full_name: str = ""
    admission_no: str = ""
    total_marks: float = 0.0
    mean_score: float = 0.0
    subjects: tuple[SubjectPerformance, ...] = ()
    position: Optional[int] = None
    has_marks: bool = True

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "admission_no": self.admission_no,
            "total_marks": self.total_marks,
            "mean_score": self.mean_score,
            "position": self.position,
            "has_marks": self.has_marks,
            "subjects": [s.to_dict() for s in self.subjects],
        }


@dataclass(frozen=True)
class ClassPerformance:
    """Snapshot of one class for a term/year. ``class_mean`` is None when nothing is ranked."""

    class_name: str
    term: Optional[int]
    year: Optional[int]
    total_students: int
    class_mean: Optional[float]
    subject_means: dict[str, float] = field(default_factory=dict)
    rankings: tuple[StudentPerformance, ...] = ()
    generated_at: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        return self.class_mean is not None

    def ranking_for(self, student_id: str) -> Optional[StudentPerformance]:
        for sp in self.rankings:
            if sp.student_id == student_id:
                return sp
        return None

    def position_of(self, student_id: str) -> Optional[int]:
        sp = self.ranking_for(student_id)
        return sp.position if sp else None

    def to_dict(self) -> dict:
        return {
            "class_name": self.class_name,
            "term": self.term,
            "year": self.year,
            "total_students": self.total_students,
            "class_mean": self.class_mean,
            "subject_means": dict(self.subject_means),
            "rankings": [sp.to_dict() for sp in self.rankings],
            "generated_at": iso_or_none(self.generated_at),
        }


@dataclass(frozen=True)
class TermPerformance:
    term: int
    mean_score: float
    subject_count: int = 0
    subjects: tuple[SubjectPerformance, ...] = ()

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "mean_score": self.mean_score,
            "subject_count": self.subject_count,
            "subjects": [s.to_dict() for s in self.subjects],
        }


@dataclass(frozen=True)
class PerformanceTrend:
    """Year-long trajectory; trend and percentage_change stay None without enough data."""

    student_id: str
    year: Optional[int]
    terms: tuple[TermPerformance, ...] = ()
    trend: Optional[TrendLabel] = None
    percentage_change: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "year": self.year,
            "terms": [t.to_dict() for t in self.terms],
            "trend": self.trend.value if self.trend else None,
            "percentage_change": self.percentage_change,
        }


@dataclass(frozen=True)
class SubjectResult:
    subject: str
    opening: float
    midterm: float
    final: float
    total: float
    grade: str
    points: int
    teacher_comments: str = ""

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "opening": self.opening,
            "midterm": self.midterm,
            "final": self.final,
            "total": self.total,
            "grade": self.grade,
            "points": self.points,
            "teacher_comments": self.teacher_comments,
        }


@dataclass(frozen=True)
class StudentReportCard:
    student_id: str
    term: int
    year: int
    full_name: str = ""
    admission_no: str = ""
    class_name: str = ""
    subject_results: tuple[SubjectResult, ...] = ()
    mean_score: Optional[float] = None
    total_points: Optional[int] = None
    overall_grade: Optional[str] = None
    class_position: Optional[int] = None
    class_size: Optional[int] = None
    generated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "admission_no": self.admission_no,
            "class_name": self.class_name,
            "term": self.term,
            "year": self.year,
            "subject_results": [r.to_dict() for r in self.subject_results],
            "mean_score": self.mean_score,
            "total_points": self.total_points,
            "overall_grade": self.overall_grade,
            "class_position": self.class_position,
            "class_size": self.class_size,
            "generated_at": iso_or_none(self.generated_at),
        }
