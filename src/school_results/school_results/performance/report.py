from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..grading.calculator import round2
from ..grading.grade_table import classify
from ..marks.model import MarkRecord
from ..students.model import StudentRef
from .model import ClassPerformance, StudentReportCard, SubjectResult


def build_report(
    student_id: str,
    term: int,
    year: int,
    marks: Iterable[MarkRecord],
    class_performance: Optional[ClassPerformance],
    *,
    student: Optional[StudentRef] = None,
    generated_at: Optional[datetime] = None,
) -> StudentReportCard:
    """Report card from approved marks plus the caller's class snapshot.

    Provisional (unapproved) marks never appear. Position and class size are
    left unset when the student is not ranked in ``class_performance``.
    """
    own = [
        m
        for m in marks
        if m.is_approved and m.student_id == student_id and int(m.term) == int(term) and int(m.year) == int(year)
    ]

    results = tuple(
        SubjectResult(
            subject=m.subject,
            opening=float(m.opening or 0),
            midterm=float(m.midterm or 0),
            final=float(m.final or 0),
            total=float(m.total),
            grade=m.grade,
            points=int(m.points),
            teacher_comments=m.teacher_comments or "",
        )
        for m in own
    )

    mean_score = total_points = overall_grade = None
    if results:
        mean_score = round2(sum(r.total for r in results) / len(results))
        total_points = sum(r.points for r in results)
        overall_grade = classify(mean_score).letter

    position = size = None
    ranked = class_performance.ranking_for(student_id) if class_performance else None
    if ranked is not None and ranked.position is not None:
        position = ranked.position
        size = class_performance.total_students

    return StudentReportCard(
        student_id=student_id,
        term=int(term),
        year=int(year),
        full_name=student.full_name if student else "",
        admission_no=student.admission_no if student else "",
        class_name=student.class_name if student else (class_performance.class_name if class_performance else ""),
        subject_results=results,
        mean_score=mean_score,
        total_points=total_points,
        overall_grade=overall_grade,
        class_position=position,
        class_size=size,
        generated_at=generated_at,
    )
