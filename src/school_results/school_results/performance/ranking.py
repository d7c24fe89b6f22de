from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..grading.calculator import round2
from ..marks.model import MarkRecord
from ..students.model import StudentRef
from .model import ClassPerformance, StudentPerformance, SubjectPerformance


def _mean(values: Sequence[float]) -> float:
    return round2(sum(values) / len(values))


def rank_class(
    records: Iterable[MarkRecord],
    roster: Optional[Sequence[StudentRef]],
    *,
    class_name: str = "",
    term: Optional[int] = None,
    year: Optional[int] = None,
    generated_at: Optional[datetime] = None,
) -> ClassPerformance:
    """Class snapshot from approved marks.

    Students are ordered by mean score, highest first, and numbered 1..N.
    Equal means keep the order in which the students first appear in
    ``records``. Roster students without approved marks follow as unranked
    placeholders. With ``roster=None`` every student found in the records
    counts; otherwise records for students off the roster are ignored.
    """
    roster_list = list(roster) if roster is not None else None
    by_id = {s.student_id: s for s in roster_list or []}

    approved: list[MarkRecord] = []
    for r in records:
        if not r.is_approved:
            continue
        if term is not None and int(r.term) != int(term):
            continue
        if year is not None and int(r.year) != int(year):
            continue
        if roster_list is not None and r.student_id not in by_id:
            continue
        approved.append(r)

    subject_totals: dict[str, list[float]] = {}
    student_marks: dict[str, list[MarkRecord]] = {}
    for r in approved:
        subject_totals.setdefault(r.subject, []).append(float(r.total))
        student_marks.setdefault(r.student_id, []).append(r)

    subject_means = {subject: _mean(totals) for subject, totals in subject_totals.items()}

    performances: list[StudentPerformance] = []
    for student_id, marks in student_marks.items():
        student = by_id.get(student_id)
        totals = [float(m.total) for m in marks]
        performances.append(
            StudentPerformance(
                student_id=student_id,
                full_name=student.full_name if student else "",
                admission_no=student.admission_no if student else "",
                total_marks=round2(sum(totals)),
                mean_score=_mean(totals),
                subjects=tuple(
                    SubjectPerformance(subject=m.subject, marks=float(m.total), grade=m.grade, points=int(m.points))
                    for m in marks
                ),
            )
        )

    # sorted() is stable, also with reverse=True: ties keep first-appearance order.
    ordered = sorted(performances, key=lambda sp: sp.mean_score, reverse=True)
    rankings = [replace(sp, position=i) for i, sp in enumerate(ordered, start=1)]

    for student in roster_list or []:
        if student.student_id not in student_marks:
            rankings.append(
                StudentPerformance(
                    student_id=student.student_id,
                    full_name=student.full_name,
                    admission_no=student.admission_no,
                    has_marks=False,
                )
            )

    class_mean = _mean([sp.mean_score for sp in ordered]) if ordered else None
    total_students = len(roster_list) if roster_list is not None else len(student_marks)

    return ClassPerformance(
        class_name=class_name,
        term=term,
        year=year,
        total_students=total_students,
        class_mean=class_mean,
        subject_means=subject_means,
        rankings=tuple(rankings),
        generated_at=generated_at,
    )
