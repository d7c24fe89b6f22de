from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple, Union

from ..core.enums import TrendLabel
from ..core.exceptions import ValidationError
from ..grading.calculator import round2
from ..marks.model import MarkRecord
from .model import PerformanceTrend, SubjectPerformance, TermPerformance

TermMean = Union[TermPerformance, Tuple[int, float]]


def _as_term(item: TermMean) -> TermPerformance:
    if isinstance(item, TermPerformance):
        return item
    term, mean_score = item
    return TermPerformance(term=int(term), mean_score=float(mean_score))


def analyze_trend(
    term_means: Iterable[TermMean],
    *,
    student_id: str = "",
    year: Optional[int] = None,
) -> PerformanceTrend:
    """Compare the last term mean with the first.

    Fewer than two terms leaves trend and percentage_change unset. A first
    mean of 0 still yields a label but no percentage change.
    """
    terms = [_as_term(t) for t in term_means]
    for prev, cur in zip(terms, terms[1:]):
        if cur.term <= prev.term:
            raise ValidationError("Term means must be ordered by ascending term")

    if len(terms) < 2:
        return PerformanceTrend(student_id=student_id, year=year, terms=tuple(terms))

    first = terms[0].mean_score
    last = terms[-1].mean_score
    if last > first:
        label = TrendLabel.IMPROVING
    elif last < first:
        label = TrendLabel.DECLINING
    else:
        label = TrendLabel.STABLE

    change = None if first == 0 else round2((last - first) / first * 100)
    return PerformanceTrend(
        student_id=student_id,
        year=year,
        terms=tuple(terms),
        trend=label,
        percentage_change=change,
    )


def term_means_from_records(records: Sequence[MarkRecord], *, year: Optional[int] = None) -> list[TermPerformance]:
    """Group one student's approved marks by term (ascending) with each term's mean."""
    by_term: dict[int, list[MarkRecord]] = {}
    for r in records:
        if not r.is_approved:
            continue
        if year is not None and int(r.year) != int(year):
            continue
        by_term.setdefault(int(r.term), []).append(r)

    out: list[TermPerformance] = []
    for term in sorted(by_term):
        marks = by_term[term]
        out.append(
            TermPerformance(
                term=term,
                mean_score=round2(sum(float(m.total) for m in marks) / len(marks)),
                subject_count=len(marks),
                subjects=tuple(
                    SubjectPerformance(subject=m.subject, marks=float(m.total), grade=m.grade, points=int(m.points))
                    for m in marks
                ),
            )
        )
    return out
