from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_max_length, require_non_empty, require_score, require_term, require_year
from ..core.constants import MAX_COMMENT_LENGTH
from ..core.exceptions import ValidationError
from ..grading.calculator import MarkCalculator, StandardMarkCalculator
from ..grading.grade_table import classify
from .model import MarkEntryRequest, MarkRecord

_DEFAULT_CALCULATOR = StandardMarkCalculator()


@dataclass(frozen=True)
class MarkTotals:
    total: float
    percentage: float
    grade: str
    points: int


def aggregate(
    opening: Optional[float],
    midterm: Optional[float],
    final: Optional[float],
    *,
    calculator: Optional[MarkCalculator] = None,
) -> MarkTotals:
    """Weighted total plus its grade. Components outside [0, 100] raise ValidationError."""
    opening = require_score(opening, "Opening marks")
    midterm = require_score(midterm, "Mid-term marks")
    final = require_score(final, "Final exam marks")

    calc = calculator or _DEFAULT_CALCULATOR
    total = calc.weighted_total(opening, midterm, final)
    band = classify(total)
    # Components are out of 100, so the percentage is the total itself.
    return MarkTotals(total=total, percentage=total, grade=band.letter, points=band.points)


def apply_totals(record: MarkRecord, *, now: datetime, calculator: Optional[MarkCalculator] = None) -> MarkRecord:
    """Copy of ``record`` with derived fields recomputed; identity and approval untouched."""
    totals = aggregate(record.opening, record.midterm, record.final, calculator=calculator)
    return replace(
        record,
        total=totals.total,
        percentage=totals.percentage,
        grade=totals.grade,
        points=totals.points,
        updated_at=now,
    )


def validate_entry(request: MarkEntryRequest, *, today: Optional[date] = None) -> MarkEntryRequest:
    """Raise ValidationError on the first bad field; returns a normalized request."""
    if request is None:
        raise ValidationError("Mark entry request cannot be null")

    student_id = require_non_empty(request.student_id, "Student ID")
    subject = require_non_empty(request.subject, "Subject name")
    teacher_id = require_non_empty(request.teacher_id, "Teacher ID")
    term = require_term(request.term)
    year = require_year(request.year, today=today)
    opening = require_score(request.opening, "Opening marks")
    midterm = require_score(request.midterm, "Mid-term marks")
    final = require_score(request.final, "Final exam marks")
    comments = require_max_length(request.comments, "Comments", MAX_COMMENT_LENGTH)

    return replace(
        request,
        student_id=student_id,
        subject=subject,
        teacher_id=teacher_id,
        class_name=(request.class_name or "").strip(),
        term=term,
        year=year,
        opening=opening,
        midterm=midterm,
        final=final,
        comments=comments,
    )
