from __future__ import annotations

import pytest

from src.school_results.school_results.core.enums import TrendLabel
from src.school_results.school_results.core.exceptions import ValidationError
from src.school_results.school_results.marks.model import MarkRecord
from src.school_results.school_results.performance.model import TermPerformance
from src.school_results.school_results.performance.trend import analyze_trend, term_means_from_records


def test_single_term_is_undetermined():
    trend = analyze_trend([(1, 60)])
    assert trend.trend is None
    assert trend.percentage_change is None
    assert len(trend.terms) == 1


def test_no_terms_is_undetermined():
    trend = analyze_trend([])
    assert trend.trend is None
    assert trend.percentage_change is None


def test_improving_with_percentage_change():
    trend = analyze_trend([(1, 60), (2, 75)], student_id="s1", year=2024)
    assert trend.trend == TrendLabel.IMPROVING
    assert trend.percentage_change == 25.0
    assert trend.student_id == "s1"


def test_zero_first_term_guards_division():
    trend = analyze_trend([(1, 0), (2, 50)])
    assert trend.trend == TrendLabel.IMPROVING
    assert trend.percentage_change is None


def test_declining_compares_first_and_last_only():
    trend = analyze_trend([(1, 70), (2, 90), (3, 56)])
    assert trend.trend == TrendLabel.DECLINING
    assert trend.percentage_change == -20.0


def test_stable():
    trend = analyze_trend([(1, 50), (3, 50)])
    assert trend.trend == TrendLabel.STABLE
    assert trend.percentage_change == 0.0


def test_percentage_change_rounded_to_two_places():
    trend = analyze_trend([(1, 60), (2, 61)])
    assert trend.percentage_change == 1.67


def test_accepts_term_performance_objects():
    trend = analyze_trend([TermPerformance(term=1, mean_score=40), TermPerformance(term=2, mean_score=30)])
    assert trend.trend == TrendLabel.DECLINING
    assert trend.percentage_change == -25.0


def test_unordered_terms_are_rejected():
    with pytest.raises(ValidationError):
        analyze_trend([(2, 50), (1, 60)])


def _mark(term, subject, total, approved=True, year=2024):
    return MarkRecord(
        mark_id=None,
        student_id="s1",
        subject=subject,
        term=term,
        year=year,
        total=total,
        grade="",
        is_approved=approved,
    )


def test_term_means_from_records_groups_approved_marks_by_term():
    records = [
        _mark(2, "Mathematics", 80),
        _mark(1, "Mathematics", 60),
        _mark(1, "English", 70),
        _mark(1, "Physics", 10, approved=False),
        _mark(1, "Chemistry", 99, year=2023),
    ]

    terms = term_means_from_records(records, year=2024)

    assert [t.term for t in terms] == [1, 2]
    assert terms[0].mean_score == 65.0
    assert terms[0].subject_count == 2
    assert terms[1].mean_score == 80.0

    trend = analyze_trend(terms)
    assert trend.trend == TrendLabel.IMPROVING
    assert trend.percentage_change == 23.08
