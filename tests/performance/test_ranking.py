from __future__ import annotations

from src.school_results.school_results.marks.model import MarkRecord
from src.school_results.school_results.performance.ranking import rank_class
from src.school_results.school_results.students.model import StudentRef


def _mark(student_id, subject, total, *, approved=True, term=1, year=2024, grade="", points=0):
    return MarkRecord(
        mark_id=f"{student_id}-{subject}-{term}",
        student_id=student_id,
        subject=subject,
        term=term,
        year=year,
        total=total,
        percentage=total,
        grade=grade,
        points=points,
        is_approved=approved,
    )


def _student(student_id, adm):
    return StudentRef(student_id=student_id, full_name=f"Student {student_id}", admission_no=adm, class_name="3 East")


def test_ties_keep_first_appearance_order_and_positions_are_sequential():
    records = [_mark("A", "Mathematics", 90), _mark("B", "Mathematics", 90), _mark("C", "Mathematics", 70)]

    perf = rank_class(records, None)

    assert [sp.student_id for sp in perf.rankings] == ["A", "B", "C"]
    assert [sp.position for sp in perf.rankings] == [1, 2, 3]


def test_tie_order_follows_record_order_not_student_id():
    records = [_mark("B", "Mathematics", 90), _mark("A", "Mathematics", 90)]

    perf = rank_class(records, None)

    assert [sp.student_id for sp in perf.rankings] == ["B", "A"]


def test_end_to_end_roster_with_unmarked_student():
    roster = [_student("s1", "001"), _student("s2", "002"), _student("s3", "003")]
    records = [
        _mark("s1", "Mathematics", 85.5, grade="A", points=12),
        _mark("s2", "Mathematics", 60.0, grade="B-", points=8),
    ]

    perf = rank_class(records, roster, class_name="3 East", term=1, year=2024)

    assert perf.subject_means == {"Mathematics": 72.75}
    assert perf.class_mean == 72.75
    assert perf.total_students == 3
    assert [sp.student_id for sp in perf.rankings] == ["s1", "s2", "s3"]
    assert perf.position_of("s1") == 1
    assert perf.position_of("s2") == 2

    placeholder = perf.ranking_for("s3")
    assert placeholder.has_marks is False
    assert placeholder.position is None
    assert placeholder.mean_score == 0.0
    assert placeholder.subjects == ()
    assert placeholder.full_name == "Student s3"


def test_subject_means_exclude_students_without_that_subject():
    records = [
        _mark("s1", "Mathematics", 80),
        _mark("s1", "English", 60),
        _mark("s2", "Mathematics", 70),
    ]

    perf = rank_class(records, None)

    assert perf.subject_means == {"Mathematics": 75.0, "English": 60.0}
    s1 = perf.ranking_for("s1")
    assert s1.total_marks == 140.0
    assert s1.mean_score == 70.0
    assert [s.subject for s in s1.subjects] == ["Mathematics", "English"]
    # equal means: s1 appeared first
    assert perf.position_of("s1") == 1
    assert perf.position_of("s2") == 2
    assert perf.class_mean == 70.0


def test_descending_order_by_mean():
    records = [_mark("low", "Mathematics", 40), _mark("high", "Mathematics", 95), _mark("mid", "Mathematics", 60)]

    perf = rank_class(records, None)

    assert [sp.student_id for sp in perf.rankings] == ["high", "mid", "low"]
    assert perf.class_mean == 65.0


def test_unapproved_and_off_roster_records_are_ignored():
    roster = [_student("s1", "001")]
    records = [
        _mark("s1", "Mathematics", 50),
        _mark("s1", "English", 99, approved=False),
        _mark("stranger", "Mathematics", 100),
    ]

    perf = rank_class(records, roster)

    assert perf.subject_means == {"Mathematics": 50.0}
    assert perf.class_mean == 50.0
    assert [sp.student_id for sp in perf.rankings] == ["s1"]


def test_term_and_year_filters():
    records = [_mark("s1", "Mathematics", 50, term=1), _mark("s1", "Mathematics", 90, term=2)]

    perf = rank_class(records, None, term=2, year=2024)

    assert perf.class_mean == 90.0


def test_no_approved_marks_reports_no_data():
    roster = [_student("s1", "001"), _student("s2", "002")]

    perf = rank_class([_mark("s1", "Mathematics", 70, approved=False)], roster)

    assert perf.class_mean is None
    assert perf.has_data is False
    assert perf.subject_means == {}
    assert perf.total_students == 2
    assert all(not sp.has_marks for sp in perf.rankings)


def test_empty_roster_reports_no_data():
    perf = rank_class([_mark("s1", "Mathematics", 70)], [])

    assert perf.class_mean is None
    assert perf.total_students == 0
    assert perf.rankings == ()


def test_inputs_are_not_mutated():
    records = [_mark("s1", "Mathematics", 70)]
    before = list(records)

    rank_class(records, None)

    assert records == before
