from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import utcnow
from ..common.validators import require_non_empty, require_term, require_year
from ..core.actor import Actor
from ..core.constants import DEFAULT_EXAM_TYPE
from ..core.enums import ErrorCode, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.logger import get_logger
from ..core.result import OperationResult
from ..grading.calculator import MarkCalculator, StandardMarkCalculator
from ..performance.model import ClassPerformance, PerformanceTrend, StudentReportCard
from ..performance.ranking import rank_class
from ..performance.report import build_report
from ..performance.trend import analyze_trend, term_means_from_records
from ..students.model import StudentRef
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from .aggregator import apply_totals, validate_entry
from .locking import KeyedLock
from .model import ClassMarkRow, MarkEntryRequest, MarkRecord
from .repository import MarkRepository

logger = get_logger(__name__)

MARKS_ENTERED = "Marks entered successfully"
MARKS_UPDATED = "Marks updated successfully"


class MarksService:
    """Use cases around marks: entry, approval, class ranking, trends, report cards.

    Every method returns an OperationResult; domain errors become typed
    failures and unexpected collaborator errors are logged and reported as
    INTERNAL.
    """

    def __init__(
        self,
        marks: MarkRepository,
        students: StudentRepository,
        teachers: TeacherRepository,
        *,
        calculator: Optional[MarkCalculator] = None,
        locks: Optional[KeyedLock] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._marks = marks
        self._students = students
        self._teachers = teachers
        self._calculator = calculator or StandardMarkCalculator()
        self._locks = locks or KeyedLock()
        self._clock = clock or utcnow

    def _guarded(self, failure: str, action: Callable[[], OperationResult]) -> OperationResult:
        try:
            return action()
        except ValidationError as e:
            return OperationResult.fail(str(e), ErrorCode.VALIDATION)
        except AuthorizationError as e:
            return OperationResult.fail(str(e), ErrorCode.AUTHORIZATION)
        except NotFoundError as e:
            return OperationResult.fail(str(e), ErrorCode.NOT_FOUND)
        except Exception as e:
            logger.exception("%s", failure)
            return OperationResult.fail(f"{failure}: {e}", ErrorCode.INTERNAL)

    # ------------------------------------------------------------------ entry

    def _authorize_entry(self, request: MarkEntryRequest, actor: Actor, student: StudentRef) -> None:
        """Teachers are checked against the class the student is enrolled in, never the submitted one."""
        if actor.role.can_enter_any_marks:
            return
        if actor.role is not Role.TEACHER:
            raise AuthorizationError("Not authorized to enter marks")
        if actor.user_id != request.teacher_id:
            raise AuthorizationError("Teachers can only enter marks under their own ID")

        teacher = self._teachers.get_by_id(request.teacher_id)
        if not teacher or not teacher.can_enter_marks(request.subject, student.class_name):
            raise AuthorizationError("Not authorized to enter marks for this subject/class")

    def enter_marks(self, request: MarkEntryRequest, *, actor: Actor) -> OperationResult[MarkRecord]:
        """Create or update the single record for the request's key."""

        def action() -> OperationResult[MarkRecord]:
            req = validate_entry(request, today=self._clock().date())
            student = self._students.get_by_id(req.student_id)
            if not student:
                raise NotFoundError("Student not found")
            self._authorize_entry(req, actor, student)

            key = req.key
            with self._locks.hold(key):
                now = self._clock()
                existing = self._marks.find_by_key(key)
                if existing:
                    changed = replace(
                        existing,
                        opening=req.opening,
                        midterm=req.midterm,
                        final=req.final,
                        teacher_id=req.teacher_id,
                        teacher_comments=req.comments,
                    )
                    saved = apply_totals(changed, now=now, calculator=self._calculator)
                    if not self._marks.update(saved):
                        raise NotFoundError("Mark entry not found")
                    message = MARKS_UPDATED
                else:
                    draft = MarkRecord(
                        mark_id=None,
                        student_id=key.student_id,
                        subject=key.subject,
                        term=key.term,
                        year=key.year,
                        exam_type=key.exam_type,
                        opening=req.opening,
                        midterm=req.midterm,
                        final=req.final,
                        teacher_id=req.teacher_id,
                        teacher_comments=req.comments,
                        created_at=now,
                    )
                    saved = self._marks.create(apply_totals(draft, now=now, calculator=self._calculator))
                    message = MARKS_ENTERED

            logger.info("Marks saved for student %s in %s (term %s/%s)", key.student_id, key.subject, key.term, key.year)
            return OperationResult.ok(saved, message)

        return self._guarded("Failed to enter marks", action)

    def approve_marks(self, mark_id: str, *, actor: Actor) -> OperationResult[MarkRecord]:
        def action() -> OperationResult[MarkRecord]:
            if not actor.role.can_approve_marks:
                raise AuthorizationError("Only the principal or deputy principal can approve marks")
            mid = require_non_empty(mark_id, "Mark ID")

            record = self._marks.get_by_id(mid)
            if not record:
                raise NotFoundError("Mark entry not found")

            with self._locks.hold(record.key):
                record = self._marks.get_by_id(mid)
                if not record:
                    raise NotFoundError("Mark entry not found")
                if record.is_approved:
                    raise ValidationError("Marks already approved")
                approved = record.approve(actor.user_id, now=self._clock())
                if not self._marks.update(approved):
                    raise NotFoundError("Mark entry not found")

            logger.info("Marks approved for mark ID %s by %s", mid, actor.user_id)
            return OperationResult.ok(approved, "Marks approved successfully")

        return self._guarded("Failed to approve marks", action)

    # ---------------------------------------------------------------- queries

    def get_student_marks(self, student_id: str, year: int, term: Optional[int] = None) -> OperationResult[list]:
        def action() -> OperationResult[list]:
            sid = require_non_empty(student_id, "Student ID")
            if term is not None:
                require_term(term)
            rows = self._marks.list_for_student(sid, year=int(year), term=term)
            return OperationResult.ok(sorted(rows, key=lambda r: (r.term, r.subject)))

        return self._guarded("Failed to get student marks", action)

    def get_class_marks(
        self,
        class_name: str,
        subject: str,
        term: int,
        year: int,
        exam_type: str = DEFAULT_EXAM_TYPE,
    ) -> OperationResult[list]:
        """Mark sheet for one subject; students without marks get an empty row."""

        def action() -> OperationResult[list]:
            cname = require_non_empty(class_name, "Class name")
            subj = require_non_empty(subject, "Subject name")
            require_term(term)

            roster = self._students.list_by_class(cname, year=int(year))
            if not roster:
                return OperationResult.ok([])

            records = self._marks.list_for_students(
                [s.student_id for s in roster], term=int(term), year=int(year), subject=subj, exam_type=exam_type
            )
            by_student = {r.student_id: r for r in records}
            rows = [
                ClassMarkRow(
                    student_id=s.student_id,
                    full_name=s.full_name,
                    admission_no=s.admission_no,
                    class_name=s.class_name,
                    subject=subj,
                    mark=by_student.get(s.student_id),
                )
                for s in roster
            ]
            rows.sort(key=lambda row: row.admission_no)
            return OperationResult.ok(rows)

        return self._guarded("Failed to get class marks", action)

    def _class_snapshot(self, class_name: str, term: int, year: int) -> Optional[ClassPerformance]:
        roster = self._students.list_by_class(class_name, year=int(year))
        if not roster:
            return None
        records = self._marks.list_for_students(
            [s.student_id for s in roster], term=int(term), year=int(year), approved_only=True
        )
        return rank_class(
            records,
            roster,
            class_name=class_name,
            term=int(term),
            year=int(year),
            generated_at=self._clock(),
        )

    def class_performance(self, class_name: str, term: int, year: int) -> OperationResult[ClassPerformance]:
        def action() -> OperationResult[ClassPerformance]:
            cname = require_non_empty(class_name, "Class name")
            require_term(term)
            snapshot = self._class_snapshot(cname, term, year)
            if snapshot is None:
                raise NotFoundError("No students found in class")
            if not snapshot.has_data:
                return OperationResult.ok(snapshot, "No approved marks yet")
            return OperationResult.ok(snapshot)

        return self._guarded("Failed to calculate class performance", action)

    def performance_trend(self, student_id: str, year: int) -> OperationResult[PerformanceTrend]:
        def action() -> OperationResult[PerformanceTrend]:
            sid = require_non_empty(student_id, "Student ID")
            records = self._marks.list_for_student(sid, year=int(year))
            trend = analyze_trend(term_means_from_records(records, year=int(year)), student_id=sid, year=int(year))
            if trend.trend is None:
                return OperationResult.ok(trend, "Not enough terms to determine a trend")
            return OperationResult.ok(trend)

        return self._guarded("Failed to get performance trend", action)

    def report_card(self, student_id: str, term: int, year: int) -> OperationResult[StudentReportCard]:
        def action() -> OperationResult[StudentReportCard]:
            sid = require_non_empty(student_id, "Student ID")
            require_term(term)
            require_year(int(year), today=self._clock().date())

            student = self._students.get_by_id(sid)
            if not student:
                raise NotFoundError("Student not found")

            marks = self._marks.list_for_student(sid, year=int(year), term=int(term))
            snapshot = None
            if student.class_name:
                snapshot = self._class_snapshot(student.class_name, term, year)

            card = build_report(sid, term, year, marks, snapshot, student=student, generated_at=self._clock())
            return OperationResult.ok(card)

        return self._guarded("Failed to generate report card", action)
