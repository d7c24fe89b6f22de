from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import MarkKey, MarkRecord


class MarkRepository(Protocol):
    """Persistence collaborator for mark rows keyed by (student, subject, term, year, exam type)."""

    def get_by_id(self, mark_id: str) -> Optional[MarkRecord]:
        raise NotImplementedError

    def find_by_key(self, key: MarkKey) -> Optional[MarkRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str, *, year: int, term: Optional[int] = None) -> Sequence[MarkRecord]:
        raise NotImplementedError

    def list_for_students(
        self,
        student_ids: Iterable[str],
        *,
        term: int,
        year: int,
        subject: Optional[str] = None,
        exam_type: Optional[str] = None,
        approved_only: bool = False,
    ) -> Sequence[MarkRecord]:
        raise NotImplementedError

    def create(self, record: MarkRecord) -> MarkRecord:
        """Insert a new row; returns it with its assigned mark_id."""

        raise NotImplementedError

    def update(self, record: MarkRecord) -> bool:
        raise NotImplementedError
