from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StudentRef


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[StudentRef]:
        raise NotImplementedError

    def list_by_class(self, class_name: str, *, year: int) -> Sequence[StudentRef]:
        """Active students of a class for an academic year."""

        raise NotImplementedError
