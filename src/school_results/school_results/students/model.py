from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StudentRef:
    """Roster entry as supplied by the persistence layer (read-only for the core)."""

    student_id: str
    full_name: str
    admission_no: str
    class_name: str
    form: Optional[str] = None
    year: Optional[int] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "admission_no": self.admission_no,
            "class_name": self.class_name,
            "form": self.form,
            "year": self.year,
        }
