from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    full_name: str
    subjects: tuple[str, ...] = field(default_factory=tuple)
    assigned_forms: tuple[str, ...] = field(default_factory=tuple)
    class_teacher_for: Optional[str] = None
    is_active: bool = True

    def can_enter_marks(self, subject: str, class_name: str) -> bool:
        """Teaches the subject and is assigned to the class (or is its class teacher)."""
        if not self.is_active or subject not in self.subjects:
            return False
        return class_name in self.assigned_forms or (
            self.class_teacher_for is not None and self.class_teacher_for == class_name
        )
