from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Closed set of actor roles; permission checks dispatch on these members."""

    STUDENT = "student"
    TEACHER = "teacher"
    PRINCIPAL = "principal"
    DEPUTY_PRINCIPAL = "deputy_principal"
    SECRETARY = "secretary"
    BURSAR = "bursar"

    @property
    def can_approve_marks(self) -> bool:
        return self in (Role.PRINCIPAL, Role.DEPUTY_PRINCIPAL)

    @property
    def can_enter_any_marks(self) -> bool:
        return self in (Role.PRINCIPAL, Role.DEPUTY_PRINCIPAL)

    @property
    def is_staff(self) -> bool:
        return self is not Role.STUDENT


class TrendLabel(str, Enum):
    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"


class ErrorCode(str, Enum):
    """Failure categories carried by OperationResult."""

    VALIDATION = "VALIDATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    INTERNAL = "INTERNAL"
