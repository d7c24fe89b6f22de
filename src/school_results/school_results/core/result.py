from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from .enums import ErrorCode

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome handed back to the UI/notification layer instead of raising."""

    success: bool
    message: str = ""
    data: Optional[T] = None
    error_code: Optional[ErrorCode] = None
    timestamp: datetime = field(default_factory=_utcnow)

    @classmethod
    def ok(cls, data: Optional[T] = None, message: str = "Operation completed successfully") -> "OperationResult[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, code: ErrorCode = ErrorCode.INTERNAL) -> "OperationResult[T]":
        return cls(success=False, message=message, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        elif isinstance(data, list):
            data = [d.to_dict() if hasattr(d, "to_dict") else d for d in data]
        return {
            "success": self.success,
            "message": self.message,
            "data": data,
            "error_code": self.error_code.value if self.error_code else None,
        }
