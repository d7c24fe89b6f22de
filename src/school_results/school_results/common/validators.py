from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import MAX_SCORE, MIN_ACADEMIC_YEAR, MIN_SCORE, VALID_TERMS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_term(term: int) -> int:
    if isinstance(term, bool) or term not in VALID_TERMS:
        raise ValidationError("Term must be between 1 and 3")
    return int(term)


def require_year(year: int, *, today: Optional[date] = None) -> int:
    today = today or date.today()
    if isinstance(year, bool) or not isinstance(year, int) or year < MIN_ACADEMIC_YEAR or year > today.year + 1:
        raise ValidationError("Invalid year")
    return year


def require_score(value, field_name: str) -> Optional[float]:
    """Optional component score in [0, 100]; out-of-range values are rejected, not clamped."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        score = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if score != score or score < MIN_SCORE or score > MAX_SCORE:
        raise ValidationError(f"{field_name} must be between {MIN_SCORE} and {MAX_SCORE}")
    return score
