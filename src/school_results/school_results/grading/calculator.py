from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import FINAL_WEIGHT, MIDTERM_WEIGHT, OPENING_WEIGHT

_TWO_PLACES = Decimal("0.01")


def _dec(value: Optional[float]) -> Decimal:
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def round2(value) -> float:
    """Round half-up to 2 decimals (avoids binary float surprises like 2.675)."""
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class MarkCalculator(ABC):
    """Calculator interface (Strategy Pattern for weighting component scores)."""

    @abstractmethod
    def weighted_total(self, opening: Optional[float], midterm: Optional[float], final: Optional[float]) -> float:
        raise NotImplementedError


class StandardMarkCalculator(MarkCalculator):
    """Standard rule: opening 15%, mid-term 15%, final 70%; missing component counts 0."""

    def weighted_total(self, opening: Optional[float], midterm: Optional[float], final: Optional[float]) -> float:
        total = _dec(opening) * OPENING_WEIGHT + _dec(midterm) * MIDTERM_WEIGHT + _dec(final) * FINAL_WEIGHT
        return float(total.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
