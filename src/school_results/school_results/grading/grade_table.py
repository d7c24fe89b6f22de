"""Static grade table (Kenyan secondary 12-point scale).

Bands are listed highest first with inclusive integer boundaries. A score
belongs to the first band whose lower bound it reaches, so fractional scores
between two bands (79.5) fall into the lower band (A-) instead of a gap.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GradeBand:
    lower: int
    upper: int
    letter: str
    points: int
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "letter": self.letter,
            "min_percentage": self.lower,
            "max_percentage": self.upper,
            "points": self.points,
            "description": self.description,
        }


GRADE_TABLE: tuple[GradeBand, ...] = (
    GradeBand(80, 100, "A", 12, "Excellent"),
    GradeBand(75, 79, "A-", 11, "Very Good"),
    GradeBand(70, 74, "B+", 10, "Good"),
    GradeBand(65, 69, "B", 9, "Good"),
    GradeBand(60, 64, "B-", 8, "Above Average"),
    GradeBand(55, 59, "C+", 7, "Above Average"),
    GradeBand(50, 54, "C", 6, "Average"),
    GradeBand(45, 49, "C-", 5, "Average"),
    GradeBand(40, 44, "D+", 4, "Below Average"),
    GradeBand(35, 39, "D", 3, "Below Average"),
    GradeBand(30, 34, "D-", 2, "Poor"),
    GradeBand(0, 29, "E", 1, "Very Poor"),
)

HIGHEST_BAND = GRADE_TABLE[0]
LOWEST_BAND = GRADE_TABLE[-1]

_BY_LETTER = {band.letter: band for band in GRADE_TABLE}


def classify(percentage) -> GradeBand:
    """Band for a percentage. Never raises for numeric input.

    Above 100 gives the highest band; below 0 (or NaN) gives E.
    """
    value = float(percentage)
    for band in GRADE_TABLE:
        if value >= band.lower:
            return band
    return LOWEST_BAND


def band_for(letter: Optional[str]) -> Optional[GradeBand]:
    return _BY_LETTER.get((letter or "").strip())


def points_for(letter: Optional[str]) -> int:
    """Reverse lookup; unknown letters score the minimum (1)."""
    band = band_for(letter)
    return band.points if band else LOWEST_BAND.points
