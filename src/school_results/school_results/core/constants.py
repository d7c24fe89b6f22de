"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_EXAM_TYPE = "End of Term"

VALID_TERMS = (1, 2, 3)
MIN_ACADEMIC_YEAR = 2020

MIN_SCORE = 0
MAX_SCORE = 100

OPENING_WEIGHT = Decimal("0.15")
MIDTERM_WEIGHT = Decimal("0.15")
FINAL_WEIGHT = Decimal("0.70")

MAX_COMMENT_LENGTH = 500
