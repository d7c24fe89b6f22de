from __future__ import annotations

import pytest

from src.school_results.school_results.grading.grade_table import GRADE_TABLE, band_for, classify, points_for


@pytest.mark.parametrize(
    "score, letter, points",
    [
        (100, "A", 12),
        (80, "A", 12),
        (79, "A-", 11),
        (75, "A-", 11),
        (74, "B+", 10),
        (70, "B+", 10),
        (69, "B", 9),
        (65, "B", 9),
        (64, "B-", 8),
        (60, "B-", 8),
        (59, "C+", 7),
        (55, "C+", 7),
        (54, "C", 6),
        (50, "C", 6),
        (49, "C-", 5),
        (45, "C-", 5),
        (44, "D+", 4),
        (40, "D+", 4),
        (39, "D", 3),
        (35, "D", 3),
        (34, "D-", 2),
        (30, "D-", 2),
        (29, "E", 1),
        (0, "E", 1),
    ],
)
def test_classify_band_boundaries(score, letter, points):
    band = classify(score)
    assert band.letter == letter
    assert band.points == points


def test_every_integer_score_lands_in_exactly_one_containing_band():
    for score in range(0, 101):
        matches = [b for b in GRADE_TABLE if b.lower <= score <= b.upper]
        assert len(matches) == 1
        assert classify(score) == matches[0]


def test_fractional_score_between_bands_takes_lower_band():
    assert classify(79.5).letter == "A-"
    assert classify(79.99).letter == "A-"
    assert classify(29.99).letter == "E"
    assert classify(85.5).letter == "A"


def test_out_of_range_scores_degrade_to_extreme_bands():
    assert classify(-5).letter == "E"
    assert classify(-5).points == 1
    assert classify(150).letter == "A"
    assert classify(150).points == 12


def test_nan_falls_back_to_lowest_band():
    assert classify(float("nan")).letter == "E"


def test_points_for_round_trips_every_band():
    for score in range(0, 101):
        band = classify(score)
        assert points_for(band.letter) == band.points


@pytest.mark.parametrize("letter", ["Z", "", None, "a", "A+"])
def test_points_for_unknown_letter_returns_minimum(letter):
    assert points_for(letter) == 1


def test_points_for_ignores_surrounding_whitespace():
    assert points_for(" B+ ") == 10


def test_band_for_returns_description():
    assert band_for("A").description == "Excellent"
    assert band_for("nope") is None


def test_table_is_ordered_and_contiguous():
    assert GRADE_TABLE[0].upper == 100
    assert GRADE_TABLE[-1].lower == 0
    for higher, lower in zip(GRADE_TABLE, GRADE_TABLE[1:]):
        assert lower.upper + 1 == higher.lower
        assert higher.points == lower.points + 1
