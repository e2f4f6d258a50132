"""Grades, labels and relative-to-average text for presenting scores."""

from __future__ import annotations

GRADE_THRESHOLDS = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (77, "B+"),
    (73, "B"),
    (70, "B-"),
    (67, "C+"),
    (63, "C"),
    (60, "C-"),
    (50, "D"),
)

LABEL_THRESHOLDS = (
    (90, "Exceptional"),
    (80, "Excellent"),
    (70, "Good"),
    (60, "Average"),
    (50, "Below Average"),
)

NATIONAL_AVERAGE = 50


def grade(score: float) -> str:
    for threshold, letter in GRADE_THRESHOLDS:
        if score >= threshold:
            return letter
    return "F"


def label(score: float) -> str:
    for threshold, text in LABEL_THRESHOLDS:
        if score >= threshold:
            return text
    return "Poor"


def relative_to_average(score: float) -> str:
    """Signed distance from the national average of 50, or "avg" within 5 points."""
    diff = score - NATIONAL_AVERAGE
    if abs(diff) < 5:
        return "avg"
    if diff > 0:
        return f"+{diff:.0f}"
    return f"{diff:.0f}"
