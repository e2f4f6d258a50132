"""Normalization primitives shared by every category scorer.

All functions are pure and map raw inputs onto the 0-100 score scale.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from typing import Sequence

from .constants import NEUTRAL_SCORE, PARTISAN_TARGETS, STRONG_PARTISAN_THRESHOLD


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Bound ``value`` to [lo, hi]; NaN lands on the midpoint."""
    if math.isnan(value):
        return (lo + hi) / 2
    return lo if value < lo else hi if value > hi else value


def normalize_to_range(value: float, min_value: float, max_value: float, invert: bool = False) -> float:
    """Map ``value`` onto 0-100 against fixed real-world extremes.

    ``invert`` flips the scale for metrics where lower raw values are better.
    A degenerate range (min == max) scores neutral.
    """
    if max_value == min_value:
        return NEUTRAL_SCORE
    clamped = clamp(value, min_value, max_value)
    position = (clamped - min_value) / (max_value - min_value)
    score = (1 - position) * 100 if invert else position * 100
    return float(round(clamp(score)))


def percentile_score(value: float, sorted_values: Sequence[float], higher_is_better: bool = True) -> float:
    """Rank ``value`` against the current run's distribution.

    ``sorted_values`` must be ascending; the result is dataset-relative and
    shifts whenever the compared city set changes.
    """
    if not sorted_values:
        return NEUTRAL_SCORE
    below = bisect_left(sorted_values, value)
    pct = below / len(sorted_values) * 100
    return pct if higher_is_better else 100 - pct


def amenity_score(value: float, min_value: float, plateau: float, max_value: float) -> float:
    """Critical-mass curve for "more is better, with diminishing returns" amenities.

    30 at or below ``min_value``, a linear climb to 75 at ``plateau``, then a
    log curve reaching 100 at ``max_value``.
    """
    if value <= min_value:
        return 30.0
    if value >= max_value:
        return 100.0
    if value >= plateau:
        progress = (value - plateau) / (max_value - plateau)
        return 75 + 25 * math.log10(1 + progress * 9)
    progress = (value - min_value) / (plateau - min_value)
    return 30 + 45 * progress


def minority_presence_score(actual_pct: float, target_pct: float) -> float:
    """Log bonus above the user's threshold, steeper linear penalty below it."""
    if actual_pct >= target_pct:
        excess = actual_pct - target_pct
        return min(100.0, 75 + 15 * math.log10(1 + excess * 2))
    deficit = target_pct - actual_pct
    return max(0.0, 75 - deficit * 4)


def partisan_target(preference: str) -> float | None:
    """Target partisan index for a stated lean, or None for "neutral"."""
    return PARTISAN_TARGETS.get(preference)


def gaussian_alignment(actual: float, target: float, k: float) -> float:
    distance = abs(actual - target)
    return 100 * math.exp(-k * distance * distance)


def political_alignment_score(partisan_index: float, preference: str, importance: float) -> float | None:
    """Gaussian alignment between a city's lean and the user's stated lean.

    ``importance`` (0-100) steepens the decay: k = 1 + importance / 50.
    Swing preferences measure distance from a perfectly competitive 0.
    Crossing to the other side of center costs an extra 15% for strong
    partisans and 5% for mild ones.
    """
    target = partisan_target(preference)
    if target is None:
        return None

    k = 1.0 + importance / 50
    if preference == "swing":
        return gaussian_alignment(partisan_index, 0.0, k)

    score = gaussian_alignment(partisan_index, target, k)
    opposite_side = (partisan_index > 0 and target < 0) or (partisan_index < 0 and target > 0)
    if opposite_side:
        score *= 0.85 if abs(target) >= STRONG_PARTISAN_THRESHOLD else 0.95
    return score


class WeightedScore:
    """Accumulates weighted sub-scores and resolves to a 0-100 category score.

    Sub-metrics with missing data or a non-positive weight are skipped, so a
    category with nothing to say resolves to the neutral default.
    """

    def __init__(self) -> None:
        self.total = 0.0
        self.weight = 0.0

    def add(self, score: float | None, weight: float | None) -> None:
        if score is None or weight is None or weight <= 0:
            return
        self.total += clamp(score) * weight
        self.weight += weight

    @property
    def empty(self) -> bool:
        return self.weight <= 0

    def resolve(self, default: float = NEUTRAL_SCORE) -> float:
        if self.empty:
            return default
        return clamp(self.total / self.weight)


def mean_of(scores: Sequence[float | None]) -> float | None:
    present = [s for s in scores if s is not None]
    if not present:
        return None
    return sum(present) / len(present)
