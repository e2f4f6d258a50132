"""Values score: "do I belong here?" from political and religious alignment."""

from __future__ import annotations

from ..schemas import CityMetricsRecord, PoliticalMetrics, ReligiousMetrics, UserPreferences, ValuesPreferences
from .constants import NATIONAL_RELIGIOUS_AVERAGES, NEUTRAL_SCORE, VOTER_TURNOUT_RANGE
from .normalization import WeightedScore, clamp, normalize_to_range, political_alignment_score

TURNOUT_ONLY_WEIGHT = 30
DEALBREAKER_WEIGHT = 70
DEALBREAKER_SCORE = 40

TRADITION_FIELDS = {
    "catholic": "catholic",
    "evangelical": "evangelical_protestant",
    "mainline": "mainline_protestant",
    "jewish": "jewish",
    "muslim": "muslim",
    "unaffiliated": "unaffiliated",
}


def turnout_ladder_score(turnout: float) -> float:
    if turnout >= 75:
        return 100
    if turnout >= 70:
        return 90
    if turnout >= 65:
        return 80
    if turnout >= 60:
        return 65
    if turnout >= 55:
        return 50
    return 35


def political_score(political: PoliticalMetrics, prefs: ValuesPreferences) -> float | None:
    if political.partisan_index is None:
        return None
    alignment = political_alignment_score(political.partisan_index, prefs.partisan_preference, prefs.partisan_weight)
    if alignment is None:
        return None

    if prefs.prefer_high_turnout and political.voter_turnout is not None:
        turnout = normalize_to_range(political.voter_turnout, VOTER_TURNOUT_RANGE.min, VOTER_TURNOUT_RANGE.max)
        alignment = alignment * 0.8 + turnout * 0.2
    return clamp(alignment)


def dealbreaker_factor(score: float, weight: float) -> float:
    """Multiplier for the whole category when a high-priority political match is poor."""
    if weight > DEALBREAKER_WEIGHT and score < DEALBREAKER_SCORE:
        return 0.5 + score / 80
    return 1.0


def traditions_score(religious: ReligiousMetrics, prefs: ValuesPreferences) -> float:
    score = 50.0
    met = 0
    for tradition in prefs.religious_traditions:
        presence = getattr(religious, TRADITION_FIELDS[tradition])
        if presence is None:
            continue
        if presence >= prefs.min_tradition_presence:
            met += 1
            concentration = presence / NATIONAL_RELIGIOUS_AVERAGES[tradition]
            if concentration > 2.0:
                score += 20
            elif concentration > 1.5:
                score += 15
            elif concentration > 1.0:
                score += 10
            else:
                score += 5
        else:
            score -= min(20, (prefs.min_tradition_presence - presence) / 5)

    met_ratio = met / len(prefs.religious_traditions)
    if met_ratio == 1:
        score += 10
    elif met_ratio < 0.5:
        score -= 15
    return clamp(score)


def calculate_values_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    cultural = city.cultural
    if cultural is None:
        return NEUTRAL_SCORE

    prefs = preferences.advanced.values
    acc = WeightedScore()
    penalty = 1.0

    political = cultural.political
    if political is not None:
        if prefs.partisan_preference != "neutral" and prefs.partisan_weight > 0:
            score = political_score(political, prefs)
            if score is not None:
                penalty = dealbreaker_factor(score, prefs.partisan_weight)
                acc.add(score, prefs.partisan_weight)
        elif prefs.prefer_high_turnout and political.voter_turnout is not None:
            acc.add(turnout_ladder_score(political.voter_turnout), TURNOUT_ONLY_WEIGHT)

    religious = cultural.religious
    if religious is not None:
        if prefs.religious_traditions:
            acc.add(traditions_score(religious, prefs), prefs.traditions_weight)
        if prefs.prefer_religious_diversity:
            acc.add(religious.diversity_index, prefs.diversity_weight)

    if acc.empty:
        return NEUTRAL_SCORE
    return clamp(acc.resolve() * penalty)
