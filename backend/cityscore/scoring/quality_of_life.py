"""Quality-of-life score from walkability, safety, air, broadband, schools and healthcare.

Every sub-score uses fixed national anchors, never percentiles, so a nationally
average city lands near 50 regardless of which cities are being compared.
"""

from __future__ import annotations

from ..schemas import (
    AirQualityMetrics,
    BroadbandMetrics,
    CityMetricsRecord,
    CrimeMetrics,
    EducationMetrics,
    HealthMetrics,
    QualityOfLifePreferences,
    UserPreferences,
    WalkabilityMetrics,
)
from .constants import NEUTRAL_SCORE, QOL_RANGES
from .normalization import WeightedScore, clamp, mean_of, normalize_to_range

THRESHOLD_PENALTY_CAP = 25
TREND_ADJUSTMENT = 5
PROVIDER_COMPETITION_BONUS = 10
MISSING_FIBER_PENALTY = 20
CRITERIA_MISS_PENALTY = 15


def _excess_penalty(value: float, limit: float) -> float:
    """Up to 25 points off, 30 per 100% over the user's limit."""
    if limit <= 0 or value <= limit:
        return 0.0
    return min(THRESHOLD_PENALTY_CAP, (value - limit) / limit * 30)


def walkability_score(walkability: WalkabilityMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if walkability is None:
        return None
    scores = []
    if walkability.walk_score is not None:
        walk = walkability.walk_score
        scores.append(walk * 0.5 if walk < prefs.min_walk_score else walk)
    if walkability.transit_score is not None:
        transit = walkability.transit_score
        scores.append(transit * 0.5 if transit < prefs.min_transit_score else transit)
    if walkability.bike_score is not None:
        scores.append(walkability.bike_score)
    return mean_of(scores)


def safety_score(crime: CrimeMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if crime is None or crime.violent_crime_rate is None:
        return None
    bounds = QOL_RANGES["violent_crime_rate"]
    score = normalize_to_range(crime.violent_crime_rate, bounds.min, bounds.max, invert=True)
    score -= _excess_penalty(crime.violent_crime_rate, prefs.max_violent_crime_rate)

    if prefs.prefer_falling_crime and crime.trend_3_year == "falling":
        score += TREND_ADJUSTMENT
    elif crime.trend_3_year == "rising":
        score -= TREND_ADJUSTMENT
    return clamp(score)


def air_quality_score(air: AirQualityMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if air is None or air.healthy_days_percent is None:
        return None
    bounds = QOL_RANGES["healthy_days_percent"]
    score = normalize_to_range(air.healthy_days_percent, bounds.min, bounds.max)
    if air.hazardous_days is not None:
        score -= _excess_penalty(air.hazardous_days, prefs.max_hazardous_days)
    return clamp(score)


def internet_score(broadband: BroadbandMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if broadband is None or broadband.fiber_coverage_percent is None:
        return None
    score = broadband.fiber_coverage_percent
    if broadband.provider_count is not None and broadband.provider_count > prefs.min_providers:
        score += PROVIDER_COMPETITION_BONUS
    if prefs.require_fiber and broadband.fiber_coverage_percent < 50:
        score -= MISSING_FIBER_PENALTY
    return clamp(score)


def schools_score(education: EducationMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if education is None or education.student_teacher_ratio is None:
        return None
    ratio_bounds = QOL_RANGES["student_teacher_ratio"]
    score = normalize_to_range(education.student_teacher_ratio, ratio_bounds.min, ratio_bounds.max, invert=True)
    if education.student_teacher_ratio > prefs.max_student_teacher_ratio:
        score -= CRITERIA_MISS_PENALTY

    if education.graduation_rate is not None:
        grad_bounds = QOL_RANGES["graduation_rate"]
        grad = normalize_to_range(education.graduation_rate, grad_bounds.min, grad_bounds.max)
        score = score * 0.6 + grad * 0.4
    return clamp(score)


def healthcare_score(health: HealthMetrics | None, prefs: QualityOfLifePreferences) -> float | None:
    if health is None or health.primary_care_physicians_per_100k is None:
        return None
    physicians = health.primary_care_physicians_per_100k
    bounds = QOL_RANGES["physicians_per_100k"]
    score = normalize_to_range(physicians, bounds.min, bounds.max)
    if physicians < prefs.min_physicians_per_100k:
        score -= CRITERIA_MISS_PENALTY
    if health.hpsa_score is not None:
        score -= min(THRESHOLD_PENALTY_CAP, health.hpsa_score)
    return clamp(score)


def calculate_quality_of_life_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    qol = city.quality_of_life
    if qol is None:
        return NEUTRAL_SCORE

    prefs = preferences.advanced.quality_of_life
    weights = prefs.weights
    acc = WeightedScore()
    acc.add(walkability_score(qol.walkability, prefs), weights.walkability)
    acc.add(safety_score(qol.crime, prefs), weights.safety)
    acc.add(air_quality_score(qol.air_quality, prefs), weights.air_quality)
    acc.add(internet_score(qol.broadband, prefs), weights.internet)
    acc.add(schools_score(qol.education, prefs), weights.schools)
    acc.add(healthcare_score(qol.health, prefs), weights.healthcare)
    return acc.resolve()
