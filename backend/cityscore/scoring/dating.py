"""Dating favorability, centered so a nationally average city scores 50.

Sub-scores and their blend:

- pool (40%): gender ratio in the chosen age band plus never-married share
- economic (30%): per-capita income left after an estimated rent
- alignment (20%): Gaussian match against the user's partisan target
- walk/safety (10%): walk score and violent crime around national averages
"""

from __future__ import annotations

import math

from ..schemas import CityMetricsRecord, DemographicsMetrics, UserPreferences
from .constants import NEUTRAL_SCORE
from .normalization import clamp, partisan_target

POOL_SHARE = 0.4
ECONOMIC_SHARE = 0.3
ALIGNMENT_SHARE = 0.2
WALK_SAFETY_SHARE = 0.1

BALANCED_GENDER_RATIO = 100  # males per 100 females
AVERAGE_NEVER_MARRIED_PERCENT = 55
BASELINE_ANNUAL_RENT = 16800
BASELINE_DISPOSABLE = 25000
NATIONAL_WALK_SCORE = 48
NATIONAL_VIOLENT_CRIME_RATE = 380
# 100 * e^(-k * 0.4^2) == 50
ALIGNMENT_DECAY = 4.3


def _gender_ratio(demographics: DemographicsMetrics, age_range: str | None) -> float | None:
    ratios = demographics.gender_ratios
    if ratios is None:
        return None
    if age_range == "20-29":
        return ratios.age_20_to_29
    if age_range == "30-39":
        return ratios.age_30_to_39
    if age_range == "40-49":
        return ratios.age_40_to_49
    return ratios.overall


def pool_score(demographics: DemographicsMetrics | None, seeking: str, age_range: str | None) -> float:
    score = NEUTRAL_SCORE
    if demographics is None:
        return score

    ratio = _gender_ratio(demographics, age_range)
    if ratio is not None:
        # More men is good news when seeking men and bad news when seeking women.
        direction = -1 if seeking == "women" else 1
        score = 50 + direction * (ratio - BALANCED_GENDER_RATIO) * 2.5

    single_pct = (
        demographics.never_married_female_percent if seeking == "women" else demographics.never_married_male_percent
    )
    if single_pct is not None:
        score += (single_pct - AVERAGE_NEVER_MARRIED_PERCENT) * 1.5

    return clamp(score)


def economic_score(city: CityMetricsRecord) -> float:
    income = city.demographics.per_capita_income if city.demographics else None
    if not income:
        return NEUTRAL_SCORE

    rpp = city.cost.regional_price_parity if city.cost else None
    housing_rpp = rpp.housing if rpp is not None and rpp.housing else 100
    disposable = income - BASELINE_ANNUAL_RENT * (housing_rpp / 100)
    return clamp(50 + (disposable - BASELINE_DISPOSABLE) / 800)


def alignment_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    target = partisan_target(preferences.advanced.values.partisan_preference)
    political = city.cultural.political if city.cultural else None
    if target is None or political is None or political.partisan_index is None:
        return NEUTRAL_SCORE
    distance = abs(political.partisan_index - target)
    return 100 * math.exp(-ALIGNMENT_DECAY * distance * distance)


def walk_safety_score(city: CityMetricsRecord) -> float:
    qol = city.quality_of_life
    walk = qol.walkability.walk_score if qol and qol.walkability else None
    crime = qol.crime.violent_crime_rate if qol and qol.crime else None
    if walk is None or crime is None:
        return NEUTRAL_SCORE
    walk_part = 50 + (walk - NATIONAL_WALK_SCORE)
    crime_part = 50 + (NATIONAL_VIOLENT_CRIME_RATE - crime) / 5
    return clamp((walk_part + crime_part) / 2)


def calculate_dating_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    prefs = preferences.advanced.demographics
    if not prefs.seeking_gender:
        return NEUTRAL_SCORE

    return clamp(
        pool_score(city.demographics, prefs.seeking_gender, prefs.dating_age_range) * POOL_SHARE
        + economic_score(city) * ECONOMIC_SHARE
        + alignment_score(city, preferences) * ALIGNMENT_SHARE
        + walk_safety_score(city) * WALK_SAFETY_SHARE
    )
