from __future__ import annotations

from ..schemas import CityMetricsRecord, DemographicsMetrics, DemographicsPreferences, UserPreferences
from .constants import MINORITY_GROUP_FIELDS, MINORITY_SUBGROUP_FIELDS, NEUTRAL_SCORE
from .dating import calculate_dating_score
from .normalization import WeightedScore, clamp, mean_of, minority_presence_score

POPULATION_PENALTY_MAX = 50


def population_penalty(population: float | None, min_population: float) -> float:
    """Soft floor: up to 50 points off, proportional to the shortfall."""
    if min_population <= 0 or population is None or population >= min_population:
        return 0.0
    return POPULATION_PENALTY_MAX * (min_population - population) / min_population


def diversity_score(index: float, minimum: float) -> float:
    if index >= minimum:
        return min(100.0, index / 70 * 100)
    return max(0.0, 50 - (minimum - index) * 2)


def age_score(median_age: float, group: str) -> float:
    if group == "young":
        return 100 if median_age < 30 else 80 if median_age < 35 else 50 if median_age < 40 else 20
    if group == "mixed":
        if 35 <= median_age <= 45:
            return 100
        return 70 if 30 <= median_age <= 50 else 40
    if group == "mature":
        return 100 if median_age > 50 else 80 if median_age > 45 else 50 if median_age > 40 else 20
    return 70


def education_score(bachelors_pct: float, minimum: float) -> float:
    if bachelors_pct >= minimum:
        return min(100.0, 20 + bachelors_pct * 1.3)
    return max(0.0, 50 - (minimum - bachelors_pct) * 2)


def foreign_born_score(foreign_born_pct: float, minimum: float) -> float:
    if foreign_born_pct >= minimum:
        return min(100.0, 30 + foreign_born_pct * 2.3)
    return max(0.0, 50 - (minimum - foreign_born_pct) * 3)


def economic_health_score(demographics: DemographicsMetrics, prefs: DemographicsPreferences) -> float | None:
    income_score = None
    income = demographics.median_household_income
    if income is not None:
        if income >= prefs.min_median_household_income:
            income_score = min(100.0, income / 900)
        else:
            income_score = max(0.0, 50 - (prefs.min_median_household_income - income) / 1000)

    poverty_score = None
    poverty = demographics.poverty_rate
    if poverty is not None:
        if poverty <= prefs.max_poverty_rate:
            poverty_score = max(0.0, 120 - poverty * 4)
        else:
            poverty_score = max(0.0, 30 - (poverty - prefs.max_poverty_rate) * 3)

    return mean_of([income_score, poverty_score])


def minority_percent(demographics: DemographicsMetrics, group: str, subgroup: str) -> float | None:
    """Subgroup share when one is chosen and known, else the parent group's share."""
    if subgroup != "any":
        field = MINORITY_SUBGROUP_FIELDS.get(group, {}).get(subgroup)
        if field is not None:
            value = getattr(demographics, field)
            if value is not None:
                return value
    field = MINORITY_GROUP_FIELDS.get(group)
    return getattr(demographics, field) if field else None


def calculate_demographics_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    demographics = city.demographics
    prefs = preferences.advanced.demographics
    if demographics is None:
        return NEUTRAL_SCORE

    acc = WeightedScore()

    if demographics.diversity_index is not None:
        acc.add(diversity_score(demographics.diversity_index, prefs.min_diversity_index), prefs.weight_diversity)

    if demographics.median_age is not None:
        acc.add(age_score(demographics.median_age, prefs.preferred_age_group), prefs.weight_age)

    if demographics.bachelors_or_higher_percent is not None:
        acc.add(
            education_score(demographics.bachelors_or_higher_percent, prefs.min_bachelors_percent),
            prefs.weight_education,
        )

    if demographics.foreign_born_percent is not None:
        acc.add(
            foreign_born_score(demographics.foreign_born_percent, prefs.min_foreign_born_percent),
            prefs.weight_foreign_born,
        )

    if prefs.minority_group != "none":
        actual = minority_percent(demographics, prefs.minority_group, prefs.minority_subgroup)
        presence = NEUTRAL_SCORE if actual is None else minority_presence_score(actual, prefs.min_minority_presence)
        acc.add(presence, prefs.minority_importance)

    acc.add(economic_health_score(demographics, prefs), prefs.weight_economic_health)

    dating_active = prefs.dating_enabled and prefs.dating_weight > 0
    if acc.empty:
        return calculate_dating_score(city, preferences) if dating_active else NEUTRAL_SCORE

    score = acc.resolve()
    if dating_active:
        influence = prefs.dating_weight / 100
        score = score * (1 - influence) + calculate_dating_score(city, preferences) * influence

    score -= population_penalty(demographics.total_population, prefs.min_population)
    return clamp(score)
