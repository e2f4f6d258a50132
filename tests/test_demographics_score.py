"""Tests for the demographics scorer and its dating favorability blend."""
from __future__ import annotations

import math

import pytest

from backend.cityscore.schemas import CityMetricsRecord, DemographicsMetrics, UserPreferences
from backend.cityscore.scoring.dating import (
    alignment_score,
    calculate_dating_score,
    economic_score,
    pool_score,
    walk_safety_score,
)
from backend.cityscore.scoring.demographics import (
    age_score,
    calculate_demographics_score,
    economic_health_score,
    minority_percent,
    population_penalty,
)

ZERO_DEMOGRAPHIC_WEIGHTS = {
    "weightDiversity": 0,
    "weightAge": 0,
    "weightEducation": 0,
    "weightForeignBorn": 0,
    "weightEconomicHealth": 0,
}


def _city(demographics: dict | None = None, **sections) -> CityMetricsRecord:
    return CityMetricsRecord.model_validate(
        {"id": "c", "name": "City", "state": "CA", "demographics": demographics, **sections}
    )


def _prefs(demographics: dict | None = None, values: dict | None = None) -> UserPreferences:
    return UserPreferences.model_validate(
        {"advanced": {"demographics": demographics or {}, "values": values or {}}}
    )


def test_minority_presence_plateaus_above_threshold():
    prefs = _prefs({"minorityGroup": "asian", "minMinorityPresence": 10})
    moderate = calculate_demographics_score(_city({"asianPercent": 25}), prefs)
    large = calculate_demographics_score(_city({"asianPercent": 40}), prefs)
    assert 0 < large - moderate < 15


def test_minority_group_without_data_counts_as_neutral():
    prefs = _prefs({**ZERO_DEMOGRAPHIC_WEIGHTS, "minorityGroup": "black", "minorityImportance": 80})
    assert calculate_demographics_score(_city({"medianAge": 40}), prefs) == 50


def test_minority_percent_prefers_subgroup_then_parent_group():
    demographics = DemographicsMetrics(hispanic_percent=20, asian_percent=15, chinese_percent=3)
    assert minority_percent(demographics, "asian", "chinese") == 3
    assert minority_percent(demographics, "hispanic", "cuban") == 20
    assert minority_percent(demographics, "asian", "any") == 15
    # Subgroup from another group falls back to the chosen group.
    assert minority_percent(demographics, "black", "chinese") is None


def test_age_tables():
    assert age_score(28, "young") == 100
    assert age_score(38, "young") == 50
    assert age_score(42, "mixed") == 100
    assert age_score(48, "mixed") == 70
    assert age_score(55, "mixed") == 40
    assert age_score(52, "mature") == 100
    assert age_score(35, "mature") == 20
    assert age_score(35, "any") == 70


def test_economic_health_blends_income_and_poverty():
    prefs = UserPreferences().advanced.demographics
    assert economic_health_score(DemographicsMetrics(median_household_income=90000, poverty_rate=5), prefs) == 100
    assert economic_health_score(
        DemographicsMetrics(median_household_income=45000, poverty_rate=15), prefs
    ) == pytest.approx(55)
    assert economic_health_score(DemographicsMetrics(), prefs) is None


def test_population_penalty_is_proportional():
    assert population_penalty(50000, 100000) == pytest.approx(25)
    assert population_penalty(150000, 100000) == 0
    assert population_penalty(None, 100000) == 0
    assert population_penalty(10, 0) == 0


def test_population_floor_is_soft():
    prefs = _prefs({**ZERO_DEMOGRAPHIC_WEIGHTS, "weightDiversity": 50, "minPopulation": 100000})
    city = _city({"diversityIndex": 70, "totalPopulation": 50000})
    assert calculate_demographics_score(city, prefs) == pytest.approx(75)


def test_diversity_and_education_minimums():
    prefs = _prefs(
        {**ZERO_DEMOGRAPHIC_WEIGHTS, "weightDiversity": 50, "minDiversityIndex": 60, "weightEducation": 50}
    )
    city = _city({"diversityIndex": 50, "bachelorsOrHigherPercent": 40})
    # diversity 50 - 2*10 = 30, education 20 + 1.3*40 = 72
    assert calculate_demographics_score(city, prefs) == pytest.approx(51)


def test_missing_demographics_is_neutral():
    assert calculate_demographics_score(_city(None), UserPreferences()) == 50


def test_all_weights_zero_is_neutral():
    city = _city({"diversityIndex": 80, "medianAge": 30, "bachelorsOrHigherPercent": 60})
    assert calculate_demographics_score(city, _prefs(ZERO_DEMOGRAPHIC_WEIGHTS)) == 50


def test_pool_score_direction_depends_on_sought_gender():
    demographics = DemographicsMetrics.model_validate({"genderRatios": {"overall": 90}})
    assert pool_score(demographics, "women", None) == pytest.approx(75)
    assert pool_score(demographics, "men", None) == pytest.approx(25)


def test_pool_score_uses_age_band_and_singles():
    demographics = DemographicsMetrics.model_validate(
        {"genderRatios": {"overall": 100, "age20to29": 110}, "neverMarriedMalePercent": 65}
    )
    # 50 + 10 * 2.5 + (65 - 55) * 1.5
    assert pool_score(demographics, "men", "20-29") == pytest.approx(90)


def test_economic_score_uses_income_after_rent():
    city = _city({"perCapitaIncome": 49800})
    assert economic_score(city) == pytest.approx(60)

    expensive = _city({"perCapitaIncome": 49800}, cost={"regionalPriceParity": {"housing": 150}})
    assert economic_score(expensive) < 60


def test_alignment_and_walk_safety_defaults():
    city = _city({}, cultural={"political": {"partisanIndex": 0.2}})
    assert alignment_score(city, UserPreferences()) == 50

    prefs = _prefs(values={"partisanPreference": "strong-dem"})
    assert alignment_score(city, prefs) == pytest.approx(100 * math.exp(-4.3 * 0.16))

    walkable = _city({}, qualityOfLife={"walkability": {"walkScore": 48}, "crime": {"violentCrimeRate": 380}})
    assert walk_safety_score(walkable) == pytest.approx(50)
    assert walk_safety_score(_city({})) == 50


def test_dating_score_without_sought_gender_is_neutral():
    assert calculate_dating_score(_city({"perCapitaIncome": 90000}), UserPreferences()) == 50


def test_dating_score_weights_parts():
    city = _city({"genderRatios": {"overall": 90}, "neverMarriedFemalePercent": 55, "perCapitaIncome": 41800})
    prefs = _prefs({"datingEnabled": True, "seekingGender": "women"})
    # pool 75 * 0.4 + economic 50 * 0.3 + alignment 50 * 0.2 + walk/safety 50 * 0.1
    assert calculate_dating_score(city, prefs) == pytest.approx(60)


def test_dating_blends_into_demographics():
    city = _city({"diversityIndex": 70, "genderRatios": {"overall": 90}, "perCapitaIncome": 41800})
    prefs = _prefs(
        {
            **ZERO_DEMOGRAPHIC_WEIGHTS,
            "weightDiversity": 50,
            "datingEnabled": True,
            "seekingGender": "women",
            "datingWeight": 50,
        }
    )
    # base 100 blended 50/50 with dating 60
    assert calculate_demographics_score(city, prefs) == pytest.approx(80)


def test_dating_alone_when_other_weights_are_zero():
    city = _city({"genderRatios": {"overall": 90}, "perCapitaIncome": 41800})
    prefs = _prefs({**ZERO_DEMOGRAPHIC_WEIGHTS, "datingEnabled": True, "seekingGender": "women"})
    assert calculate_demographics_score(city, prefs) == pytest.approx(60)
