"""Tests for the values scorer: political alignment, turnout, religion, dealbreakers."""
from __future__ import annotations

import math

import pytest

from backend.cityscore.schemas import CityMetricsRecord, ReligiousMetrics, UserPreferences, ValuesPreferences
from backend.cityscore.scoring.values import (
    calculate_values_score,
    dealbreaker_factor,
    traditions_score,
    turnout_ladder_score,
)


def _city(cultural: dict | None) -> CityMetricsRecord:
    return CityMetricsRecord.model_validate({"id": "c", "name": "City", "state": "GA", "cultural": cultural})


def _prefs(**values) -> UserPreferences:
    return UserPreferences.model_validate({"advanced": {"values": values}})


def test_missing_cultural_record_is_neutral():
    assert calculate_values_score(_city(None), _prefs(partisanPreference="lean-dem", partisanWeight=50)) == 50


def test_default_preferences_have_no_opinion():
    city = _city({"political": {"partisanIndex": 0.5, "voterTurnout": 70}})
    assert calculate_values_score(city, UserPreferences()) == 50


def test_perfect_partisan_match():
    city = _city({"political": {"partisanIndex": 0.6}})
    assert calculate_values_score(city, _prefs(partisanPreference="strong-dem", partisanWeight=50)) == pytest.approx(100)


def test_missing_partisan_index_is_skipped():
    city = _city({"political": {"voterTurnout": 65}})
    assert calculate_values_score(city, _prefs(partisanPreference="strong-dem", partisanWeight=50)) == 50


def test_turnout_blends_into_political_score():
    prefs = _prefs(partisanPreference="swing", partisanWeight=50, preferHighTurnout=True)
    engaged = _city({"political": {"partisanIndex": 0.0, "voterTurnout": 80}})
    apathetic = _city({"political": {"partisanIndex": 0.0, "voterTurnout": 40}})
    assert calculate_values_score(engaged, prefs) == pytest.approx(100)
    assert calculate_values_score(apathetic, prefs) == pytest.approx(80)


def test_turnout_only_ladder():
    assert turnout_ladder_score(76) == 100
    assert turnout_ladder_score(72) == 90
    assert turnout_ladder_score(61) == 65
    assert turnout_ladder_score(50) == 35

    city = _city({"political": {"voterTurnout": 72}})
    assert calculate_values_score(city, _prefs(preferHighTurnout=True)) == 90


def test_dealbreaker_factor():
    assert dealbreaker_factor(30, 80) == pytest.approx(0.875)
    assert dealbreaker_factor(30, 70) == 1.0
    assert dealbreaker_factor(50, 90) == 1.0


def test_dealbreaker_penalizes_whole_category():
    city = _city({"political": {"partisanIndex": -0.6}, "religious": {"diversityIndex": 90}})
    prefs = _prefs(
        partisanPreference="strong-dem",
        partisanWeight=100,
        preferReligiousDiversity=True,
        diversityWeight=100,
    )
    political = 100 * math.exp(-3 * 1.2 * 1.2) * 0.85
    expected = (political * 100 + 90 * 100) / 200 * (0.5 + political / 80)
    score = calculate_values_score(city, prefs)
    assert score == pytest.approx(expected)
    assert score < (political + 90) / 2


def test_traditions_concentration_tiers():
    prefs = ValuesPreferences(religious_traditions=["catholic"], traditions_weight=50)
    # 450 / 205 > 2x national: +20, all requested traditions met: +10
    assert traditions_score(ReligiousMetrics(catholic=450), prefs) == 80
    # 250 / 205 between 1x and 1.5x: +10, +10
    assert traditions_score(ReligiousMetrics(catholic=250), prefs) == 70


def test_traditions_below_minimum():
    prefs = ValuesPreferences(religious_traditions=["jewish"], traditions_weight=50)
    # 50 - (50 - 10) / 5 - 15
    assert traditions_score(ReligiousMetrics(jewish=10), prefs) == pytest.approx(27)


def test_traditions_and_diversity_weighted_together():
    city = _city({"religious": {"catholic": 450, "diversityIndex": 40}})
    prefs = _prefs(
        religiousTraditions=["catholic"],
        traditionsWeight=60,
        preferReligiousDiversity=True,
        diversityWeight=20,
    )
    assert calculate_values_score(city, prefs) == pytest.approx((80 * 60 + 40 * 20) / 80)


def test_diversity_ignored_unless_preferred():
    city = _city({"religious": {"diversityIndex": 95}})
    assert calculate_values_score(city, _prefs(diversityWeight=80)) == 50
