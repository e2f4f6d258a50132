"""Tests for the entertainment scorer."""
from __future__ import annotations

import pytest

from backend.cityscore.schemas import (
    ArtsMetrics,
    CityMetricsRecord,
    DiningMetrics,
    GeographyMetrics,
    NightlifeMetrics,
    SportsTeams,
    UserPreferences,
)
from backend.cityscore.scoring.entertainment import (
    arts_score,
    beach_score,
    calculate_entertainment_score,
    dining_score,
    mountain_score,
    nature_score,
    nightlife_score,
    sports_score,
    team_count_score,
)
from backend.cityscore.scoring.percentiles import PercentileCache

EMPTY_CACHE = PercentileCache.build([])


def _city(city_id: str = "c", cultural: dict | None = None, recreation: dict | None = None) -> CityMetricsRecord:
    payload = {"id": city_id, "name": city_id.upper(), "state": "WA", "cultural": cultural}
    if recreation is not None:
        payload["qualityOfLife"] = {"recreation": recreation}
    return CityMetricsRecord.model_validate(payload)


def test_team_count_ladder():
    assert team_count_score(0) == 30
    assert team_count_score(2) == 70
    assert team_count_score(4) == 79
    assert team_count_score(6) == 90
    assert team_count_score(8) == 96
    assert team_count_score(10) == 99
    assert team_count_score(12) == 100


def test_sports_league_diversity_bonus():
    chicago = SportsTeams.model_validate(
        {"nfl": "Bears", "nba": "Bulls", "mlb": "Cubs, White Sox", "nhl": "Blackhawks", "mls": "Fire"}
    )
    assert sports_score(chicago) == 95

    three_leagues = SportsTeams(nfl=["A"], nba=["B"], mlb=["C"])
    assert sports_score(three_leagues) == 75
    assert sports_score(SportsTeams()) == 30
    assert sports_score(None) is None


def test_nightlife_curve_and_late_night_bonus():
    assert nightlife_score(NightlifeMetrics(bars_and_clubs_per_10k=5, late_night_venues=12)) == pytest.approx(80)
    assert nightlife_score(NightlifeMetrics(bars_and_clubs_per_10k=0.1)) == 30
    assert nightlife_score(NightlifeMetrics(late_night_venues=40)) is None


def test_arts_averages_present_venues():
    arts = ArtsMetrics(museums=30, theaters=10, art_galleries=0)
    assert arts_score(arts) == pytest.approx((75 + 80) / 2)
    assert arts_score(ArtsMetrics()) is None


def test_dining_caps_brewery_bonus():
    assert dining_score(DiningMetrics(breweries=20)) == 80
    dining = DiningMetrics(restaurants_per_10k=20, cuisine_diversity=50)
    assert dining_score(dining) == pytest.approx((75 + 100) / 2)


def test_beach_proximity_and_decay():
    assert beach_score(GeographyMetrics(coastline_within_15mi=True, water_quality_index=80)) == 100
    assert beach_score(GeographyMetrics(coastline_within_15mi=False, coastline_distance_mi=50)) == pytest.approx(58)
    assert beach_score(GeographyMetrics(coastline_within_15mi=False, coastline_distance_mi=150)) == 0
    assert beach_score(GeographyMetrics(coastline_within_15mi=False)) == 0
    assert beach_score(GeographyMetrics()) is None


def test_mountain_range_fallback_and_ski_bonus():
    assert mountain_score(GeographyMetrics(max_elevation_delta=2000), EMPTY_CACHE) == 50
    near_ski = GeographyMetrics(max_elevation_delta=2000, nearest_ski_resort_mi=30)
    assert mountain_score(near_ski, EMPTY_CACHE) == 60
    assert mountain_score(GeographyMetrics(nearest_ski_resort_mi=10), EMPTY_CACHE) is None


def test_nature_uses_percentiles_when_available():
    cities = [
        _city(name, recreation={"nature": {"trailMilesWithin10Mi": miles}})
        for name, miles in (("a", 10), ("b", 20), ("c", 30), ("d", 40))
    ]
    cache = PercentileCache.build(cities)
    nature = cities[2].quality_of_life.recreation.nature
    assert nature_score(nature, cache) == pytest.approx(50)
    assert nature_score(nature, EMPTY_CACHE) == 20


def test_sub_categories_without_data_are_left_out():
    city = _city(cultural={"sports": {"nfl": ["Seahawks"], "mlb": ["Mariners"]}})
    assert calculate_entertainment_score(city, UserPreferences(), EMPTY_CACHE) == 70


def test_no_entertainment_data_is_neutral():
    assert calculate_entertainment_score(_city(), UserPreferences(), EMPTY_CACHE) == 50


def test_zero_importance_is_neutral():
    prefs = UserPreferences.model_validate(
        {
            "advanced": {
                "entertainment": {
                    "nightlifeImportance": 0,
                    "artsImportance": 0,
                    "diningImportance": 0,
                    "sportsImportance": 0,
                    "recreationImportance": 0,
                }
            }
        }
    )
    city = _city(cultural={"sports": {"nfl": ["Seahawks"]}})
    assert calculate_entertainment_score(city, prefs, EMPTY_CACHE) == 50


def test_recreation_weights_beach_and_mountain():
    city = _city(
        recreation={"geography": {"coastlineWithin15Mi": True, "maxElevationDelta": 0}},
    )
    prefs = UserPreferences.model_validate(
        {"advanced": {"entertainment": {"beachWeight": 75, "mountainWeight": 25}}}
    )
    # beach 100, mountain 0 from the range fallback
    assert calculate_entertainment_score(city, prefs, EMPTY_CACHE) == pytest.approx(75)
