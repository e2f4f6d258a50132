"""Entertainment score: "is it fun?"

Nightlife, arts and dining use critical-mass curves, sports a team-count
ladder, and recreation blends nature, beach and mountain access. A
sub-category with no data is left out of the weighted mean instead of being
counted as neutral.
"""

from __future__ import annotations

from ..schemas import (
    ArtsMetrics,
    CityMetricsRecord,
    DiningMetrics,
    EntertainmentPreferences,
    GeographyMetrics,
    NatureMetrics,
    NightlifeMetrics,
    RecreationMetrics,
    SportsTeams,
    UserPreferences,
)
from .constants import CUISINE_DIVERSITY_RANGE, RECREATION_RANGES, URBAN_LIFESTYLE_RANGES
from .normalization import WeightedScore, amenity_score, clamp, mean_of, normalize_to_range
from .percentiles import PercentileCache

LATE_NIGHT_VENUE_THRESHOLD = 10
BEACH_RADIUS_MI = 15
BEACH_MAX_DISTANCE_MI = 100
SKI_RESORT_RADIUS_MI = 60


def _curve(value: float, metric: str) -> float:
    bounds = URBAN_LIFESTYLE_RANGES[metric]
    return amenity_score(value, bounds.min, bounds.plateau, bounds.max)


def _ranged(value: float, metric: str) -> float:
    bounds = RECREATION_RANGES[metric]
    return normalize_to_range(value, bounds.min, bounds.max)


def nightlife_score(nightlife: NightlifeMetrics | None) -> float | None:
    if nightlife is None or nightlife.bars_and_clubs_per_10k is None:
        return None
    score = _curve(nightlife.bars_and_clubs_per_10k, "bars_and_clubs_per_10k")
    if nightlife.late_night_venues is not None and nightlife.late_night_venues >= LATE_NIGHT_VENUE_THRESHOLD:
        score = min(100.0, score + 5)
    return score


def arts_score(arts: ArtsMetrics | None) -> float | None:
    if arts is None:
        return None
    parts = []
    if arts.museums is not None:
        parts.append(_curve(arts.museums, "museums"))
    if arts.theaters:
        parts.append(min(100.0, 50 + arts.theaters * 3))
    if arts.art_galleries:
        parts.append(min(100.0, 40 + arts.art_galleries * 2))
    if arts.music_venues:
        parts.append(min(100.0, 50 + arts.music_venues * 2))
    return mean_of(parts)


def dining_score(dining: DiningMetrics | None) -> float | None:
    if dining is None:
        return None
    parts = []
    if dining.restaurants_per_10k is not None:
        parts.append(_curve(dining.restaurants_per_10k, "restaurants_per_10k"))
    if dining.fine_dining_count:
        parts.append(min(100.0, 40 + dining.fine_dining_count * 3))
    if dining.cuisine_diversity is not None:
        parts.append(
            normalize_to_range(dining.cuisine_diversity, CUISINE_DIVERSITY_RANGE.min, CUISINE_DIVERSITY_RANGE.max)
        )
    if dining.breweries:
        # Breweries are a bonus signal, never a headline one.
        parts.append(min(80.0, 50 + dining.breweries * 3))
    return mean_of(parts)


def team_count_score(total_teams: int) -> float:
    if total_teams == 0:
        return 30
    if total_teams <= 2:
        return 50 + total_teams * 10
    if total_teams <= 4:
        return 65 + (total_teams - 2) * 7
    if total_teams <= 6:
        return 80 + (total_teams - 4) * 5
    if total_teams <= 8:
        return 92 + (total_teams - 6) * 2
    return min(100, 97 + (total_teams - 8))


def sports_score(sports: SportsTeams | None) -> float | None:
    if sports is None:
        return None
    counts = sports.counts()
    score = team_count_score(sum(counts.values()))

    leagues = sum(1 for count in counts.values() if count > 0)
    if leagues >= 4:
        score = min(100, score + 5)
    elif leagues >= 3:
        score = min(100, score + 3)
    return float(score)


def nature_score(nature: NatureMetrics | None, cache: PercentileCache) -> float | None:
    if nature is None:
        return None
    parts = []
    if nature.trail_miles_within_10mi is not None:
        if cache.has("trail_miles"):
            parts.append(cache.rank("trail_miles", nature.trail_miles_within_10mi))
        else:
            parts.append(_ranged(nature.trail_miles_within_10mi, "trail_miles"))
    if nature.park_acres_per_1k is not None:
        if cache.has("park_acres"):
            parts.append(cache.rank("park_acres", nature.park_acres_per_1k))
        else:
            parts.append(_ranged(nature.park_acres_per_1k, "park_acres"))
    if nature.protected_land_percent is not None:
        parts.append(_ranged(nature.protected_land_percent, "protected_land_percent"))
    return mean_of(parts)


def beach_score(geography: GeographyMetrics | None) -> float | None:
    if geography is None:
        return None
    if geography.coastline_within_15mi:
        score = 100.0
        if geography.water_quality_index is not None and geography.water_quality_index >= 70:
            score = min(100.0, score + 5)
        return score
    distance = geography.coastline_distance_mi
    if distance is not None and distance <= BEACH_MAX_DISTANCE_MI:
        return clamp(100 - (distance - BEACH_RADIUS_MI) * 1.2)
    if distance is None and geography.coastline_within_15mi is None:
        return None
    return 0.0


def mountain_score(geography: GeographyMetrics | None, cache: PercentileCache) -> float | None:
    if geography is None or geography.max_elevation_delta is None:
        return None
    if cache.has("elevation_delta"):
        score = cache.rank("elevation_delta", geography.max_elevation_delta)
    else:
        score = _ranged(geography.max_elevation_delta, "elevation_delta")
    if geography.nearest_ski_resort_mi is not None and geography.nearest_ski_resort_mi <= SKI_RESORT_RADIUS_MI:
        score = min(100.0, score + 10)
    return score


def recreation_score(
    recreation: RecreationMetrics | None, prefs: EntertainmentPreferences, cache: PercentileCache
) -> float | None:
    if recreation is None:
        return None
    acc = WeightedScore()
    acc.add(nature_score(recreation.nature, cache), prefs.nature_weight)
    acc.add(beach_score(recreation.geography), prefs.beach_weight)
    acc.add(mountain_score(recreation.geography, cache), prefs.mountain_weight)
    return None if acc.empty else acc.resolve()


def calculate_entertainment_score(
    city: CityMetricsRecord, preferences: UserPreferences, cache: PercentileCache
) -> float:
    prefs = preferences.advanced.entertainment
    cultural = city.cultural
    urban = cultural.urban_lifestyle if cultural else None
    recreation = city.quality_of_life.recreation if city.quality_of_life else None

    acc = WeightedScore()
    acc.add(nightlife_score(urban.nightlife if urban else None), prefs.nightlife_importance)
    acc.add(arts_score(urban.arts if urban else None), prefs.arts_importance)
    acc.add(dining_score(urban.dining if urban else None), prefs.dining_importance)
    acc.add(sports_score(cultural.sports if cultural else None), prefs.sports_importance)
    acc.add(recreation_score(recreation, prefs, cache), prefs.recreation_importance)
    return acc.resolve()
