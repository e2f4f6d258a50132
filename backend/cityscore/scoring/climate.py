from __future__ import annotations

from ..schemas import CityMetricsRecord, UserPreferences
from .constants import CLIMATE_RANGES
from .normalization import WeightedScore, normalize_to_range


def _ranged(value: float | None, metric: str, invert: bool) -> float | None:
    if value is None:
        return None
    bounds = CLIMATE_RANGES[metric]
    return normalize_to_range(value, bounds.min, bounds.max, invert=invert)


def calculate_climate_score(city: CityMetricsRecord, preferences: UserPreferences) -> float:
    """Weighted climate score from NOAA normals against fixed U.S. extremes.

    Comfort days and growing season are "more is better"; every other metric
    is inverted. No climate record, or no positive weight with data, is 50.
    """
    climate = city.climate
    prefs = preferences.advanced.climate
    acc = WeightedScore()
    if climate is None:
        return acc.resolve()

    acc.add(_ranged(climate.comfort_days, "comfort_days", invert=False), prefs.weight_comfort_days)
    acc.add(_ranged(climate.extreme_heat_days, "extreme_heat_days", invert=True), prefs.weight_extreme_heat)
    acc.add(_ranged(climate.freeze_days, "freeze_days", invert=True), prefs.weight_freeze_days)
    acc.add(_ranged(climate.rain_days, "rain_days", invert=True), prefs.weight_rain_days)
    acc.add(_ranged(climate.snow_days, "snow_days", invert=True), prefs.weight_snow_days)
    acc.add(_ranged(climate.cloudy_days, "cloudy_days", invert=True), prefs.weight_cloudy_days)
    acc.add(_ranged(climate.july_dewpoint, "july_dewpoint", invert=True), prefs.weight_humidity)

    # Heating and cooling both drive the utility bill; one without the other is misleading.
    if climate.cooling_degree_days is not None and climate.heating_degree_days is not None:
        total_degree_days = climate.cooling_degree_days + climate.heating_degree_days
        acc.add(_ranged(total_degree_days, "degree_days", invert=True), prefs.weight_utility_costs)

    acc.add(_ranged(climate.growing_season_days, "growing_season_days", invert=False), prefs.weight_growing_season)
    acc.add(_ranged(climate.seasonal_stability, "seasonal_stability", invert=True), prefs.weight_seasonal_stability)
    acc.add(_ranged(climate.diurnal_swing, "diurnal_swing", invert=True), prefs.weight_diurnal_swing)

    return acc.resolve()
