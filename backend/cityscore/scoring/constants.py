"""Calibrated U.S. extremes and curve breakpoints used by the category scorers.

Each range maps a raw value onto 0-100. Values outside the range are clamped.
"""

from __future__ import annotations

from dataclasses import dataclass

NEUTRAL_SCORE = 50.0


@dataclass(frozen=True)
class Range:
    min: float
    max: float


@dataclass(frozen=True)
class CurveRange:
    min: float
    plateau: float
    max: float


CLIMATE_RANGES = {
    "comfort_days": Range(50, 280),  # Buffalo .. San Diego
    "extreme_heat_days": Range(0, 90),  # coastal .. Phoenix
    "freeze_days": Range(0, 160),  # Miami .. Minneapolis
    "rain_days": Range(30, 180),  # Phoenix .. Seattle area
    "snow_days": Range(0, 65),  # SoCal .. Buffalo
    "cloudy_days": Range(50, 220),  # Phoenix .. Seattle
    "july_dewpoint": Range(45, 75),  # desert .. Houston
    "degree_days": Range(2000, 9000),  # San Diego .. Minneapolis
    "growing_season_days": Range(120, 365),
    "seasonal_stability": Range(5, 28),  # monthly temp stddev
    "diurnal_swing": Range(10, 35),
}

QOL_RANGES = {
    "violent_crime_rate": Range(0, 800),  # per 100k, national avg ~380
    "healthy_days_percent": Range(70, 99),
    "student_teacher_ratio": Range(12, 22),
    "graduation_rate": Range(80, 95),
    "physicians_per_100k": Range(40, 120),  # national avg ~75
}

RECREATION_RANGES = {
    "trail_miles": Range(0, 150),
    "park_acres": Range(5, 100),
    "protected_land_percent": Range(0, 30),
    "elevation_delta": Range(0, 4000),  # feet within 30 miles
}

# Calibrated to OpenStreetMap density data.
URBAN_LIFESTYLE_RANGES = {
    "bars_and_clubs_per_10k": CurveRange(0.5, 5, 10),
    "museums": CurveRange(5, 30, 150),
    "restaurants_per_10k": CurveRange(3, 20, 45),
}
CUISINE_DIVERSITY_RANGE = Range(5, 50)

VOTER_TURNOUT_RANGE = Range(40, 80)

# Target partisan index per stated lean; +1 is the Democratic end of the scale.
PARTISAN_TARGETS = {
    "strong-dem": 0.6,
    "lean-dem": 0.2,
    "swing": 0.0,
    "lean-rep": -0.2,
    "strong-rep": -0.6,
}
STRONG_PARTISAN_THRESHOLD = 0.3

# Adherents per 1,000 residents, U.S. average.
NATIONAL_RELIGIOUS_AVERAGES = {
    "catholic": 205,
    "evangelical": 256,
    "mainline": 103,
    "jewish": 22,
    "muslim": 11,
    "unaffiliated": 290,
}

HISPANIC_SUBGROUPS = {
    "mexican": "mexican_percent",
    "puerto-rican": "puerto_rican_percent",
    "cuban": "cuban_percent",
    "salvadoran": "salvadoran_percent",
    "guatemalan": "guatemalan_percent",
    "colombian": "colombian_percent",
}
ASIAN_SUBGROUPS = {
    "chinese": "chinese_percent",
    "indian": "indian_percent",
    "filipino": "filipino_percent",
    "vietnamese": "vietnamese_percent",
    "korean": "korean_percent",
    "japanese": "japanese_percent",
}
MINORITY_SUBGROUP_FIELDS = {
    "hispanic": HISPANIC_SUBGROUPS,
    "asian": ASIAN_SUBGROUPS,
}
MINORITY_GROUP_FIELDS = {
    "hispanic": "hispanic_percent",
    "black": "black_percent",
    "asian": "asian_percent",
    "pacific-islander": "pacific_islander_percent",
    "native-american": "native_american_percent",
}
