from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HousingSituation = Literal["renter", "homeowner", "prospective-buyer"]
WorkSituation = Literal["standard", "high-earner", "retiree"]
PartisanPreference = Literal["strong-dem", "lean-dem", "swing", "lean-rep", "strong-rep", "neutral"]
AgeGroup = Literal["young", "mixed", "mature", "any"]
MinorityGroup = Literal["none", "hispanic", "black", "asian", "pacific-islander", "native-american"]
MinoritySubgroup = Literal[
    "any",
    "mexican",
    "puerto-rican",
    "cuban",
    "salvadoran",
    "guatemalan",
    "colombian",
    "chinese",
    "indian",
    "filipino",
    "vietnamese",
    "korean",
    "japanese",
]
ReligiousTradition = Literal["catholic", "evangelical", "mainline", "jewish", "muslim", "unaffiliated"]
CrimeTrend = Literal["rising", "falling", "stable"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", allow_inf_nan=False)

    @field_validator("*", mode="before")
    @classmethod
    def drop_non_finite(cls, value: Any) -> Any:
        # NaN and infinity parse from JSON but carry no usable measurement.
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value


def _percent_or_none(value: float | None) -> float | None:
    if value is None or not 0 <= value <= 100:
        return None
    return value


def _non_negative_or_none(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return value


# --- City metrics (read-only, every leaf nullable) ---


class ClimateMetrics(_Model):
    comfort_days: float | None = None
    extreme_heat_days: float | None = None
    freeze_days: float | None = None
    rain_days: float | None = None
    snow_days: float | None = None
    cloudy_days: float | None = None
    july_dewpoint: float | None = None
    cooling_degree_days: float | None = None
    heating_degree_days: float | None = None
    growing_season_days: float | None = None
    seasonal_stability: float | None = None
    diurnal_swing: float | None = None

    @field_validator(
        "comfort_days",
        "extreme_heat_days",
        "freeze_days",
        "rain_days",
        "snow_days",
        "cloudy_days",
        "cooling_degree_days",
        "heating_degree_days",
        "growing_season_days",
        "seasonal_stability",
        "diurnal_swing",
    )
    @classmethod
    def drop_negative_counts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class RegionalPriceParity(_Model):
    all_items: float | None = None
    goods: float | None = None
    housing: float | None = None
    utilities: float | None = None
    other_services: float | None = None

    @field_validator("*")
    @classmethod
    def drop_non_positive_index(cls, value: float | None) -> float | None:
        if value is None or value <= 0:
            return None
        return value


class CostMetrics(_Model):
    regional_price_parity: RegionalPriceParity | None = None
    per_capita_income: float | None = None
    per_capita_disposable_income: float | None = None
    effective_tax_rate: float | None = None
    median_home_price: float | None = None
    property_tax_rate: float | None = None

    @field_validator("per_capita_income", "per_capita_disposable_income", "median_home_price", "property_tax_rate")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)

    @field_validator("effective_tax_rate")
    @classmethod
    def drop_invalid_rate(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class GenderRatios(_Model):
    """Males per 100 females, overall and by dating age band."""

    overall: float | None = None
    age_20_to_29: float | None = Field(default=None, alias="age20to29")
    age_30_to_39: float | None = Field(default=None, alias="age30to39")
    age_40_to_49: float | None = Field(default=None, alias="age40to49")

    @field_validator("*")
    @classmethod
    def drop_negative_ratio(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class DemographicsMetrics(_Model):
    total_population: float | None = None
    median_age: float | None = None
    diversity_index: float | None = None

    hispanic_percent: float | None = None
    black_percent: float | None = None
    asian_percent: float | None = None
    pacific_islander_percent: float | None = None
    native_american_percent: float | None = None

    mexican_percent: float | None = None
    puerto_rican_percent: float | None = None
    cuban_percent: float | None = None
    salvadoran_percent: float | None = None
    guatemalan_percent: float | None = None
    colombian_percent: float | None = None
    chinese_percent: float | None = None
    indian_percent: float | None = None
    filipino_percent: float | None = None
    vietnamese_percent: float | None = None
    korean_percent: float | None = None
    japanese_percent: float | None = None

    gender_ratios: GenderRatios | None = None
    never_married_male_percent: float | None = None
    never_married_female_percent: float | None = None

    median_household_income: float | None = None
    per_capita_income: float | None = None
    poverty_rate: float | None = None
    bachelors_or_higher_percent: float | None = None
    foreign_born_percent: float | None = None
    non_english_at_home_percent: float | None = None

    @field_validator(
        "diversity_index",
        "hispanic_percent",
        "black_percent",
        "asian_percent",
        "pacific_islander_percent",
        "native_american_percent",
        "mexican_percent",
        "puerto_rican_percent",
        "cuban_percent",
        "salvadoran_percent",
        "guatemalan_percent",
        "colombian_percent",
        "chinese_percent",
        "indian_percent",
        "filipino_percent",
        "vietnamese_percent",
        "korean_percent",
        "japanese_percent",
        "never_married_male_percent",
        "never_married_female_percent",
        "poverty_rate",
        "bachelors_or_higher_percent",
        "foreign_born_percent",
        "non_english_at_home_percent",
    )
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)

    @field_validator("total_population", "median_age", "median_household_income", "per_capita_income")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class WalkabilityMetrics(_Model):
    walk_score: float | None = None
    transit_score: float | None = None
    bike_score: float | None = None

    @field_validator("*")
    @classmethod
    def drop_invalid_score(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class CrimeMetrics(_Model):
    violent_crime_rate: float | None = None
    property_crime_rate: float | None = None
    trend_3_year: CrimeTrend | None = None

    @field_validator("violent_crime_rate", "property_crime_rate")
    @classmethod
    def drop_negative_rate(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class AirQualityMetrics(_Model):
    healthy_days_percent: float | None = None
    hazardous_days: float | None = None

    @field_validator("healthy_days_percent")
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)

    @field_validator("hazardous_days")
    @classmethod
    def drop_negative_days(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class BroadbandMetrics(_Model):
    fiber_coverage_percent: float | None = None
    provider_count: int | None = None
    max_download_speed: float | None = None

    @field_validator("fiber_coverage_percent")
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)

    @field_validator("provider_count", "max_download_speed")
    @classmethod
    def drop_negative_amounts(cls, value: Any) -> Any:
        return _non_negative_or_none(value)


class EducationMetrics(_Model):
    student_teacher_ratio: float | None = None
    graduation_rate: float | None = None

    @field_validator("student_teacher_ratio")
    @classmethod
    def drop_non_positive_ratio(cls, value: float | None) -> float | None:
        if value is None or value <= 0:
            return None
        return value

    @field_validator("graduation_rate")
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class HealthMetrics(_Model):
    primary_care_physicians_per_100k: float | None = Field(default=None, alias="primaryCarePhysiciansPer100k")
    hpsa_score: float | None = None

    @field_validator("*")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class NatureMetrics(_Model):
    trail_miles_within_10mi: float | None = Field(default=None, alias="trailMilesWithin10Mi")
    park_acres_per_1k: float | None = Field(default=None, alias="parkAcresPer1K")
    protected_land_percent: float | None = None

    @field_validator("trail_miles_within_10mi", "park_acres_per_1k")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)

    @field_validator("protected_land_percent")
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class GeographyMetrics(_Model):
    coastline_within_15mi: bool | None = Field(default=None, alias="coastlineWithin15Mi")
    coastline_distance_mi: float | None = None
    water_quality_index: float | None = None
    max_elevation_delta: float | None = None
    nearest_ski_resort_mi: float | None = None

    @field_validator("coastline_distance_mi", "max_elevation_delta", "nearest_ski_resort_mi")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)

    @field_validator("water_quality_index")
    @classmethod
    def drop_invalid_index(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class RecreationMetrics(_Model):
    nature: NatureMetrics | None = None
    geography: GeographyMetrics | None = None


class QualityOfLifeMetrics(_Model):
    walkability: WalkabilityMetrics | None = None
    crime: CrimeMetrics | None = None
    air_quality: AirQualityMetrics | None = None
    broadband: BroadbandMetrics | None = None
    education: EducationMetrics | None = None
    health: HealthMetrics | None = None
    recreation: RecreationMetrics | None = None


class PoliticalMetrics(_Model):
    partisan_index: float | None = None
    voter_turnout: float | None = None

    @field_validator("partisan_index")
    @classmethod
    def drop_out_of_range_index(cls, value: float | None) -> float | None:
        if value is None or not -1 <= value <= 1:
            return None
        return value

    @field_validator("voter_turnout")
    @classmethod
    def drop_invalid_percent(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class ReligiousMetrics(_Model):
    """Adherents per 1,000 residents by tradition, plus a 0-100 diversity index."""

    catholic: float | None = None
    evangelical_protestant: float | None = None
    mainline_protestant: float | None = None
    jewish: float | None = None
    muslim: float | None = None
    unaffiliated: float | None = None
    diversity_index: float | None = None

    @field_validator("catholic", "evangelical_protestant", "mainline_protestant", "jewish", "muslim", "unaffiliated")
    @classmethod
    def drop_invalid_rate(cls, value: float | None) -> float | None:
        if value is None or not 0 <= value <= 1000:
            return None
        return value

    @field_validator("diversity_index")
    @classmethod
    def drop_invalid_index(cls, value: float | None) -> float | None:
        return _percent_or_none(value)


class NightlifeMetrics(_Model):
    bars_and_clubs_per_10k: float | None = Field(default=None, alias="barsAndClubsPer10K")
    late_night_venues: float | None = None

    @field_validator("*")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class ArtsMetrics(_Model):
    museums: float | None = None
    theaters: float | None = None
    art_galleries: float | None = None
    music_venues: float | None = None

    @field_validator("*")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class DiningMetrics(_Model):
    restaurants_per_10k: float | None = Field(default=None, alias="restaurantsPer10K")
    fine_dining_count: float | None = None
    cuisine_diversity: float | None = None
    breweries: float | None = None

    @field_validator("*")
    @classmethod
    def drop_negative_amounts(cls, value: float | None) -> float | None:
        return _non_negative_or_none(value)


class UrbanLifestyleMetrics(_Model):
    nightlife: NightlifeMetrics | None = None
    arts: ArtsMetrics | None = None
    dining: DiningMetrics | None = None


SPORTS_LEAGUES = ("nfl", "nba", "mlb", "nhl", "mls")


class SportsTeams(_Model):
    nfl: list[str] = Field(default_factory=list)
    nba: list[str] = Field(default_factory=list)
    mlb: list[str] = Field(default_factory=list)
    nhl: list[str] = Field(default_factory=list)
    mls: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def split_team_string(cls, value: Any) -> Any:
        # Older city packs store teams as "Bears, Cubs, White Sox".
        if value is None:
            return []
        if isinstance(value, str):
            return [team.strip() for team in value.split(",") if team.strip()]
        return value

    def counts(self) -> dict[str, int]:
        return {league: len(getattr(self, league)) for league in SPORTS_LEAGUES}


class CulturalMetrics(_Model):
    political: PoliticalMetrics | None = None
    religious: ReligiousMetrics | None = None
    urban_lifestyle: UrbanLifestyleMetrics | None = None
    sports: SportsTeams | None = None


class CityMetricsRecord(_Model):
    id: str = Field(..., min_length=1, max_length=120)
    name: str = Field(..., min_length=1, max_length=200)
    state: str = Field(default="", max_length=2)

    climate: ClimateMetrics | None = None
    cost: CostMetrics | None = None
    demographics: DemographicsMetrics | None = None
    quality_of_life: QualityOfLifeMetrics | None = None
    cultural: CulturalMetrics | None = None

    @field_validator("state", mode="before")
    @classmethod
    def normalize_state(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def has_metrics(self) -> bool:
        return any(
            record is not None
            for record in (self.climate, self.cost, self.demographics, self.quality_of_life, self.cultural)
        )


# --- User preferences ---


def _weight(default: float) -> Any:
    return Field(default=default, ge=0, le=100)


class CategoryWeights(_Model):
    climate: float = _weight(50)
    cost_of_living: float = _weight(50)
    demographics: float = _weight(50)
    quality_of_life: float = _weight(50)
    values: float = _weight(0)
    entertainment: float = _weight(50)


class ClimatePreferences(_Model):
    weight_comfort_days: float = _weight(50)
    weight_extreme_heat: float = _weight(50)
    weight_freeze_days: float = _weight(50)
    weight_rain_days: float = _weight(50)
    weight_snow_days: float = _weight(25)
    weight_cloudy_days: float = _weight(40)
    weight_humidity: float = _weight(40)
    weight_utility_costs: float = _weight(50)
    weight_growing_season: float = _weight(0)
    weight_seasonal_stability: float = _weight(25)
    weight_diurnal_swing: float = _weight(25)


class CostPreferences(_Model):
    housing_situation: HousingSituation = "renter"
    include_utilities: bool = True
    work_situation: WorkSituation = "standard"
    retiree_fixed_income: float = Field(default=50000, ge=0)


class DemographicsPreferences(_Model):
    min_population: float = Field(default=0, ge=0)

    min_diversity_index: float = _weight(0)
    weight_diversity: float = _weight(25)

    preferred_age_group: AgeGroup = "any"
    weight_age: float = _weight(0)

    min_bachelors_percent: float = _weight(0)
    weight_education: float = _weight(25)

    min_foreign_born_percent: float = _weight(0)
    weight_foreign_born: float = _weight(0)

    minority_group: MinorityGroup = "none"
    minority_subgroup: MinoritySubgroup = "any"
    min_minority_presence: float = _weight(5)
    minority_importance: float = _weight(50)

    min_median_household_income: float = Field(default=0, ge=0)
    max_poverty_rate: float = _weight(100)
    weight_economic_health: float = _weight(25)

    dating_enabled: bool = False
    seeking_gender: Literal["men", "women"] | None = None
    dating_age_range: Literal["20-29", "30-39", "40-49"] | None = None
    dating_weight: float = _weight(50)


class QualityOfLifeWeights(_Model):
    walkability: float = _weight(20)
    safety: float = _weight(25)
    air_quality: float = _weight(15)
    internet: float = _weight(10)
    schools: float = _weight(15)
    healthcare: float = _weight(15)


class QualityOfLifePreferences(_Model):
    min_walk_score: float = _weight(0)
    min_transit_score: float = _weight(0)
    max_violent_crime_rate: float = Field(default=500, gt=0)
    prefer_falling_crime: bool = False
    max_hazardous_days: float = Field(default=30, ge=0)
    require_fiber: bool = False
    min_providers: int = Field(default=2, ge=0)
    max_student_teacher_ratio: float = Field(default=20, gt=0)
    min_physicians_per_100k: float = Field(default=50, ge=0, alias="minPhysiciansPer100k")
    weights: QualityOfLifeWeights = Field(default_factory=QualityOfLifeWeights)


class ValuesPreferences(_Model):
    partisan_preference: PartisanPreference = "neutral"
    partisan_weight: float = _weight(0)
    prefer_high_turnout: bool = False

    religious_traditions: list[ReligiousTradition] = Field(default_factory=list)
    min_tradition_presence: float = Field(default=50, ge=0, le=1000)
    traditions_weight: float = _weight(0)
    prefer_religious_diversity: bool = False
    diversity_weight: float = _weight(0)


class EntertainmentPreferences(_Model):
    nightlife_importance: float = _weight(50)
    arts_importance: float = _weight(50)
    dining_importance: float = _weight(50)
    sports_importance: float = _weight(50)
    recreation_importance: float = _weight(50)

    nature_weight: float = _weight(50)
    beach_weight: float = _weight(50)
    mountain_weight: float = _weight(50)


class AdvancedPreferences(_Model):
    climate: ClimatePreferences = Field(default_factory=ClimatePreferences)
    cost_of_living: CostPreferences = Field(default_factory=CostPreferences)
    demographics: DemographicsPreferences = Field(default_factory=DemographicsPreferences)
    quality_of_life: QualityOfLifePreferences = Field(default_factory=QualityOfLifePreferences)
    values: ValuesPreferences = Field(default_factory=ValuesPreferences)
    entertainment: EntertainmentPreferences = Field(default_factory=EntertainmentPreferences)


class UserPreferences(_Model):
    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    advanced: AdvancedPreferences = Field(default_factory=AdvancedPreferences)


# --- Scoring output ---


class CityScore(_Model):
    city_id: str
    city_name: str
    state: str

    climate_score: float = Field(..., ge=0, le=100)
    cost_score: float = Field(..., ge=0, le=100)
    demographics_score: float = Field(..., ge=0, le=100)
    quality_of_life_score: float = Field(..., ge=0, le=100)
    values_score: float = Field(..., ge=0, le=100)
    entertainment_score: float = Field(..., ge=0, le=100)

    total_score: float = Field(..., ge=0, le=100)
    grade: str

    excluded: bool = False
    exclusion_reason: str | None = None


class ScoringResult(_Model):
    rankings: list[CityScore] = Field(default_factory=list)
    included_count: int = Field(..., ge=0)
    excluded_count: int = Field(..., ge=0)


class ScoreRequest(_Model):
    cities: list[CityMetricsRecord] = Field(..., max_length=5000)
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    @field_validator("cities")
    @classmethod
    def validate_unique_city_ids(cls, cities: list[CityMetricsRecord]) -> list[CityMetricsRecord]:
        seen_ids: set[str] = set()
        for city in cities:
            if city.id in seen_ids:
                raise ValueError(f"Duplicate city id: {city.id}")
            seen_ids.add(city.id)
        return cities
