"""Composite aggregator: six category scores per city, weighted into one ranked list.

The engine is pure. Each call builds its own PercentileCache from exactly the
cities passed in and threads it through the scorers, so concurrent calls
over different city sets never see each other's distributions.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..cost_of_living import CostOfLivingCalculator, TrueCostOfLivingCalculator
from ..schemas import CategoryWeights, CityMetricsRecord, CityScore, ScoringResult, UserPreferences
from .climate import calculate_climate_score
from .constants import NEUTRAL_SCORE
from .cost import calculate_cost_score
from .demographics import calculate_demographics_score
from .display import grade
from .entertainment import calculate_entertainment_score
from .normalization import clamp
from .percentiles import PercentileCache
from .quality_of_life import calculate_quality_of_life_score
from .values import calculate_values_score

logger = logging.getLogger(__name__)

NO_METRICS_REASON = "No metrics available"


def weighted_total(category_scores: dict[str, float], weights: CategoryWeights) -> float:
    """Weighted mean of the category scores; 0 when every category weight is 0."""
    pairs = (
        (category_scores["climate"], weights.climate),
        (category_scores["cost"], weights.cost_of_living),
        (category_scores["demographics"], weights.demographics),
        (category_scores["quality_of_life"], weights.quality_of_life),
        (category_scores["values"], weights.values),
        (category_scores["entertainment"], weights.entertainment),
    )
    total_weight = sum(weight for _, weight in pairs)
    if total_weight <= 0:
        return 0.0
    return clamp(sum(score * weight for score, weight in pairs) / total_weight)


def score_city(
    city: CityMetricsRecord,
    preferences: UserPreferences,
    cache: PercentileCache,
    calculator: CostOfLivingCalculator,
) -> CityScore:
    if not city.has_metrics():
        logger.warning("Excluding city %s (%s): %s", city.id, city.name, NO_METRICS_REASON)
        return CityScore(
            city_id=city.id,
            city_name=city.name,
            state=city.state,
            climate_score=NEUTRAL_SCORE,
            cost_score=NEUTRAL_SCORE,
            demographics_score=NEUTRAL_SCORE,
            quality_of_life_score=NEUTRAL_SCORE,
            values_score=NEUTRAL_SCORE,
            entertainment_score=NEUTRAL_SCORE,
            total_score=0.0,
            grade=grade(0.0),
            excluded=True,
            exclusion_reason=NO_METRICS_REASON,
        )

    category_scores = {
        "climate": clamp(calculate_climate_score(city, preferences)),
        "cost": clamp(calculate_cost_score(city, preferences, calculator)),
        "demographics": clamp(calculate_demographics_score(city, preferences)),
        "quality_of_life": clamp(calculate_quality_of_life_score(city, preferences)),
        "values": clamp(calculate_values_score(city, preferences)),
        "entertainment": clamp(calculate_entertainment_score(city, preferences, cache)),
    }
    total = weighted_total(category_scores, preferences.weights)

    return CityScore(
        city_id=city.id,
        city_name=city.name,
        state=city.state,
        climate_score=category_scores["climate"],
        cost_score=category_scores["cost"],
        demographics_score=category_scores["demographics"],
        quality_of_life_score=category_scores["quality_of_life"],
        values_score=category_scores["values"],
        entertainment_score=category_scores["entertainment"],
        total_score=total,
        grade=grade(total),
    )


def score_cities(
    cities: Sequence[CityMetricsRecord],
    preferences: UserPreferences | None = None,
    *,
    calculator: CostOfLivingCalculator | None = None,
) -> ScoringResult:
    """Score and rank ``cities`` against ``preferences``.

    Rankings are sorted by total score descending with excluded cities last;
    ties keep input order.
    """
    preferences = preferences or UserPreferences()
    calculator = calculator or TrueCostOfLivingCalculator()
    cache = PercentileCache.build(cities)

    rankings = [score_city(city, preferences, cache, calculator) for city in cities]
    rankings.sort(key=lambda score: (score.excluded, -score.total_score))

    excluded_count = sum(1 for score in rankings if score.excluded)
    result = ScoringResult(
        rankings=rankings,
        included_count=len(rankings) - excluded_count,
        excluded_count=excluded_count,
    )
    logger.info(
        "Scored %d cities (%d included, %d excluded)",
        len(rankings),
        result.included_count,
        result.excluded_count,
    )
    return result
