from __future__ import annotations

from ..cost_of_living import CostOfLivingCalculator, CostOfLivingOptions
from ..schemas import CityMetricsRecord, UserPreferences
from .constants import NEUTRAL_SCORE
from .normalization import clamp

# Median home price fallback: $300K scores 100, $1.5M scores 0.
AFFORDABLE_HOME_PRICE = 300000
HOME_PRICE_SPAN = 1200000


def purchasing_power_to_score(index: float) -> float:
    """Index 100 (national average) maps to 50; +/-40 index points move the score 30."""
    return clamp(50 + (index - 100) * 0.75)


def calculate_cost_score(
    city: CityMetricsRecord,
    preferences: UserPreferences,
    calculator: CostOfLivingCalculator,
) -> float:
    """Purchasing-power score, falling back to home price, then to neutral."""
    cost = city.cost
    if cost is None:
        return NEUTRAL_SCORE

    prefs = preferences.advanced.cost_of_living
    if cost.regional_price_parity is not None:
        options = CostOfLivingOptions(
            housing_situation=prefs.housing_situation,
            include_utilities=prefs.include_utilities,
            work_situation=prefs.work_situation,
            retiree_fixed_income=prefs.retiree_fixed_income,
            state=city.state,
            median_home_price=cost.median_home_price,
            property_tax_rate=cost.property_tax_rate,
            per_capita_income=cost.per_capita_income,
            per_capita_disposable_income=cost.per_capita_disposable_income,
            effective_tax_rate=cost.effective_tax_rate,
        )
        index = calculator.purchasing_power_index(cost.regional_price_parity, options)
        if index is not None:
            return purchasing_power_to_score(index)

    if cost.median_home_price is not None:
        return clamp(100 - (cost.median_home_price - AFFORDABLE_HOME_PRICE) / HOME_PRICE_SPAN * 100)

    return NEUTRAL_SCORE
