"""True cost of living: after-tax income adjusted for local prices.

    purchasing power = after-tax income / (RPP / 100)

The index compares that figure against a national reference for the same
persona, so 100 means "as far as the national average goes" and higher is
better. Housing persona picks which price index is used; work persona picks
the income figure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from .schemas import HousingSituation, RegionalPriceParity, WorkSituation

# US national average per capita disposable income (BEA, 2022).
NATIONAL_PER_CAPITA_DISPOSABLE = 56014
# US median household income (Census ACS, 2022).
NATIONAL_MEDIAN_HOUSEHOLD_INCOME = 77719

# Monthly payment on a median-priced home at national averages; housing index 100.
NATIONAL_MONTHLY_MORTGAGE = 2128
MORTGAGE_RATE = 0.07
MORTGAGE_YEARS = 30
DOWN_PAYMENT = 0.20

NATIONAL_MEDIAN_HOME_PRICE = 412000
NATIONAL_PROPERTY_TAX_RATE = 1.0  # percent of home value per year

FICA_RATE = 0.0765
STANDARD_DEDUCTION = 14600
FEDERAL_BRACKETS = (
    (11600, 0.10),
    (47150, 0.12),
    (100525, 0.22),
    (191950, 0.24),
    (243725, 0.32),
    (609350, 0.35),
    (float("inf"), 0.37),
)

# Approximate effective state income tax rate at middle incomes.
STATE_INCOME_TAX_RATES = {
    "AL": 0.040, "AK": 0.0, "AZ": 0.025, "AR": 0.039, "CA": 0.050,
    "CO": 0.044, "CT": 0.050, "DE": 0.050, "DC": 0.060, "FL": 0.0,
    "GA": 0.050, "HI": 0.065, "ID": 0.053, "IL": 0.0495, "IN": 0.030,
    "IA": 0.040, "KS": 0.050, "KY": 0.040, "LA": 0.035, "ME": 0.055,
    "MD": 0.047, "MA": 0.050, "MI": 0.0425, "MN": 0.060, "MS": 0.044,
    "MO": 0.045, "MT": 0.055, "NE": 0.050, "NV": 0.0, "NH": 0.0,
    "NJ": 0.045, "NM": 0.042, "NY": 0.055, "NC": 0.045, "ND": 0.020,
    "OH": 0.030, "OK": 0.040, "OR": 0.080, "PA": 0.0307, "RI": 0.045,
    "SC": 0.055, "SD": 0.0, "TN": 0.0, "TX": 0.0, "UT": 0.0465,
    "VT": 0.055, "VA": 0.050, "WA": 0.0, "WV": 0.045, "WI": 0.050,
    "WY": 0.0,
}
NATIONAL_AVERAGE_STATE_RATE = 0.040

TaxBurdenRating = Literal["low", "moderate", "high", "very-high"]
CostOfLivingRating = Literal["very-low", "low", "moderate", "high", "very-high"]
ValueRating = Literal["excellent", "good", "moderate", "poor", "very-poor"]


@dataclass(frozen=True)
class CostOfLivingOptions:
    housing_situation: HousingSituation = "renter"
    include_utilities: bool = True
    work_situation: WorkSituation = "standard"
    retiree_fixed_income: float = 50000
    state: str = ""
    median_home_price: float | None = None
    property_tax_rate: float | None = None
    per_capita_income: float | None = None
    per_capita_disposable_income: float | None = None
    effective_tax_rate: float | None = None


@dataclass(frozen=True)
class TrueCostOfLiving:
    purchasing_power: float | None
    purchasing_power_index: float | None
    after_tax_income: float | None
    adjusted_rpp: float | None
    tax_burden_rating: TaxBurdenRating | None
    cost_of_living_rating: CostOfLivingRating | None
    overall_value_rating: ValueRating | None


class CostOfLivingCalculator(Protocol):
    def purchasing_power_index(self, rpp: RegionalPriceParity, options: CostOfLivingOptions) -> float | None: ...


def federal_income_tax(gross: float) -> float:
    taxable = max(0.0, gross - STANDARD_DEDUCTION)
    tax = 0.0
    lower = 0.0
    for upper, rate in FEDERAL_BRACKETS:
        if taxable <= lower:
            break
        tax += (min(taxable, upper) - lower) * rate
        lower = upper
    return tax


def state_income_tax_rate(state: str) -> float:
    return STATE_INCOME_TAX_RATES.get((state or "").upper(), NATIONAL_AVERAGE_STATE_RATE)


def after_tax_income(gross: float, state_rate: float, payroll: bool = True) -> float:
    """Gross income minus federal, state and (for wage earners) payroll tax."""
    taxes = federal_income_tax(gross) + gross * state_rate
    if payroll:
        taxes += gross * FICA_RATE
    return max(0.0, gross - taxes)


def monthly_mortgage_payment(home_price: float) -> float:
    principal = home_price * (1 - DOWN_PAYMENT)
    rate = MORTGAGE_RATE / 12
    months = MORTGAGE_YEARS * 12
    return principal * rate / (1 - (1 + rate) ** -months)


def buyer_housing_index(home_price: float) -> float:
    return monthly_mortgage_payment(home_price) / NATIONAL_MONTHLY_MORTGAGE * 100


def tax_burden_rating(rate: float | None) -> TaxBurdenRating | None:
    if rate is None:
        return None
    if rate < 12:
        return "low"
    if rate < 15:
        return "moderate"
    if rate < 18:
        return "high"
    return "very-high"


def cost_of_living_rating(rpp: float | None) -> CostOfLivingRating | None:
    if rpp is None:
        return None
    if rpp < 90:
        return "very-low"
    if rpp < 97:
        return "low"
    if rpp < 103:
        return "moderate"
    if rpp < 115:
        return "high"
    return "very-high"


def overall_value_rating(index: float | None) -> ValueRating | None:
    if index is None:
        return None
    if index >= 110:
        return "excellent"
    if index >= 102:
        return "good"
    if index >= 95:
        return "moderate"
    if index >= 85:
        return "poor"
    return "very-poor"


class TrueCostOfLivingCalculator:
    """Default calculator combining BEA price parities with persona-specific income."""

    def adjusted_rpp(self, rpp: RegionalPriceParity, options: CostOfLivingOptions) -> float | None:
        all_items = rpp.all_items
        if all_items is None:
            return None

        goods = rpp.goods if rpp.goods is not None else all_items
        services = rpp.other_services if rpp.other_services is not None else all_items

        if options.housing_situation == "homeowner":
            # Mortgage is fixed; only goods and services move with local prices.
            return 0.70 * goods + 0.30 * services

        if options.housing_situation == "prospective-buyer":
            if options.median_home_price is not None and options.median_home_price > 0:
                housing = buyer_housing_index(options.median_home_price)
            elif rpp.housing is not None:
                housing = rpp.housing
            else:
                housing = all_items
            return 0.40 * housing + 0.35 * goods + 0.25 * services

        adjusted = all_items
        if options.include_utilities and rpp.utilities is not None:
            adjusted += (rpp.utilities - 100) * 0.05
        return adjusted

    def income_pair(self, options: CostOfLivingOptions) -> tuple[float, float] | None:
        """Return (local after-tax income, national reference after-tax income)."""
        state_rate = state_income_tax_rate(options.state)

        if options.work_situation == "high-earner":
            disposable = options.per_capita_disposable_income
            if disposable is None and options.per_capita_income is not None:
                rate = options.effective_tax_rate if options.effective_tax_rate is not None else 0.0
                disposable = options.per_capita_income * (1 - rate / 100)
            if disposable is None:
                return None
            return disposable, float(NATIONAL_PER_CAPITA_DISPOSABLE)

        if options.work_situation == "retiree":
            gross = options.retiree_fixed_income
            if gross <= 0:
                return None
            return (
                after_tax_income(gross, state_rate, payroll=False),
                after_tax_income(gross, NATIONAL_AVERAGE_STATE_RATE, payroll=False),
            )

        gross = NATIONAL_MEDIAN_HOUSEHOLD_INCOME
        return (
            after_tax_income(gross, state_rate),
            after_tax_income(gross, NATIONAL_AVERAGE_STATE_RATE),
        )

    def calculate(self, rpp: RegionalPriceParity | None, options: CostOfLivingOptions) -> TrueCostOfLiving:
        adjusted = self.adjusted_rpp(rpp, options) if rpp is not None else None
        incomes = self.income_pair(options)

        purchasing_power = None
        index = None
        local_income = None
        if adjusted is not None and adjusted > 0 and incomes is not None:
            local_income, reference_income = incomes
            if options.housing_situation != "renter":
                local_income, reference_income = self._deduct_property_tax(local_income, reference_income, options)
            if reference_income > 0:
                purchasing_power = round(local_income / (adjusted / 100))
                index = round(local_income / reference_income / (adjusted / 100) * 100, 1)

        return TrueCostOfLiving(
            purchasing_power=purchasing_power,
            purchasing_power_index=index,
            after_tax_income=local_income,
            adjusted_rpp=adjusted,
            tax_burden_rating=tax_burden_rating(options.effective_tax_rate),
            cost_of_living_rating=cost_of_living_rating(rpp.all_items if rpp else None),
            overall_value_rating=overall_value_rating(index),
        )

    def purchasing_power_index(self, rpp: RegionalPriceParity, options: CostOfLivingOptions) -> float | None:
        return self.calculate(rpp, options).purchasing_power_index

    @staticmethod
    def _deduct_property_tax(
        local_income: float, reference_income: float, options: CostOfLivingOptions
    ) -> tuple[float, float]:
        reference_tax = NATIONAL_MEDIAN_HOME_PRICE * NATIONAL_PROPERTY_TAX_RATE / 100
        if options.median_home_price is None or options.property_tax_rate is None:
            return local_income, reference_income
        local_tax = options.median_home_price * options.property_tax_rate / 100
        return max(0.0, local_income - local_tax), max(1.0, reference_income - reference_tax)
