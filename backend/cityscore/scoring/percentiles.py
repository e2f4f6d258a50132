"""Run-scoped percentile distributions.

A ``PercentileCache`` is built once from exactly the cities passed to a
scoring call and handed to the scorers explicitly. It is immutable and never
shared between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from ..schemas import CityMetricsRecord, RecreationMetrics
from .normalization import percentile_score

logger = logging.getLogger(__name__)

MetricGetter = Callable[[CityMetricsRecord], float | None]


def _recreation(city: CityMetricsRecord) -> RecreationMetrics | None:
    qol = city.quality_of_life
    return qol.recreation if qol else None


def _trail_miles(city: CityMetricsRecord) -> float | None:
    rec = _recreation(city)
    return rec.nature.trail_miles_within_10mi if rec and rec.nature else None


def _park_acres(city: CityMetricsRecord) -> float | None:
    rec = _recreation(city)
    return rec.nature.park_acres_per_1k if rec and rec.nature else None


def _elevation_delta(city: CityMetricsRecord) -> float | None:
    rec = _recreation(city)
    return rec.geography.max_elevation_delta if rec and rec.geography else None


PERCENTILE_METRICS: dict[str, MetricGetter] = {
    "trail_miles": _trail_miles,
    "park_acres": _park_acres,
    "elevation_delta": _elevation_delta,
}


@dataclass(frozen=True)
class PercentileCache:
    values: Mapping[str, tuple[float, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, cities: Iterable[CityMetricsRecord]) -> "PercentileCache":
        collected: dict[str, list[float]] = {name: [] for name in PERCENTILE_METRICS}
        for city in cities:
            for name, getter in PERCENTILE_METRICS.items():
                value = getter(city)
                if value is not None:
                    collected[name].append(float(value))

        cache = cls(values={name: tuple(sorted(vals)) for name, vals in collected.items()})
        logger.debug(
            "Built percentile cache: %s",
            ", ".join(f"{name}={len(vals)}" for name, vals in cache.values.items()),
        )
        return cache

    def has(self, metric: str) -> bool:
        return bool(self.values.get(metric))

    def rank(self, metric: str, value: float, higher_is_better: bool = True) -> float:
        return percentile_score(value, self.values.get(metric, ()), higher_is_better)
