"""Weighted threshold risk score for a weather snapshot."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, NamedTuple

from .weather import WeatherSnapshot, coerce_snapshot

_LOGGER = logging.getLogger(__name__)

__all__ = ["RiskFactor", "RISK_FACTORS", "MAX_RISK_SCORE", "explain_risk_score", "calculate_risk_score"]

MAX_RISK_SCORE = 100


class RiskFactor(NamedTuple):
    name: str
    weight: int
    when: Callable[[WeatherSnapshot], bool]


RISK_FACTORS: tuple[RiskFactor, ...] = (
    RiskFactor(
        "temperature",
        20,
        lambda s: s.temperature.celsius < 10 or s.temperature.celsius > 35,
    ),
    RiskFactor("humidity", 25, lambda s: s.humidity > 85 or s.humidity < 30),
    RiskFactor("wind", 15, lambda s: s.wind.speed_kph > 25),
    RiskFactor("precipitation", 10, lambda s: s.precipitation.mm > 10),
    RiskFactor("uv", 10, lambda s: s.uv_index > 8),
    RiskFactor("air_quality", 20, lambda s: s.air_quality.us_epa_index > 2),
)


def explain_risk_score(snapshot: WeatherSnapshot | Mapping[str, Any]) -> list[str]:
    """Return names of the risk factors triggered by ``snapshot`` in order."""

    snap = coerce_snapshot(snapshot)
    return [factor.name for factor in RISK_FACTORS if factor.when(snap)]


def score_snapshot(snap: WeatherSnapshot) -> int:
    """Return the risk score of an already validated ``snap``."""

    score = 0
    for factor in RISK_FACTORS:
        if factor.when(snap):
            score += factor.weight
            _LOGGER.debug("Risk factor %s adds %d", factor.name, factor.weight)
    return min(MAX_RISK_SCORE, score)


def calculate_risk_score(snapshot: WeatherSnapshot | Mapping[str, Any]) -> int:
    """Return a 0-100 environmental risk score for ``snapshot``."""
    return score_snapshot(coerce_snapshot(snapshot))
