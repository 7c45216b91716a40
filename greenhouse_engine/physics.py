"""Micro-climate physics: vapor pressure deficit, dew point, heat index and
growing degree days, plus a threshold based plant stress assessment.

All functions are pure. Humidity arguments are relative humidity in percent
and must lie in ``[0, 100]``; a :class:`~greenhouse_engine.exceptions.DomainError`
is raised otherwise.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping

from .constants import (
    DEFAULT_GDD_BASE_C,
    HEAT_INDEX_MIN_F,
    HUMIDITY_SEVERE_RANGE,
    HUMIDITY_STRESS_RANGE,
    TEMP_SEVERE_RANGE,
    TEMP_STRESS_RANGE,
    VPD_SEVERE_RANGE,
    VPD_STRESS_RANGE,
    WIND_SEVERE_KPH,
    WIND_STRESS_KPH,
    Priority,
)
from .exceptions import DomainError
from .texts import stress_recommendations
from .weather import WeatherSnapshot, coerce_snapshot

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "saturation_vapor_pressure",
    "calculate_vpd",
    "calculate_dew_point",
    "calculate_heat_index",
    "calculate_gdd",
    "accumulate_gdd",
    "describe_vpd",
    "StressAssessment",
    "assess_plant_stress",
]

RangeTuple = tuple[float, float]

_BUCK_POLE_C = -257.14


def _check_humidity(humidity_pct: float) -> None:
    if not 0 <= humidity_pct <= 100:
        raise DomainError("humidity_pct must be between 0 and 100")


def saturation_vapor_pressure(temp_c: float) -> float:
    """Return saturation vapor pressure (kPa) at ``temp_c`` using the Buck equation.

    The equation has a pole at -257.14 °C so colder inputs raise
    :class:`DomainError`.
    """
    if temp_c <= _BUCK_POLE_C:
        raise DomainError("temp_c must be above -257.14")
    return 0.61121 * math.exp((18.678 - temp_c / 234.5) * (temp_c / (257.14 + temp_c)))


def calculate_vpd(temp_c: float, humidity_pct: float) -> float:
    """Return Vapor Pressure Deficit (kPa) rounded to three decimals."""
    _check_humidity(humidity_pct)
    svp = saturation_vapor_pressure(temp_c)
    avp = svp * humidity_pct / 100
    return round(svp - avp, 3)


def calculate_dew_point(temp_c: float, humidity_pct: float) -> float:
    """Return dew point temperature (°C) using the Magnus formula.

    The logarithm of zero humidity is undefined so ``humidity_pct == 0``
    raises :class:`DomainError` instead of returning ``-inf``.
    """
    _check_humidity(humidity_pct)
    if humidity_pct == 0:
        raise DomainError("dew point is undefined at 0% relative humidity")

    a = 17.27
    b = 237.7
    alpha = ((a * temp_c) / (b + temp_c)) + math.log(humidity_pct / 100.0)
    dew_point = (b * alpha) / (a - alpha)
    return round(dew_point, 2)


def calculate_heat_index(temp_c: float, humidity_pct: float) -> float:
    """Return heat index temperature (°C) accounting for humidity.

    Below 80 °F the regression is not meaningful and ``temp_c`` is returned
    unchanged. Otherwise the Rothfusz regression is applied in Fahrenheit
    and the result converted back to Celsius.
    """
    _check_humidity(humidity_pct)

    temp_f = temp_c * 9 / 5 + 32
    if temp_f < HEAT_INDEX_MIN_F:
        return temp_c

    rh = humidity_pct
    hi_f = (
        -42.379
        + 2.04901523 * temp_f
        + 10.14333127 * rh
        - 0.22475541 * temp_f * rh
        - 0.00683783 * temp_f**2
        - 0.05481717 * rh**2
        + 0.00122874 * temp_f**2 * rh
        + 0.00085282 * temp_f * rh**2
        - 0.00000199 * temp_f**2 * rh**2
    )

    hi_c = (hi_f - 32) * 5 / 9
    return round(hi_c, 2)


def calculate_gdd(
    max_temp_c: float, min_temp_c: float, base_temp_c: float = DEFAULT_GDD_BASE_C
) -> float:
    """Return Growing Degree Days for a single day."""
    avg = (max_temp_c + min_temp_c) / 2
    return max(0.0, avg - base_temp_c)


def accumulate_gdd(
    temps: Iterable[tuple[float, float]], base_temp_c: float = DEFAULT_GDD_BASE_C
) -> float:
    """Return total GDD for a series of ``(max, min)`` temperature pairs."""
    return sum(calculate_gdd(t_max, t_min, base_temp_c) for t_max, t_min in temps)


def describe_vpd(vpd: float) -> str:
    """Return a short narrative explaining what ``vpd`` means for the crop."""

    low, high = VPD_STRESS_RANGE
    if vpd < low:
        return (
            f"VPD of {vpd:.2f} kPa is low: transpiration is suppressed and leaf "
            "surfaces stay wet, which favours fungal growth."
        )
    if vpd > high:
        return (
            f"VPD of {vpd:.2f} kPa is high: plants lose water faster than roots "
            "can replace it and stomata begin to close."
        )
    return (
        f"VPD of {vpd:.2f} kPa is within the {low:g}-{high:g} kPa band that "
        "supports steady transpiration and nutrient uptake."
    )


@dataclass(slots=True, frozen=True)
class StressAssessment:
    """Combined plant stress level with the factors that caused it."""

    level: Priority
    factors: tuple[str, ...]
    vpd: float
    dew_point: float
    recommendations: tuple[str, ...]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "factors": list(self.factors),
            "vpd": self.vpd,
            "dewPoint": self.dew_point,
            "recommendations": list(self.recommendations),
        }


def _band_level(value: float, stress: RangeTuple, severe: RangeTuple) -> Priority | None:
    """Return ``HIGH`` outside ``severe``, ``MEDIUM`` outside ``stress``, else ``None``."""

    if value < severe[0] or value > severe[1]:
        return Priority.HIGH
    if value < stress[0] or value > stress[1]:
        return Priority.MEDIUM
    return None


# factor name, text key, stress band, severe band
_STRESS_CHECKS: tuple[tuple[str, str, RangeTuple, RangeTuple], ...] = (
    ("Temperature stress", "temperature", TEMP_STRESS_RANGE, TEMP_SEVERE_RANGE),
    ("Humidity stress", "humidity", HUMIDITY_STRESS_RANGE, HUMIDITY_SEVERE_RANGE),
    ("VPD stress", "vpd", VPD_STRESS_RANGE, VPD_SEVERE_RANGE),
    ("Wind stress", "wind", (-math.inf, WIND_STRESS_KPH), (-math.inf, WIND_SEVERE_KPH)),
)


def assess_snapshot(snap: WeatherSnapshot) -> StressAssessment:
    """Return the stress assessment of an already validated ``snap``."""

    temp_c = snap.temperature.celsius
    vpd = calculate_vpd(temp_c, snap.humidity)
    dew_point = calculate_dew_point(temp_c, snap.humidity)

    values = {
        "temperature": temp_c,
        "humidity": snap.humidity,
        "vpd": vpd,
        "wind": snap.wind.speed_kph,
    }

    level = Priority.LOW
    factors: list[str] = []
    recommendations: list[str] = []
    for factor, key, stress, severe in _STRESS_CHECKS:
        found = _band_level(values[key], stress, severe)
        if found is None:
            continue
        level = level.escalate(found)
        factors.append(factor)
        recommendations.extend(stress_recommendations(key))

    if level is Priority.HIGH:
        recommendations.extend(stress_recommendations("severe"))

    _LOGGER.debug("Plant stress %s from factors %s", level.value, factors)
    return StressAssessment(
        level=level,
        factors=tuple(factors),
        vpd=vpd,
        dew_point=dew_point,
        recommendations=tuple(recommendations),
    )


def assess_plant_stress(snapshot: WeatherSnapshot | Mapping[str, Any]) -> StressAssessment:
    """Return the :class:`StressAssessment` for ``snapshot``.

    Temperature, humidity, VPD and wind are checked in that order. The level
    starts at ``low`` and is only ever escalated. Each triggered check adds
    its factor and the canonical recommendations for it; a ``high`` result
    appends the emergency recommendations last.
    """
    return assess_snapshot(coerce_snapshot(snapshot))
