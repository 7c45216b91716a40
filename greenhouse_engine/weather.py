"""Weather snapshot value objects and their validation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

import voluptuous as vol

from .constants import AIR_TEMP_RANGE_C
from .exceptions import ValidationError

__all__ = [
    "Temperature",
    "Precipitation",
    "Wind",
    "AirQuality",
    "WeatherSnapshot",
    "SNAPSHOT_SCHEMA",
    "parse_weather_snapshot",
    "coerce_snapshot",
]


def _finite_number(value: Any) -> float:
    """Return ``value`` as float if it is a finite real number."""

    # bool is an int subclass but never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise vol.Invalid(f"expected a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise vol.Invalid("expected a finite number")
    return float(value)


def _integer(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise vol.Invalid(f"expected an integer, got {type(value).__name__}")
    return value


FINITE = _finite_number
NON_NEGATIVE = vol.All(_finite_number, vol.Range(min=0))
PERCENT = vol.All(_finite_number, vol.Range(min=0, max=100))
AIR_TEMP_C = vol.All(
    _finite_number, vol.Range(min=AIR_TEMP_RANGE_C[0], max=AIR_TEMP_RANGE_C[1])
)

SNAPSHOT_SCHEMA = vol.Schema(
    {
        vol.Required("temperature"): {
            vol.Required("celsius"): AIR_TEMP_C,
            vol.Required("fahrenheit"): FINITE,
            vol.Required("feelsLike"): FINITE,
        },
        vol.Required("humidity"): PERCENT,
        vol.Required("precipitation"): {vol.Required("mm"): NON_NEGATIVE},
        vol.Required("wind"): {
            vol.Required("speed_kph"): NON_NEGATIVE,
            vol.Required("direction"): str,
            vol.Required("degree"): vol.All(
                _finite_number, vol.Range(min=0, max=360, max_included=False)
            ),
        },
        vol.Required("visibility"): FINITE,
        vol.Required("pressure"): FINITE,
        vol.Required("cloudCover"): PERCENT,
        vol.Required("uvIndex"): NON_NEGATIVE,
        vol.Required("airQuality"): {
            vol.Required("us-epa-index"): vol.All(_integer, vol.Range(min=1, max=6)),
            vol.Required("pm2_5"): NON_NEGATIVE,
        },
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(slots=True, frozen=True)
class Temperature:
    celsius: float
    fahrenheit: float
    feels_like: float


@dataclass(slots=True, frozen=True)
class Precipitation:
    mm: float


@dataclass(slots=True, frozen=True)
class Wind:
    speed_kph: float
    direction: str
    degree: float


@dataclass(slots=True, frozen=True)
class AirQuality:
    us_epa_index: int
    pm2_5: float


@dataclass(slots=True, frozen=True)
class WeatherSnapshot:
    """Validated environmental snapshot for a single greenhouse site."""

    temperature: Temperature
    humidity: float
    precipitation: Precipitation
    wind: Wind
    visibility: float
    pressure: float
    cloud_cover: float
    uv_index: float
    air_quality: AirQuality

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WeatherSnapshot":
        return parse_weather_snapshot(payload)

    def as_dict(self) -> Dict[str, Any]:
        """Return the snapshot using the weather provider's field names."""
        return {
            "temperature": {
                "celsius": self.temperature.celsius,
                "fahrenheit": self.temperature.fahrenheit,
                "feelsLike": self.temperature.feels_like,
            },
            "humidity": self.humidity,
            "precipitation": {"mm": self.precipitation.mm},
            "wind": {
                "speed_kph": self.wind.speed_kph,
                "direction": self.wind.direction,
                "degree": self.wind.degree,
            },
            "visibility": self.visibility,
            "pressure": self.pressure,
            "cloudCover": self.cloud_cover,
            "uvIndex": self.uv_index,
            "airQuality": {
                "us-epa-index": self.air_quality.us_epa_index,
                "pm2_5": self.air_quality.pm2_5,
            },
        }


def _validate(payload: Any) -> Dict[str, Any]:
    """Run :data:`SNAPSHOT_SCHEMA` translating errors to :class:`ValidationError`."""

    if not isinstance(payload, Mapping):
        raise ValidationError("<root>", "expected an object")
    try:
        return SNAPSHOT_SCHEMA(dict(payload))
    except vol.MultipleInvalid as err:
        first = err.errors[0]
        field = ".".join(str(part) for part in first.path) or "<root>"
        raise ValidationError(field, first.error_message) from err
    except vol.Invalid as err:
        field = ".".join(str(part) for part in err.path) or "<root>"
        raise ValidationError(field, err.error_message) from err


def parse_weather_snapshot(payload: Mapping[str, Any]) -> WeatherSnapshot:
    """Return a :class:`WeatherSnapshot` built from a provider ``payload``.

    ``payload`` may be the bare weather mapping or the provider response
    wrapping it under a ``"weather"`` key. Unknown keys such as ``condition``
    are ignored. A :class:`ValidationError` naming the offending field is
    raised for missing, non-numeric, non-finite or out of range values.
    """

    if isinstance(payload, Mapping) and isinstance(payload.get("weather"), Mapping):
        payload = payload["weather"]

    data = _validate(payload)
    temp = data["temperature"]
    wind = data["wind"]
    air = data["airQuality"]
    return WeatherSnapshot(
        temperature=Temperature(
            celsius=temp["celsius"],
            fahrenheit=temp["fahrenheit"],
            feels_like=temp["feelsLike"],
        ),
        humidity=data["humidity"],
        precipitation=Precipitation(mm=data["precipitation"]["mm"]),
        wind=Wind(
            speed_kph=wind["speed_kph"],
            direction=wind["direction"],
            degree=wind["degree"],
        ),
        visibility=data["visibility"],
        pressure=data["pressure"],
        cloud_cover=data["cloudCover"],
        uv_index=data["uvIndex"],
        air_quality=AirQuality(us_epa_index=air["us-epa-index"], pm2_5=air["pm2_5"]),
    )


def coerce_snapshot(value: WeatherSnapshot | Mapping[str, Any]) -> WeatherSnapshot:
    """Return a validated snapshot from a :class:`WeatherSnapshot` or mapping.

    Snapshots constructed directly are re-validated so NaN or out of range
    values never reach the rule tables.
    """

    if isinstance(value, WeatherSnapshot):
        _validate(value.as_dict())
        return value
    return parse_weather_snapshot(value)
