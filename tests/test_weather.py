import dataclasses
import math

import pytest

from greenhouse_engine.exceptions import ValidationError
from greenhouse_engine.weather import (
    WeatherSnapshot,
    coerce_snapshot,
    parse_weather_snapshot,
)


def test_parse_weather_snapshot(payload):
    snap = parse_weather_snapshot(payload(temp=20, humidity=55))
    assert snap.temperature.celsius == 20.0
    assert snap.humidity == 55.0
    assert snap.wind.direction == "NW"
    assert snap.air_quality.us_epa_index == 1


def test_parse_accepts_provider_wrapper(payload):
    data = payload()
    data["condition"] = {"text": "Partly cloudy"}
    snap = parse_weather_snapshot({"location": "eldoret", "weather": data})
    assert snap == parse_weather_snapshot(payload())


def test_as_dict_round_trip_keys(payload):
    data = payload()
    assert parse_weather_snapshot(data).as_dict() == data


def test_from_dict_alias(payload):
    assert WeatherSnapshot.from_dict(payload()) == parse_weather_snapshot(payload())


def test_snapshot_is_immutable(payload):
    snap = parse_weather_snapshot(payload())
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.humidity = 10


def test_missing_field(payload):
    data = payload()
    del data["humidity"]
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(data)
    assert err.value.field == "humidity"


def test_missing_nested_field(payload):
    data = payload()
    del data["wind"]["speed_kph"]
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(data)
    assert err.value.field == "wind.speed_kph"


@pytest.mark.parametrize("value", ["60", None, True, [60]])
def test_non_numeric_humidity(payload, value):
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(payload(humidity=value))
    assert err.value.field == "humidity"


def test_nan_temperature(payload):
    data = payload()
    data["temperature"]["celsius"] = math.nan
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(data)
    assert err.value.field == "temperature.celsius"


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"humidity": 101}, "humidity"),
        ({"precip": -1}, "precipitation.mm"),
        ({"wind": -0.5}, "wind.speed_kph"),
        ({"epa": 7}, "airQuality.us-epa-index"),
        ({"epa": 2.0}, "airQuality.us-epa-index"),
        ({"uv": math.inf}, "uvIndex"),
    ],
)
def test_out_of_range_values(payload, overrides, field):
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(payload(**overrides))
    assert err.value.field == field


def test_wind_degree_excludes_360(payload):
    data = payload()
    data["wind"]["degree"] = 360
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(data)
    assert err.value.field == "wind.degree"


def test_non_mapping_payload():
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot([1, 2, 3])
    assert err.value.field == "<root>"


def test_coerce_revalidates_direct_construction(payload):
    snap = parse_weather_snapshot(payload())
    broken = dataclasses.replace(snap, humidity=math.nan)
    assert coerce_snapshot(snap) is snap
    with pytest.raises(ValidationError):
        coerce_snapshot(broken)


def test_validation_error_message(payload):
    with pytest.raises(ValueError, match="humidity"):
        parse_weather_snapshot(payload(humidity="wet"))


@pytest.mark.parametrize("temp", [-257.14, -260.0, 150.0])
def test_implausible_air_temperature_rejected(payload, temp):
    with pytest.raises(ValidationError) as err:
        parse_weather_snapshot(payload(temp=temp))
    assert err.value.field == "temperature.celsius"


@pytest.mark.parametrize("temp", [-100, 100])
def test_air_temperature_limits_inclusive(payload, temp):
    assert parse_weather_snapshot(payload(temp=temp)).temperature.celsius == temp
