import pytest

from greenhouse_engine.texts import clear_text_cache


def build_payload(
    temp=22.0,
    humidity=60.0,
    wind=10.0,
    precip=0.0,
    uv=5.0,
    epa=1,
    pm2_5=8.0,
):
    return {
        "temperature": {
            "celsius": temp,
            "fahrenheit": temp * 9 / 5 + 32,
            "feelsLike": temp,
        },
        "humidity": humidity,
        "precipitation": {"mm": precip},
        "wind": {"speed_kph": wind, "direction": "NW", "degree": 315.0},
        "visibility": 10.0,
        "pressure": 1013.0,
        "cloudCover": 40.0,
        "uvIndex": uv,
        "airQuality": {"us-epa-index": epa, "pm2_5": pm2_5},
    }


@pytest.fixture
def payload():
    """Return a factory for provider style snapshot payloads."""
    return build_payload


@pytest.fixture
def clean_texts():
    clear_text_cache()
    yield
    clear_text_cache()
