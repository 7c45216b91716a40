from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import pytest

from greenhouse_engine import weather
from greenhouse_engine.advice import (
    determine_overall_priority,
    generate_comprehensive_advice,
    summarize_advice,
)
from greenhouse_engine.advisors import CategoryAdvice
from greenhouse_engine.constants import CATEGORY_ORDER, Category, Priority
from greenhouse_engine.exceptions import ValidationError
from greenhouse_engine.physics import assess_plant_stress, calculate_vpd, describe_vpd
from greenhouse_engine.weather import parse_weather_snapshot

FIXED = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _advice(category, priority, actions=(), recommendations=None):
    return CategoryAdvice(
        category=category,
        priority=priority,
        actions=tuple(actions),
        recommendations=recommendations,
    )


def test_calm_hot_day(payload):
    result = generate_comprehensive_advice(payload(temp=28, humidity=50, wind=3), now=FIXED)
    assert result.overall_priority == "high"
    assert list(result.categories) == list(CATEGORY_ORDER)
    vent = result.categories[Category.VENTILATION]
    assert vent.settings == {"level": "high", "airChanges": "60-80/hour"}
    pest = result.categories[Category.PEST]
    assert "Reduced natural pest dispersal" in pest.risks
    assert result.summary == (
        "HIGH PRIORITY: VENTILATION",
        "Maximize natural ventilation",
        "Activate exhaust fans",
        "Increase air circulation",
    )


def test_high_humidity_summary(payload):
    result = generate_comprehensive_advice(payload(temp=20, humidity=92), now=FIXED)
    assert result.summary == (
        "HIGH PRIORITY: DISEASE PREVENTION",
        "HIGH PRIORITY: VENTILATION",
        "Increase ventilation immediately",
        "Reduce watering frequency",
        "Apply preventive fungicide spray",
    )


def test_overall_priority_medium_by_default(payload):
    result = generate_comprehensive_advice(payload(), now=FIXED)
    # irrigation and ventilation default to medium
    assert result.overall_priority == "medium"
    assert not any(line.startswith("HIGH PRIORITY") for line in result.summary)


def test_determine_overall_priority():
    assert determine_overall_priority([]) == Priority.LOW
    assert determine_overall_priority(
        [_advice(Category.DISEASE, Priority.LOW), _advice(Category.PEST, Priority.LOW)]
    ) == Priority.LOW
    assert determine_overall_priority(
        [_advice(Category.DISEASE, Priority.MEDIUM), _advice(Category.PEST, Priority.LOW)]
    ) == Priority.MEDIUM
    assert determine_overall_priority(
        [_advice(Category.DISEASE, Priority.MEDIUM), _advice(Category.PEST, Priority.HIGH)]
    ) == Priority.HIGH


def test_summary_deduplicates_in_first_seen_order():
    advices = [
        _advice(Category.DISEASE, Priority.LOW, ["vent", "drain"]),
        _advice(Category.IRRIGATION, Priority.MEDIUM, recommendations=("drain", "water")),
        _advice(Category.VENTILATION, Priority.HIGH, ["vent", "fans"]),
        _advice(Category.PEST, Priority.HIGH, ["scout"]),
    ]
    assert summarize_advice(advices) == (
        "HIGH PRIORITY: VENTILATION",
        "HIGH PRIORITY: PEST MANAGEMENT",
        "vent",
        "drain",
        "water",
    )


def test_summary_cap(payload):
    result = generate_comprehensive_advice(
        payload(temp=32, humidity=92, wind=25, precip=12), now=FIXED
    )
    actions = [line for line in result.summary if not line.startswith("HIGH PRIORITY")]
    assert len(actions) <= 3
    assert len(actions) == len(set(actions))


def test_deterministic_output(payload):
    data = payload(temp=31, humidity=82, wind=4, precip=2)
    first = generate_comprehensive_advice(data).as_dict()
    second = generate_comprehensive_advice(data).as_dict()
    first.pop("timestamp")
    second.pop("timestamp")
    assert first == second


def test_timestamp_captured(payload):
    before = datetime.now(UTC)
    result = generate_comprehensive_advice(payload())
    assert before <= result.timestamp <= datetime.now(UTC)
    assert generate_comprehensive_advice(payload(), now=FIXED).timestamp == FIXED


def test_physics_annotation_on_irrigation(payload):
    result = generate_comprehensive_advice(payload(), now=FIXED)
    irrigation = result.categories[Category.IRRIGATION]
    assert irrigation.physics == describe_vpd(calculate_vpd(22, 60))
    assert result.categories[Category.DISEASE].physics is None


def test_risk_score_and_optional_stress(payload):
    data = payload(temp=8, humidity=25, wind=2, uv=2)
    result = generate_comprehensive_advice(data, now=FIXED)
    assert result.risk_score == 45
    assert result.stress is None
    with_stress = generate_comprehensive_advice(data, include_stress=True, now=FIXED)
    assert with_stress.stress == assess_plant_stress(data)
    assert with_stress.summary == result.summary
    assert with_stress.overall_priority == result.overall_priority


def test_as_dict_contract(payload):
    data = generate_comprehensive_advice(
        payload(temp=28, humidity=50, wind=3), include_stress=True, now=FIXED
    ).as_dict()
    assert data["timestamp"] == "2024-06-01T12:00:00+00:00"
    assert data["overallPriority"] == "high"
    assert list(data["categories"]) == ["disease", "irrigation", "ventilation", "pest"]
    assert data["categories"]["ventilation"]["settings"]["level"] == "high"
    assert "physics" in data["categories"]["irrigation"]
    assert data["riskScore"] == 0
    assert data["stress"]["level"] in {"low", "medium", "high"}


def test_concurrent_calls_are_independent(payload):
    inputs = [payload(temp=t, humidity=h) for t in (8, 20, 28, 33) for h in (35, 70, 92)]
    expected = [generate_comprehensive_advice(d, now=FIXED) for d in inputs]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda d: generate_comprehensive_advice(d, now=FIXED), inputs))
    assert results == expected


def test_info_log(payload, caplog):
    with caplog.at_level("INFO", logger="greenhouse_engine.advice"):
        generate_comprehensive_advice(payload(temp=28, humidity=50, wind=3), now=FIXED)
    assert "overall high" in caplog.text


@pytest.mark.parametrize("temp", [-257.14, -260.0])
def test_implausible_temperature_is_validation_error(payload, temp):
    with pytest.raises(ValidationError) as err:
        generate_comprehensive_advice(payload(temp=temp), now=FIXED)
    assert err.value.field == "temperature.celsius"


@pytest.mark.parametrize("as_snapshot", [False, True])
def test_snapshot_validated_once(payload, monkeypatch, as_snapshot):
    data = payload(temp=8, humidity=25)
    snapshot = parse_weather_snapshot(data) if as_snapshot else data
    calls = []
    original = weather._validate

    def counting(value):
        calls.append(value)
        return original(value)

    monkeypatch.setattr(weather, "_validate", counting)
    result = generate_comprehensive_advice(snapshot, include_stress=True, now=FIXED)
    assert len(calls) == 1
    assert result.risk_score == 45
