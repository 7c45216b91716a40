"""Category advisors for disease, irrigation, ventilation and pest pressure.

Each advisor is an independent rule table evaluated against a validated
snapshot. Tables are evaluated top to bottom, text is appended in that
order and priority can only escalate from the category default.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping

from .constants import Category, Priority
from .rules import Rule, evaluate_rules
from .weather import WeatherSnapshot, coerce_snapshot

__all__ = [
    "CategoryAdvice",
    "DISEASE_RULES",
    "IRRIGATION_RULES",
    "VENTILATION_RULES",
    "PEST_RULES",
    "generate_disease_advice",
    "generate_irrigation_advice",
    "generate_ventilation_advice",
    "generate_pest_advice",
    "ADVISORS",
]


@dataclass(slots=True, frozen=True)
class CategoryAdvice:
    """Advice for one category.

    Fields that do not apply to a category are ``None`` and omitted from
    :meth:`as_dict`. ``physics`` is an optional narrative annotation.
    """

    category: Category
    priority: Priority
    risks: tuple[str, ...] | None = None
    actions: tuple[str, ...] | None = None
    recommendations: tuple[str, ...] | None = None
    settings: Mapping[str, str] | None = None
    timing: str | None = None
    physics: str | None = None

    @property
    def action_items(self) -> tuple[str, ...]:
        """Return actions followed by recommendations."""
        return (self.actions or ()) + (self.recommendations or ())

    def as_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "category": self.category.value,
            "priority": self.priority.value,
        }
        if self.risks is not None:
            result["risks"] = list(self.risks)
        if self.actions is not None:
            result["actions"] = list(self.actions)
        if self.recommendations is not None:
            result["recommendations"] = list(self.recommendations)
        if self.settings is not None:
            result["settings"] = dict(self.settings)
        if self.timing is not None:
            result["timing"] = self.timing
        if self.physics is not None:
            result["physics"] = self.physics
        return result


def _temp(snap: WeatherSnapshot) -> float:
    return snap.temperature.celsius


DISEASE_RULES: tuple[Rule, ...] = (
    Rule("high_humidity", lambda s: s.humidity > 80, Priority.MEDIUM),
    Rule("very_high_humidity", lambda s: s.humidity > 85),
    Rule("saturated_air", lambda s: s.humidity > 90, Priority.HIGH),
    Rule(
        "pathogen_window",
        lambda s: 15 <= _temp(s) <= 25 and s.humidity > 75,
        Priority.HIGH,
    ),
    Rule("precipitation", lambda s: s.precipitation.mm > 0),
)

IRRIGATION_RULES: tuple[Rule, ...] = (
    Rule("heat", lambda s: _temp(s) > 30, Priority.HIGH, timing="early morning and evening"),
    Rule("dry_air", lambda s: s.humidity < 40),
    Rule("wind", lambda s: s.wind.speed_kph > 15),
    Rule("rainfall", lambda s: s.precipitation.mm > 5),
)

# the three temperature rules are mutually exclusive
VENTILATION_RULES: tuple[Rule, ...] = (
    Rule(
        "warm",
        lambda s: _temp(s) > 25,
        Priority.HIGH,
        settings=MappingProxyType({"level": "high", "airChanges": "60-80/hour"}),
    ),
    Rule(
        "cool",
        lambda s: _temp(s) < 15,
        settings=MappingProxyType({"level": "low", "airChanges": "20-30/hour"}),
    ),
    Rule(
        "mild",
        lambda s: 15 <= _temp(s) <= 25,
        settings=MappingProxyType({"level": "medium", "airChanges": "40-50/hour"}),
    ),
    Rule("humid", lambda s: s.humidity > 80, Priority.HIGH),
    Rule("wind", lambda s: s.wind.speed_kph > 20),
)

# the spider mite rule ("hot") adds text only and never raises priority
PEST_RULES: tuple[Rule, ...] = (
    Rule("warm_humid", lambda s: _temp(s) > 20 and s.humidity > 60, Priority.MEDIUM),
    Rule("hot", lambda s: _temp(s) > 30),
    Rule("calm", lambda s: s.wind.speed_kph < 5),
)


def _disease_advice(snap: WeatherSnapshot) -> CategoryAdvice:
    outcome = evaluate_rules(Category.DISEASE.value, DISEASE_RULES, snap, Priority.LOW)
    return CategoryAdvice(
        category=Category.DISEASE,
        priority=outcome.priority,
        risks=outcome.text("risks"),
        actions=outcome.text("actions"),
    )


def _irrigation_advice(snap: WeatherSnapshot) -> CategoryAdvice:
    outcome = evaluate_rules(
        Category.IRRIGATION.value, IRRIGATION_RULES, snap, Priority.MEDIUM, "morning"
    )
    return CategoryAdvice(
        category=Category.IRRIGATION,
        priority=outcome.priority,
        recommendations=outcome.text("recommendations"),
        timing=outcome.timing,
    )


def _ventilation_advice(snap: WeatherSnapshot) -> CategoryAdvice:
    outcome = evaluate_rules(
        Category.VENTILATION.value, VENTILATION_RULES, snap, Priority.MEDIUM
    )
    return CategoryAdvice(
        category=Category.VENTILATION,
        priority=outcome.priority,
        actions=outcome.text("actions"),
        settings=outcome.settings,
    )


def _pest_advice(snap: WeatherSnapshot) -> CategoryAdvice:
    outcome = evaluate_rules(Category.PEST.value, PEST_RULES, snap, Priority.LOW)
    return CategoryAdvice(
        category=Category.PEST,
        priority=outcome.priority,
        risks=outcome.text("risks"),
        actions=outcome.text("actions"),
    )


def generate_disease_advice(snapshot: WeatherSnapshot | Mapping[str, Any]) -> CategoryAdvice:
    """Return disease prevention advice for ``snapshot``."""
    return _disease_advice(coerce_snapshot(snapshot))


def generate_irrigation_advice(snapshot: WeatherSnapshot | Mapping[str, Any]) -> CategoryAdvice:
    """Return irrigation advice including the recommended watering timing."""
    return _irrigation_advice(coerce_snapshot(snapshot))


def generate_ventilation_advice(snapshot: WeatherSnapshot | Mapping[str, Any]) -> CategoryAdvice:
    """Return ventilation advice with the suggested ventilation settings."""
    return _ventilation_advice(coerce_snapshot(snapshot))


def generate_pest_advice(snapshot: WeatherSnapshot | Mapping[str, Any]) -> CategoryAdvice:
    """Return pest management advice for ``snapshot``."""
    return _pest_advice(coerce_snapshot(snapshot))


# keyed builders for snapshots the caller has already validated
ADVISORS: Mapping[Category, Callable[[WeatherSnapshot], CategoryAdvice]] = MappingProxyType(
    {
        Category.DISEASE: _disease_advice,
        Category.IRRIGATION: _irrigation_advice,
        Category.VENTILATION: _ventilation_advice,
        Category.PEST: _pest_advice,
    }
)
