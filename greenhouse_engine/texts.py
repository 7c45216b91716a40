"""Read-only advisory text tables keyed by rule or stress factor.

Every advisory string the engine emits is defined here. The built-in tables
can be reworded per deployment by dropping an ``advisory_texts.json`` (or
``.yaml``) file into one of the dataset directories resolved by
:mod:`greenhouse_engine.utils`; entries are merged over the defaults and
malformed entries are ignored with a warning.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .utils import clear_dataset_cache, load_dataset, normalize_key

_LOGGER = logging.getLogger(__name__)

TEXT_FILE = "advisory_texts.json"

__all__ = [
    "TEXT_FILE",
    "DEFAULT_TEXTS",
    "advisory_texts",
    "stress_recommendations",
    "clear_text_cache",
]

DEFAULT_TEXTS: Dict[str, Dict[str, Dict[str, list[str]]]] = {
    "stress": {
        "temperature": {
            "recommendations": [
                "Adjust heating/cooling systems",
                "Consider thermal mass modifications",
            ],
        },
        "humidity": {
            "recommendations": [
                "Adjust ventilation rates",
                "Monitor irrigation frequency",
            ],
        },
        "vpd": {
            "recommendations": [
                "Balance temperature and humidity",
                "Optimize transpiration conditions",
            ],
        },
        "wind": {
            "recommendations": [
                "Install windbreaks or barriers",
                "Reduce ventilation if possible",
            ],
        },
        "severe": {
            "recommendations": [
                "Implement emergency protocols",
                "Monitor plants closely for damage",
            ],
        },
    },
    "disease": {
        "high_humidity": {
            "risks": ["Fungal disease development"],
            "actions": [
                "Increase ventilation immediately",
                "Reduce watering frequency",
            ],
        },
        "very_high_humidity": {
            "actions": [
                "Apply preventive fungicide spray",
                "Install dehumidification systems",
            ],
        },
        "pathogen_window": {
            "risks": ["Optimal conditions for pathogen growth"],
            "actions": [
                "Monitor for early disease symptoms",
                "Implement strict sanitation protocols",
            ],
        },
        "precipitation": {
            "risks": ["Increased moisture promoting disease"],
            "actions": [
                "Ensure proper drainage",
                "Avoid overhead watering",
            ],
        },
    },
    "irrigation": {
        "heat": {
            "recommendations": [
                "Increase watering frequency",
                "Consider misting systems",
            ],
        },
        "dry_air": {
            "recommendations": [
                "Increase irrigation to compensate for high evaporation",
                "Use mulching to retain moisture",
            ],
        },
        "wind": {
            "recommendations": [
                "Increase watering due to wind-induced water loss",
                "Protect plants from drying winds",
            ],
        },
        "rainfall": {
            "recommendations": [
                "Reduce irrigation for 1-2 days",
                "Monitor soil moisture levels",
            ],
        },
    },
    "ventilation": {
        "warm": {
            "actions": [
                "Maximize natural ventilation",
                "Activate exhaust fans",
            ],
        },
        "cool": {
            "actions": [
                "Minimize heat loss",
                "Use controlled ventilation",
            ],
        },
        "humid": {
            "actions": [
                "Increase ventilation to reduce humidity",
                "Use dehumidification if available",
            ],
        },
        "wind": {
            "actions": [
                "Reduce ventilation openings to prevent plant damage",
                "Monitor for cold drafts",
            ],
        },
    },
    "pest": {
        "warm_humid": {
            "risks": ["Increased insect activity"],
            "actions": [
                "Monitor for pest populations",
                "Consider beneficial insect releases",
            ],
        },
        "hot": {
            "risks": ["Spider mite proliferation"],
            "actions": [
                "Increase humidity to deter spider mites",
                "Implement regular misting",
            ],
        },
        "calm": {
            "risks": ["Reduced natural pest dispersal"],
            "actions": [
                "Increase air circulation",
                "Monitor for pest concentration",
            ],
        },
    },
}


def _valid_strings(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _merge_overrides(
    base: Dict[str, Dict[str, Dict[str, list[str]]]], overrides: Mapping[str, Any]
) -> None:
    """Merge well formed ``overrides`` into ``base`` in place."""

    for section, rules in overrides.items():
        section_key = normalize_key(section)
        if section_key not in base or not isinstance(rules, Mapping):
            _LOGGER.warning("Ignoring unknown advisory text section %r", section)
            continue
        for rule, fields in rules.items():
            rule_key = normalize_key(rule)
            if rule_key not in base[section_key] or not isinstance(fields, Mapping):
                _LOGGER.warning("Ignoring unknown advisory text %s.%s", section, rule)
                continue
            for field, value in fields.items():
                target = base[section_key][rule_key]
                if field not in target or not _valid_strings(value):
                    _LOGGER.warning(
                        "Ignoring malformed advisory text %s.%s.%s", section, rule, field
                    )
                    continue
                target[field] = list(value)


def _freeze(tables: Mapping[str, Mapping[str, Mapping[str, list[str]]]]):
    return MappingProxyType(
        {
            section: MappingProxyType(
                {
                    rule: MappingProxyType({k: tuple(v) for k, v in fields.items()})
                    for rule, fields in rules.items()
                }
            )
            for section, rules in tables.items()
        }
    )


@lru_cache(maxsize=1)
def advisory_texts() -> Mapping[str, Mapping[str, Mapping[str, tuple[str, ...]]]]:
    """Return the read-only advisory text tables with dataset overrides applied."""

    tables = {
        section: {rule: {k: list(v) for k, v in fields.items()} for rule, fields in rules.items()}
        for section, rules in DEFAULT_TEXTS.items()
    }
    overrides = load_dataset(TEXT_FILE)
    if isinstance(overrides, Mapping):
        _merge_overrides(tables, overrides)
    elif overrides:
        _LOGGER.warning("Ignoring %s: expected a mapping", TEXT_FILE)
    return _freeze(tables)


def stress_recommendations(factor: str) -> tuple[str, ...]:
    """Return canonical recommendations associated with a stress ``factor``."""

    return advisory_texts()["stress"][normalize_key(factor)]["recommendations"]


def clear_text_cache() -> None:
    """Drop cached tables so dataset changes are picked up on next access."""

    advisory_texts.cache_clear()
    clear_dataset_cache()
