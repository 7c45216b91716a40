"""Tagged threshold rules and the monotonic rule evaluator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from .constants import Priority
from .texts import advisory_texts
from .weather import WeatherSnapshot

_LOGGER = logging.getLogger(__name__)

__all__ = ["Rule", "RuleOutcome", "evaluate_rules"]

Predicate = Callable[[WeatherSnapshot], bool]


@dataclass(slots=True, frozen=True)
class Rule:
    """Single threshold check within a category rule table.

    ``name`` doubles as the key of the rule's entry in the advisory text
    tables; rules without an entry only affect priority or settings.
    ``escalate`` may raise the running priority but never lowers it.
    """

    name: str
    when: Predicate
    escalate: Priority | None = None
    settings: Mapping[str, str] | None = None
    timing: str | None = None


@dataclass(slots=True, frozen=True)
class RuleOutcome:
    """Accumulated effect of evaluating a rule table against a snapshot."""

    priority: Priority
    fired: tuple[str, ...]
    texts: Mapping[str, tuple[str, ...]]
    settings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timing: str | None = None

    def text(self, name: str) -> tuple[str, ...]:
        return self.texts.get(name, ())


def evaluate_rules(
    section: str,
    rules: Iterable[Rule],
    snapshot: WeatherSnapshot,
    default_priority: Priority,
    default_timing: str | None = None,
) -> RuleOutcome:
    """Return the :class:`RuleOutcome` of ``rules`` evaluated in order.

    Text entries are appended in rule order. Later settings and timing
    values override earlier ones while priority only escalates.
    """

    table = advisory_texts()[section]
    priority = default_priority
    fired: list[str] = []
    collected: dict[str, list[str]] = {}
    settings: dict[str, str] = {}
    timing = default_timing

    for rule in rules:
        if not rule.when(snapshot):
            continue
        fired.append(rule.name)
        priority = priority.escalate(rule.escalate)
        for name, values in table.get(rule.name, {}).items():
            collected.setdefault(name, []).extend(values)
        if rule.settings:
            settings.update(rule.settings)
        if rule.timing is not None:
            timing = rule.timing

    _LOGGER.debug("%s rules fired: %s -> %s", section, fired, priority.value)
    return RuleOutcome(
        priority=priority,
        fired=tuple(fired),
        texts=MappingProxyType({k: tuple(v) for k, v in collected.items()}),
        settings=MappingProxyType(settings),
        timing=timing,
    )
