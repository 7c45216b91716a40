"""Aggregate category advice into a single comprehensive advisory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

from .advisors import ADVISORS, CategoryAdvice
from .constants import CATEGORY_ORDER, SUMMARY_ACTION_LIMIT, Category, Priority
from .physics import StressAssessment, assess_snapshot, calculate_vpd, describe_vpd
from .risk import score_snapshot
from .weather import WeatherSnapshot, coerce_snapshot

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "ComprehensiveAdvice",
    "determine_overall_priority",
    "summarize_advice",
    "generate_comprehensive_advice",
]


@dataclass(slots=True, frozen=True)
class ComprehensiveAdvice:
    """Prioritized advisory across all categories for one snapshot."""

    timestamp: datetime
    overall_priority: Priority
    categories: Mapping[Category, CategoryAdvice]
    summary: tuple[str, ...]
    risk_score: int
    stress: StressAssessment | None = None

    def as_dict(self) -> Dict[str, Any]:
        """Return the advisory as a JSON serializable dictionary."""
        result: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "overallPriority": self.overall_priority.value,
            "categories": {
                category.value: advice.as_dict()
                for category, advice in self.categories.items()
            },
            "summary": list(self.summary),
            "riskScore": self.risk_score,
        }
        if self.stress is not None:
            result["stress"] = self.stress.as_dict()
        return result


def determine_overall_priority(advices: Iterable[CategoryAdvice]) -> Priority:
    """Return ``high`` if any advice is high, else ``medium`` if any is medium."""
    return Priority.highest(advice.priority for advice in advices)


def summarize_advice(advices: Iterable[CategoryAdvice]) -> tuple[str, ...]:
    """Return summary lines for ``advices`` given in canonical category order.

    High priority categories are announced first, followed by at most
    :data:`SUMMARY_ACTION_LIMIT` distinct action strings in first-seen order.
    """

    ordered = list(advices)
    summary = [
        f"HIGH PRIORITY: {advice.category.label.upper()}"
        for advice in ordered
        if advice.priority is Priority.HIGH
    ]
    # dict preserves insertion order so this dedupes without reordering
    unique = dict.fromkeys(item for advice in ordered for item in advice.action_items)
    summary.extend(list(unique)[:SUMMARY_ACTION_LIMIT])
    return tuple(summary)


def generate_comprehensive_advice(
    snapshot: WeatherSnapshot | Mapping[str, Any],
    *,
    include_stress: bool = False,
    now: datetime | None = None,
) -> ComprehensiveAdvice:
    """Return the :class:`ComprehensiveAdvice` for ``snapshot``.

    The four category advisors run independently. The irrigation advice is
    annotated with a narrative explanation of the current VPD. When
    ``include_stress`` is set the plant stress assessment is attached; it
    does not influence the overall priority or the summary. The snapshot is
    validated once and shared by every advisor.
    """

    snap = coerce_snapshot(snapshot)
    timestamp = now or datetime.now(UTC)

    categories = {category: ADVISORS[category](snap) for category in CATEGORY_ORDER}
    vpd = calculate_vpd(snap.temperature.celsius, snap.humidity)
    categories[Category.IRRIGATION] = replace(
        categories[Category.IRRIGATION], physics=describe_vpd(vpd)
    )

    ordered = [categories[category] for category in CATEGORY_ORDER]
    overall = determine_overall_priority(ordered)
    high = [advice.category.value for advice in ordered if advice.priority is Priority.HIGH]
    _LOGGER.info(
        "Greenhouse advisory: overall %s, high priority categories %s",
        overall.value,
        high or "none",
    )

    return ComprehensiveAdvice(
        timestamp=timestamp,
        overall_priority=overall,
        categories=MappingProxyType(categories),
        summary=summarize_advice(ordered),
        risk_score=score_snapshot(snap),
        stress=assess_snapshot(snap) if include_stress else None,
    )
