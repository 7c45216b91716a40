"""Central constants used across the greenhouse engine."""

from __future__ import annotations

from enum import StrEnum

__all__ = [
    "Priority",
    "Category",
    "CATEGORY_ORDER",
    "SUMMARY_ACTION_LIMIT",
    "TEMP_STRESS_RANGE",
    "TEMP_SEVERE_RANGE",
    "HUMIDITY_STRESS_RANGE",
    "HUMIDITY_SEVERE_RANGE",
    "VPD_STRESS_RANGE",
    "VPD_SEVERE_RANGE",
    "WIND_STRESS_KPH",
    "WIND_SEVERE_KPH",
    "HEAT_INDEX_MIN_F",
    "DEFAULT_GDD_BASE_C",
    "AIR_TEMP_RANGE_C",
]


class Priority(StrEnum):
    """Advisory priority ordered ``low < medium < high``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    def escalate(self, other: "Priority | None") -> "Priority":
        """Return the more severe of ``self`` and ``other``."""
        if other is None or other.rank <= self.rank:
            return self
        return other

    @classmethod
    def highest(cls, priorities) -> "Priority":
        """Return the most severe priority in ``priorities`` (``LOW`` if empty)."""
        result = cls.LOW
        for priority in priorities:
            result = result.escalate(priority)
        return result


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


class Category(StrEnum):
    """Advisory domains evaluated independently of each other."""

    DISEASE = "disease"
    IRRIGATION = "irrigation"
    VENTILATION = "ventilation"
    PEST = "pest"

    @property
    def label(self) -> str:
        """Human readable name used in summary lines."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.DISEASE: "disease prevention",
    Category.IRRIGATION: "irrigation",
    Category.VENTILATION: "ventilation",
    Category.PEST: "pest management",
}

# canonical evaluation and summary order
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.DISEASE,
    Category.IRRIGATION,
    Category.VENTILATION,
    Category.PEST,
)

# number of deduplicated actions appended after the high priority lines
SUMMARY_ACTION_LIMIT = 3

# plant stress bands, (low, high) inclusive of the comfortable range
TEMP_STRESS_RANGE = (10.0, 35.0)
TEMP_SEVERE_RANGE = (5.0, 40.0)
HUMIDITY_STRESS_RANGE = (30.0, 85.0)
HUMIDITY_SEVERE_RANGE = (20.0, 90.0)
VPD_STRESS_RANGE = (0.4, 1.6)
VPD_SEVERE_RANGE = (0.2, 2.0)
WIND_STRESS_KPH = 25.0
WIND_SEVERE_KPH = 40.0

# heat index regression only applies at or above this temperature
HEAT_INDEX_MIN_F = 80.0

DEFAULT_GDD_BASE_C = 10.0

# plausible air temperatures accepted in a snapshot
AIR_TEMP_RANGE_C = (-100.0, 100.0)
