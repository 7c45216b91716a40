"""Convenient access to greenhouse advisory engine functionality."""

from __future__ import annotations

from . import advice, advisors, physics, risk, weather
from .advice import *  # noqa: F401,F403
from .advisors import *  # noqa: F401,F403
from .constants import CATEGORY_ORDER, Category, Priority
from .exceptions import DomainError, ValidationError
from .physics import *  # noqa: F401,F403
from .risk import *  # noqa: F401,F403
from .texts import clear_text_cache
from .weather import *  # noqa: F401,F403

__all__ = sorted(
    set(advice.__all__)
    | set(advisors.__all__)
    | set(physics.__all__)
    | set(risk.__all__)
    | set(weather.__all__)
    | {
        "CATEGORY_ORDER",
        "Category",
        "Priority",
        "DomainError",
        "ValidationError",
        "clear_text_cache",
    }
)
