"""Exceptions raised by the greenhouse advisory engine."""

from __future__ import annotations

__all__ = ["ValidationError", "DomainError"]


class ValidationError(ValueError):
    """Raised when a weather snapshot is missing or has an invalid field."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class DomainError(ValueError):
    """Raised when a physical formula is evaluated outside its domain."""
