"""Exceptions raised by payslip engine services."""

from __future__ import annotations

from typing import Any


class PayslipEngineError(Exception):
    """Base class for engine errors surfaced to callers."""


class NotFoundError(PayslipEngineError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConflictError(PayslipEngineError):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(self, entity: str, key: Any, reason: str | None = None):
        self.entity = entity
        self.key = key
        self.reason = reason
        msg = f"{entity} already exists: {key}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class InvalidStateError(PayslipEngineError):
    """Raised when stored configuration does not allow the operation."""

    def __init__(self, reason: str, missing: str | None = None):
        self.reason = reason
        self.missing = missing
        super().__init__(reason)
