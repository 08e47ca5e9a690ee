from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``field`` names the offending input (``"rate"``, ``"name"``, ...).
    """

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        self.message = message or f"invalid {field}"
        super().__init__(f"{field}: {self.message}")


class MergeError(DomainError):
    """Raised when a merge precondition is violated.

    ``reason`` is one of ``"min-two-required"`` or ``"unresolved-source"``.
    """

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        self.message = message or reason
        super().__init__(f"{reason}: {self.message}")


class NotFoundError(DomainError):
    """Raised when a referenced invoice does not exist."""


class PersistenceError(DomainError):
    """Raised when the invoice store fails. Never retried by this package."""
