from __future__ import annotations

"""Domain-specific exception hierarchy for the leaderboard service.

Identifier-state checks on the score endpoint are reported as result values
(see ``leaderboard.web.results``); the exceptions below cover failures that
escape a handler and are translated by the global exception handlers.
"""

from typing import Any

__all__ = [
    "DomainError",
    "PersistenceError",
    "ConfigurationError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = "Domain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class PersistenceError(DomainError):
    """Raised when the storage layer rejects a write."""

    error_code = "persistence_error"
    status_code = 500
    default_message = "Score could not be stored"


class ConfigurationError(DomainError):
    """Raised when server-side configuration is invalid or incomplete."""

    error_code = "configuration_error"
    status_code = 500
    default_message = "Invalid server configuration"
