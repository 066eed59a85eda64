"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


InvalidInput = ValidationError


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class NoPrizesAvailable(AppError):
    """No prize with remaining stock (and positive weight) can be drawn."""

    def __init__(self, message: str = "No prizes available", details: Any | None = None) -> None:
        super().__init__(code="no_prizes_available", message=message, status_code=400, details=details)


class PersistenceFailure(AppError):
    """The draw transaction failed and was rolled back. Safe to retry."""

    def __init__(self, message: str = "Failed to draw lottery", details: Any | None = None) -> None:
        super().__init__(code="draw_failed", message=message, status_code=500, details=details)


DrawFailed = PersistenceFailure


class ConnectionExhaustion(AppError):
    """No pooled connection became available in time."""

    def __init__(self, message: str = "Database is busy, try again later", details: Any | None = None) -> None:
        super().__init__(code="connection_exhausted", message=message, status_code=503, details=details)
