"""
Application error taxonomy.

Every error raised by a route, dependency or service derives from AppError and carries
the HTTP status it maps to. Exception handlers in orderflow.api.main turn them into the
standard ``{"error": ..., "details"?: ...}`` envelope.
"""
from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Invalid data"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Missing or invalid authentication token"


class Forbidden(AppError):
    status_code = 403
    default_message = "Company not found"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Resource already exists"


class BusinessRuleViolation(AppError):
    status_code = 400
    default_message = "Operation not allowed"


class InsufficientStock(BusinessRuleViolation):
    default_message = "Insufficient stock"
