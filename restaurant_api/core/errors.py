"""Catalog error taxonomy.

Every failure a catalog operation can report derives from ``CatalogError``.
Each subclass carries the HTTP status it maps to, so the exception handlers
in ``restaurant_api.core.error_handlers`` stay a single lookup.
"""

from __future__ import annotations

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog errors.

    Args:
        message: Human-readable error message (safe to return to clients).
        reason: Stable machine-readable code, e.g. ``category_has_products``.
        details: Optional extra context for logging and clients.
    """

    status_code = 500
    default_reason = "error"

    def __init__(self, message: str, reason: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason
        self.details = details or {}


class ParseError(CatalogError):
    """Malformed request body."""

    status_code = 400
    default_reason = "parse_error"


class ValidationError(CatalogError):
    """Field-level validation failure (presence, type, range, format)."""

    status_code = 422
    default_reason = "validation_error"


class ConflictError(CatalogError):
    """Uniqueness, foreign-key or cascade violation.

    Also used for every IntegrityGuard refusal; ``reason`` names the rule.
    """

    status_code = 422
    default_reason = "conflict"


class NotFoundError(CatalogError):
    status_code = 404
    default_reason = "not_found"


class AuthError(CatalogError):
    """Missing/invalid credential (401) or deactivated account (403)."""

    status_code = 401
    default_reason = "unauthorized"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int = 401,
    ) -> None:
        super().__init__(message, reason, details)
        self.status_code = status_code


class InternalServiceError(CatalogError):
    """Unexpected store failure. The message is never sent to clients."""

    status_code = 500
    default_reason = "internal_error"
