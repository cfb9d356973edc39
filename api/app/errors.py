"""Exception taxonomy shared by the ordering services.

Services raise these; the application's exception handler turns any
:class:`OrderingError` into a ``{"success": false, "error": ...}`` body with
the class's ``http_status``. Business-logic failures keep HTTP 200 so that
callers check ``success`` rather than the status code.
"""

from __future__ import annotations


class OrderingError(Exception):
    """Base class for expected failures reported to API callers."""

    http_status = 500

    def __init__(self, message: str, **extra) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationError(OrderingError):
    """Missing or malformed required fields."""

    http_status = 400


class InvalidStatusError(ValidationError):
    """Unknown status value or a transition the policy refuses."""

    http_status = 200


class NotFoundError(OrderingError):
    """Referenced order or menu item does not exist."""

    http_status = 200


class ConflictError(OrderingError):
    """Resource already exists or is still in use."""

    http_status = 200


class UpstreamError(OrderingError):
    """The order ledger could not be reached or answered garbage."""

    http_status = 502


class UpstreamTimeoutError(UpstreamError):
    http_status = 504


class UpstreamUnavailableError(UpstreamError):
    http_status = 502


class NotificationError(OrderingError):
    """Order-created notification could not be delivered."""


__all__ = [
    "OrderingError",
    "ValidationError",
    "InvalidStatusError",
    "NotFoundError",
    "ConflictError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "NotificationError",
]
