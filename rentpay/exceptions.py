"""
Error taxonomy for the payments backend.

Services raise these; ``rentpay.main`` renders them as JSON with the
matching HTTP status.
"""
from __future__ import annotations

from typing import Any, Optional


class RentPayError(Exception):
    """Base error carrying an HTTP status and optional detail payload."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(RentPayError):
    """Malformed or missing required field."""

    status_code = 400


class UnauthenticatedError(RentPayError):
    """No caller identity attached to the request."""

    status_code = 401

    def __init__(self, message: str = "User authentication required", details: Optional[Any] = None):
        super().__init__(message, details)


class NotFoundError(RentPayError):
    status_code = 404


class ProcessingError(RentPayError):
    """The payment processor rejected or failed the request."""

    status_code = 400


class InternalError(RentPayError):
    status_code = 500
