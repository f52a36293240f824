"""
Domain exceptions raised by services and translated to HTTP responses in main.py.
"""
from typing import Any, Optional


class TogetherError(Exception):
    """Base class for errors that map to an HTTP status."""
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TogetherError):
    """Bad enum value, non-positive amount, malformed currency code, etc."""
    status_code = 400


class NotFoundError(TogetherError):
    """Unknown account, transaction id or person slot."""
    status_code = 404


class AuthError(TogetherError):
    """Missing or invalid credentials."""
    status_code = 401

    def __init__(self, message: str, details: Optional[Any] = None, status_code: int = 401):
        super().__init__(message, details)
        self.status_code = status_code


class InternalError(TogetherError):
    """Backing store unavailable or failed."""
    status_code = 500
