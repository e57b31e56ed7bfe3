"""
API Errors — Domain exception taxonomy mapped onto HTTP responses.
"""
from typing import Optional


class APIError(Exception):
    """Base class for errors rendered as `{"detail", "error_code"}` responses."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidArgument(APIError):
    status_code = 400
    error_code = "INVALID_ARGUMENT"


class NotFound(APIError):
    status_code = 404
    error_code = "NOT_FOUND"


class AuthenticationFailed(APIError):
    status_code = 400
    error_code = "AUTHENTICATION_FAILED"


class Conflict(APIError):
    status_code = 400
    error_code = "CONFLICT"


class UpstreamError(APIError):
    status_code = 500
    error_code = "UPSTREAM_ERROR"


class TransientError(APIError):
    """Storage write failed before the renewal was recorded; safe to retry."""

    status_code = 503
    error_code = "TRANSIENT_ERROR"
