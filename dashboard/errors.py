"""
Error types for the dashboard gateway.

Backend failures are mapped onto a small hierarchy so routers and services can
tell an unreachable (sleeping) backend apart from an ordinary HTTP error.
"""

import enum
from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base exception for dashboard gateway errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ApiError(DashboardError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(
        self,
        status_code: Optional[int],
        message: str = "",
        payload: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message or f"Request failed with status {status_code}", details)


class AuthenticationError(ApiError):
    """Raised on 401 responses."""


class PermissionDeniedError(ApiError):
    """Raised on 403 responses."""


class NotFoundError(ApiError):
    """Raised on 404 responses."""


class BackendUnavailableError(DashboardError):
    """Raised when no usable response came back from the backend."""

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message or "Backend did not respond", details)


class UnexpectedResponseError(DashboardError):
    """Raised when a response body does not have the shape the endpoint returns."""

    def __init__(self, endpoint: str, expected: str, payload: Any = None):
        self.endpoint = endpoint
        self.expected = expected
        self.payload = payload
        super().__init__(
            f"Unexpected response from {endpoint}: expected {expected}",
            {"endpoint": endpoint, "expected": expected},
        )


class SubmissionValidationError(DashboardError):
    """Raised when a submission fails the client-side guard."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"Submission field '{field}' is required", {"field": field})


_STATUS_ERRORS = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
}


def error_from_response(status_code: int, payload: Any) -> ApiError:
    """Build the matching ApiError for a failed response body."""
    message = ""
    if isinstance(payload, dict):
        message = str(payload.get("message") or payload.get("detail") or "")
    elif isinstance(payload, str):
        message = payload.strip()
    error_cls = _STATUS_ERRORS.get(status_code, ApiError)
    return error_cls(status_code, message, payload)


class FailureKind(str, enum.Enum):
    """What the error boundary shows for a failed request."""
    backend_asleep = "backend_asleep"
    not_found = "not_found"
    unexpected = "unexpected"


NETWORK_ERROR_MARKERS = ("NetworkError", "Failed to fetch")

FAILURE_MESSAGES = {
    FailureKind.backend_asleep: (
        "Server is waking up",
        "Our backend might be asleep or restarting. Please wait a few moments "
        "while we reconnect.",
    ),
    FailureKind.not_found: (
        "404 - Page Not Found",
        "The page you're looking for doesn't exist or has been moved.",
    ),
    FailureKind.unexpected: (
        "500 - Unexpected Error",
        "Oops! Something went wrong on our end. Please try again.",
    ),
}


def classify_failure(exc: BaseException) -> FailureKind:
    """Guess whether a failure means the backend is asleep.

    A missing status code or a network-error message is read as a sleeping
    backend; 404s are reported as not found; everything else is unexpected.
    """
    if isinstance(exc, BackendUnavailableError):
        return FailureKind.backend_asleep
    if isinstance(exc, NotFoundError):
        return FailureKind.not_found
    if isinstance(exc, ApiError):
        if exc.status_code is None:
            return FailureKind.backend_asleep
        return FailureKind.unexpected
    text = str(exc)
    if any(marker in text for marker in NETWORK_ERROR_MARKERS):
        return FailureKind.backend_asleep
    return FailureKind.unexpected
