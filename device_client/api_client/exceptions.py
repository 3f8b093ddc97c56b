"""Platform API client exceptions.

Defines typed exceptions for platform API errors so callers can tell
transport failures, service-defined errors and unreadable responses apart.
"""

from collections.abc import Mapping

from pydantic import ValidationError

from .models import ErrorResponse


class DeviceClientError(Exception):
    """Base exception for all device client errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.headers = dict(headers) if headers is not None else {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.error_code:
            parts.append(f"[{self.error_code}]")
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        return " ".join(parts)


class NoTokenError(DeviceClientError):
    """No device token was configured.

    Raised before any network call is made.
    """

    def __init__(self, message: str = "No device token provided") -> None:
        super().__init__(message)


class BuildClientError(DeviceClientError):
    """The HTTP client could not be constructed from its configuration."""

    def __init__(self, message: str = "Failed to build client") -> None:
        super().__init__(f"Failed to build client: {message}")


# -----------------------------------------------------------------------------
# Request errors
# -----------------------------------------------------------------------------


class RequestError(DeviceClientError):
    """A single API request failed."""


class TransportFailureError(RequestError):
    """The request could not be sent or its response could not be read."""


class SendRequestError(TransportFailureError):
    """The request could not be sent (connection, TLS, timeout)."""

    def __init__(self, message: str = "Failed to send request") -> None:
        super().__init__(message)


class LoadResponseError(TransportFailureError):
    """The response body could not be read."""

    def __init__(self, message: str = "Failed to load response bytes") -> None:
        super().__init__(message)


class StructuredAPIError(RequestError):
    """The service rejected the request with a parseable error envelope.

    The status code is preserved for caller-side branching, e.g. 401
    (token revoked) versus 5xx (service trouble).
    """

    def __init__(
        self,
        status_code: int,
        error: ErrorResponse,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            error.message,
            status_code=status_code,
            error_code=error.code,
            headers=headers,
        )
        self.error = error


class MalformedAPIError(RequestError):
    """An error status whose body is not the expected error envelope.

    Typically produced by proxies or load balancers. The raw body text is
    kept for diagnostics.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            f"Received malformed error response with body '{body}'",
            status_code=status_code,
            headers=headers,
        )
        self.body = body


class ParseResponseError(RequestError):
    """A successful response body did not match the expected schema."""

    def __init__(self, message: str = "Failed to parse response") -> None:
        super().__init__(message)


# -----------------------------------------------------------------------------
# Credential errors
# -----------------------------------------------------------------------------


class CredentialsError(DeviceClientError):
    """Base exception for session credential errors."""


class CredentialsFetchError(CredentialsError):
    """Fetching new session credentials failed.

    Wraps the underlying client error, available as ``cause``.
    """

    def __init__(self, cause: DeviceClientError) -> None:
        super().__init__(
            f"Failed to fetch credentials: {cause}",
            status_code=cause.status_code,
            error_code=cause.error_code,
            headers=cause.headers,
        )
        self.cause = cause


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


def is_error_status(status_code: int) -> bool:
    """Check for a client (4xx) or server (5xx) error status."""
    return 400 <= status_code < 600


def classify_error_response(
    status_code: int,
    body: bytes,
    headers: Mapping[str, str] | None = None,
) -> RequestError | None:
    """Map an HTTP response to the matching error, if any.

    Returns:
        None for non-error statuses, StructuredAPIError when the body is the
        service's error envelope, MalformedAPIError otherwise.
    """
    if not is_error_status(status_code):
        return None

    try:
        error = ErrorResponse.model_validate_json(body)
    except ValidationError:
        return MalformedAPIError(
            status_code,
            body.decode("utf-8", errors="replace"),
            headers=headers,
        )

    return StructuredAPIError(status_code, error, headers=headers)
