"""Custom exceptions for the figo client."""

from typing import Optional, Dict, Any


class FigoError(Exception):
    """Base exception for all errors transported via the figo Connect API.

    ``error`` is a stable machine readable code, ``error_description`` the
    human readable text returned by ``str()``.
    """

    default_error = "error"
    default_description = "An error occurred."

    def __init__(
        self,
        error_description: Optional[str] = None,
        error: Optional[str] = None,
    ):
        self.error = error or self.default_error
        self.error_description = error_description or self.default_description
        super().__init__(self.error_description)

    def __str__(self) -> str:
        return self.error_description


class TokenError(FigoError):
    """Raised when a token matches neither the code nor the refresh token format."""

    default_error = "invalid_token"
    default_description = "Token is neither an authorization code nor a refresh token."


class HTTPClientError(FigoError):
    """Base class for HTTP client errors."""

    def __init__(
        self,
        error_description: Optional[str] = None,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(error_description, error)
        self.status_code = status_code
        self.response_data = response_data or {}


class ValidationError(HTTPClientError):
    """Raised when the server rejects a request (400)."""

    default_error = "bad_request"
    default_description = "Bad request."


class AuthenticationError(HTTPClientError):
    """Raised when the access token is missing, invalid or expired (401)."""

    default_error = "unauthorized"
    default_description = "Missing, invalid or expired access token."


class AuthorizationError(HTTPClientError):
    """Raised when authorization fails (403)."""

    default_error = "forbidden"
    default_description = "Insufficient permission."


class MethodNotAllowedError(HTTPClientError):
    """Raised for an unexpected request method (405)."""

    default_error = "method_not_allowed"
    default_description = "Unexpected request method."


class ServiceUnavailableError(HTTPClientError):
    """Raised when the rate limit is exceeded (503)."""

    default_error = "service_unavailable"
    default_description = "Exceeded rate limit."


class ServerError(HTTPClientError):
    """Raised for every other non-success status."""

    default_error = "internal_server_error"
    default_description = "We are very sorry, but something went wrong."


class TimeoutError(HTTPClientError):
    """Raised when request times out."""

    default_error = "timeout"
    default_description = "Request timed out."


class ConnectionError(HTTPClientError):
    """Raised when connection fails."""

    default_error = "connection_error"
    default_description = "Connection failed."


class CertificatePinningError(ConnectionError):
    """Raised when the server certificate is not in the fingerprint allow-list."""

    default_error = "certificate_pinning"
    default_description = "Server certificate fingerprint is not trusted."


def _parse_bad_request(response_data: Dict[str, Any]) -> tuple:
    error = response_data.get("error")
    description = response_data.get("error_description")

    # Newer API versions nest the error details in an object
    if isinstance(error, dict):
        description = description or error.get("description") or error.get("message")
        error = error.get("name") or error.get("code")

    return (str(error) if error is not None else None), description


def create_http_error(
    status_code: int,
    response_data: Optional[Dict[str, Any]] = None,
) -> HTTPClientError:
    """Create appropriate HTTP error based on status code."""

    response_data = response_data or {}

    if status_code == 400:
        error, description = _parse_bad_request(response_data)
        return ValidationError(
            error_description=description,
            error=error,
            status_code=status_code,
            response_data=response_data,
        )

    error_classes = {
        401: AuthenticationError,
        403: AuthorizationError,
        405: MethodNotAllowedError,
        503: ServiceUnavailableError,
    }

    error_class = error_classes.get(status_code, ServerError)
    return error_class(status_code=status_code, response_data=response_data)
