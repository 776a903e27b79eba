"""HTTP client module for the figo Connect API."""

from figo.client.http_client import HTTPClient, RateLimiter
from figo.client.tls import (
    CertificateFingerprintError,
    certificate_fingerprint,
    create_pinned_ssl_context,
    verify_fingerprint,
)
from figo.client.exceptions import (
    FigoError,
    TokenError,
    HTTPClientError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    MethodNotAllowedError,
    ServiceUnavailableError,
    ServerError,
    TimeoutError,
    ConnectionError,
    CertificatePinningError,
    create_http_error,
)

__all__ = [
    "HTTPClient",
    "RateLimiter",
    "CertificateFingerprintError",
    "certificate_fingerprint",
    "create_pinned_ssl_context",
    "verify_fingerprint",
    "FigoError",
    "TokenError",
    "HTTPClientError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "MethodNotAllowedError",
    "ServiceUnavailableError",
    "ServerError",
    "TimeoutError",
    "ConnectionError",
    "CertificatePinningError",
    "create_http_error",
]
