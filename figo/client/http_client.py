import asyncio
import time
from typing import Dict, Any, Iterable, Optional, Tuple
from urllib.parse import urljoin
import httpx

from figo.config.logging import get_logger, mask_sensitive_data
from figo.config.settings import settings
from figo.client.tls import (
    CertificateFingerprintError,
    create_pinned_ssl_context,
    normalize_fingerprint,
)
from figo.client.exceptions import (
    HTTPClientError,
    TimeoutError,
    ConnectionError,
    CertificatePinningError,
    create_http_error,
)

logger = get_logger(__name__)


class RateLimiter:
    """Sliding window rate limiter for API requests."""

    def __init__(self, requests_per_minute: int = 100):
        self.requests_per_minute = requests_per_minute
        self.requests = []
        self.lock = asyncio.Lock()
        self.clock = time.monotonic

    async def acquire(self):
        """Acquire rate limit permission."""
        while True:
            async with self.lock:
                now = self.clock()
                self.requests = [req_time for req_time in self.requests if now - req_time < 60]

                if len(self.requests) < self.requests_per_minute:
                    self.requests.append(now)
                    return

                wait_time = 60 - (now - min(self.requests))

            logger.warning(f"Rate limit reached, waiting {wait_time:.1f} seconds")
            await asyncio.sleep(wait_time)


def _pinning_failure(exc: BaseException) -> Optional[CertificateFingerprintError]:
    """Find a fingerprint mismatch in the exception chain of a transport error."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, CertificateFingerprintError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return None


class HTTPClient:
    """HTTP client wrapper for the figo Connect API with certificate pinning and retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff_factor: Optional[float] = None,
        requests_per_minute: Optional[int] = None,
        fingerprints: Optional[Iterable[str]] = None,
        ca_file: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize HTTP client.

        Args:
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            max_retries: Maximum number of retries for failed requests
            retry_backoff_factor: Exponential backoff factor for retries
            requests_per_minute: Client side rate limit
            fingerprints: Allowed SHA-1 fingerprints of the server certificate
            ca_file: CA bundle used for chain validation
            headers: Headers sent with every request
            auth: Optional basic auth credentials
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url or settings.base_url
        self.timeout = timeout if timeout is not None else settings.timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_backoff_factor = (
            retry_backoff_factor if retry_backoff_factor is not None
            else settings.retry_backoff_factor
        )
        self.fingerprints = [
            normalize_fingerprint(fingerprint)
            for fingerprint in (fingerprints if fingerprints is not None else settings.fingerprints)
        ]
        self.ca_file = ca_file or settings.ca_file
        self.requests_per_minute = requests_per_minute or settings.requests_per_minute
        self.transport = transport

        self.rate_limiter = RateLimiter(self.requests_per_minute)

        self.ssl_context = create_pinned_ssl_context(self.fingerprints, ca_file=self.ca_file)

        default_headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }
        default_headers.update(headers or {})

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=default_headers,
            auth=auth,
            verify=self.ssl_context,
            transport=transport,
        )

        logger.info(f"HTTP client initialized with base URL: {self.base_url}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
        logger.debug("HTTP client closed")

    def connection_options(self) -> Dict[str, Any]:
        """Options needed to open another client to the same server.

        Credentials and extra headers are not included.
        """
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "retry_backoff_factor": self.retry_backoff_factor,
            "requests_per_minute": self.requests_per_minute,
            "fingerprints": list(self.fingerprints),
            "ca_file": self.ca_file,
            "transport": self.transport,
        }

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return urljoin(self.base_url, endpoint.lstrip('/'))

    def _sanitize_for_logging(self, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Sanitize sensitive data for logging."""
        if not data:
            return {}

        sensitive_fields = [
            "authorization", "token", "password", "secret", "code", "pin",
            "account_number", "iban",
        ]

        sanitized = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(field in key_lower for field in sensitive_fields):
                if isinstance(value, str):
                    sanitized[key] = mask_sensitive_data(value)
                else:
                    sanitized[key] = "[MASKED]"
            else:
                sanitized[key] = value

        return sanitized

    async def _backoff(self, attempt: int, reason: str) -> None:
        wait_time = self.retry_backoff_factor ** attempt
        logger.warning(
            f"{reason}, retrying in {wait_time}s "
            f"(attempt {attempt + 1}/{self.max_retries})"
        )
        await asyncio.sleep(wait_time)

    async def _make_request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> httpx.Response:
        """Make HTTP request with retry logic."""
        last_exception = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.request(method=method, url=url, **kwargs)

                logger.debug(
                    f"{method} {url} -> {response.status_code} "
                    f"({len(response.content)} bytes)"
                )

                # Don't retry on client errors (4xx), only server errors (5xx)
                if response.status_code < 500 or attempt >= self.max_retries:
                    return response

                await self._backoff(attempt, f"Server error {response.status_code}")

            except httpx.TimeoutException:
                last_exception = TimeoutError(f"Request timed out after {self.timeout}s")
                if attempt < self.max_retries:
                    await self._backoff(attempt, "Request timeout")

            except (httpx.ConnectError, httpx.NetworkError) as e:
                pinning_failure = _pinning_failure(e)
                if pinning_failure is not None:
                    raise CertificatePinningError(
                        f"Server certificate fingerprint not trusted: "
                        f"{pinning_failure.fingerprint}"
                    ) from e

                last_exception = ConnectionError(f"Connection failed: {str(e)}")
                if attempt < self.max_retries:
                    await self._backoff(attempt, f"Connection error ({e})")

        raise last_exception

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Any]:
        """Make HTTP request to API endpoint.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            params: Optional query parameters
            json: Optional JSON data to send
            data: Optional form data to send url-encoded
            headers: Optional headers to include

        Returns:
            Decoded JSON response, or None for an empty body or a 404

        Raises:
            HTTPClientError: For HTTP errors
            TimeoutError: When request times out
            ConnectionError: When connection fails
            CertificatePinningError: When the server certificate is not pinned
        """
        await self.rate_limiter.acquire()

        url = self._build_url(endpoint)

        log_data = {
            "method": method,
            "url": url,
            "headers": self._sanitize_for_logging(headers),
            "params": self._sanitize_for_logging(params),
        }
        if json and isinstance(json, dict):
            log_data["json"] = self._sanitize_for_logging(json)
        if data:
            log_data["data"] = self._sanitize_for_logging(data)

        logger.debug(f"Making request: {log_data}")

        try:
            response = await self._make_request_with_retry(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=headers,
            )

            if response.status_code == 404:
                logger.debug(f"No resource at {method} {url}")
                return None

            try:
                response_data = response.json() if response.content else None
            except ValueError:
                response_data = {"content": response.text}

            if not response.is_success:
                raise create_http_error(
                    status_code=response.status_code,
                    response_data=response_data if isinstance(response_data, dict) else None,
                )

            return response_data

        except HTTPClientError:
            raise
        except Exception as e:
            raise HTTPClientError(f"Unexpected error: {str(e)}") from e

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Any]:
        """Make GET request."""
        return await self.request("GET", endpoint, params=params, headers=headers)

    async def post(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Any]:
        """Make POST request."""
        return await self.request(
            "POST", endpoint, params=params, json=json, data=data, headers=headers
        )

    async def put(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Any]:
        """Make PUT request."""
        return await self.request("PUT", endpoint, json=json, headers=headers)

    async def delete(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Any]:
        """Make DELETE request."""
        return await self.request("DELETE", endpoint, headers=headers)
