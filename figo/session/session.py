from typing import Any, Dict, Optional, Union

from figo.config.logging import get_logger, mask_sensitive_data
from figo.config.settings import settings
from figo.client.http_client import HTTPClient
from figo.models.token import AccessToken
from figo.operations.account_operations import AccountOperations
from figo.operations.notification_operations import NotificationOperations
from figo.operations.payment_operations import PaymentOperations

logger = get_logger(__name__)


class Session(AccountOperations, NotificationOperations, PaymentOperations):
    """User-bound connection to the figo Connect API.

    Every request carries the access token as bearer credential. Use it as an
    async context manager to release the underlying HTTP connections::

        async with Session(access_token) as session:
            accounts = await session.accounts()
    """

    def __init__(
        self,
        access_token: Union[str, AccessToken],
        http_client: Optional[HTTPClient] = None,
        api_endpoint: Optional[str] = None,
        http_options: Optional[Dict[str, Any]] = None,
    ):
        """Initialize session.

        Args:
            access_token: Access token string or token object from the token endpoint
            http_client: Optional preconfigured HTTP client
            api_endpoint: Host name of the API (defaults to settings)
            http_options: Keyword arguments for the HTTP client the session
                creates when ``http_client`` is not given
        """
        if isinstance(access_token, AccessToken):
            self.token: Optional[AccessToken] = access_token
            self.access_token = access_token.access_token
        else:
            self.token = None
            self.access_token = access_token

        self.api_endpoint = api_endpoint or settings.api_endpoint

        self._own_http = http_client is None
        if http_client is None:
            options = {"base_url": f"https://{self.api_endpoint}"}
            options.update(http_options or {})
            http_client = HTTPClient(**options)
        self.http_client = http_client
        if isinstance(self.http_client, HTTPClient):
            self.http_client.client.headers.update(self.authorization_header)

        logger.debug(f"Session initialized for token {mask_sensitive_data(self.access_token)}")

    @property
    def authorization_header(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client if the session created it."""
        if self._own_http:
            await self.http_client.close()
