"""Authorization operations for the figo Connect API."""

from typing import Optional
from urllib.parse import urlencode

from figo.config.logging import get_logger, mask_sensitive_data
from figo.config.settings import settings
from figo.client.exceptions import HTTPClientError
from figo.client.http_client import HTTPClient
from figo.models.requests import TokenRequest
from figo.models.token import AccessToken
from figo.session.session import Session

logger = get_logger(__name__)


class Connection:
    """Non user-bound connection to the figo Connect API.

    Its main purpose is to let the user log in via OAuth 2.0. Requests are
    authenticated with the client credentials using HTTP basic auth.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
        api_endpoint: Optional[str] = None,
    ):
        """Initialize connection.

        Args:
            client_id: Client ID (defaults to settings)
            client_secret: Client secret (defaults to settings)
            redirect_uri: Optional redirect URI (defaults to settings)
            http_client: Optional preconfigured HTTP client
            api_endpoint: Host name of the API (defaults to settings)
        """
        self.client_id = client_id or settings.client_id
        self.client_secret = client_secret or settings.client_secret
        self.redirect_uri = redirect_uri or settings.redirect_uri
        self.api_endpoint = api_endpoint or settings.api_endpoint

        if not self.client_id or not self.client_secret:
            raise ValueError("Client ID and client secret are required")

        self._own_http = http_client is None
        self.http_client = http_client or HTTPClient(
            base_url=f"https://{self.api_endpoint}",
            auth=(self.client_id, self.client_secret),
        )

        logger.info(f"Connection initialized for client: {self.client_id}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client if the connection created it."""
        if self._own_http:
            await self.http_client.close()

    def login_url(self, state: str, scope: Optional[str] = None) -> str:
        """Get the URL a user should open in the web browser to start the login process.

        When the process is completed, the user is redirected to the redirect
        URI and passes on an authorization code, which can be exchanged for an
        access token with :meth:`obtain_access_token`.

        Args:
            state: Passed on through the complete login process to the redirect
                target; use it to validate the authenticity of the redirect call
            scope: Optional scope of data access, e.g. ``accounts=ro``

        Returns:
            The URL to be opened by the user
        """
        data = {"response_type": "code", "client_id": self.client_id, "state": state}
        if self.redirect_uri is not None:
            data["redirect_uri"] = self.redirect_uri
        if scope is not None:
            data["scope"] = scope

        return f"https://{self.api_endpoint}/auth/code?" + urlencode(data)

    async def obtain_access_token(
        self,
        authorization_code_or_refresh_token: str,
        scope: Optional[str] = None,
    ) -> AccessToken:
        """Exchange an authorization code or a refresh token for an access token.

        Args:
            authorization_code_or_refresh_token: Either the authorization code
                received by the redirect target, or a refresh token
            scope: Optional scope, only sent along with a refresh token

        Returns:
            Access token, refresh token and expiry

        Raises:
            TokenError: If the value is neither a code nor a refresh token
            HTTPClientError: For API errors
        """
        try:
            request = TokenRequest.from_token(
                authorization_code_or_refresh_token,
                redirect_uri=self.redirect_uri,
                scope=scope,
            )

            response = await self.http_client.post("/auth/token", data=request.to_form())
            if not response:
                raise HTTPClientError("Token endpoint returned no token")

            token = AccessToken(**response)

            logger.info(
                f"Obtained access token via {request.grant_type} grant "
                f"(expires in {token.expires_in}s)"
            )
            return token

        except Exception as e:
            logger.error(f"Failed to obtain access token: {e}")
            raise

    async def revoke_token(self, refresh_token_or_access_token: str) -> None:
        """Revoke a refresh token or an access token.

        The token cannot be used anymore once this call returns.
        """
        try:
            await self.http_client.post(
                "/auth/revoke",
                params={"token": refresh_token_or_access_token},
            )

            logger.info(f"Token revoked: {mask_sensitive_data(refresh_token_or_access_token)}")

        except Exception as e:
            logger.error(f"Failed to revoke token: {e}")
            raise

    async def create_session(
        self,
        authorization_code_or_refresh_token: str,
        scope: Optional[str] = None,
    ) -> Session:
        """Obtain an access token and open a user-bound session with it.

        The session talks to the same server as this connection, with the
        same pinned fingerprints, CA bundle, timeouts and retry policy, but
        without the client credentials.
        """
        token = await self.obtain_access_token(authorization_code_or_refresh_token, scope)

        http_options = None
        if isinstance(self.http_client, HTTPClient):
            http_options = self.http_client.connection_options()

        return Session(token, api_endpoint=self.api_endpoint, http_options=http_options)
