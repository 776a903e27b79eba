import pytest
import base64
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse
import httpx

from figo.auth.connection import Connection
from figo.client.exceptions import HTTPClientError, TokenError, ValidationError
from figo.client.http_client import HTTPClient
from figo.models.token import AccessToken
from figo.session.session import Session


TOKEN_RESPONSE = {
    "access_token": "ASHWLIkouP2O6_bgA2wWReRhletgWKHYjLqDaqb0LFfamim9RjexTo22ujRIP_cjLiRiSyQXyt2kM1eXU2XLFZQ0Hro15HikJQT_eNeT_9XQ",
    "refresh_token": "RjA2QzBCQzJBMEE2QzBCOTU2MkM2RkQyRjY3RDRBRjU4Qjg4QTc2RDMwOTQyQ0YxMTYxM0U0",
    "expires_in": 3600,
    "token_type": "Bearer",
    "scope": "accounts=ro transactions=ro",
}


@pytest.fixture
def mock_http_client():
    """Mock HTTP client."""
    return AsyncMock()


@pytest.fixture
def connection(mock_http_client):
    """Create Connection instance."""
    return Connection(
        client_id="CaESKmC8MAhNpDe5rvmWnSkRE_7pkkVIIgMwclgzGcQY",
        client_secret="STdzfv0GXtEj_bwYn7AgCVszN1kKq5BdgEIKOM_fzybQ",
        redirect_uri="https://app.example.com/callback",
        http_client=mock_http_client,
        api_endpoint="api.test.com",
    )


class TestLoginURL:

    def test_login_url(self, connection):
        """Test the login URL carries client, state, redirect URI and scope."""
        url = connection.login_url("qweqwe", scope="accounts=ro")

        parsed = urlparse(url)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://api.test.com/auth/code"
        assert parse_qs(parsed.query) == {
            "response_type": ["code"],
            "client_id": ["CaESKmC8MAhNpDe5rvmWnSkRE_7pkkVIIgMwclgzGcQY"],
            "state": ["qweqwe"],
            "redirect_uri": ["https://app.example.com/callback"],
            "scope": ["accounts=ro"],
        }

    def test_login_url_without_optionals(self, mock_http_client):
        """Test redirect URI and scope are only sent when set."""
        connection = Connection(
            client_id="client",
            client_secret="secret",
            http_client=mock_http_client,
            api_endpoint="api.test.com",
        )
        connection.redirect_uri = None

        url = connection.login_url("state")

        assert url == "https://api.test.com/auth/code?response_type=code&client_id=client&state=state"

    def test_credentials_required(self, mock_http_client, monkeypatch):
        """Test a connection needs client credentials."""
        monkeypatch.setattr("figo.auth.connection.settings.client_id", None)

        with pytest.raises(ValueError):
            Connection(client_secret="secret", http_client=mock_http_client)


class TestObtainAccessToken:

    @pytest.mark.asyncio
    async def test_authorization_code(self, connection, mock_http_client):
        """Test an authorization code is exchanged via the code grant."""
        mock_http_client.post.return_value = TOKEN_RESPONSE

        token = await connection.obtain_access_token("OgAAAVYYNIVHRKgmeh2F5Ov1VmPgf")

        assert isinstance(token, AccessToken)
        assert token.access_token == TOKEN_RESPONSE["access_token"]
        assert token.refresh_token == TOKEN_RESPONSE["refresh_token"]
        assert token.expires_in == 3600

        mock_http_client.post.assert_called_once_with(
            "/auth/token",
            data={
                "grant_type": "authorization_code",
                "code": "OgAAAVYYNIVHRKgmeh2F5Ov1VmPgf",
                "redirect_uri": "https://app.example.com/callback",
            },
        )

    @pytest.mark.asyncio
    async def test_refresh_token(self, connection, mock_http_client):
        """Test a refresh token is exchanged via the refresh grant with scope."""
        mock_http_client.post.return_value = TOKEN_RESPONSE

        await connection.obtain_access_token("RjA2QzBCQzJBMEE2", scope="accounts=ro")

        mock_http_client.post.assert_called_once_with(
            "/auth/token",
            data={
                "grant_type": "refresh_token",
                "refresh_token": "RjA2QzBCQzJBMEE2",
                "scope": "accounts=ro",
            },
        )

    @pytest.mark.asyncio
    async def test_unknown_token_is_never_sent(self, connection, mock_http_client):
        """Test tokens of unknown format fail before any request."""
        with pytest.raises(TokenError):
            await connection.obtain_access_token("ASHWLIkouP2O6")

        mock_http_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_grant(self, connection, mock_http_client):
        """Test server side rejections propagate."""
        mock_http_client.post.side_effect = ValidationError("Invalid authorization code.", "invalid_grant", 400)

        with pytest.raises(ValidationError) as exc_info:
            await connection.obtain_access_token("Oexpired")

        assert exc_info.value.error == "invalid_grant"


class TestRevokeAndSession:

    @pytest.mark.asyncio
    async def test_revoke_token(self, connection, mock_http_client):
        """Test revoking sends the token as query parameter."""
        mock_http_client.post.return_value = None

        assert await connection.revoke_token("RjA2QzBCQzJBMEE2") is None

        mock_http_client.post.assert_called_once_with(
            "/auth/revoke",
            params={"token": "RjA2QzBCQzJBMEE2"},
        )

    @pytest.mark.asyncio
    async def test_create_session(self, connection, mock_http_client):
        """Test the OAuth exchange yields an authenticated session."""
        mock_http_client.post.return_value = TOKEN_RESPONSE

        async with await connection.create_session("OgAAAVYYNIVHRKgmeh2F5Ov1VmPgf") as session:
            assert isinstance(session, Session)
            assert session.access_token == TOKEN_RESPONSE["access_token"]
            assert session.token.refresh_token == TOKEN_RESPONSE["refresh_token"]
            assert session.api_endpoint == "api.test.com"


class TestConnectionWire:

    @pytest.mark.asyncio
    async def test_token_request_on_the_wire(self):
        """Test basic auth and form encoding of the token request."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=TOKEN_RESPONSE)

        http_client = HTTPClient(
            base_url="https://api.test.com",
            auth=("client", "secret"),
            transport=httpx.MockTransport(handler),
        )

        async with Connection("client", "secret", http_client=http_client) as connection:
            await connection.obtain_access_token("RjA2QzBCQzJBMEE2")

        await http_client.close()

        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/auth/token"
        assert request.headers["Authorization"] == "Basic " + base64.b64encode(b"client:secret").decode()
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["RjA2QzBCQzJBMEE2"],
        }

    @pytest.mark.asyncio
    async def test_session_inherits_connection_transport(self):
        """Test a created session uses the pins, CA bundle and transport of the connection."""
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.path == "/auth/token":
                return httpx.Response(200, json=TOKEN_RESPONSE)
            return httpx.Response(200, json={"accounts": []})

        transport = httpx.MockTransport(handler)
        http_client = HTTPClient(
            base_url="https://api.test.com",
            timeout=7.0,
            max_retries=1,
            fingerprints=["11" * 20],
            auth=("client", "secret"),
            transport=transport,
        )

        async with Connection("client", "secret", http_client=http_client) as connection:
            async with await connection.create_session("OgAAAVYYNIVHRKgmeh2F5Ov1VmPgf") as session:
                assert session.http_client is not http_client
                assert session.http_client.fingerprints == [":".join(["11"] * 20)]
                assert session.http_client.transport is transport
                assert session.http_client.timeout == 7.0
                assert session.http_client.max_retries == 1

                assert await session.accounts() == []

        await http_client.close()

        accounts_request = requests[1]
        assert accounts_request.url.path == "/rest/accounts"
        assert accounts_request.headers["Authorization"] == f"Bearer {TOKEN_RESPONSE['access_token']}"

    @pytest.mark.asyncio
    async def test_empty_token_response(self, connection, mock_http_client):
        """Test an empty token response raises a typed error."""
        mock_http_client.post.return_value = None

        with pytest.raises(HTTPClientError):
            await connection.obtain_access_token("OgAAAVYYNIVHRKgmeh2F5Ov1VmPgf")
