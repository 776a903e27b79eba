"""Request models for the figo Connect API."""

from datetime import date, datetime
from typing import Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, Field, model_validator

from figo.client.exceptions import TokenError

# Authorization codes always start with "O" and refresh tokens always start with "R"
AUTHORIZATION_CODE_PREFIX = "O"
REFRESH_TOKEN_PREFIX = "R"


class TokenRequest(BaseModel):
    """Grant request for the token endpoint."""

    grant_type: Literal["authorization_code", "refresh_token"]
    code: Optional[str] = Field(None, description="Authorization code from the redirect")
    refresh_token: Optional[str] = Field(None, description="Refresh token")
    redirect_uri: Optional[str] = Field(None, description="Redirect URI used for the login")
    scope: Optional[str] = Field(None, description="Requested scope, e.g. accounts=ro")

    @model_validator(mode="after")
    def validate_grant(self):
        """Make sure codes and refresh tokens never end up in the wrong grant."""
        if self.grant_type == "authorization_code":
            if not self.code or not self.code.startswith(AUTHORIZATION_CODE_PREFIX):
                raise ValueError("authorization_code grant requires an authorization code")
            if self.refresh_token is not None:
                raise ValueError("authorization_code grant must not carry a refresh token")
        else:
            if not self.refresh_token or not self.refresh_token.startswith(REFRESH_TOKEN_PREFIX):
                raise ValueError("refresh_token grant requires a refresh token")
            if self.code is not None:
                raise ValueError("refresh_token grant must not carry an authorization code")
        return self

    @classmethod
    def from_token(
        cls,
        authorization_code_or_refresh_token: str,
        redirect_uri: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> "TokenRequest":
        """Build the grant matching the token prefix.

        Raises:
            TokenError: If the token is neither a code nor a refresh token
        """
        token = authorization_code_or_refresh_token or ""

        if token.startswith(AUTHORIZATION_CODE_PREFIX):
            return cls(grant_type="authorization_code", code=token, redirect_uri=redirect_uri)
        if token.startswith(REFRESH_TOKEN_PREFIX):
            return cls(grant_type="refresh_token", refresh_token=token, scope=scope)

        raise TokenError()

    def to_form(self) -> Dict[str, str]:
        """Convert to url-encoded form fields."""
        return self.model_dump(exclude_none=True)


class TransactionFilter(BaseModel):
    """Filter parameters for transaction queries."""

    since: Optional[Union[datetime, date, str]] = Field(None, description="Transaction ID or date")
    start_id: Optional[str] = Field(None, description="Only transactions booked after this ID")
    count: int = Field(1000, description="Maximum number of transactions", ge=1)
    include_pending: bool = Field(False, description="Include pending transactions")

    def to_query_params(self) -> Dict[str, Any]:
        """Convert to query parameters for API request."""
        params = {}

        if self.since is not None:
            params["since"] = self.since.isoformat() if isinstance(self.since, date) else self.since
        if self.start_id is not None:
            params["start_id"] = self.start_id
        params["count"] = str(self.count)
        params["include_pending"] = "1" if self.include_pending else "0"

        return params


class SyncRequest(BaseModel):
    """Request model for starting a synchronization task."""

    redirect_uri: str = Field(..., description="URI the user is redirected to afterwards")
    state: str = Field(..., description="Opaque value passed on to the redirect target")
    disable_notifications: bool = Field(False, description="Suppress notifications")
    if_not_synced_since: int = Field(0, description="Only sync accounts older than this many minutes", ge=0)


class NotificationRequest(BaseModel):
    """Request model for registering or modifying a notification."""

    observe_key: str = Field(..., description="Notification key")
    notify_uri: str = Field(..., description="Notification messages are sent to this URL")
    state: Optional[str] = Field(None, description="State forwarded in the notification message")
