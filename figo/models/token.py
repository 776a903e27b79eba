from datetime import datetime, timedelta, timezone
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class AccessToken(BaseModel):
    """Tokens returned by the token endpoint."""

    access_token: str = Field(..., description="Bearer token for API calls")
    refresh_token: Optional[str] = Field(None, description="Long-lived token to obtain new access tokens")
    expires_in: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("expires_in", "expires"),
        description="Lifetime of the access token in seconds",
    )
    scope: Optional[str] = Field(None, description="Granted scope")
    token_type: str = Field("Bearer", description="Token type")
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Time the token was received")

    @property
    def expires_at(self) -> Optional[datetime]:
        """Expiry timestamp, None if the server did not send a lifetime."""
        if self.expires_in is None:
            return None
        return self.issued_at + timedelta(seconds=self.expires_in)

    @property
    def is_expired(self) -> bool:
        """Check if the access token is expired."""
        expires_at = self.expires_at
        return expires_at is not None and datetime.now(timezone.utc) >= expires_at

    @property
    def time_until_expiry(self) -> Optional[int]:
        """Get seconds until expiry."""
        if self.expires_at is None:
            return None
        delta = self.expires_at - datetime.now(timezone.utc)
        return max(0, int(delta.total_seconds()))
