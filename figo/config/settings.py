from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FINGERPRINTS = [
    "A6:FE:08:F4:A8:86:F9:C1:BF:4E:70:0A:BD:72:AE:B8:8E:B7:78:52",
    "AD:A0:E3:2B:1F:CE:E8:44:F2:83:BA:AE:E4:7D:F2:AD:44:48:7F:1E",
]


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FIGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # figo Connect API Configuration
    api_endpoint: str = Field(default="api.leanbank.com")
    client_id: Optional[str] = Field(default=None)
    client_secret: Optional[str] = Field(default=None)
    redirect_uri: Optional[str] = Field(default=None)

    # TLS Configuration
    fingerprints: List[str] = Field(default_factory=lambda: list(DEFAULT_FINGERPRINTS))
    ca_file: Optional[str] = Field(default=None)

    # HTTP Configuration
    timeout: float = Field(default=30.0)
    max_retries: int = Field(default=3)
    retry_backoff_factor: float = Field(default=2.0)
    requests_per_minute: int = Field(default=100)
    user_agent: str = Field(default="python-figo/0.1.0")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @property
    def base_url(self) -> str:
        return f"https://{self.api_endpoint}"

    @field_validator("fingerprints")
    @classmethod
    def validate_fingerprints(cls, v):
        """Normalize fingerprints to upper-case colon separated hex."""
        normalized = []
        for fingerprint in v:
            digits = fingerprint.replace(":", "").strip().upper()
            if len(digits) != 40:
                raise ValueError(f"Invalid SHA-1 fingerprint: {fingerprint}")
            normalized.append(":".join(digits[i:i + 2] for i in range(0, 40, 2)))
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


# Global settings instance
settings = Settings()
