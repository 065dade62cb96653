"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TWILIOSIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signature validation
    auth_token: str | None = Field(
        default=None,
        description="Shared auth token used as the HMAC key",
    )
    signature_header: str = Field(
        default="X-Twilio-Signature",
        description="Header carrying the base64 request signature",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Externally visible base URL (scheme://host) when running behind a proxy",
    )
    exempt_paths: tuple[str, ...] = Field(
        default=("/health",),
        description="Paths exempt from signature validation",
    )
    verification_enabled: bool = Field(
        default=True,
        description="Reject invalid requests. If False, log failures and let requests through.",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Host for the demo webhook server",
    )
    port: int = Field(
        default=8080,
        description="Port for the demo webhook server",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level name",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON instead of console output",
    )

    @property
    def auth_token_bytes(self) -> bytes | None:
        """Auth token encoded as HMAC key bytes."""
        return self.auth_token.encode("utf-8", "surrogateescape") if self.auth_token is not None else None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
