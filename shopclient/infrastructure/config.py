"""Client configuration.

Loads settings from ``SHOP_*`` environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopclient.domain import validators

DEFAULT_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]


class Settings(BaseSettings):
    """Shop client settings loaded from environment variables."""

    # Shop
    host: str = Field(default="localhost", description="Shop host name")
    shop: str = Field(default="DemoShop", description="Shop alias used in REST paths")
    auth_token: str | None = Field(default=None, description="Bearer token")
    use_ssl: bool = True

    # Transport
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    allowed_methods: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_METHODS),
        description="HTTP verbs the client may issue",
    )

    # Caching
    next_response_wait_time_ms: int = Field(
        default=600,
        ge=0,
        description="Time a fetched product attribute or stock level stays fresh",
    )

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SHOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("host")
    @classmethod
    def _validate_host(cls, value: str) -> str:
        if value != "localhost" and not validators.is_host(value):
            raise ValueError(f"Invalid shop host: {value}")
        return value

    @field_validator("allowed_methods")
    @classmethod
    def _normalize_methods(cls, value: list[str]) -> list[str]:
        methods = [method.upper() for method in value]
        for method in methods:
            if not validators.is_request_method(method):
                raise ValueError(f"Unsupported HTTP method: {method}")
        return methods

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if not validators.is_log_level(level):
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @property
    def base_url(self) -> str:
        """REST base URL of the configured shop."""
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.host}/rs/shops/{self.shop}"
