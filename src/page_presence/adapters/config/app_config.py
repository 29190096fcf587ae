"""12-factor configuration adapter using environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")
    log_level: str = Field(default="info", description="Log level for the application and uvicorn")
    cors_allow_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to load the widget and call the HTTP API (JSON list)",
    )

    # Transport configuration
    websocket_path: str = Field(default="/ws", description="Path of the presence WebSocket")
    page_id_max_length: int = Field(
        default=2048,
        description="Longest page identifier accepted from clients",
    )
    outbound_queue_size: int = Field(
        default=64,
        description="Count updates buffered per connection before new ones are dropped",
    )
    send_timeout_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for a single WebSocket send before giving up on it",
    )

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of HTTP requests allowed per IP address per minute",
    )

    # Admin endpoints are disabled unless a token is configured
    admin_command_token: str | None = Field(
        default=None,
        description="Shared secret for /admin endpoints (X-Admin-Token header)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.lower() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(_LOG_LEVELS)}")
        return v.lower()

    @field_validator("websocket_path")
    @classmethod
    def validate_websocket_path(cls, v: str) -> str:
        """Validate the WebSocket path is absolute."""
        if not v.startswith("/"):
            raise ValueError("websocket_path must start with '/'")
        return v

    @field_validator("page_id_max_length", "outbound_queue_size", "rate_limit_per_minute")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate sizes and limits are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("send_timeout_seconds")
    @classmethod
    def validate_send_timeout(cls, v: float) -> float:
        """Validate the send timeout is positive."""
        if v <= 0:
            raise ValueError("send_timeout_seconds must be positive")
        return v
