"""Configuration management for URL shortener."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator

from lib.service import MAX_EXPIRY_HOURS


class Config(BaseSettings):
    """Application configuration.

    Loaded once at process start and passed by reference to the service
    and route handlers; nothing else reads the environment.
    """

    # Redis settings
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL (the database index is taken from mapping_db/counter_db)"
    )

    redis_password: Optional[str] = Field(
        default=None,
        description="Redis password (overrides any password in redis_url)"
    )

    mapping_db: int = Field(
        default=0,
        ge=0,
        description="Redis logical database holding short code -> URL mappings"
    )

    counter_db: int = Field(
        default=1,
        ge=0,
        description="Redis logical database holding the visit counter"
    )

    counter_key: str = Field(
        default="counter",
        min_length=1,
        description="Key of the global visit counter"
    )

    redis_socket_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Socket connect/read timeout for Redis calls, in seconds"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("app_port", "port"),
        description="Port to listen on (APP_PORT or PORT)"
    )

    cors_origin: str = Field(
        default="http://localhost:5173",
        description="Origin allowed to call the API from a browser"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=4,
        le=20,
        description="Length of generated short codes"
    )

    enable_custom_codes: bool = Field(
        default=True,
        description="Allow users to provide custom short codes"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Maximum retries when a generated short code is already taken"
    )

    default_expiry_hours: int = Field(
        default=0,
        ge=0,
        le=MAX_EXPIRY_HOURS,
        description="Expiry applied when a request gives none (0 = never expire)"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    @field_validator("port", mode="before")
    @classmethod
    def strip_port_colon(cls, value):
        """Accept listen-address style ports such as ":3000"."""
        if isinstance(value, str):
            return value.strip().lstrip(":")
        return value

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
