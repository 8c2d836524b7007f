"""Pydantic schemas for API requests and responses."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime

from lib.service import MAX_EXPIRY_HOURS


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1, max_length=2048)
    short: Optional[str] = Field(
        None,
        description="Optional custom short code (\"customWord\" is accepted too)",
        max_length=20,
        validation_alias=AliasChoices("short", "customWord"),
    )
    expiry: Optional[int] = Field(
        None,
        description="Lifetime in hours (0 = never expire)",
        ge=0,
        le=MAX_EXPIRY_HOURS,
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                },
                {
                    "url": "https://github.com/user/repo",
                    "short": "myrepo",
                    "expiry": 24,
                }
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    url: str = Field(..., description="The original long URL")
    short: str = Field(..., description="The complete short URL")
    short_code: str = Field(..., description="The short code")
    # Same value as "short", under the names the web client reads
    short_url: str = Field(..., alias="shortUrl")
    shortened_url: str = Field(..., alias="shortenedUrl")
    expiry: int = Field(..., description="Lifetime in hours (0 = never expires)")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path",
                    "short": "http://localhost:3000/4fgXk2",
                    "short_code": "4fgXk2",
                    "shortUrl": "http://localhost:3000/4fgXk2",
                    "shortenedUrl": "http://localhost:3000/4fgXk2",
                    "expiry": 0,
                    "created_at": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """Response with URL information."""

    short_code: str
    original_url: str
    short_url: str
    ttl_seconds: Optional[int] = Field(None, description="Seconds until the mapping expires (null = never)")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    mapping_store: str = Field(..., description="Mapping store status")
    counter_store: str = Field(..., description="Counter store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    visits: int = Field(..., description="Successful redirects served")
    counter_key: str
    custom_codes_enabled: bool
