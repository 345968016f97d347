"""Pydantic schemas for API requests and responses."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")

    @field_validator("url")
    @classmethod
    def url_is_utf8(cls, value: str) -> str:
        # JSON escapes can decode to lone surrogates, which have no UTF-8 form
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("URL is not valid UTF-8") from None
        return value

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    hash: str = Field(..., description="Key the URL is stored under")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"hash": "cf0feea200efdea7d8580c7d4ef57ced"},
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
