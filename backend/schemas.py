"""Pydantic schemas for API request/response."""

from urllib.parse import urlsplit

from pydantic import BaseModel, field_validator

from errors import InvalidURLError, MissingURLError


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    url: str = ""

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, value: object) -> str:
        return str(value or "").strip()


def validate_url(url: str) -> str:
    """Return `url` if it is an absolute http(s) URL, else raise."""
    if not url:
        raise MissingURLError()
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as e:
        raise InvalidURLError() from e
    if parts.scheme.lower() not in ("http", "https") or not host:
        raise InvalidURLError()
    return url
