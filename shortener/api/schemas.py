"""
API Request and Response Schemas

Pydantic models for the HTTP transport.

The submitted URL is a plain string: validation happens in the shortening
service so the URL is stored exactly as sent (pydantic's HttpUrl would
normalize it, e.g. by appending a trailing slash).
"""

from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request body for the shortening endpoint."""
    url: str = Field(..., description="The long URL to shorten")


class ShortenResponse(BaseModel):
    """Response body for the shortening endpoint."""
    url: str = Field(..., description="The complete short link")


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""
    error: str = Field(..., description="Stable failure classification")
    detail: Optional[str] = Field(default=None, description="Human readable message")
