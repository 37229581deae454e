"""
Portfolio Backend — Shared Response Schemas
=============================================

What:  Error and health payloads shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "Invalid username or password",
            "code": "authentication_error",
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    message: str = Field(description="Human-readable status line")
    version: str = Field(description="Application version")
    environment: str
    database: str = Field(description="Database connectivity: connected, disconnected")
    media_store: str = Field(description="Media store status: available, unavailable")
    media_backend: str
    timestamp: str = Field(description="Server time (UTC ISO 8601)")
    uptime_seconds: float = Field(description="Seconds since service started")
