"""
Health check schemas.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Overall health status: ok | degraded | down")
    timestamp: str = Field(description="ISO 8601 timestamp")
    services: dict[str, str] = Field(
        description="Individual service statuses: database, translation_provider"
    )
    version: str = Field(default="0.1.0", description="Application version")
