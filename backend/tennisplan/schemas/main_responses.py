"""
Response models for main application endpoints.

These models keep the root and health check responses
consistent across the API.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RootResponse(BaseModel):
    """Response for root endpoint."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(description="Welcome message")
    version: str = Field(description="API version")
    docs: str = Field(description="Documentation URL")
    environment: str = Field(description="Environment name")


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Environment name")
    timestamp: str = Field(description="UTC ISO8601Z timestamp of the health response")
    database: Optional[str] = Field(default=None, description="Database reachability (ok/error)")


class HealthLiteResponse(BaseModel):
    """Response for lightweight health check endpoint."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(description="Health status (ok/error)")
