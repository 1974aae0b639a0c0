"""API request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class LoginRequest(BaseModel):
    """Local user login request."""

    username: str = Field(..., description="Local username")
    password: str = Field(..., description="Plaintext password")


class LoginResponse(BaseModel):
    """Login response carrying the bearer token."""

    token: str = Field(..., description="Send back in the X-Auth-Token header")


class AuthorizationResponse(BaseModel):
    """One authorization claim of the caller."""

    authz_id: str
    principal_name: str
    tenant_name: str
    role: str
    local: bool


class MetricsResponse(BaseModel):
    """Metrics snapshot."""

    counters: dict[str, float] = Field(default_factory=dict)
    histograms: dict[str, dict[str, Any]] = Field(default_factory=dict)

