"""
SessionKit API data models.

Response bodies for the demonstration endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CountResponse(BaseModel):
    """Visit counter stored in the caller's session."""

    count: int = Field(..., description="Visits recorded in this session", ge=1)
    next_url: str = Field(
        ..., description="Link carrying the session token for clients without cookies"
    )


class LogoutResponse(BaseModel):
    """Result of ending a session."""

    ended: bool = Field(..., description="Whether the request carried a session to end")


class HealthResponse(BaseModel):
    """Service health."""

    status: str = "healthy"
    provider: str
    active_sessions: Optional[int] = Field(None, description="Live sessions, if the provider is reachable")
