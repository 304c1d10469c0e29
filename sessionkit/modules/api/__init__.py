"""
API Module - Black Box Interface

Purpose: Response models for the HTTP surface
Interface: CountResponse, LogoutResponse, HealthResponse
Hidden: Field validation

The API layer only orchestrates; session logic lives in the session module.
"""

from .models import CountResponse, HealthResponse, LogoutResponse

__all__ = ["CountResponse", "HealthResponse", "LogoutResponse"]
