"""Envelope models shared by the API routers."""

import time
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for failed writes and unknown resources.

    Attributes:
        error: Human-readable error message
        code: Error code from the procurement error taxonomy
        details: Optional additional error details
    """

    error: str
    code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response.

    ``status`` is "degraded" while no spreadsheet credential is active, since
    reads are then served from seed data and writes are refused.
    """

    status: Literal["healthy", "degraded"]
    timestamp: float
    service: str
    data_mode: Literal["live", "mock"]
    version: Optional[str] = None

    @classmethod
    def for_mode(cls, service: str, live: bool, version: Optional[str] = None) -> "HealthResponse":
        return cls(
            status="healthy" if live else "degraded",
            timestamp=time.time(),
            service=service,
            data_mode="live" if live else "mock",
            version=version,
        )


class TokenRequest(BaseModel):
    """Access token handed over by the external sign-in flow."""

    access_token: str = Field(..., min_length=1)
    expires_in: Optional[float] = Field(default=None, gt=0, description="Seconds until expiry")
