"""
Common API schemas.
"""

from pydantic import BaseModel
from enum import Enum


class ResponseStatus(str, Enum):
    """Response status enum."""

    OK = "ok"
    HEALTHY = "healthy"


class StatusResponse(BaseModel):
    """Root endpoint response."""

    status: ResponseStatus = ResponseStatus.OK
    name: str
    version: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: ResponseStatus = ResponseStatus.HEALTHY


class ErrorResponse(BaseModel):
    """Body of an HTTPException response."""

    detail: str
