"""
MoodJourney Backend — Shared Response Envelopes
================================================

Every response body is a JSON object with a `success` flag. Successful
responses carry `data` (and sometimes a `message`); failures carry an
`error` string plus the request id for log correlation.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Failure envelope produced by the global exception handlers.

    Example:
        {"success": false, "error": "Mood entry not found", "request_id": "1f3a9c2e"}
    """
    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Success envelope without a payload (e.g. after a delete)."""
    success: bool = Field(default=True)
    message: str


class HealthResponse(BaseModel):
    """Static liveness payload returned by /v1/health."""
    success: bool = Field(default=True)
    status: str = Field(default="healthy")
    message: str = Field(default="MoodTracker API is running")
