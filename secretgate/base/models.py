"""Response models written back to the caller as JSON."""

from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, Field


class OperationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class Error(BaseModel):
    """Structured description of a failed store call."""

    type: str = Field(default="", description="Classifier label, e.g. 'ResourceNotFoundException'")
    message: str = Field(description="Human-readable summary")
    reason: str = Field(default="", description="Underlying error text")


class ValidationResponse(BaseModel):
    valid: bool
    error: Error | None = None


class OperationResponse(BaseModel):
    name: str
    message: str
    status: OperationStatus
    error: Error | None = None


class SecretResponse(BaseModel):
    value: str


class ErrorResponse(BaseModel):
    """Request-level failure: bad payload, missing config, or setup error."""

    message: str
    error: str
    status: int
