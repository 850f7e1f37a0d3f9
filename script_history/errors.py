"""Error types raised by the history engine.

Each error carries a machine-readable code and can be rendered as the
canonical error envelope:
{
  "error": {
    "code": "history.corrupt",
    "message": "string",
    "details": {}
  }
}
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


class HistoryError(Exception):
    """Base history engine error."""

    code = "history.error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(
            error=ErrorDetail(code=self.code, message=self.message, details=self.details)
        )


class CorruptHistory(HistoryError):
    """Raised when a log cannot be replayed against the snapshot it is chained from."""

    code = "history.corrupt"


class InvalidArgument(HistoryError, ValueError):
    """Raised when a caller passes arguments the engine cannot work with."""

    code = "history.invalid_argument"
