"""Error response body shared by every endpoint."""

from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus
from typing import List

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: int
    error: str
    message: str
    details: List[str] = Field(default_factory=list)

    @classmethod
    def build(cls, status_code: int, message: str, details: list[str] | None = None) -> "ErrorResponse":
        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = "Error"
        return cls(status=status_code, error=reason, message=message, details=list(details or []))
