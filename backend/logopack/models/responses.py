"""API response models."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    exporters_registered: int = 0


class BackendStatusResponse(BaseModel):
    backend: str
    available: bool
    version: str = ""
    message: str = ""


class ErrorResponse(BaseModel):
    success: bool = False
    code: str
    message: str
