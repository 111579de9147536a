"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Depends

from logopack.backends.base import RenderBackend
from logopack.backends.loader import load_backend
from logopack.config import Settings, settings


def get_settings() -> Settings:
    return settings


def get_backend(app_settings: Settings = Depends(get_settings)) -> RenderBackend:
    return load_backend(app_settings)
