"""Application configuration from environment variables."""

from __future__ import annotations

import tempfile

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    logopack_env: str = "development"
    logopack_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Rendering backend: "cairosvg" (in-process) or "inkscape" (CLI)
    render_backend: str = "cairosvg"
    inkscape_path: str = "inkscape"
    backend_timeout_s: float = 30.0

    # Whole-job timeout, independent of the backend timeout
    request_timeout_s: float = 120.0
    max_upload_mb: int = 10

    # Empty = system temp directory
    temp_dir: str = ""

    # Export tuning
    ico_size: int = 32
    pdf_page_size: float = 600.0
    pdf_mode: str = "vector"  # "vector" redraws primitives, "raster" embeds a PNG
    recolor_strategy: str = "rewrite"  # "rewrite" edits fill/stroke, "filter" wraps in feColorMatrix
    jpeg_quality: int = 90
    fallback_size: int = 300

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def work_dir(self) -> str:
        return self.temp_dir or tempfile.gettempdir()


settings = Settings()
