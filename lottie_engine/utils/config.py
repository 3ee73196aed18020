"""Engine configuration.

Defaults match the behavior players and the editing surface expect; every
value can be overridden through ``LOTTIE_*`` environment variables or a
``.env`` file.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_prefix="LOTTIE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    color_tolerance: float = Field(default=0.01, gt=0, lt=1)
    max_traversal_depth: int = Field(default=20, ge=1)
    compression_level: int = Field(default=9, ge=0, le=9)
    max_file_size_mb: int = Field(default=10, ge=1)
    render_debounce_ms: int = Field(default=50, ge=0)
    history_limit: int = Field(default=50, ge=1)
    default_frame_end: float = 60
    speed_min: float = 0.1
    speed_max: float = 5.0
    player_cdn_url: str = "https://cdnjs.cloudflare.com/ajax/libs/lottie-web/5.13.0/lottie.min.js"
    log_level: str = "WARNING"


settings = Settings()
