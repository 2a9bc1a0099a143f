"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FieldSettings(BaseSettings):
    """Playfield geometry."""

    width: int = Field(default=900, gt=0)
    height: int = Field(default=540, gt=0)
    tile: int = Field(default=30, gt=0)


class WindowSettings(BaseSettings):
    """Desktop window settings."""

    title: str = "Farmer Harvest"
    fps: int = 60
    scale: int = Field(default=1, ge=1)
    hud_height: int = 40
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Level file: local path or http(s) URL
    levels_source: str = "config/levels.json"
    levels_timeout: float = 5.0

    theme_file: str = "config/themes/farm.yaml"

    # Simulation
    max_frame_delta: float = Field(default=0.033, gt=0.0)
    seed: Optional[int] = None

    # Nested settings
    playfield: FieldSettings = Field(default_factory=FieldSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
