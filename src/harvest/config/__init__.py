"""Configuration: environment settings, level table, palette."""

from .settings import Settings, get_settings
from .levels import (
    DEFAULT_CONFIG,
    GameConfig,
    LevelConfig,
    LevelConfigLoader,
    fetch_level_config,
    parse_level_config,
)
from .theme import Theme, load_theme

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_CONFIG",
    "GameConfig",
    "LevelConfig",
    "LevelConfigLoader",
    "fetch_level_config",
    "parse_level_config",
    "Theme",
    "load_theme",
]
