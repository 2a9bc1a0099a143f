"""
Field palette and theme loading utilities.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any
import logging

import yaml

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


@dataclass
class FieldColors:
    """Background and HUD colors."""
    grass: str = "#dff0d5"
    grid: str = "#c7e0bd"
    label: str = "#333333"
    hud_background: str = "#2b3a22"
    hud_text: str = "#f2f2e6"


@dataclass
class EntityColors:
    """Colors used to paint entities."""
    farmer: str = "#8b5a2b"
    farmer_hat: str = "#c28e0e"
    stalk: str = "#2f7d32"
    wheat: str = "#d9a441"
    pumpkin: str = "#ff7518"
    golden_apple: str = "#ffd700"
    shine: str = "#fff8d0"
    scarecrow_pole: str = "#9b7653"
    scarecrow_head: str = "#c28e0e"
    scarecrow_arms: str = "#6b4f2a"
    crow: str = "#000000"
    crow_eye: str = "#ffffff"


def to_rgb(hex_color: str) -> RGB:
    """Convert hex color to RGB tuple."""
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


@dataclass
class Theme:
    """Complete palette for the renderer."""
    name: str = "farm"
    ground: FieldColors = field(default_factory=FieldColors)
    entities: EntityColors = field(default_factory=EntityColors)

    def rgb(self, name: str) -> RGB:
        """Look up a color by name in entities first, then ground."""
        for group in (self.entities, self.ground):
            if hasattr(group, name):
                return to_rgb(getattr(group, name))
        raise KeyError(f"Unknown theme color: {name}")

    @classmethod
    def from_yaml(cls, data: dict[str, Any]) -> "Theme":
        """Create theme from YAML data. Unknown keys are ignored."""
        theme = cls(name=data.get("name", "farm"))

        if "ground" in data:
            theme.ground = FieldColors(**_known(FieldColors, data["ground"]))

        if "entities" in data:
            theme.entities = EntityColors(**_known(EntityColors, data["entities"]))

        return theme


def _known(cls: type, values: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: str(v) for k, v in (values or {}).items() if k in names}


def load_theme(theme_file: str | Path) -> Theme:
    """
    Load a theme from a YAML file.

    Returns the default palette if the file is missing or malformed.
    """
    path = Path(theme_file)

    if not path.exists():
        logger.info(f"Theme file {path} not found, using default palette")
        return Theme()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        theme = Theme.from_yaml(data)
        # Every color must be a valid hex string
        for group in (theme.ground, theme.entities):
            for color in fields(group):
                to_rgb(getattr(group, color.name))
    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Theme load failed ({path}), using default palette: {e}")
        return Theme()

    logger.info(f"Loaded theme: {theme.name}")
    return theme
