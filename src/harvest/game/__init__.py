"""Farmer Harvest gameplay: entities, spawning, session and HUD."""

from .entities import (
    Crop,
    CropType,
    Crow,
    DirectionKeys,
    Entity,
    EntityKind,
    EntitySnapshot,
    Facing,
    Player,
    Scarecrow,
)
from .session import HarvestGame, RenderFrame, effective_spawn_interval
from .hud import HudPanel, HudText, project_hud

__all__ = [
    "Crop",
    "CropType",
    "Crow",
    "DirectionKeys",
    "Entity",
    "EntityKind",
    "EntitySnapshot",
    "Facing",
    "Player",
    "Scarecrow",
    "HarvestGame",
    "RenderFrame",
    "effective_spawn_interval",
    "HudPanel",
    "HudText",
    "project_hud",
]
