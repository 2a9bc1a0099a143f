"""Random placement of crops, scarecrows and crows."""

import math
import random
from typing import Optional, Sequence

from harvest.core.geometry import Box, overlaps
from harvest.game.entities import Crop, CropType, Crow, Scarecrow

CROW_MARGIN_Y = 50.0

# Cumulative thresholds for a uniform draw in [0, 1)
CROP_ODDS: tuple[tuple[float, CropType], ...] = (
    (0.3, CropType.WHEAT),
    (0.8, CropType.PUMPKIN),
)


def pick_crop_type(r: float) -> CropType:
    """Map a uniform draw to a crop tier: 30% wheat, 50% pumpkin, 20% golden apple."""
    for threshold, crop_type in CROP_ODDS:
        if r < threshold:
            return crop_type
    return CropType.GOLDEN_APPLE


def grid_position(r: float, extent: float, tile: float) -> float:
    """Snap a uniform draw to a tile, skipping the outer ring."""
    return math.floor(r * ((extent - 2 * tile) / tile)) * tile + tile


def spawn_crop(rng: random.Random, field_width: float, field_height: float, tile: float) -> Crop:
    gx = grid_position(rng.random(), field_width, tile)
    gy = grid_position(rng.random(), field_height, tile)
    crop_type = pick_crop_type(rng.random())
    return Crop(x=gx, y=gy, crop_type=crop_type, sway=rng.uniform(0.0, 2 * math.pi))


def crow_velocity(rng: random.Random) -> float:
    """Signed horizontal speed, magnitude in [MIN_SPEED, MAX_SPEED]."""
    speed = rng.uniform(Crow.MIN_SPEED, Crow.MAX_SPEED)
    return speed if rng.random() < 0.5 else -speed


def spawn_crow(rng: random.Random, field_width: float) -> Crow:
    return Crow(x=rng.random() * field_width, y=CROW_MARGIN_Y, vx=crow_velocity(rng))


def respawn_crow(crow: Crow, rng: random.Random, field_width: float) -> None:
    """Move a crow back to the top margin at a new random x. Speed is kept."""
    crow.x = rng.random() * field_width
    crow.y = CROW_MARGIN_Y


def place_scarecrows(
    existing: Sequence[Scarecrow],
    positions: Sequence[tuple[float, float]],
    count: int,
    keep_clear: Optional[Box] = None,
) -> list[Scarecrow]:
    """Scarecrows for the first ``count`` positions.

    Existing scarecrows are kept as they are; only the free positions get
    new ones. A new scarecrow that would overlap ``keep_clear`` is left out
    until a later call finds its position clear.
    """
    placed = list(existing[:count])
    taken = {(s.x, s.y) for s in placed}
    for x, y in positions[:count]:
        if len(placed) >= count:
            break
        if (x, y) in taken:
            continue
        scarecrow = Scarecrow(x=x, y=y)
        if keep_clear is not None and overlaps(scarecrow, keep_clear):
            continue
        placed.append(scarecrow)
    return placed
