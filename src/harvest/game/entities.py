"""
Game entities.

Every entity is a spatial record (x, y, w, h, dead) tagged with an
EntityKind. The session dispatches on the tag; entity classes only carry
the behavior that belongs to their own kind.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable

from harvest.core.geometry import Box, clamp, overlaps


class EntityKind(Enum):
    PLAYER = auto()
    CROP = auto()
    SCARECROW = auto()
    CROW = auto()


class CropType(Enum):
    """Crop tiers and their point values."""
    WHEAT = "wheat"
    PUMPKIN = "pumpkin"
    GOLDEN_APPLE = "golden_apple"

    @property
    def points(self) -> int:
        return CROP_POINTS[self]


CROP_POINTS = {
    CropType.WHEAT: 1,
    CropType.PUMPKIN: 3,
    CropType.GOLDEN_APPLE: 5,
}


class Facing(Enum):
    """Sprite sheet rows for the walk cycle."""
    DOWN = 0
    LEFT = 1
    RIGHT = 2
    UP = 3


@dataclass(kw_only=True)
class Entity:
    """Common spatial record."""
    kind: EntityKind
    x: float
    y: float
    w: float
    h: float
    dead: bool = False

    @property
    def is_static_obstacle(self) -> bool:
        return self.kind is EntityKind.SCARECROW

    @property
    def is_moving_obstacle(self) -> bool:
        return self.kind is EntityKind.CROW


@dataclass(frozen=True)
class DirectionKeys:
    """Snapshot of the held movement keys."""
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False


@dataclass(kw_only=True)
class Player(Entity):
    """The farmer."""
    SIZE = 34.0
    SPEED = 260.0
    FRAME_COUNT = 4
    FRAME_DURATION = 0.15  # seconds per walk frame

    kind: EntityKind = field(default=EntityKind.PLAYER, init=False)
    w: float = SIZE
    h: float = SIZE
    vx: float = 0.0
    vy: float = 0.0
    speed: float = SPEED

    # Walk cycle
    frame: int = 0
    facing: Facing = Facing.DOWN
    frame_time: float = 0.0
    moving: bool = False

    def apply_input(self, keys: DirectionKeys) -> None:
        """Set velocity from held keys. Opposite keys cancel out."""
        self.vx = (int(keys.right) - int(keys.left)) * self.speed
        self.vy = (int(keys.down) - int(keys.up)) * self.speed

    def advance(
        self,
        dt: float,
        blockers: Iterable[Box],
        field_width: float,
        field_height: float,
    ) -> bool:
        """Move by velocity * dt inside the field.

        The move is all or nothing: if the new box touches any blocker the
        player stays where it was.

        Returns:
            True if the move was applied
        """
        self._animate(dt)

        old_x, old_y = self.x, self.y
        self.x = clamp(self.x + self.vx * dt, 0.0, field_width - self.w)
        self.y = clamp(self.y + self.vy * dt, 0.0, field_height - self.h)

        if any(overlaps(self, blocker) for blocker in blockers):
            self.x, self.y = old_x, old_y
            return False
        return True

    def _animate(self, dt: float) -> None:
        self.moving = abs(self.vx) + abs(self.vy) > 0
        if not self.moving:
            self.frame = 0
            self.frame_time = 0.0
            return

        self.frame_time += dt
        if self.frame_time >= self.FRAME_DURATION:
            self.frame = (self.frame + 1) % self.FRAME_COUNT
            self.frame_time = 0.0

        # Ties go to the vertical rows
        if abs(self.vy) >= abs(self.vx):
            self.facing = Facing.DOWN if self.vy > 0 else Facing.UP
        else:
            self.facing = Facing.RIGHT if self.vx > 0 else Facing.LEFT


@dataclass(kw_only=True)
class Crop(Entity):
    """Collectible crop."""
    WIDTH = 20.0
    HEIGHT = 26.0
    SWAY_SPEED = 2.0  # radians per second

    kind: EntityKind = field(default=EntityKind.CROP, init=False)
    w: float = WIDTH
    h: float = HEIGHT
    crop_type: CropType = CropType.WHEAT
    sway: float = 0.0

    @property
    def points(self) -> int:
        return self.crop_type.points

    def advance(self, dt: float) -> None:
        self.sway += dt * self.SWAY_SPEED


@dataclass(kw_only=True)
class Scarecrow(Entity):
    """Static blocker."""
    WIDTH = 26.0
    HEIGHT = 46.0

    kind: EntityKind = field(default=EntityKind.SCARECROW, init=False)
    w: float = WIDTH
    h: float = HEIGHT


@dataclass(kw_only=True)
class Crow(Entity):
    """Horizontal mover that wraps around the field."""
    WIDTH = 20.0
    HEIGHT = 16.0
    MIN_SPEED = 100.0
    MAX_SPEED = 200.0

    kind: EntityKind = field(default=EntityKind.CROW, init=False)
    w: float = WIDTH
    h: float = HEIGHT
    vx: float = MIN_SPEED
    color: str = "crow"

    def advance(self, dt: float, field_width: float) -> None:
        self.x += self.vx * dt
        if self.x < -self.w:
            self.x = field_width
        if self.x > field_width:
            self.x = -self.w


@dataclass(frozen=True)
class EntitySnapshot:
    """What the renderer needs to paint one entity."""
    kind: EntityKind
    x: float
    y: float
    w: float
    h: float
    variant: str
    phase: float = 0.0


def snapshot(entity: Entity) -> EntitySnapshot:
    """Freeze an entity for the renderer."""
    variant = entity.kind.name.lower()
    phase = 0.0

    if entity.kind is EntityKind.CROP:
        variant = entity.crop_type.value
        phase = entity.sway
    elif entity.kind is EntityKind.CROW:
        variant = entity.color
    elif entity.kind is EntityKind.PLAYER:
        variant = entity.facing.name.lower()
        phase = float(entity.frame)

    return EntitySnapshot(
        kind=entity.kind,
        x=entity.x,
        y=entity.y,
        w=entity.w,
        h=entity.h,
        variant=variant,
        phase=phase,
    )
