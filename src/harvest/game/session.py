"""
Farmer Harvest game session.

Owns every entity, the score, the round timer and the level index, and
advances them once per frame through tick(). State changes go through
the StateMachine:

    MENU -> PLAYING <-> PAUSED
    PLAYING -> GAME_OVER   (round timer ran out)
    PLAYING -> WIN         (goal of the last level reached)

reset() returns to MENU from anywhere; start() from MENU, GAME_OVER or
WIN performs a full reset and begins level 1.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from harvest.config.levels import (
    DEFAULT_CONFIG,
    SCARECROW_POSITIONS,
    GameConfig,
    LevelConfig,
    LevelConfigLoader,
    scarecrow_count,
)
from harvest.core.events import Event, EventBus, EventType
from harvest.core.geometry import clamp, overlaps
from harvest.core.state import GameState, StateMachine
from harvest.game.entities import (
    Crop,
    Crow,
    DirectionKeys,
    Entity,
    EntitySnapshot,
    Player,
    Scarecrow,
    snapshot,
)
from harvest.game.spawner import place_scarecrows, respawn_crow, spawn_crop, spawn_crow

logger = logging.getLogger(__name__)


FIELD_WIDTH = 900
FIELD_HEIGHT = 540
TILE = 30

CROW_PENALTY = 2
RAMP_STRENGTH = 0.5
MIN_SPAWN_INTERVAL = 0.1

STATUS_MENU = "Menu"
STATUS_PLAYING = "Playing…"
STATUS_PAUSED = "Paused"
STATUS_LOADING = "Loading config..."
STATUS_TIME_UP = "Time's Up! Game Over"
STATUS_WIN = "All Levels Complete! You Win!"


def effective_spawn_interval(base: float, time_left: float, time_limit: float) -> float:
    """Crop spawn interval after the in-round difficulty ramp.

    Shrinks linearly from ``base`` at round start to ``base - 0.5`` at
    time-up, never below MIN_SPAWN_INTERVAL.
    """
    progress = 1.0 - time_left / time_limit
    return clamp(base - RAMP_STRENGTH * progress, MIN_SPAWN_INTERVAL, base)


@dataclass(frozen=True)
class RenderFrame:
    """Per-frame snapshot handed to the renderer and the HUD."""
    entities: tuple[EntitySnapshot, ...]
    state: GameState
    level: int
    score: int
    time_left: float
    goal: int
    status: str


class HarvestGame:
    """The game loop and level progression.

    Args:
        loader: Source of the level table; start() waits for it
        event_bus: Receives gameplay events (optional)
        rng: Random source for all spawns
        read_input: Returns the held direction keys for this tick
    """

    def __init__(
        self,
        loader: LevelConfigLoader,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        read_input: Optional[Callable[[], DirectionKeys]] = None,
        field_width: float = FIELD_WIDTH,
        field_height: float = FIELD_HEIGHT,
        tile: float = TILE,
    ) -> None:
        self._loader = loader
        self.event_bus = event_bus or EventBus()
        self._rng = rng or random.Random()
        self._read_input = read_input or DirectionKeys
        self.field_width = field_width
        self.field_height = field_height
        self.tile = tile

        self.machine = StateMachine()
        self._release_state_listener = self.machine.add_listener(self._on_state_changed)

        self._config: GameConfig = loader.config or DEFAULT_CONFIG

        # Session state, filled by _full_reset()
        self.level = 1
        self.score = 0
        self.goal = 0
        self.time_left = 0.0
        self.spawn_interval = 0.0
        self.effective_interval = 0.0
        self.crow_interval = 0.0
        self._crop_accum = 0.0
        self._crow_accum = 0.0
        self.player = self._new_player()
        self.crops: list[Crop] = []
        self.obstacles: list[Entity] = []
        self.status = STATUS_MENU

        self._full_reset()
        logger.info("HarvestGame initialized")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self.machine.state

    @property
    def config(self) -> GameConfig:
        """Level table used by the current run."""
        return self._config

    @property
    def level_config(self) -> LevelConfig:
        return self._config.level(self.level)

    @property
    def scarecrows(self) -> list[Scarecrow]:
        return [o for o in self.obstacles if o.is_static_obstacle]

    @property
    def crows(self) -> list[Crow]:
        return [o for o in self.obstacles if o.is_moving_obstacle]

    def frame(self) -> RenderFrame:
        """Snapshot for drawing: crops first, then obstacles, then the player."""
        entities = [snapshot(c) for c in self.crops]
        entities += [snapshot(o) for o in self.obstacles]
        entities.append(snapshot(self.player))
        return RenderFrame(
            entities=tuple(entities),
            state=self.state,
            level=self.level,
            score=self.score,
            time_left=self.time_left,
            goal=self.goal,
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start, restart or resume.

        Returns:
            True if the game is playing afterwards. False while the level
            config is still loading; call again (or start_when_ready()).
        """
        if not self._loader.ready:
            self.status = STATUS_LOADING
            logger.info("Start requested before level config is ready")
            return False

        if self.state in (GameState.MENU, GameState.GAME_OVER, GameState.WIN):
            self.reset()
            self.machine.transition(GameState.PLAYING)
            self.status = STATUS_PLAYING
        elif self.state is GameState.PAUSED:
            self.machine.transition(GameState.PLAYING)
            self.status = STATUS_PLAYING

        return self.state is GameState.PLAYING

    async def start_when_ready(self) -> bool:
        """Wait for the level config, then start()."""
        await self._loader.wait()
        return self.start()

    def reset(self) -> None:
        """Back to the menu with a fresh level 1 run."""
        self._full_reset()
        self.machine.reset()
        self.status = STATUS_MENU

    def toggle_pause(self) -> None:
        if self.state is GameState.PLAYING:
            self.machine.transition(GameState.PAUSED)
            self.status = STATUS_PAUSED
        elif self.state is GameState.PAUSED:
            self.machine.transition(GameState.PLAYING)
            self.status = STATUS_PLAYING

    def close(self) -> None:
        """Release the state listener."""
        self._release_state_listener()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, dt: float, keys: Optional[DirectionKeys] = None) -> None:
        """Advance the simulation by ``dt`` seconds. No-op unless PLAYING."""
        if self.state is not GameState.PLAYING:
            return

        level = self.level_config

        # Countdown; time-up always loses
        self.time_left = clamp(self.time_left - dt, 0.0, level.time_limit)
        if self.time_left <= 0:
            self.status = STATUS_TIME_UP
            self.machine.transition(GameState.GAME_OVER)
            return

        # Player
        self.player.apply_input(keys if keys is not None else self._read_input())
        self.player.advance(dt, self.scarecrows, self.field_width, self.field_height)

        # Crows
        self._crow_accum += dt
        while self._crow_accum >= self.crow_interval:
            self._crow_accum -= self.crow_interval
            self.obstacles.append(spawn_crow(self._rng, self.field_width))

        for crow in self.crows:
            crow.advance(dt, self.field_width)

        self._penalize_crow_hits()

        # Crops
        self.effective_interval = effective_spawn_interval(
            self.spawn_interval, self.time_left, level.time_limit
        )
        self._crop_accum += dt
        while self._crop_accum >= self.effective_interval:
            self._crop_accum -= self.effective_interval
            self.crops.append(
                spawn_crop(self._rng, self.field_width, self.field_height, self.tile)
            )

        if self._collect_crops() and self.score >= self.goal:
            self._advance_level()

        for crop in self.crops:
            crop.advance(dt)

    def _penalize_crow_hits(self) -> None:
        hits = [c for c in self.crows if overlaps(self.player, c)]
        if not hits:
            return

        for crow in hits:
            self.score = max(0, self.score - CROW_PENALTY)
            respawn_crow(crow, self._rng, self.field_width)

        logger.debug(f"Crow hit x{len(hits)}, score {self.score}")
        self.event_bus.emit(Event(
            EventType.CROW_HIT,
            data={"count": len(hits), "score": self.score},
        ))

    def _collect_crops(self) -> int:
        """Collect every crop under the player. Returns points gained."""
        collected = [c for c in self.crops if overlaps(self.player, c)]
        if not collected:
            return 0

        for crop in collected:
            crop.dead = True
        gained = sum(c.points for c in collected)
        self.score += gained
        self.crops = [c for c in self.crops if not c.dead]

        self.event_bus.emit(Event(
            EventType.CROP_COLLECTED,
            data={
                "crops": [c.crop_type.value for c in collected],
                "points": gained,
                "score": self.score,
            },
        ))
        return gained

    # ------------------------------------------------------------------
    # Level lifecycle
    # ------------------------------------------------------------------

    def _advance_level(self) -> None:
        self.level += 1
        self.status = f"Level {self.level} Started!"

        if self.level > self._config.level_count:
            self.status = STATUS_WIN
            logger.info(f"All {self._config.level_count} levels complete, score {self.score}")
            self.machine.transition(GameState.WIN)
            return

        self.goal = self.level_config.goal
        self._reset_round()
        logger.info(f"Level {self.level} started, goal {self.goal}")
        self.event_bus.emit(Event(
            EventType.LEVEL_ADVANCED,
            data={"level": self.level, "goal": self.goal, "score": self.score},
        ))

    def _full_reset(self) -> None:
        self._config = self._loader.config or DEFAULT_CONFIG

        self.level = 1
        self.score = 0
        self.player = self._new_player()
        self.crops = []
        self.obstacles = []
        self._load_level_parameters()
        self.goal = self.level_config.goal
        self.obstacles = place_scarecrows([], SCARECROW_POSITIONS, scarecrow_count(self.level))
        self._resync_timer()

    def _reset_round(self) -> None:
        self.crops = []
        self.obstacles = place_scarecrows(
            self.scarecrows,
            SCARECROW_POSITIONS,
            scarecrow_count(self.level),
            keep_clear=self.player,
        )
        self._load_level_parameters()
        self._resync_timer()

    def _load_level_parameters(self) -> None:
        level = self.level_config
        self.time_left = level.time_limit
        self.spawn_interval = level.spawn_rate
        self.effective_interval = level.spawn_rate
        self.crow_interval = level.crow_rate
        self._crop_accum = 0.0
        self._crow_accum = 0.0

    def _resync_timer(self) -> None:
        self.event_bus.emit(Event(EventType.TIMER_RESYNC))

    def _new_player(self) -> Player:
        return Player(
            x=self.field_width / 2 - Player.SIZE / 2,
            y=self.field_height - 80,
        )

    def _on_state_changed(self, old_state: GameState, new_state: GameState) -> None:
        self.event_bus.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old_state, "to": new_state, "level": self.level, "score": self.score},
        ))
