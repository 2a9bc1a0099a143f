"""
Level configuration and its asynchronous loader.

The level file looks like::

    {"levels": [{"goal": 15, "timeLimit": 60, "spawnRate": 0.8, "crowRate": 5}, ...]}

It is read from a local path or fetched over http(s). Any failure falls
back to the built-in three level table.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from harvest.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)


# Fixed scarecrow spots, used in order. Level N uses the first N + 1.
SCARECROW_POSITIONS: tuple[tuple[float, float], ...] = (
    (200.0, 220.0),
    (650.0, 160.0),
    (400.0, 300.0),
    (100.0, 400.0),
)


def scarecrow_count(level: int) -> int:
    """Number of scarecrows on the field for a 1-based level."""
    return min(level + 1, len(SCARECROW_POSITIONS))


class LevelConfig(BaseModel):
    """Parameters of a single level."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    goal: int = Field(ge=1)
    time_limit: float = Field(alias="timeLimit", gt=0)
    spawn_rate: float = Field(alias="spawnRate", gt=0)
    crow_rate: float = Field(alias="crowRate", gt=0)


class GameConfig(BaseModel):
    """Ordered level table, index 0 is level 1."""

    model_config = ConfigDict(frozen=True)

    levels: tuple[LevelConfig, ...] = Field(min_length=1)

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def level(self, number: int) -> LevelConfig:
        """Get parameters for a 1-based level number."""
        if not 1 <= number <= len(self.levels):
            raise IndexError(f"Level {number} not configured (1..{len(self.levels)})")
        return self.levels[number - 1]


DEFAULT_CONFIG = GameConfig(levels=(
    LevelConfig(goal=15, time_limit=60, spawn_rate=0.8, crow_rate=5),
    LevelConfig(goal=30, time_limit=60, spawn_rate=0.6, crow_rate=4),
    LevelConfig(goal=45, time_limit=60, spawn_rate=0.4, crow_rate=3),
))


def parse_level_config(raw: str | bytes) -> GameConfig:
    """Validate a JSON level document."""
    return GameConfig.model_validate_json(raw)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_level_config(source: str, timeout: float = 5.0) -> GameConfig:
    """Read and validate the level file.

    Raises:
        OSError, aiohttp.ClientError, asyncio.TimeoutError, ValidationError
    """
    if _is_url(source):
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(source) as response:
                response.raise_for_status()
                raw = await response.text()
    else:
        raw = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")

    return parse_level_config(raw)


class LevelConfigLoader:
    """
    One-shot background load of the level table.

    ``ready`` flips to True once a config is available, whether it came
    from the source or from the fallback. Loading twice is harmless.
    """

    def __init__(
        self,
        source: str,
        timeout: float = 5.0,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.source = source
        self.timeout = timeout
        self._event_bus = event_bus
        self._config: Optional[GameConfig] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def ready(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> Optional[GameConfig]:
        """Loaded config, or None while loading."""
        return self._config

    def begin(self) -> asyncio.Task:
        """Start loading in the background (needs a running loop)."""
        if self._task is None:
            self._task = asyncio.create_task(self.load())
        return self._task

    async def wait(self) -> GameConfig:
        """Wait until a config is available."""
        if self._config is not None:
            return self._config
        return await self.begin()

    def use(self, config: GameConfig) -> None:
        """Install a config directly, skipping the source."""
        self._set(config, origin="direct")

    async def load(self) -> GameConfig:
        if self._config is not None:
            return self._config

        try:
            config = await fetch_level_config(self.source, self.timeout)
            origin = self.source
        except (OSError, aiohttp.ClientError, asyncio.TimeoutError, ValidationError, ValueError) as e:
            logger.warning(f"Level config load failed ({self.source}), using defaults: {e}")
            config = DEFAULT_CONFIG
            origin = "defaults"

        self._set(config, origin)
        return config

    def _set(self, config: GameConfig, origin: str) -> None:
        self._config = config
        logger.info(f"Level config ready: {config.level_count} levels from {origin}")
        if self._event_bus is not None:
            self._event_bus.emit(Event(
                EventType.CONFIG_LOADED,
                data={"levels": config.level_count, "origin": origin},
                source="config",
            ))
