from __future__ import annotations

import random
from typing import Iterator

import pytest

from harvest.config.levels import DEFAULT_CONFIG, LevelConfigLoader
from harvest.core.events import EventBus
from harvest.game.entities import Crop, CropType, Crow
from harvest.game.session import HarvestGame


class FixedRandom(random.Random):
    """Random source whose uniform draws always return the same value."""

    def __init__(self, value: float = 0.0) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.value


@pytest.fixture()
def ready_loader() -> LevelConfigLoader:
    loader = LevelConfigLoader("does-not-exist.json")
    loader.use(DEFAULT_CONFIG)
    return loader


@pytest.fixture()
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def game(ready_loader: LevelConfigLoader, event_bus: EventBus) -> Iterator[HarvestGame]:
    session = HarvestGame(ready_loader, event_bus=event_bus, rng=random.Random(7))
    yield session
    session.close()


@pytest.fixture()
def playing(game: HarvestGame) -> HarvestGame:
    assert game.start()
    return game


def crop_under_player(game: HarvestGame, crop_type: CropType) -> Crop:
    """Put a crop right on top of the farmer."""
    crop = Crop(x=game.player.x + 5, y=game.player.y + 5, crop_type=crop_type, sway=0.0)
    game.crops.append(crop)
    return crop


def crow_on_player(game: HarvestGame) -> Crow:
    """Put a motionless crow on top of the farmer."""
    crow = Crow(x=game.player.x + 5, y=game.player.y + 5, vx=0.0)
    game.obstacles.append(crow)
    return crow
