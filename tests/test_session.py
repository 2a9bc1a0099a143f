from __future__ import annotations

import pytest

from conftest import FixedRandom, crop_under_player, crow_on_player

from harvest.config.levels import DEFAULT_CONFIG, GameConfig, LevelConfig, LevelConfigLoader
from harvest.core.events import EventBus, EventType
from harvest.core.geometry import overlaps
from harvest.core.state import GameState
from harvest.game.entities import Crop, CropType, Crow, DirectionKeys, EntityKind, Scarecrow
from harvest.game.session import HarvestGame, effective_spawn_interval


def test_new_session_waits_in_menu(game: HarvestGame) -> None:
    assert game.state is GameState.MENU
    assert game.status == "Menu"
    assert game.level == 1
    assert game.score == 0
    assert game.goal == 15
    assert game.time_left == 60
    assert len(game.scarecrows) == 2
    assert game.crows == []
    assert (game.player.x, game.player.y) == (900 / 2 - 17, 540 - 80)


def test_tick_outside_playing_does_nothing(game: HarvestGame) -> None:
    game.tick(0.03, DirectionKeys(right=True))
    assert game.time_left == 60
    assert game.player.x == 900 / 2 - 17


def test_start_begins_level_one(game: HarvestGame) -> None:
    assert game.start() is True
    assert game.state is GameState.PLAYING
    assert game.status == "Playing…"


def test_start_while_loading_is_deferred(event_bus: EventBus) -> None:
    loader = LevelConfigLoader("does-not-exist.json")
    game = HarvestGame(loader, event_bus=event_bus)

    assert game.start() is False
    assert game.state is GameState.MENU
    assert game.status == "Loading config..."

    # The built-in table is used until the loader finishes
    assert game.config == DEFAULT_CONFIG
    game.close()


@pytest.mark.asyncio
async def test_start_when_ready_uses_loaded_config(tmp_path) -> None:
    path = tmp_path / "levels.json"
    path.write_text('{"levels": [{"goal": 5, "timeLimit": 20, "spawnRate": 1.0, "crowRate": 2}]}')
    game = HarvestGame(LevelConfigLoader(str(path)))

    assert await game.start_when_ready() is True
    assert game.state is GameState.PLAYING
    assert game.config.level_count == 1
    assert game.goal == 5
    assert game.time_left == 20
    game.close()


def test_countdown(playing: HarvestGame) -> None:
    playing.tick(0.5)
    assert playing.time_left == pytest.approx(59.5)


def test_timeout_is_game_over_even_with_goal_met(playing: HarvestGame) -> None:
    playing.score = 100
    playing.time_left = 0.01
    playing.tick(0.02)

    assert playing.state is GameState.GAME_OVER
    assert playing.status == "Time's Up! Game Over"
    assert playing.time_left == 0
    assert playing.level == 1


def test_collecting_pumpkin_advances_level(playing: HarvestGame) -> None:
    before = list(playing.scarecrows)
    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)

    playing.tick(0.01)

    assert playing.score == 17
    assert playing.level == 2
    assert playing.goal == 30
    assert playing.status == "Level 2 Started!"
    assert playing.state is GameState.PLAYING
    assert playing.time_left == 60
    assert playing.crops == []
    assert len(playing.scarecrows) == 3
    # Round reset keeps the scarecrows that were already there
    assert playing.scarecrows[0] is before[0]
    assert playing.scarecrows[1] is before[1]


def test_round_reset_clears_crows_and_keeps_scarecrows(playing: HarvestGame) -> None:
    before = list(playing.scarecrows)
    playing.obstacles.append(Crow(x=100, y=50, vx=0.0))
    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)

    playing.tick(0.01)

    assert playing.level == 2
    assert playing.crows == []
    assert all(o.kind is EntityKind.SCARECROW for o in playing.obstacles)
    assert [id(s) for s in playing.scarecrows[:2]] == [id(s) for s in before]


def test_round_reset_reloads_spawn_timing(playing: HarvestGame) -> None:
    playing._crop_accum = 0.5
    playing._crow_accum = 3.0
    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)

    playing.tick(0.01)

    assert playing.level == 2
    assert playing._crop_accum == 0.0
    assert playing._crow_accum == 0.0
    assert playing.spawn_interval == pytest.approx(0.6)
    assert playing.effective_interval == pytest.approx(0.6)
    assert playing.crow_interval == 4


def test_round_reset_keeps_new_scarecrows_off_player(playing: HarvestGame) -> None:
    # Level 2 adds a scarecrow at (400, 300)
    playing.player.x, playing.player.y = 400.0, 300.0
    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)

    playing.tick(0.01)

    assert playing.level == 2
    assert len(playing.scarecrows) == 2
    assert not any(overlaps(s, playing.player) for s in playing.scarecrows)

    start = (playing.player.x, playing.player.y)
    playing.tick(0.02, DirectionKeys(left=True))
    assert (playing.player.x, playing.player.y) != start


def test_collecting_below_goal_keeps_level(playing: HarvestGame) -> None:
    crop = crop_under_player(playing, CropType.GOLDEN_APPLE)
    playing.tick(0.01)

    assert playing.score == 5
    assert playing.level == 1
    assert crop.dead
    assert crop not in playing.crops


def test_several_crops_in_one_tick_advance_once(playing: HarvestGame) -> None:
    playing.score = 10
    for _ in range(3):
        crop_under_player(playing, CropType.GOLDEN_APPLE)

    playing.tick(0.01)

    # 25 points reach level 2's goal too, but only one advance per tick
    assert playing.score == 25
    assert playing.level == 2


def test_goal_of_last_level_wins(playing: HarvestGame) -> None:
    playing.level = 3
    playing.goal = 45
    playing.score = 44
    crop_under_player(playing, CropType.WHEAT)

    playing.tick(0.01)

    assert playing.state is GameState.WIN
    assert playing.status == "All Levels Complete! You Win!"
    assert playing.score == 45


def test_crow_hit_costs_points_and_respawns_crow(playing: HarvestGame) -> None:
    playing.score = 5
    crow = crow_on_player(playing)

    playing.tick(0.01)

    assert playing.score == 3
    assert crow.y == 50


def test_score_never_drops_below_zero(playing: HarvestGame) -> None:
    playing.score = 1
    crows = [crow_on_player(playing), crow_on_player(playing)]

    playing.tick(0.01)

    assert playing.score == 0
    assert all(c.y == 50 for c in crows)


def test_crop_spawning_catches_up_on_long_ticks(ready_loader: LevelConfigLoader) -> None:
    game = HarvestGame(ready_loader, rng=FixedRandom(0.0))
    game.start()

    # Ramp at 2s into level 1: 0.8 - 0.5 * (2 / 60)
    game.tick(2.0)

    assert len(game.crops) == 2
    assert all(c.crop_type is CropType.WHEAT for c in game.crops)
    assert all((c.x, c.y) == (30, 30) for c in game.crops)
    game.close()


def test_crow_spawning_catches_up_on_long_ticks(ready_loader: LevelConfigLoader) -> None:
    game = HarvestGame(ready_loader, rng=FixedRandom(0.0))
    game.start()

    game.tick(11.0)

    assert len(game.crows) == 2
    assert all(c.y == 50 for c in game.crows)
    game.close()


def test_player_moves_with_keys(playing: HarvestGame) -> None:
    start_x = playing.player.x
    playing.tick(0.02, DirectionKeys(left=True))
    assert playing.player.x == pytest.approx(start_x - 260 * 0.02)


def test_player_reads_input_source(ready_loader: LevelConfigLoader) -> None:
    game = HarvestGame(ready_loader, read_input=lambda: DirectionKeys(up=True))
    game.start()
    start_y = game.player.y

    game.tick(0.02)

    assert game.player.y == pytest.approx(start_y - 260 * 0.02)
    game.close()


def test_player_blocked_by_scarecrow(playing: HarvestGame) -> None:
    p = playing.player
    playing.obstacles.append(Scarecrow(x=p.x + p.w + 1, y=p.y))
    start_x = p.x

    playing.tick(0.02, DirectionKeys(right=True))

    assert p.x == start_x


def test_pause_toggles_and_freezes(playing: HarvestGame) -> None:
    playing.toggle_pause()
    assert playing.state is GameState.PAUSED
    assert playing.status == "Paused"

    playing.tick(1.0)
    assert playing.time_left == 60

    playing.toggle_pause()
    assert playing.state is GameState.PLAYING
    assert playing.status == "Playing…"


def test_toggle_pause_ignored_in_menu(game: HarvestGame) -> None:
    game.toggle_pause()
    assert game.state is GameState.MENU


def test_start_resumes_from_pause_without_reset(playing: HarvestGame) -> None:
    playing.score = 9
    playing.toggle_pause()

    assert playing.start() is True
    assert playing.state is GameState.PLAYING
    assert playing.score == 9


def test_start_after_game_over_restarts(playing: HarvestGame) -> None:
    playing.level = 2
    playing.score = 20
    playing.time_left = 0.001
    playing.tick(0.01)
    assert playing.state is GameState.GAME_OVER

    assert playing.start() is True
    assert playing.level == 1
    assert playing.score == 0
    assert playing.goal == 15


def test_reset_rebuilds_scarecrows(playing: HarvestGame) -> None:
    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)
    playing.tick(0.01)
    before = list(playing.scarecrows)
    assert len(before) == 3

    playing.reset()

    assert playing.state is GameState.MENU
    assert playing.status == "Menu"
    assert len(playing.scarecrows) == 2
    old_ids = {id(s) for s in before}
    assert all(id(s) not in old_ids for s in playing.scarecrows)
    assert playing.score == 0
    assert playing.level == 1


def test_frame_orders_crops_obstacles_player(playing: HarvestGame) -> None:
    playing.crops.append(Crop(x=30, y=30, crop_type=CropType.WHEAT))

    frame = playing.frame()
    kinds = [e.kind for e in frame.entities]

    assert kinds[0] is EntityKind.CROP
    assert kinds[1:3] == [EntityKind.SCARECROW, EntityKind.SCARECROW]
    assert kinds[-1] is EntityKind.PLAYER
    assert frame.state is GameState.PLAYING
    assert frame.goal == 15


def test_events_are_published(playing: HarvestGame, event_bus: EventBus) -> None:
    seen = []
    for event_type in (EventType.CROP_COLLECTED, EventType.CROW_HIT, EventType.LEVEL_ADVANCED):
        event_bus.subscribe(event_type, seen.append)

    playing.score = 0
    crop_under_player(playing, CropType.PUMPKIN)
    crow_on_player(playing)
    playing.tick(0.01)

    types = [e.type for e in seen]
    assert types == [EventType.CROW_HIT, EventType.CROP_COLLECTED]
    assert seen[1].data["points"] == 3


def test_level_advanced_event(playing: HarvestGame, event_bus: EventBus) -> None:
    seen = []
    event_bus.subscribe(EventType.LEVEL_ADVANCED, seen.append)

    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)
    playing.tick(0.01)

    assert len(seen) == 1
    assert seen[0].data == {"level": 2, "goal": 30, "score": 17}


def test_state_changes_are_published(game: HarvestGame, event_bus: EventBus) -> None:
    seen = []
    event_bus.subscribe(EventType.STATE_CHANGED, seen.append)

    game.start()
    game.toggle_pause()

    assert [(e.data["from"], e.data["to"]) for e in seen][-2:] == [
        (GameState.MENU, GameState.PLAYING),
        (GameState.PLAYING, GameState.PAUSED),
    ]


def test_level_changes_request_timer_resync(playing: HarvestGame, event_bus: EventBus) -> None:
    seen = []
    event_bus.subscribe(EventType.TIMER_RESYNC, seen.append)

    playing.score = 14
    crop_under_player(playing, CropType.PUMPKIN)
    playing.tick(0.01)

    assert len(seen) == 1


def test_scarecrow_count_is_capped(ready_loader: LevelConfigLoader) -> None:
    levels = tuple(
        LevelConfig(goal=n, time_limit=60, spawn_rate=0.8, crow_rate=5) for n in range(1, 7)
    )
    ready_loader.use(GameConfig(levels=levels))
    game = HarvestGame(ready_loader)
    game.start()

    for level in range(1, 6):
        game.score = level - 1
        crop_under_player(game, CropType.WHEAT)
        game.tick(0.001)
        assert game.level == level + 1

    assert len(game.scarecrows) == 4
    game.close()


@pytest.mark.parametrize(
    ("base", "time_left", "expected"),
    [
        (0.8, 60.0, 0.8),
        (0.8, 30.0, 0.55),
        (0.8, 0.0, 0.3),
        (0.4, 0.0, 0.1),
        (0.15, 30.0, 0.1),
    ],
)
def test_effective_spawn_interval(base: float, time_left: float, expected: float) -> None:
    assert effective_spawn_interval(base, time_left, 60.0) == pytest.approx(expected)
