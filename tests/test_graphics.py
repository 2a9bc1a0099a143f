from __future__ import annotations

import numpy as np

from harvest.config.theme import Theme
from harvest.core.state import GameState
from harvest.game.entities import EntityKind, EntitySnapshot
from harvest.game.session import HarvestGame, RenderFrame
from harvest.graphics.primitives import (
    draw_circle,
    draw_line,
    draw_polygon,
    draw_rect,
    draw_text,
    new_buffer,
)
from harvest.graphics.renderer import FieldRenderer, state_labels

RED = (255, 0, 0)


def _frame(state: GameState, *entities: EntitySnapshot, level: int = 1) -> RenderFrame:
    return RenderFrame(
        entities=entities,
        state=state,
        level=level,
        score=0,
        time_left=60.0,
        goal=15,
        status="",
    )


# Primitives


def test_new_buffer_shape() -> None:
    buffer = new_buffer(30, 20, (1, 2, 3))
    assert buffer.shape == (20, 30, 3)
    assert buffer.dtype == np.uint8
    assert tuple(buffer[5, 5]) == (1, 2, 3)


def test_rect_is_clipped() -> None:
    buffer = new_buffer(10, 10)
    draw_rect(buffer, 8, 8, 5, 5, RED)

    assert tuple(buffer[9, 9]) == RED
    assert tuple(buffer[7, 7]) == (0, 0, 0)


def test_circle_fills_center_only() -> None:
    buffer = new_buffer(40, 40)
    draw_circle(buffer, 20, 20, 5, RED)

    assert tuple(buffer[20, 20]) == RED
    assert tuple(buffer[20, 30]) == (0, 0, 0)


def test_half_transparent_circle_blends() -> None:
    buffer = new_buffer(20, 20, (0, 0, 200))
    draw_circle(buffer, 10, 10, 4, (200, 0, 0), alpha=0.5)

    assert tuple(buffer[10, 10]) == (100, 0, 100)


def test_polygon_diamond() -> None:
    buffer = new_buffer(40, 40)
    draw_polygon(buffer, [(0, 20), (20, 0), (40, 20), (20, 40)], RED)

    assert tuple(buffer[20, 20]) == RED
    assert tuple(buffer[1, 1]) == (0, 0, 0)


def test_thick_line() -> None:
    buffer = new_buffer(20, 20)
    draw_line(buffer, 2, 10, 18, 10, RED, thickness=4)

    assert tuple(buffer[10, 10]) == RED
    assert tuple(buffer[11, 10]) == RED
    assert tuple(buffer[2, 10]) == (0, 0, 0)


def test_text_size() -> None:
    buffer = new_buffer(100, 20)
    assert draw_text(buffer, "AB", 0, 0, RED) == (8, 5)
    assert draw_text(buffer, "Hi!", 0, 0, RED, scale=2) == (24, 10)
    assert buffer.any()


def test_text_off_screen_is_safe() -> None:
    buffer = new_buffer(10, 10)
    draw_text(buffer, "Level 1", -20, -2, RED, scale=3)
    draw_text(buffer, "Level 1", 8, 8, RED, scale=3)


# Renderer


def test_state_labels() -> None:
    assert state_labels(_frame(GameState.MENU)) == ["Press Start to play"]
    assert state_labels(_frame(GameState.PLAYING, level=2)) == ["Level 2"]
    assert state_labels(_frame(GameState.PAUSED)) == ["Level 1", "Paused (press P to resume)"]
    assert state_labels(_frame(GameState.GAME_OVER)) == ["Time up! Press Reset to return to Menu"]
    assert state_labels(_frame(GameState.WIN)) == [
        "All levels complete! Press Reset for another round"
    ]


def test_renderer_without_buffer_is_noop(caplog) -> None:
    renderer = FieldRenderer(Theme(), None)

    assert not renderer.enabled
    assert "rendering disabled" in caplog.text
    renderer.render(_frame(GameState.MENU))


def test_renderer_paints_field_and_grid() -> None:
    theme = Theme()
    buffer = new_buffer(900, 540)
    FieldRenderer(theme, buffer).render(_frame(GameState.PLAYING))

    assert tuple(buffer[500, 5]) == theme.rgb("grass")
    assert tuple(buffer[510, 5]) == theme.rgb("grid")
    assert tuple(buffer[500, 60]) == theme.rgb("grid")


def test_renderer_paints_crow() -> None:
    theme = Theme()
    buffer = new_buffer(900, 540)
    crow = EntitySnapshot(EntityKind.CROW, x=100, y=100, w=20, h=16, variant="crow")

    FieldRenderer(theme, buffer).render(_frame(GameState.PLAYING, crow))

    assert tuple(buffer[108, 110]) == theme.rgb("crow")
    assert tuple(buffer[104, 108]) == theme.rgb("crow_eye")


def test_renderer_paints_label() -> None:
    theme = Theme()
    buffer = new_buffer(900, 540)
    FieldRenderer(theme, buffer).render(_frame(GameState.MENU))

    label = buffer[16:31, 20:400]
    assert (label == theme.rgb("label")).all(axis=-1).any()


def test_renderer_draws_live_session(game: HarvestGame) -> None:
    theme = Theme()
    buffer = new_buffer(900, 540)
    game.start()

    FieldRenderer(theme, buffer).render(game.frame())

    # Farmer body below the hat
    p = game.player
    assert tuple(buffer[int(p.y) + 20, int(p.x) + 17]) == theme.rgb("farmer")
