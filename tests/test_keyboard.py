from __future__ import annotations

import pygame

from harvest.game.entities import DirectionKeys
from harvest.simulator.keyboard import KeyboardInput


def test_held_keys_snapshot() -> None:
    keyboard = KeyboardInput()
    keyboard.handle_keydown(pygame.K_LEFT)
    keyboard.handle_keydown(pygame.K_w)

    assert keyboard.snapshot() == DirectionKeys(left=True, up=True)

    keyboard.handle_keyup(pygame.K_LEFT)
    assert keyboard.snapshot() == DirectionKeys(up=True)


def test_alternate_keys_share_direction() -> None:
    keyboard = KeyboardInput()
    keyboard.handle_keydown(pygame.K_RIGHT)
    keyboard.handle_keydown(pygame.K_d)
    keyboard.handle_keyup(pygame.K_RIGHT)

    assert keyboard.snapshot().right


def test_release_all() -> None:
    keyboard = KeyboardInput()
    keyboard.handle_keydown(pygame.K_DOWN)
    keyboard.release_all()
    assert keyboard.snapshot() == DirectionKeys()


def test_commands_fire_callbacks() -> None:
    keyboard = KeyboardInput()
    calls = []
    keyboard.on_pause(lambda: calls.append("pause"))
    keyboard.on_start(lambda: calls.append("start"))
    keyboard.on_reset(lambda: calls.append("reset"))

    for key in (pygame.K_p, pygame.K_RETURN, pygame.K_SPACE, pygame.K_r):
        assert keyboard.handle_keydown(key)

    assert calls == ["pause", "start", "start", "reset"]


def test_unknown_key_not_consumed() -> None:
    assert KeyboardInput().handle_keydown(pygame.K_F5) is False


def test_unsubscribe_and_dispose() -> None:
    keyboard = KeyboardInput()
    calls = []
    unsubscribe = keyboard.on_pause(lambda: calls.append(1))
    keyboard.on_start(lambda: calls.append(2))

    unsubscribe()
    keyboard.handle_keydown(pygame.K_p)
    assert calls == []

    keyboard.dispose()
    keyboard.handle_keydown(pygame.K_RETURN)
    assert calls == []


def test_failing_callback_is_logged(caplog) -> None:
    keyboard = KeyboardInput()
    calls = []

    def broken() -> None:
        raise RuntimeError("nope")

    keyboard.on_reset(broken)
    keyboard.on_reset(lambda: calls.append("reset"))
    keyboard.handle_keydown(pygame.K_r)

    assert calls == ["reset"]
    assert "Error in reset handler" in caplog.text
