"""
Keyboard input for the desktop window.

Arrow keys (or WASD) are held movement keys, read once per tick as a
DirectionKeys snapshot. P, Enter/Space and R are one-shot commands
delivered to subscribed callbacks.
"""

import logging
from typing import Callable

import pygame

from harvest.game.entities import DirectionKeys

logger = logging.getLogger(__name__)

Command = Callable[[], None]

DIRECTION_KEYS: dict[int, str] = {
    pygame.K_LEFT: "left",
    pygame.K_a: "left",
    pygame.K_RIGHT: "right",
    pygame.K_d: "right",
    pygame.K_UP: "up",
    pygame.K_w: "up",
    pygame.K_DOWN: "down",
    pygame.K_s: "down",
}

PAUSE_KEYS = (pygame.K_p,)
START_KEYS = (pygame.K_RETURN, pygame.K_SPACE)
RESET_KEYS = (pygame.K_r,)


class KeyboardInput:
    """
    Held-key tracker plus command callbacks.

    Each on_* method returns an unsubscribe function.
    """

    def __init__(self) -> None:
        self._held: dict[int, str] = {}
        self._commands: dict[str, list[Command]] = {"pause": [], "start": [], "reset": []}

    def snapshot(self) -> DirectionKeys:
        """Movement keys held right now."""
        held = set(self._held.values())
        return DirectionKeys(
            left="left" in held,
            right="right" in held,
            up="up" in held,
            down="down" in held,
        )

    def on_pause(self, callback: Command) -> Callable[[], None]:
        return self._subscribe("pause", callback)

    def on_start(self, callback: Command) -> Callable[[], None]:
        return self._subscribe("start", callback)

    def on_reset(self, callback: Command) -> Callable[[], None]:
        return self._subscribe("reset", callback)

    def handle_keydown(self, key: int) -> bool:
        """Feed a key press. Returns True if the key was consumed."""
        if key in DIRECTION_KEYS:
            self._held[key] = DIRECTION_KEYS[key]
        elif key in PAUSE_KEYS:
            self._fire("pause")
        elif key in START_KEYS:
            self._fire("start")
        elif key in RESET_KEYS:
            self._fire("reset")
        else:
            return False
        return True

    def handle_keyup(self, key: int) -> None:
        self._held.pop(key, None)

    def release_all(self) -> None:
        """Drop every held key, e.g. when the window loses focus."""
        self._held.clear()

    def dispose(self) -> None:
        """Remove all callbacks and held keys."""
        for callbacks in self._commands.values():
            callbacks.clear()
        self._held.clear()

    def _subscribe(self, command: str, callback: Command) -> Callable[[], None]:
        self._commands[command].append(callback)

        def unsubscribe() -> None:
            if callback in self._commands[command]:
                self._commands[command].remove(callback)

        return unsubscribe

    def _fire(self, command: str) -> None:
        for callback in list(self._commands[command]):
            try:
                callback()
            except Exception:
                logger.exception(f"Error in {command} handler")
