"""Desktop front end: pygame window and keyboard input."""

from .keyboard import KeyboardInput
from .window import GameWindow, WindowConfig

__all__ = [
    "KeyboardInput",
    "GameWindow",
    "WindowConfig",
]
