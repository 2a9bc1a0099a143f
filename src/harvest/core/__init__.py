"""Core framework components for Farmer Harvest."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType
from .clock import FrameClock
from .geometry import clamp, overlaps

__all__ = [
    "GameState",
    "StateMachine",
    "EventBus",
    "Event",
    "EventType",
    "FrameClock",
    "clamp",
    "overlaps",
]
