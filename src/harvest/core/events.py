"""
Event bus for Farmer Harvest.

The game session publishes what happened during a tick; the window,
logging and tests subscribe.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
from collections import defaultdict
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Game event types."""
    # State events
    STATE_CHANGED = auto()
    LEVEL_ADVANCED = auto()

    # Gameplay events
    CROP_COLLECTED = auto()
    CROW_HIT = auto()

    # Timing events
    TIMER_RESYNC = auto()  # Frame clock must drop the pending delta

    # System events
    CONFIG_LOADED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type
        data: Event payload
        source: Component that emitted the event
        timestamp: Monotonic time of creation
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "game"
    timestamp: float = field(default_factory=time.monotonic)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    emit() runs handlers right away, in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type.name}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type.name}")

        return unsubscribe

    def handler_count(self, event_type: EventType) -> int:
        """Number of handlers currently subscribed to an event type."""
        return len(self._handlers.get(event_type, []))

    def emit(self, event: Event) -> None:
        """Emit an event immediately."""
        for handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type.name}: {e}")
