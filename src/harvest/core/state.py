"""
State machine for the Farmer Harvest game flow.

States:
    MENU: Waiting for the player to press start
    PLAYING: Simulation is running
    PAUSED: Simulation frozen, can resume without reset
    GAME_OVER: Round timer ran out
    WIN: Goal of the last configured level reached
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game states."""
    MENU = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()
    WIN = auto()


StateListener = Callable[[GameState, GameState], None]


class StateMachine:
    """
    Tracks the current game state and guards transitions.

    Only the transitions in VALID_TRANSITIONS are accepted. Returning to
    MENU is always possible through reset().
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        (GameState.MENU, GameState.PLAYING),

        (GameState.PLAYING, GameState.PAUSED),
        (GameState.PLAYING, GameState.GAME_OVER),
        (GameState.PLAYING, GameState.WIN),

        (GameState.PAUSED, GameState.PLAYING),
    ]

    def __init__(self, initial_state: GameState = GameState.MENU) -> None:
        self._state = initial_state
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.info(f"State transition: {old_state.name} -> {to_state.name}")
        self._notify(old_state, to_state)
        return True

    def add_listener(self, callback: StateListener) -> Callable[[], None]:
        """Add a state change listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(callback)

        def remove() -> None:
            self.remove_listener(callback)

        return remove

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self) -> None:
        """Return to MENU from any state."""
        old_state = self._state
        self._state = GameState.MENU
        logger.info(f"StateMachine reset: {old_state.name} -> MENU")
        self._notify(old_state, GameState.MENU)

    def _notify(self, old_state: GameState, new_state: GameState) -> None:
        for listener in list(self._listeners):
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")
