"""
Desktop window for Farmer Harvest using pygame.

The playfield is painted into a numpy buffer by FieldRenderer and blitted
below a HUD strip that shows score, time, goal and status.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import pygame

from harvest.config.settings import Settings
from harvest.config.theme import Theme
from harvest.core.clock import FrameClock
from harvest.core.events import Event, EventType
from harvest.game.hud import HUD_ELEMENTS, HudPanel, project_hud
from harvest.game.session import HarvestGame
from harvest.graphics.primitives import new_buffer
from harvest.graphics.renderer import FieldRenderer
from harvest.simulator.keyboard import KeyboardInput

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Window geometry and timing."""
    field_width: int = 900
    field_height: int = 540
    tile: int = 30
    hud_height: int = 40
    scale: int = 1
    fps: int = 60
    title: str = "Farmer Harvest"
    fullscreen: bool = False
    max_frame_delta: float = 0.033

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowConfig":
        return cls(
            field_width=settings.playfield.width,
            field_height=settings.playfield.height,
            tile=settings.playfield.tile,
            hud_height=settings.window.hud_height,
            scale=settings.window.scale,
            fps=settings.window.fps,
            title=settings.window.title,
            fullscreen=settings.window.fullscreen,
            max_frame_delta=settings.max_frame_delta,
        )

    @property
    def size(self) -> tuple[int, int]:
        return (
            self.field_width * self.scale,
            (self.field_height + self.hud_height) * self.scale,
        )


class GameWindow:
    """
    Runs the game in a pygame window.

    Keyboard Mapping:
        ARROWS / WASD: Move the farmer
        P: Pause / resume
        ENTER / SPACE: Start
        R: Reset to menu
        ESC / Q: Exit
    """

    def __init__(
        self,
        game: HarvestGame,
        theme: Theme,
        config: Optional[WindowConfig] = None,
        keyboard: Optional[KeyboardInput] = None,
    ) -> None:
        self.game = game
        self.theme = theme
        self.config = config or WindowConfig()
        self.keyboard = keyboard or KeyboardInput()

        self._screen: Optional[pygame.Surface] = None
        self._pg_clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._running = False
        self._frame_count = 0

        self.frame_clock = FrameClock(self.config.max_frame_delta)
        self.buffer = new_buffer(self.config.field_width, self.config.field_height)
        self.renderer = FieldRenderer(theme, self.buffer, tile=self.config.tile)

        self._hud_values: dict[str, str] = {}
        self.hud = HudPanel({name: self._hud_setter(name) for name in HUD_ELEMENTS})

        self._start_task: Optional[asyncio.Task] = None
        self._subscriptions: list[Callable[[], None]] = [
            self.keyboard.on_pause(self.game.toggle_pause),
            self.keyboard.on_start(self._on_start),
            self.keyboard.on_reset(self.game.reset),
            self.game.event_bus.subscribe(EventType.TIMER_RESYNC, self._on_timer_resync),
        ]

        logger.info("GameWindow created")

    def _hud_setter(self, name: str) -> Callable[[str], None]:
        def set_text(value: str) -> None:
            self._hud_values[name] = value
        return set_text

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode(self.config.size, flags)
        self._pg_clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 22 * self.config.scale)

        logger.info(f"Pygame initialized: {self.config.size[0]}x{self.config.size[1]}")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._running = False
                else:
                    self.keyboard.handle_keydown(event.key)

            elif event.type == pygame.KEYUP:
                self.keyboard.handle_keyup(event.key)

            elif event.type == pygame.WINDOWFOCUSLOST:
                self.keyboard.release_all()

    def _on_start(self) -> None:
        if self.game.start():
            return
        # Config still loading: start as soon as it is ready
        if self._start_task is None or self._start_task.done():
            self._start_task = asyncio.create_task(self.game.start_when_ready())

    def _on_timer_resync(self, event: Event) -> None:
        self.frame_clock.resync()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _draw(self) -> None:
        if not self._screen:
            return

        scale = self.config.scale
        hud_h = self.config.hud_height * scale

        self._screen.fill(self.theme.rgb("hud_background"), pygame.Rect(0, 0, self.config.size[0], hud_h))
        self._draw_hud(hud_h)

        surface = pygame.surfarray.make_surface(self.buffer.swapaxes(0, 1))
        if scale != 1:
            surface = pygame.transform.scale(
                surface,
                (self.config.field_width * scale, self.config.field_height * scale),
            )
        self._screen.blit(surface, (0, hud_h))

        pygame.display.flip()

    def _draw_hud(self, hud_h: int) -> None:
        if not self._font:
            return

        color = self.theme.rgb("hud_text")
        items = [
            f"Score: {self._hud_values.get('score', '')}",
            f"Time: {self._hud_values.get('time', '')}",
            f"Goal: {self._hud_values.get('goal', '')}",
            self._hud_values.get("status", ""),
        ]
        column = self.config.size[0] // len(items)
        for i, text in enumerate(items):
            text_surface = self._font.render(text, True, color)
            y = (hud_h - text_surface.get_height()) // 2
            self._screen.blit(text_surface, (i * column + 12, y))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Main game loop."""
        self._init_pygame()
        self._running = True
        self.frame_clock.resync()

        logger.info("Game window started")

        try:
            while self._running:
                self._handle_events()

                dt = self.frame_clock.tick()
                self.game.tick(dt, self.keyboard.snapshot())

                frame = self.game.frame()
                self.renderer.render(frame)
                self.hud.sync(project_hud(frame))
                self._draw()

                if self._pg_clock:
                    self._pg_clock.tick(self.config.fps)
                self._frame_count += 1

                # Yield to other tasks
                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Release subscriptions and pygame resources."""
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        self.keyboard.dispose()

        if self._start_task is not None and not self._start_task.done():
            self._start_task.cancel()

        self.game.close()
        pygame.quit()
        logger.info(f"Game window stopped after {self._frame_count} frames")

    def stop(self) -> None:
        """Stop the window loop."""
        self._running = False
