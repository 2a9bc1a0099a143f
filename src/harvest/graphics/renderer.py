"""
Field renderer.

Paints a RenderFrame into a numpy frame buffer: grass and grid first,
then crops, obstacles and the farmer in snapshot order, then the state
label in the top-left corner.
"""

import logging
import math
from typing import Optional

from harvest.config.theme import Theme
from harvest.core.state import GameState
from harvest.game.entities import EntityKind, EntitySnapshot
from harvest.game.session import RenderFrame
from harvest.graphics.primitives import (
    Buffer,
    draw_circle,
    draw_ellipse,
    draw_line,
    draw_polygon,
    draw_polyline,
    draw_rect,
    draw_text,
    fill,
)

logger = logging.getLogger(__name__)

LABEL_X = 20
LABEL_Y = 16
LABEL_LINE = 22
LABEL_SCALE = 3


def state_labels(frame: RenderFrame) -> list[str]:
    """Overlay lines for the current state."""
    if frame.state is GameState.MENU:
        return ["Press Start to play"]
    if frame.state is GameState.PLAYING:
        return [f"Level {frame.level}"]
    if frame.state is GameState.PAUSED:
        return [f"Level {frame.level}", "Paused (press P to resume)"]
    if frame.state is GameState.GAME_OVER:
        return ["Time up! Press Reset to return to Menu"]
    return ["All levels complete! Press Reset for another round"]


class FieldRenderer:
    """Draws the playfield into a frame buffer.

    Without a buffer the renderer logs once and every render() is a no-op,
    so the simulation can run headless.
    """

    def __init__(self, theme: Theme, buffer: Optional[Buffer], tile: int = 30) -> None:
        self.theme = theme
        self.buffer = buffer
        self.tile = tile
        if buffer is None:
            logger.error("No frame buffer available, rendering disabled")

    @property
    def enabled(self) -> bool:
        return self.buffer is not None

    def render(self, frame: RenderFrame) -> None:
        if self.buffer is None:
            return

        self._draw_field()
        for entity in frame.entities:
            self._draw_entity(entity)
        self._draw_labels(frame)

    def _draw_field(self) -> None:
        buffer = self.buffer
        h, w = buffer.shape[:2]
        fill(buffer, self.theme.rgb("grass"))

        grid = self.theme.rgb("grid")
        buffer[self.tile:h:self.tile, :] = grid
        buffer[:, self.tile:w:self.tile] = grid

    def _draw_entity(self, entity: EntitySnapshot) -> None:
        if entity.kind is EntityKind.CROP:
            self._draw_crop(entity)
        elif entity.kind is EntityKind.SCARECROW:
            self._draw_scarecrow(entity)
        elif entity.kind is EntityKind.CROW:
            self._draw_crow(entity)
        elif entity.kind is EntityKind.PLAYER:
            self._draw_farmer(entity)

    def _draw_crop(self, crop: EntitySnapshot) -> None:
        b, rgb = self.buffer, self.theme.rgb
        cx = crop.x + crop.w / 2
        bottom = crop.y + crop.h

        if crop.variant == "wheat":
            # Stalk bends with the sway phase
            bend = math.sin(crop.phase) * 3
            draw_polyline(
                b,
                [(cx, bottom), (cx + bend, crop.y + crop.h / 2), (cx, crop.y)],
                rgb("stalk"),
                thickness=3,
            )
            draw_ellipse(b, cx, crop.y, 8, 6, rgb("wheat"))
        elif crop.variant == "pumpkin":
            draw_line(b, cx, bottom, cx, bottom - 4, rgb("stalk"), thickness=2)
            draw_circle(b, cx, crop.y + 2, 10, rgb("pumpkin"))
        else:
            draw_line(b, cx, bottom, cx, bottom - 6, rgb("stalk"), thickness=2)
            draw_circle(b, cx, crop.y + 3, 9, rgb("golden_apple"))
            draw_circle(b, cx - 3, crop.y, 4, rgb("shine"), alpha=0.5)

    def _draw_scarecrow(self, s: EntitySnapshot) -> None:
        b, rgb = self.buffer, self.theme.rgb
        cx = s.x + s.w / 2
        draw_rect(b, cx - 3, s.y, 6, s.h, rgb("scarecrow_pole"))
        draw_circle(b, cx, s.y + 10, 10, rgb("scarecrow_head"))
        draw_line(b, s.x, s.y + 18, s.x + s.w, s.y + 18, rgb("scarecrow_arms"), thickness=4)

    def _draw_crow(self, crow: EntitySnapshot) -> None:
        b, rgb = self.buffer, self.theme.rgb
        x, y, w, h = crow.x, crow.y, crow.w, crow.h
        draw_polygon(
            b,
            [(x, y + h / 2), (x + w / 2, y), (x + w, y + h / 2), (x + w / 2, y + h)],
            rgb(crow.variant),
        )
        draw_circle(b, x + w / 2 - 2, y + 4, 2, rgb("crow_eye"))

    def _draw_farmer(self, p: EntitySnapshot) -> None:
        b, rgb = self.buffer, self.theme.rgb
        # Bob one pixel on odd walk frames
        y = p.y - (int(p.phase) % 2)
        draw_rect(b, p.x, y + 6, p.w, p.h - 6, rgb("farmer"))
        draw_rect(b, p.x - 3, y + 4, p.w + 6, 3, rgb("farmer_hat"))
        draw_rect(b, p.x + 7, y - 4, p.w - 14, 8, rgb("farmer_hat"))

    def _draw_labels(self, frame: RenderFrame) -> None:
        color = self.theme.rgb("label")
        for i, line in enumerate(state_labels(frame)):
            draw_text(
                self.buffer, line, LABEL_X, LABEL_Y + i * LABEL_LINE, color, scale=LABEL_SCALE
            )
