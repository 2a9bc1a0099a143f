"""Drawing primitives on numpy RGB frame buffers (height, width, 3)."""

from typing import Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate a frame buffer filled with one color."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def _paint(buffer: Buffer, mask: NDArray[np.bool_], color: Color, alpha: float) -> None:
    if alpha >= 1.0:
        buffer[mask] = color
        return
    src = np.asarray(color, dtype=np.float32)
    dst = buffer[mask].astype(np.float32)
    buffer[mask] = (src * alpha + dst * (1 - alpha)).astype(np.uint8)


def _window(buffer: Buffer, x1: float, y1: float, x2: float, y2: float):
    """Clipped integer bounds plus pixel-center grids for a bounding box."""
    h, w = buffer.shape[:2]
    left = max(0, int(np.floor(x1)))
    top = max(0, int(np.floor(y1)))
    right = min(w, int(np.ceil(x2)) + 1)
    bottom = min(h, int(np.ceil(y2)) + 1)
    if right <= left or bottom <= top:
        return None
    ys, xs = np.mgrid[top:bottom, left:right]
    return (top, bottom, left, right), xs + 0.5, ys + 0.5


def draw_rect(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
) -> None:
    """Draw a filled rectangle, clipped to the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
    """
    h, w = buffer.shape[:2]
    x1 = max(0, min(int(round(x)), w))
    y1 = max(0, min(int(round(y)), h))
    x2 = max(0, min(int(round(x + width)), w))
    y2 = max(0, min(int(round(y + height)), h))
    buffer[y1:y2, x1:x2] = color


def draw_ellipse(
    buffer: Buffer,
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled axis-aligned ellipse.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx, cy: Center
        rx, ry: Radii in pixels
        color: RGB color tuple
        alpha: Opacity, 1.0 overwrites
    """
    if rx <= 0 or ry <= 0:
        return
    window = _window(buffer, cx - rx, cy - ry, cx + rx, cy + ry)
    if window is None:
        return
    (top, bottom, left, right), xs, ys = window
    mask = ((xs - cx) / rx) ** 2 + ((ys - cy) / ry) ** 2 <= 1.0
    _paint(buffer[top:bottom, left:right], mask, color, alpha)


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled circle."""
    draw_ellipse(buffer, cx, cy, radius, radius, color, alpha)


def draw_polygon(buffer: Buffer, points: Sequence[Point], color: Color) -> None:
    """Draw a filled convex polygon.

    A pixel is inside when it lies on the same side of every edge.
    """
    if len(points) < 3:
        return
    px = [p[0] for p in points]
    py = [p[1] for p in points]
    window = _window(buffer, min(px), min(py), max(px), max(py))
    if window is None:
        return
    (top, bottom, left, right), xs, ys = window

    positive = np.ones(xs.shape, dtype=bool)
    negative = np.ones(xs.shape, dtype=bool)
    for (ax, ay), (bx, by) in zip(points, list(points[1:]) + [points[0]]):
        cross = (bx - ax) * (ys - ay) - (by - ay) * (xs - ax)
        positive &= cross >= 0
        negative &= cross <= 0
    _paint(buffer[top:bottom, left:right], positive | negative, color, 1.0)


def draw_line(
    buffer: Buffer,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    color: Color,
    thickness: float = 1.0,
) -> None:
    """Draw a straight stroke of the given thickness.

    Args:
        buffer: Target numpy array (height, width, 3)
        x1, y1: Start point
        x2, y2: End point
        color: RGB color tuple
        thickness: Stroke width in pixels
    """
    half = max(thickness, 1.0) / 2
    window = _window(
        buffer,
        min(x1, x2) - half, min(y1, y2) - half,
        max(x1, x2) + half, max(y1, y2) + half,
    )
    if window is None:
        return
    (top, bottom, left, right), xs, ys = window

    dx, dy = x2 - x1, y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = np.zeros(xs.shape)
    else:
        t = np.clip(((xs - x1) * dx + (ys - y1) * dy) / length_sq, 0.0, 1.0)
    dist_sq = (xs - (x1 + t * dx)) ** 2 + (ys - (y1 + t * dy)) ** 2
    _paint(buffer[top:bottom, left:right], dist_sq <= half * half, color, 1.0)


def draw_polyline(
    buffer: Buffer,
    points: Sequence[Point],
    color: Color,
    thickness: float = 1.0,
) -> None:
    """Draw connected line segments."""
    for (ax, ay), (bx, by) in zip(points, points[1:]):
        draw_line(buffer, ax, ay, bx, by, color, thickness)


def draw_text(
    buffer: Buffer,
    text: str,
    x: int,
    y: int,
    color: Color,
    scale: int = 1,
    font: Optional[dict[str, NDArray[np.bool_]]] = None,
) -> Tuple[int, int]:
    """Draw text using a bitmap font.

    Args:
        buffer: Target numpy array (height, width, 3)
        text: Text string to draw, case-insensitive
        x: Starting x coordinate
        y: Top y coordinate
        color: RGB color tuple
        scale: Integer pixel scale
        font: Glyph masks keyed by character. Uses built-in if None.

    Returns:
        Tuple of (width, height) of rendered text in pixels
    """
    if font is None:
        font = default_font()

    h, w = buffer.shape[:2]
    cursor_x = x
    block = np.ones((scale, scale), dtype=bool)

    for char in text.upper():
        glyph = font.get(char, font["?"])
        mask = np.kron(glyph, block).astype(bool)
        gh, gw = mask.shape

        # Clip glyph to buffer
        x0, y0 = max(cursor_x, 0), max(y, 0)
        x1, y1 = min(cursor_x + gw, w), min(y + gh, h)
        if x1 > x0 and y1 > y0:
            sub = mask[y0 - y:y1 - y, x0 - cursor_x:x1 - cursor_x]
            buffer[y0:y1, x0:x1][sub] = color

        cursor_x += gw + scale

    return cursor_x - x, GLYPH_HEIGHT * scale


GLYPH_HEIGHT = 5

# 3x5 glyphs, rows top to bottom
_GLYPHS = {
    "A": "010 101 111 101 101", "B": "110 101 110 101 110",
    "C": "011 100 100 100 011", "D": "110 101 101 101 110",
    "E": "111 100 110 100 111", "F": "111 100 110 100 100",
    "G": "011 100 101 101 011", "H": "101 101 111 101 101",
    "I": "111 010 010 010 111", "J": "001 001 001 101 010",
    "K": "101 101 110 101 101", "L": "100 100 100 100 111",
    "M": "101 111 111 101 101", "N": "110 101 101 101 101",
    "O": "010 101 101 101 010", "P": "110 101 110 100 100",
    "Q": "010 101 101 111 011", "R": "110 101 110 101 101",
    "S": "011 100 010 001 110", "T": "111 010 010 010 010",
    "U": "101 101 101 101 111", "V": "101 101 101 101 010",
    "W": "101 101 111 111 101", "X": "101 101 010 101 101",
    "Y": "101 101 010 010 010", "Z": "111 001 010 100 111",
    "0": "111 101 101 101 111", "1": "010 110 010 010 111",
    "2": "110 001 010 100 111", "3": "110 001 010 001 110",
    "4": "101 101 111 001 001", "5": "111 100 110 001 110",
    "6": "011 100 111 101 111", "7": "111 001 001 010 010",
    "8": "111 101 111 101 111", "9": "111 101 111 001 110",
    " ": "000 000 000 000 000", "?": "110 001 010 000 010",
    "!": "010 010 010 000 010", ".": "000 000 000 000 010",
    ",": "000 000 000 010 100", ":": "000 010 000 010 000",
    "'": "010 010 000 000 000", "/": "001 001 010 100 100",
    "-": "000 000 111 000 000", "(": "001 010 010 010 001",
    ")": "100 010 010 010 100", "…": "000 000 000 000 101",
}

_FONT: Optional[dict[str, NDArray[np.bool_]]] = None


def default_font() -> dict[str, NDArray[np.bool_]]:
    """Built-in 3x5 bitmap font as boolean masks."""
    global _FONT
    if _FONT is None:
        _FONT = {
            char: np.array([[c == "1" for c in row] for row in rows.split()], dtype=bool)
            for char, rows in _GLYPHS.items()
        }
    return _FONT
