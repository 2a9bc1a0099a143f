"""Axis-aligned box helpers shared by the simulation."""

from typing import Protocol


class Box(Protocol):
    """Anything with a position and a size."""

    x: float
    y: float
    w: float
    h: float


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds."""
    return min(hi, max(lo, v))


def overlaps(a: Box, b: Box) -> bool:
    """Check if two boxes overlap.

    Edges are exclusive: boxes that only share an edge do not overlap.
    """
    return (
        a.x < b.x + b.w
        and b.x < a.x + a.w
        and a.y < b.y + b.h
        and b.y < a.y + a.h
    )
