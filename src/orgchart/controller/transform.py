"""
Coordinate Transform Service
============================
Conversion between screen space (widget pixels, where the pointer lives) and
world space (where the layout engine places the cards).

    screen = world * scale + offset
    world  = (screen - offset) / scale
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple
import math

if TYPE_CHECKING:
    from orgchart.controller.viewport import ViewportState


@dataclass(frozen=True)
class Point:
    """A 2D point or vector."""
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> Point:
        return Point(self.x / scalar, self.y / scalar)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


def to_screen(world: Point, viewport: ViewportState) -> Point:
    return world * viewport.scale + viewport.offset


def to_world(screen: Point, viewport: ViewportState) -> Point:
    return (screen - viewport.offset) / viewport.scale


def screen_delta_to_world(delta: Point, viewport: ViewportState) -> Point:
    """
    Convert a pointer movement to world units.

    Node drags need this; background pans do not, since the offset itself
    lives in screen space.
    """
    return delta / viewport.scale
