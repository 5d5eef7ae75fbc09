"""
Pixel-space geometry primitives.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

# Relative offsets drawn around a source centre: a five pixel plus sign.
CROSS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
)


@dataclass(frozen=True)
class Point:
    """A location in pixel space. Coordinates are unsigned; they may lie
    beyond the raster edge.
    """
    x: int
    y: int

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Point coordinates must be non-negative, got ({self.x}, {self.y})")

    def distance(self, other: "Point") -> float:
        return distance(self, other)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    dx = float(a.x) - float(b.x)
    dy = float(a.y) - float(b.y)
    return math.sqrt(dx * dx + dy * dy)
