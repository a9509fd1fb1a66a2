"""
Arena geometry - positions and displacement vectors.

Coordinates are image pixels of the overhead camera (x right, y down).
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A point on the arena."""

    x: float
    y: float

    @classmethod
    def from_bbox(cls, x: float, y: float, width: float, height: float) -> Position:
        """Center of a bounding box given by its top-left corner and size."""
        return cls(x + width / 2, y + height / 2)

    def distance_to(self, other: Position) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Vector:
    """Displacement between two positions."""

    dx: float
    dy: float

    @classmethod
    def between(cls, start: Position, end: Position) -> Vector:
        return cls(end.x - start.x, end.y - start.y)

    @property
    def length(self) -> float:
        return math.hypot(self.dx, self.dy)

    def angle(self, other: Vector) -> float:
        """
        Signed angle from this vector to other, in degrees (-180, 180].

        Positive is a rotation from +x towards +y. A zero-length
        vector on either side gives 0.
        """
        cross = self.dx * other.dy - self.dy * other.dx
        dot = self.dx * other.dx + self.dy * other.dy
        return math.degrees(math.atan2(cross, dot))
