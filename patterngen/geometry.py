"""Plane geometry value types shared by the pattern generators.

Everything here is an immutable value object. Randomness is never drawn from
the module-level ``random`` state: generators receive a :class:`SeededRNG`
explicitly so a fixed seed reproduces a scene exactly.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


class SeededRNG:
    """Wrapper around ``random.Random`` with a minimal convenience API."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def randrange(self, stop: int) -> int:
        return self._rng.randrange(stop)

    def random(self) -> float:
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def spawn(self, offset: int) -> "SeededRNG":
        """Derive a new RNG deterministically from this one."""

        return SeededRNG(self.randint(-(1 << 31), 1 << 31) + offset)


@dataclass(frozen=True)
class Point:
    """Floating point plane coordinate."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class GridCoord:
    """``(row, col)`` index into a lattice."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError("grid coordinates must be non-negative")


@dataclass(frozen=True)
class Circle:
    """Circle with a tier tag used only for colour selection."""

    center: Point
    radius: float
    tier: int = 0

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError("circle radius must be positive")


@dataclass(frozen=True)
class Path:
    """Ordered, non-empty polyline whose first point is the seed."""

    points: Tuple[Point, ...]

    def __init__(self, points: Sequence[Point]) -> None:
        if not points:
            raise ValueError("path must contain at least one point")
        object.__setattr__(self, "points", tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]

    @property
    def seed(self) -> Point:
        return self.points[0]


def in_circle(point: Point, circle: Circle, extra_radius: float = 0.0) -> bool:
    """Return ``True`` when ``point`` lies within ``circle`` grown by ``extra_radius``.

    ``extra_radius`` lets overlap checks treat the query point as the centre of
    another circle: passing that circle's radius turns the containment test
    into a pairwise overlap test.
    """

    return point.distance_to(circle.center) <= circle.radius + extra_radius


__all__ = [
    "SeededRNG",
    "Point",
    "GridCoord",
    "Circle",
    "Path",
    "in_circle",
]
