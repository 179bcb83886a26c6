"""String-art geometry: chords between a circle and its bounding square."""

from __future__ import annotations

import math
from typing import List, Tuple

from .geometry import Point

Segment = Tuple[Point, Point]


def _check_count(count: int) -> None:
    if count < 3:
        raise ValueError("chord count must be at least 3")


def circle_points(center: Point, radius: float, count: int) -> List[Point]:
    """``count`` evenly spaced points on a circle, starting at the top."""

    _check_count(count)
    if radius <= 0:
        raise ValueError("radius must be positive")
    points = []
    for i in range(count):
        theta = -0.5 * math.pi + 2.0 * math.pi * i / count
        points.append(center.offset(radius * math.cos(theta), radius * math.sin(theta)))
    return points


def square_points(center: Point, half_side: float, count: int) -> List[Point]:
    """``count`` evenly spaced points along a square perimeter.

    Points start at the top-centre and run clockwise (in screen coordinates,
    where ``y`` grows downward), matching the order of :func:`circle_points`.
    """

    _check_count(count)
    if half_side <= 0:
        raise ValueError("half_side must be positive")

    side = 2.0 * half_side
    perimeter = 4.0 * side
    points = []
    for i in range(count):
        # Arc length measured clockwise from the top-left corner.
        s = (half_side + perimeter * i / count) % perimeter
        if s < side:
            x, y = s, 0.0
        elif s < 2 * side:
            x, y = side, s - side
        elif s < 3 * side:
            x, y = side - (s - 2 * side), side
        else:
            x, y = 0.0, side - (s - 3 * side)
        points.append(center.offset(x - half_side, y - half_side))
    return points


def chord_sets(
    center: Point,
    radius: float,
    count: int,
    aperture: int,
) -> Tuple[List[Segment], List[Segment]]:
    """Two chord sets offset by ``aperture`` in opposite directions.

    Set A joins circle point ``i`` to square point ``i + aperture``; set B
    joins it to square point ``i - aperture`` (indices modulo ``count``).
    """

    ring = circle_points(center, radius, count)
    frame = square_points(center, radius, count)
    forward = [(ring[i], frame[(i + aperture) % count]) for i in range(count)]
    backward = [(ring[i], frame[(i - aperture) % count]) for i in range(count)]
    return forward, backward


__all__ = ["Segment", "circle_points", "square_points", "chord_sets"]
