"""Flow field evaluation and path tracing.

The field maps every plane coordinate to a direction. It is the product of a
horizontal rational term centred on the canvas midline and a vertical
quadratic term, optionally bent towards a fixed bias direction near a focal
point. Paths follow the field for a fixed number of steps without clipping;
consumers discard out-of-canvas points themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from .geometry import Path, Point

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class FieldCoefficients:
    """Empirically tuned constants of the base scalar field."""

    horizontal_offset_scale: float = 0.2
    horizontal_linear_scale: float = 2.0
    horizontal_linear_shift: float = 0.5
    vertical_fraction: float = 0.7
    vertical_scale: float = 0.5
    angle_offset: float = 0.5 * math.pi


@dataclass(frozen=True)
class FlowConfig:
    """Canvas geometry and bias parameters for the flow field."""

    width: float
    height: float
    step: float = 15.0
    focal: Point | None = None
    bias_angle: float = 0.0
    focal_scale: float = 1.0
    coefficients: FieldCoefficients = field(default_factory=FieldCoefficients)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas width and height must be positive")
        if self.step <= 0:
            raise ValueError("step spacing must be positive")
        if self.focal_scale < 0:
            raise ValueError("focal_scale must be non-negative")


def _normalize(theta: float) -> float:
    wrapped = theta % TWO_PI
    # ``%`` can round up to exactly 2π for tiny negative inputs.
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


def field_value(p: Point, cfg: FlowConfig) -> float:
    """Return the raw scalar field (before scaling to an angle) at ``p``."""

    coeff = cfg.coefficients
    width = float(cfg.width)
    height = float(cfg.height)
    centered = p.x - 0.5 * width

    denominator = centered * coeff.horizontal_offset_scale - width
    rational = width / denominator if denominator != 0.0 else 0.0
    horizontal = rational - (
        centered * coeff.horizontal_linear_scale - width * coeff.horizontal_linear_shift
    ) / width
    vertical = p.y * p.y - height * height * coeff.vertical_fraction
    return horizontal * (vertical / (height * height)) * coeff.vertical_scale


def raw_angle(p: Point, cfg: FlowConfig) -> float:
    """Return the unbiased field direction at ``p`` (not normalised)."""

    return field_value(p, cfg) * TWO_PI + cfg.coefficients.angle_offset


def bias_factor(p: Point, cfg: FlowConfig) -> float:
    """Blend weight of the bias direction at ``p``; ``0.0`` without a focal point.

    The weight is ``1 / (1 + (d / width)^2)`` where ``d`` is the scaled
    distance to the focal point, so it lies in ``[0, 1]`` and strictly
    decreases with distance until ``(d / width)^2`` overflows to ``0.0`` weight.
    """

    if cfg.focal is None:
        return 0.0
    if cfg.focal_scale == 0:
        return 1.0
    try:
        ratio = p.distance_to(cfg.focal) * cfg.focal_scale / cfg.width
    except OverflowError:
        return 0.0
    # Float multiplication saturates to inf (weight 0) where ``**`` would raise.
    return 1.0 / (1.0 + ratio * ratio)


def angle(p: Point, cfg: FlowConfig) -> float:
    """Return the field direction at ``p`` in radians within ``[0, 2π)``."""

    theta = raw_angle(p, cfg)
    if not math.isfinite(theta):
        # The polynomial overflows far outside the canvas.
        theta = cfg.coefficients.angle_offset
    if cfg.focal is None:
        return _normalize(theta)

    factor = bias_factor(p, cfg)
    dx = (1.0 - factor) * math.cos(theta) + factor * math.cos(cfg.bias_angle)
    dy = (1.0 - factor) * math.sin(theta) + factor * math.sin(cfg.bias_angle)
    return _normalize(math.atan2(dy, dx))


def angle_degrees(p: Point, cfg: FlowConfig) -> float:
    return math.degrees(angle(p, cfg))


def path_step_count(cfg: FlowConfig, divisor: int = 200) -> int:
    """Number of tracing steps for a canvas; larger canvases trace longer paths."""

    if divisor <= 0:
        raise ValueError("divisor must be positive")
    return int(cfg.width + cfg.height) // divisor


def trace(seed: Point, cfg: FlowConfig, step_count: int) -> Path:
    """Follow the field from ``seed`` for ``step_count`` steps of ``cfg.step``."""

    if step_count < 0:
        raise ValueError("step_count must be non-negative")

    points: List[Point] = [seed]
    current = seed
    for _ in range(step_count):
        theta = angle(current, cfg)
        current = current.offset(math.cos(theta) * cfg.step, math.sin(theta) * cfg.step)
        points.append(current)
    return Path(points)


def border_point(index: int, width: int, height: int) -> Point:
    """Return the ``index``-th of the ``2 * (width + height)`` canvas border seeds.

    Seeds run along the top row, then the bottom row, then the left column and
    finally the right column.
    """

    total = 2 * (width + height)
    if not 0 <= index < total:
        raise ValueError(f"border index {index} outside [0, {total})")

    if index < width:
        x, y = index, 0
    elif index < 2 * width:
        x, y = index - width, height - 1
    elif index < 2 * width + height:
        x, y = 0, index - 2 * width
    else:
        x, y = width - 1, index - 2 * width - height
    return Point(float(x), float(y))


__all__ = [
    "FieldCoefficients",
    "FlowConfig",
    "field_value",
    "raw_angle",
    "bias_factor",
    "angle",
    "angle_degrees",
    "path_step_count",
    "trace",
    "border_point",
]
