"""Tiered placement of non-overlapping circles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .geometry import Circle, Point, SeededRNG, in_circle
from .sampling import DEFAULT_MAX_ATTEMPTS, PointSampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CircleTier:
    """Number, radius, clearance and palette slot of one circle tier."""

    count: int
    radius: float
    clearance: float = 0.0
    color_slot: int = 0

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("tier count must be non-negative")
        if self.radius <= 0:
            raise ValueError("tier radius must be positive")
        if self.clearance < 0:
            raise ValueError("tier clearance must be non-negative")
        if self.color_slot < 0:
            raise ValueError("color_slot must be non-negative")

    @property
    def exclusion_radius(self) -> float:
        return self.radius + self.clearance


DEFAULT_TIERS: Tuple[CircleTier, ...] = (
    CircleTier(count=10, radius=50, clearance=10, color_slot=0),
    CircleTier(count=30, radius=20, color_slot=1),
    CircleTier(count=60, radius=10, color_slot=2),
)


REFERENCE_CANVAS = (500, 500)


def scale_tiers(
    tiers: Sequence[CircleTier],
    width: int,
    height: int,
    reference: Tuple[int, int] = REFERENCE_CANVAS,
) -> Tuple[CircleTier, ...]:
    """Scale tier counts by canvas area relative to ``reference``; radii are kept."""

    ratio = (width * height) / float(reference[0] * reference[1])
    return tuple(
        CircleTier(
            count=max(0, round(tier.count * ratio)),
            radius=tier.radius,
            clearance=tier.clearance,
            color_slot=tier.color_slot,
        )
        for tier in tiers
    )


@dataclass(frozen=True)
class PlacedCircle:
    circle: Circle
    color_slot: int


def overlaps_any(candidate: Point, extra_radius: float, placed: Sequence[PlacedCircle]) -> bool:
    return any(in_circle(candidate, item.circle, extra_radius) for item in placed)


def pack(
    width: int,
    height: int,
    rng: SeededRNG,
    tiers: Sequence[CircleTier] = DEFAULT_TIERS,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> List[PlacedCircle]:
    """Place every tier's circles, largest radius first.

    Each new centre must lie outside every previously placed circle grown by
    the new circle's radius plus its tier clearance, so later tiers clear all
    earlier circles and not only their own tier. Raises
    :class:`~patterngen.sampling.ExhaustedError` when the canvas cannot hold
    the requested density.
    """

    sampler = PointSampler(width, height, rng, max_attempts=max_attempts)
    ordered = sorted(
        enumerate(tiers), key=lambda item: item[1].radius, reverse=True
    )

    placed: List[PlacedCircle] = []
    for tier_index, tier in ordered:
        extra = tier.exclusion_radius
        for _ in range(tier.count):
            center = sampler.sample(lambda p: overlaps_any(p, extra, placed))
            placed.append(
                PlacedCircle(
                    circle=Circle(center=center, radius=tier.radius, tier=tier_index),
                    color_slot=tier.color_slot,
                )
            )

    logger.debug(
        "packed %d circles in %d sampling attempts", len(placed), sampler.total_attempts
    )
    return placed


__all__ = [
    "CircleTier",
    "DEFAULT_TIERS",
    "REFERENCE_CANVAS",
    "PlacedCircle",
    "scale_tiers",
    "overlaps_any",
    "pack",
]
