"""Rejection sampling of integer points inside a rectangle."""

from __future__ import annotations

import logging
from typing import Callable, Tuple

from .geometry import Point, SeededRNG

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000

RejectFn = Callable[[Point], bool]


class ExhaustedError(RuntimeError):
    """Raised when no admissible point was found within the attempt ceiling.

    This signals a density configuration that is invalid for the bounds; it is
    not meant to be caught and retried.
    """

    def __init__(self, attempts: int, bounds: Tuple[int, int]) -> None:
        super().__init__(
            f"no admissible point after {attempts} attempts in {bounds[0]}x{bounds[1]} bounds"
        )
        self.attempts = attempts
        self.bounds = bounds


class PointSampler:
    """Draws uniform integer points in ``[0, width) x [0, height)``."""

    def __init__(
        self,
        width: int,
        height: int,
        rng: SeededRNG,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("sampling bounds must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self.width = int(width)
        self.height = int(height)
        self.max_attempts = max_attempts
        self._rng = rng
        self.total_attempts = 0

    @property
    def bounds(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def draw(self) -> Point:
        x = self._rng.randrange(self.width)
        y = self._rng.randrange(self.height)
        return Point(float(x), float(y))

    def sample(self, reject: RejectFn) -> Point:
        """Return the first drawn point for which ``reject`` is false."""

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.draw()
            if not reject(candidate):
                self.total_attempts += attempt
                logger.debug("sampled %s after %d attempt(s)", candidate, attempt)
                return candidate

        self.total_attempts += self.max_attempts
        raise ExhaustedError(self.max_attempts, self.bounds)


def sample_point(
    bounds: Tuple[int, int],
    reject: RejectFn,
    rng: SeededRNG,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Point:
    """Functional wrapper around :meth:`PointSampler.sample`."""

    width, height = bounds
    return PointSampler(width, height, rng, max_attempts=max_attempts).sample(reject)


__all__ = ["DEFAULT_MAX_ATTEMPTS", "ExhaustedError", "PointSampler", "sample_point"]
