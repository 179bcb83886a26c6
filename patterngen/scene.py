"""Scene assembly: turn generator output into an ordered list of primitives."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Sequence, Set, Tuple, Union

from .chords import chord_sets
from .circles import DEFAULT_TIERS, CircleTier, PlacedCircle, pack, scale_tiers
from .flow import FlowConfig, angle_degrees, border_point, path_step_count, trace
from .geometry import Path, Point, SeededRNG, in_circle
from .lattice import LinkSet, build_lattice, lattice_positions, lattice_shape
from .palettes import Palette, PaletteTable, build_default_palettes
from .sampling import DEFAULT_MAX_ATTEMPTS, PointSampler

logger = logging.getLogger(__name__)

PATH_DEFAULT_SLOT = 3


class RenderVariant(str, Enum):
    """Grid cell drawing style; affects primitive shape only, never geometry."""

    FILLED = "filled"
    OUTLINE = "outline"


# --------------------------------------------------------------------- modes
@dataclass(frozen=True)
class GridMode:
    variant: RenderVariant = RenderVariant.FILLED


@dataclass(frozen=True)
class ChordMode:
    chord_count: int = 48
    radius: float = 175.0
    aperture: int = 12

    def __post_init__(self) -> None:
        if self.chord_count < 3:
            raise ValueError("chord_count must be at least 3")
        if self.radius <= 0:
            raise ValueError("radius must be positive")


Mode = Union[GridMode, ChordMode]


@dataclass(frozen=True)
class LayerToggles:
    paths: bool = True
    circles: bool = True
    grid: bool = True
    arrows: bool = False

    def enabled(self) -> Tuple[str, ...]:
        return tuple(
            name for name in ("grid", "circles", "paths", "arrows") if getattr(self, name)
        )


# ---------------------------------------------------------------- primitives
@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    stroke: str
    stroke_width: float = 1.0


@dataclass(frozen=True)
class CircleShape:
    center: Point
    radius: float
    fill: str


@dataclass(frozen=True)
class GridCellShape:
    """Lattice cell drawn at ``position`` with open sides taken from ``links``."""

    position: Point
    size: float
    links: LinkSet
    fill: str
    variant: RenderVariant


@dataclass(frozen=True)
class Arrow:
    position: Point
    degrees: float
    stroke: str


Primitive = Union[Polyline, CircleShape, GridCellShape, Arrow]


# -------------------------------------------------------------------- config
@dataclass(frozen=True)
class SceneConfig:
    """Everything a single generation pass needs."""

    width: int = 500
    height: int = 500
    step: int = 15
    layers: LayerToggles = field(default_factory=LayerToggles)
    palette: str = "sunset"
    mode: Mode = field(default_factory=GridMode)
    focal: Point | None = None
    bias_angle: float = 0.0
    path_density: float = 0.05
    path_divisor: int = 200
    tiers: Tuple[CircleTier, ...] | None = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas width and height must be positive")
        if self.step <= 0:
            raise ValueError("step spacing must be positive")
        if not isinstance(self.mode, (GridMode, ChordMode)):
            raise TypeError(f"unsupported mode {self.mode!r}")
        if not 0.0 <= self.path_density < 1.0:
            raise ValueError("path_density must be in [0, 1)")
        if self.path_divisor <= 0:
            raise ValueError("path_divisor must be positive")
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if self.layers.arrows or (self.layers.grid and isinstance(self.mode, GridMode)):
            # Rejects degenerate bounds before any lattice work happens.
            lattice_shape(self.width, self.height, self.step)
        if self.tiers is None:
            # Default tiers are sized for the 500x500 reference canvas.
            object.__setattr__(self, "tiers", scale_tiers(DEFAULT_TIERS, self.width, self.height))
        else:
            object.__setattr__(self, "tiers", tuple(self.tiers))

    def flow_config(self) -> FlowConfig:
        return FlowConfig(
            width=self.width,
            height=self.height,
            step=self.step,
            focal=self.focal,
            bias_angle=self.bias_angle,
        )


@dataclass(frozen=True)
class Scene:
    """Generated primitives in drawing order plus generation statistics."""

    width: int
    height: int
    primitives: Tuple[Primitive, ...]
    stats: Mapping[str, float]
    background: str = "#FFFFFF"

    def of_type(self, kind: type) -> List[Primitive]:
        return [item for item in self.primitives if isinstance(item, kind)]

    def to_json_record(self) -> Dict[str, object]:
        counts: Dict[str, int] = {}
        for item in self.primitives:
            key = type(item).__name__
            counts[key] = counts.get(key, 0) + 1
        return {
            "width": self.width,
            "height": self.height,
            "primitive_counts": counts,
            "stats": dict(self.stats),
        }


# ----------------------------------------------------------------- generator
class PatternGenerator:
    """Generates scenes from a :class:`SceneConfig` with a reproducible seed."""

    def __init__(
        self,
        config: SceneConfig | None = None,
        *,
        seed: int | None = None,
        palettes: PaletteTable | None = None,
    ) -> None:
        self.config = config or SceneConfig()
        self.palettes = palettes or build_default_palettes()
        self._rng = SeededRNG(seed)

    def generate(self) -> Scene:
        cfg = self.config
        palette = self.palettes.resolve(cfg.palette)
        # Spawn every stream up front so toggling one layer leaves the others unchanged.
        grid_rng, circle_rng, path_rng = (self._rng.spawn(offset) for offset in range(3))

        stats: Dict[str, float] = {}
        primitives: List[Primitive] = []

        if cfg.layers.grid:
            primitives.extend(self._mode_primitives(cfg.mode, palette, grid_rng, stats))

        circles: List[PlacedCircle] = []
        if cfg.layers.circles or cfg.layers.paths:
            circles = pack(
                cfg.width,
                cfg.height,
                circle_rng,
                cfg.tiers,
                max_attempts=cfg.max_attempts,
            )
            stats["circle_count"] = len(circles)

        if cfg.layers.circles:
            primitives.extend(
                CircleShape(center=item.circle.center, radius=item.circle.radius, fill=palette[item.color_slot])
                for item in circles
            )

        if cfg.layers.paths:
            primitives.extend(self._path_primitives(palette, circles, path_rng, stats))

        if cfg.layers.arrows:
            primitives.extend(self._arrow_primitives(palette, stats))

        stats["primitive_count"] = len(primitives)
        logger.info(
            "generated %d primitives (%s) with palette '%s'",
            len(primitives),
            ", ".join(cfg.layers.enabled()) or "no layers",
            palette.name,
        )
        return Scene(width=cfg.width, height=cfg.height, primitives=tuple(primitives), stats=stats)

    def generate_many(self, count: int) -> List[Scene]:
        if count <= 0:
            raise ValueError("count must be positive")
        return [self.generate() for _ in range(count)]

    # ------------------------------------------------------------- modes
    def _mode_primitives(
        self,
        mode: Mode,
        palette: Palette,
        rng: SeededRNG,
        stats: Dict[str, float],
    ) -> List[Primitive]:
        if isinstance(mode, GridMode):
            return self._grid_primitives(mode, palette, rng, stats)
        if isinstance(mode, ChordMode):
            return self._chord_primitives(mode, palette, stats)
        raise TypeError(f"unsupported mode {mode!r}")

    def _grid_primitives(
        self,
        mode: GridMode,
        palette: Palette,
        rng: SeededRNG,
        stats: Dict[str, float],
    ) -> List[Primitive]:
        cfg = self.config
        lattice = build_lattice(cfg.width, cfg.height, cfg.step, rng)
        stats["cluster_count"] = len(lattice.clusters())
        stats["max_cluster_size"] = lattice.max_cluster_size

        return [
            GridCellShape(
                position=lattice.position(cell.coord),
                size=float(cfg.step),
                links=cell.links,
                fill=palette[lattice.size_class_of(cell).value],
                variant=mode.variant,
            )
            for cell in lattice
        ]

    def _chord_primitives(
        self,
        mode: ChordMode,
        palette: Palette,
        stats: Dict[str, float],
    ) -> List[Primitive]:
        cfg = self.config
        center = Point(cfg.width / 2.0, cfg.height / 2.0)
        forward, backward = chord_sets(center, mode.radius, mode.chord_count, mode.aperture)
        stats["chord_count"] = len(forward) + len(backward)

        primitives: List[Primitive] = []
        for segments, slot in ((forward, 0), (backward, 1)):
            primitives.extend(Polyline(points=(start, end), stroke=palette[slot]) for start, end in segments)
        return primitives

    # ------------------------------------------------------------- paths
    def _path_primitives(
        self,
        palette: Palette,
        circles: Sequence[PlacedCircle],
        rng: SeededRNG,
        stats: Dict[str, float],
    ) -> List[Primitive]:
        cfg = self.config
        flow_cfg = cfg.flow_config()
        steps = path_step_count(flow_cfg, cfg.path_divisor)
        sampler = PointSampler(cfg.width, cfg.height, rng, max_attempts=cfg.max_attempts)
        random_count = int(cfg.path_density * cfg.width * cfg.height)
        border_count = 2 * (cfg.width + cfg.height)
        used: Set[Tuple[int, int]] = set()

        def already_used(p: Point) -> bool:
            return (int(p.x), int(p.y)) in used

        primitives: List[Primitive] = []
        for index in range(border_count + random_count):
            if index < border_count:
                seed = border_point(index, cfg.width, cfg.height)
            else:
                seed = sampler.sample(already_used)

            path = trace(seed, flow_cfg, steps)
            primitives.append(Polyline(points=path.points, stroke=self._path_color(path, circles, palette)))

            for point in path:
                if 0 <= point.x < cfg.width and 0 <= point.y < cfg.height:
                    used.add((int(point.x), int(point.y)))

        stats["path_count"] = len(primitives)
        stats["path_steps"] = steps
        stats["path_sampler_attempts"] = sampler.total_attempts
        return primitives

    @staticmethod
    def _path_color(path: Path, circles: Sequence[PlacedCircle], palette: Palette) -> str:
        for item in circles:
            if in_circle(path.seed, item.circle, 0):
                return palette[item.color_slot]
        return palette[PATH_DEFAULT_SLOT]

    # ------------------------------------------------------------ arrows
    def _arrow_primitives(self, palette: Palette, stats: Dict[str, float]) -> List[Primitive]:
        cfg = self.config
        flow_cfg = cfg.flow_config()
        arrows: List[Primitive] = []
        for y in lattice_positions(cfg.height, cfg.step):
            for x in lattice_positions(cfg.width, cfg.step):
                position = Point(float(x), float(y))
                arrows.append(Arrow(position=position, degrees=angle_degrees(position, flow_cfg), stroke=palette[4]))
        stats["arrow_count"] = len(arrows)
        return arrows


def arrow_head(position: Point, degrees: float, length: float) -> Tuple[Point, Point]:
    """Return the tail and tip of an arrow pointing along ``degrees``."""

    theta = math.radians(degrees)
    tip = position.offset(math.cos(theta) * length, math.sin(theta) * length)
    return position, tip


__all__ = [
    "RenderVariant",
    "GridMode",
    "ChordMode",
    "Mode",
    "LayerToggles",
    "Polyline",
    "CircleShape",
    "GridCellShape",
    "Arrow",
    "Primitive",
    "SceneConfig",
    "Scene",
    "PatternGenerator",
    "arrow_head",
]
