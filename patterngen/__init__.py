"""Procedural geometric pattern generation."""

from .geometry import Circle, GridCoord, Path, Point, SeededRNG, in_circle
from .flow import FieldCoefficients, FlowConfig, angle, angle_degrees, border_point, path_step_count, trace
from .sampling import ExhaustedError, PointSampler, sample_point
from .circles import DEFAULT_TIERS, CircleTier, PlacedCircle, pack
from .lattice import (
    Cell,
    Cluster,
    Lattice,
    LinkSet,
    SizeClass,
    assign_clusters,
    build_lattice,
    lattice_shape,
    link_pass,
    mirror_links,
    size_class,
)
from .chords import chord_sets, circle_points, square_points
from .palettes import Palette, PaletteTable, build_default_palettes
from .scene import (
    Arrow,
    ChordMode,
    CircleShape,
    GridCellShape,
    GridMode,
    LayerToggles,
    PatternGenerator,
    Polyline,
    RenderVariant,
    Scene,
    SceneConfig,
)

__all__ = [
    "SeededRNG",
    "Point",
    "GridCoord",
    "Circle",
    "Path",
    "in_circle",
    "FieldCoefficients",
    "FlowConfig",
    "angle",
    "angle_degrees",
    "border_point",
    "path_step_count",
    "trace",
    "ExhaustedError",
    "PointSampler",
    "sample_point",
    "CircleTier",
    "DEFAULT_TIERS",
    "PlacedCircle",
    "pack",
    "LinkSet",
    "Cell",
    "Cluster",
    "Lattice",
    "SizeClass",
    "size_class",
    "lattice_shape",
    "link_pass",
    "mirror_links",
    "assign_clusters",
    "build_lattice",
    "circle_points",
    "square_points",
    "chord_sets",
    "Palette",
    "PaletteTable",
    "build_default_palettes",
    "RenderVariant",
    "GridMode",
    "ChordMode",
    "LayerToggles",
    "Polyline",
    "CircleShape",
    "GridCellShape",
    "Arrow",
    "SceneConfig",
    "Scene",
    "PatternGenerator",
]
