"""Configuration tables, YAML loading and the persisted settings blob.

This is the boundary layer: anything read from disk or from a stored blob is
validated here and replaced with documented defaults when it cannot be
parsed, so the generators only ever see valid :class:`SceneConfig` values.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .circles import CircleTier
from .geometry import Point
from .palettes import DEFAULT_PALETTE, PaletteTable, build_default_palettes
from .scene import ChordMode, GridMode, LayerToggles, Mode, RenderVariant, SceneConfig

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1
DEFAULT_STEP = 15

CANVAS_SIZES: Mapping[str, int] = {
    "small": 170,
    "medium": 340,
    "large": 500,
}

CHORD_COUNTS: Mapping[str, int] = {
    "low": 24,
    "medium": 48,
    "high": 96,
}

RADIUS_FRACTIONS: Mapping[str, float] = {
    "small": 0.25,
    "medium": 0.35,
    "large": 0.45,
}

DEFAULT_CONFIG = SceneConfig(
    width=CANVAS_SIZES["large"],
    height=CANVAS_SIZES["large"],
    step=DEFAULT_STEP,
    layers=LayerToggles(paths=True, circles=True, grid=True, arrows=False),
    palette=DEFAULT_PALETTE,
    mode=GridMode(RenderVariant.FILLED),
)


def load_config(path: str | Path) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise ValueError(f"configuration must be a mapping: {path}")
    return dict(data)


def parse_variant(value: object) -> RenderVariant:
    """Parse a render variant, falling back to ``filled`` for unknown strings."""

    try:
        return RenderVariant(str(value).strip().lower())
    except ValueError:
        logger.warning("unparsable render variant %r, using 'filled'", value)
        return RenderVariant.FILLED


def _lookup(table: Mapping[str, Any], key: object, kind: str) -> Any:
    normalized = str(key).strip().lower()
    if normalized not in table:
        raise ValueError(f"unknown {kind} '{key}' (expected one of {sorted(table)})")
    return table[normalized]


def _canvas_size(config: Mapping[str, Any]) -> tuple[int, int]:
    if "width" in config or "height" in config:
        width = int(config.get("width", config.get("height", 0)))
        height = int(config.get("height", width))
        return width, height
    size = _lookup(CANVAS_SIZES, config.get("size", "large"), "canvas size")
    return size, size


def _build_mode(raw: object, width: int, height: int) -> Mode:
    if raw is None:
        return GridMode()
    if isinstance(raw, str):
        raw = {"kind": raw}
    if not isinstance(raw, Mapping):
        raise ValueError("mode configuration must be a mapping or a mode name")

    kind = str(raw.get("kind", "grid")).strip().lower()
    if kind == "grid":
        return GridMode(parse_variant(raw.get("variant", RenderVariant.FILLED.value)))
    if kind in {"chords", "chord", "string_art"}:
        count = raw.get("chord_count", "medium")
        chord_count = int(count) if isinstance(count, int) else _lookup(CHORD_COUNTS, count, "chord count")
        radius = raw.get("radius", "medium")
        if isinstance(radius, (int, float)):
            radius_value = float(radius)
        else:
            radius_value = _lookup(RADIUS_FRACTIONS, radius, "radius") * min(width, height)
        return ChordMode(
            chord_count=chord_count,
            radius=radius_value,
            aperture=int(raw.get("aperture", chord_count // 4)),
        )
    raise ValueError(f"unsupported mode '{kind}'")


def _build_layers(raw: object) -> LayerToggles:
    if raw is None:
        return DEFAULT_CONFIG.layers
    if not isinstance(raw, Mapping):
        raise ValueError("layers must be a mapping of layer -> bool")
    unknown = set(raw) - {"paths", "circles", "grid", "arrows"}
    if unknown:
        raise ValueError(f"unknown layers: {sorted(unknown)}")
    flags = {}
    for name in ("paths", "circles", "grid", "arrows"):
        value = raw.get(name, getattr(DEFAULT_CONFIG.layers, name))
        if not isinstance(value, bool):
            raise ValueError(f"layer '{name}' must be true or false, got {value!r}")
        flags[name] = value
    return LayerToggles(**flags)


def _build_tiers(raw: object) -> tuple[CircleTier, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise ValueError("tiers must be a list of mappings")
    tiers = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ValueError("each tier must be a mapping")
        tiers.append(
            CircleTier(
                count=int(entry["count"]),
                radius=float(entry["radius"]),
                clearance=float(entry.get("clearance", 0.0)),
                color_slot=int(entry.get("color_slot", index)),
            )
        )
    return tuple(tiers)


def _build_focal(raw: object) -> Point | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return Point(float(raw["x"]), float(raw["y"]))
    x, y = raw  # type: ignore[misc]
    return Point(float(x), float(y))


def build_scene_config(
    config: Mapping[str, Any],
    *,
    palettes: PaletteTable | None = None,
) -> SceneConfig:
    """Translate a configuration mapping into a validated :class:`SceneConfig`."""

    scene_cfg = config.get("scene", config)
    if not isinstance(scene_cfg, Mapping):
        raise ValueError("scene configuration must be a mapping")

    table = palettes or build_default_palettes()
    width, height = _canvas_size(scene_cfg)
    palette = table.resolve(scene_cfg.get("palette", DEFAULT_PALETTE)).name

    return SceneConfig(
        width=width,
        height=height,
        step=int(scene_cfg.get("step", DEFAULT_STEP)),
        layers=_build_layers(scene_cfg.get("layers")),
        palette=palette,
        mode=_build_mode(scene_cfg.get("mode"), width, height),
        focal=_build_focal(scene_cfg.get("focal")),
        bias_angle=float(scene_cfg.get("bias_angle", 0.0)),
        path_density=float(scene_cfg.get("path_density", 0.05)),
        path_divisor=int(scene_cfg.get("path_divisor", 200)),
        tiers=_build_tiers(scene_cfg.get("tiers")),
        max_attempts=int(scene_cfg.get("max_attempts", DEFAULT_CONFIG.max_attempts)),
    )


# ------------------------------------------------------------- stored blob
def config_to_mapping(config: SceneConfig) -> Dict[str, Any]:
    mode = config.mode
    if isinstance(mode, GridMode):
        mode_record: Dict[str, Any] = {"kind": "grid", "variant": mode.variant.value}
    elif isinstance(mode, ChordMode):
        mode_record = {
            "kind": "chords",
            "chord_count": mode.chord_count,
            "radius": mode.radius,
            "aperture": mode.aperture,
        }
    else:
        raise TypeError(f"unsupported mode {mode!r}")

    record: Dict[str, Any] = {
        "width": config.width,
        "height": config.height,
        "step": config.step,
        "layers": {
            "paths": config.layers.paths,
            "circles": config.layers.circles,
            "grid": config.layers.grid,
            "arrows": config.layers.arrows,
        },
        "palette": config.palette,
        "mode": mode_record,
        "bias_angle": config.bias_angle,
        "path_density": config.path_density,
        "path_divisor": config.path_divisor,
        "max_attempts": config.max_attempts,
        "tiers": [
            {
                "count": tier.count,
                "radius": tier.radius,
                "clearance": tier.clearance,
                "color_slot": tier.color_slot,
            }
            for tier in config.tiers
        ],
    }
    if config.focal is not None:
        record["focal"] = {"x": config.focal.x, "y": config.focal.y}
    return record


def encode_config(config: SceneConfig) -> str:
    return json.dumps({"version": CONFIG_VERSION, "config": config_to_mapping(config)})


def _is_current_version(version: object) -> bool:
    # bool is an int subclass, so `true` would otherwise pass as version 1.
    return type(version) is int and version == CONFIG_VERSION


def decode_config(
    blob: str | bytes | None,
    *,
    palettes: PaletteTable | None = None,
) -> SceneConfig:
    """Decode a stored blob, substituting :data:`DEFAULT_CONFIG` when unusable."""

    if not blob:
        return DEFAULT_CONFIG

    try:
        payload = json.loads(blob)
    except (TypeError, ValueError) as exc:
        logger.warning("stored configuration is corrupt (%s), using defaults", exc)
        return DEFAULT_CONFIG

    if not isinstance(payload, Mapping) or not _is_current_version(payload.get("version")):
        logger.warning("stored configuration has an unsupported version, using defaults")
        return DEFAULT_CONFIG

    raw = payload.get("config")
    if not isinstance(raw, Mapping):
        logger.warning("stored configuration has no settings, using defaults")
        return DEFAULT_CONFIG

    try:
        return build_scene_config(raw, palettes=palettes)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("stored configuration is invalid (%s), using defaults", exc)
        return DEFAULT_CONFIG


__all__ = [
    "CONFIG_VERSION",
    "DEFAULT_STEP",
    "CANVAS_SIZES",
    "CHORD_COUNTS",
    "RADIUS_FRACTIONS",
    "DEFAULT_CONFIG",
    "load_config",
    "parse_variant",
    "build_scene_config",
    "config_to_mapping",
    "encode_config",
    "decode_config",
]
