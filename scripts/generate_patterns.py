"""Generate pattern scenes from YAML configuration."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from statistics import mean, median
from typing import Dict, Iterable, Mapping, Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from patterngen import (
    Arrow,
    CircleShape,
    GridCellShape,
    PatternGenerator,
    Polyline,
    RenderVariant,
    Scene,
)
from patterngen.config import build_scene_config, load_config
from patterngen.logging_config import setup_logging
from patterngen.scene import arrow_head
from patterngen.svg import save_svg


@dataclass
class ExportOptions:
    include_png: bool = False
    scenes: int = 1


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate procedural pattern scenes")
    parser.add_argument("--config", type=Path, required=True, help="Path to YAML config")
    parser.add_argument("--output", type=Path, default=None, help="Optional override for output root")
    parser.add_argument("--summary", type=Path, default=None, help="Optional path for JSON summary")
    parser.add_argument("--seed", type=int, default=None, help="Override the configured seed")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def parse_export_options(config: Mapping) -> ExportOptions:
    raw = config.get("export", {})
    if not isinstance(raw, Mapping):
        raw = {}
    scenes = int(raw.get("scenes", 1))
    if scenes <= 0:
        raise ValueError("export.scenes must be positive")
    return ExportOptions(include_png=bool(raw.get("include_png", False)), scenes=scenes)


def build_output_root(args: argparse.Namespace, config: Mapping) -> Path:
    if args.output:
        return args.output
    output_root = config.get("output_root")
    if output_root is None:
        raise ValueError("config must provide an output_root or supply --output")
    return Path(output_root)


def generate_scenes(config: Mapping, count: int, seed: int | None = None) -> Sequence[Scene]:
    scene_config = build_scene_config(config)
    generator = PatternGenerator(scene_config, seed=seed if seed is not None else config.get("seed"))
    return generator.generate_many(count)


def scene_to_image(scene: Scene) -> "Image.Image":  # type: ignore[name-defined]
    from PIL import Image, ImageDraw

    img = Image.new("RGB", (scene.width, scene.height), scene.background)
    draw = ImageDraw.Draw(img)

    for item in scene.primitives:
        if isinstance(item, Polyline):
            draw.line([point.as_tuple() for point in item.points], fill=item.stroke, width=1)
        elif isinstance(item, CircleShape):
            x, y = item.center.as_tuple()
            r = item.radius
            draw.ellipse([x - r, y - r, x + r, y + r], fill=item.fill)
        elif isinstance(item, GridCellShape):
            half = item.size / 2.0
            box = [item.position.x - half, item.position.y - half, item.position.x + half, item.position.y + half]
            if item.variant is RenderVariant.FILLED:
                draw.rectangle(box, fill=item.fill)
            else:
                draw.rectangle(box, outline=item.fill)
        elif isinstance(item, Arrow):
            tail, tip = arrow_head(item.position, item.degrees, length=10.0)
            draw.line([tail.as_tuple(), tip.as_tuple()], fill=item.stroke, width=1)
    return img


def export_images(root: Path, scenes: Sequence[Scene]) -> None:
    try:
        from PIL import Image  # noqa: F401
    except Exception as exc:
        print(f"[generate_patterns] Pillow not installed, skipping PNG export ({exc})")
        return

    root.mkdir(parents=True, exist_ok=True)
    for index, scene in enumerate(scenes):
        scene_to_image(scene).save(root / f"pattern_{index:03d}.png")


def describe(values: Iterable[float]) -> Dict[str, float]:
    seq = sorted(values)
    if not seq:
        return {}
    return {
        "min": float(seq[0]),
        "max": float(seq[-1]),
        "mean": float(mean(seq)),
        "median": float(median(seq)),
    }


def summarise(scenes: Sequence[Scene]) -> Dict[str, object]:
    stat_keys = sorted({key for scene in scenes for key in scene.stats})
    return {
        "num_scenes": len(scenes),
        "stats": {
            key: describe(scene.stats[key] for scene in scenes if key in scene.stats)
            for key in stat_keys
        },
        "scenes": [scene.to_json_record() for scene in scenes],
    }


def write_summary(path: Path, summary: Mapping[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(summary, handle, indent=2)


def log_run(config: Mapping, scenes: Sequence[Scene]) -> None:
    logging_cfg = config.get("logging")
    if not isinstance(logging_cfg, Mapping) or not logging_cfg.get("enabled", True):
        return

    from patterngen.run_log import create_run_logger

    log_dir = logging_cfg.get("log_dir", "runs")
    with create_run_logger(log_dir, run_name=logging_cfg.get("run_name")) as logger:
        for index, scene in enumerate(scenes):
            logger.log_scalars("scene", scene.stats, step=index)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    config = load_config(args.config)

    output_root = build_output_root(args, config)
    export_opts = parse_export_options(config)

    scenes = generate_scenes(config, export_opts.scenes, seed=args.seed)
    for index, scene in enumerate(scenes):
        path = save_svg(scene, output_root / f"pattern_{index:03d}.svg")
        print(f"[generate_patterns] Wrote {len(scene.primitives)} primitives to {path}")

    if export_opts.include_png:
        export_images(output_root, scenes)

    log_run(config, scenes)

    summary = summarise(scenes)
    summary_path = args.summary or output_root / "summary.json"
    write_summary(summary_path, summary)
    print(f"[generate_patterns] Summary written to {summary_path}")


if __name__ == "__main__":
    main()
