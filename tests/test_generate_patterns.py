import json

from patterngen import CircleTier, LayerToggles, PatternGenerator, SceneConfig
from scripts.generate_patterns import main, parse_export_options, summarise


def build_generator(seed: int = 7) -> PatternGenerator:
    config = SceneConfig(
        width=170,
        height=170,
        tiers=(CircleTier(count=4, radius=12),),
        path_density=0.0,
        layers=LayerToggles(paths=False, circles=True, grid=True),
    )
    return PatternGenerator(config, seed=seed)


def test_summary_aggregates_scene_stats():
    scenes = build_generator().generate_many(3)

    summary = summarise(scenes)
    assert summary["num_scenes"] == 3
    assert summary["stats"]["circle_count"] == {"min": 4.0, "max": 4.0, "mean": 4.0, "median": 4.0}
    assert len(summary["scenes"]) == 3


def test_export_options_defaults():
    options = parse_export_options({})
    assert options.scenes == 1
    assert options.include_png is False


def test_main_writes_svg_summary_and_run_log(tmp_path):
    config_path = tmp_path / "patterns.yaml"
    config_path.write_text(
        "\n".join(
            [
                "seed: 5",
                f"output_root: {tmp_path / 'out'}",
                "scene:",
                "  size: small",
                "  path_density: 0.0",
                "export:",
                "  scenes: 2",
                "logging:",
                "  enabled: true",
                f"  log_dir: {tmp_path / 'runs'}",
                "  run_name: smoke",
            ]
        ),
        encoding="utf-8",
    )

    main(["--config", str(config_path)])

    out = tmp_path / "out"
    assert (out / "pattern_000.svg").exists()
    assert (out / "pattern_001.svg").exists()

    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["num_scenes"] == 2

    events = (tmp_path / "runs" / "smoke" / "events.jsonl").read_text(encoding="utf-8").splitlines()
    assert events
    assert all(json.loads(line)["tag"].startswith("scene/") for line in events)
