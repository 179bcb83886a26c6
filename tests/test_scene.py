"""Tests for scene assembly."""

from __future__ import annotations

import pytest

from patterngen import (
    Arrow,
    ChordMode,
    CircleShape,
    CircleTier,
    GridCellShape,
    GridMode,
    LayerToggles,
    PatternGenerator,
    Point,
    Polyline,
    RenderVariant,
    SceneConfig,
    build_default_palettes,
    in_circle,
)
from patterngen.circles import DEFAULT_TIERS
from patterngen.geometry import Circle


SMALL_TIERS = (
    CircleTier(count=2, radius=20, clearance=5, color_slot=0),
    CircleTier(count=5, radius=8, color_slot=1),
)


def small_config(**overrides) -> SceneConfig:
    options = dict(
        width=170,
        height=170,
        step=15,
        tiers=SMALL_TIERS,
        path_density=0.01,
    )
    options.update(overrides)
    return SceneConfig(**options)


def test_grid_scene_draws_layers_in_order() -> None:
    scene = PatternGenerator(small_config(), seed=3).generate()

    cells = scene.primitives[:100]
    circles = scene.primitives[100:107]
    paths = scene.primitives[107:]

    assert all(isinstance(item, GridCellShape) for item in cells)
    assert all(isinstance(item, CircleShape) for item in circles)
    assert all(isinstance(item, Polyline) for item in paths)
    assert len(paths) == 2 * (170 + 170) + int(0.01 * 170 * 170)
    assert not scene.of_type(Arrow)

    assert scene.stats["circle_count"] == 7
    assert scene.stats["path_count"] == len(paths)
    assert scene.stats["primitive_count"] == len(scene.primitives)


def test_generation_is_reproducible_for_a_seed() -> None:
    first = PatternGenerator(small_config(), seed=11).generate()
    second = PatternGenerator(small_config(), seed=11).generate()
    other = PatternGenerator(small_config(), seed=12).generate()

    assert first.primitives == second.primitives
    assert first.primitives != other.primitives


def test_toggling_circle_layer_keeps_paths_unchanged() -> None:
    with_circles = PatternGenerator(small_config(), seed=5).generate()
    without_circles = PatternGenerator(
        small_config(layers=LayerToggles(paths=True, circles=False, grid=True)),
        seed=5,
    ).generate()

    assert with_circles.of_type(Polyline) == without_circles.of_type(Polyline)
    assert not without_circles.of_type(CircleShape)


def test_paths_have_expected_length_and_seed_colors() -> None:
    palette = build_default_palettes().get("sunset")
    scene = PatternGenerator(small_config(), seed=8).generate()
    circles = scene.of_type(CircleShape)

    for path in scene.of_type(Polyline):
        assert len(path.points) == 2  # (170 + 170) // 200 steps plus the seed
        seed = path.points[0]
        containing = [c for c in circles if in_circle(seed, Circle(c.center, c.radius), 0)]
        expected = containing[0].fill if containing else palette[3]
        assert path.stroke == expected


def test_grid_cells_use_palette_and_variant() -> None:
    palette = build_default_palettes().get("ocean")
    config = small_config(
        palette="ocean",
        layers=LayerToggles(paths=False, circles=False, grid=True),
        mode=GridMode(RenderVariant.OUTLINE),
    )
    scene = PatternGenerator(config, seed=2).generate()
    cells = scene.of_type(GridCellShape)

    assert len(cells) == 100
    assert {cell.fill for cell in cells} <= set(palette.colors)
    assert all(cell.variant is RenderVariant.OUTLINE for cell in cells)
    assert cells[0].position == Point(15, 15)
    assert scene.stats["cluster_count"] >= 1


def test_chord_mode_emits_two_offset_chord_sets() -> None:
    palette = build_default_palettes().get("sunset")
    config = small_config(
        layers=LayerToggles(paths=False, circles=False, grid=True),
        mode=ChordMode(chord_count=24, radius=60, aperture=5),
    )
    scene = PatternGenerator(config, seed=0).generate()
    chords = scene.of_type(Polyline)

    assert len(chords) == 48
    assert all(len(chord.points) == 2 for chord in chords)
    assert [chord.stroke for chord in chords] == [palette[0]] * 24 + [palette[1]] * 24
    assert scene.stats["chord_count"] == 48


def test_arrow_layer_covers_lattice_positions() -> None:
    config = small_config(layers=LayerToggles(paths=False, circles=False, grid=False, arrows=True))
    scene = PatternGenerator(config, seed=0).generate()
    arrows = scene.of_type(Arrow)

    assert len(arrows) == 100
    assert arrows[0].position == Point(15, 15)
    assert all(0 <= arrow.degrees < 360 for arrow in arrows)


def test_scene_config_validation() -> None:
    with pytest.raises(ValueError):
        small_config(width=20, height=20)
    with pytest.raises(ValueError):
        small_config(path_density=1.5)
    with pytest.raises(TypeError):
        small_config(mode="grid")
    with pytest.raises(ValueError):
        ChordMode(chord_count=2)

    # Chord mode without arrows never needs a lattice.
    small_config(width=20, height=20, mode=ChordMode(radius=5), layers=LayerToggles(paths=False, circles=False))


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_default_tiers_scale_to_small_canvas(seed: int) -> None:
    config = SceneConfig(width=170, height=170)

    assert [tier.count for tier in config.tiers] == [1, 3, 7]
    scene = PatternGenerator(config, seed=seed).generate()
    assert len(scene.of_type(CircleShape)) == 11
    assert SceneConfig().tiers == DEFAULT_TIERS


def test_unknown_palette_falls_back_to_default() -> None:
    scene = PatternGenerator(
        small_config(palette="missing", layers=LayerToggles(paths=False, circles=True, grid=False)),
        seed=1,
    ).generate()
    sunset = build_default_palettes().get("sunset")
    assert {c.fill for c in scene.of_type(CircleShape)} <= set(sunset.colors)


def test_generate_many_and_json_record() -> None:
    generator = PatternGenerator(small_config(layers=LayerToggles(paths=False)), seed=4)
    scenes = generator.generate_many(2)

    assert len(scenes) == 2
    assert scenes[0].primitives != scenes[1].primitives
    record = scenes[0].to_json_record()
    assert record["primitive_counts"] == {"GridCellShape": 100, "CircleShape": 7}

    with pytest.raises(ValueError):
        generator.generate_many(0)
