"""Tests for SVG serialization."""

from __future__ import annotations

from patterngen import (
    CircleTier,
    GridCellShape,
    LayerToggles,
    LinkSet,
    PatternGenerator,
    Point,
    RenderVariant,
    SceneConfig,
)
from patterngen.svg import _cell_walls, render_svg, save_svg


def build_scene(**overrides):
    options = dict(
        width=170,
        height=170,
        tiers=(CircleTier(count=3, radius=10),),
        path_density=0.0,
        layers=LayerToggles(paths=True, circles=True, grid=True, arrows=True),
    )
    options.update(overrides)
    return PatternGenerator(SceneConfig(**options), seed=1).generate()


def test_render_svg_contains_every_primitive_kind() -> None:
    markup = render_svg(build_scene())

    assert markup.startswith("<svg")
    assert 'viewBox="0 0 170 170"' in markup
    assert "<polyline" in markup
    assert "<circle" in markup
    assert "<rect" in markup
    assert "<line" in markup


def test_save_svg_writes_file(tmp_path) -> None:
    destination = save_svg(build_scene(), tmp_path / "out" / "scene.svg")

    assert destination.exists()
    assert "<svg" in destination.read_text(encoding="utf-8")


def test_cell_walls_skip_open_sides() -> None:
    cell = GridCellShape(
        position=Point(30, 30),
        size=10,
        links=LinkSet(up=True, right=True),
        fill="#000000",
        variant=RenderVariant.OUTLINE,
    )
    walls = _cell_walls(cell)

    assert len(walls) == 2
    assert ((25, 35), (35, 35)) in walls  # bottom
    assert ((25, 25), (25, 35)) in walls  # left
