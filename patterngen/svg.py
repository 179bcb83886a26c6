"""Serialize a :class:`~patterngen.scene.Scene` into SVG markup."""

from __future__ import annotations

from pathlib import Path

import svgwrite

from .scene import (
    Arrow,
    CircleShape,
    GridCellShape,
    Polyline,
    RenderVariant,
    Scene,
    arrow_head,
)

WALL_COLOR = "#222222"


def _cell_walls(cell: GridCellShape):
    half = cell.size / 2.0
    left, top = cell.position.x - half, cell.position.y - half
    right, bottom = cell.position.x + half, cell.position.y + half
    sides = {
        "up": ((left, top), (right, top)),
        "down": ((left, bottom), (right, bottom)),
        "left": ((left, top), (left, bottom)),
        "right": ((right, top), (right, bottom)),
    }
    return [segment for name, segment in sides.items() if not cell.links.is_open(name)]


def _add_cell(drawing: svgwrite.Drawing, cell: GridCellShape) -> None:
    half = cell.size / 2.0
    wall_color = WALL_COLOR
    if cell.variant is RenderVariant.FILLED:
        drawing.add(
            drawing.rect(
                insert=(cell.position.x - half, cell.position.y - half),
                size=(cell.size, cell.size),
                fill=cell.fill,
            )
        )
    else:
        wall_color = cell.fill

    for start, end in _cell_walls(cell):
        drawing.add(drawing.line(start=start, end=end, stroke=wall_color, stroke_width=1))


def build_drawing(scene: Scene) -> svgwrite.Drawing:
    drawing = svgwrite.Drawing(
        size=(scene.width, scene.height),
        viewBox=f"0 0 {scene.width} {scene.height}",
    )
    drawing.add(drawing.rect(insert=(0, 0), size=(scene.width, scene.height), fill=scene.background))

    for item in scene.primitives:
        if isinstance(item, Polyline):
            drawing.add(
                drawing.polyline(
                    points=[point.as_tuple() for point in item.points],
                    stroke=item.stroke,
                    stroke_width=item.stroke_width,
                    fill="none",
                )
            )
        elif isinstance(item, CircleShape):
            drawing.add(drawing.circle(center=item.center.as_tuple(), r=item.radius, fill=item.fill))
        elif isinstance(item, GridCellShape):
            _add_cell(drawing, item)
        elif isinstance(item, Arrow):
            tail, tip = arrow_head(item.position, item.degrees, length=10.0)
            drawing.add(drawing.line(start=tail.as_tuple(), end=tip.as_tuple(), stroke=item.stroke, stroke_width=1))
        else:
            raise TypeError(f"unsupported primitive {item!r}")
    return drawing


def render_svg(scene: Scene) -> str:
    return build_drawing(scene).tostring()


def save_svg(scene: Scene, path: str | Path) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    build_drawing(scene).saveas(str(destination))
    return destination


__all__ = ["build_drawing", "render_svg", "save_svg"]
