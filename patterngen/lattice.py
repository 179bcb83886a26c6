"""Randomly linked lattice cells and their connected components.

Construction happens in three passes:

1. a linking pass draws ``down``/``right`` links per cell,
2. a mirroring pass derives ``up``/``left`` from the neighbours so links are
   symmetric without spending extra randomness,
3. a clustering pass labels every connected component with a fresh id and
   its cell count.

The clustering uses an explicit queue over a flat, index-addressed visited
list so cluster size never affects Python's recursion depth.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Sequence, Tuple

from .geometry import GridCoord, Point, SeededRNG

DEFAULT_LINK_PROBABILITY = 1.0 / 3.0

Matrix = List[List[bool]]

DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


@dataclass(frozen=True)
class LinkSet:
    """Open connections from a cell towards each of its four neighbours."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def is_open(self, direction: str) -> bool:
        if direction not in DIRECTIONS:
            raise ValueError(f"unknown direction '{direction}'")
        return getattr(self, direction)

    def open_directions(self) -> Tuple[str, ...]:
        return tuple(name for name in DIRECTIONS if getattr(self, name))


@dataclass(frozen=True)
class Cell:
    coord: GridCoord
    links: LinkSet
    cluster_id: int
    cluster_size: int


@dataclass(frozen=True)
class Cluster:
    """Maximal set of cells mutually reachable through open links."""

    id: int
    size: int
    cells: Tuple[GridCoord, ...]


class SizeClass(Enum):
    """Colour class of a cluster; the value is the palette slot."""

    ISOLATED = 0
    SMALL = 1
    MEDIUM = 2
    LARGEST = 3
    LARGE = 4


def size_class(size: int, max_size: int) -> SizeClass:
    """Bucket a cluster size relative to the largest cluster on the lattice."""

    if size <= 0 or max_size <= 0:
        raise ValueError("cluster sizes must be positive")
    if size > max_size:
        raise ValueError("size cannot exceed max_size")

    if size == 1:
        return SizeClass.ISOLATED
    if size < 0.4 * max_size:
        return SizeClass.SMALL
    if size < 0.6 * max_size:
        return SizeClass.MEDIUM
    if size == max_size:
        return SizeClass.LARGEST
    return SizeClass.LARGE


# ----------------------------------------------------------------- dimensions
def lattice_positions(extent: int, step: int) -> range:
    """Interior grid line positions along one axis (first and last skipped)."""

    return range(step, extent - step, step)


def lattice_shape(width: int, height: int, step: int) -> Tuple[int, int]:
    """Return ``(rows, cols)`` of the lattice for a canvas.

    Raises ``ValueError`` for degenerate bounds, i.e. non-positive sizes or a
    side that does not exceed twice the step spacing.
    """

    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be positive")
    if step <= 0:
        raise ValueError("step spacing must be positive")
    if width <= 2 * step or height <= 2 * step:
        raise ValueError("canvas sides must exceed twice the step spacing")

    rows = len(lattice_positions(int(height), int(step)))
    cols = len(lattice_positions(int(width), int(step)))
    return rows, cols


# -------------------------------------------------------------------- passes
def link_pass(
    rows: int,
    cols: int,
    rng: SeededRNG,
    probability: float = DEFAULT_LINK_PROBABILITY,
) -> Tuple[Matrix, Matrix]:
    """Draw independent ``down`` and ``right`` links for every cell.

    Draws happen row-major, ``down`` before ``right``; cells on the last
    row/column never draw for the link that would leave the lattice.
    """

    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive")
    if not 0.0 <= probability <= 1.0:
        raise ValueError("probability must be in [0, 1]")

    down: Matrix = [[False] * cols for _ in range(rows)]
    right: Matrix = [[False] * cols for _ in range(rows)]
    for r in range(rows):
        for c in range(cols):
            if r < rows - 1:
                down[r][c] = rng.chance(probability)
            if c < cols - 1:
                right[r][c] = rng.chance(probability)
    return down, right


def mirror_links(down: Matrix, right: Matrix) -> List[List[LinkSet]]:
    """Combine drawn links with their mirrored ``up``/``left`` counterparts."""

    rows = len(down)
    cols = len(down[0]) if rows else 0
    if len(right) != rows or any(len(row) != cols for row in (*down, *right)):
        raise ValueError("link matrices must share the same shape")

    return [
        [
            LinkSet(
                up=down[r - 1][c] if r > 0 else False,
                down=down[r][c],
                left=right[r][c - 1] if c > 0 else False,
                right=right[r][c],
            )
            for c in range(cols)
        ]
        for r in range(rows)
    ]


def _iter_linked(
    r: int, c: int, links: LinkSet, rows: int, cols: int
) -> Iterator[Tuple[int, int]]:
    for name, (dr, dc) in DIRECTIONS.items():
        if not getattr(links, name):
            continue
        nr, nc = r + dr, c + dc
        if 0 <= nr < rows and 0 <= nc < cols:
            yield nr, nc


def assign_clusters(links: Sequence[Sequence[LinkSet]]) -> Tuple[List[int], List[Cluster]]:
    """Label connected components of a mirrored link matrix.

    Returns a flat row-major list of cluster ids (``1..N``) and the clusters in
    discovery order.
    """

    rows = len(links)
    cols = len(links[0]) if rows else 0
    ids = [0] * (rows * cols)
    clusters: List[Cluster] = []

    for start in range(rows * cols):
        if ids[start]:
            continue

        cluster_id = len(clusters) + 1
        ids[start] = cluster_id
        members: List[int] = []
        queue: deque[int] = deque([start])

        while queue:
            index = queue.popleft()
            members.append(index)
            r, c = divmod(index, cols)
            for nr, nc in _iter_linked(r, c, links[r][c], rows, cols):
                neighbor = nr * cols + nc
                if ids[neighbor]:
                    continue
                ids[neighbor] = cluster_id
                queue.append(neighbor)

        coords = tuple(GridCoord(*divmod(index, cols)) for index in sorted(members))
        clusters.append(Cluster(id=cluster_id, size=len(members), cells=coords))

    return ids, clusters


# ------------------------------------------------------------------- lattice
class Lattice:
    """Immutable lattice of linked, clustered cells."""

    def __init__(
        self,
        links: Sequence[Sequence[LinkSet]],
        *,
        step: int,
    ) -> None:
        rows = len(links)
        if rows == 0 or len(links[0]) == 0:
            raise ValueError("lattice must contain at least one cell")
        cols = len(links[0])

        ids, clusters = assign_clusters(links)
        sizes = {cluster.id: cluster.size for cluster in clusters}

        self.rows = rows
        self.cols = cols
        self.step = step
        self._clusters: Tuple[Cluster, ...] = tuple(clusters)
        self.cells: Tuple[Cell, ...] = tuple(
            Cell(
                coord=GridCoord(r, c),
                links=links[r][c],
                cluster_id=ids[r * cols + c],
                cluster_size=sizes[ids[r * cols + c]],
            )
            for r in range(rows)
            for c in range(cols)
        )
        self.max_cluster_size = max(sizes.values())

    # ---------------------------------------------------------------- access
    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} lattice")
        return self.cells[row * self.cols + col]

    def neighbor(self, coord: GridCoord, direction: str) -> Cell | None:
        """Return the adjacent cell in ``direction`` or ``None`` at the border."""

        try:
            dr, dc = DIRECTIONS[direction]
        except KeyError as exc:
            raise ValueError(f"unknown direction '{direction}'") from exc
        row, col = coord.row + dr, coord.col + dc
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return self.cell(row, col)
        return None

    def position(self, coord: GridCoord) -> Point:
        """Canvas position of a cell's grid intersection."""

        return Point(float(self.step * (coord.col + 1)), float(self.step * (coord.row + 1)))

    def clusters(self) -> List[Cluster]:
        return list(self._clusters)

    def cluster(self, cluster_id: int) -> Cluster:
        if not 1 <= cluster_id <= len(self._clusters):
            raise KeyError(f"unknown cluster id {cluster_id}")
        return self._clusters[cluster_id - 1]

    def reachable(self, coord: GridCoord) -> set[GridCoord]:
        """Cells reachable from ``coord`` by following open links."""

        start = self.cell(coord.row, coord.col)
        seen = {start.coord}
        queue: deque[Cell] = deque([start])
        while queue:
            current = queue.popleft()
            for direction in current.links.open_directions():
                nxt = self.neighbor(current.coord, direction)
                if nxt is not None and nxt.coord not in seen:
                    seen.add(nxt.coord)
                    queue.append(nxt)
        return seen

    def size_class_of(self, cell: Cell) -> SizeClass:
        return size_class(cell.cluster_size, self.max_cluster_size)

    def cluster_ids(self) -> List[List[int]]:
        return [
            [self.cells[r * self.cols + c].cluster_id for c in range(self.cols)]
            for r in range(self.rows)
        ]

    def to_numpy(self):
        """Return the cluster id matrix as a NumPy array if NumPy is available."""

        try:
            import numpy as np
        except ImportError as exc:
            raise RuntimeError("NumPy is required for to_numpy()") from exc

        return np.array(self.cluster_ids(), dtype=np.int64)


def build_lattice(
    width: int,
    height: int,
    step: int,
    rng: SeededRNG,
    *,
    link_probability: float = DEFAULT_LINK_PROBABILITY,
) -> Lattice:
    """Build a freshly linked and clustered lattice for a canvas."""

    rows, cols = lattice_shape(width, height, step)
    down, right = link_pass(rows, cols, rng, link_probability)
    return Lattice(mirror_links(down, right), step=int(step))


__all__ = [
    "DEFAULT_LINK_PROBABILITY",
    "DIRECTIONS",
    "LinkSet",
    "Cell",
    "Cluster",
    "SizeClass",
    "size_class",
    "lattice_positions",
    "lattice_shape",
    "link_pass",
    "mirror_links",
    "assign_clusters",
    "Lattice",
    "build_lattice",
]
