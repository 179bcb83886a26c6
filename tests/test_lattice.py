"""Tests for lattice linking and connected-component clustering."""

from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from patterngen import (
    GridCoord,
    Lattice,
    Point,
    SeededRNG,
    SizeClass,
    assign_clusters,
    build_lattice,
    lattice_shape,
    link_pass,
    mirror_links,
    size_class,
)


def test_lattice_shape_for_170_canvas() -> None:
    assert lattice_shape(170, 170, 15) == (10, 10)
    assert lattice_shape(500, 340, 15) == (21, 32)


@pytest.mark.parametrize(
    "width, height, step",
    [(0, 100, 15), (100, -5, 15), (100, 100, 0), (30, 100, 15), (100, 30, 15)],
)
def test_lattice_shape_rejects_degenerate_bounds(width: int, height: int, step: int) -> None:
    with pytest.raises(ValueError):
        lattice_shape(width, height, step)


def test_link_pass_is_reproducible_for_fixed_seed() -> None:
    first = build_lattice(170, 170, 15, SeededRNG(5))
    second = build_lattice(170, 170, 15, SeededRNG(5))

    assert [cell.links for cell in first] == [cell.links for cell in second]
    assert first.cluster_ids() == second.cluster_ids()


def test_link_pass_never_links_out_of_the_lattice() -> None:
    down, right = link_pass(6, 4, SeededRNG(2), probability=1.0)

    assert all(not flag for flag in down[-1])
    assert all(not row[-1] for row in right)
    assert all(all(row[:-1]) for row in right)
    assert all(all(row) for row in down[:-1])


@settings(max_examples=40, deadline=None)
@given(
    seed=st.integers(min_value=0, max_value=1_000_000),
    width=st.integers(min_value=31, max_value=200),
    height=st.integers(min_value=31, max_value=200),
)
def test_links_are_symmetric(seed: int, width: int, height: int) -> None:
    lattice = build_lattice(width, height, 15, SeededRNG(seed))

    for cell in lattice:
        right = lattice.neighbor(cell.coord, "right")
        if right is not None:
            assert cell.links.right == right.links.left
        else:
            assert not cell.links.right

        below = lattice.neighbor(cell.coord, "down")
        if below is not None:
            assert cell.links.down == below.links.up
        else:
            assert not cell.links.down

        if lattice.neighbor(cell.coord, "up") is None:
            assert not cell.links.up
        if lattice.neighbor(cell.coord, "left") is None:
            assert not cell.links.left


@settings(max_examples=40, deadline=None)
@given(seed=st.integers(min_value=0, max_value=1_000_000))
def test_clusters_match_reachable_sets(seed: int) -> None:
    lattice = build_lattice(170, 170, 15, SeededRNG(seed))
    clusters = lattice.clusters()

    assert sorted(cluster.id for cluster in clusters) == list(range(1, len(clusters) + 1))
    assert sum(cluster.size for cluster in clusters) == len(lattice)

    for cell in lattice:
        members = {coord for coord in lattice.cluster(cell.cluster_id).cells}
        reachable = lattice.reachable(cell.coord)
        assert reachable == members
        assert cell.cluster_size == len(reachable) >= 1
        assert 1 <= cell.cluster_id <= len(clusters)

    assert lattice.max_cluster_size == max(cluster.size for cluster in clusters)


def test_assign_clusters_on_hand_built_links() -> None:
    down = [[True, False], [False, False]]
    right = [[False, False], [True, False]]
    links = mirror_links(down, right)

    assert links[1][0].up and links[1][1].left
    assert not links[0][1].left

    ids, clusters = assign_clusters(links)
    assert ids == [1, 2, 1, 1]
    assert [(cluster.id, cluster.size) for cluster in clusters] == [(1, 3), (2, 1)]
    assert clusters[0].cells == (GridCoord(0, 0), GridCoord(1, 0), GridCoord(1, 1))


def test_mirror_links_rejects_mismatched_shapes() -> None:
    with pytest.raises(ValueError):
        mirror_links([[False, False]], [[False]])


def test_fully_linked_lattice_is_one_cluster_without_recursion_limits() -> None:
    rows, cols = 120, 120
    down, right = link_pass(rows, cols, SeededRNG(0), probability=1.0)
    lattice = Lattice(mirror_links(down, right), step=15)

    assert len(lattice.clusters()) == 1
    assert lattice.max_cluster_size == rows * cols
    assert lattice.size_class_of(lattice.cell(0, 0)) is SizeClass.LARGEST


def test_unlinked_lattice_is_all_isolated() -> None:
    down, right = link_pass(5, 5, SeededRNG(0), probability=0.0)
    lattice = Lattice(mirror_links(down, right), step=15)

    assert len(lattice.clusters()) == 25
    assert lattice.max_cluster_size == 1
    assert all(lattice.size_class_of(cell) is SizeClass.ISOLATED for cell in lattice)


def test_to_numpy_matches_cluster_ids() -> None:
    np = pytest.importorskip("numpy")
    lattice = build_lattice(170, 170, 15, SeededRNG(4))

    array = lattice.to_numpy()
    assert array.shape == (lattice.rows, lattice.cols)
    assert array.dtype == np.int64
    assert array.tolist() == lattice.cluster_ids()


def test_cell_positions_follow_step_spacing() -> None:
    lattice = build_lattice(170, 170, 15, SeededRNG(1))

    assert lattice.position(GridCoord(0, 0)) == Point(15, 15)
    assert lattice.position(GridCoord(9, 2)) == Point(45, 150)
    with pytest.raises(IndexError):
        lattice.cell(10, 0)
    with pytest.raises(ValueError):
        lattice.neighbor(GridCoord(0, 0), "diagonal")


@pytest.mark.parametrize(
    "size, max_size, expected",
    [
        (1, 10, SizeClass.ISOLATED),
        (3, 10, SizeClass.SMALL),
        (4, 10, SizeClass.MEDIUM),
        (5, 10, SizeClass.MEDIUM),
        (7, 10, SizeClass.LARGE),
        (10, 10, SizeClass.LARGEST),
        (1, 1, SizeClass.ISOLATED),
    ],
)
def test_size_class_thresholds(size: int, max_size: int, expected: SizeClass) -> None:
    assert size_class(size, max_size) is expected


def test_size_class_rejects_invalid_sizes() -> None:
    with pytest.raises(ValueError):
        size_class(0, 5)
    with pytest.raises(ValueError):
        size_class(6, 5)
