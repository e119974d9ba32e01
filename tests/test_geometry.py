import math

import pytest

from techtree.geometry import (
    cluster_boundary,
    cluster_bounds,
    cluster_visualization,
    convex_hull,
    inflate_hull,
    label_anchor,
    polygon_area,
    rounded_path,
)
from techtree.geometry.cluster import zoom_padding_scale
from techtree.geometry.hull import cross
from techtree.models import ClusterBounds, ClusterStyle, LabelPosition, PositionedNode, TopicNode


def _inside(hull, p) -> bool:
    n = len(hull)
    return all(cross(hull[i], hull[(i + 1) % n], p) >= -1e-9 for i in range(n))


def test_convex_hull_drops_interior_points() -> None:
    hull = convex_hull([(0, 0), (1, 0), (1, 1), (0, 1), (0.5, 0.5)])
    assert hull == [(0, 0), (1, 0), (1, 1), (0, 1)]
    assert polygon_area(hull) == pytest.approx(1.0)


def test_convex_hull_contains_every_input_point() -> None:
    points = [(3, 1), (7, 2), (5, 9), (1, 6), (4, 4), (6, 5), (2, 3), (8, 7), (5, 5)]
    hull = convex_hull(points)
    for p in points:
        assert _inside(hull, p)


def test_convex_hull_degenerate_inputs() -> None:
    assert convex_hull([]) == []
    assert convex_hull([(1, 1), (1, 1)]) == [(1.0, 1.0)]
    assert convex_hull([(0, 0), (1, 0), (2, 0)]) == [(0, 0), (2, 0)]


def test_inflate_grows_area_for_either_winding() -> None:
    square = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]
    for hull in (square, list(reversed(square))):
        grown = inflate_hull(hull, 10)
        assert abs(polygon_area(grown)) > abs(polygon_area(hull))
        for p in hull:
            assert min(math.dist(p, q) for q in grown) == pytest.approx(10)


def test_inflate_zero_padding_preserves_hull() -> None:
    hull = [(0.0, 0.0), (4.0, 0.0), (2.0, 3.0)]
    assert inflate_hull(hull, 0) == hull


def test_inflate_small_hulls_become_padded_rectangles() -> None:
    assert inflate_hull([], 5) == []
    assert inflate_hull([(0, 0)], 5) == [(-5, -5), (5, -5), (5, 5), (-5, 5)]
    assert inflate_hull([(0, 0), (10, 0)], 2) == [(-2, -2), (12, -2), (12, 2), (-2, 2)]


def test_rounded_path_shape() -> None:
    path = rounded_path([(0, 0), (100, 0), (100, 100), (0, 100)], 10)
    assert path.startswith("M 0 10 Q 0 0 10 0")
    assert path.endswith("Z")
    assert path.count("Q") == 4
    assert rounded_path([], 10) == ""


def test_rounded_path_clamps_radius_to_half_edge() -> None:
    path = rounded_path([(0, 0), (10, 0), (10, 10), (0, 10)], 50)
    assert path.startswith("M 0 5 Q 0 0 5 0")


def test_boundary_of_no_boxes_is_empty() -> None:
    boundary = cluster_boundary([])
    assert boundary.hull_path == ""
    assert boundary.bounds == ClusterBounds.empty()


def test_boundary_of_one_box_is_a_circle() -> None:
    box = PositionedNode(id="a", x=0, y=0, width=100, height=60)
    boundary = cluster_boundary([box], padding=10)
    assert " A " in boundary.hull_path
    assert boundary.hull_path.startswith("M -10 30")
    assert boundary.bounds.min_x == -10
    assert boundary.bounds.max_y == 70


def test_boundary_skips_non_finite_boxes() -> None:
    good = [
        PositionedNode(id="a", x=0, y=0, width=100, height=50),
        PositionedNode(id="b", x=200, y=100, width=100, height=50),
    ]
    bad = PositionedNode(id="c", x=float("nan"), y=0, width=100, height=50)
    with_bad = cluster_boundary(good + [bad], padding=20)
    assert with_bad == cluster_boundary(good, padding=20)
    assert with_bad.hull_path.startswith("M ")
    assert with_bad.bounds.to_dict() == {
        "minX": -20,
        "maxX": 320,
        "minY": -20,
        "maxY": 170,
        "centerX": 150,
        "centerY": 75,
        "width": 340,
        "height": 190,
    }


def test_boundary_hull_surrounds_box_corners() -> None:
    boxes = [
        PositionedNode(id="a", x=0, y=0, width=100, height=50),
        PositionedNode(id="b", x=150, y=120, width=100, height=50),
    ]
    boundary = cluster_boundary(boxes, padding=16)
    for b in boxes:
        for corner in [(b.x, b.y), (b.x + b.width, b.y + b.height)]:
            assert _inside(boundary.hull, corner)


def test_cluster_bounds_padding() -> None:
    bounds = cluster_bounds([PositionedNode(id="a", x=10, y=20, width=30, height=40)], padding=5)
    assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (5, 15, 45, 65)


def test_label_anchor_positions() -> None:
    bounds = ClusterBounds.from_extent(0, 0, 100, 50)
    assert label_anchor(bounds) == label_anchor(bounds, 1.0, LabelPosition.TOP_CENTER)
    top = label_anchor(bounds)
    assert (top.x, top.y) == (50, -24)
    assert label_anchor(bounds, zoom=0.5).y == -40
    assert label_anchor(bounds, zoom=0.1).y == -40

    left = label_anchor(bounds, position=LabelPosition.TOP_LEFT)
    assert (left.x, left.y) == (24, -24)
    floating = label_anchor(bounds, position=LabelPosition.FLOATING)
    assert (floating.x, floating.y) == (50, 12.5)
    side = label_anchor(bounds, position=LabelPosition.PINNED_SIDE)
    assert (side.x, side.y) == (124, 25)


def test_zoom_padding_scale_is_clamped() -> None:
    assert zoom_padding_scale(1.0) == 1.0
    assert zoom_padding_scale(0.5) == 1.3
    assert zoom_padding_scale(2.0) == 0.7
    assert zoom_padding_scale(0.01) == 1.3


def test_cluster_visualization() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="C"),
        TopicNode(id="b", label="b", cluster="C"),
        TopicNode(id="x", label="x", cluster="other"),
    ]
    positions = {
        "a": PositionedNode(id="a", x=0, y=0, width=100, height=50),
        "b": PositionedNode(id="b", x=200, y=0, width=100, height=50),
        "x": PositionedNode(id="x", x=900, y=900, width=100, height=50),
    }
    vis = cluster_visualization("C", nodes, positions, ClusterStyle.CONVEX_HULL_POLYGON, {"a": True})
    assert vis is not None
    assert vis.node_count == 2
    assert vis.completion_pct == 50
    assert vis.bounds.min_x == -36
    assert vis.label.position == LabelPosition.TOP_CENTER

    padded = cluster_visualization("C", nodes, positions, ClusterStyle.CONVEX_HULL_POLYGON, {}, padding=10)
    assert padded.bounds.min_x == -10


def test_cluster_visualization_skips() -> None:
    nodes = [TopicNode(id="a", label="a", cluster="C")]
    positions = {"a": PositionedNode(id="a", x=0, y=0, width=100, height=50)}
    assert cluster_visualization("C", nodes, positions, ClusterStyle.NONE, {}) is None
    assert cluster_visualization("missing", nodes, positions, ClusterStyle.BLURRED_BUBBLE, {}) is None
