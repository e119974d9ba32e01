import pytest

from techtree.errors import CyclicGraphError
from techtree.layout import align_depth_rows, compute_cluster_depths, compute_node_depths
from techtree.models import Direction, PositionedNode, TopicNode


def test_diamond_depths(diamond: list[TopicNode]) -> None:
    assert compute_node_depths(diamond) == {"A": 0, "B": 1, "C": 1, "D": 2}


def test_cross_cluster_dependencies_do_not_add_depth(sample_topics: list[TopicNode]) -> None:
    depths = compute_node_depths(sample_topics)
    assert depths["asyncio"] == 0
    assert depths["decorators"] == 2


def test_cluster_depths_are_grouped(sample_topics: list[TopicNode]) -> None:
    grouped = compute_cluster_depths(sample_topics)
    assert grouped["concurrency"] == {"asyncio": 0, "threads": 0}
    assert grouped["foundations"]["functions"] == 1


def test_cycle_policy() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="c", deps=("b",)),
        TopicNode(id="b", label="b", cluster="c", deps=("a",)),
        TopicNode(id="d", label="d", cluster="c", deps=("a",)),
    ]
    with pytest.raises(CyclicGraphError):
        compute_node_depths(nodes)

    depths = compute_node_depths(nodes, strict=False)
    assert depths == {"a": 0, "b": 0, "d": 1}


def test_align_snaps_rank_axis_only_top_to_bottom() -> None:
    boxes = [
        PositionedNode(id="p", x=0, y=0, width=100, height=100),
        PositionedNode(id="q", x=300, y=100, width=100, height=100),
    ]
    out = align_depth_rows(boxes, {"p": "C", "q": "C"}, {"p": 1, "q": 1}, Direction.TB)
    assert [b.y for b in out] == [50, 50]
    assert [b.x for b in out] == [0, 300]


def test_align_snaps_x_left_to_right() -> None:
    boxes = [
        PositionedNode(id="p", x=0, y=0, width=100, height=100),
        PositionedNode(id="q", x=40, y=300, width=100, height=100),
    ]
    out = align_depth_rows(boxes, {"p": "C", "q": "C"}, {"p": 0, "q": 0}, Direction.LR)
    assert [b.x for b in out] == [20, 20]
    assert [b.y for b in out] == [0, 300]


def test_align_leaves_other_groups_alone() -> None:
    boxes = [
        PositionedNode(id="p", x=0, y=0, width=100, height=100),
        PositionedNode(id="q", x=0, y=500, width=100, height=100),
        PositionedNode(id="loose", x=0, y=900, width=100, height=100),
    ]
    out = align_depth_rows(boxes, {"p": "C", "q": "D"}, {"p": 0, "q": 0}, Direction.TB)
    assert [b.y for b in out] == [0, 500, 900]


def test_snapped_row_is_pushed_past_overlapping_box() -> None:
    boxes = [
        PositionedNode(id="z", x=0, y=0, width=100, height=150),
        PositionedNode(id="x", x=300, y=0, width=100, height=100),
        PositionedNode(id="y", x=0, y=200, width=100, height=100),
    ]
    out = {b.id: b for b in align_depth_rows(boxes, {"z": "C2", "x": "C1", "y": "C1"}, {"z": 0, "x": 0, "y": 0}, Direction.TB)}
    assert out["x"].y == out["y"].y
    # Snapping puts the row at y=100, inside z (0..150).
    assert out["y"].y == 150 + 20
    assert out["z"].y == 0
    assert [out[i].x for i in ("z", "x", "y")] == [0, 300, 0]


def test_row_push_left_to_right_uses_custom_gap() -> None:
    boxes = [
        PositionedNode(id="z", x=0, y=0, width=150, height=60),
        PositionedNode(id="x", x=0, y=200, width=100, height=60),
        PositionedNode(id="y", x=200, y=0, width=100, height=60),
    ]
    out = {
        b.id: b
        for b in align_depth_rows(boxes, {"z": "C2", "x": "C1", "y": "C1"}, {"z": 0, "x": 0, "y": 0}, Direction.LR, min_gap=5)
    }
    assert out["x"].x == out["y"].x == 150 + 5
    assert out["y"].y == 0
