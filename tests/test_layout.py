import networkx as nx
import pytest

from techtree.errors import CyclicGraphError
from techtree.layout import LayoutOptions, layout
from techtree.layout.layered import count_crossings, greedy_fas_ordering, insert_dummies
from techtree.models import Direction, SizeVariant, TopicNode


def _by_id(result):
    return {p.id: p for p in result.nodes}


def test_every_topic_gets_a_box(diamond: list[TopicNode]) -> None:
    result = layout(diamond)
    assert sorted(p.id for p in result.nodes) == ["A", "B", "C", "D"]
    for p in result.nodes:
        assert (p.width, p.height) == SizeVariant.STANDARD.dimensions
    assert sorted(result.edges) == [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")]


def test_top_to_bottom_ranks_dependencies_first(diamond: list[TopicNode]) -> None:
    boxes = _by_id(layout(diamond, direction=Direction.TB))
    assert boxes["A"].y < boxes["B"].y < boxes["D"].y
    assert boxes["B"].y == pytest.approx(boxes["C"].y)


def test_left_to_right_ranks_dependencies_first(diamond: list[TopicNode]) -> None:
    boxes = _by_id(layout(diamond, direction=Direction.LR))
    assert boxes["A"].x < boxes["B"].x < boxes["D"].x
    assert boxes["B"].x == pytest.approx(boxes["C"].x)


def test_same_rank_boxes_keep_node_separation(diamond: list[TopicNode]) -> None:
    boxes = _by_id(layout(diamond))
    gap = abs(boxes["B"].x - boxes["C"].x)
    assert gap >= 280 + 100 - 1e-6

    wide = _by_id(layout(diamond, options=LayoutOptions(node_spacing_multiplier=2.0)))
    assert abs(wide["B"].x - wide["C"].x) >= 280 + 200 - 1e-6


def test_layout_starts_at_margin(diamond: list[TopicNode]) -> None:
    result = layout(diamond)
    assert min(p.x for p in result.nodes) == pytest.approx(50)
    assert min(p.y for p in result.nodes) == pytest.approx(50)

    expanded = layout(diamond, options=LayoutOptions(expanded_spacing=True))
    assert min(p.x for p in expanded.nodes) == pytest.approx(90)


def test_rank_separation_between_layers(diamond: list[TopicNode]) -> None:
    boxes = _by_id(layout(diamond))
    assert boxes["B"].y - (boxes["A"].y + boxes["A"].height) == pytest.approx(150)


def test_size_variant_and_focus_scale(sample_topics: list[TopicNode]) -> None:
    result = layout(
        sample_topics,
        size_variant=SizeVariant.COMPACT,
        options=LayoutOptions(focused_cluster="concurrency"),
    )
    boxes = _by_id(result)
    assert boxes["basics"].width == 200
    assert boxes["asyncio"].width == pytest.approx(220)
    assert boxes["asyncio"].height == pytest.approx(132)


def test_dependents_ranked_after_dependencies(sample_topics: list[TopicNode]) -> None:
    result = layout(sample_topics)
    for src, dst in result.edges:
        assert result.ranks[dst] > result.ranks[src]


def test_unknown_and_duplicate_edges_are_dropped(diamond: list[TopicNode]) -> None:
    result = layout(diamond, edges=[("A", "B"), ("A", "B"), ("A", "ghost")])
    assert result.edges == [("A", "B")]


def test_empty_input_gives_empty_layout() -> None:
    result = layout([])
    assert result.nodes == []
    assert result.to_dict() == {"nodes": [], "edges": []}


def test_cycles_raise_by_default() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="c", deps=("b",)),
        TopicNode(id="b", label="b", cluster="c", deps=("a",)),
    ]
    with pytest.raises(CyclicGraphError) as exc:
        layout(nodes)
    assert exc.value.members == {"a", "b"}


def test_cycles_can_be_broken() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="c", deps=("b",)),
        TopicNode(id="b", label="b", cluster="c", deps=("a",)),
        TopicNode(id="d", label="d", cluster="c", deps=("a",)),
    ]
    result = layout(nodes, options=LayoutOptions(on_cycle="break"))
    assert len(result.nodes) == 3
    assert len(result.reversed_edges) == 1
    assert result.depths["a"] == result.depths["b"]


def test_depth_alignment_snaps_same_cluster_rows() -> None:
    nodes = [
        TopicNode(id="z", label="z", cluster="C2"),
        TopicNode(id="x", label="x", cluster="C1"),
        TopicNode(id="y", label="y", cluster="C1", deps=("z",)),
    ]
    aligned = _by_id(layout(nodes))
    assert aligned["x"].y == pytest.approx(aligned["y"].y)
    # The snapped row must not land on y's own dependency.
    assert aligned["y"].y >= aligned["z"].y + aligned["z"].height

    raw = _by_id(layout(nodes, options=LayoutOptions(align_depths=False)))
    assert raw["x"].y < raw["y"].y


def test_to_dict_shape(diamond: list[TopicNode]) -> None:
    payload = layout(diamond).to_dict()
    assert set(payload["nodes"][0]) == {"id", "x", "y", "width", "height"}
    assert {"source": "A", "target": "B"} in payload["edges"]


def test_long_edges_get_dummy_chain() -> None:
    dag = nx.DiGraph([("a", "b"), ("b", "c"), ("a", "c")])
    ranks = {"a": 0, "b": 1, "c": 2}
    augmented, aug_ranks = insert_dummies(dag, ranks)
    dummies = [n for n in augmented if n not in ranks]
    assert len(dummies) == 1
    assert aug_ranks[dummies[0]] == 1
    assert not augmented.has_edge("a", "c")


def test_count_crossings() -> None:
    g = nx.DiGraph([("a", "d"), ("b", "c")])
    assert count_crossings([["a", "b"], ["c", "d"]], g) == 1
    assert count_crossings([["a", "b"], ["d", "c"]], g) == 0


def test_greedy_fas_ordering_covers_all_nodes() -> None:
    g = nx.DiGraph([("a", "b"), ("b", "c"), ("c", "a")])
    order = greedy_fas_ordering(g)
    assert sorted(order) == ["a", "b", "c"]
