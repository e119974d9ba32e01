import sys

import pytest

from techtree.errors import TopicValidationError
from techtree.graph import TopicGraph
from techtree.models import TopicNode


def test_graph_indexes_both_directions(diamond: list[TopicNode]) -> None:
    graph = TopicGraph.from_nodes(diamond)
    assert len(graph) == 4
    assert "A" in graph
    assert graph.dependencies_of("D") == ["B", "C"]
    assert graph.dependents_of("A") == ["B", "C"]
    assert graph.subgraph_for_node("B") == (["A"], ["D"])
    assert graph.cluster_of("D") == "C1"
    assert graph.cluster_of("nope") is None


def test_unknown_dependencies_are_recorded_not_linked() -> None:
    graph = TopicGraph.from_nodes([TopicNode(id="a", label="a", cluster="c", deps=("ghost",))])
    assert graph.missing == {"a": {"ghost"}}
    assert graph.edge_list() == []
    assert graph.dependencies_of("a") == ["ghost"]


def test_duplicate_ids_are_rejected() -> None:
    nodes = [TopicNode(id="a", label="a", cluster="c"), TopicNode(id="a", label="b", cluster="c")]
    with pytest.raises(TopicValidationError, match=r"nodes\[1\]\.id"):
        TopicGraph.from_nodes(nodes)


def test_topological_sort_puts_dependencies_first(sample_topics: list[TopicNode]) -> None:
    order = TopicGraph.from_nodes(sample_topics).topological_sort()
    assert len(order) == len(sample_topics)
    pos = {nid: i for i, nid in enumerate(order)}
    for n in sample_topics:
        for dep in n.deps:
            assert pos[dep] < pos[n.id]


def test_by_cluster_keeps_first_seen_order(sample_topics: list[TopicNode]) -> None:
    clusters = TopicGraph.from_nodes(sample_topics).by_cluster()
    assert list(clusters) == ["foundations", "concurrency"]
    assert clusters["concurrency"] == ["asyncio", "threads"]


def test_find_cycles_reports_components_and_self_loops() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="c", deps=("b",)),
        TopicNode(id="b", label="b", cluster="c", deps=("a",)),
        TopicNode(id="s", label="s", cluster="c", deps=("s",)),
        TopicNode(id="ok", label="ok", cluster="c"),
    ]
    graph = TopicGraph.from_nodes(nodes)
    assert sorted(graph.find_cycles()) == [["a", "b"], ["s"]]
    assert graph.find_simple_cycles() == [["a", "b", "a"], ["s", "s"]]


def test_acyclic_graph_has_no_cycles(diamond: list[TopicNode]) -> None:
    graph = TopicGraph.from_nodes(diamond)
    assert graph.find_cycles() == []
    assert graph.find_simple_cycles() == []


def _chain(length: int, *, closed: bool = False) -> list[TopicNode]:
    nodes = [TopicNode(id=f"t{i:05d}", label=f"t{i}", cluster="c", deps=(f"t{i - 1:05d}",) if i else ()) for i in range(length)]
    if closed:
        nodes[0] = TopicNode(id="t00000", label="t0", cluster="c", deps=(f"t{length - 1:05d}",))
    return nodes


def test_cycle_search_handles_chains_deeper_than_the_recursion_limit() -> None:
    length = sys.getrecursionlimit() + 100
    graph = TopicGraph.from_nodes(_chain(length))
    assert graph.find_cycles() == []
    assert graph.find_simple_cycles() == []

    ring = TopicGraph.from_nodes(_chain(length, closed=True))
    (component,) = ring.find_cycles()
    assert len(component) == length
    (cycle,) = ring.find_simple_cycles()
    assert cycle[0] == cycle[-1] == "t00000"
    assert len(cycle) == length + 1
