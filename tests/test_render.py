from techtree.geometry import cluster_visualization
from techtree.graph import classify_edges, compute_statuses
from techtree.layout import layout
from techtree.models import ClusterStyle, Direction, EdgeState, TopicNode
from techtree.render import cluster_colors, to_dot, to_svg, wrap_html


def test_svg_includes_boxes_edges_and_cluster_outline(sample_topics: list[TopicNode]) -> None:
    result = layout(sample_topics)
    statuses = compute_statuses(sample_topics, {"basics": True})
    positions = result.positions()
    clusters = [
        cluster_visualization(c, sample_topics, positions, ClusterStyle.CONVEX_HULL_POLYGON, {"basics": True})
        for c in ("foundations", "concurrency")
    ]
    edge_states = classify_edges(result.edges, statuses, goal_path=["basics", "functions"])

    svg = to_svg(result, sample_topics, statuses, title="Tree <1>", clusters=clusters, edge_states=edge_states)
    assert svg.strip().startswith("<svg")
    assert "Tree &lt;1&gt;" in svg
    assert svg.count("<rect") == len(sample_topics)
    assert 'data-status="completed"' in svg
    assert 'data-cluster="foundations"' in svg
    assert "foundations (25%)" in svg
    assert f'data-state="{EdgeState.GOAL_PATH.value}"' in svg
    assert "120 XP" in svg


def test_svg_left_to_right(diamond: list[TopicNode]) -> None:
    result = layout(diamond, direction=Direction.LR)
    svg = to_svg(result, diamond, {}, title="t", direction=Direction.LR)
    assert 'data-status="locked"' in svg
    assert svg.count("<path") == len(result.edges)


def test_dot_groups_clusters(sample_topics: list[TopicNode]) -> None:
    dot = to_dot(sample_topics, compute_statuses(sample_topics, {}), title="t", direction=Direction.LR)
    assert dot.startswith("digraph techtree {")
    assert "rankdir=LR;" in dot
    assert dot.count("subgraph cluster_") == 2
    assert '"basics" -> "functions";' in dot
    assert 'label="Python Basics"' in dot


def test_cluster_colors_are_stable() -> None:
    assert cluster_colors(["b", "a", "b"]) == cluster_colors(["a", "b"])


def test_html_includes_panzoom_script() -> None:
    html = wrap_html('<svg viewBox="0 0 10 10"></svg>', title="t")
    assert "<svg" in html
    assert "Drag to pan" in html
    assert "wheel" in html
