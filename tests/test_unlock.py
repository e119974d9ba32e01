from techtree.graph import (
    classify_edges,
    cluster_completion,
    compute_status,
    compute_statuses,
    is_cluster_unlocked,
    is_node_unlocked_by_threshold,
    prerequisite_clusters,
)
from techtree.models import EdgeState, Status, TopicNode


def test_status_available_once_dependency_completed() -> None:
    assert compute_status("B", ["A"], {"A": True}) == Status.AVAILABLE
    assert compute_status("B", ["A"], {}) == Status.LOCKED


def test_completed_wins_over_cluster_lock() -> None:
    assert compute_status("B", ["A"], {"B": True}, cluster_locked=True) == Status.COMPLETED


def test_no_deps_is_available_unless_cluster_locked() -> None:
    assert compute_status("A", [], {}) == Status.AVAILABLE
    assert compute_status("A", [], {}, cluster_locked=True) == Status.LOCKED


def test_partial_threshold_unlocks_with_some_deps() -> None:
    deps = ["a", "b", "c", "d"]
    completion = {"a": True, "b": True}
    assert compute_status("x", deps, completion, deps_threshold=0.5) == Status.AVAILABLE
    assert compute_status("x", deps, completion, deps_threshold=0.75) == Status.LOCKED


def test_unknown_dependency_is_never_satisfied() -> None:
    assert compute_status("x", ["ghost"], {}) == Status.LOCKED


def test_status_is_monotonic_in_completed_dependencies() -> None:
    deps = ["a", "b", "c"]
    completion: dict[str, bool] = {}
    seen_unlocked = False
    for dep in deps:
        completion[dep] = True
        status = compute_status("x", deps, completion, deps_threshold=0.6)
        if seen_unlocked:
            assert status != Status.LOCKED
        seen_unlocked = status != Status.LOCKED
    assert seen_unlocked


def test_percent_threshold_variant() -> None:
    assert is_node_unlocked_by_threshold([], {}, 100)
    assert is_node_unlocked_by_threshold(["a", "b"], {"a": True}, 50)
    assert not is_node_unlocked_by_threshold(["a", "b"], {"a": True}, 51)


def test_cluster_completion_percentages() -> None:
    progress = cluster_completion({"a": True, "c": True}, {"C1": ["a", "b"], "C2": ["c"], "C3": []})
    assert progress["C1"].pct == 50
    assert progress["C2"].pct == 100
    assert progress["C3"].total == 0
    assert progress["C3"].pct == 0


def test_cross_cluster_prerequisite_unlocks_at_full_completion() -> None:
    nodes = [
        TopicNode(id="X", label="X", cluster="C2"),
        TopicNode(id="Y", label="Y", cluster="C1", deps=("X",)),
    ]
    assert prerequisite_clusters("C1", nodes) == {"C2"}
    assert not is_cluster_unlocked("C1", nodes, {})
    assert is_cluster_unlocked("C1", nodes, {"X": True})


def test_in_cluster_edges_do_not_create_prerequisites(diamond: list[TopicNode]) -> None:
    assert prerequisite_clusters("C1", diamond) == set()
    assert is_cluster_unlocked("C1", diamond, {})


def test_relaxed_cluster_threshold(sample_topics: list[TopicNode]) -> None:
    completion = {"basics": True, "functions": True, "classes": True}
    assert not is_cluster_unlocked("concurrency", sample_topics, completion)
    assert is_cluster_unlocked("concurrency", sample_topics, completion, threshold_pct=75)


def test_cluster_check_is_one_level_deep() -> None:
    nodes = [
        TopicNode(id="a", label="a", cluster="A"),
        TopicNode(id="b", label="b", cluster="B", deps=("a",)),
        TopicNode(id="c", label="c", cluster="C", deps=("b",)),
    ]
    # C only looks at B's completion, not at whether B itself is unlocked.
    assert is_cluster_unlocked("C", nodes, {"b": True})


def test_cluster_threshold_uses_exact_completion() -> None:
    nodes = [TopicNode(id=f"p{i}", label=f"p{i}", cluster="P") for i in range(200)]
    nodes.append(TopicNode(id="q", label="q", cluster="Q", deps=("p0",)))
    completion = {f"p{i}": True for i in range(199)}

    # 199/200 displays as 100% but one topic is still open.
    assert cluster_completion(completion, {"P": [f"p{i}" for i in range(200)]})["P"].pct == 100
    assert not is_cluster_unlocked("Q", nodes, completion)
    assert is_cluster_unlocked("Q", nodes, {**completion, "p199": True})


def test_locked_cluster_overrides_satisfied_deps(sample_topics: list[TopicNode]) -> None:
    statuses = compute_statuses(sample_topics, {"basics": True, "functions": True})
    assert statuses["asyncio"] == Status.LOCKED
    assert statuses["threads"] == Status.LOCKED
    assert statuses["classes"] == Status.AVAILABLE
    assert statuses["basics"] == Status.COMPLETED

    relaxed = compute_statuses(sample_topics, {"basics": True, "functions": True}, enforce_cluster_locks=False)
    assert relaxed["asyncio"] == Status.AVAILABLE


def test_classify_edges_precedence() -> None:
    statuses = {"a": Status.COMPLETED, "b": Status.COMPLETED, "c": Status.AVAILABLE, "d": Status.LOCKED}
    edges = [("a", "b"), ("b", "c"), ("c", "d"), ("a", "c")]
    states = classify_edges(edges, statuses, focus="c", focus_deps=["b"], goal_path=["c", "d"])
    assert states[("a", "b")] == EdgeState.COMPLETED
    assert states[("b", "c")] == EdgeState.FOCUS_DEPENDENCY
    assert states[("c", "d")] == EdgeState.GOAL_PATH
    assert states[("a", "c")] == EdgeState.PARTIAL


def test_classify_edges_focus_dependent() -> None:
    states = classify_edges([("x", "y")], {}, focus="x", focus_dependents=["y"])
    assert states[("x", "y")] == EdgeState.FOCUS_DEPENDENT
    assert classify_edges([("x", "y")], {})[("x", "y")] == EdgeState.DEFAULT
