"""Unlock status for topics and clusters.

Everything here is a pure function of the topic list, the completion map and
the threshold policy. Nothing reads layout or geometry output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from ..models import EdgeState, Status, TopicNode

NODE_UNLOCK_THRESHOLD = 1.0  # fraction of deps that must be complete
CLUSTER_UNLOCK_THRESHOLD = 100  # percent of each prerequisite cluster


@dataclass(frozen=True)
class ClusterProgress:
    total: int
    done: int
    pct: int


def compute_status(
    node_id: str,
    deps: Iterable[str],
    completion: Mapping[str, bool],
    deps_threshold: float = NODE_UNLOCK_THRESHOLD,
    cluster_locked: bool = False,
) -> Status:
    """Status of one topic given its direct dependencies."""
    if completion.get(node_id):
        return Status.COMPLETED
    if cluster_locked:
        return Status.LOCKED
    deps = list(deps or ())
    if not deps:
        return Status.AVAILABLE
    met = sum(1 for d in deps if completion.get(d))
    return Status.AVAILABLE if met / len(deps) >= deps_threshold else Status.LOCKED


def is_node_unlocked_by_threshold(
    deps: Iterable[str],
    completion: Mapping[str, bool],
    threshold_pct: float,
) -> bool:
    """Percent-based variant of the dependency check (0-100)."""
    deps = list(deps or ())
    if not deps:
        return True
    met = sum(1 for d in deps if completion.get(d))
    return met / len(deps) * 100 >= threshold_pct


def cluster_completion(
    completion: Mapping[str, bool],
    by_cluster: Mapping[str, list[str]],
) -> dict[str, ClusterProgress]:
    out: dict[str, ClusterProgress] = {}
    for cluster, ids in by_cluster.items():
        total = len(ids)
        done = sum(1 for i in ids if completion.get(i))
        pct = round(done / total * 100) if total else 0
        out[cluster] = ClusterProgress(total=total, done=done, pct=pct)
    return out


def _group_by_cluster(nodes: Iterable[TopicNode]) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for n in nodes:
        out.setdefault(n.cluster, []).append(n.id)
    return out


def prerequisite_clusters(cluster_id: str, nodes: Iterable[TopicNode]) -> set[str]:
    """Clusters holding a dependency of some member of ``cluster_id``.

    Only cross-cluster edges count; unknown dependency ids are ignored.
    """
    nodes = list(nodes)
    cluster_by_id = {n.id: n.cluster for n in nodes}
    prereq: set[str] = set()
    for n in nodes:
        if n.cluster != cluster_id:
            continue
        for dep in n.deps:
            dep_cluster = cluster_by_id.get(dep)
            if dep_cluster is not None and dep_cluster != cluster_id:
                prereq.add(dep_cluster)
    return prereq


def is_cluster_unlocked(
    cluster_id: str,
    nodes: Iterable[TopicNode],
    completion: Mapping[str, bool],
    threshold_pct: float = CLUSTER_UNLOCK_THRESHOLD,
) -> bool:
    """A cluster is unlocked once every direct prerequisite cluster meets the threshold.

    The check is one level deep: prerequisites of prerequisites are not
    re-evaluated.
    """
    nodes = list(nodes)
    prereq = prerequisite_clusters(cluster_id, nodes)
    if not prereq:
        return True
    progress = cluster_completion(completion, _group_by_cluster(nodes))
    # ``pct`` is rounded for display; compare exact counts.
    return all(progress[c].done * 100 >= threshold_pct * progress[c].total for c in prereq if c in progress)


def locked_clusters(
    nodes: Iterable[TopicNode],
    completion: Mapping[str, bool],
    threshold_pct: float = CLUSTER_UNLOCK_THRESHOLD,
) -> set[str]:
    nodes = list(nodes)
    clusters = _group_by_cluster(nodes)
    return {c for c in clusters if not is_cluster_unlocked(c, nodes, completion, threshold_pct)}


def compute_statuses(
    nodes: Iterable[TopicNode],
    completion: Mapping[str, bool],
    *,
    deps_threshold: float = NODE_UNLOCK_THRESHOLD,
    cluster_threshold: float = CLUSTER_UNLOCK_THRESHOLD,
    enforce_cluster_locks: bool = True,
) -> dict[str, Status]:
    """Status for every topic; a locked cluster overrides dependency satisfaction."""
    nodes = list(nodes)
    locked = locked_clusters(nodes, completion, cluster_threshold) if enforce_cluster_locks else set()
    return {
        n.id: compute_status(
            n.id,
            n.deps,
            completion,
            deps_threshold=deps_threshold,
            cluster_locked=n.cluster in locked,
        )
        for n in nodes
    }


def classify_edges(
    edges: Iterable[tuple[str, str]],
    statuses: Mapping[str, Status],
    *,
    focus: str | None = None,
    focus_deps: Iterable[str] = (),
    focus_dependents: Iterable[str] = (),
    goal_path: Iterable[str] = (),
) -> dict[tuple[str, str], EdgeState]:
    """Highlight state of each (dependency, dependent) edge."""
    focus_deps = set(focus_deps)
    focus_dependents = set(focus_dependents)
    path = list(goal_path)
    path_edges = set(zip(path, path[1:]))

    out: dict[tuple[str, str], EdgeState] = {}
    for src, dst in edges:
        src_done = statuses.get(src) == Status.COMPLETED
        dst_done = statuses.get(dst) == Status.COMPLETED

        if focus and dst == focus and src in focus_deps:
            state = EdgeState.FOCUS_DEPENDENCY
        elif focus and src == focus and dst in focus_dependents:
            state = EdgeState.FOCUS_DEPENDENT
        elif (src, dst) in path_edges:
            state = EdgeState.GOAL_PATH
        elif src_done and dst_done:
            state = EdgeState.COMPLETED
        elif src_done or dst_done:
            state = EdgeState.PARTIAL
        else:
            state = EdgeState.DEFAULT
        out[(src, dst)] = state
    return out
