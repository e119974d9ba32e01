"""Goal highlighting: ancestor closure and shortest dependency routes."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..models import Status, TopicNode
from .unlock import CLUSTER_UNLOCK_THRESHOLD, NODE_UNLOCK_THRESHOLD, compute_statuses


@dataclass(frozen=True)
class GoalProgress:
    """How far the learner is from a goal topic."""

    goal: str
    required: frozenset[str] = frozenset()
    done: frozenset[str] = frozenset()
    remaining: frozenset[str] = frozenset()
    next_available: list[str] = field(default_factory=list)

    @property
    def pct(self) -> int:
        if not self.required:
            return 0
        return round(len(self.done) / len(self.required) * 100)


def predecessor_set(nodes: Iterable[TopicNode], goal_id: str | None) -> set[str]:
    """Everything still required to reach ``goal_id``, the goal included.

    Returns an empty set when the goal is unknown.
    """
    if not goal_id:
        return set()
    by_id = {n.id: n for n in nodes}
    if goal_id not in by_id:
        return set()

    predecessors = {goal_id}
    changed = True
    while changed:
        changed = False
        for nid in list(predecessors):
            node = by_id.get(nid)
            if node is None:
                continue
            for dep in node.deps:
                if dep not in predecessors:
                    predecessors.add(dep)
                    changed = True
    return predecessors


def find_path(nodes: Iterable[TopicNode], from_id: str | None, to_id: str | None) -> list[str]:
    """Shortest dependency -> dependent route from ``from_id`` to ``to_id``.

    Breadth-first over dependents. Empty list when either id is unknown or no
    route exists.
    """
    if not from_id or not to_id:
        return []
    nodes = list(nodes)
    by_id = {n.id: n for n in nodes}
    if from_id not in by_id or to_id not in by_id:
        return []

    dependents: dict[str, list[str]] = {}
    for n in nodes:
        for dep in n.deps:
            dependents.setdefault(dep, []).append(n.id)

    queue = deque([from_id])
    visited = {from_id}
    parent: dict[str, str] = {}

    while queue:
        cur = queue.popleft()
        if cur == to_id:
            break
        for nxt in dependents.get(cur, []):
            if nxt in visited:
                continue
            visited.add(nxt)
            parent[nxt] = cur
            queue.append(nxt)

    if to_id not in visited:
        return []

    path = [to_id]
    while path[-1] != from_id:
        path.append(parent[path[-1]])
    path.reverse()
    return path


def goal_progress(
    nodes: Iterable[TopicNode],
    goal_id: str | None,
    completion: Mapping[str, bool],
    deps_threshold: float = NODE_UNLOCK_THRESHOLD,
    cluster_threshold: float = CLUSTER_UNLOCK_THRESHOLD,
) -> GoalProgress:
    """Split a goal's predecessor set into done and remaining topics.

    ``next_available`` honours cluster locks, so every topic it lists can be
    completed right away.
    """
    nodes = list(nodes)
    required = predecessor_set(nodes, goal_id)
    by_id = {n.id: n for n in nodes}
    known = {nid for nid in required if nid in by_id}

    done = {nid for nid in known if completion.get(nid)}
    remaining = known - done
    statuses = compute_statuses(nodes, completion, deps_threshold=deps_threshold, cluster_threshold=cluster_threshold)
    next_available = [n.id for n in nodes if n.id in remaining and statuses[n.id] == Status.AVAILABLE]
    return GoalProgress(
        goal=goal_id or "",
        required=frozenset(known),
        done=frozenset(done),
        remaining=frozenset(remaining),
        next_available=next_available,
    )
