"""Selection of the topics that are currently visible."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..models import Status, TopicNode
from .unlock import CLUSTER_UNLOCK_THRESHOLD, NODE_UNLOCK_THRESHOLD, compute_statuses


@dataclass(frozen=True)
class FilterOptions:
    clusters: tuple[str, ...] = ()  # empty = all clusters
    search: str = ""
    hide_completed: bool = False
    show_only_unlockable: bool = False
    completion: Mapping[str, bool] = field(default_factory=dict)
    deps_threshold: float = NODE_UNLOCK_THRESHOLD
    cluster_threshold: float = CLUSTER_UNLOCK_THRESHOLD


def filter_by_clusters(nodes: Iterable[TopicNode], selected: Iterable[str]) -> list[TopicNode]:
    nodes = list(nodes)
    selected = set(selected or ())
    if not selected:
        return nodes
    return [n for n in nodes if n.cluster in selected]


def filter_by_search(nodes: Iterable[TopicNode], query: str) -> list[TopicNode]:
    """Case-insensitive substring match on id and label; an exact id match wins."""
    nodes = list(nodes)
    if not query:
        return nodes
    term = query.lower()
    for n in nodes:
        if n.id.lower() == term:
            return [n]
    return [n for n in nodes if term in n.id.lower() or term in n.label.lower()]


def filter_hide_completed(nodes: Iterable[TopicNode], completion: Mapping[str, bool]) -> list[TopicNode]:
    return [n for n in nodes if not completion.get(n.id)]


def visible_nodes(nodes: Iterable[TopicNode], opts: FilterOptions) -> list[TopicNode]:
    """Topics passing every active filter.

    Unlockability is judged against the whole tree, so cluster locks still
    apply when only some clusters are shown.
    """
    nodes = list(nodes)
    out = filter_by_clusters(nodes, opts.clusters)
    out = filter_by_search(out, opts.search)
    if opts.hide_completed:
        out = filter_hide_completed(out, opts.completion)
    if opts.show_only_unlockable:
        statuses = compute_statuses(
            nodes,
            opts.completion,
            deps_threshold=opts.deps_threshold,
            cluster_threshold=opts.cluster_threshold,
        )
        out = [n for n in out if statuses[n.id] != Status.LOCKED]
    return out
