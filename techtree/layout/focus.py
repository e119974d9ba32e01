"""Cluster-focus layout: one cluster plus its direct neighbours."""

from __future__ import annotations

from dataclasses import replace

from ..models import Direction, SizeVariant, TopicNode
from .layered import LayoutOptions, LayoutResult, layout


def focus_subset(nodes: list[TopicNode], cluster_id: str) -> tuple[list[TopicNode], list[tuple[str, str]]]:
    """Members of ``cluster_id`` plus any direct dependency or dependent of a member.

    Returns the kept topics (input order) and the (dependency, dependent)
    edges between them.
    """
    members = {n.id for n in nodes if n.cluster == cluster_id}
    if not members:
        return [], []

    keep = set(members)
    for n in nodes:
        if n.id in members:
            keep.update(n.deps)
        elif members.intersection(n.deps):
            keep.add(n.id)

    kept = [n for n in nodes if n.id in keep]
    kept_ids = {n.id for n in kept}
    edges = [(dep, n.id) for n in kept for dep in n.deps if dep in kept_ids]
    return kept, edges


def layout_cluster_focus(
    nodes: list[TopicNode],
    cluster_id: str,
    direction: Direction = Direction.TB,
    size_variant: SizeVariant = SizeVariant.EXPANDED,
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Layered layout restricted to one cluster's neighbourhood.

    Members of ``cluster_id`` are always drawn at the focused scale.
    """
    kept, edges = focus_subset(nodes, cluster_id)
    if not kept:
        return LayoutResult()
    options = replace(options or LayoutOptions(), focused_cluster=cluster_id)
    return layout(kept, edges, direction=direction, size_variant=size_variant, options=options)
