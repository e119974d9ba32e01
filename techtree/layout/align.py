"""Intra-cluster dependency depth and row alignment."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

import networkx as nx

from ..errors import CyclicGraphError
from ..models import Direction, PositionedNode, TopicNode

logger = logging.getLogger(__name__)


def _cluster_graph(nodes: list[TopicNode]) -> nx.DiGraph:
    """dependency -> dependent edges that stay inside one cluster."""
    cluster_by_id = {n.id: n.cluster for n in nodes}
    g = nx.DiGraph()
    g.add_nodes_from(n.id for n in nodes)
    for n in nodes:
        for dep in n.deps:
            if cluster_by_id.get(dep) == n.cluster:
                g.add_edge(dep, n.id)
    return g


def compute_node_depths(nodes: Iterable[TopicNode], *, strict: bool = True) -> dict[str, int]:
    """Longest chain of same-cluster dependencies ending at each topic.

    Topics without same-cluster dependencies have depth 0. Cross-cluster and
    unknown dependencies are ignored. With ``strict`` a cycle raises
    ``CyclicGraphError``; otherwise every member of a cycle gets the depth of
    its strongly connected component.
    """
    nodes = list(nodes)
    g = _cluster_graph(nodes)

    cycles = [
        sorted(c)
        for c in nx.strongly_connected_components(g)
        if len(c) > 1 or g.has_edge(next(iter(c)), next(iter(c)))
    ]
    if cycles:
        if strict:
            raise CyclicGraphError(sorted(cycles))
        logger.warning("same-cluster dependency cycles share one depth: %s", sorted(cycles))

    condensed = nx.condensation(g)
    component_depth: dict[int, int] = {}
    for comp in nx.topological_sort(condensed):
        preds = list(condensed.predecessors(comp))
        component_depth[comp] = max((component_depth[p] + 1 for p in preds), default=0)

    mapping = condensed.graph["mapping"]
    return {n.id: component_depth[mapping[n.id]] for n in nodes}


def compute_cluster_depths(nodes: Iterable[TopicNode], *, strict: bool = True) -> dict[str, dict[str, int]]:
    """Depths grouped as cluster -> topic id -> depth."""
    nodes = list(nodes)
    depths = compute_node_depths(nodes, strict=strict)
    out: dict[str, dict[str, int]] = {}
    for n in nodes:
        out.setdefault(n.cluster, {})[n.id] = depths[n.id]
    return out


ROW_GAP = 20.0


def _span(p: PositionedNode, is_lr: bool, rank_axis: bool) -> tuple[float, float]:
    if rank_axis == is_lr:
        return p.x, p.x + p.width
    return p.y, p.y + p.height


def _overlaps(a: tuple[float, float], b: tuple[float, float]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def _shift(p: PositionedNode, delta: float, is_lr: bool) -> PositionedNode:
    if not delta:
        return p
    return replace(p, x=p.x + delta) if is_lr else replace(p, y=p.y + delta)


def align_depth_rows(
    positioned: list[PositionedNode],
    clusters: dict[str, str],
    depths: dict[str, int],
    direction: Direction,
    min_gap: float = ROW_GAP,
) -> list[PositionedNode]:
    """Snap topics sharing (cluster, depth) onto one row.

    The row coordinate is the rank axis (y for TB, x for LR); each group's box
    centres move to the group's average. A snapped row that lands on another
    box is then pushed further along the rank axis, as a whole, until it
    clears that box by ``min_gap``.
    """
    is_lr = Direction(direction) == Direction.LR
    groups: dict[tuple[str, int], list[PositionedNode]] = {}
    for p in positioned:
        if p.id not in clusters or p.id not in depths:
            continue
        groups.setdefault((clusters[p.id], depths[p.id]), []).append(p)

    target: dict[str, float] = {}
    for members in groups.values():
        centres = [(m.x + m.width / 2) if is_lr else (m.y + m.height / 2) for m in members]
        avg = sum(centres) / len(centres)
        for m in members:
            target[m.id] = avg

    snapped: dict[str, PositionedNode] = {}
    for p in positioned:
        if p.id not in target:
            snapped[p.id] = p
        elif is_lr:
            snapped[p.id] = replace(p, x=target[p.id] - p.width / 2)
        else:
            snapped[p.id] = replace(p, y=target[p.id] - p.height / 2)

    # Rows move as units so snapped topics keep sharing a row; loose topics are units of one.
    grouped = {m.id for members in groups.values() for m in members}
    units = [[m.id for m in members] for members in groups.values()]
    units += [[p.id] for p in positioned if p.id not in grouped]
    units.sort(key=lambda ids: min(_span(snapped[i], is_lr, True)[0] for i in ids))

    placed: list[PositionedNode] = []
    for ids in units:
        offset = 0.0
        moved = True
        while moved:
            moved = False
            for nid in ids:
                box = _shift(snapped[nid], offset, is_lr)
                rank_span = _span(box, is_lr, True)
                cross_span = _span(box, is_lr, False)
                for other in placed:
                    other_rank = _span(other, is_lr, True)
                    if _overlaps(cross_span, _span(other, is_lr, False)) and _overlaps(rank_span, other_rank):
                        offset += other_rank[1] + min_gap - rank_span[0]
                        moved = True
                        break
                if moved:
                    break
        if offset:
            logger.debug("row %s moved %.1f along the rank axis to clear overlaps", ids, offset)
        for nid in ids:
            snapped[nid] = _shift(snapped[nid], offset, is_lr)
            placed.append(snapped[nid])

    return [snapped[p.id] for p in positioned]
