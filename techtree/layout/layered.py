"""Layered (Sugiyama-style) layout of the topic graph.

Phases:
  1. Cycle check (error, or break with a greedy feedback-arc set)
  2. Rank assignment (longest-path layering)
  3. Dummy nodes for edges spanning several ranks
  4. Crossing reduction (barycenter sweeps)
  5. Coordinate assignment, then translation to top-left corners
  6. Depth alignment of same-cluster rows (see ``align``)

Coordinates use two axes: the *rank axis* along which dependency layers
advance (y for TB, x for LR) and the *cross axis* inside a rank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal

import networkx as nx

from ..errors import CyclicGraphError
from ..models import Direction, PositionedNode, SizeVariant, TopicNode
from .align import align_depth_rows, compute_node_depths

logger = logging.getLogger(__name__)

BASE_NODE_SEP = 100.0  # between boxes of one rank
BASE_RANK_SEP = 150.0  # between ranks
BASE_MARGIN = 50.0
FOCUS_SCALE = 1.1
EXPANDED_SPACING_FACTOR = 1.6
EXPANDED_MARGIN_BONUS = 40.0
MAX_SWEEPS = 24
REFINE_PASSES = 4

DUMMY_PREFIX = "__dummy_"

OnCycle = Literal["error", "break"]


@dataclass(frozen=True)
class LayoutOptions:
    node_spacing_multiplier: float = 1.0
    expanded_spacing: bool = False
    focused_cluster: str | None = None
    align_depths: bool = True
    on_cycle: OnCycle = "error"

    @property
    def node_sep(self) -> float:
        sep = BASE_NODE_SEP * self.node_spacing_multiplier
        return sep * EXPANDED_SPACING_FACTOR if self.expanded_spacing else sep

    @property
    def rank_sep(self) -> float:
        sep = BASE_RANK_SEP * self.node_spacing_multiplier
        return sep * EXPANDED_SPACING_FACTOR if self.expanded_spacing else sep

    @property
    def margin(self) -> float:
        return BASE_MARGIN + (EXPANDED_MARGIN_BONUS if self.expanded_spacing else 0.0)


@dataclass
class LayoutResult:
    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)  # (dependency, dependent)
    ranks: dict[str, int] = field(default_factory=dict)
    depths: dict[str, int] = field(default_factory=dict)
    reversed_edges: set[tuple[str, str]] = field(default_factory=set)

    def positions(self) -> dict[str, PositionedNode]:
        return {n.id: n for n in self.nodes}

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [{"source": s, "target": t} for s, t in self.edges],
        }


def dependency_edges(nodes: Iterable[TopicNode]) -> list[tuple[str, str]]:
    """(dependency, dependent) pairs declared by the topics themselves."""
    return [(dep, n.id) for n in nodes for dep in n.deps]


# -----------------------------------------------------------------------------
# Cycle handling
# -----------------------------------------------------------------------------


def cycle_components(graph: nx.DiGraph) -> list[list[str]]:
    """Members of every cycle: SCCs larger than one node plus self-loops."""
    cycles = []
    for component in nx.strongly_connected_components(graph):
        members = sorted(component)
        if len(members) > 1 or graph.has_edge(members[0], members[0]):
            cycles.append(members)
    return sorted(cycles)


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Node ordering with few back-edges (Eades, Lin & Smyth greedy heuristic)."""
    active = list(graph.nodes)
    out_deg = {n: sum(1 for s in graph.successors(n) if s != n) for n in active}
    in_deg = {n: sum(1 for p in graph.predecessors(n) if p != n) for n in active}
    remaining = set(active)
    head: list[str] = []
    tail: list[str] = []

    def remove(n: str) -> None:
        remaining.discard(n)
        for s in graph.successors(n):
            if s in remaining and s != n:
                in_deg[s] -= 1
        for p in graph.predecessors(n):
            if p in remaining and p != n:
                out_deg[p] -= 1

    while remaining:
        changed = True
        while changed:
            changed = False
            for n in [n for n in active if n in remaining and out_deg[n] == 0]:
                remove(n)
                tail.append(n)
                changed = True
            for n in [n for n in active if n in remaining and in_deg[n] == 0]:
                remove(n)
                head.append(n)
                changed = True
        if remaining:
            best = max((n for n in active if n in remaining), key=lambda n: out_deg[n] - in_deg[n])
            remove(best)
            head.append(best)

    return head + list(reversed(tail))


def break_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Copy of ``graph`` with back-edges reversed and self-loops dropped."""
    position = {n: i for i, n in enumerate(greedy_fas_ordering(graph))}
    dag = nx.DiGraph()
    dag.add_nodes_from(graph.nodes)
    reversed_edges: set[tuple[str, str]] = set()
    for src, dst in graph.edges:
        if src == dst:
            reversed_edges.add((src, dst))
            continue
        if position[src] > position[dst]:
            reversed_edges.add((src, dst))
            dag.add_edge(dst, src)
        else:
            dag.add_edge(src, dst)
    return dag, reversed_edges


# -----------------------------------------------------------------------------
# Ranking and ordering
# -----------------------------------------------------------------------------


def assign_ranks(dag: nx.DiGraph) -> dict[str, int]:
    """Longest-path layering: a dependent is always ranked after its dependencies."""
    ranks: dict[str, int] = {}
    for rank, generation in enumerate(nx.topological_generations(dag)):
        for n in generation:
            ranks[n] = rank
    return ranks


def insert_dummies(dag: nx.DiGraph, ranks: dict[str, int]) -> tuple[nx.DiGraph, dict[str, int]]:
    """Split edges spanning more than one rank into chains of dummy nodes."""
    g = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    ranks = dict(ranks)
    for k, (src, dst) in enumerate(dag.edges):
        span = ranks[dst] - ranks[src]
        prev = src
        for i in range(1, span):
            dummy = f"{DUMMY_PREFIX}{k}_{i}"
            ranks[dummy] = ranks[src] + i
            g.add_edge(prev, dummy)
            prev = dummy
        g.add_edge(prev, dst)
    return g, ranks


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    """Edge crossings between consecutive ranks (inversion count)."""
    total = 0
    for upper, lower in zip(ordering, ordering[1:]):
        lower_pos = {n: i for i, n in enumerate(lower)}
        segments = [
            (i, lower_pos[s])
            for i, n in enumerate(upper)
            for s in graph.successors(n)
            if s in lower_pos
        ]
        for a in range(len(segments)):
            for b in range(a + 1, len(segments)):
                (a0, a1), (b0, b1) = segments[a], segments[b]
                if (a0 - b0) * (a1 - b1) < 0:
                    total += 1
    return total


def _barycenter(neighbors: Iterable[str], pos: dict[str, int], fallback: float) -> float:
    values = [pos[m] for m in neighbors if m in pos]
    return sum(values) / len(values) if values else fallback


def order_ranks(graph: nx.DiGraph, ranks: dict[str, int], seed_order: list[str]) -> list[list[str]]:
    """Within-rank order after barycenter sweeps, keeping the best seen."""
    rank_count = max(ranks.values(), default=-1) + 1
    index = {n: i for i, n in enumerate(seed_order)}
    ordering: list[list[str]] = [[] for _ in range(rank_count)]
    for n in sorted(ranks, key=lambda m: (index.get(m, len(index)), m)):
        ordering[ranks[n]].append(n)

    best = [list(r) for r in ordering]
    best_crossings = count_crossings(best, graph)

    for _ in range(MAX_SWEEPS):
        if best_crossings == 0:
            break
        for r in range(1, rank_count):
            pos = {n: i for i, n in enumerate(ordering[r - 1])}
            current = {n: i for i, n in enumerate(ordering[r])}
            ordering[r].sort(key=lambda n: _barycenter(graph.predecessors(n), pos, current[n]))
        for r in range(rank_count - 2, -1, -1):
            pos = {n: i for i, n in enumerate(ordering[r + 1])}
            current = {n: i for i, n in enumerate(ordering[r])}
            ordering[r].sort(key=lambda n: _barycenter(graph.successors(n), pos, current[n]))

        crossings = count_crossings(ordering, graph)
        if crossings >= best_crossings:
            break
        best, best_crossings = [list(r) for r in ordering], crossings

    return best


# -----------------------------------------------------------------------------
# Coordinates
# -----------------------------------------------------------------------------


def _place_rank(items: list[str], desired: dict[str, float], gaps: list[float]) -> dict[str, float]:
    """Closest positions to ``desired`` keeping order and minimum gaps.

    Averages a left-to-right push and a right-to-left push; both satisfy the
    gaps, so their mean does too.
    """
    if not items:
        return {}
    forward = [desired[items[0]]]
    for i in range(1, len(items)):
        forward.append(max(desired[items[i]], forward[-1] + gaps[i - 1]))
    backward = [desired[items[-1]]]
    for i in range(len(items) - 2, -1, -1):
        backward.append(min(desired[items[i]], backward[-1] - gaps[i]))
    backward.reverse()
    return {n: (f + b) / 2 for n, f, b in zip(items, forward, backward)}


def assign_cross_coordinates(
    ordering: list[list[str]],
    graph: nx.DiGraph,
    cross_extent: dict[str, float],
    node_sep: float,
) -> dict[str, float]:
    """Centre of every item along the cross axis."""

    def gap(a: str, b: str) -> float:
        sep = node_sep / 2 if a.startswith(DUMMY_PREFIX) or b.startswith(DUMMY_PREFIX) else node_sep
        return (cross_extent[a] + cross_extent[b]) / 2 + sep

    gaps = [[gap(a, b) for a, b in zip(rank, rank[1:])] for rank in ordering]

    # Initial packing, every rank centred on zero.
    coord: dict[str, float] = {}
    for rank, rank_gaps in zip(ordering, gaps):
        offsets = [0.0]
        for g in rank_gaps:
            offsets.append(offsets[-1] + g)
        shift = offsets[-1] / 2 if offsets else 0.0
        for n, off in zip(rank, offsets):
            coord[n] = off - shift

    for _ in range(REFINE_PASSES):
        sweeps = [(range(1, len(ordering)), graph.predecessors), (range(len(ordering) - 2, -1, -1), graph.successors)]
        for rank_indices, neighbors in sweeps:
            for r in rank_indices:
                desired = {}
                for n in ordering[r]:
                    adjacent = [coord[m] for m in neighbors(n) if m in coord]
                    desired[n] = sum(adjacent) / len(adjacent) if adjacent else coord[n]
                coord.update(_place_rank(ordering[r], desired, gaps[r]))

    return coord


def layout(
    nodes: list[TopicNode],
    edges: Iterable[tuple[str, str]] | None = None,
    direction: Direction = Direction.TB,
    size_variant: SizeVariant = SizeVariant.STANDARD,
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Position every topic with a layered, cluster-aware layout.

    ``edges`` are (dependency, dependent) pairs and default to the topics'
    own ``deps``. Edges naming unknown ids are dropped.
    """
    options = options or LayoutOptions()
    direction = Direction(direction)
    size_variant = SizeVariant(size_variant)
    if not nodes:
        return LayoutResult()

    graph = nx.DiGraph()
    graph.add_nodes_from(n.id for n in nodes)
    kept_edges: list[tuple[str, str]] = []
    for src, dst in dependency_edges(nodes) if edges is None else edges:
        if src not in graph or dst not in graph:
            logger.debug("dropping edge %s -> %s: unknown topic", src, dst)
            continue
        if not graph.has_edge(src, dst):
            graph.add_edge(src, dst)
            kept_edges.append((src, dst))

    reversed_edges: set[tuple[str, str]] = set()
    dag = graph
    if not nx.is_directed_acyclic_graph(graph):
        cycles = cycle_components(graph)
        if options.on_cycle == "error":
            raise CyclicGraphError(cycles)
        logger.warning("breaking %d dependency cycle(s) for layout: %s", len(cycles), cycles)
        dag, reversed_edges = break_cycles(graph)

    ranks = assign_ranks(dag)
    augmented, aug_ranks = insert_dummies(dag, ranks)
    ordering = order_ranks(augmented, aug_ranks, [n.id for n in nodes])

    is_lr = direction == Direction.LR
    sizes: dict[str, tuple[float, float]] = {}
    base_w, base_h = size_variant.dimensions
    for n in nodes:
        scale = FOCUS_SCALE if options.focused_cluster and n.cluster == options.focused_cluster else 1.0
        sizes[n.id] = (base_w * scale, base_h * scale)

    def rank_extent(nid: str) -> float:
        w, h = sizes[nid]
        return w if is_lr else h

    cross_extent = {n: 0.0 for n in aug_ranks}
    for nid, (w, h) in sizes.items():
        cross_extent[nid] = h if is_lr else w

    cross = assign_cross_coordinates(ordering, augmented, cross_extent, options.node_sep)

    # Rank axis: each rank is as thick as its largest box.
    rank_centre: list[float] = []
    cursor = 0.0
    for rank in ordering:
        thickness = max((rank_extent(n) for n in rank if n in sizes), default=0.0)
        rank_centre.append(cursor + thickness / 2)
        cursor += thickness + options.rank_sep

    min_cross = min(cross[n] - cross_extent[n] / 2 for n in sizes)
    positioned: list[PositionedNode] = []
    for n in nodes:
        w, h = sizes[n.id]
        c = cross[n.id] - min_cross + options.margin
        m = rank_centre[ranks[n.id]] + options.margin
        if is_lr:
            positioned.append(PositionedNode(id=n.id, x=m - w / 2, y=c - h / 2, width=w, height=h))
        else:
            positioned.append(PositionedNode(id=n.id, x=c - w / 2, y=m - h / 2, width=w, height=h))

    depths = compute_node_depths(nodes, strict=options.on_cycle == "error")
    if options.align_depths:
        clusters = {n.id: n.cluster for n in nodes}
        positioned = align_depth_rows(positioned, clusters, depths, direction)

    return LayoutResult(
        nodes=positioned,
        edges=kept_edges,
        ranks=ranks,
        depths=depths,
        reversed_edges=reversed_edges,
    )
