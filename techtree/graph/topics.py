"""Topic dependency graph construction and analysis."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

import networkx as nx

from ..errors import TopicValidationError
from ..models import TopicNode

logger = logging.getLogger(__name__)


@dataclass
class TopicGraph:
    """Index over a topic list with dependency edges in both directions."""

    nodes: dict[str, TopicNode] = field(default_factory=dict)  # id -> node, insertion order kept
    edges: dict[str, set[str]] = field(
        default_factory=lambda: defaultdict(set)
    )  # node -> its known dependencies
    reverse_edges: dict[str, set[str]] = field(
        default_factory=lambda: defaultdict(set)
    )  # node -> nodes depending on it
    missing: dict[str, set[str]] = field(default_factory=dict)  # node -> unknown dep ids

    @classmethod
    def from_nodes(cls, nodes: Iterable[TopicNode]) -> "TopicGraph":
        """Build graph from a list of topics.

        Dependencies on unknown ids are kept out of the edge sets and recorded
        in ``missing``; they stay unsatisfiable for status computation.
        """
        graph = cls()

        for index, node in enumerate(nodes):
            if node.id in graph.nodes:
                raise TopicValidationError(f"duplicate topic id '{node.id}'", field="id", index=index)
            graph.nodes[node.id] = node

        for node in graph.nodes.values():
            for dep in node.deps:
                if dep not in graph.nodes:
                    graph.missing.setdefault(node.id, set()).add(dep)
                    logger.debug("topic %s depends on unknown id %s", node.id, dep)
                    continue
                graph.edges[node.id].add(dep)
                graph.reverse_edges[dep].add(node.id)

        return graph

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> TopicNode | None:
        return self.nodes.get(node_id)

    def dependencies_of(self, node_id: str) -> list[str]:
        """Direct dependencies as declared (unknown ids included)."""
        node = self.nodes.get(node_id)
        return list(node.deps) if node else []

    def dependents_of(self, node_id: str) -> list[str]:
        """Topics that list this one as a dependency, in topic order."""
        dependents = self.reverse_edges.get(node_id, set())
        return [nid for nid in self.nodes if nid in dependents]

    def subgraph_for_node(self, node_id: str) -> tuple[list[str], list[str]]:
        """Direct dependencies and direct dependents of a topic."""
        return self.dependencies_of(node_id), self.dependents_of(node_id)

    def cluster_of(self, node_id: str) -> str | None:
        node = self.nodes.get(node_id)
        return node.cluster if node else None

    def by_cluster(self) -> dict[str, list[str]]:
        """Cluster id -> member ids, both in first-seen order."""
        out: dict[str, list[str]] = {}
        for node in self.nodes.values():
            out.setdefault(node.cluster, []).append(node.id)
        return out

    def edge_list(self) -> list[tuple[str, str]]:
        """All known (dependency, dependent) pairs in topic order."""
        pairs: list[tuple[str, str]] = []
        for node in self.nodes.values():
            for dep in node.deps:
                if dep in self.nodes:
                    pairs.append((dep, node.id))
        return pairs

    def topological_sort(self) -> list[str]:
        """Return topics in dependency order (deps first).

        Uses Kahn's algorithm. Returns a partial order if cycles exist.
        """
        in_degree = {nid: len(self.edges.get(nid, set())) for nid in self.nodes}

        queue = [nid for nid in self.nodes if in_degree[nid] == 0]
        result = []

        while queue:
            nid = queue.pop(0)
            result.append(nid)
            for dependent in self.dependents_of(nid):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        return result

    def to_digraph(self) -> nx.DiGraph:
        """networkx view with dependent -> dependency edges."""
        g = nx.DiGraph()
        g.add_nodes_from(self.nodes)
        for nid, deps in self.edges.items():
            g.add_edges_from((nid, dep) for dep in deps)
        return g

    def find_cycles(self) -> list[list[str]]:
        """Strongly connected components that form cycles, members sorted.

        Components with more than one member are cycles, as are self-loops.
        """
        g = self.to_digraph()
        return sorted(
            sorted(component)
            for component in nx.strongly_connected_components(g)
            if len(component) > 1 or any(g.has_edge(n, n) for n in component)
        )

    def find_simple_cycles(self) -> list[list[str]]:
        """Simple cycles as closed paths ``A -> B -> ... -> A``, each starting at its smallest id."""
        cycles = []
        for ring in nx.simple_cycles(self.to_digraph()):
            start = ring.index(min(ring))
            ring = ring[start:] + ring[:start]
            cycles.append(ring + [ring[0]])
        return sorted(cycles)
