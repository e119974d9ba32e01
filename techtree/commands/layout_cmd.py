"""Layout command - positioned topics and cluster boundaries."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from ..geometry import ClusterVisualization, cluster_visualization
from ..graph import TopicGraph, classify_edges
from ..layout import LayoutResult, layout, layout_cluster_focus
from ..models import Direction, EdgeState, SizeVariant, Status, TopicNode
from ..render import to_dot, to_svg, wrap_html
from ..workspace import Workspace


@dataclass
class LayoutDocument:
    """Everything produced by one layout run."""

    direction: Direction
    size_variant: SizeVariant
    nodes: list[TopicNode]
    result: LayoutResult
    statuses: dict[str, Status]
    edge_states: dict[tuple[str, str], EdgeState] = field(default_factory=dict)
    clusters: list[ClusterVisualization] = field(default_factory=list)

    def to_dict(self) -> dict:
        payload = self.result.to_dict()
        for edge in payload["edges"]:
            state = self.edge_states.get((edge["source"], edge["target"]), EdgeState.DEFAULT)
            edge["state"] = state.value
        for node in payload["nodes"]:
            node["status"] = self.statuses[node["id"]].value
            node["depth"] = self.result.depths.get(node["id"], 0)
        payload["direction"] = self.direction.value
        payload["sizeVariant"] = self.size_variant.value
        payload["clusters"] = [
            {
                "id": c.cluster_id,
                "style": c.style.value,
                "hullPath": c.hull_path,
                "bounds": c.bounds.to_dict(),
                "label": {"x": c.label.x, "y": c.label.y, "position": c.label.position.value},
                "completionPct": c.completion_pct,
                "nodeCount": c.node_count,
            }
            for c in self.clusters
        ]
        if self.result.reversed_edges:
            payload["reversedEdges"] = [{"source": s, "target": t} for s, t in sorted(self.result.reversed_edges)]
        return payload


def build_layout(
    ws: Workspace,
    *,
    direction: Direction | None = None,
    size_variant: SizeVariant | None = None,
    focus_cluster: str | None = None,
    highlight: str | None = None,
) -> LayoutDocument:
    """Run the layout and geometry engines with the workspace configuration."""
    cfg = ws.config
    direction = Direction(direction or cfg.direction)
    all_nodes = ws.nodes
    state = ws.load_progress().state
    statuses = ws.statuses(state)

    if focus_cluster:
        size_variant = SizeVariant(size_variant or SizeVariant.EXPANDED)
        options = cfg.layout_options(focused_cluster=focus_cluster)
        result = layout_cluster_focus(all_nodes, focus_cluster, direction, size_variant, options)
        kept = {p.id for p in result.nodes}
        nodes = [n for n in all_nodes if n.id in kept]
    else:
        size_variant = SizeVariant(size_variant or cfg.size_variant)
        nodes = all_nodes
        result = layout(nodes, direction=direction, size_variant=size_variant, options=cfg.layout_options())

    focus_deps: list[str] = []
    focus_dependents: list[str] = []
    if highlight:
        focus_deps, focus_dependents = TopicGraph.from_nodes(all_nodes).subgraph_for_node(highlight)
    edge_states = classify_edges(
        result.edges,
        statuses,
        focus=highlight,
        focus_deps=focus_deps,
        focus_dependents=focus_dependents,
    )

    positions = result.positions()
    clusters: list[ClusterVisualization] = []
    for cid in sorted({n.cluster for n in nodes}):
        vis = cluster_visualization(
            cid,
            nodes,
            positions,
            cfg.cluster_style,
            state.completed,
            zoom=cfg.zoom,
            label_position=cfg.label_position,
            radius=cfg.radius,
            padding=cfg.padding,
        )
        if vis is not None:
            clusters.append(vis)

    return LayoutDocument(
        direction=direction,
        size_variant=size_variant,
        nodes=nodes,
        result=result,
        statuses={n.id: statuses[n.id] for n in nodes},
        edge_states=edge_states,
        clusters=clusters,
    )


def render_document(doc: LayoutDocument, *, fmt: str, title: str) -> str:
    if fmt == "dot":
        return to_dot(doc.nodes, doc.statuses, title=title, direction=doc.direction)
    if fmt in ("svg", "html"):
        svg = to_svg(
            doc.result,
            doc.nodes,
            doc.statuses,
            title=title,
            direction=doc.direction,
            clusters=doc.clusters,
            edge_states=doc.edge_states,
        )
        return wrap_html(svg, title=title) if fmt == "html" else svg
    return json.dumps(doc.to_dict(), indent=2) + "\n"


def run_layout(
    ws: Workspace,
    *,
    direction: str | None = None,
    size_variant: str | None = None,
    focus_cluster: str | None = None,
    highlight: str | None = None,
    fmt: str = "json",
    out: Path | None = None,
) -> int:
    """Lay out the tree and write it as JSON, SVG, HTML or DOT."""
    console = Console(stderr=True)

    if focus_cluster and focus_cluster not in {n.cluster for n in ws.nodes}:
        console.print(f"Unknown cluster: {focus_cluster}", style="red")
        return 1
    if highlight and highlight not in {n.id for n in ws.nodes}:
        console.print(f"Unknown topic: {highlight}", style="red")
        return 1

    doc = build_layout(
        ws,
        direction=Direction(direction) if direction else None,
        size_variant=SizeVariant(size_variant) if size_variant else None,
        focus_cluster=focus_cluster,
        highlight=highlight,
    )
    title = f"Tech tree: {focus_cluster}" if focus_cluster else "Tech tree"
    text = render_document(doc, fmt=fmt, title=title)

    if doc.result.reversed_edges:
        console.print(
            f"Broke {len(doc.result.reversed_edges)} cyclic edge(s) to lay out the tree",
            style="yellow",
        )

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote layout to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")
    return 0
