"""Export/import commands - node panel round-trip."""

from __future__ import annotations

from pathlib import Path

import yaml
from rich.console import Console
from rich.table import Table

from ..graph import TopicGraph
from ..io import PANEL_VERSION, export_panel, import_panel
from ..models import TopicNode
from ..workspace import Workspace


def run_export(ws: Workspace, *, out: Path | None = None) -> int:
    """Write the current topics as a versioned JSON panel."""
    text = export_panel(ws.nodes) + "\n"
    if out:
        out.write_text(text, encoding="utf-8")
        Console(stderr=True).print(f"Exported {len(ws.nodes)} topics to {out}", style="green")
    else:
        print(text, end="")
    return 0


def dump_topics(nodes: list[TopicNode], path: Path) -> None:
    """Write topics in the format implied by the file suffix."""
    if path.suffix.lower() == ".json":
        path.write_text(export_panel(nodes) + "\n", encoding="utf-8")
        return
    payload = {"version": PANEL_VERSION, "nodes": [n.to_dict() for n in nodes]}
    path.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8")


def run_import(ws: Workspace, source: Path, *, out: Path | None = None, dry_run: bool = False) -> int:
    """Validate an exported panel and replace the topics file with it."""
    console = Console(stderr=True)
    nodes = import_panel(source.read_text(encoding="utf-8"))
    graph = TopicGraph.from_nodes(nodes)

    t = Table(title=f"Imported {len(nodes)} topics", show_header=True, header_style="bold")
    t.add_column("Cluster", style="cyan")
    t.add_column("Topics", justify="right")
    for cluster, members in sorted(graph.by_cluster().items()):
        t.add_row(cluster, str(len(members)))
    console.print(t)

    if graph.missing:
        for nid, deps in sorted(graph.missing.items()):
            console.print(f"{nid} depends on unknown topic(s): {', '.join(sorted(deps))}", style="yellow")

    if dry_run:
        return 0

    target = out or ws.topics_path
    if target.is_dir():
        console.print(f"{target} is a notes directory; pass --out to write a topics file", style="red")
        return 1
    dump_topics(nodes, target)
    console.print(f"Wrote {len(nodes)} topics to {target}", style="green")
    return 0
