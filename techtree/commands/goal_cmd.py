"""Goal commands - what stands between the learner and a topic."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..graph import find_path, goal_progress
from ..workspace import Workspace


def run_goal(ws: Workspace, goal_id: str, *, fmt: str = "rich") -> int:
    """Show the predecessor set of a goal split into done and remaining."""
    err = Console(stderr=True)
    nodes = ws.nodes
    if goal_id not in {n.id for n in nodes}:
        err.print(f"Unknown topic: {goal_id}", style="red")
        return 1

    state = ws.load_progress().state
    progress = goal_progress(
        nodes,
        goal_id,
        state.completed,
        deps_threshold=ws.config.deps_threshold,
        cluster_threshold=ws.config.cluster_unlock_threshold,
    )
    order = [n.id for n in nodes if n.id in progress.required]

    if fmt == "json":
        payload = {
            "goal": goal_id,
            "pct": progress.pct,
            "required": order,
            "done": [nid for nid in order if nid in progress.done],
            "remaining": [nid for nid in order if nid in progress.remaining],
            "next": progress.next_available,
        }
        print(json.dumps(payload, indent=2))
        return 0

    console = Console()
    console.print(f"[bold]Goal[/bold] {goal_id}: {len(progress.done)}/{len(progress.required)} ({progress.pct}%)")
    t = Table(show_header=True, header_style="bold")
    t.add_column("Topic", no_wrap=True)
    t.add_column("State")
    for nid in order:
        if nid in progress.done:
            t.add_row(nid, "[green]done[/green]")
        elif nid in progress.next_available:
            t.add_row(nid, "[cyan]next[/cyan]")
        else:
            t.add_row(nid, "[dim]remaining[/dim]")
    console.print(t)
    return 0


def run_path(ws: Workspace, from_id: str, to_id: str) -> int:
    """Print the shortest dependency route between two topics."""
    path = find_path(ws.nodes, from_id, to_id)
    if not path:
        Console(stderr=True).print(f"No path from {from_id} to {to_id}", style="yellow")
        return 1
    print(" -> ".join(path))
    return 0
