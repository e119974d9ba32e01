"""Cycles command - report dependency cycles."""

from __future__ import annotations

import json

from rich.console import Console

from ..workspace import Workspace


def run_cycles(ws: Workspace, *, fmt: str = "rich") -> int:
    """List every cycle; exit code 1 when any exist."""
    graph = ws.graph()
    components = graph.find_cycles()
    cycles = graph.find_simple_cycles()
    missing = {k: sorted(v) for k, v in sorted(graph.missing.items())}

    if fmt == "json":
        print(json.dumps({"components": components, "cycles": cycles, "missing": missing}, indent=2))
        return 1 if components else 0

    console = Console()
    if not components:
        console.print("[green]No dependency cycles.[/green]")
    else:
        console.print(f"[bold red]{len(components)} cyclic component(s)[/bold red] (A -> B: A depends on B)")
        for cycle in cycles:
            console.print("  " + " -> ".join(cycle))

    for nid, deps in missing.items():
        console.print(f"[yellow]{nid}[/yellow] depends on unknown topic(s): {', '.join(deps)}")
    return 1 if components else 0
