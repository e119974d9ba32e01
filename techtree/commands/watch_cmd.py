"""Watch command - re-render the layout whenever the topics change."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..errors import TechTreeError
from ..watcher import DEFAULT_DEBOUNCE_SECONDS, run_watch_loop
from ..workspace import Workspace
from .layout_cmd import build_layout, render_document


def render_to(ws: Workspace, out: Path, *, fmt: str, console: Console) -> bool:
    """Reload topics and write one rendering. Returns False when the topics are invalid."""
    ws.reload()
    try:
        doc = build_layout(ws)
    except (TechTreeError, OSError) as e:
        console.print(f"[red]Not rendered:[/red] {e}")
        return False
    out.write_text(render_document(doc, fmt=fmt, title="Tech tree"), encoding="utf-8")
    timestamp = datetime.now().strftime("%H:%M:%S")
    console.print(f"[dim]{timestamp}[/dim] wrote {out} ({len(doc.nodes)} topics)")
    return True


def run_watch(
    ws: Workspace,
    out: Path,
    *,
    fmt: str = "html",
    debounce: float = DEFAULT_DEBOUNCE_SECONDS,
) -> None:
    """
    Watch the topics source and rewrite ``out`` after each burst of edits.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    console.print(f"[bold]Watching[/bold] {ws.topics_path}")
    console.print(f"  Output: {out} ({fmt})")
    console.print(f"  Debounce: {debounce:.2f}s")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    renders = 0

    def on_change() -> None:
        nonlocal renders
        if render_to(ws, out, fmt=fmt, console=console):
            renders += 1

    on_change()
    run_watch_loop(ws.topics_path, on_change, debounce)
    console.print()
    console.print(f"[bold]Stopped.[/bold] Rendered {renders} time(s).")
