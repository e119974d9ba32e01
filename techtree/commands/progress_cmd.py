"""Progress commands - complete, review and annotate topics."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console

from ..models import Status
from ..progress import save_note, streak_bonus_text, toggle_completion, toggle_reviewed
from ..workspace import Workspace


def _unknown(console: Console, node_id: str) -> int:
    console.print(f"Unknown topic: {node_id}", style="red")
    return 1


def run_complete(ws: Workspace, node_id: str, *, now: datetime | None = None) -> int:
    """Toggle completion of a topic. Locked topics are refused."""
    console = Console(stderr=True)
    node = ws.graph().get(node_id)
    if node is None:
        return _unknown(console, node_id)

    state = ws.progress_for_update()
    status = ws.statuses(state)[node_id]
    if status == Status.LOCKED:
        console.print(f"{node_id} is locked; complete its dependencies first.", style="yellow")
        return 1

    updated = toggle_completion(state, node, status, now)
    ws.save_progress(updated)

    done = updated.completed.get(node_id, False)
    gained = updated.xp - state.xp
    console.print(
        f"{'Completed' if done else 'Reopened'} [bold]{node.label}[/bold] "
        f"({gained:+d} XP, level {updated.level})",
        style="green" if done else "yellow",
    )
    bonus = streak_bonus_text(updated.streak_days)
    if done and bonus:
        console.print(bonus, style="yellow")

    # Report newly unlocked topics.
    after = ws.statuses(updated)
    before = ws.statuses(state)
    unlocked = [nid for nid, s in after.items() if s == Status.AVAILABLE and before.get(nid) == Status.LOCKED]
    if unlocked:
        console.print(f"Unlocked: {', '.join(unlocked)}", style="cyan")
    return 0


def run_review(ws: Workspace, node_id: str) -> int:
    console = Console(stderr=True)
    if node_id not in ws.graph():
        return _unknown(console, node_id)
    updated = toggle_reviewed(ws.progress_for_update(), node_id)
    ws.save_progress(updated)
    flag = "marked for review" if updated.reviewed.get(node_id) else "review cleared"
    console.print(f"{node_id}: {flag}", style="green")
    return 0


def run_note(ws: Workspace, node_id: str, text: str) -> int:
    console = Console(stderr=True)
    if node_id not in ws.graph():
        return _unknown(console, node_id)
    ws.save_progress(save_note(ws.progress_for_update(), node_id, text))
    console.print(f"Saved note for {node_id}", style="green")
    return 0
