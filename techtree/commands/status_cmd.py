"""Status command - unlock state of every topic and cluster."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..graph import cluster_completion, is_cluster_unlocked
from ..models import Status
from ..progress import streak_bonus_text
from ..workspace import Workspace

STATUS_STYLES = {
    Status.COMPLETED: "green",
    Status.AVAILABLE: "cyan",
    Status.LOCKED: "dim",
}


def build_status_payload(ws: Workspace, *, cluster: str | None = None) -> dict:
    state = ws.load_progress().state
    nodes = ws.nodes
    statuses = ws.statuses(state)

    by_cluster: dict[str, list[str]] = {}
    for n in nodes:
        by_cluster.setdefault(n.cluster, []).append(n.id)
    progress = cluster_completion(state.completed, by_cluster)

    clusters = []
    for cid in sorted(by_cluster):
        if cluster and cid != cluster:
            continue
        p = progress[cid]
        clusters.append(
            {
                "cluster": cid,
                "unlocked": is_cluster_unlocked(cid, nodes, state.completed, ws.config.cluster_unlock_threshold),
                "done": p.done,
                "total": p.total,
                "pct": p.pct,
            }
        )

    topics = [
        {
            "id": n.id,
            "label": n.label,
            "cluster": n.cluster,
            "status": statuses[n.id].value,
            "xp": n.xp,
            "reviewed": bool(state.reviewed.get(n.id)),
        }
        for n in nodes
        if not cluster or n.cluster == cluster
    ]

    return {
        "xp": state.xp,
        "level": state.level,
        "streak_days": state.streak_days,
        "clusters": clusters,
        "topics": topics,
    }


def _to_markdown(payload: dict) -> str:
    lines = [
        "## Tech tree status",
        "",
        f"- Level: {payload['level']} ({payload['xp']} XP)",
        f"- Streak: {payload['streak_days']} day(s)",
        "",
        "### Clusters",
        "",
        "| Cluster | Unlocked | Done | Total | % |",
        "|---|---|---:|---:|---:|",
    ]
    for c in payload["clusters"]:
        lines.append(f"| `{c['cluster']}` | {'yes' if c['unlocked'] else 'no'} | {c['done']} | {c['total']} | {c['pct']} |")
    lines += ["", "### Topics", "", "| Topic | Cluster | Status | XP |", "|---|---|---|---:|"]
    for t in payload["topics"]:
        lines.append(f"| `{t['id']}` | {t['cluster']} | {t['status']} | {t['xp']} |")
    return "\n".join(lines) + "\n"


def _print_rich(payload: dict, *, console: Console) -> None:
    console.print(f"[bold]Level {payload['level']}[/bold]  {payload['xp']} XP  streak {payload['streak_days']}d")
    bonus = streak_bonus_text(payload["streak_days"])
    if bonus:
        console.print(f"[yellow]{bonus}[/yellow]")
    console.print()

    t = Table(title="Clusters", show_header=True, header_style="bold")
    t.add_column("Cluster", style="cyan", no_wrap=True)
    t.add_column("Unlocked")
    t.add_column("Done", justify="right")
    t.add_column("%", justify="right")
    for c in payload["clusters"]:
        t.add_row(
            c["cluster"],
            "[green]yes[/green]" if c["unlocked"] else "[red]no[/red]",
            f"{c['done']}/{c['total']}",
            str(c["pct"]),
        )
    console.print(t)
    console.print()

    t = Table(title="Topics", show_header=True, header_style="bold")
    t.add_column("Topic", no_wrap=True)
    t.add_column("Label")
    t.add_column("Cluster", style="cyan")
    t.add_column("Status")
    t.add_column("XP", justify="right")
    for row in payload["topics"]:
        status = Status(row["status"])
        t.add_row(
            row["id"],
            row["label"],
            row["cluster"],
            f"[{STATUS_STYLES[status]}]{status.value}[/{STATUS_STYLES[status]}]",
            str(row["xp"]),
        )
    console.print(t)


def run_status(ws: Workspace, *, cluster: str | None = None, fmt: str = "rich") -> int:
    """Print topic statuses and cluster completion."""
    payload = build_status_payload(ws, cluster=cluster)
    if cluster and not payload["clusters"]:
        Console(stderr=True).print(f"Unknown cluster: {cluster}", style="red")
        return 1

    if fmt == "json":
        print(json.dumps(payload, indent=2, sort_keys=True))
    elif fmt == "md":
        print(_to_markdown(payload), end="")
    else:
        _print_rich(payload, console=Console())
    return 0
