"""JSON import/export for topic panels and progress state.

Parse failures are never swallowed: node imports raise
``TopicValidationError`` naming the offending field, and progress loads return
a ``LoadResult`` that separates "nothing stored yet" from "stored but corrupt".
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from .errors import ProgressDecodeError, TopicValidationError
from .models import ProgressState, TopicLink, TopicNode

PANEL_VERSION = 1


def export_panel(nodes: list[TopicNode]) -> str:
    payload = {"version": PANEL_VERSION, "nodes": [n.to_dict() for n in nodes]}
    return json.dumps(payload, indent=2)


def import_panel(text: str) -> list[TopicNode]:
    """Parse an exported panel back into topics."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise TopicValidationError(f"invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(parsed, dict):
        raise TopicValidationError("expected a JSON object with a 'nodes' list")
    version = parsed.get("version", PANEL_VERSION)
    if version != PANEL_VERSION:
        raise TopicValidationError(f"unsupported version {version!r}", field="version")
    raw_nodes = parsed.get("nodes", [])
    if not isinstance(raw_nodes, list):
        raise TopicValidationError("must be a list", field="nodes")

    return [node_from_dict(raw, index=i) for i, raw in enumerate(raw_nodes)]


def _require_str(raw: dict, key: str, index: int | None) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise TopicValidationError("required non-empty string", field=key, index=index)
    return value


def node_from_dict(raw: Any, *, index: int | None = None) -> TopicNode:
    """Validate one TopicNode-shaped mapping."""
    if not isinstance(raw, dict):
        raise TopicValidationError("topic must be an object", index=index)

    node_id = _require_str(raw, "id", index)
    label = _require_str(raw, "label", index)
    cluster = _require_str(raw, "cluster", index)

    deps = raw.get("deps")
    if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
        raise TopicValidationError("must be a list of topic ids", field="deps", index=index)

    xp = raw.get("xp", 0)
    if isinstance(xp, bool) or not isinstance(xp, (int, float)) or xp < 0:
        raise TopicValidationError("must be a non-negative number", field="xp", index=index)

    links = []
    for raw_link in raw.get("links") or []:
        if isinstance(raw_link, str):
            links.append(TopicLink(label=raw_link, url=raw_link))
            continue
        if not isinstance(raw_link, dict) or not isinstance(raw_link.get("url"), str):
            raise TopicValidationError("each link needs a 'url' string", field="links", index=index)
        links.append(TopicLink(label=str(raw_link.get("label") or raw_link["url"]), url=raw_link["url"]))

    return TopicNode(id=node_id, label=label, cluster=cluster, deps=tuple(deps), xp=int(xp), links=tuple(links))


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoadResult:
    """Outcome of decoding stored progress."""

    kind: Literal["ok", "empty", "corrupt"]
    state: ProgressState
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == "ok"


def progress_to_dict(state: ProgressState) -> dict[str, Any]:
    return {
        "completed": dict(state.completed),
        "reviewed": dict(state.reviewed),
        "notes": dict(state.notes),
        "xp": state.xp,
        "level": state.level,
        "streakDays": state.streak_days,
        "lastActiveISO": state.last_active_iso,
    }


def dump_progress(state: ProgressState) -> str:
    return json.dumps(progress_to_dict(state), indent=2, sort_keys=True) + "\n"


def _bool_map(data: dict, key: str) -> dict[str, bool]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ProgressDecodeError(f"'{key}' must be an object")
    return {str(k): bool(v) for k, v in value.items()}


def parse_progress(text: str) -> ProgressState:
    """Decode progress JSON; ``level`` is recomputed from ``xp``."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProgressDecodeError(f"invalid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(data, dict):
        raise ProgressDecodeError("progress must be a JSON object")

    notes = data.get("notes") or {}
    if not isinstance(notes, dict):
        raise ProgressDecodeError("'notes' must be an object")

    xp = data.get("xp", 0)
    streak = data.get("streakDays", 0) or 0
    if not isinstance(xp, (int, float)) or not isinstance(streak, (int, float)):
        raise ProgressDecodeError("'xp' and 'streakDays' must be numbers")

    last_active = data.get("lastActiveISO")
    if last_active:
        try:
            datetime.fromisoformat(last_active)
        except (TypeError, ValueError) as e:
            raise ProgressDecodeError(f"'lastActiveISO' must be an ISO date, got {last_active!r}") from e
    return ProgressState(
        completed=_bool_map(data, "completed"),
        reviewed=_bool_map(data, "reviewed"),
        notes={str(k): str(v) for k, v in notes.items()},
        xp=max(0, int(xp)),
        streak_days=int(streak),
        last_active_iso=last_active or None,
    )


def load_progress_text(text: str | None) -> LoadResult:
    if text is None or not text.strip():
        return LoadResult(kind="empty", state=ProgressState())
    try:
        return LoadResult(kind="ok", state=parse_progress(text))
    except ProgressDecodeError as e:
        return LoadResult(kind="corrupt", state=ProgressState(), error=str(e))
