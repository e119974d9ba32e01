"""Topic loading from YAML/JSON files or a directory of Markdown notes."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from .errors import TopicValidationError
from .io import PANEL_VERSION, node_from_dict
from .models import TopicNode

logger = logging.getLogger(__name__)

TOPIC_FILENAMES = ("topics.yml", "topics.yaml", "topics.json")
TOPIC_DIRNAME = "topics"

_HEADING_RE = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


def find_topics(start: Path) -> Path | None:
    """Walk up from ``start`` looking for a topics file or ``topics/`` directory."""
    current = start.resolve()
    for candidate in [current, *current.parents]:
        for name in TOPIC_FILENAMES:
            if (candidate / name).is_file():
                return candidate / name
        if (candidate / TOPIC_DIRNAME).is_dir():
            return candidate / TOPIC_DIRNAME
    return None


def _nodes_from_payload(payload: Any, source: Path) -> list[TopicNode]:
    if isinstance(payload, dict):
        version = payload.get("version", PANEL_VERSION)
        if version != PANEL_VERSION:
            raise TopicValidationError(f"{source}: unsupported version {version!r}", field="version")
        payload = payload.get("nodes")
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise TopicValidationError(f"{source}: expected a list of topics", field="nodes")
    return [node_from_dict(raw, index=i) for i, raw in enumerate(payload)]


def load_topic_file(path: Path) -> list[TopicNode]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise TopicValidationError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})") from e
    else:
        try:
            payload = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise TopicValidationError(f"{path}: invalid YAML ({e})") from e
    return _nodes_from_payload(payload, path)


def label_from_content(content: str) -> str | None:
    match = _HEADING_RE.search(content)
    return match.group(1).strip() if match else None


def infer_cluster_from_path(path: Path, root: Path) -> str | None:
    """Notes in ``topics/<cluster>/note.md`` belong to ``<cluster>``."""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        return None
    return parts[0] if len(parts) > 1 else None


def load_topic_note(path: Path, root: Path, *, index: int | None = None) -> TopicNode:
    """Load a single markdown note and build its topic from the frontmatter."""
    post = frontmatter.load(path)
    fm = dict(post.metadata)

    deps = fm.get("deps", [])
    if isinstance(deps, str):
        deps = [deps]

    raw = {
        "id": str(fm.get("id") or path.stem),
        "label": fm.get("label") or label_from_content(post.content) or path.stem,
        "cluster": fm.get("cluster") or infer_cluster_from_path(path, root),
        "deps": deps if deps is not None else [],
        "xp": fm.get("xp", 0),
        "links": fm.get("links") or [],
    }
    try:
        return node_from_dict(raw, index=index)
    except TopicValidationError as e:
        raise TopicValidationError(f"{path.name}: {e}") from e


def load_topic_dir(root: Path) -> list[TopicNode]:
    nodes: list[TopicNode] = []
    for path in sorted(root.rglob("*.md")):
        if any(part.startswith(".") for part in path.relative_to(root).parts):
            continue
        try:
            nodes.append(load_topic_note(path, root, index=len(nodes)))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning("skipping unreadable note %s: %s", path, e)
    return nodes


def load_topics(path: Path) -> list[TopicNode]:
    """Load topics from a YAML/JSON file or a directory of Markdown notes."""
    if path.is_dir():
        nodes = load_topic_dir(path)
    elif path.is_file():
        nodes = load_topic_file(path)
    else:
        raise FileNotFoundError(path)
    logger.debug("loaded %d topics from %s", len(nodes), path)
    return nodes
