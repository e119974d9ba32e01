"""Topic source, progress file and config resolved for one CLI invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import CONFIG_FILENAME, EngineConfig, load_config
from .errors import ProgressDecodeError
from .graph import TopicGraph, compute_statuses
from .io import LoadResult, dump_progress, load_progress_text
from .loader import load_topics
from .models import ProgressState, Status, TopicNode

logger = logging.getLogger(__name__)

PROGRESS_DIRNAME = ".techtree"
PROGRESS_FILENAME = "progress.json"


@dataclass
class Workspace:
    topics_path: Path
    progress_path: Path
    config_path: Path

    _nodes: list[TopicNode] | None = field(default=None, repr=False)
    _config: EngineConfig | None = field(default=None, repr=False)

    @classmethod
    def resolve(
        cls,
        topics_path: Path,
        progress_path: Path | None = None,
        config_path: Path | None = None,
    ) -> "Workspace":
        # State lives next to a topics file, or beside (not inside) a notes directory.
        base = topics_path.resolve().parent
        return cls(
            topics_path=topics_path,
            progress_path=progress_path or base / PROGRESS_DIRNAME / PROGRESS_FILENAME,
            config_path=config_path or base / CONFIG_FILENAME,
        )

    @property
    def nodes(self) -> list[TopicNode]:
        if self._nodes is None:
            self._nodes = load_topics(self.topics_path)
        return self._nodes

    @property
    def config(self) -> EngineConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def graph(self) -> TopicGraph:
        return TopicGraph.from_nodes(self.nodes)

    def reload(self) -> None:
        self._nodes = None

    def load_progress(self) -> LoadResult:
        text = self.progress_path.read_text(encoding="utf-8") if self.progress_path.exists() else None
        result = load_progress_text(text)
        if result.kind == "corrupt":
            logger.warning("progress file %s is corrupt: %s", self.progress_path, result.error)
        return result

    def progress_for_update(self) -> ProgressState:
        """Current progress; refuses to continue from a corrupt file so it is not overwritten."""
        result = self.load_progress()
        if result.kind == "corrupt":
            raise ProgressDecodeError(f"{self.progress_path}: {result.error}")
        return result.state

    def save_progress(self, state: ProgressState) -> None:
        self.progress_path.parent.mkdir(parents=True, exist_ok=True)
        self.progress_path.write_text(dump_progress(state), encoding="utf-8")

    def statuses(self, state: ProgressState) -> dict[str, Status]:
        return compute_statuses(
            self.nodes,
            state.completed,
            deps_threshold=self.config.deps_threshold,
            cluster_threshold=self.config.cluster_unlock_threshold,
        )
