"""
File system watcher for topic sources.

Edits to a topics file (or any note in a topics directory) are collapsed into
a single ``on_change`` call once the source has been quiet for the debounce
window, so an editor's save cycle triggers one re-render.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .scheduling import Debouncer

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class TopicsEventHandler(FileSystemEventHandler):
    """
    Debounces file system events touching the watched topics.

    - Watching a file: only events for that file count.
    - Watching a directory: any non-hidden ``.md``, ``.yml``, ``.yaml`` or
      ``.json`` file counts.
    """

    RELEVANT_EXTENSIONS = {".md", ".yml", ".yaml", ".json"}

    def __init__(self, topics_path: Path, on_change: Callable[[], None], debounce: float = DEFAULT_DEBOUNCE_SECONDS):
        super().__init__()
        self.topics_path = topics_path.resolve()
        self.debouncer = Debouncer(debounce, on_change)

    def _is_relevant(self, path: str) -> bool:
        p = Path(path).resolve()
        if self.topics_path.is_file() or not self.topics_path.exists():
            return p == self.topics_path
        try:
            rel = p.relative_to(self.topics_path)
        except ValueError:
            return False
        if any(part.startswith(".") for part in rel.parts):
            return False
        return p.suffix.lower() in self.RELEVANT_EXTENSIONS

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "") or ""]
        if any(p and self._is_relevant(str(p)) for p in paths):
            logger.debug("%s %s", event.event_type, event.src_path)
            self.debouncer.trigger()

    def flush_pending(self) -> bool:
        return self.debouncer.flush()


def watch_topics(
    path: Path,
    on_change: Callable[[], None],
    debounce: float = DEFAULT_DEBOUNCE_SECONDS,
) -> tuple[Observer, TopicsEventHandler]:
    """
    Start watching a topics file or directory.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = TopicsEventHandler(path, on_change, debounce)
    # Editors often replace files, so watch the parent of a single file.
    target = path if path.is_dir() else path.resolve().parent

    observer = Observer()
    observer.schedule(handler, str(target), recursive=path.is_dir())
    observer.start()
    return observer, handler


def run_watch_loop(path: Path, on_change: Callable[[], None], debounce: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
    """Block until interrupted, re-running ``on_change`` after each burst of edits."""
    observer, handler = watch_topics(path, on_change, debounce)
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        handler.debouncer.cancel()
        observer.stop()

    observer.join()
