"""Exception types raised by the topic graph engine."""

from __future__ import annotations


class TechTreeError(Exception):
    """Base class for all engine failures. Always local and recoverable."""


class TopicValidationError(TechTreeError):
    """A topic payload has the wrong shape."""

    def __init__(self, message: str, *, field: str | None = None, index: int | None = None):
        self.field = field
        self.index = index
        loc = []
        if index is not None:
            loc.append(f"nodes[{index}]")
        if field:
            loc.append(field)
        prefix = ".".join(loc)
        super().__init__(f"{prefix}: {message}" if prefix else message)


class CyclicGraphError(TechTreeError):
    """The dependency relation contains at least one cycle."""

    def __init__(self, cycles: list[list[str]]):
        self.cycles = [list(c) for c in cycles]
        rendered = "; ".join(" -> ".join(c) for c in self.cycles) or "unknown"
        super().__init__(f"dependency cycle detected: {rendered}")

    @property
    def members(self) -> set[str]:
        return {node for cycle in self.cycles for node in cycle}


class ConfigError(TechTreeError):
    """Invalid engine configuration value."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


class ProgressDecodeError(TechTreeError):
    """Stored progress exists but cannot be decoded."""
