"""Data models for topics, progress and layout output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    """Derived unlock state of a topic."""

    LOCKED = "locked"
    AVAILABLE = "available"
    COMPLETED = "completed"


class Direction(str, Enum):
    """Rank direction of the layered layout."""

    TB = "TB"  # ranks advance downwards
    LR = "LR"  # ranks advance to the right


class SizeVariant(str, Enum):
    """Box size used for each topic in the layout."""

    COMPACT = "compact"
    STANDARD = "standard"
    EXPANDED = "expanded"

    @property
    def dimensions(self) -> tuple[float, float]:
        """(width, height) of a topic box."""
        return _SIZE_DIMENSIONS[self]


_SIZE_DIMENSIONS: dict[SizeVariant, tuple[float, float]] = {
    SizeVariant.COMPACT: (200.0, 120.0),
    SizeVariant.STANDARD: (280.0, 160.0),
    SizeVariant.EXPANDED: (320.0, 180.0),
}


class LabelPosition(str, Enum):
    """Where a cluster label is anchored relative to the cluster bounds."""

    TOP_CENTER = "top-center"
    TOP_LEFT = "top-left"
    FLOATING = "floating"
    PINNED_SIDE = "pinned-side"


class ClusterStyle(str, Enum):
    """How a cluster region is drawn; decides the padding around its nodes."""

    TRANSLUCENT_BACKGROUND = "translucent-background"
    CONVEX_HULL_POLYGON = "convex-hull-polygon"
    BLURRED_BUBBLE = "blurred-bubble"
    LABEL_POSITIONING = "label-positioning"
    NONE = "none"

    @property
    def padding(self) -> float:
        return _STYLE_PADDING[self]


_STYLE_PADDING: dict[ClusterStyle, float] = {
    ClusterStyle.TRANSLUCENT_BACKGROUND: 32.0,
    ClusterStyle.CONVEX_HULL_POLYGON: 36.0,
    ClusterStyle.BLURRED_BUBBLE: 48.0,
    ClusterStyle.LABEL_POSITIONING: 16.0,
    ClusterStyle.NONE: 0.0,
}


class EdgeState(str, Enum):
    """Derived highlight state of a dependency edge."""

    DEFAULT = "default"
    PARTIAL = "partial"
    COMPLETED = "completed"
    FOCUS_DEPENDENCY = "focus-dependency"
    FOCUS_DEPENDENT = "focus-dependent"
    GOAL_PATH = "goal-path"


@dataclass(frozen=True)
class TopicLink:
    label: str
    url: str


@dataclass(frozen=True)
class TopicNode:
    """A single learnable unit of the tech tree."""

    id: str
    label: str
    cluster: str
    deps: tuple[str, ...] = ()
    xp: int = 0
    links: tuple[TopicLink, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the node hashable.
        object.__setattr__(self, "deps", tuple(self.deps))
        object.__setattr__(self, "links", tuple(self.links))

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "label": self.label,
            "cluster": self.cluster,
            "deps": list(self.deps),
            "xp": self.xp,
        }
        if self.links:
            d["links"] = [{"label": link.label, "url": link.url} for link in self.links]
        return d


@dataclass(frozen=True)
class ProgressState:
    """Per-session learner progress. Transitions return new instances."""

    completed: dict[str, bool] = field(default_factory=dict)
    reviewed: dict[str, bool] = field(default_factory=dict)
    notes: dict[str, str] = field(default_factory=dict)
    xp: int = 0
    streak_days: int = 0
    last_active_iso: str | None = None

    @property
    def level(self) -> int:
        return 1 + self.xp // 100


@dataclass(frozen=True)
class PositionedNode:
    """A laid-out topic box; (x, y) is the top-left corner."""

    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict:
        return {"id": self.id, "x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ClusterBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    center_x: float
    center_y: float
    width: float
    height: float

    @classmethod
    def empty(cls) -> "ClusterBounds":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_extent(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "ClusterBounds":
        return cls(
            min_x=min_x,
            max_x=max_x,
            min_y=min_y,
            max_y=max_y,
            center_x=(min_x + max_x) / 2,
            center_y=(min_y + max_y) / 2,
            width=max_x - min_x,
            height=max_y - min_y,
        )

    def to_dict(self) -> dict:
        return {
            "minX": self.min_x,
            "maxX": self.max_x,
            "minY": self.min_y,
            "maxY": self.max_y,
            "centerX": self.center_x,
            "centerY": self.center_y,
            "width": self.width,
            "height": self.height,
        }
