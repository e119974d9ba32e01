"""Boundary geometry and label placement for a cluster of positioned topics."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..models import ClusterBounds, ClusterStyle, LabelPosition, PositionedNode, TopicNode
from .hull import Point, circle_path, convex_hull, inflate_hull, rounded_path

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 36.0
DEFAULT_RADIUS = 24.0
LABEL_OFFSET = 24.0
LABEL_LEFT_INSET = 24.0
MIN_ZOOM = 0.3
MAX_ZOOM = 2.0


@dataclass(frozen=True)
class LabelAnchor:
    x: float
    y: float
    position: LabelPosition


@dataclass(frozen=True)
class ClusterBoundary:
    hull_path: str
    bounds: ClusterBounds
    hull: list[Point] = field(default_factory=list)  # inflated outline vertices


@dataclass(frozen=True)
class ClusterVisualization:
    cluster_id: str
    nodes: list[PositionedNode]
    bounds: ClusterBounds
    hull_path: str
    style: ClusterStyle
    label: LabelAnchor
    completion_pct: int

    @property
    def node_count(self) -> int:
        return len(self.nodes)


def _finite_boxes(boxes: Iterable[PositionedNode]) -> list[PositionedNode]:
    valid = []
    for b in boxes:
        if all(math.isfinite(v) for v in (b.x, b.y, b.width, b.height)):
            valid.append(b)
        else:
            logger.debug("skipping box %s with non-finite geometry", getattr(b, "id", "?"))
    return valid


def box_corners(boxes: Iterable[PositionedNode]) -> list[Point]:
    corners: list[Point] = []
    for b in boxes:
        corners.extend(
            [
                (b.x, b.y),
                (b.x + b.width, b.y),
                (b.x + b.width, b.y + b.height),
                (b.x, b.y + b.height),
            ]
        )
    return corners


def cluster_bounds(boxes: Iterable[PositionedNode], padding: float = 0.0) -> ClusterBounds:
    """Bounding box of the boxes grown by ``padding``; zero bounds when empty."""
    boxes = _finite_boxes(boxes)
    if not boxes:
        return ClusterBounds.empty()
    return ClusterBounds.from_extent(
        min(b.x for b in boxes) - padding,
        min(b.y for b in boxes) - padding,
        max(b.x + b.width for b in boxes) + padding,
        max(b.y + b.height for b in boxes) + padding,
    )


def label_anchor(
    bounds: ClusterBounds,
    zoom: float = 1.0,
    position: LabelPosition = LabelPosition.TOP_CENTER,
) -> LabelAnchor:
    """Where to draw a cluster label.

    Zoomed out views get a larger offset, between 24 and 40 units.
    """
    position = LabelPosition(position)
    offset = max(LABEL_OFFSET, 20 / max(zoom, 0.5))

    if position == LabelPosition.TOP_LEFT:
        return LabelAnchor(bounds.min_x + LABEL_LEFT_INSET, bounds.min_y - offset, position)
    if position == LabelPosition.FLOATING:
        return LabelAnchor(bounds.center_x, bounds.center_y - bounds.height / 4, position)
    if position == LabelPosition.PINNED_SIDE:
        return LabelAnchor(bounds.max_x + offset, bounds.center_y, position)
    return LabelAnchor(bounds.center_x, bounds.min_y - offset, LabelPosition.TOP_CENTER)


def cluster_boundary(
    boxes: Iterable[PositionedNode],
    padding: float = DEFAULT_PADDING,
    radius: float = DEFAULT_RADIUS,
) -> ClusterBoundary:
    """Organic outline around a cluster's boxes.

    One box yields a circle around its centre; no usable boxes yield an empty
    path with zero bounds.
    """
    boxes = _finite_boxes(boxes)
    if not boxes:
        return ClusterBoundary(hull_path="", bounds=ClusterBounds.empty())

    bounds = cluster_bounds(boxes, padding)
    if len(boxes) == 1:
        b = boxes[0]
        cx, cy = b.x + b.width / 2, b.y + b.height / 2
        r = max(b.width, b.height) / 2 + padding
        return ClusterBoundary(hull_path=circle_path(cx, cy, r), bounds=bounds)

    hull = convex_hull(box_corners(boxes))
    outline = inflate_hull(hull, padding)
    return ClusterBoundary(hull_path=rounded_path(outline, radius), bounds=bounds, hull=outline)


def zoom_padding_scale(zoom: float) -> float:
    """Padding multiplier: more room when zoomed out, clamped to [0.7, 1.3]."""
    clamped = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
    return max(0.7, min(1.3, 1 / clamped))


def cluster_visualization(
    cluster_id: str,
    nodes: Iterable[TopicNode],
    positions: Mapping[str, PositionedNode],
    style: ClusterStyle,
    completed: Mapping[str, bool],
    zoom: float = 1.0,
    label_position: LabelPosition = LabelPosition.TOP_CENTER,
    radius: float = DEFAULT_RADIUS,
    padding: float | None = None,
) -> ClusterVisualization | None:
    """Everything a renderer needs to draw one cluster region, or None.

    ``padding`` overrides the style's own padding before zoom scaling.
    """
    style = ClusterStyle(style)
    if style == ClusterStyle.NONE:
        return None

    members = [positions[n.id] for n in nodes if n.cluster == cluster_id and n.id in positions]
    members = _finite_boxes(members)
    if not members:
        logger.debug("no positioned topics for cluster %s", cluster_id)
        return None

    base = style.padding if padding is None else padding
    padding = base * zoom_padding_scale(zoom)
    bounds = cluster_bounds(members, padding)
    if bounds.width <= 0 or bounds.height <= 0:
        return None

    done = sum(1 for m in members if completed.get(m.id))
    boundary = cluster_boundary(members, padding, radius)
    return ClusterVisualization(
        cluster_id=cluster_id,
        nodes=members,
        bounds=bounds,
        hull_path=boundary.hull_path,
        style=style,
        label=label_anchor(bounds, max(MIN_ZOOM, min(MAX_ZOOM, zoom)), label_position),
        completion_pct=round(done / len(members) * 100),
    )
