"""Cluster boundary geometry."""

from .hull import circle_path, convex_hull, inflate_hull, polygon_area, rounded_path
from .cluster import (
    ClusterBoundary,
    ClusterVisualization,
    LabelAnchor,
    box_corners,
    cluster_boundary,
    cluster_bounds,
    cluster_visualization,
    label_anchor,
)

__all__ = [
    "circle_path",
    "convex_hull",
    "inflate_hull",
    "polygon_area",
    "rounded_path",
    "ClusterBoundary",
    "ClusterVisualization",
    "LabelAnchor",
    "box_corners",
    "cluster_boundary",
    "cluster_bounds",
    "cluster_visualization",
    "label_anchor",
]
