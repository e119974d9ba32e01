"""Layered layout of topics, depth alignment and cluster focus."""

from .align import align_depth_rows, compute_cluster_depths, compute_node_depths
from .focus import focus_subset, layout_cluster_focus
from .layered import LayoutOptions, LayoutResult, dependency_edges, layout

__all__ = [
    "LayoutOptions",
    "LayoutResult",
    "align_depth_rows",
    "compute_cluster_depths",
    "compute_node_depths",
    "dependency_edges",
    "focus_subset",
    "layout",
    "layout_cluster_focus",
]
