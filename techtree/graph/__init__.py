"""Topic graph, unlock status, goal paths and filters."""

from .topics import TopicGraph
from .unlock import (
    ClusterProgress,
    classify_edges,
    cluster_completion,
    compute_status,
    compute_statuses,
    is_cluster_unlocked,
    is_node_unlocked_by_threshold,
    prerequisite_clusters,
)
from .paths import GoalProgress, find_path, goal_progress, predecessor_set
from .filters import FilterOptions, visible_nodes

__all__ = [
    "TopicGraph",
    "ClusterProgress",
    "classify_edges",
    "cluster_completion",
    "compute_status",
    "compute_statuses",
    "is_cluster_unlocked",
    "is_node_unlocked_by_threshold",
    "prerequisite_clusters",
    "GoalProgress",
    "find_path",
    "goal_progress",
    "predecessor_set",
    "FilterOptions",
    "visible_nodes",
]
