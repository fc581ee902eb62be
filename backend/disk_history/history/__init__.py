"""History queries and point-in-time reconstruction."""

from .dispatcher import HistoryService
from .leaf import project_leaf_history
from .nodes import NodeService
from .reconstruction import iter_working_sets, project_as_of, reconstruct_subtree
from .sizes import aggregate_size, build_children_index

__all__ = [
    "HistoryService",
    "NodeService",
    "project_leaf_history",
    "reconstruct_subtree",
    "iter_working_sets",
    "project_as_of",
    "aggregate_size",
    "build_children_index",
]
