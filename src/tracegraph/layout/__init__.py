"""Layout engines and public API."""

from __future__ import annotations

from tracegraph.layout.cluster import ClusterLayout, build_cluster_adjacency, cluster_layout
from tracegraph.layout.engine import ALGORITHMS, LayoutEngine, compute_layout, create_engine
from tracegraph.layout.placement import (
    angular_retry,
    angular_then_radial_retry,
    place_with_conflict_avoidance,
)
from tracegraph.layout.refine import HybridRefiner, refine_positions
from tracegraph.layout.spatial import GridEntry, SpatialGrid
from tracegraph.layout.tree import Hierarchy, TreeLayout, build_hierarchy, tree_layout
from tracegraph.layout.types import (
    SYNTHETIC_ROOT_ID,
    Bounds,
    ClusterLayoutResult,
    Position,
    RefinementResult,
    TreeLayoutResult,
)

__all__ = [
    "ALGORITHMS",
    "SYNTHETIC_ROOT_ID",
    "Bounds",
    "ClusterLayout",
    "ClusterLayoutResult",
    "GridEntry",
    "Hierarchy",
    "HybridRefiner",
    "LayoutEngine",
    "Position",
    "RefinementResult",
    "SpatialGrid",
    "TreeLayout",
    "TreeLayoutResult",
    "angular_retry",
    "angular_then_radial_retry",
    "build_cluster_adjacency",
    "build_hierarchy",
    "cluster_layout",
    "compute_layout",
    "create_engine",
    "place_with_conflict_avoidance",
    "refine_positions",
    "tree_layout",
]
