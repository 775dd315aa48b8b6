"""Centralized configuration for tracegraph.

Every numeric knob of the engine lives here with its default; callers
override fields individually.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tracegraph.types import Orientation


@dataclass
class TreeLayoutConfig:
    """Configuration for the hierarchical tree layout."""

    orientation: Orientation = Orientation.TopToBottom
    node_spacing: float = 40.0
    level_spacing: float = 80.0
    margin: float = 20.0
    hierarchy_relations: tuple[str, ...] = ("childof", "parentof", "hierarchy")


@dataclass
class ClusterLayoutConfig:
    """Configuration for the cluster/radial layout."""

    vertical_spacing: float = 150.0
    cluster_radius: float = 50.0
    max_layout_width: float = 1800.0
    center_column_x: float = 0.0
    config_column_x: float = -400.0
    config_row_spacing: float = 80.0
    cell_size: float = 80.0


@dataclass
class HybridRefinementConfig:
    """Configuration for the bounded overlap relaxation pass."""

    min_separation: float = 60.0
    max_iterations: int = 3
    damping: float = 0.3
    convergence_ratio: float = 0.1
    cell_size: float = 80.0
    padding: float = 10.0
    default_radius: float = 25.0


@dataclass
class EngineConfig:
    """Configuration for a full layout run (layout, then optional refinement)."""

    algorithm: str = "cluster"
    refine: bool = True
    tree: TreeLayoutConfig = field(default_factory=TreeLayoutConfig)
    cluster: ClusterLayoutConfig = field(default_factory=ClusterLayoutConfig)
    refinement: HybridRefinementConfig = field(default_factory=HybridRefinementConfig)
