"""Layout engine registry and convenience functions."""

from __future__ import annotations

import logging
from typing import Protocol

from tracegraph.config import EngineConfig
from tracegraph.ir.graph import TraceGraph
from tracegraph.layout.cluster import ClusterLayout
from tracegraph.layout.refine import HybridRefiner
from tracegraph.layout.tree import TreeLayout
from tracegraph.layout.types import Position, RadiusFn

logger = logging.getLogger(__name__)


class LayoutEngine(Protocol):
    """Protocol that all layout engines implement."""

    def layout(self, graph: TraceGraph): ...


ALGORITHMS = ("tree", "cluster")


def create_engine(config: EngineConfig) -> LayoutEngine:
    if config.algorithm == "tree":
        return TreeLayout(config.tree)
    if config.algorithm == "cluster":
        return ClusterLayout(config.cluster)
    raise ValueError(f"Unknown layout algorithm '{config.algorithm}'; use {' or '.join(ALGORITHMS)}")


def compute_layout(
    graph: TraceGraph,
    config: EngineConfig | None = None,
    radius_of: RadiusFn | None = None,
) -> dict[str, Position]:
    """Run the configured layout, then the hybrid refinement when enabled."""
    cfg = config or EngineConfig()
    positions = create_engine(cfg).layout(graph).positions
    if not cfg.refine:
        return positions
    result = HybridRefiner(cfg.refinement).refine(positions, radius_of)
    logger.debug("Refinement ran %d iterations, overlaps %s", result.iterations, result.overlap_counts)
    return result.positions
