"""Cluster/radial layout driven by symbol types.

Phases:
  1. Domain split: config/configset nodes go to a column on the left
  2. Parent → children adjacency from childof/parentof edges
  3. Config column stacking
  4. Cluster centres on their type level, spread around the centre column
  5. Satellites fanned out around their resolved centre
  6. Orphans in an overflow row below everything else

Every placement checks for conflicts against all nodes placed so far and
retries within a fixed budget (see ``placement``); residual overlap is
accepted and left to the hybrid refinement pass.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict

from tracegraph.config import ClusterLayoutConfig
from tracegraph.ir.graph import NodeData, TraceGraph
from tracegraph.layout.placement import (
    angular_retry,
    angular_then_radial_retry,
    place_with_conflict_avoidance,
    polar,
)
from tracegraph.layout.spatial import SpatialGrid
from tracegraph.layout.types import ClusterLayoutResult, Position
from tracegraph.types import CONFIG_TYPES, SymbolType, type_rank

logger = logging.getLogger(__name__)

# ─── Geometry constants ──────────────────────────────────────────────────────

CENTER_MIN_DISTANCE: float = 50.0
CENTER_RETRY_ATTEMPTS: int = 8
CENTER_RETRY_RADIUS_STEP: float = 25.0

CLUSTER_SPACING_PER_CHILD: float = 40.0
MIN_CLUSTER_SPACING: float = 250.0
MAX_CLUSTER_SPACING: float = 350.0

MIN_BASE_RADIUS: float = 35.0
BASE_RADIUS_PER_CHILD: float = 5.0
SATELLITE_MIN_DISTANCE: float = 45.0
SINGLE_RETRY_ATTEMPTS: int = 8
PAIR_ANGLE: float = 0.3 * math.pi
PAIR_RETRY_ATTEMPTS: int = 12
RING_ANGULAR_ATTEMPTS: int = 8
RING_RETRY_ATTEMPTS: int = 16
RING_RADIUS_STEP: float = 20.0

ORPHAN_SPACING: float = 120.0
ORPHAN_MIN_DISTANCE: float = 60.0
ORPHAN_RETRY_ATTEMPTS: int = 12
ORPHAN_RETRY_RADIUS_STEP: float = 15.0

BELOW: float = math.pi / 2

PARENT_RELATIONS = ("parentof", "childof")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ─── Adjacency ───────────────────────────────────────────────────────────────


def build_cluster_adjacency(graph: TraceGraph) -> tuple[dict[str, list[str]], list[tuple[str, str, str]]]:
    """Parent → children lists from childof/parentof edges, plus the other edges.

    ``parentof`` points parent → child, ``childof`` points child → parent.
    Duplicate links (both directions declared) collapse to one.
    """
    children: dict[str, list[str]] = {node.id: [] for node in graph.nodes()}
    seen: set[tuple[str, str]] = set()
    logical: list[tuple[str, str, str]] = []

    for edge in graph.edges():
        if edge.relation_type == "parentof":
            parent, child = edge.source, edge.target
        elif edge.relation_type == "childof":
            parent, child = edge.target, edge.source
        else:
            logical.append((edge.source, edge.target, edge.relation_type))
            continue
        if parent == child or (parent, child) in seen:
            continue
        seen.add((parent, child))
        children[parent].append(child)

    return children, logical


# ─── Layout ──────────────────────────────────────────────────────────────────


class ClusterLayout:
    """Type-levelled cluster layout with radial satellites."""

    def __init__(self, config: ClusterLayoutConfig | None = None) -> None:
        self.config = config or ClusterLayoutConfig()

    def layout(self, graph: TraceGraph) -> ClusterLayoutResult:
        children, logical = build_cluster_adjacency(graph)
        occupied = SpatialGrid(cell_size=self.config.cell_size)
        positions: dict[str, Position] = {}

        config_nodes = [n for n in graph.nodes() if n.symbol_type in CONFIG_TYPES]
        main_nodes = [n for n in graph.nodes() if n.symbol_type not in CONFIG_TYPES]

        self._place_config_column(config_nodes, positions, occupied)
        centers = self._place_centers(main_nodes, children, positions, occupied)
        for center_id in centers:
            self._place_satellites(center_id, children[center_id], positions, occupied)
        orphans = self._place_orphans([n.id for n in graph.nodes() if n.id not in positions], positions, occupied)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Cluster layout: %d config, %d centres, %d orphans, %d logical edges",
                len(config_nodes),
                len(centers),
                len(orphans),
                len(logical),
            )

        ordered = {node.id: positions[node.id] for node in graph.nodes()}
        return ClusterLayoutResult(positions=ordered, centers=centers, orphans=orphans, logical_edges=logical)

    def _commit(self, node_id: str, pos: Position, positions: dict[str, Position], occupied: SpatialGrid) -> None:
        positions[node_id] = pos
        occupied.insert(node_id, pos.x, pos.y)

    def _place_config_column(
        self,
        config_nodes: list[NodeData],
        positions: dict[str, Position],
        occupied: SpatialGrid,
    ) -> None:
        headers = [n for n in config_nodes if n.symbol_type is SymbolType.CONFIGSET]
        items = [n for n in config_nodes if n.symbol_type is not SymbolType.CONFIGSET]
        for row, node in enumerate(headers + items):
            pos = Position(self.config.config_column_x, row * self.config.config_row_spacing)
            self._commit(node.id, pos, positions, occupied)

    def _place_centers(
        self,
        main_nodes: list[NodeData],
        children: dict[str, list[str]],
        positions: dict[str, Position],
        occupied: SpatialGrid,
    ) -> list[str]:
        by_level: dict[int, list[NodeData]] = defaultdict(list)
        for node in main_nodes:
            if children[node.id]:
                by_level[type_rank(node.symbol_type)].append(node)

        limit = self.config.max_layout_width / 3
        placed: list[str] = []
        for level in sorted(by_level):
            # Types sharing the trailing level are grouped by type name.
            level_nodes = sorted(by_level[level], key=lambda n: n.symbol_type.value)
            midpoint = (len(level_nodes) - 1) / 2
            y = level * self.config.vertical_spacing
            for index, node in enumerate(level_nodes):
                spacing = _clamp(
                    len(children[node.id]) * CLUSTER_SPACING_PER_CHILD,
                    MIN_CLUSTER_SPACING,
                    MAX_CLUSTER_SPACING,
                )
                offset = _clamp((index - midpoint) * spacing, -limit, limit)
                candidate = Position(self.config.center_column_x + offset, y)
                pos = place_with_conflict_avoidance(
                    candidate,
                    occupied,
                    angular_retry(candidate, CENTER_MIN_DISTANCE, 0.0, math.pi / 4, CENTER_RETRY_RADIUS_STEP),
                    CENTER_RETRY_ATTEMPTS,
                    CENTER_MIN_DISTANCE,
                )
                self._commit(node.id, pos, positions, occupied)
                placed.append(node.id)
        return placed

    def _place_satellites(
        self,
        center_id: str,
        child_ids: list[str],
        positions: dict[str, Position],
        occupied: SpatialGrid,
    ) -> None:
        satellites = [c for c in child_ids if c not in positions]
        if not satellites:
            return
        center = positions[center_id]
        count = len(satellites)
        radius = min(self.config.cluster_radius, MIN_BASE_RADIUS + (count - 1) * BASE_RADIUS_PER_CHILD)
        own = frozenset({center_id})

        if count == 1:
            candidate = polar(center, radius, BELOW)
            pos = place_with_conflict_avoidance(
                candidate,
                occupied,
                angular_retry(center, radius, BELOW, math.pi / 4),
                SINGLE_RETRY_ATTEMPTS,
                SATELLITE_MIN_DISTANCE,
                ignore=own,
            )
            self._commit(satellites[0], pos, positions, occupied)
            return

        if count == 2:
            for child_id, side in zip(satellites, (1.0, -1.0)):
                angle = BELOW + side * PAIR_ANGLE
                pos = place_with_conflict_avoidance(
                    polar(center, radius, angle),
                    occupied,
                    angular_retry(center, radius, angle, side * math.pi / 12),
                    PAIR_RETRY_ATTEMPTS,
                    SATELLITE_MIN_DISTANCE,
                    ignore=own,
                )
                self._commit(child_id, pos, positions, occupied)
            return

        step = 2 * math.pi / count
        for index, child_id in enumerate(satellites):
            angle = BELOW + index * step
            ring = radius * (1 + (index % 3) * 0.1)
            pos = place_with_conflict_avoidance(
                polar(center, ring, angle),
                occupied,
                angular_then_radial_retry(center, ring, angle, math.pi / 8, RING_ANGULAR_ATTEMPTS, RING_RADIUS_STEP),
                RING_RETRY_ATTEMPTS,
                SATELLITE_MIN_DISTANCE,
                ignore=own,
            )
            self._commit(child_id, pos, positions, occupied)

    def _place_orphans(
        self,
        orphan_ids: list[str],
        positions: dict[str, Position],
        occupied: SpatialGrid,
    ) -> list[str]:
        if not orphan_ids:
            return []
        lowest = max((p.y for p in positions.values()), default=-self.config.vertical_spacing)
        y = lowest + self.config.vertical_spacing
        midpoint = (len(orphan_ids) - 1) / 2
        for index, node_id in enumerate(orphan_ids):
            candidate = Position(self.config.center_column_x + (index - midpoint) * ORPHAN_SPACING, y)
            pos = place_with_conflict_avoidance(
                candidate,
                occupied,
                angular_retry(candidate, ORPHAN_MIN_DISTANCE, 0.0, math.pi / 6, ORPHAN_RETRY_RADIUS_STEP),
                ORPHAN_RETRY_ATTEMPTS,
                ORPHAN_MIN_DISTANCE,
            )
            self._commit(node_id, pos, positions, occupied)
        return list(orphan_ids)


def cluster_layout(graph: TraceGraph, config: ClusterLayoutConfig | None = None) -> dict[str, Position]:
    """Lay out ``graph`` as type-levelled clusters; returns node id → position."""
    return ClusterLayout(config).layout(graph).positions
