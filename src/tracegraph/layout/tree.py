"""Hierarchical tree layout.

Classic post-order tree layout over the hierarchy edges of a trace graph:

  1. Collapse hierarchy edges into a parent → children arena (first parent
     wins, cycle-closing links are ignored)
  2. Root discovery, with a synthetic root over multiple roots
  3. Extent pass (post-order): every subtree reserves its sibling-axis span
  4. Slot pass (pre-order): children blocks are centred inside their parent's span
  5. Centre pass (post-order): leaves sit mid-slot, parents over their
     first and last child

Sibling-axis coordinates are node centres; depth-axis coordinates are the
node's leading edge (top edge top-to-bottom, left edge left-to-right).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import networkx as nx

from tracegraph.config import TreeLayoutConfig
from tracegraph.ir.graph import Size, TraceGraph
from tracegraph.layout.types import SYNTHETIC_ROOT_ID, Bounds, Position, TreeLayoutResult
from tracegraph.types import Orientation

logger = logging.getLogger(__name__)


# ─── Hierarchy Construction ──────────────────────────────────────────────────


@dataclass
class Hierarchy:
    """Arena of tree nodes indexed by id; no back-pointers besides ``parent``."""

    tree: nx.DiGraph
    parent: dict[str, str]
    roots: list[str]


def _unused_id(tree: nx.DiGraph, base: str) -> str:
    candidate = base
    while candidate in tree:
        candidate += "_"
    return candidate


def _is_ancestor(candidate: str, node_id: str, parent: dict[str, str]) -> bool:
    current: str | None = node_id
    while current is not None:
        if current == candidate:
            return True
        current = parent.get(current)
    return False


def build_hierarchy(graph: TraceGraph, relations: tuple[str, ...]) -> Hierarchy:
    """Collapse hierarchy-typed edges into a parent → children tree.

    Edges are read in their declared direction: source is the parent.
    """
    wanted = {r.lower() for r in relations}
    tree: nx.DiGraph = nx.DiGraph()
    for node in graph.nodes():
        tree.add_node(node.id)

    parent: dict[str, str] = {}
    for edge in graph.edges():
        if edge.relation_type not in wanted:
            continue
        p, c = edge.source, edge.target
        if p not in tree or c not in tree or p == c:
            continue
        if c in parent:
            continue
        if _is_ancestor(c, p, parent):
            logger.debug("Ignoring cycle-closing hierarchy link %s -> %s", p, c)
            continue
        parent[c] = p
        tree.add_edge(p, c)

    roots = [node_id for node_id in tree.nodes if node_id not in parent]
    return Hierarchy(tree=tree, parent=parent, roots=roots)


# ─── Layout ──────────────────────────────────────────────────────────────────


class TreeLayout:
    """Recursive single-root tree layout sized by node footprint."""

    def __init__(self, config: TreeLayoutConfig | None = None) -> None:
        self.config = config or TreeLayoutConfig()

    def layout(self, graph: TraceGraph) -> TreeLayoutResult:
        if graph.node_count() == 0:
            return TreeLayoutResult(positions={}, bounds=Bounds(0.0, 0.0, 0.0, 0.0), root_id=None)

        hierarchy = build_hierarchy(graph, self.config.hierarchy_relations)
        tree = hierarchy.tree
        synthetic = len(hierarchy.roots) != 1
        if synthetic:
            roots = hierarchy.roots or [next(iter(tree.nodes))]
            if not hierarchy.roots:
                logger.warning("No root found in hierarchy, adopting %s under a synthetic root", roots[0])
            logger.debug("Inserting synthetic root over %d roots", len(roots))
            root_id = _unused_id(tree, SYNTHETIC_ROOT_ID)
            tree.add_node(root_id)
            for root in roots:
                tree.add_edge(root_id, root)
        else:
            root_id = hierarchy.roots[0]

        sizes: dict[str, Size] = {node.id: node.footprint for node in graph.nodes()}
        if synthetic:
            sizes[root_id] = Size(0.0, 0.0)

        extents = self._measure(tree, root_id, sizes)
        slots = self._assign_slots(tree, root_id, extents)
        centers = self._center(tree, root_id, slots, extents)
        depths = self._assign_depths(tree, root_id, sizes, synthetic)

        positions: dict[str, Position] = {}
        for node_id in nx.dfs_preorder_nodes(tree, source=root_id):
            if synthetic and node_id == root_id:
                continue
            if self.config.orientation is Orientation.TopToBottom:
                positions[node_id] = Position(centers[node_id], depths[node_id])
            else:
                positions[node_id] = Position(depths[node_id], centers[node_id])

        bounds = self._bounds(positions, sizes)
        logger.debug("Tree layout placed %d nodes under %s", len(positions), root_id)
        return TreeLayoutResult(
            positions=positions,
            bounds=bounds,
            root_id=None if synthetic else root_id,
            synthetic_root=synthetic,
            synthetic_root_id=root_id if synthetic else None,
        )

    # ─── Axis helpers ────────────────────────────────────────────────────────

    def _sibling_size(self, size: Size) -> float:
        return size.width if self.config.orientation is Orientation.TopToBottom else size.height

    def _depth_size(self, size: Size) -> float:
        return size.height if self.config.orientation is Orientation.TopToBottom else size.width

    # ─── Passes ──────────────────────────────────────────────────────────────

    def _measure(self, tree: nx.DiGraph, root_id: str, sizes: dict[str, Size]) -> dict[str, float]:
        spacing = self.config.node_spacing
        extents: dict[str, float] = {}
        for node_id in nx.dfs_postorder_nodes(tree, source=root_id):
            own = max(spacing, self._sibling_size(sizes[node_id]) + self.config.margin)
            children = list(tree.successors(node_id))
            if not children:
                extents[node_id] = own
                continue
            block = sum(extents[c] for c in children) + (len(children) - 1) * spacing
            extents[node_id] = max(own, block)
        return extents

    def _assign_slots(self, tree: nx.DiGraph, root_id: str, extents: dict[str, float]) -> dict[str, float]:
        spacing = self.config.node_spacing
        slots: dict[str, float] = {root_id: 0.0}
        for node_id in nx.dfs_preorder_nodes(tree, source=root_id):
            children = list(tree.successors(node_id))
            if not children:
                continue
            block = sum(extents[c] for c in children) + (len(children) - 1) * spacing
            cursor = slots[node_id] + (extents[node_id] - block) / 2
            for child in children:
                slots[child] = cursor
                cursor += extents[child] + spacing
        return slots

    def _center(
        self,
        tree: nx.DiGraph,
        root_id: str,
        slots: dict[str, float],
        extents: dict[str, float],
    ) -> dict[str, float]:
        centers: dict[str, float] = {}
        for node_id in nx.dfs_postorder_nodes(tree, source=root_id):
            children = list(tree.successors(node_id))
            if children:
                centers[node_id] = (centers[children[0]] + centers[children[-1]]) / 2
            else:
                centers[node_id] = slots[node_id] + extents[node_id] / 2
        return centers

    def _assign_depths(
        self,
        tree: nx.DiGraph,
        root_id: str,
        sizes: dict[str, Size],
        synthetic: bool,
    ) -> dict[str, float]:
        level_spacing = self.config.level_spacing
        depths: dict[str, float] = {root_id: -level_spacing if synthetic else 0.0}
        for node_id in nx.dfs_preorder_nodes(tree, source=root_id):
            below = depths[node_id] + self._depth_size(sizes[node_id]) + level_spacing
            for child in tree.successors(node_id):
                depths[child] = below
        return depths

    def _bounds(self, positions: dict[str, Position], sizes: dict[str, Size]) -> Bounds:
        if not positions:
            return Bounds(0.0, 0.0, 0.0, 0.0)
        top_to_bottom = self.config.orientation is Orientation.TopToBottom
        min_x = min_y = float("inf")
        max_x = max_y = float("-inf")
        for node_id, pos in positions.items():
            size = sizes[node_id]
            if top_to_bottom:
                left, top = pos.x - size.width / 2, pos.y
            else:
                left, top = pos.x, pos.y - size.height / 2
            min_x = min(min_x, left)
            min_y = min(min_y, top)
            max_x = max(max_x, left + size.width)
            max_y = max(max_y, top + size.height)
        return Bounds(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def tree_layout(graph: TraceGraph, config: TreeLayoutConfig | None = None) -> dict[str, Position]:
    """Lay out the hierarchy of ``graph`` as a tree; returns node id → position."""
    return TreeLayout(config).layout(graph).positions
