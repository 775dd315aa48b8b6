"""Directional impact traversal.

From a selected node, an upstream walk follows incoming edges (what the node
depends on) and a downstream walk follows outgoing edges (what it affects).
Organisational set nodes are boundaries: they join the chain, but a walk does
not continue through them to their other members. The exception is the path
from a feature container to its product line: a featureset entered over
``listedfor`` is not a boundary, and a boundary featureset still follows its
own ``listedfor`` edges.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tracegraph.ir.graph import TraceGraph
from tracegraph.types import SymbolType, is_set_type

logger = logging.getLogger(__name__)

LISTED_FOR = "listedfor"

Adjacency = dict[str, list[tuple[str, str]]]


@dataclass
class ImpactChain:
    """Upstream and downstream members reachable from ``origin``."""

    origin: str
    upstream: set[str] = field(default_factory=set)
    downstream: set[str] = field(default_factory=set)

    @property
    def related(self) -> set[str]:
        return (self.upstream | self.downstream) - {self.origin}


class ImpactTraversal:
    """Stateless impact-chain queries over one graph snapshot."""

    def __init__(self, graph: TraceGraph, ignored_relations: Iterable[str] = ()) -> None:
        self.graph = graph
        ignored = {r.lower() for r in ignored_relations}
        self.outgoing: Adjacency = {}
        self.incoming: Adjacency = {}
        for edge in graph.edges():
            if edge.relation_type in ignored:
                continue
            self.outgoing.setdefault(edge.source, []).append((edge.target, edge.relation_type))
            self.incoming.setdefault(edge.target, []).append((edge.source, edge.relation_type))

    def chain(self, node_id: str) -> ImpactChain:
        if node_id not in self.graph:
            logger.debug("Impact chain requested for unknown node %s", node_id)
            return ImpactChain(origin=node_id)

        upstream = self._walk(node_id, self.incoming)
        downstream = self._walk(node_id, self.outgoing)
        upstream.discard(node_id)
        downstream.discard(node_id)
        logger.debug(
            "Impact chain for %s: %d upstream, %d downstream",
            node_id,
            len(upstream),
            len(downstream),
        )
        return ImpactChain(origin=node_id, upstream=upstream, downstream=downstream)

    def is_boundary(self, node_id: str, relation_type: str) -> bool:
        """Whether entering ``node_id`` over ``relation_type`` stops the walk there."""
        symbol_type = self.graph.symbol_type(node_id)
        if not is_set_type(symbol_type):
            return False
        return not (symbol_type is SymbolType.FEATURESET and relation_type == LISTED_FOR)

    def _walk(self, start: str, adjacency: Adjacency) -> set[str]:
        expanded: set[str] = set()
        bounded: set[str] = set()
        stack: list[tuple[str, bool]] = [(start, False)]

        while stack:
            current, boundary = stack.pop()
            if current in expanded or (boundary and current in bounded):
                continue

            if boundary:
                bounded.add(current)
                if self.graph.symbol_type(current) is not SymbolType.FEATURESET:
                    continue
                connections = [c for c in adjacency.get(current, []) if c[1] == LISTED_FOR]
            else:
                expanded.add(current)
                connections = adjacency.get(current, [])

            for neighbour, relation_type in reversed(connections):
                stack.append((neighbour, self.is_boundary(neighbour, relation_type)))

        return expanded | bounded


def compute_impact_chain(
    graph: TraceGraph,
    start_node_id: str,
    ignored_relations: Iterable[str] = (),
) -> set[str]:
    """Nodes upstream or downstream of ``start_node_id``, excluding the node itself."""
    return ImpactTraversal(graph, ignored_relations).chain(start_node_id).related
