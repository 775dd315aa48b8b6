"""Graph IR — the typed node/edge container consumed by every component.

Wraps a networkx MultiDiGraph keyed by node id. Two nodes may be linked by
several relations at once (``childof`` and ``ref``, say), hence the multi
graph. Node symbol types are resolved once, at construction, so layout and
traversal always agree on them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import networkx as nx

from tracegraph.types import SymbolType, infer_symbol_type

logger = logging.getLogger(__name__)

DEFAULT_NODE_WIDTH: float = 120.0
DEFAULT_NODE_HEIGHT: float = 60.0


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class NodeData:
    id: str
    display_name: str
    symbol_type: SymbolType
    footprint: Size = Size(DEFAULT_NODE_WIDTH, DEFAULT_NODE_HEIGHT)
    file_extension: str = ""

    @classmethod
    def create(
        cls,
        id: str,
        display_name: str | None = None,
        symbol_type: str | SymbolType | None = None,
        footprint: Size | None = None,
        file_extension: str = "",
    ) -> NodeData:
        """Build a node, resolving its symbol type through the inference chain."""
        name = display_name if display_name is not None else id
        extension = (file_extension or "").lower().lstrip(".")
        return cls(
            id=id,
            display_name=name,
            symbol_type=infer_symbol_type(symbol_type, name, extension),
            footprint=footprint or Size(DEFAULT_NODE_WIDTH, DEFAULT_NODE_HEIGHT),
            file_extension=extension,
        )


@dataclass(frozen=True)
class EdgeData:
    id: str
    source: str
    target: str
    relation_type: str

    @classmethod
    def create(cls, source: str, target: str, relation_type: str, id: str | None = None) -> EdgeData:
        relation = (relation_type or "ref").strip().lower()
        return cls(
            id=id or f"{source}-{target}-{relation}",
            source=source,
            target=target,
            relation_type=relation,
        )


class TraceGraph:
    """The object graph handed over by the DSL parser.

    Holds NodeData under the ``data`` attribute of every networkx node and
    EdgeData under the ``data`` attribute of every edge. Insertion order of
    nodes and edges is preserved and drives every deterministic tie-break
    downstream.
    """

    def __init__(
        self,
        digraph: nx.MultiDiGraph,
        edge_list: list[EdgeData] | None = None,
        dropped_edges: list[EdgeData] | None = None,
    ) -> None:
        self.digraph = digraph
        if edge_list is None:
            edge_list = [attrs["data"] for _src, _tgt, attrs in digraph.edges(data=True)]
        self.edge_list = edge_list
        self.dropped_edges = dropped_edges or []

    @classmethod
    def from_parts(cls, nodes: Iterable[NodeData], edges: Iterable[EdgeData]) -> TraceGraph:
        """Build a graph, dropping edges whose endpoints are not nodes.

        Raises:
            ValueError: If two nodes share an id.
        """
        digraph: nx.MultiDiGraph = nx.MultiDiGraph()
        for node in nodes:
            if node.id in digraph:
                raise ValueError(f"Duplicate node id '{node.id}'")
            digraph.add_node(node.id, data=node)

        kept: list[EdgeData] = []
        dropped: list[EdgeData] = []
        for edge in edges:
            if edge.source not in digraph or edge.target not in digraph:
                logger.warning(
                    "Dropping dangling edge %s (%s -[%s]-> %s)",
                    edge.id,
                    edge.source,
                    edge.relation_type,
                    edge.target,
                )
                dropped.append(edge)
                continue
            digraph.add_edge(edge.source, edge.target, data=edge)
            kept.append(edge)

        logger.debug(
            "Built graph with %d nodes, %d edges (%d dropped)",
            digraph.number_of_nodes(),
            digraph.number_of_edges(),
            len(dropped),
        )
        return cls(digraph=digraph, edge_list=kept, dropped_edges=dropped)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.digraph

    def __len__(self) -> int:
        return self.digraph.number_of_nodes()

    def node(self, node_id: str) -> NodeData:
        return self.digraph.nodes[node_id]["data"]

    def nodes(self) -> Iterator[NodeData]:
        for node_id in self.digraph.nodes:
            yield self.digraph.nodes[node_id]["data"]

    def edges(self) -> Iterator[EdgeData]:
        yield from self.edge_list

    def symbol_type(self, node_id: str) -> SymbolType:
        if node_id not in self.digraph:
            return SymbolType.UNKNOWN
        return self.node(node_id).symbol_type

    def outgoing(self, node_id: str) -> Iterator[EdgeData]:
        if node_id not in self.digraph:
            return
        for _src, _tgt, attrs in self.digraph.out_edges(node_id, data=True):
            yield attrs["data"]

    def incoming(self, node_id: str) -> Iterator[EdgeData]:
        if node_id not in self.digraph:
            return
        for _src, _tgt, attrs in self.digraph.in_edges(node_id, data=True):
            yield attrs["data"]

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        return self.digraph.number_of_edges()

    def relation_types(self) -> list[str]:
        return sorted({edge.relation_type for edge in self.edges()})
