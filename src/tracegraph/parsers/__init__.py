"""Loader registry: dispatch graph documents to the right loader."""

from __future__ import annotations

from tracegraph.ir.graph import TraceGraph
from tracegraph.parsers.base import GraphFormatError, GraphLoader
from tracegraph.parsers.json_graph import JsonGraphLoader, edge_from_dict, graph_from_dict, node_from_dict

_LOADERS: dict[str, type[GraphLoader]] = {
    "json": JsonGraphLoader,
}


def load_graph(src: str, fmt: str = "json") -> TraceGraph:
    """Parse a graph document of the given format into a TraceGraph."""
    loader_cls = _LOADERS.get(fmt)
    if loader_cls is None:
        raise GraphFormatError(f"Unsupported graph format: {fmt}")
    return loader_cls().load(src)


__all__ = [
    "GraphFormatError",
    "GraphLoader",
    "JsonGraphLoader",
    "edge_from_dict",
    "graph_from_dict",
    "load_graph",
    "node_from_dict",
]
