"""Intermediate representation: the typed trace graph."""

from tracegraph.ir.graph import DEFAULT_NODE_HEIGHT, DEFAULT_NODE_WIDTH, EdgeData, NodeData, Size, TraceGraph

__all__ = [
    "DEFAULT_NODE_HEIGHT",
    "DEFAULT_NODE_WIDTH",
    "EdgeData",
    "NodeData",
    "Size",
    "TraceGraph",
]
