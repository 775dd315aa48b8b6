"""tracegraph: layout and impact traversal for systems-engineering trace graphs."""

from tracegraph.config import (
    ClusterLayoutConfig,
    EngineConfig,
    HybridRefinementConfig,
    TreeLayoutConfig,
)
from tracegraph.impact import ImpactChain, ImpactTraversal, compute_impact_chain
from tracegraph.ir.graph import EdgeData, NodeData, Size, TraceGraph
from tracegraph.layout import Position, compute_layout
from tracegraph.parsers import GraphFormatError, load_graph
from tracegraph.types import Orientation, SymbolType, infer_symbol_type

_ORIENTATIONS: dict[str, Orientation] = {o.value: o for o in Orientation}
_ORIENTATIONS.update({"TB": Orientation.TopToBottom, "TD": Orientation.TopToBottom, "LR": Orientation.LeftToRight})


def parse_orientation(value: str | Orientation) -> Orientation:
    """Map 'top-to-bottom' / 'left-to-right' (or TB/TD/LR) onto Orientation."""
    if isinstance(value, Orientation):
        return value
    for key in (value.lower(), value.upper()):
        if key in _ORIENTATIONS:
            return _ORIENTATIONS[key]
    raise ValueError(f"Unknown orientation '{value}'; use top-to-bottom or left-to-right")


def layout_document(
    src: str,
    algorithm: str = "cluster",
    orientation: str | Orientation = Orientation.TopToBottom,
    refine: bool = True,
) -> dict[str, Position]:
    """Parse a JSON graph document and lay it out.

    Args:
        src: JSON graph document text.
        algorithm: 'tree' or 'cluster'.
        orientation: Tree orientation; ignored by the cluster layout.
        refine: Run the hybrid overlap refinement after the layout.

    Returns:
        Node id → Position for every node of the graph.

    Raises:
        GraphFormatError: If the document cannot be parsed.
        ValueError: If the algorithm or orientation is unknown.
    """
    config = EngineConfig(algorithm=algorithm, refine=refine)
    config.tree.orientation = parse_orientation(orientation)
    return compute_layout(load_graph(src), config)


def impact_of(src: str, node_id: str) -> set[str]:
    """Parse a JSON graph document and return the impact chain of ``node_id``."""
    return compute_impact_chain(load_graph(src), node_id)


__all__ = [
    "ClusterLayoutConfig",
    "EdgeData",
    "EngineConfig",
    "GraphFormatError",
    "HybridRefinementConfig",
    "ImpactChain",
    "ImpactTraversal",
    "NodeData",
    "Orientation",
    "Position",
    "Size",
    "SymbolType",
    "TraceGraph",
    "TreeLayoutConfig",
    "compute_impact_chain",
    "compute_layout",
    "impact_of",
    "infer_symbol_type",
    "layout_document",
    "load_graph",
    "parse_orientation",
]
