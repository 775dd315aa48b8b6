"""JSON graph documents, in the shape the DSL parser hands over.

    {
      "nodes": [{"id": "...", "name": "...", "type": "feature",
                 "size": {"width": 120, "height": 60}, "fileUri": "a.fml"}],
      "edges": [{"id": "...", "source": "...", "target": "...",
                 "relationType": "childof"}]
    }

Alternative key spellings are accepted for the fields the producers disagree
on; see ``_first``.
"""

from __future__ import annotations

import json
import logging
from pathlib import PurePath
from typing import Any

from tracegraph.ir.graph import DEFAULT_NODE_HEIGHT, DEFAULT_NODE_WIDTH, EdgeData, NodeData, Size, TraceGraph
from tracegraph.parsers.base import GraphFormatError
from tracegraph.types import parse_symbol_type

logger = logging.getLogger(__name__)

NAME_KEYS = ("displayName", "name", "label")
TYPE_KEYS = ("symbolType", "type", "kind")
RELATION_KEYS = ("relationType", "relationshipType", "type")
SIZE_KEYS = ("footprint", "size")


def _first(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _declared_type(raw: dict[str, Any]) -> str | None:
    """First type field naming a known symbol type; producers disagree on the key."""
    for key in TYPE_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and parse_symbol_type(value) is not None:
            return value
    return None


def _number(value: Any, default: float, where: str) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise GraphFormatError(f"{where}: expected a number, got {value!r}") from e


def _footprint(raw: dict[str, Any], where: str) -> Size:
    box = _first(raw, SIZE_KEYS)
    source = box if isinstance(box, dict) else raw
    return Size(
        width=_number(source.get("width"), DEFAULT_NODE_WIDTH, where),
        height=_number(source.get("height"), DEFAULT_NODE_HEIGHT, where),
    )


def _extension(raw: dict[str, Any]) -> str:
    ext = raw.get("fileExtension")
    if ext:
        return str(ext)
    uri = raw.get("fileUri") or raw.get("file")
    if uri:
        return PurePath(str(uri)).suffix
    return ""


def node_from_dict(raw: Any, index: int) -> NodeData:
    where = f"nodes[{index}]"
    if not isinstance(raw, dict):
        raise GraphFormatError(f"{where}: expected an object")
    node_id = raw.get("id")
    if not node_id:
        raise GraphFormatError(f"{where}: missing 'id'")
    name = _first(raw, NAME_KEYS)
    return NodeData.create(
        id=str(node_id),
        display_name=str(name) if name is not None else None,
        symbol_type=_declared_type(raw),
        footprint=_footprint(raw, where),
        file_extension=_extension(raw),
    )


def edge_from_dict(raw: Any, index: int) -> EdgeData:
    where = f"edges[{index}]"
    if not isinstance(raw, dict):
        raise GraphFormatError(f"{where}: expected an object")
    source, target = raw.get("source"), raw.get("target")
    if not source or not target:
        raise GraphFormatError(f"{where}: 'source' and 'target' are required")

    declared_values = [raw[k] for k in RELATION_KEYS if raw.get(k)]
    if any(not isinstance(value, str) for value in declared_values):
        raise GraphFormatError(f"{where}: relation type must be a string")
    relation = _first(raw, RELATION_KEYS)
    declared = set(declared_values)
    if len(declared) > 1:
        logger.debug("%s declares several relation types %s; using %r", where, sorted(declared), relation)

    return EdgeData.create(
        source=str(source),
        target=str(target),
        relation_type=str(relation) if relation is not None else "ref",
        id=str(raw["id"]) if raw.get("id") else None,
    )


def graph_from_dict(doc: Any) -> TraceGraph:
    if not isinstance(doc, dict):
        raise GraphFormatError("graph document must be an object with 'nodes' and 'edges'")
    raw_nodes = doc.get("nodes") or []
    raw_edges = doc.get("edges") or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise GraphFormatError("'nodes' and 'edges' must be lists")

    nodes = [node_from_dict(raw, i) for i, raw in enumerate(raw_nodes)]
    edges = [edge_from_dict(raw, i) for i, raw in enumerate(raw_edges)]
    try:
        return TraceGraph.from_parts(nodes, edges)
    except ValueError as e:
        raise GraphFormatError(str(e)) from e


class JsonGraphLoader:
    """Load a TraceGraph from JSON text."""

    def load(self, src: str) -> TraceGraph:
        try:
            doc = json.loads(src)
        except json.JSONDecodeError as e:
            raise GraphFormatError(f"invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e
        return graph_from_dict(doc)
