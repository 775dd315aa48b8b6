"""Base loader protocol and loader errors."""

from __future__ import annotations

from typing import Protocol

from tracegraph.ir.graph import TraceGraph


class GraphFormatError(ValueError):
    """Raised when a graph document cannot be turned into a TraceGraph."""


class GraphLoader(Protocol):
    """Protocol that all graph document loaders implement."""

    def load(self, src: str) -> TraceGraph:
        """Parse document text into a TraceGraph."""
        ...
