"""Layout types shared across layout engines and their callers."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class Position:
    """A 2D point in layout units. Mutable during relaxation."""

    x: float
    y: float

    def distance_to(self, other: Position) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def copy(self) -> Position:
        return Position(self.x, self.y)


@dataclass
class Bounds:
    x: float
    y: float
    width: float
    height: float


@dataclass
class TreeLayoutResult:
    """Positions plus the shape facts a renderer needs to size its canvas."""

    positions: dict[str, Position]
    bounds: Bounds
    root_id: str | None
    synthetic_root: bool = False
    synthetic_root_id: str | None = None


@dataclass
class ClusterLayoutResult:
    positions: dict[str, Position]
    centers: list[str] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)
    logical_edges: list[tuple[str, str, str]] = field(default_factory=list)


@dataclass
class RefinementResult:
    positions: dict[str, Position]
    iterations: int
    overlap_counts: list[int] = field(default_factory=list)


RadiusFn = Callable[[str], float]

SYNTHETIC_ROOT_ID = "__root__"
