"""Bucketed spatial index for overlap detection over positioned nodes."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Collection, Iterator
from dataclasses import dataclass, field

CellKey = tuple[int, int]


@dataclass(frozen=True)
class GridEntry:
    """The {x, y, radius} projection of a node."""

    node_id: str
    x: float
    y: float
    radius: float


@dataclass
class SpatialGrid:
    """Uniform grid of square buckets keyed by (floor(x/cell), floor(y/cell)).

    Only geometry is stored; the grid knows nothing about node semantics.
    """

    cell_size: float = 80.0
    padding: float = 10.0
    default_radius: float = 25.0
    cells: dict[CellKey, list[GridEntry]] = field(default_factory=lambda: defaultdict(list))
    max_radius: float = 0.0

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.cells.values())

    def cell_of(self, x: float, y: float) -> CellKey:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def insert(self, node_id: str, x: float, y: float, radius: float | None = None) -> GridEntry:
        """Add a node to the bucket containing (x, y)."""
        entry = GridEntry(node_id=node_id, x=x, y=y, radius=self.default_radius if radius is None else radius)
        self.cells[self.cell_of(x, y)].append(entry)
        if entry.radius > self.max_radius:
            self.max_radius = entry.radius
        return entry

    def query_neighborhood(self, x: float, y: float) -> list[GridEntry]:
        """All entries in the point's cell and its 8 neighbours."""
        return list(self._window(self.cell_of(x, y), 1))

    def any_within(self, x: float, y: float, distance: float, ignore: Collection[str] = ()) -> bool:
        """True when some entry's centre lies closer than ``distance`` to (x, y)."""
        reach = max(1, math.ceil(distance / self.cell_size))
        for entry in self._window(self.cell_of(x, y), reach):
            if entry.node_id in ignore:
                continue
            if math.hypot(entry.x - x, entry.y - y) < distance:
                return True
        return False

    def find_all_overlapping_pairs(self) -> list[tuple[str, str]]:
        """Every unordered pair with distance < r1 + r2 + padding, sorted.

        The scan window is the 3x3 neighbourhood unless large radii make the
        overlap threshold exceed one cell, in which case it widens so the
        result stays exact.
        """
        reach = max(1, math.ceil((2 * self.max_radius + self.padding) / self.cell_size))
        seen: set[tuple[str, str]] = set()
        pairs: list[tuple[str, str]] = []

        for key, bucket in self.cells.items():
            neighbours = list(self._window(key, reach))
            for n1 in bucket:
                for n2 in neighbours:
                    if n1.node_id == n2.node_id:
                        continue
                    pair = (n1.node_id, n2.node_id) if n1.node_id < n2.node_id else (n2.node_id, n1.node_id)
                    if pair in seen:
                        continue
                    if math.hypot(n1.x - n2.x, n1.y - n2.y) < n1.radius + n2.radius + self.padding:
                        seen.add(pair)
                        pairs.append(pair)

        pairs.sort()
        return pairs

    def _window(self, key: CellKey, reach: int) -> Iterator[GridEntry]:
        cx, cy = key
        for dx in range(-reach, reach + 1):
            for dy in range(-reach, reach + 1):
                bucket = self.cells.get((cx + dx, cy + dy))
                if bucket:
                    yield from bucket
