"""Hybrid overlap refinement.

A bounded micro-force pass run after the tree or cluster layout. Each
iteration re-detects overlapping pairs with the spatial grid and pushes every
too-close pair apart along its centre line by a damped fraction of the
overlap. There is no velocity and no cooling schedule: a hard iteration cap
and an early stop when few pairs still need work keep it deterministic and
cheap.
"""

from __future__ import annotations

import logging
import math

from tracegraph.config import HybridRefinementConfig
from tracegraph.layout.spatial import SpatialGrid
from tracegraph.layout.types import Position, RadiusFn, RefinementResult

logger = logging.getLogger(__name__)


class HybridRefiner:
    """Clean residual overlaps left by a layout pass."""

    def __init__(self, config: HybridRefinementConfig | None = None) -> None:
        self.config = config or HybridRefinementConfig()

    def overlapping_pairs(
        self,
        positions: dict[str, Position],
        radius_of: RadiusFn | None = None,
    ) -> list[tuple[str, str]]:
        grid = SpatialGrid(
            cell_size=self.config.cell_size,
            padding=self.config.padding,
            default_radius=self.config.default_radius,
        )
        for node_id, pos in positions.items():
            grid.insert(node_id, pos.x, pos.y, radius_of(node_id) if radius_of else None)
        return grid.find_all_overlapping_pairs()

    def refine(
        self,
        positions: dict[str, Position],
        radius_of: RadiusFn | None = None,
    ) -> RefinementResult:
        """Relax ``positions``; the input map and its Position objects are left untouched."""
        current = {node_id: pos.copy() for node_id, pos in positions.items()}
        pairs = self.overlapping_pairs(current, radius_of)
        counts = [len(pairs)]
        if not pairs:
            return RefinementResult(positions=current, iterations=0, overlap_counts=counts)

        min_sep = self.config.min_separation
        iterations = 0
        for iteration in range(self.config.max_iterations):
            trial = {node_id: pos.copy() for node_id, pos in current.items()}
            adjusted = 0
            for a, b in pairs:
                p1, p2 = trial[a], trial[b]
                dx, dy = p1.x - p2.x, p1.y - p2.y
                distance = math.hypot(dx, dy)
                if distance <= 0 or distance >= min_sep:
                    continue
                push = (min_sep - distance) * self.config.damping * 0.5
                ux, uy = dx / distance, dy / distance
                p1.x += ux * push
                p1.y += uy * push
                p2.x -= ux * push
                p2.y -= uy * push
                adjusted += 1

            next_pairs = self.overlapping_pairs(trial, radius_of)
            if len(next_pairs) > counts[-1]:
                logger.debug(
                    "Iteration %d would raise overlaps %d -> %d; keeping previous positions",
                    iteration + 1,
                    counts[-1],
                    len(next_pairs),
                )
                break

            current = trial
            iterations += 1
            counts.append(len(next_pairs))
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Iteration %d: adjusted %d of %d pairs, %d overlaps remain",
                    iteration + 1,
                    adjusted,
                    len(pairs),
                    len(next_pairs),
                )
            if not next_pairs or adjusted < self.config.convergence_ratio * len(pairs):
                break
            pairs = next_pairs

        return RefinementResult(positions=current, iterations=iterations, overlap_counts=counts)


def refine_positions(
    positions: dict[str, Position],
    radius_of: RadiusFn | None = None,
    config: HybridRefinementConfig | None = None,
) -> dict[str, Position]:
    """Return a relaxed copy of ``positions`` with fewer (or equally many) overlaps."""
    return HybridRefiner(config).refine(positions, radius_of).positions
