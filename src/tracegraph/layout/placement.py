"""Bounded "retry until free or give up" placement.

Cluster centres, satellites and orphans all place a candidate point, and on
conflict walk a retry strategy for a fixed number of attempts. When every
attempt conflicts, the last proposal is accepted as-is: the caller gets a
best-effort position, never an error.

Angles are in screen coordinates (y grows downwards), so pi/2 points below
the anchor.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Collection

from tracegraph.layout.spatial import SpatialGrid
from tracegraph.layout.types import Position

logger = logging.getLogger(__name__)

RetryStrategy = Callable[[int], Position]


def polar(anchor: Position, radius: float, angle: float) -> Position:
    return Position(anchor.x + radius * math.cos(angle), anchor.y + radius * math.sin(angle))


def angular_retry(
    anchor: Position,
    radius: float,
    start_angle: float,
    angle_step: float,
    radius_step: float = 0.0,
) -> RetryStrategy:
    """Rotate around ``anchor`` by ``angle_step`` per attempt, optionally growing the radius."""

    def propose(attempt: int) -> Position:
        return polar(anchor, radius + attempt * radius_step, start_angle + attempt * angle_step)

    return propose


def angular_then_radial_retry(
    anchor: Position,
    radius: float,
    start_angle: float,
    angle_step: float,
    angular_attempts: int,
    radius_step: float,
) -> RetryStrategy:
    """Rotate for the first ``angular_attempts`` attempts, then push outwards along the start angle."""

    def propose(attempt: int) -> Position:
        if attempt <= angular_attempts:
            return polar(anchor, radius, start_angle + attempt * angle_step)
        return polar(anchor, radius + (attempt - angular_attempts) * radius_step, start_angle)

    return propose


def place_with_conflict_avoidance(
    candidate: Position,
    occupied: SpatialGrid,
    retry: RetryStrategy,
    max_attempts: int,
    min_distance: float,
    ignore: Collection[str] = (),
) -> Position:
    """Return the first conflict-free position among the candidate and its retries.

    Args:
        candidate: Preferred position.
        occupied: Grid of already placed nodes.
        retry: Maps attempt number (1-based) to an alternative position.
        max_attempts: Number of retries after the candidate.
        min_distance: Centres closer than this conflict.
        ignore: Node ids exempt from the conflict check (a satellite's own centre).

    Returns:
        A conflict-free position, or the last retry when the budget runs out.
    """
    if not occupied.any_within(candidate.x, candidate.y, min_distance, ignore):
        return candidate

    proposal = candidate
    for attempt in range(1, max_attempts + 1):
        proposal = retry(attempt)
        if not occupied.any_within(proposal.x, proposal.y, min_distance, ignore):
            return proposal

    logger.debug(
        "Retry budget of %d exhausted near (%.1f, %.1f); accepting (%.1f, %.1f)",
        max_attempts,
        candidate.x,
        candidate.y,
        proposal.x,
        proposal.y,
    )
    return proposal
