"""Tests for tracegraph.layout.cluster — type-levelled radial clusters."""

from __future__ import annotations

import math

import pytest

from tracegraph.config import ClusterLayoutConfig
from tracegraph.ir.graph import EdgeData, NodeData, TraceGraph
from tracegraph.layout.cluster import (
    ORPHAN_MIN_DISTANCE,
    PAIR_ANGLE,
    PAIR_RETRY_ATTEMPTS,
    RING_ANGULAR_ATTEMPTS,
    RING_RADIUS_STEP,
    RING_RETRY_ATTEMPTS,
    SATELLITE_MIN_DISTANCE,
    ClusterLayout,
    build_cluster_adjacency,
    cluster_layout,
)
from tracegraph.layout.placement import (
    angular_retry,
    angular_then_radial_retry,
    place_with_conflict_avoidance,
    polar,
)
from tracegraph.layout.spatial import SpatialGrid
from tracegraph.layout.types import Position


def make_graph(nodes: list[tuple[str, str]], edges: list[tuple[str, str, str]]) -> TraceGraph:
    return TraceGraph.from_parts(
        [NodeData.create(id=i, symbol_type=t) for i, t in nodes],
        [EdgeData.create(s, t, r) for s, t, r in edges],
    )


def product_model() -> TraceGraph:
    nodes = [
        ("P", "productline"),
        ("FS", "featureset"),
        ("F1", "feature"),
        ("F2", "feature"),
        ("F3", "feature"),
        ("CS", "configset"),
        ("C1", "config"),
        ("R", "requirement"),
    ]
    edges = [
        ("FS", "P", "childof"),
        ("F1", "FS", "childof"),
        ("F2", "FS", "childof"),
        ("F3", "FS", "childof"),
        ("C1", "CS", "childof"),
        ("R", "F1", "satisfies"),
    ]
    return make_graph(nodes, edges)


class TestAdjacency:
    def test_childof_and_parentof_directions(self):
        g = make_graph(
            [("p", "feature"), ("a", "feature"), ("b", "feature")],
            [("a", "p", "childof"), ("p", "b", "parentof")],
        )
        children, logical = build_cluster_adjacency(g)
        assert children["p"] == ["a", "b"]
        assert logical == []

    def test_duplicate_links_collapse(self):
        g = make_graph([("p", "feature"), ("a", "feature")], [("a", "p", "childof"), ("p", "a", "parentof")])
        children, _ = build_cluster_adjacency(g)
        assert children["p"] == ["a"]

    def test_other_relations_are_logical(self):
        children, logical = build_cluster_adjacency(product_model())
        assert logical == [("R", "F1", "satisfies")]
        assert children["FS"] == ["F1", "F2", "F3"]


class TestPhases:
    def test_config_column(self):
        result = ClusterLayout().layout(product_model())
        assert result.positions["CS"] == Position(-400, 0)
        assert result.positions["C1"] == Position(-400, 80)

    def test_centres_on_type_levels(self):
        result = ClusterLayout().layout(product_model())
        assert result.centers == ["P", "FS"]
        assert result.positions["P"] == Position(0, 0)
        assert result.positions["FS"] == Position(0, 150)

    def test_satellites_ring_around_centre(self):
        result = ClusterLayout().layout(product_model())
        fs = result.positions["FS"]
        f1 = result.positions["F1"]
        assert f1.x == pytest.approx(0, abs=1e-9)
        assert f1.y == pytest.approx(195)
        distances = [result.positions[f].distance_to(fs) for f in ("F1", "F2", "F3")]
        assert distances == pytest.approx([45, 49.5, 54])

    def test_orphans_below_everything(self):
        result = ClusterLayout().layout(product_model())
        assert result.orphans == ["R"]
        lowest = max(p.y for n, p in result.positions.items() if n != "R")
        assert result.positions["R"].y == pytest.approx(lowest + 150)

    def test_satellites_follow_resolved_centre(self):
        g = make_graph(
            [("CS", "configset"), ("C1", "config"), ("P", "productline"), ("F", "feature")],
            [("C1", "CS", "childof"), ("F", "P", "childof")],
        )
        result = ClusterLayout(ClusterLayoutConfig(config_column_x=0)).layout(g)
        p, f = result.positions["P"], result.positions["F"]
        assert p != Position(0, 0)
        assert f.x == pytest.approx(p.x)
        assert f.y == pytest.approx(p.y + 35)

    def test_same_level_centres_spread(self):
        g = make_graph(
            [("P1", "productline"), ("P2", "productline"), ("a", "feature"), ("b", "feature")],
            [("a", "P1", "childof"), ("b", "P2", "childof")],
        )
        positions = cluster_layout(g)
        assert positions["P1"].y == positions["P2"].y == 0
        assert positions["P2"].x - positions["P1"].x == pytest.approx(250)


class TestGuarantees:
    def test_every_node_positioned_in_graph_order(self):
        g = product_model()
        positions = cluster_layout(g)
        assert list(positions) == [n.id for n in g.nodes()]

    def test_deterministic(self):
        assert cluster_layout(product_model()) == cluster_layout(product_model())

    def test_empty_graph(self):
        result = ClusterLayout().layout(make_graph([], []))
        assert result.positions == {}
        assert result.orphans == []


class TestSatelliteGeometry:
    def test_pair_fans_out_below_centre(self):
        g = make_graph(
            [("P", "productline"), ("a", "feature"), ("b", "feature")],
            [("a", "P", "childof"), ("b", "P", "childof")],
        )
        positions = cluster_layout(g)
        p = positions["P"]
        for child, angle in (("a", math.pi / 2 + PAIR_ANGLE), ("b", math.pi / 2 - PAIR_ANGLE)):
            pos = positions[child]
            assert pos.distance_to(p) == pytest.approx(40)
            assert math.atan2(pos.y - p.y, pos.x - p.x) == pytest.approx(angle)

    def test_pair_retry_rotates_in_fifteen_degree_steps(self):
        centre = Position(0, 0)
        angle = math.pi / 2 + PAIR_ANGLE
        candidate = polar(centre, 40, angle)
        grid = SpatialGrid()
        grid.insert("blocker", candidate.x, candidate.y)
        pos = place_with_conflict_avoidance(
            candidate,
            grid,
            angular_retry(centre, 40, angle, math.pi / 12),
            PAIR_RETRY_ATTEMPTS,
            SATELLITE_MIN_DISTANCE,
        )
        assert pos.distance_to(polar(centre, 40, angle + 5 * math.pi / 12)) == pytest.approx(0, abs=1e-9)

    def test_ring_grows_outwards_after_angular_attempts(self):
        centre = Position(0, 0)
        grid = SpatialGrid()
        grid.insert("blocker", 0, 0)
        retry = angular_then_radial_retry(
            centre, 35, math.pi / 2, math.pi / 8, RING_ANGULAR_ATTEMPTS, RING_RADIUS_STEP
        )
        pos = place_with_conflict_avoidance(
            polar(centre, 35, math.pi / 2), grid, retry, RING_RETRY_ATTEMPTS, SATELLITE_MIN_DISTANCE
        )
        assert pos.x == pytest.approx(0, abs=1e-9)
        assert pos.y == pytest.approx(35 + RING_RADIUS_STEP)


class TestOrphanPlacement:
    def test_orphan_retries_away_from_placed_nodes(self):
        g = make_graph([("C1", "config"), ("R", "requirement")], [])
        config = ClusterLayoutConfig(config_column_x=0, vertical_spacing=30)
        result = ClusterLayout(config).layout(g)
        r = result.positions["R"]
        assert result.orphans == ["R"]
        assert r.distance_to(result.positions["C1"]) >= ORPHAN_MIN_DISTANCE
        assert r.x == pytest.approx(75 * math.cos(math.pi / 6))
        assert r.y == pytest.approx(30 + 75 * math.sin(math.pi / 6))
