"""Tests for tracegraph.layout.refine — bounded overlap refinement."""

from __future__ import annotations

import random

import pytest

from tracegraph.config import HybridRefinementConfig
from tracegraph.layout.refine import HybridRefiner, refine_positions
from tracegraph.layout.types import Position


class TestRefinement:
    def test_no_overlaps_is_a_no_op(self):
        positions = {"a": Position(0, 0), "b": Position(500, 0)}
        result = HybridRefiner().refine(positions)
        assert result.iterations == 0
        assert result.overlap_counts == [0]
        assert result.positions == positions
        assert result.positions["a"] is not positions["a"]

    def test_pair_pushed_apart_symmetrically(self):
        positions = {"a": Position(0, 0), "b": Position(20, 0)}
        result = HybridRefiner().refine(positions)
        a, b = result.positions["a"], result.positions["b"]
        assert result.iterations == 3
        assert result.overlap_counts == [1, 1, 1, 1]
        assert b.x - a.x == pytest.approx(46.28)
        assert a.x == pytest.approx(-b.x + 20)
        assert a.y == b.y == 0

    def test_input_untouched(self):
        positions = {"a": Position(0, 0), "b": Position(20, 0)}
        refine_positions(positions)
        assert positions == {"a": Position(0, 0), "b": Position(20, 0)}

    def test_coincident_nodes_left_alone(self):
        positions = {"a": Position(5, 5), "b": Position(5, 5)}
        result = HybridRefiner().refine(positions)
        assert result.positions == positions
        assert result.iterations == 1

    def test_iteration_cap_from_config(self):
        positions = {"a": Position(0, 0), "b": Position(20, 0)}
        result = HybridRefiner(HybridRefinementConfig(max_iterations=1)).refine(positions)
        assert result.iterations == 1

    def test_stops_early_when_few_pairs_move(self):
        positions = {}
        for i in range(10):
            positions[f"a{i}"] = Position(i * 1000, 0)
            positions[f"b{i}"] = Position(i * 1000 + 50, 0)
        positions["near1"] = Position(20000, 0)
        positions["near2"] = Position(20010, 0)
        config = HybridRefinementConfig(min_separation=30, max_iterations=3)
        result = HybridRefiner(config).refine(positions)
        assert result.iterations == 1
        assert result.overlap_counts == [11, 11]
        assert result.positions["near2"].x - result.positions["near1"].x == pytest.approx(16)
        assert result.positions["b0"] == positions["b0"]

    def test_radius_callback(self):
        positions = {"a": Position(0, 0), "b": Position(100, 0)}
        refiner = HybridRefiner()
        assert refiner.overlapping_pairs(positions) == []
        assert refiner.overlapping_pairs(positions, lambda _id: 50.0) == [("a", "b")]


class TestConvergence:
    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_overlaps_never_increase(self, seed):
        rng = random.Random(seed)
        positions = {f"n{i}": Position(rng.uniform(0, 300), rng.uniform(0, 300)) for i in range(60)}
        config = HybridRefinementConfig()
        result = HybridRefiner(config).refine(positions)
        counts = result.overlap_counts
        assert all(later <= earlier for earlier, later in zip(counts, counts[1:]))
        assert result.iterations <= config.max_iterations
        assert set(result.positions) == set(positions)
