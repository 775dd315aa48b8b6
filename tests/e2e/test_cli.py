"""End-to-end tests: drive the tracegraph CLI over JSON graph files."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from tracegraph.__main__ import main

GRAPH = {
    "nodes": [
        {"id": "A", "type": "feature"},
        {"id": "FeatureSetX", "type": "featureset"},
        {"id": "ProductLine", "type": "productline"},
        {"id": "SiblingB", "type": "feature"},
    ],
    "edges": [
        {"source": "A", "target": "FeatureSetX", "relationType": "childof"},
        {"source": "FeatureSetX", "target": "ProductLine", "relationType": "listedfor"},
        {"source": "FeatureSetX", "target": "SiblingB", "relationType": "parentof"},
    ],
}


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(GRAPH))
    return path


class TestLayoutCommand:
    @pytest.mark.parametrize("algorithm", ["tree", "cluster"])
    def test_positions_every_node(self, graph_file, algorithm):
        result = CliRunner().invoke(main, ["layout", str(graph_file), "--algorithm", algorithm])
        assert result.exit_code == 0, result.output
        positions = json.loads(result.output)["positions"]
        assert set(positions) == {"A", "FeatureSetX", "ProductLine", "SiblingB"}
        assert all(set(p) == {"x", "y"} for p in positions.values())

    def test_reads_stdin(self):
        result = CliRunner().invoke(main, ["layout", "--no-refine"], input=json.dumps(GRAPH))
        assert result.exit_code == 0, result.output
        assert "ProductLine" in json.loads(result.output)["positions"]

    def test_tree_spacing_options(self, tmp_path):
        path = tmp_path / "pl.json"
        path.write_text(
            json.dumps(
                {
                    "nodes": [
                        {"id": "P", "type": "productline"},
                        {"id": "F1", "type": "feature"},
                        {"id": "F2", "type": "feature"},
                    ],
                    "edges": [
                        {"source": "P", "target": "F1", "type": "childof"},
                        {"source": "P", "target": "F2", "type": "childof"},
                    ],
                }
            )
        )
        args = ["layout", str(path), "-a", "tree", "--no-refine", "--node-spacing", "20", "--level-spacing", "50"]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0, result.output
        positions = json.loads(result.output)["positions"]
        assert positions["F1"]["y"] == positions["P"]["y"] + 110

    def test_writes_output_file(self, graph_file, tmp_path):
        out = tmp_path / "out.json"
        result = CliRunner().invoke(main, ["layout", str(graph_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "positions" in json.loads(out.read_text())

    def test_bad_orientation(self, graph_file):
        result = CliRunner().invoke(main, ["layout", str(graph_file), "-d", "diagonal"])
        assert result.exit_code == 1
        assert "Unknown orientation" in result.output

    def test_cluster_spacing_options(self, graph_file):
        args = ["layout", str(graph_file), "--no-refine", "--vertical-spacing", "100", "--cluster-radius", "30"]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0, result.output
        positions = json.loads(result.output)["positions"]
        assert positions["FeatureSetX"]["y"] == 100

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = CliRunner().invoke(main, ["layout", str(path)])
        assert result.exit_code == 1
        assert "graph error" in result.output


class TestImpactCommand:
    def test_chain(self, graph_file):
        result = CliRunner().invoke(main, ["impact", str(graph_file), "A"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["origin"] == "A"
        assert payload["related"] == ["FeatureSetX", "ProductLine"]
        assert payload["upstream"] == []

    def test_ignored_relation(self, graph_file):
        result = CliRunner().invoke(main, ["impact", str(graph_file), "A", "-i", "childof"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["related"] == []

    def test_unknown_node(self, graph_file):
        result = CliRunner().invoke(main, ["impact", str(graph_file), "Nope"])
        assert result.exit_code == 1
        assert "unknown node" in result.output
