"""Smoke tests: verify the package imports and the CLI is wired up."""

import tracegraph
from click.testing import CliRunner

from tracegraph.__main__ import main


def test_import():
    assert tracegraph is not None


def test_public_api():
    assert callable(tracegraph.layout_document)
    assert callable(tracegraph.impact_of)


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Trace graph layout" in result.output


def test_layout_document_round_trip():
    src = '{"nodes": [{"id": "a", "type": "feature"}, {"id": "b", "type": "feature"}], "edges": []}'
    positions = tracegraph.layout_document(src, algorithm="tree", orientation="LR")
    assert set(positions) == {"a", "b"}


def test_impact_of():
    src = '{"nodes": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b"}]}'
    assert tracegraph.impact_of(src, "b") == {"a"}
