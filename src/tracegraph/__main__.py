"""CLI entry point for tracegraph."""

from __future__ import annotations

import json
import logging
import sys

import click

from tracegraph import parse_orientation
from tracegraph.config import EngineConfig
from tracegraph.impact import ImpactTraversal
from tracegraph.ir.graph import TraceGraph
from tracegraph.layout.engine import ALGORITHMS, compute_layout
from tracegraph.parsers import GraphFormatError, load_graph
from tracegraph.types import Orientation


def _read_graph(input: str | None) -> TraceGraph:
    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        return load_graph(text)
    except GraphFormatError as e:
        click.echo(f"graph error:\n{e}", err=True)
        sys.exit(1)


def _emit(payload: dict, output: str | None) -> None:
    rendered = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log layout and traversal details to stderr")
def main(verbose: bool) -> None:
    """Trace graph layout and impact analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--algorithm", "-a", type=click.Choice(ALGORITHMS), default="cluster", help="Layout algorithm")
@click.option(
    "--orientation",
    "-d",
    type=str,
    default=Orientation.TopToBottom.value,
    help="Tree orientation (top-to-bottom, left-to-right)",
)
@click.option("--no-refine", "no_refine", is_flag=True, help="Skip the hybrid overlap refinement")
@click.option("--node-spacing", type=float, default=None, help="Tree: minimum sibling spacing")
@click.option("--level-spacing", type=float, default=None, help="Tree: gap between levels")
@click.option("--vertical-spacing", type=float, default=None, help="Cluster: gap between type levels")
@click.option("--cluster-radius", type=float, default=None, help="Cluster: largest satellite radius")
@click.option("--max-layout-width", type=float, default=None, help="Cluster: width centres spread over")
@click.option("--cell-size", type=float, default=None, help="Spatial grid cell size")
@click.option("--min-separation", type=float, default=None, help="Refinement: target centre distance")
@click.option("--max-iterations", type=int, default=None, help="Refinement: iteration cap")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
def layout(
    input: str | None,
    algorithm: str,
    orientation: str,
    no_refine: bool,
    node_spacing: float | None,
    level_spacing: float | None,
    vertical_spacing: float | None,
    cluster_radius: float | None,
    max_layout_width: float | None,
    cell_size: float | None,
    min_separation: float | None,
    max_iterations: int | None,
    output: str | None,
) -> None:
    """Compute node positions for a JSON graph document."""
    config = EngineConfig(algorithm=algorithm, refine=not no_refine)
    try:
        config.tree.orientation = parse_orientation(orientation)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    overrides = [
        (config.tree, "node_spacing", node_spacing),
        (config.tree, "level_spacing", level_spacing),
        (config.cluster, "vertical_spacing", vertical_spacing),
        (config.cluster, "cluster_radius", cluster_radius),
        (config.cluster, "max_layout_width", max_layout_width),
        (config.cluster, "cell_size", cell_size),
        (config.refinement, "cell_size", cell_size),
        (config.refinement, "min_separation", min_separation),
        (config.refinement, "max_iterations", max_iterations),
    ]
    for section, name, value in overrides:
        if value is not None:
            setattr(section, name, value)

    graph = _read_graph(input)
    positions = compute_layout(graph, config)
    _emit(
        {"positions": {node_id: {"x": pos.x, "y": pos.y} for node_id, pos in positions.items()}},
        output,
    )


@main.command()
@click.argument("input", type=click.Path(exists=True))
@click.argument("node_id")
@click.option(
    "--ignore-relation",
    "-i",
    "ignored",
    multiple=True,
    help="Relation type to leave out of the walk (repeatable)",
)
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
def impact(input: str, node_id: str, ignored: tuple[str, ...], output: str | None) -> None:
    """Print the upstream/downstream impact chain of NODE_ID."""
    graph = _read_graph(input)
    if node_id not in graph:
        click.echo(f"error: unknown node '{node_id}'", err=True)
        sys.exit(1)

    chain = ImpactTraversal(graph, ignored).chain(node_id)
    _emit(
        {
            "origin": chain.origin,
            "upstream": sorted(chain.upstream),
            "downstream": sorted(chain.downstream),
            "related": sorted(chain.related),
        },
        output,
    )


if __name__ == "__main__":
    main()
