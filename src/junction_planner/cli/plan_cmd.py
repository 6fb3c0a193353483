"""Plan command: place and rebalance junction boxes for a structure.

Usage:
    junction-planner plan resources/vehicle
    junction-planner plan resources/vehicle --format json
    junction-planner plan resources/vehicle --no-rebalance -o plan.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from junction_planner.allocation import JunctionBoxBalancer, JunctionBoxPlacer
from junction_planner.config import OUTPUT_FORMATS, Config
from junction_planner.exceptions import PlannerError
from junction_planner.geometry import load_structure
from junction_planner.graph import StructureGraph
from junction_planner.logging import enable_verbose
from junction_planner.report import PlanReport, build_report, plan_to_json, plan_to_yaml

from .progress import print_status, spinner
from .utils import print_error


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register plan arguments on ``parser``."""
    parser.add_argument(
        "geometry",
        help="Directory containing vertexes.txt, edges.txt and (optionally) panels.txt",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: from config, else table)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the box/circuit/strip manifest here (.yaml/.yml for YAML, else JSON)",
    )
    parser.add_argument(
        "--no-rebalance",
        action="store_true",
        help="Skip the rebalancing pass",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=None,
        help="Maximum rebalancing passes (0 = until no improvement)",
    )
    parser.add_argument(
        "--max-current-per-led",
        type=float,
        default=None,
        help="Worst-case current per LED in amps",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress informational output"
    )


def run(args: argparse.Namespace) -> int:
    """Execute the plan command from parsed arguments."""
    try:
        config = Config.load()
    except PlannerError as e:
        print_error(e)
        return 1

    output_format = args.format or config.defaults.format
    verbose = args.verbose or config.defaults.verbose
    quiet = args.quiet or config.defaults.quiet
    rebalance = config.planning.rebalance and not args.no_rebalance

    per_led = config.physics.max_current_per_led
    if args.max_current_per_led is not None:
        if args.max_current_per_led <= 0:
            print("Error: --max-current-per-led must be positive", file=sys.stderr)
            return 1
        per_led = args.max_current_per_led

    max_passes = config.planning.pass_limit
    if args.max_passes is not None:
        if args.max_passes < 0:
            print("Error: --max-passes must not be negative", file=sys.stderr)
            return 1
        max_passes = args.max_passes or None

    if verbose:
        enable_verbose("DEBUG")

    geometry = Path(args.geometry)
    if not geometry.is_dir():
        print(f"Error: Geometry directory not found: {geometry}", file=sys.stderr)
        return 1

    try:
        with spinner("Loading geometry...", quiet=quiet):
            structure = load_structure(
                geometry,
                max_current_per_led=per_led,
                row_pitch=config.panels.row_pitch,
                max_strip_length=config.panels.max_strip_length,
            )
            graph = StructureGraph(structure.edges)

        with spinner("Placing junction boxes...", quiet=quiet):
            model = JunctionBoxPlacer(graph).place(structure.edges, structure.panels)
        placed_boxes = model.box_count
        print_status(
            f"Placed {model.strip_count} strips into {placed_boxes} junction boxes",
            quiet=quiet,
        )

        balance = None
        if rebalance:
            with spinner("Rebalancing junction boxes...", quiet=quiet):
                balance = JunctionBoxBalancer(graph, max_passes=max_passes).balance(model)
            model = balance.model
            print_status(
                f"Rebalanced to {model.box_count} junction boxes in {balance.passes} passes",
                quiet=quiet,
            )
    except PlannerError as e:
        print_error(e, verbose=verbose)
        return 1

    report = build_report(model)
    summary: dict[str, Any] = {
        "placement": {"boxes": placed_boxes},
        "rebalance": balance.to_dict() if balance else None,
        "report": report.to_dict(),
    }

    if output_format == "json":
        print(json.dumps(summary, indent=2))
    elif output_format == "yaml":
        print(yaml.safe_dump(summary, default_flow_style=False, sort_keys=False), end="")
    else:
        output_table(report, placed_boxes)

    if args.output:
        out_path = Path(args.output)
        if out_path.suffix in (".yaml", ".yml"):
            out_path.write_text(plan_to_yaml(model))
        else:
            out_path.write_text(plan_to_json(model))
        print_status(f"Wrote plan to {out_path}", quiet=quiet)

    return 0


def output_table(report: PlanReport, placed_boxes: int) -> None:
    """Print the per-vertex report as a Rich table."""
    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(title="Junction boxes by vertex")
    table.add_column("Vertex", justify="right")
    table.add_column("Boxes", justify="right")
    table.add_column("Current (A)", justify="right")
    table.add_column("Utilization", justify="right")

    for row in report.vertices:
        table.add_row(
            str(row.vertex_id),
            str(row.box_count),
            f"{row.current:.2f}",
            f"{row.utilization * 100:.2f}%",
        )

    console.print(table)
    console.print(f"{report.vertex_count} vertices with junction boxes")
    console.print(f"{report.box_count} total junction boxes (initial placement: {placed_boxes})")
    console.print(f"{report.total_current:.2f} A of {report.capacity:.0f} A capacity")
    console.print(f"{report.average_utilization * 100:.2f}% average utilization")


def main(argv: list[str] | None = None) -> int:
    """Standalone entry point for the plan command."""
    parser = argparse.ArgumentParser(
        prog="junction-planner plan",
        description="Place junction boxes and assign LED strips to circuits",
    )
    add_arguments(parser)
    args = parser.parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
