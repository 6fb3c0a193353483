"""
Command-line interface for junction-planner.

Provides CLI commands via the `junction-planner` or `jbp` command:

    junction-planner plan <geometry-dir>   - Place and rebalance junction boxes
    junction-planner config                - View or initialize configuration

Examples:
    jbp plan resources/vehicle
    jbp plan resources/vehicle --format json --no-rebalance
    jbp plan resources/vehicle -o plan.yaml --max-current-per-led 0.04
    jbp config --init
"""

import argparse
import sys
from typing import List, Optional

from junction_planner import __version__

from . import config_cmd, plan_cmd

__all__ = ["main"]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for junction-planner CLI."""
    parser = argparse.ArgumentParser(
        prog="junction-planner",
        description="Junction box planning for LED structures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--version", action="version", version=f"junction-planner {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    plan_parser = subparsers.add_parser(
        "plan", help="Place junction boxes and assign strips to circuits"
    )
    plan_cmd.add_arguments(plan_parser)

    config_parser = subparsers.add_parser("config", help="View or initialize configuration")
    config_cmd.add_arguments(config_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "plan":
        return plan_cmd.run(args)
    elif args.command == "config":
        return config_cmd.run(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
