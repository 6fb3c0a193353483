"""Progress indicators for CLI operations.

All progress output goes to stderr to keep stdout clean for data.

Usage:
    from junction_planner.cli.progress import spinner, print_status

    with spinner("Rebalancing junction boxes...", quiet=args.quiet):
        result = balancer.balance(model)

    print_status("Placed 412 strips", quiet=args.quiet)
"""

import sys
from contextlib import contextmanager


def is_terminal() -> bool:
    """Check if stderr is attached to a terminal."""
    return sys.stderr.isatty()


@contextmanager
def spinner(desc: str = "Processing...", quiet: bool = False):
    """Display a spinner for operations without measurable progress.

    Args:
        desc: Description to show
        quiet: If True, no spinner is shown
    """
    if quiet or not is_terminal():
        yield
        return

    from rich.live import Live
    from rich.spinner import Spinner

    console = _get_stderr_console()
    spin = Spinner("dots", text=desc)

    with Live(spin, console=console, refresh_per_second=10, transient=True):
        yield


def print_status(message: str, style: str = "bold", quiet: bool = False) -> None:
    """Print a styled status message to stderr.

    Args:
        message: Message to print
        style: Rich style to apply
        quiet: If True, nothing is printed
    """
    if quiet:
        return

    console = _get_stderr_console()
    console.print(message, style=style)


def _get_stderr_console():
    """Get a Rich Console that outputs to stderr."""
    from rich.console import Console

    return Console(stderr=True, force_terminal=None)
