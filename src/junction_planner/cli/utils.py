"""Error reporting for CLI commands.

Commands catch ``PlannerError`` (bad geometry, bad config, an overloaded
circuit) and hand it to ``print_error``. On a terminal the message, its
context and its suggestions are printed in colour; when stderr is
redirected the same error becomes a single ``Error: ...`` block so that
``--format json`` output on stdout stays machine readable.
"""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from junction_planner.exceptions import PlannerError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console"]

_error_console: Console | None = None


def get_error_console() -> Console:
    """The shared stderr console used for planner errors."""
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Report a failed planning run on stderr.

    Args:
        e: The error that stopped the command
        verbose: Print the traceback instead (``plan -v``)
        use_rich: Force coloured output on or off; by default it is used
            only when stderr is a terminal
    """
    if verbose:
        print(traceback.format_exc(), file=sys.stderr)
        return

    console = get_error_console()
    if use_rich is None:
        use_rich = console.is_terminal

    if use_rich and isinstance(e, PlannerError):
        _print_planner_error(console, e)
    else:
        print(format_error(e), file=sys.stderr)


def _print_planner_error(console: Console, e: PlannerError) -> None:
    console.print(f"[bold red]Error:[/bold red] {e.message}", highlight=False)
    for key, value in e.context.items():
        console.print(f"  [dim]{key}:[/dim] {value}", highlight=False)
    for suggestion in e.suggestions:
        console.print(f"  [yellow]-[/yellow] {suggestion}", highlight=False)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Plain-text form of an error, e.g. for a redirected stderr.

    A ``PlannerError`` already renders its context and suggestions, so
    only unexpected exceptions get their class name prefixed.
    """
    if verbose:
        return traceback.format_exc()
    if isinstance(e, PlannerError):
        return f"Error: {e}"
    return f"Error: {type(e).__name__}: {e}"
