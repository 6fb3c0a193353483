"""
Logging configuration for junction-planner.

All package modules log through children of the ``junction_planner``
logger, which is silent until verbose output is enabled.
"""

import logging

_logger = logging.getLogger("junction_planner")
_logger.addHandler(logging.NullHandler())  # Default: no output


def enable_verbose(level: str = "INFO", format: str = None) -> None:
    """Enable verbose logging for debugging.

    Shows box creation, evacuation attempts, and pass summaries from the
    allocation engines.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        enable_verbose("DEBUG")
        model = place_junction_boxes(graph, structure.edges)
        disable_verbose()
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))

    if format is None:
        format = "[%(levelname)s] %(name)s: %(message)s"

    handler.setFormatter(logging.Formatter(format))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Disable verbose logging."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)
