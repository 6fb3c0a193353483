"""
Custom exception hierarchy for junction-planner.

Provides consistent error handling with context, suggestions, and actionable guidance.
All exceptions include:
- Context information (file paths, line numbers, circuit ids, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from junction_planner.exceptions import ParseError, GeometryError

    # Raise with context and suggestions
    raise ParseError(
        "Vertex coordinate is not an integer",
        file_path="vertexes.txt",
        line=12,
        suggestions=["Coordinates are integer micrometers"],
    )

    raise GeometryError(
        "Edge references an unknown vertex",
        context={"edge": "12-40", "vertex": 40},
    )

A failed evacuation during rebalancing is not an error and never raises;
only broken inputs and violated invariants do.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class PlannerError(Exception):
    """
    Base exception for all junction-planner errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (file, line, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ParseError(PlannerError):
    """
    Geometry file parsing failed.

    Raised when a vertex, edge, or panel file row cannot be parsed.

    Example::

        raise ParseError(
            "Expected 4 columns, found 3",
            file_path="vertexes.txt",
            line=7,
            suggestions=["Columns are: id, x, y, z (tab separated)"],
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        line: Optional[int] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        # Build context from convenience parameters
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if line is not None and "line" not in ctx:
            ctx["line"] = line

        super().__init__(message, ctx, suggestions)


class GeometryError(PlannerError):
    """
    Structure geometry is inconsistent.

    Raised for references to unknown vertices or edges, and for panels
    that are not bounded by exactly three vertices.

    Example::

        raise GeometryError(
            "Panel is not a triangle",
            context={"panel": "SUA", "vertices": [1, 2, 3, 4]},
        )
    """

    pass


class CircuitOverloadError(PlannerError):
    """
    An assignment would push a circuit past its rated current.

    The allocation engines only ever pick circuits with enough headroom,
    so this signals a logic error or a single strip that draws more than
    one circuit can supply.

    Example::

        raise CircuitOverloadError(
            "Circuit 12.0-3 cannot accept strip 12-40/1",
            context={"current": 14.2, "contribution": 1.1, "limit": 15},
        )
    """

    pass


class ConfigError(PlannerError):
    """
    Configuration file is invalid or unreadable.

    Example::

        raise ConfigError(
            "Invalid TOML in .junction-planner.toml",
            suggestions=["Check for an unclosed string or table header"],
        )
    """

    pass


__all__ = [
    "PlannerError",
    "ParseError",
    "GeometryError",
    "CircuitOverloadError",
    "ConfigError",
]
