"""Loaders for the tab-separated structure geometry files.

File formats (one record per line, tab separated, no header):

    vertexes.txt    id  x  y  z
    edges.txt       id  [kind  controller ...]     id is "<v0>-<v1>"
    panels.txt      id  e0  e1  e2  flip  kind

Extra trailing columns in ``edges.txt`` are ignored. Blank lines are
skipped everywhere.

Usage:
    from junction_planner.geometry.loader import load_structure

    structure = load_structure("resources/vehicle")
    print(len(structure.edges), "edges")
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterator, Union

from junction_planner.exceptions import GeometryError, ParseError

from .constants import MAX_CURRENT_PER_LED, PANEL_MAX_STRIP_LENGTH, PANEL_ROW_PITCH
from .models import Edge, Panel, Structure, Vertex

logger = logging.getLogger(__name__)

__all__ = [
    "VERTICES_FILENAME",
    "EDGES_FILENAME",
    "PANELS_FILENAME",
    "load_vertices",
    "load_edges",
    "load_panels",
    "load_structure",
]

VERTICES_FILENAME = "vertexes.txt"
EDGES_FILENAME = "edges.txt"
PANELS_FILENAME = "panels.txt"

PathLike = Union[str, Path]


def _read_rows(path: Path) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, columns) for each non-blank row."""
    try:
        with open(path, newline="", encoding="utf-8") as f:
            for line_no, row in enumerate(csv.reader(f, delimiter="\t"), start=1):
                row = [col.strip() for col in row]
                if not any(row):
                    continue
                yield line_no, row
    except OSError as e:
        raise ParseError(
            f"Cannot read geometry file: {e}",
            file_path=path,
        ) from e


def _parse_int(value: str, what: str, path: Path, line: int) -> int:
    try:
        return int(value)
    except ValueError:
        raise ParseError(
            f"Invalid {what}: {value!r}",
            file_path=path,
            line=line,
            suggestions=[f"{what.capitalize()} must be an integer"],
        ) from None


def load_vertices(path: PathLike) -> dict[int, Vertex]:
    """Load vertices keyed by id.

    Args:
        path: Path to a vertexes.txt file

    Returns:
        Mapping of vertex id to Vertex

    Raises:
        ParseError: On a malformed row or duplicate id
    """
    path = Path(path)
    vertices: dict[int, Vertex] = {}

    for line, row in _read_rows(path):
        if len(row) != 4:
            raise ParseError(
                f"Expected 4 columns, found {len(row)}",
                file_path=path,
                line=line,
                suggestions=["Columns are: id, x, y, z (tab separated)"],
            )
        vid = _parse_int(row[0], "vertex id", path, line)
        x, y, z = (_parse_int(c, "coordinate", path, line) for c in row[1:])
        if vid in vertices:
            raise ParseError(f"Duplicate vertex id {vid}", file_path=path, line=line)
        vertices[vid] = Vertex(id=vid, x=x, y=y, z=z)

    logger.debug("Loaded %d vertices from %s", len(vertices), path)
    return vertices


def load_edges(
    path: PathLike,
    vertices: dict[int, Vertex],
    max_current_per_led: float = MAX_CURRENT_PER_LED,
) -> dict[str, Edge]:
    """Load edges keyed by id, resolving their vertices.

    Args:
        path: Path to an edges.txt file
        vertices: Previously loaded vertices
        max_current_per_led: Per-LED draw used for the edges' strips

    Returns:
        Mapping of edge id to Edge

    Raises:
        ParseError: On a malformed edge id or a repeated one
        GeometryError: If an edge names an unknown vertex
    """
    path = Path(path)
    edges: dict[str, Edge] = {}

    for line, row in _read_rows(path):
        edge_id = row[0]
        ends = edge_id.split("-")
        if len(ends) != 2:
            raise ParseError(
                f"Edge id {edge_id!r} is not of the form '<v0>-<v1>'",
                file_path=path,
                line=line,
            )
        ids = [_parse_int(e, "vertex id", path, line) for e in ends]

        missing = [vid for vid in ids if vid not in vertices]
        if missing:
            raise GeometryError(
                f"Edge {edge_id} references unknown vertex {missing[0]}",
                context={"file": str(path), "line": line, "edge": edge_id},
            )

        if edge_id in edges:
            raise ParseError(f"Duplicate edge id {edge_id}", file_path=path, line=line)

        kind = row[1] if len(row) > 1 and row[1] else "default"
        edges[edge_id] = Edge(
            id=edge_id,
            vertices=(vertices[ids[0]], vertices[ids[1]]),
            kind=kind,
            max_current_per_led=max_current_per_led,
        )

    logger.debug("Loaded %d edges from %s", len(edges), path)
    return edges


def load_panels(
    path: PathLike,
    edges: dict[str, Edge],
    max_current_per_led: float = MAX_CURRENT_PER_LED,
    row_pitch: float = PANEL_ROW_PITCH,
    max_strip_length: float = PANEL_MAX_STRIP_LENGTH,
) -> dict[str, Panel]:
    """Load panels keyed by id.

    A panel's vertices are collected from its three edges in first-seen
    order, so the first vertex of its first edge comes first.

    Args:
        path: Path to a panels.txt file
        edges: Previously loaded edges
        max_current_per_led: Per-LED draw used for the panels' strips
        row_pitch: Spacing between LED rows in micrometers
        max_strip_length: Longest single panel strip in micrometers

    Returns:
        Mapping of panel id to Panel

    Raises:
        ParseError: On a row with the wrong column count or flip value
        GeometryError: On an unknown edge or a non-triangular panel
    """
    path = Path(path)
    panels: dict[str, Panel] = {}

    for line, row in _read_rows(path):
        if len(row) != 6:
            raise ParseError(
                f"Expected 6 columns, found {len(row)}",
                file_path=path,
                line=line,
                suggestions=["Columns are: id, edge0, edge1, edge2, flip, kind"],
            )
        panel_id, e0, e1, e2, flip, kind = row

        if flip not in ("flipped", "unflipped"):
            raise ParseError(
                f"Panel {panel_id} is neither flipped nor unflipped: {flip!r}",
                file_path=path,
                line=line,
            )

        bounding = []
        for edge_id in (e0, e1, e2):
            edge = edges.get(edge_id)
            if edge is None:
                raise GeometryError(
                    f"Panel {panel_id} references unknown edge {edge_id}",
                    context={"file": str(path), "line": line, "panel": panel_id},
                )
            bounding.append(edge)

        panel_vertices: dict[int, Vertex] = {}
        for edge in bounding:
            for vertex in edge.vertices:
                panel_vertices.setdefault(vertex.id, vertex)

        panels[panel_id] = Panel(
            id=panel_id,
            vertices=tuple(panel_vertices.values()),
            edge_ids=(e0, e1, e2),
            kind=kind,
            flipped=flip == "flipped",
            max_current_per_led=max_current_per_led,
            row_pitch=row_pitch,
            max_strip_length=max_strip_length,
        )

    logger.debug("Loaded %d panels from %s", len(panels), path)
    return panels


def load_structure(
    directory: PathLike,
    max_current_per_led: float = MAX_CURRENT_PER_LED,
    row_pitch: float = PANEL_ROW_PITCH,
    max_strip_length: float = PANEL_MAX_STRIP_LENGTH,
) -> Structure:
    """Load a complete structure from a geometry directory.

    ``vertexes.txt`` and ``edges.txt`` are required; ``panels.txt`` is
    optional.

    Args:
        directory: Directory holding the geometry files
        max_current_per_led: Per-LED draw in amps
        row_pitch: Panel LED row spacing in micrometers
        max_strip_length: Longest single panel strip in micrometers

    Returns:
        Fully populated Structure

    Raises:
        ParseError: If a required file is missing or malformed
        GeometryError: If the files reference each other inconsistently
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ParseError(
            f"Geometry directory not found: {directory}",
            suggestions=[f"Expected a directory containing {VERTICES_FILENAME} and {EDGES_FILENAME}"],
        )

    vertices = load_vertices(directory / VERTICES_FILENAME)
    edges = load_edges(directory / EDGES_FILENAME, vertices, max_current_per_led)

    panels: dict[str, Panel] = {}
    panels_path = directory / PANELS_FILENAME
    if panels_path.exists():
        panels = load_panels(
            panels_path,
            edges,
            max_current_per_led=max_current_per_led,
            row_pitch=row_pitch,
            max_strip_length=max_strip_length,
        )

    logger.info(
        "Loaded structure: %d vertices, %d edges, %d panels",
        len(vertices),
        len(edges),
        len(panels),
    )
    return Structure(vertices=vertices, edges=edges, panels=panels)
