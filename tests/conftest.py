"""Pytest fixtures for junction-planner tests."""

from pathlib import Path

import pytest

from junction_planner.geometry.constants import (
    CIRCUIT_MAX_CURRENT,
    LEDS_PER_MICRON,
    VOLTAGE_DROP_THRESHOLD,
)
from junction_planner.geometry.models import Edge, PanelStrip, Structure, Vertex

METER = 1_000_000

# Two rows of three vertices, 2 m apart, joined into a ladder
LADDER_VERTEXES = """\
1\t0\t0\t0
2\t2000000\t0\t0
3\t4000000\t0\t0
4\t0\t2000000\t0
5\t2000000\t2000000\t0
6\t4000000\t2000000\t0
"""

LADDER_EDGES = """\
1-2\tdefault\t10.7.1.10#1:0
2-3\tdefault\t10.7.1.10#1:1
4-5\treversed\t10.7.1.10#2:0
5-6\tdefault\t10.7.1.10#2:1
1-4\tdark\tuncontrolled
2-5\tdefault\t10.7.1.11#1:0
3-6\tdefault\t10.7.1.11#1:1
1-5\tdefault\t10.7.1.11#2:0
"""

LADDER_PANELS = """\
PA\t1-2\t2-5\t1-5\tunflipped\t10.7.1.20#1:0
PB\t1-4\t4-5\t1-5\tflipped\tsolid
"""


def make_vertices(*coords: tuple[int, int, int]) -> dict[int, Vertex]:
    """Vertices numbered from 1 in the order given."""
    return {i: Vertex(i, *xyz) for i, xyz in enumerate(coords, start=1)}


def make_edges(vertices: dict[int, Vertex], *pairs: tuple[int, int], **kwargs) -> dict[str, Edge]:
    edges = {}
    for a, b in pairs:
        edge_id = Edge.make_id(a, b)
        edges[edge_id] = Edge(id=edge_id, vertices=(vertices[a], vertices[b]), **kwargs)
    return edges


def load_strip(strip_id: str, vertices: tuple[Vertex, ...], amps: float) -> PanelStrip:
    """A strip drawing (approximately) ``amps`` at full brightness."""
    return PanelStrip(
        panel_id=strip_id,
        index=0,
        vertices=vertices,
        length=amps / LEDS_PER_MICRON,
        max_current_per_led=1.0,
    )


def grid_structure(cols: int, rows: int, spacing: int = 2 * METER) -> Structure:
    """A planar grid with edges between horizontal and vertical neighbors."""
    vertices: dict[int, Vertex] = {}
    for r in range(rows):
        for c in range(cols):
            vid = r * cols + c + 1
            vertices[vid] = Vertex(vid, c * spacing, r * spacing, 0)

    pairs = []
    for r in range(rows):
        for c in range(cols):
            vid = r * cols + c + 1
            if c + 1 < cols:
                pairs.append((vid, vid + 1))
            if r + 1 < rows:
                pairs.append((vid, vid + cols))

    return Structure(vertices=vertices, edges=make_edges(vertices, *pairs))


def assert_valid_plan(model, structure: Structure, graph) -> None:
    """Check the invariants every placement or rebalance must keep."""
    seen = []
    for box in model.boxes():
        for circuit in box.circuits:
            assert circuit.current <= CIRCUIT_MAX_CURRENT
            for strip in circuit.strips:
                seen.append(strip.id)
                ids = [v.id for v in strip.vertices]
                if box.vertex_id not in ids:
                    assert all(
                        graph.distance(box.vertex_id, vid) < VOLTAGE_DROP_THRESHOLD for vid in ids
                    )
                    assert any(box.vertex_id in graph.neighbors(vid) for vid in ids)

    expected = [s.id for s in structure.strips()]
    assert sorted(seen) == sorted(expected)
    assert len(seen) == len(set(seen))


@pytest.fixture
def line_vertices() -> dict[int, Vertex]:
    """Three collinear vertices 1 m apart."""
    return make_vertices((0, 0, 0), (METER, 0, 0), (2 * METER, 0, 0))


@pytest.fixture
def ladder_dir(tmp_path: Path) -> Path:
    """Geometry directory holding a small ladder structure with two panels."""
    (tmp_path / "vertexes.txt").write_text(LADDER_VERTEXES)
    (tmp_path / "edges.txt").write_text(LADDER_EDGES)
    (tmp_path / "panels.txt").write_text(LADDER_PANELS)
    return tmp_path


@pytest.fixture
def grid() -> Structure:
    return grid_structure(6, 5)
