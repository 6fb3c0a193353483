"""Geometry data models for the LED structure.

The structure is a wireframe of vertices joined by edges, with flat
triangular panels spanning some of the triangles. Edges and lit panels
carry LED strips; each strip is the unit of load the allocation engines
assign to junction box circuits.

All positions and lengths are micrometers. Everything here is immutable
once constructed, and derived quantities (length, LED count, current)
are computed once and cached.

Example:
    >>> a = Vertex(id=1, x=0, y=0, z=0)
    >>> b = Vertex(id=2, x=10_000, y=0, z=0)
    >>> edge = Edge(id="1-2", vertices=(a, b))
    >>> len(edge.strips)
    3
    >>> round(edge.strips[0].num_leds, 6)
    0.6
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cached_property
from typing import ClassVar, Union

import numpy as np

from junction_planner.exceptions import GeometryError

from .constants import (
    LEDS_PER_MICRON,
    MAX_CURRENT_PER_LED,
    PANEL_MAX_STRIP_LENGTH,
    PANEL_ROW_PITCH,
    STRIPS_PER_EDGE,
)

__all__ = [
    "Vertex",
    "EdgeStrip",
    "PanelStrip",
    "Strip",
    "Edge",
    "Panel",
    "Structure",
]


@dataclass(frozen=True)
class Vertex:
    """A structure vertex with integer micrometer coordinates."""

    id: int
    x: int
    y: int
    z: int

    @property
    def position(self) -> np.ndarray:
        """Position as a float vector, for vector arithmetic."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def distance(self, other: Vertex) -> float:
        """Euclidean distance to another vertex in micrometers."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


@dataclass(frozen=True, eq=False)
class EdgeStrip:
    """One LED strip running the full length of an edge.

    Attributes:
        edge_id: Id of the owning edge
        index: Position of this strip on the edge (0 to STRIPS_PER_EDGE - 1)
        vertices: The edge's two end vertices
        max_current_per_led: Worst-case draw per LED in amps
    """

    kind: ClassVar[str] = "edge"

    edge_id: str
    index: int
    vertices: tuple[Vertex, Vertex]
    max_current_per_led: float = MAX_CURRENT_PER_LED

    @property
    def id(self) -> str:
        return f"{self.edge_id}/{self.index}"

    @cached_property
    def length(self) -> float:
        return self.vertices[1].distance(self.vertices[0])

    @cached_property
    def num_leds(self) -> float:
        return self.length * LEDS_PER_MICRON

    @cached_property
    def max_current(self) -> float:
        """Current draw with every LED at full white."""
        return self.num_leds * self.max_current_per_led

    def power_contribution(self) -> float:
        """Load this strip adds to a circuit."""
        return self.max_current

    def __repr__(self) -> str:
        return f"EdgeStrip({self.id}, {self.max_current:.3f} A)"


@dataclass(frozen=True, eq=False)
class PanelStrip:
    """One LED strip laid across a panel.

    A panel strip is not tied to a single edge, so its vertices are all
    the vertices of the panel it belongs to.

    Attributes:
        panel_id: Id of the owning panel
        index: Position of this strip within the panel
        vertices: The panel's vertices
        length: Strip length in micrometers
        max_current_per_led: Worst-case draw per LED in amps
    """

    kind: ClassVar[str] = "panel"

    panel_id: str
    index: int
    vertices: tuple[Vertex, ...]
    length: float
    max_current_per_led: float = MAX_CURRENT_PER_LED

    @property
    def id(self) -> str:
        return f"{self.panel_id}/{self.index}"

    @cached_property
    def num_leds(self) -> float:
        return self.length * LEDS_PER_MICRON

    @cached_property
    def current(self) -> float:
        return self.num_leds * self.max_current_per_led

    def power_contribution(self) -> float:
        """Load this strip adds to a circuit."""
        return self.current

    def __repr__(self) -> str:
        return f"PanelStrip({self.id}, {self.current:.3f} A)"


Strip = Union[EdgeStrip, PanelStrip]


@dataclass(frozen=True, eq=False)
class Edge:
    """A structural edge between two vertices, carrying three LED strips."""

    id: str
    vertices: tuple[Vertex, Vertex]
    kind: str = "default"
    max_current_per_led: float = MAX_CURRENT_PER_LED
    strips: tuple[EdgeStrip, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        strips = tuple(
            EdgeStrip(
                edge_id=self.id,
                index=i,
                vertices=self.vertices,
                max_current_per_led=self.max_current_per_led,
            )
            for i in range(STRIPS_PER_EDGE)
        )
        object.__setattr__(self, "strips", strips)

    @staticmethod
    def make_id(v0: int, v1: int) -> str:
        return f"{v0}-{v1}"

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.vertices[0].id, self.vertices[1].id)

    @cached_property
    def length(self) -> float:
        return self.vertices[1].distance(self.vertices[0])

    @cached_property
    def num_leds(self) -> float:
        return sum(s.num_leds for s in self.strips)

    @cached_property
    def max_current(self) -> float:
        return sum(s.max_current for s in self.strips)


@dataclass(frozen=True, eq=False)
class Panel:
    """A flat triangular panel bounded by three edges.

    Only lit panels (whose kind carries a controller address, e.g.
    ``"10.7.1.12#4:0"``) have LEDs. Their strips are laid in parallel
    rows ``row_pitch`` apart, so the total strip length is the panel
    area divided by the pitch. That length is split evenly into the
    fewest strips no longer than ``max_strip_length``.
    """

    id: str
    vertices: tuple[Vertex, ...]
    edge_ids: tuple[str, ...] = ()
    kind: str = "default"
    flipped: bool = False
    max_current_per_led: float = MAX_CURRENT_PER_LED
    row_pitch: float = PANEL_ROW_PITCH
    max_strip_length: float = PANEL_MAX_STRIP_LENGTH
    strips: tuple[PanelStrip, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        ids = [v.id for v in self.vertices]
        if len(ids) != 3 or len(set(ids)) != 3:
            raise GeometryError(
                f"Panel {self.id} is not bounded by exactly three vertices",
                context={"panel": self.id, "vertices": ids},
            )
        if self.row_pitch <= 0 or self.max_strip_length <= 0:
            raise GeometryError(
                f"Panel {self.id} has a non-positive striping parameter",
                context={"row_pitch": self.row_pitch, "max_strip_length": self.max_strip_length},
                suggestions=["Check [panels] row_pitch and max_strip_length in your config"],
            )
        object.__setattr__(self, "strips", self._build_strips())

    def _build_strips(self) -> tuple[PanelStrip, ...]:
        total = self.strip_length
        if total <= 0:
            return ()
        count = math.ceil(total / self.max_strip_length)
        length = total / count
        return tuple(
            PanelStrip(
                panel_id=self.id,
                index=i,
                vertices=self.vertices,
                length=length,
                max_current_per_led=self.max_current_per_led,
            )
            for i in range(count)
        )

    @property
    def lit(self) -> bool:
        return "." in self.kind

    @cached_property
    def area(self) -> float:
        """Triangle area in square micrometers."""
        a, b, c = (v.position for v in self.vertices)
        return float(np.linalg.norm(np.cross(b - a, c - a))) / 2.0

    @cached_property
    def strip_length(self) -> float:
        """Total LED strip length laid on this panel."""
        if not self.lit:
            return 0.0
        return self.area / self.row_pitch

    @cached_property
    def current(self) -> float:
        return sum(s.current for s in self.strips)


@dataclass
class Structure:
    """Loaded geometry: vertices, edges, and panels keyed by id."""

    vertices: dict[int, Vertex]
    edges: dict[str, Edge]
    panels: dict[str, Panel] = field(default_factory=dict)

    def sorted_edges(self) -> list[Edge]:
        return sorted(self.edges.values(), key=lambda e: e.sort_key)

    def sorted_panels(self) -> list[Panel]:
        return sorted(self.panels.values(), key=lambda p: p.id)

    def edge_strips(self) -> list[EdgeStrip]:
        """All edge strips in placement order (edge order, then strip index)."""
        return [strip for edge in self.sorted_edges() for strip in edge.strips]

    def panel_strips(self) -> list[PanelStrip]:
        """All panel strips in placement order (panel id, then strip index)."""
        return [strip for panel in self.sorted_panels() for strip in panel.strips]

    def strips(self) -> list[Strip]:
        return [*self.edge_strips(), *self.panel_strips()]

    @property
    def total_current(self) -> float:
        return sum(s.power_contribution() for s in self.strips())
