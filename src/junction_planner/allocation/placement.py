"""
Greedy initial placement of junction boxes.

Every strip is visited once, edge strips first, then panel strips. A
strip goes to the least-utilized eligible circuit, which spreads load
across the boxes that already exist. When nothing is eligible a new box
is created at the strip's first vertex and the strip takes its circuit 0.

Usage:
    graph = StructureGraph(structure.edges)
    model = place_junction_boxes(graph, structure.edges, structure.panels)
    print(model.box_count, "boxes")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from junction_planner.exceptions import CircuitOverloadError
from junction_planner.geometry.constants import CIRCUIT_MAX_CURRENT, VOLTAGE_DROP_THRESHOLD

from .candidates import assignment_candidates
from .models import CapacityModel, Circuit

if TYPE_CHECKING:
    from junction_planner.geometry.models import Edge, Panel, Strip
    from junction_planner.graph import StructureGraph

logger = logging.getLogger(__name__)

__all__ = ["JunctionBoxPlacer", "place_junction_boxes"]


class JunctionBoxPlacer:
    """Assigns strips to circuits, creating boxes where needed.

    Args:
        graph: Structure graph
        threshold: Voltage-drop distance limit in micrometers
    """

    def __init__(self, graph: StructureGraph, threshold: float = VOLTAGE_DROP_THRESHOLD):
        self.graph = graph
        self.threshold = threshold

    def place(
        self,
        edges: dict[str, Edge] | Iterable[Edge],
        panels: dict[str, Panel] | Iterable[Panel] = (),
        model: CapacityModel | None = None,
    ) -> CapacityModel:
        """Place every edge strip, then every panel strip.

        Edges are visited in ascending ``(v0, v1)`` order and panels in
        ascending id order, each strip in index order.

        Args:
            edges: Edges to place (mapping or iterable)
            panels: Panels to place (mapping or iterable)
            model: Existing model to add to; a new one is created if omitted.
                It is modified in place.

        Returns:
            The model with every strip assigned
        """
        if model is None:
            model = CapacityModel()
        if isinstance(edges, dict):
            edges = edges.values()
        if isinstance(panels, dict):
            panels = panels.values()

        boxes_before = model.box_count
        placed = 0

        for edge in sorted(edges, key=lambda e: e.sort_key):
            for strip in edge.strips:
                self.place_strip(strip, model)
                placed += 1

        for panel in sorted(panels, key=lambda p: p.id):
            for strip in panel.strips:
                self.place_strip(strip, model)
                placed += 1

        logger.info(
            "Placed %d strips into %d junction boxes (%d new)",
            placed,
            model.box_count,
            model.box_count - boxes_before,
        )
        return model

    def place_strip(self, strip: Strip, model: CapacityModel) -> Circuit:
        """Assign a single strip and return the circuit it went to.

        Raises:
            CircuitOverloadError: If the strip alone exceeds a circuit's
                rating. The model is left unchanged.
        """
        if strip.power_contribution() > CIRCUIT_MAX_CURRENT:
            raise CircuitOverloadError(
                f"Strip {strip.id} draws more than one circuit can supply",
                context={
                    "contribution": round(strip.power_contribution(), 6),
                    "limit": CIRCUIT_MAX_CURRENT,
                },
                suggestions=[
                    "Split the strip into shorter runs",
                    "Check max_current_per_led in [physics]",
                ],
            )

        candidates = assignment_candidates(strip, self.graph, model, threshold=self.threshold)

        if not candidates:
            vertex_id = strip.vertices[0].id
            box = model.add_box(vertex_id)
            circuit = box.circuits[0]
            logger.debug("New junction box %s for strip %s", box.id, strip.id)
        else:
            circuit = min(candidates, key=lambda c: c.utilization)

        circuit.add(strip)
        return circuit


def place_junction_boxes(
    graph: StructureGraph,
    edges: dict[str, Edge] | Iterable[Edge],
    panels: dict[str, Panel] | Iterable[Panel] = (),
    threshold: float = VOLTAGE_DROP_THRESHOLD,
) -> CapacityModel:
    """Run initial placement into a fresh CapacityModel."""
    return JunctionBoxPlacer(graph, threshold=threshold).place(edges, panels)
