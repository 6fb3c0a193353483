"""Circuit candidate search shared by placement and rebalancing.

A circuit is eligible for a strip when it has headroom for the strip's
load and its box is close enough that the feed wire stays under the
voltage-drop limit:

1. Boxes located at one of the strip's own vertices are tried first.
2. Only if none of those circuits has headroom, boxes at vertices one
   edge away are tried, provided the neighbor is strictly closer than
   the threshold (along the structure) to every vertex of the strip.

Candidates come back in a fixed order (strip vertex order, then box
creation order, then circuit index) so that ``min``/``max`` tie-breaks
are deterministic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from junction_planner.geometry.constants import VOLTAGE_DROP_THRESHOLD

if TYPE_CHECKING:
    from junction_planner.geometry.models import Strip
    from junction_planner.graph import StructureGraph

    from .models import CapacityModel, Circuit, JunctionBox

__all__ = ["assignment_candidates", "nearby_vertices"]


def nearby_vertices(
    strip: Strip,
    graph: StructureGraph,
    threshold: float = VOLTAGE_DROP_THRESHOLD,
) -> list[int]:
    """Neighbor vertices close enough to feed ``strip``.

    Args:
        strip: Strip to be fed
        graph: Structure graph
        threshold: Exclusive distance limit in micrometers

    Returns:
        One-hop neighbors of any strip vertex whose shortest-path distance
        to every strip vertex is below ``threshold``, in first-seen order.
    """
    seen: dict[int, None] = {}
    for vertex in strip.vertices:
        for neighbor in sorted(graph.neighbors(vertex.id)):
            seen.setdefault(neighbor, None)

    return [
        v
        for v in seen
        if all(graph.distance(v, w.id) < threshold for w in strip.vertices)
    ]


def _eligible(
    boxes: list[JunctionBox],
    strip: Strip,
    exclude: JunctionBox | None,
) -> list[Circuit]:
    return [
        circuit
        for box in boxes
        if exclude is None or box.serial != exclude.serial
        for circuit in box.circuits
        if circuit.can_accept(strip)
    ]


def assignment_candidates(
    strip: Strip,
    graph: StructureGraph,
    model: CapacityModel,
    exclude: JunctionBox | None = None,
    threshold: float = VOLTAGE_DROP_THRESHOLD,
) -> list[Circuit]:
    """Circuits in ``model`` that could take ``strip``.

    Args:
        strip: Edge or panel strip to place
        graph: Structure graph for neighbor and distance queries
        model: Capacity model to search
        exclude: Box whose circuits are never candidates (the box being
            evacuated during rebalancing)
        threshold: Voltage-drop distance limit in micrometers

    Returns:
        Eligible circuits, possibly empty
    """
    candidates: list[Circuit] = []
    for vertex in strip.vertices:
        candidates += _eligible(model.boxes_at(vertex.id), strip, exclude)

    if candidates:
        return candidates

    for vertex_id in nearby_vertices(strip, graph, threshold):
        candidates += _eligible(model.boxes_at(vertex_id), strip, exclude)

    return candidates
