"""
Junction box allocation: capacity model, placement, and rebalancing.

Usage:
    from junction_planner.allocation import JunctionBoxBalancer, place_junction_boxes
    from junction_planner.graph import StructureGraph

    graph = StructureGraph(structure.edges)
    model = place_junction_boxes(graph, structure.edges, structure.panels)
    result = JunctionBoxBalancer(graph).balance(model)
"""

from .candidates import assignment_candidates, nearby_vertices
from .models import CapacityModel, Circuit, JunctionBox
from .placement import JunctionBoxPlacer, place_junction_boxes
from .rebalance import BalanceResult, JunctionBoxBalancer, balance_junction_boxes

__all__ = [
    "Circuit",
    "JunctionBox",
    "CapacityModel",
    "assignment_candidates",
    "nearby_vertices",
    "JunctionBoxPlacer",
    "place_junction_boxes",
    "BalanceResult",
    "JunctionBoxBalancer",
    "balance_junction_boxes",
]
