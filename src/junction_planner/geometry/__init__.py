"""
Structure geometry: vertices, edges, panels, and their LED strips.

Usage:
    from junction_planner.geometry import load_structure

    structure = load_structure("resources/vehicle")
    for strip in structure.strips():
        print(strip.id, strip.power_contribution())
"""

from .loader import load_edges, load_panels, load_structure, load_vertices
from .models import Edge, EdgeStrip, Panel, PanelStrip, Strip, Structure, Vertex

__all__ = [
    "Vertex",
    "Edge",
    "EdgeStrip",
    "Panel",
    "PanelStrip",
    "Strip",
    "Structure",
    "load_vertices",
    "load_edges",
    "load_panels",
    "load_structure",
]
