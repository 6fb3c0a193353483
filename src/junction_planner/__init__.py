"""
junction-planner: Junction box placement for LED-strip wireframe structures.

Plans where to put electrical junction boxes on a 3D structure of
vertices, edges and lit panels, and which fused 15 A circuit feeds each
LED strip, keeping every feed run under the voltage-drop distance limit.

Modules:
    geometry: Vertices, edges, panels, their LED strips, and file loaders
    graph: Adjacency and shortest-path distances over the structure
    allocation: Capacity model, greedy placement, and rebalancing
    report: Per-vertex summaries and installer manifests
    config: TOML configuration
    cli: The ``junction-planner`` / ``jbp`` command

Quick Start::

    from junction_planner import (
        StructureGraph,
        JunctionBoxBalancer,
        build_report,
        load_structure,
        place_junction_boxes,
    )

    structure = load_structure("resources/vehicle")
    graph = StructureGraph(structure.edges)
    model = place_junction_boxes(graph, structure.edges, structure.panels)
    model = JunctionBoxBalancer(graph).balance(model).model
    print(build_report(model).box_count)
"""

__version__ = "0.1.0"

from junction_planner.allocation import (
    BalanceResult,
    CapacityModel,
    Circuit,
    JunctionBox,
    JunctionBoxBalancer,
    JunctionBoxPlacer,
    balance_junction_boxes,
    place_junction_boxes,
)
from junction_planner.exceptions import (
    CircuitOverloadError,
    ConfigError,
    GeometryError,
    ParseError,
    PlannerError,
)
from junction_planner.geometry import (
    Edge,
    EdgeStrip,
    Panel,
    PanelStrip,
    Structure,
    Vertex,
    load_structure,
)
from junction_planner.graph import StructureGraph
from junction_planner.report import PlanReport, build_report, export_plan

__all__ = [
    # Version
    "__version__",
    # Geometry
    "Vertex",
    "Edge",
    "EdgeStrip",
    "Panel",
    "PanelStrip",
    "Structure",
    "load_structure",
    # Graph
    "StructureGraph",
    # Allocation
    "Circuit",
    "JunctionBox",
    "CapacityModel",
    "JunctionBoxPlacer",
    "place_junction_boxes",
    "JunctionBoxBalancer",
    "BalanceResult",
    "balance_junction_boxes",
    # Reporting
    "PlanReport",
    "build_report",
    "export_plan",
    # Errors
    "PlannerError",
    "ParseError",
    "GeometryError",
    "CircuitOverloadError",
    "ConfigError",
]
