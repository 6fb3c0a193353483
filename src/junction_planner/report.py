"""
Read-only summaries of a capacity model.

Provides:
- PlanReport: per-vertex current and utilization plus global totals
- export_plan: a box -> circuit -> strip manifest for installers,
  serializable as YAML or JSON

Usage:
    report = build_report(model)
    print(report.box_count, report.average_utilization)

    Path("plan.yaml").write_text(plan_to_yaml(model))
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from junction_planner.allocation.models import CapacityModel

__all__ = [
    "VertexSummary",
    "PlanReport",
    "build_report",
    "export_plan",
    "plan_to_yaml",
    "plan_to_json",
]


@dataclass
class VertexSummary:
    """Load at one vertex, across all boxes located there."""

    vertex_id: int
    box_count: int
    current: float
    utilization: float  # mean of the boxes' utilizations

    def to_dict(self) -> dict[str, Any]:
        return {
            "vertex": self.vertex_id,
            "boxes": self.box_count,
            "current_a": round(self.current, 3),
            "utilization": round(self.utilization, 4),
        }


@dataclass
class PlanReport:
    """Aggregate view of a placement plan."""

    vertices: list[VertexSummary] = field(default_factory=list)
    box_count: int = 0
    strip_count: int = 0
    total_current: float = 0.0
    capacity: float = 0.0
    average_utilization: float = 0.0

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "vertices": [v.to_dict() for v in self.vertices],
            "totals": {
                "boxes": self.box_count,
                "vertices": self.vertex_count,
                "strips": self.strip_count,
                "current_a": round(self.total_current, 3),
                "capacity_a": round(self.capacity, 3),
                "average_utilization": round(self.average_utilization, 4),
            },
        }


def build_report(model: CapacityModel) -> PlanReport:
    """Summarize a model by vertex, in ascending vertex id order."""
    vertices = []
    for vertex_id in sorted(model.vertex_ids):
        boxes = model.boxes_at(vertex_id)
        if not boxes:
            continue
        vertices.append(
            VertexSummary(
                vertex_id=vertex_id,
                box_count=len(boxes),
                current=sum(b.current for b in boxes),
                utilization=sum(b.utilization for b in boxes) / len(boxes),
            )
        )

    return PlanReport(
        vertices=vertices,
        box_count=model.box_count,
        strip_count=model.strip_count,
        total_current=model.current,
        capacity=model.capacity,
        average_utilization=model.utilization,
    )


def export_plan(model: CapacityModel) -> dict[str, Any]:
    """Nested manifest of every box, its non-empty circuits, and their strips."""
    boxes = []
    for box in sorted(model.boxes(), key=lambda b: (b.vertex_id, b.serial)):
        circuits = [
            {
                "circuit": c.index,
                "current_a": round(c.current, 3),
                "strips": [s.id for s in c.strips],
            }
            for c in box.circuits
            if not c.is_empty
        ]
        boxes.append(
            {
                "box": box.id,
                "vertex": box.vertex_id,
                "current_a": round(box.current, 3),
                "utilization": round(box.utilization, 4),
                "circuits": circuits,
            }
        )
    return {"junction_boxes": boxes}


def plan_to_yaml(model: CapacityModel) -> str:
    return yaml.safe_dump(export_plan(model), default_flow_style=False, sort_keys=False)


def plan_to_json(model: CapacityModel, indent: int = 2) -> str:
    return json.dumps(export_plan(model), indent=indent)
