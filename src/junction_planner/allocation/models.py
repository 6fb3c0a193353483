"""
Capacity model: junction boxes, their fused circuits, and strip assignments.

A CapacityModel is the one mutable structure the placement and
rebalancing engines work on. Geometry is shared read-only between
models; boxes, circuits and assignment lists are owned by exactly one
model. ``CapacityModel.copy()`` duplicates all of the owned structure, so
a trial copy can be mutated freely and either discarded or promoted to
the live model.

Current and utilization are always derived from circuit contents, never
stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from junction_planner.exceptions import CircuitOverloadError
from junction_planner.geometry.constants import CIRCUIT_MAX_CURRENT, CIRCUITS_PER_BOX
from junction_planner.geometry.models import EdgeStrip, PanelStrip, Strip

__all__ = ["Circuit", "JunctionBox", "CapacityModel"]


@dataclass
class Circuit:
    """A 15 A fused output of a junction box.

    Attributes:
        vertex_id: Vertex where the owning box is located
        box_serial: Serial of the owning box within its model
        index: Circuit number within the box (0-15)
        strips: Strips assigned to this circuit, in assignment order
    """

    vertex_id: int
    box_serial: int
    index: int
    strips: list[Strip] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.vertex_id}.{self.box_serial}-{self.index}"

    @property
    def key(self) -> tuple[int, int]:
        """Identity within a model lineage: (box serial, index)."""
        return (self.box_serial, self.index)

    @property
    def edge_strips(self) -> list[EdgeStrip]:
        return [s for s in self.strips if s.kind == "edge"]

    @property
    def panel_strips(self) -> list[PanelStrip]:
        return [s for s in self.strips if s.kind == "panel"]

    @property
    def current(self) -> float:
        return sum(s.power_contribution() for s in self.strips)

    @property
    def utilization(self) -> float:
        return self.current / CIRCUIT_MAX_CURRENT

    @property
    def headroom(self) -> float:
        return CIRCUIT_MAX_CURRENT - self.current

    @property
    def is_empty(self) -> bool:
        return not self.strips

    def can_accept(self, strip: Strip) -> bool:
        """Whether adding ``strip`` keeps this circuit within its rating."""
        return self.current + strip.power_contribution() <= CIRCUIT_MAX_CURRENT

    def add(self, strip: Strip) -> None:
        """Assign a strip to this circuit.

        Raises:
            CircuitOverloadError: If the circuit cannot accept the strip.
                The engines only pick circuits that passed ``can_accept``,
                so this indicates a logic error or an oversized strip.
        """
        if not self.can_accept(strip):
            raise CircuitOverloadError(
                f"Circuit {self.id} cannot accept strip {strip.id}",
                context={
                    "current": round(self.current, 6),
                    "contribution": round(strip.power_contribution(), 6),
                    "limit": CIRCUIT_MAX_CURRENT,
                },
                suggestions=[
                    "Strips drawing more than one circuit can supply must be split",
                    "Check max_current_per_led in [physics]",
                ],
            )
        self.strips.append(strip)

    def copy(self) -> Circuit:
        return Circuit(
            vertex_id=self.vertex_id,
            box_serial=self.box_serial,
            index=self.index,
            strips=list(self.strips),
        )


class JunctionBox:
    """An enclosure at a vertex holding 16 fused circuits (240 A).

    Several boxes may sit at the same vertex; ``serial`` tells them apart.
    """

    def __init__(self, vertex_id: int, serial: int, circuits: list[Circuit] | None = None):
        self.vertex_id = vertex_id
        self.serial = serial
        if circuits is None:
            circuits = [Circuit(vertex_id, serial, i) for i in range(CIRCUITS_PER_BOX)]
        self.circuits = circuits

    @property
    def id(self) -> str:
        return f"{self.vertex_id}.{self.serial}"

    @property
    def current(self) -> float:
        return sum(c.current for c in self.circuits)

    @property
    def utilization(self) -> float:
        return sum(c.utilization for c in self.circuits) / len(self.circuits)

    @property
    def capacity(self) -> float:
        return CIRCUIT_MAX_CURRENT * len(self.circuits)

    @property
    def strips(self) -> list[Strip]:
        return [s for c in self.circuits for s in c.strips]

    @property
    def is_empty(self) -> bool:
        return all(c.is_empty for c in self.circuits)

    def copy(self) -> JunctionBox:
        return JunctionBox(self.vertex_id, self.serial, [c.copy() for c in self.circuits])

    def __repr__(self) -> str:
        return (
            f"JunctionBox({self.id}, {self.current:.2f} A, "
            f"{self.utilization * 100:.1f}% utilized)"
        )


class CapacityModel:
    """Junction boxes keyed by vertex, with their circuit assignments.

    Attributes:
        generation: Incremented by every ``copy()``; identifies which
            trial a model came from.
    """

    def __init__(self, generation: int = 0):
        self.generation = generation
        self._boxes: dict[int, list[JunctionBox]] = {}
        self._next_serial = 0

    # -- box management -------------------------------------------------

    def add_box(self, vertex_id: int) -> JunctionBox:
        """Create an empty box at ``vertex_id``, after any already there."""
        box = JunctionBox(vertex_id, self._next_serial)
        self._next_serial += 1
        self._boxes.setdefault(vertex_id, []).append(box)
        return box

    def remove_box(self, box: JunctionBox) -> None:
        """Delete the box with ``box``'s serial (and only that box)."""
        boxes = self._boxes.get(box.vertex_id, [])
        remaining = [b for b in boxes if b.serial != box.serial]
        if len(remaining) == len(boxes):
            raise KeyError(f"No junction box {box.id} in this model")
        if remaining:
            self._boxes[box.vertex_id] = remaining
        else:
            del self._boxes[box.vertex_id]

    def boxes_at(self, vertex_id: int) -> list[JunctionBox]:
        """Boxes located at a vertex, in creation order."""
        return self._boxes.get(vertex_id, [])

    def find_box(self, serial: int) -> JunctionBox | None:
        for box in self.boxes():
            if box.serial == serial:
                return box
        return None

    def boxes(self) -> list[JunctionBox]:
        """All boxes, grouped by vertex in first-placement order."""
        return [box for boxes in self._boxes.values() for box in boxes]

    def circuits(self) -> Iterator[Circuit]:
        for box in self.boxes():
            yield from box.circuits

    @property
    def vertex_ids(self) -> list[int]:
        return list(self._boxes)

    # -- aggregates -----------------------------------------------------

    @property
    def box_count(self) -> int:
        return sum(len(boxes) for boxes in self._boxes.values())

    @property
    def current(self) -> float:
        return sum(box.current for box in self.boxes())

    @property
    def capacity(self) -> float:
        return sum(box.capacity for box in self.boxes())

    @property
    def utilization(self) -> float:
        """Mean box utilization, 0.0 for an empty model."""
        boxes = self.boxes()
        if not boxes:
            return 0.0
        return sum(b.utilization for b in boxes) / len(boxes)

    @property
    def strip_count(self) -> int:
        return sum(len(c.strips) for c in self.circuits())

    def assignments(self) -> dict[str, str]:
        """Strip id to circuit id, for comparing plans."""
        return {strip.id: circuit.id for circuit in self.circuits() for strip in circuit.strips}

    # -- trial support --------------------------------------------------

    def copy(self) -> CapacityModel:
        """Structural copy for a trial. Strips are shared, everything else is new."""
        clone = CapacityModel(generation=self.generation + 1)
        clone._boxes = {
            vertex_id: [box.copy() for box in boxes] for vertex_id, boxes in self._boxes.items()
        }
        clone._next_serial = self._next_serial
        return clone

    def __repr__(self) -> str:
        return (
            f"CapacityModel(generation={self.generation}, boxes={self.box_count}, "
            f"current={self.current:.2f} A)"
        )
