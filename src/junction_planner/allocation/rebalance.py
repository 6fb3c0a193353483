"""
Local-search rebalancing that removes lightly loaded junction boxes.

Each pass takes the live boxes in ascending utilization order and tries
to evacuate them one at a time. An evacuation runs on a structural copy
of the live model: every strip of the box is moved to the fullest
eligible circuit in some other box. If every strip finds a home, the box
is deleted from the copy and the copy becomes the live model. If any
strip is stranded the copy is simply dropped, leaving the live model as
it was.

Passes repeat until one completes without a successful evacuation. Each
success removes a box, so the search always terminates.

Usage:
    balancer = JunctionBoxBalancer(graph)
    result = balancer.balance(model)
    print(f"{result.initial_box_count} -> {result.model.box_count} boxes")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from junction_planner.geometry.constants import VOLTAGE_DROP_THRESHOLD

from .candidates import assignment_candidates

if TYPE_CHECKING:
    from junction_planner.graph import StructureGraph

    from .models import CapacityModel, JunctionBox

logger = logging.getLogger(__name__)

__all__ = ["BalanceResult", "JunctionBoxBalancer", "balance_junction_boxes"]


@dataclass
class BalanceResult:
    """Outcome of a rebalancing run.

    Attributes:
        model: The final live model
        passes: Number of passes run, including the final unproductive one
        evacuated: Ids of the boxes that were emptied and deleted, in order
        initial_box_count: Box count before rebalancing
    """

    model: CapacityModel
    passes: int = 0
    evacuated: list[str] = field(default_factory=list)
    initial_box_count: int = 0

    @property
    def boxes_removed(self) -> int:
        return len(self.evacuated)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "passes": self.passes,
            "initial_box_count": self.initial_box_count,
            "final_box_count": self.model.box_count,
            "evacuated": list(self.evacuated),
        }


class JunctionBoxBalancer:
    """Evacuates and deletes boxes whose load fits elsewhere.

    Args:
        graph: Structure graph
        threshold: Voltage-drop distance limit in micrometers
        max_passes: Stop after this many passes even if still improving
            (None runs until a pass makes no change)
    """

    def __init__(
        self,
        graph: StructureGraph,
        threshold: float = VOLTAGE_DROP_THRESHOLD,
        max_passes: int | None = None,
    ):
        self.graph = graph
        self.threshold = threshold
        self.max_passes = max_passes

    def balance(self, model: CapacityModel) -> BalanceResult:
        """Rebalance ``model`` until a pass makes no progress.

        The input model is not modified; the result holds the final
        generation.
        """
        live = model
        result = BalanceResult(model=live, initial_box_count=model.box_count)

        while self.max_passes is None or result.passes < self.max_passes:
            result.passes += 1
            changed = False

            snapshot = sorted(live.boxes(), key=lambda b: b.utilization)
            for box in snapshot:
                trial = self.try_evacuate(live, box)
                if trial is None:
                    continue
                live = trial
                changed = True
                result.evacuated.append(box.id)
                logger.info(
                    "Evacuated junction box %s (%d boxes remain)",
                    box.id,
                    live.box_count,
                )

            logger.debug(
                "Pass %d finished with %d boxes (generation %d)",
                result.passes,
                live.box_count,
                live.generation,
            )
            if not changed:
                break

        result.model = live
        logger.info(
            "Rebalanced %d -> %d junction boxes in %d passes",
            result.initial_box_count,
            live.box_count,
            result.passes,
        )
        return result

    def try_evacuate(self, live: CapacityModel, box: JunctionBox) -> CapacityModel | None:
        """Try to move all of ``box``'s strips into other boxes.

        Args:
            live: Current live model (left untouched)
            box: Box to evacuate, identified by its serial

        Returns:
            A new model without the box if every strip was reassigned,
            otherwise None
        """
        trial = live.copy()
        target = trial.find_box(box.serial)
        if target is None:
            return None

        for strip in target.strips:
            candidates = assignment_candidates(
                strip, self.graph, trial, exclude=target, threshold=self.threshold
            )
            if not candidates:
                logger.debug("Cannot evacuate %s: no circuit for strip %s", box.id, strip.id)
                return None
            circuit = max(candidates, key=lambda c: c.utilization)
            circuit.add(strip)

        trial.remove_box(target)
        return trial


def balance_junction_boxes(
    graph: StructureGraph,
    model: CapacityModel,
    threshold: float = VOLTAGE_DROP_THRESHOLD,
    max_passes: int | None = None,
) -> CapacityModel:
    """Rebalance and return only the final model."""
    balancer = JunctionBoxBalancer(graph, threshold=threshold, max_passes=max_passes)
    return balancer.balance(model).model
