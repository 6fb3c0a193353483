"""Tests for circuits, junction boxes and the capacity model."""

import pytest

from junction_planner.allocation import CapacityModel, Circuit, JunctionBox
from junction_planner.exceptions import CircuitOverloadError
from junction_planner.geometry.constants import BOX_MAX_CURRENT, CIRCUITS_PER_BOX

from conftest import load_strip, make_edges


@pytest.fixture
def strips(line_vertices):
    """The three 1.8 A strips of edge 1-2 followed by those of edge 2-3."""
    edges = make_edges(line_vertices, (1, 2), (2, 3))
    return [*edges["1-2"].strips, *edges["2-3"].strips]


class TestCircuit:
    def test_empty(self):
        circuit = Circuit(vertex_id=4, box_serial=0, index=3)
        assert circuit.id == "4.0-3"
        assert circuit.key == (0, 3)
        assert circuit.is_empty
        assert circuit.current == 0
        assert circuit.headroom == 15

    def test_add_updates_current(self, strips):
        circuit = Circuit(1, 0, 0)
        circuit.add(strips[0])
        circuit.add(strips[1])

        assert circuit.current == pytest.approx(3.6)
        assert circuit.utilization == pytest.approx(3.6 / 15)
        assert circuit.edge_strips == strips[:2]
        assert circuit.panel_strips == []

    def test_current_matches_check(self, line_vertices):
        """Current after an add equals what can_accept summed."""
        circuit = Circuit(1, 0, 0)
        strip = load_strip("A", (line_vertices[1],), 4.0)
        before = circuit.current
        circuit.add(strip)
        assert circuit.current == before + strip.power_contribution()

    def test_mixed_strips(self, strips, line_vertices):
        circuit = Circuit(1, 0, 0)
        panel_strip = load_strip("P", (line_vertices[1],), 2.0)
        circuit.add(strips[0])
        circuit.add(panel_strip)

        assert circuit.edge_strips == [strips[0]]
        assert circuit.panel_strips == [panel_strip]
        assert circuit.current == pytest.approx(1.8 + 2.0)

    def test_fills_to_rating(self, strips, line_vertices):
        """Eight 1.8 A strips fit in 15 A; a ninth does not."""
        circuit = Circuit(1, 0, 0)
        for i in range(8):
            circuit.add(strips[i % len(strips)])
        assert circuit.current == pytest.approx(14.4)
        assert not circuit.can_accept(strips[0])

    def test_overload_raises(self, line_vertices):
        circuit = Circuit(1, 0, 0)
        circuit.add(load_strip("A", (line_vertices[1],), 10.0))
        big = load_strip("B", (line_vertices[1],), 10.0)

        with pytest.raises(CircuitOverloadError) as exc_info:
            circuit.add(big)
        assert exc_info.value.context["limit"] == 15
        assert len(circuit.strips) == 1

    def test_oversized_strip(self, line_vertices):
        with pytest.raises(CircuitOverloadError):
            Circuit(1, 0, 0).add(load_strip("X", (line_vertices[1],), 20.0))

    def test_copy_is_independent(self, strips):
        circuit = Circuit(1, 0, 0)
        circuit.add(strips[0])
        clone = circuit.copy()
        clone.add(strips[1])

        assert len(circuit.strips) == 1
        assert len(clone.strips) == 2
        assert clone.strips[0] is strips[0]


class TestJunctionBox:
    def test_sixteen_circuits(self):
        box = JunctionBox(vertex_id=7, serial=2)
        assert len(box.circuits) == CIRCUITS_PER_BOX
        assert box.capacity == BOX_MAX_CURRENT
        assert box.id == "7.2"
        assert [c.index for c in box.circuits] == list(range(16))
        assert all(c.box_serial == 2 and c.vertex_id == 7 for c in box.circuits)
        assert box.is_empty

    def test_utilization_is_mean_of_circuits(self, line_vertices):
        box = JunctionBox(1, 0)
        box.circuits[0].add(load_strip("A", (line_vertices[1],), 12.0))
        box.circuits[1].add(load_strip("B", (line_vertices[1],), 6.0))

        assert box.current == pytest.approx(18.0)
        assert box.utilization == pytest.approx((0.8 + 0.4) / 16)
        assert len(box.strips) == 2
        assert not box.is_empty

    def test_copy_is_independent(self, strips):
        box = JunctionBox(1, 0)
        box.circuits[0].add(strips[0])
        clone = box.copy()
        clone.circuits[0].add(strips[1])
        clone.circuits[5].add(strips[2])

        assert box.current == pytest.approx(1.8)
        assert clone.current == pytest.approx(5.4)
        assert clone.serial == box.serial


class TestCapacityModel:
    def test_empty(self):
        model = CapacityModel()
        assert model.box_count == 0
        assert model.utilization == 0.0
        assert model.current == 0
        assert model.boxes() == []
        assert model.boxes_at(1) == []

    def test_add_box_assigns_serials(self):
        model = CapacityModel()
        a = model.add_box(3)
        b = model.add_box(3)
        c = model.add_box(1)

        assert (a.serial, b.serial, c.serial) == (0, 1, 2)
        assert model.boxes_at(3) == [a, b]
        assert model.boxes() == [a, b, c]
        assert model.vertex_ids == [3, 1]
        assert model.box_count == 3
        assert model.capacity == 3 * BOX_MAX_CURRENT

    def test_remove_box_by_serial(self):
        """Removing one of two boxes at a vertex leaves the other."""
        model = CapacityModel()
        a = model.add_box(3)
        b = model.add_box(3)

        model.remove_box(a)
        assert model.boxes_at(3) == [b]

        model.remove_box(b)
        assert model.boxes_at(3) == []
        assert 3 not in model.vertex_ids

    def test_remove_missing_box(self):
        model = CapacityModel()
        with pytest.raises(KeyError):
            model.remove_box(JunctionBox(1, 0))

    def test_serials_not_reused(self):
        model = CapacityModel()
        a = model.add_box(1)
        model.remove_box(a)
        assert model.add_box(1).serial == 1

    def test_find_box(self):
        model = CapacityModel()
        model.add_box(1)
        b = model.add_box(2)
        assert model.find_box(1) is b
        assert model.find_box(5) is None

    def test_aggregates(self, strips):
        model = CapacityModel()
        a = model.add_box(1)
        b = model.add_box(2)
        a.circuits[0].add(strips[0])
        b.circuits[0].add(strips[3])
        b.circuits[1].add(strips[4])

        assert model.strip_count == 3
        assert model.current == pytest.approx(5.4)
        assert model.utilization == pytest.approx((a.utilization + b.utilization) / 2)
        assert model.assignments() == {
            "1-2/0": "1.0-0",
            "2-3/0": "2.1-0",
            "2-3/1": "2.1-1",
        }
        assert len(list(model.circuits())) == 32

    def test_copy_isolated(self, strips):
        """Mutating a copy never shows through to the original."""
        model = CapacityModel()
        box = model.add_box(1)
        box.circuits[0].add(strips[0])

        clone = model.copy()
        clone.find_box(0).circuits[1].add(strips[1])
        clone.add_box(2)
        clone.remove_box(clone.find_box(0))

        assert model.box_count == 1
        assert model.find_box(0).current == pytest.approx(1.8)
        assert model.strip_count == 1
        assert clone.box_count == 1

    def test_copy_generation_and_serials(self):
        model = CapacityModel()
        model.add_box(1)
        clone = model.copy()

        assert model.generation == 0
        assert clone.generation == 1
        assert clone.copy().generation == 2
        assert clone.add_box(1).serial == 1

    def test_copy_shares_strips(self, strips):
        model = CapacityModel()
        model.add_box(1).circuits[0].add(strips[0])
        clone = model.copy()
        assert clone.find_box(0).circuits[0].strips[0] is strips[0]
