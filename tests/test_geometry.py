"""Tests for geometry models: vertices, edges, panels and their strips."""

import math

import pytest

from junction_planner.exceptions import GeometryError
from junction_planner.geometry import Edge, Panel, Structure, Vertex
from junction_planner.geometry.constants import (
    BOX_MAX_CURRENT,
    LEDS_PER_MICRON,
    PANEL_ROW_PITCH,
    STRIPS_PER_EDGE,
    VOLTAGE_DROP_THRESHOLD,
)

from conftest import METER, make_edges, make_vertices

LIT = "10.7.1.20#1:0"


class TestConstants:
    """Electrical constants derive from one another."""

    def test_box_rating(self):
        assert BOX_MAX_CURRENT == 240

    def test_voltage_drop_threshold(self):
        """17 feet in micrometers."""
        assert VOLTAGE_DROP_THRESHOLD == 5_181_600


class TestVertex:
    def test_distance(self):
        a = Vertex(1, 0, 0, 0)
        b = Vertex(2, 3, 4, 0)
        assert a.distance(b) == 5.0
        assert b.distance(a) == 5.0

    def test_position_vector(self):
        v = Vertex(7, 1, 2, 3)
        assert list(v.position) == [1.0, 2.0, 3.0]

    def test_hashable(self):
        """Frozen vertices can key dicts and sets."""
        assert len({Vertex(1, 0, 0, 0), Vertex(1, 0, 0, 0)}) == 1


class TestEdge:
    """Edges carry three full-length strips."""

    def test_three_strips(self, line_vertices):
        edge = make_edges(line_vertices, (1, 2))["1-2"]
        assert len(edge.strips) == STRIPS_PER_EDGE
        assert [s.id for s in edge.strips] == ["1-2/0", "1-2/1", "1-2/2"]

    def test_strip_vertices_are_edge_ends(self, line_vertices):
        edge = make_edges(line_vertices, (2, 3))["2-3"]
        for strip in edge.strips:
            assert [v.id for v in strip.vertices] == [2, 3]
            assert strip.kind == "edge"

    def test_strip_current(self, line_vertices):
        """A 1 m strip has 60 LEDs drawing 0.03 A each."""
        strip = make_edges(line_vertices, (1, 2))["1-2"].strips[0]
        assert strip.length == METER
        assert strip.num_leds == pytest.approx(60)
        assert strip.max_current == pytest.approx(1.8)
        assert strip.power_contribution() == strip.max_current

    def test_edge_totals(self, line_vertices):
        edge = make_edges(line_vertices, (1, 3))["1-3"]
        assert edge.length == 2 * METER
        assert edge.num_leds == pytest.approx(360)
        assert edge.max_current == pytest.approx(3 * 3.6)

    def test_custom_current_per_led(self, line_vertices):
        edge = make_edges(line_vertices, (1, 2), max_current_per_led=0.06)["1-2"]
        assert edge.strips[0].max_current == pytest.approx(3.6)

    def test_zero_length_edge(self):
        """Coincident endpoints give strips with no load."""
        vertices = make_vertices((5, 5, 5), (5, 5, 5))
        edge = make_edges(vertices, (1, 2))["1-2"]
        assert edge.strips[0].max_current == 0

    def test_strip_load_computed_once(self, line_vertices, monkeypatch):
        """Repeated capacity checks reuse the strip's length."""
        calls = []
        original = Vertex.distance

        def counting_distance(self, other):
            calls.append((self.id, other.id))
            return original(self, other)

        monkeypatch.setattr(Vertex, "distance", counting_distance)
        strip = make_edges(line_vertices, (1, 2))["1-2"].strips[0]

        for _ in range(5):
            assert strip.power_contribution() == pytest.approx(1.8)
        assert len(calls) == 1

    def test_sort_key(self, line_vertices):
        edge = make_edges(line_vertices, (3, 1))["3-1"]
        assert edge.sort_key == (3, 1)
        assert Edge.make_id(3, 1) == "3-1"


class TestPanel:
    """Lit panels are striped in rows; unlit panels carry nothing."""

    @pytest.fixture
    def corner(self):
        """Right triangle with 1 m legs (area 0.5 m^2)."""
        return make_vertices((0, 0, 0), (METER, 0, 0), (0, METER, 0))

    def test_area(self, corner):
        panel = Panel(id="P", vertices=tuple(corner.values()), kind=LIT)
        assert panel.area == pytest.approx(0.5 * METER * METER)

    def test_lit_panel_strips(self, corner):
        """9.84 m of strip splits into two equal strips under 5 m."""
        panel = Panel(id="P", vertices=tuple(corner.values()), kind=LIT)
        total = 0.5 * METER * METER / PANEL_ROW_PITCH

        assert panel.lit
        assert panel.strip_length == pytest.approx(total)
        assert len(panel.strips) == 2
        assert [s.id for s in panel.strips] == ["P/0", "P/1"]
        for strip in panel.strips:
            assert strip.length == pytest.approx(total / 2)
            assert strip.kind == "panel"
            assert strip.power_contribution() == strip.current
        assert panel.current == pytest.approx(total * LEDS_PER_MICRON * 0.03)

    def test_strip_vertices_are_panel_vertices(self, corner):
        panel = Panel(id="P", vertices=tuple(corner.values()), kind=LIT)
        assert [v.id for v in panel.strips[0].vertices] == [1, 2, 3]

    def test_unlit_panel_has_no_strips(self, corner):
        panel = Panel(id="P", vertices=tuple(corner.values()), kind="solid")
        assert not panel.lit
        assert panel.strip_length == 0.0
        assert panel.strips == ()
        assert panel.current == 0

    def test_shorter_max_length_makes_more_strips(self, corner):
        panel = Panel(
            id="P",
            vertices=tuple(corner.values()),
            kind=LIT,
            max_strip_length=METER,
        )
        assert len(panel.strips) == math.ceil(0.5 * METER / PANEL_ROW_PITCH)

    def test_not_a_triangle(self, line_vertices):
        with pytest.raises(GeometryError, match="exactly three"):
            Panel(id="P", vertices=(line_vertices[1], line_vertices[2]))

    def test_repeated_vertex(self, line_vertices):
        v = line_vertices[1]
        with pytest.raises(GeometryError):
            Panel(id="P", vertices=(v, v, line_vertices[2]))

    def test_non_positive_pitch(self, corner):
        with pytest.raises(GeometryError) as exc_info:
            Panel(id="P", vertices=tuple(corner.values()), kind=LIT, row_pitch=0)
        assert exc_info.value.suggestions


class TestStructure:
    def test_sorted_strips(self, line_vertices):
        edges = make_edges(line_vertices, (2, 3), (1, 2))
        structure = Structure(vertices=line_vertices, edges=edges)

        ids = [s.id for s in structure.strips()]
        assert ids == ["1-2/0", "1-2/1", "1-2/2", "2-3/0", "2-3/1", "2-3/2"]

    def test_panel_strips_follow_edges(self, ladder_dir):
        from junction_planner.geometry import load_structure

        structure = load_structure(ladder_dir)
        strips = structure.strips()
        kinds = [s.kind for s in strips]

        assert kinds.index("panel") == len(structure.edge_strips())
        assert all(k == "panel" for k in kinds[kinds.index("panel"):])

    def test_total_current(self, line_vertices):
        edges = make_edges(line_vertices, (1, 2), (2, 3))
        structure = Structure(vertices=line_vertices, edges=edges)
        assert structure.total_current == pytest.approx(6 * 1.8)
