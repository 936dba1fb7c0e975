"""
Tests for scene assembly and drawing through a Drawable.
"""

import pytest
from graphtotex.config import GraphSettings, GraphSettings3D
from graphtotex.drawable import Drawable
from graphtotex.entries import RawEntry, RawEntry3D, prepare_entries, prepare_entries_3d
from graphtotex.scene import (
    LAYERS, Scene2D, Scene3D, build_scene_2d, build_scene_3d, draw_scene,
)
from graphtotex.viewport import Viewport
from graphtotex.viewport3d import Viewport3D


class Recorder(Drawable):
    """Drawable that records what it is asked to draw."""

    def __init__(self):
        super().__init__()
        self.layerlist = [False] + list(LAYERS)
        self.calls = []

    def draw_line(self, p1, p2):
        self.calls.append(("line", self.layer, self.linecolor, (p1, p2)))

    def draw_polyline(self, points):
        self.calls.append(("polyline", self.layer, self.linecolor, list(points)))

    def draw_polygon(self, points):
        self.calls.append(("polygon", self.layer, self.fillcolor, list(points)))

    def draw_text(self, text, location, align='left', attr=None):
        color = attr.get("color") if attr else None
        self.calls.append(("text", self.layer, color, (text, location)))

    def kinds(self, kind):
        return [c for c in self.calls if c[0] == kind]


def curves(scene):
    return [p for p in scene.polylines if p.style.layer == "CURVES"]


class TestScene2D:

    def test_grid_axes_and_ticks(self):
        scene = build_scene_2d([], Viewport())
        layers = [p.style.layer for p in scene.polylines]
        assert layers.count("GRID") == 22
        # two axes plus ten ticks on each
        assert layers.count("AXES") == 22
        texts = [label.text for label in scene.labels]
        assert len(texts) == 20
        assert "0" not in texts
        assert "-10" in texts and "8" in texts

    def test_label_height_in_world_units(self):
        scene = build_scene_2d([], Viewport(), width=400, height=400)
        assert scene.labels[0].height == pytest.approx(12 * 20 / 400)

    def test_settings_disable_decorations(self):
        settings = GraphSettings(show_grid=False, show_axes=False)
        entries = prepare_entries([RawEntry(id="a", raw="x", color="#ef4444", dashed=True)])
        scene = build_scene_2d(entries, Viewport(), settings)
        assert scene.labels == []
        assert len(scene.polylines) == 1
        style = scene.polylines[0].style
        assert (style.color, style.width, style.dashed) == ("#ef4444", 2.5, True)

    def test_explicit_curve_respects_domain(self):
        entries = prepare_entries([RawEntry(id="a", raw="x", domain_min="0", domain_max="5")])
        line, = curves(build_scene_2d(entries, Viewport()))
        assert line.points[0].x == pytest.approx(0)
        assert line.points[-1].x == pytest.approx(5)

    def test_implicit_curve(self):
        entries = prepare_entries([RawEntry(id="a", raw="x^2 + y^2 = 25")])
        lines = curves(build_scene_2d(entries, Viewport()))
        assert lines
        for line in lines:
            for p in line.points:
                assert p.x ** 2 + p.y ** 2 == pytest.approx(25, rel=0.05)

    def test_skips_hidden_and_invalid(self):
        entries = prepare_entries([
            RawEntry(id="a", raw="x", visible=False),
            RawEntry(id="b", raw="foo(x)"),
        ])
        assert curves(build_scene_2d(entries, Viewport())) == []

    def test_bad_size(self):
        with pytest.raises(ValueError):
            build_scene_2d([], Viewport(), width=0)

    def test_screen_polylines(self):
        scene = build_scene_2d([], Viewport(), GraphSettings(show_grid=False, show_ticks=False),
                               width=200, height=100)
        (x_axis, _), (y_axis, _) = scene.screen_polylines()
        assert x_axis == [(0, 50), (200, 50)]
        assert y_axis == [(100, 100), (100, 0)]


class TestScene3D:

    def test_decorations(self):
        scene = build_scene_3d([], Viewport3D())
        assert scene.faces == []
        layers = [s.style.layer for s in scene.segments]
        # 22 ground grid lines and 12 box edges
        assert layers.count("GRID") == 34
        assert layers.count("AXES") == 3
        assert [label.text for label in scene.labels] == ["x", "y", "z"]

    def test_no_decorations(self):
        settings = GraphSettings3D(show_grid=False, show_axes=False, show_box=False)
        scene = build_scene_3d([], Viewport3D(), settings)
        assert scene.segments == []
        assert scene.labels == []

    def test_surface_is_depth_sorted(self):
        entries = prepare_entries_3d([RawEntry3D(id="a", raw="x*y/10", color="#2563eb")])
        scene = build_scene_3d(entries, Viewport3D(), GraphSettings3D(False, False, False))
        assert scene.faces
        depths = [f.depth for f in scene.faces]
        assert depths == sorted(depths)
        assert all(f.fill == "#2563eb" and f.alpha == 0.24 for f in scene.faces)
        assert all(s.style.layer == "SURFACES" for s in scene.segments)

    def test_dashed_surface_alpha(self):
        entries = prepare_entries_3d([RawEntry3D(id="a", raw="1", dashed=True)])
        scene = build_scene_3d(entries, Viewport3D(), GraphSettings3D(False, False, False))
        assert scene.faces[0].alpha == 0.14

    def test_bad_size(self):
        with pytest.raises(ValueError):
            build_scene_3d([], Viewport3D(), height=-1)


class TestDrawScene:

    def test_2d(self):
        entries = prepare_entries([RawEntry(id="a", raw="2x", color="#ef4444")])
        scene = build_scene_2d(entries, Viewport())
        rec = Recorder()
        rec.draw(scene)
        polylines = rec.kinds("polyline")
        assert len(polylines) == len(scene.polylines)
        assert polylines[-1][1:3] == ("CURVES", "#ef4444")
        assert len(rec.kinds("text")) == len(scene.labels)
        assert rec.dashed is False

    def test_3d_flips_y(self):
        entries = prepare_entries_3d([RawEntry3D(id="a", raw="0")])
        scene = build_scene_3d(entries, Viewport3D(), width=800, height=600)
        rec = Recorder()
        draw_scene(scene, rec)

        polygons = rec.kinds("polygon")
        assert len(polygons) == len(scene.faces)
        assert polygons[0][1] == "SURFACES"
        first = scene.faces[0].points[0]
        assert polygons[0][3][0] == (first.px, 600 - first.py)
        assert len(rec.kinds("line")) == len(scene.segments)

        label = scene.labels[0]
        text = rec.kinds("text")[0]
        assert text[3] == ("x", (label.position[0], 600 - label.position[1]))

    def test_draw_list(self):
        rec = Recorder()
        rec.draw([Scene2D(Viewport(), 10, 10), Scene3D(Viewport3D(), 10, 10)])
        assert rec.calls == []

    def test_bad_argument(self):
        with pytest.raises(ValueError):
            draw_scene("nope", Recorder())
        with pytest.raises(ValueError):
            Recorder().draw(42)
