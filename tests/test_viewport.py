"""
Tests for 2D and 3D viewport transforms.
"""

import math

import pytest
from graphtotex import config
from graphtotex.viewport import (
    DEFAULT_VIEWPORT, Viewport, build_ticks, clamp_viewport, get_nice_tick_step,
    pan_by_pixels, screen_to_world, world_to_screen, zoom_at, zoom_at_by_axis,
)
from graphtotex.viewport3d import (
    DEFAULT_VIEWPORT_3D, Viewport3D, clamp_viewport_3d, rotate_viewport_3d,
    scale_bounds_3d, zoom_camera_3d,
)


class TestViewport2D:

    def test_defaults(self):
        assert DEFAULT_VIEWPORT == Viewport(-10, 10, -10, 10)
        assert DEFAULT_VIEWPORT.x_span == 20

    def test_clamp_swaps_and_limits_span(self):
        vp = clamp_viewport(Viewport(5, -5, 0, 1e9))
        assert (vp.x_min, vp.x_max) == (-5, 5)
        assert vp.y_max - vp.y_min == pytest.approx(config.MAX_SPAN)

    def test_clamp_minimum_span(self):
        vp = clamp_viewport(Viewport(1, 1, 0, 1))
        assert vp.x_max - vp.x_min == pytest.approx(config.MIN_SPAN)

    def test_clamp_non_finite(self):
        vp = clamp_viewport(Viewport(math.nan, 1, 0, 1))
        assert (vp.x_min, vp.x_max) == (-10, 10)

    def test_screen_round_trip(self):
        px, py = world_to_screen(2.5, -4.0, 800, 600, DEFAULT_VIEWPORT)
        x, y = screen_to_world(px, py, 800, 600, DEFAULT_VIEWPORT)
        assert (x, y) == pytest.approx((2.5, -4.0))

    def test_screen_corners(self):
        assert world_to_screen(-10, 10, 800, 600, DEFAULT_VIEWPORT) == (0, 0)
        assert world_to_screen(10, -10, 800, 600, DEFAULT_VIEWPORT) == (800, 600)

    def test_pan(self):
        vp = pan_by_pixels(DEFAULT_VIEWPORT, 40, 0, 800, 800)
        assert vp.x_min == pytest.approx(-11)
        assert vp.x_max == pytest.approx(9)
        assert vp.y_min == pytest.approx(-10)

    def test_pan_vertical(self):
        vp = pan_by_pixels(DEFAULT_VIEWPORT, 0, 40, 800, 800)
        assert vp.y_min == pytest.approx(-9)

    def test_zoom_keeps_anchor(self):
        vp = zoom_at(DEFAULT_VIEWPORT, 5, 5, 0.5)
        assert vp == Viewport(-2.5, 7.5, -2.5, 7.5)

    def test_zoom_by_axis(self):
        vp = zoom_at_by_axis(DEFAULT_VIEWPORT, 0, 0, 2, 1)
        assert vp.x_span == pytest.approx(40)
        assert vp.y_span == pytest.approx(20)

    def test_transforms_return_new_values(self):
        vp = Viewport()
        zoom_at(vp, 0, 0, 0.5)
        assert vp == DEFAULT_VIEWPORT


class TestTicks:

    @pytest.mark.parametrize("value_range,max_ticks,step", [
        (20, 16, 2),
        (20, 12, 2),
        (20, 10, 2),
        (1, 10, 0.1),
        (100, 10, 10),
        (7, 2, 5),
        (0, 10, 1),
        (math.inf, 10, 1),
    ])
    def test_nice_step(self, value_range, max_ticks, step):
        assert get_nice_tick_step(value_range, max_ticks) == pytest.approx(step)

    def test_build_ticks(self):
        assert build_ticks(-10, 10, 10) == [-10, -8, -6, -4, -2, 0, 2, 4, 6, 8, 10]

    def test_build_ticks_rounded(self):
        ticks = build_ticks(0, 1, 10)
        assert ticks[3] == 0.3


class TestViewport3D:

    def test_defaults(self):
        vp = DEFAULT_VIEWPORT_3D
        assert (vp.yaw, vp.pitch, vp.distance) == (0.95, -0.55, 3.35)

    def test_rotate_clamps_pitch(self):
        vp = rotate_viewport_3d(DEFAULT_VIEWPORT_3D, 0.5, -5)
        assert vp.yaw == pytest.approx(1.45)
        assert vp.pitch == config.MIN_PITCH

    def test_zoom_camera_clamped(self):
        assert zoom_camera_3d(DEFAULT_VIEWPORT_3D, 100).distance == config.MAX_DISTANCE
        assert zoom_camera_3d(DEFAULT_VIEWPORT_3D, 0.01).distance == config.MIN_DISTANCE

    def test_scale_selected_axes(self):
        vp = scale_bounds_3d(DEFAULT_VIEWPORT_3D, 0.5, z=True)
        assert (vp.z_min, vp.z_max) == (-5, 5)
        assert (vp.x_min, vp.x_max) == (-10, 10)

    def test_clamp_non_finite_camera(self):
        vp = clamp_viewport_3d(Viewport3D(yaw=math.nan, distance=math.inf))
        assert vp.yaw == config.DEFAULT_YAW
        assert vp.distance == config.DEFAULT_DISTANCE
