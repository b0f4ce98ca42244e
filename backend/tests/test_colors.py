"""
Tests for value-to-color mapping.
"""

import math

from auvmission.models.telemetry import ValueRange, Velocity
from auvmission.utils.colors import (
    NEUTRAL_GRAY,
    HslColor,
    color_for_altimeter,
    color_for_battery,
    color_for_depth,
    color_for_nav_mode,
    color_for_velocity,
)


class TestHslColor:
    """Tests for CSS formatting."""

    def test_css(self):
        assert HslColor(210, 100, 90).css() == "hsl(210, 100%, 90%)"

    def test_css_fractional(self):
        assert HslColor(210, 100, 55.123).css() == "hsl(210, 100%, 55.12%)"


class TestValueRange:
    """Tests for normalization."""

    def test_normalize(self):
        assert ValueRange(0.0, 10.0).normalize(2.5) == 0.25

    def test_clamped(self):
        r = ValueRange(0.0, 10.0)
        assert r.normalize(-5.0) == 0.0
        assert r.normalize(50.0) == 1.0

    def test_degenerate_range(self):
        assert ValueRange(4.0, 4.0).normalize(4.0) == 0.0

    def test_from_values_ignores_missing(self):
        assert ValueRange.from_values([3.0, None, math.nan, 1.0]) == ValueRange(1.0, 3.0)

    def test_from_values_empty(self):
        assert ValueRange.from_values([None, math.nan]) is None


class TestDepthColor:
    """Tests for the depth color ramp."""

    def test_shallowest_is_lightest(self):
        color = color_for_depth(0.0, ValueRange(0.0, 100.0))
        assert color == HslColor(210, 100, 90)

    def test_deepest_is_darkest(self):
        color = color_for_depth(100.0, ValueRange(0.0, 100.0))
        assert color.hue == 210
        assert math.isclose(color.lightness, 20.0)

    def test_midpoint(self):
        color = color_for_depth(50.0, ValueRange(0.0, 100.0))
        assert math.isclose(color.lightness, 55.0)

    def test_constant_depth_is_finite(self):
        color = color_for_depth(7.0, ValueRange(7.0, 7.0))
        assert color == HslColor(210, 100, 90)

    def test_missing_depth_is_gray(self):
        assert color_for_depth(None, ValueRange(0.0, 1.0)) == NEUTRAL_GRAY


class TestContinuousChannels:
    """Tests for velocity, battery and altimeter colors."""

    def test_velocity_sweep(self):
        r = ValueRange(0.0, 2.0)
        assert color_for_velocity(Velocity(0.0, 0.0, 0.0), r).hue == 200
        assert color_for_velocity(Velocity(2.0, 0.0, 0.0), r).hue == 360

    def test_velocity_missing(self):
        assert color_for_velocity(None, ValueRange(0.0, 1.0)) == NEUTRAL_GRAY

    def test_battery_low_is_red(self):
        r = ValueRange(14.0, 16.8)
        assert color_for_battery(14.0, r).hue == 0
        assert color_for_battery(16.8, r).hue == 120

    def test_altimeter_saturation(self):
        r = ValueRange(0.0, 10.0)
        assert color_for_altimeter(0.0, r).saturation == 0
        assert color_for_altimeter(10.0, r).saturation == 100
        assert color_for_altimeter(None, r) == NEUTRAL_GRAY


class TestNavModeColor:
    """Tests for the discrete nav mode lookup."""

    def test_known_modes(self):
        assert color_for_nav_mode(0) == HslColor(120, 70, 40)
        assert color_for_nav_mode(1) == HslColor(40, 100, 50)
        assert color_for_nav_mode(2) == HslColor(0, 85, 50)

    def test_unknown_and_missing_are_gray(self):
        assert color_for_nav_mode(7) == NEUTRAL_GRAY
        assert color_for_nav_mode(None) == NEUTRAL_GRAY
