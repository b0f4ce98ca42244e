"""
Value-to-color mapping for rendered telemetry channels.

Every function is pure: a value (plus a precomputed ValueRange for the
continuous channels) maps to an HSL color. Missing values map to a
neutral gray.
"""

from dataclasses import dataclass
from typing import Optional

from auvmission.models.telemetry import ValueRange, Velocity, is_missing


@dataclass(frozen=True)
class HslColor:
    """HSL color (hue in degrees, saturation and lightness in percent)."""

    hue: float
    saturation: float
    lightness: float

    def css(self) -> str:
        return f"hsl({_fmt(self.hue)}, {_fmt(self.saturation)}%, {_fmt(self.lightness)}%)"


def _fmt(value: float) -> str:
    return f"{round(value, 2):g}"


NEUTRAL_GRAY = HslColor(0, 0, 60)

DEPTH_HUE = 210
ALTIMETER_HUE = 280

# Navigation mode -> color
NAV_MODE_COLORS = {
    0: HslColor(120, 70, 40),  # green
    1: HslColor(40, 100, 50),  # amber
    2: HslColor(0, 85, 50),    # red
}


def color_for_depth(depth: Optional[float], depth_range: ValueRange) -> HslColor:
    """Shallow = light, deep = dark, single blue hue."""
    if is_missing(depth):
        return NEUTRAL_GRAY
    normalized = depth_range.normalize(depth)
    return HslColor(DEPTH_HUE, 100, 90 - normalized * 70)


def color_for_velocity(velocity: Optional[Velocity], speed_range: ValueRange) -> HslColor:
    """Velocity magnitude swept over hues 200 -> 360."""
    if velocity is None:
        return NEUTRAL_GRAY
    normalized = speed_range.normalize(velocity.magnitude)
    return HslColor(200 + normalized * 160, 100, 50)


def color_for_battery(volts: Optional[float], battery_range: ValueRange) -> HslColor:
    """Red when low, green when full."""
    if is_missing(volts):
        return NEUTRAL_GRAY
    normalized = battery_range.normalize(volts)
    return HslColor(normalized * 120, 100, 45)


def color_for_altimeter(altitude: Optional[float], altimeter_range: ValueRange) -> HslColor:
    """Fixed purple hue, saturation scales with altitude above floor."""
    if is_missing(altitude):
        return NEUTRAL_GRAY
    normalized = altimeter_range.normalize(altitude)
    return HslColor(ALTIMETER_HUE, normalized * 100, 50)


def color_for_nav_mode(mode: Optional[float]) -> HslColor:
    """Discrete lookup; unknown modes are gray."""
    return NAV_MODE_COLORS.get(mode, NEUTRAL_GRAY)
