"""
Mission record model.

All loaded telemetry and route data is normalized into these structures:
- one TelemetrySample per vehicle state reading
- one Waypoint per planned route node
- incident flags and clustered incident reports
- bounding boxes and scalar value ranges used for rendering

Records are immutable; a new data load rebuilds all of them.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


def is_missing(value: Optional[float]) -> bool:
    """True for None or NaN."""
    return value is None or (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class Velocity:
    """Vehicle velocity vector (m/s)."""

    x: float
    y: float
    z: float

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)


@dataclass(frozen=True)
class TelemetrySample:
    """
    One vehicle state reading.

    Position and depth are required; every other channel is optional.
    """

    timestamp: Optional[float]  # seconds
    latitude: float             # degrees
    longitude: float            # degrees
    depth: float                # meters, positive down

    # Attitude (degrees)
    roll: Optional[float] = None
    pitch: Optional[float] = None
    yaw: Optional[float] = None

    error_state: Optional[float] = None      # 0 = nominal, kept as recorded
    distance_to_floor: Optional[float] = None  # meters
    velocity: Optional[Velocity] = None
    battery_volts: Optional[float] = None
    nav_mode: Optional[float] = None
    altimeter: Optional[float] = None        # meters

    def __post_init__(self):
        for name in ("latitude", "longitude", "depth"):
            if is_missing(getattr(self, name)):
                raise ValueError(f"Telemetry sample is missing required field: {name}")

    @property
    def has_timestamp(self) -> bool:
        return not is_missing(self.timestamp)

    @property
    def speed(self) -> Optional[float]:
        """Velocity magnitude, if velocity was recorded."""
        if self.velocity is None:
            return None
        return self.velocity.magnitude


@dataclass(frozen=True)
class Waypoint:
    """One node of the planned route (index is 1-based)."""

    index: int
    latitude: float
    longitude: float
    speed: float = 0.0
    radius: float = 0.0
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IncidentFlag:
    """A single sample that tripped one or more anomaly rules."""

    source_index: int
    timestamp: float
    latitude: float
    longitude: float
    reasons: tuple[str, ...]
    depth: Optional[float] = None


@dataclass(frozen=True)
class IncidentReport:
    """A time-clustered group of incident flags."""

    latitude: float   # mean of members
    longitude: float  # mean of members
    representative_timestamp: float  # seed flag timestamp
    member_count: int
    members: tuple[IncidentFlag, ...]
    primary_reason: str
    all_reasons: tuple[str, ...]


@dataclass(frozen=True)
class BoundingBox:
    """Lat/long rectangle used as the shared projection frame."""

    min_lat: float
    max_lat: float
    min_long: float
    max_long: float

    def __post_init__(self):
        if self.min_lat > self.max_lat or self.min_long > self.max_long:
            raise ValueError(
                f"Inverted bounding box: lat [{self.min_lat}, {self.max_lat}], "
                f"long [{self.min_long}, {self.max_long}]"
            )

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def long_span(self) -> float:
        return self.max_long - self.min_long

    @property
    def is_degenerate(self) -> bool:
        return self.lat_span == 0 or self.long_span == 0

    def contains(self, lat: float, long: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_long <= long <= self.max_long


@dataclass(frozen=True)
class ValueRange:
    """Min/max over one scalar channel."""

    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"Invalid value range: min {self.min} > max {self.max}")

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        return self.span == 0

    def normalize(self, value: float) -> float:
        """
        Map value into [0, 1].

        A zero-width range normalizes everything to 0; values outside the
        range are clamped.
        """
        if self.is_degenerate:
            return 0.0
        normalized = (value - self.min) / self.span
        return min(1.0, max(0.0, normalized))

    @classmethod
    def from_values(cls, values: Iterable[Optional[float]]) -> Optional["ValueRange"]:
        """Range over the present values, or None when nothing is present."""
        present = [float(v) for v in values if not is_missing(v)]
        if not present:
            return None
        return cls(min=min(present), max=max(present))
