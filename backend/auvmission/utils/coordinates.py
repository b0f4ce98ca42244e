"""
Geospatial projection utilities.

Computes the shared, padded lat/long bounding box for every rendered
layer and maps lat/long pairs onto a 2-D canvas (x right, y down).
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from auvmission.models.telemetry import BoundingBox


EARTH_RADIUS_M = 6371000  # Earth's mean radius in meters

LatLong = tuple[float, float]
PointSource = Iterable[Union[LatLong, object]]


def _as_lat_long(point) -> LatLong:
    """Accept (lat, long) pairs or any record with latitude/longitude."""
    if hasattr(point, "latitude") and hasattr(point, "longitude"):
        return float(point.latitude), float(point.longitude)
    lat, long = point
    return float(lat), float(long)


def collect_coordinates(*point_sets: PointSource) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Flatten several point collections into lat and long arrays.

    Non-finite coordinates are dropped.
    """
    pairs = [_as_lat_long(p) for points in point_sets for p in points]
    if not pairs:
        return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.float64)

    coords = np.asarray(pairs, dtype=np.float64)
    finite = np.all(np.isfinite(coords), axis=1)
    return coords[finite, 0], coords[finite, 1]


def compute_bounding_box(*point_sets: PointSource, padding: float = 0.1) -> BoundingBox:
    """
    Union bounding box over all point sets, padded per axis.

    Each axis is expanded by span * padding on both sides. A zero-span
    axis receives no padding and stays degenerate.

    Args:
        *point_sets: Telemetry samples, waypoints, incident reports or
            (lat, long) pairs
        padding: Fraction of each axis span added on both sides

    Returns:
        BoundingBox covering every finite input point
    """
    if padding < 0:
        raise ValueError(f"Padding must be non-negative, got {padding}")

    lats, longs = collect_coordinates(*point_sets)
    if len(lats) == 0:
        raise ValueError("Cannot compute bounding box: no coordinates supplied")

    min_lat, max_lat = float(np.min(lats)), float(np.max(lats))
    min_long, max_long = float(np.min(longs)), float(np.max(longs))

    lat_padding = (max_lat - min_lat) * padding
    long_padding = (max_long - min_long) * padding

    return BoundingBox(
        min_lat=min_lat - lat_padding,
        max_lat=max_lat + lat_padding,
        min_long=min_long - long_padding,
        max_long=max_long + long_padding,
    )


@dataclass(frozen=True)
class CanvasProjection:
    """
    Affine lat/long -> canvas transform for one bounding box.

    Longitude increases to the right. Latitude increases upward in the
    source data, so y is flipped for a canvas whose y grows downward.
    An axis with zero span maps to the canvas midpoint on that axis.
    """

    box: BoundingBox
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")

    def to_canvas(self, lat: float, long: float) -> tuple[float, float]:
        box = self.box
        if box.long_span == 0:
            x = self.width / 2
        else:
            x = (long - box.min_long) / box.long_span * self.width

        if box.lat_span == 0:
            y = self.height / 2
        else:
            y = self.height - (lat - box.min_lat) / box.lat_span * self.height

        return float(x), float(y)

    def project_many(
        self,
        lat: Sequence[float],
        long: Sequence[float],
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Vectorized to_canvas."""
        lat_arr = np.asarray(lat, dtype=np.float64)
        long_arr = np.asarray(long, dtype=np.float64)
        box = self.box

        if box.long_span == 0:
            x = np.full_like(long_arr, self.width / 2)
        else:
            x = (long_arr - box.min_long) / box.long_span * self.width

        if box.lat_span == 0:
            y = np.full_like(lat_arr, self.height / 2)
        else:
            y = self.height - (lat_arr - box.min_lat) / box.lat_span * self.height

        return x, y

    def project_points(self, points: PointSource) -> list[tuple[float, float]]:
        """Project records or (lat, long) pairs, preserving order."""
        return [self.to_canvas(*_as_lat_long(p)) for p in points]


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Great-circle distance in meters between point pairs.

    Accepts scalars or equal-length arrays of degrees. Scalar inputs give a
    float, array inputs give one distance per pair.
    """
    lat1, lon1, lat2, lon2 = (np.asarray(v, dtype=np.float64) for v in (lat1, lon1, lat2, lon2))
    dlat = np.radians(lat2 - lat1)
    dlon = np.radians(lon2 - lon1)

    a = np.sin(dlat/2)**2 + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(dlon/2)**2
    meters = EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))
    if meters.ndim == 0:
        return float(meters)
    return meters


def path_length(lat: Sequence[float], lon: Sequence[float]) -> float:
    """Total great-circle length of a polyline in meters."""
    lat_arr = np.asarray(lat, dtype=np.float64)
    lon_arr = np.asarray(lon, dtype=np.float64)
    if len(lat_arr) < 2:
        return 0.0
    segments = haversine_distance(lat_arr[:-1], lon_arr[:-1], lat_arr[1:], lon_arr[1:])
    return float(np.sum(segments))
