"""
Mission-level models: index entries, analysis results and render scenes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from auvmission.models.telemetry import (
    BoundingBox,
    IncidentFlag,
    IncidentReport,
    TelemetrySample,
    ValueRange,
    Waypoint,
)


@dataclass(frozen=True)
class MissionEntry:
    """One mission folder found by the index scan."""

    id: str
    name: str
    folder: Path
    route_file: Path
    telemetry_file: Path
    usbl_file: Optional[Path] = None
    start_time: Optional[str] = None  # YYYYMMDDHHMMSS.ffffff
    date: Optional[str] = None        # YYYYMMDD

    def to_manifest(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "folder": self.folder.name,
            "jsonFile": self.route_file.name,
            "csvFile": self.telemetry_file.name,
            "usblFile": self.usbl_file.name if self.usbl_file else None,
            "startTime": self.start_time,
            "date": self.date,
        }


@dataclass(frozen=True)
class MissionData:
    """Loaded (validated) inputs for one mission."""

    samples: tuple[TelemetrySample, ...]
    waypoints: tuple[Waypoint, ...]
    name: str = ""


@dataclass(frozen=True)
class MissionStats:
    """Summary numbers for a mission."""

    sample_count: int
    displayed_count: int
    waypoint_count: int
    flagged_count: int
    incident_count: int
    duration_s: float
    path_length_m: float
    depth_range: Optional[ValueRange]


@dataclass(frozen=True)
class MissionAnalysis:
    """
    Result of one analysis pass.

    The bounding box covers the displayed telemetry, the waypoints and
    the incident reports, and is shared by every rendered layer.
    """

    displayed: tuple[TelemetrySample, ...]
    waypoints: tuple[Waypoint, ...]
    flags: tuple[IncidentFlag, ...]
    incidents: tuple[IncidentReport, ...]
    bounding_box: BoundingBox
    stride: int
    stats: MissionStats
    cluster_window_s: float

    # Color ranges (None when the channel is absent)
    depth_range: Optional[ValueRange] = None
    speed_range: Optional[ValueRange] = None
    battery_range: Optional[ValueRange] = None
    altimeter_range: Optional[ValueRange] = None


@dataclass(frozen=True)
class ScenePoint:
    """Projected telemetry point."""

    x: float
    y: float
    depth: float
    color: str
    nav_color: str
    sample_index: int


@dataclass(frozen=True)
class SceneWaypoint:
    """Projected planned waypoint."""

    x: float
    y: float
    index: int


@dataclass(frozen=True)
class SceneMarker:
    """Projected incident marker."""

    x: float
    y: float
    count: int
    label: str
    primary_reason: str


@dataclass(frozen=True)
class AttitudeTick:
    """Roll and pitch indicator lines anchored at a projected point."""

    x: float
    y: float
    roll_end: tuple[float, float]
    pitch_end: tuple[float, float]


@dataclass(frozen=True)
class RenderScene:
    """Everything a 2-D renderer needs, already in canvas coordinates."""

    width: float
    height: float
    bounding_box: BoundingBox
    actual: tuple[ScenePoint, ...]
    planned: tuple[SceneWaypoint, ...]
    incidents: tuple[SceneMarker, ...]
    attitude: tuple[AttitudeTick, ...] = field(default_factory=tuple)
    color_by: str = "depth"  # channel used for ScenePoint.color
