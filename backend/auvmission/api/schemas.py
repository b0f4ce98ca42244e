"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


ColorChannel = Literal["depth", "velocity", "battery", "altimeter", "nav"]


# ============================================================================
# Shared value schemas
# ============================================================================

class BoundingBoxResponse(BaseModel):
    """Padded lat/long bounding box shared by every rendered layer."""
    min_lat: float
    max_lat: float
    min_long: float
    max_long: float


class ValueRangeResponse(BaseModel):
    """Min/max of a scalar channel."""
    min: float
    max: float


# ============================================================================
# Mission Index Schemas
# ============================================================================

class MissionEntryResponse(BaseModel):
    """One mission folder in the index."""
    id: str
    name: str
    folder: str
    route_file: str
    telemetry_file: str
    usbl_file: Optional[str] = None
    start_time: Optional[str] = None
    date: Optional[str] = None


# ============================================================================
# Analysis Schemas
# ============================================================================

class IncidentFlagResponse(BaseModel):
    """A single flagged sample."""
    source_index: int
    timestamp: float
    latitude: float
    longitude: float
    depth: Optional[float] = None
    reasons: list[str]


class IncidentReportResponse(BaseModel):
    """A time-clustered incident."""
    latitude: float
    longitude: float
    timestamp: float
    count: int
    primary_reason: str
    all_reasons: list[str]
    members: Optional[list[IncidentFlagResponse]] = None


class MissionStatsResponse(BaseModel):
    """Summary numbers for a mission."""
    sample_count: int
    displayed_count: int
    waypoint_count: int
    flagged_count: int
    incident_count: int
    duration_s: float
    path_length_m: float
    depth_range: Optional[ValueRangeResponse] = None


class AnalysisResponse(BaseModel):
    """Analysis summary for a mission."""
    mission_id: Optional[str] = None
    name: Optional[str] = None
    stride: int
    cluster_window_s: float
    bounding_box: BoundingBoxResponse
    stats: MissionStatsResponse
    depth_range: Optional[ValueRangeResponse] = None
    speed_range: Optional[ValueRangeResponse] = None
    battery_range: Optional[ValueRangeResponse] = None
    altimeter_range: Optional[ValueRangeResponse] = None
    incidents: list[IncidentReportResponse]


class AnalyzeRequest(BaseModel):
    """
    Already-decoded mission inputs.

    `telemetry` rows use the telemetry CSV column names; `mission` is the
    route document (with a `waypoints` array).
    """
    telemetry: list[dict[str, Any]]
    mission: dict[str, Any]
    cluster_window_s: Optional[float] = Field(default=None, ge=0.0)


# ============================================================================
# Scene Schemas
# ============================================================================

class ScenePointResponse(BaseModel):
    x: float
    y: float
    depth: float
    color: str
    nav_color: str
    sample_index: int


class SceneWaypointResponse(BaseModel):
    x: float
    y: float
    index: int


class SceneMarkerResponse(BaseModel):
    x: float
    y: float
    count: int
    label: str
    primary_reason: str


class AttitudeTickResponse(BaseModel):
    x: float
    y: float
    roll_end: tuple[float, float]
    pitch_end: tuple[float, float]


class SceneResponse(BaseModel):
    """Projected layers for a width x height canvas."""
    width: float
    height: float
    bounding_box: BoundingBoxResponse
    actual: list[ScenePointResponse]
    planned: list[SceneWaypointResponse]
    incidents: list[SceneMarkerResponse]
    attitude: list[AttitudeTickResponse] = Field(default_factory=list)
    color_by: ColorChannel = "depth"


# ============================================================================
# Folder Management Schemas
# ============================================================================

class SetFolderRequest(BaseModel):
    """Request to set the data folder."""
    path: str


class FolderInfoResponse(BaseModel):
    """Information about the current data folder."""
    path: Optional[str]
    mission_count: int


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None
