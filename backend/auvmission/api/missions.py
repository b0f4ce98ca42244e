"""
API routes for missions.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from auvmission.api.schemas import (
    AnalysisResponse,
    AnalyzeRequest,
    AttitudeTickResponse,
    BoundingBoxResponse,
    ColorChannel,
    ErrorResponse,
    FolderInfoResponse,
    IncidentFlagResponse,
    IncidentReportResponse,
    MissionEntryResponse,
    MissionStatsResponse,
    SceneMarkerResponse,
    ScenePointResponse,
    SceneResponse,
    SceneWaypointResponse,
    SetFolderRequest,
    ValueRangeResponse,
)
from auvmission.config import AnalysisConfig
from auvmission.models.mission import MissionAnalysis, MissionEntry, RenderScene
from auvmission.models.telemetry import BoundingBox, IncidentReport, ValueRange
from auvmission.services.analyzer import analyze_mission, render_scene
from auvmission.services.repository import get_repository
from auvmission.services.telemetry_parser import TelemetryFormatError, records_to_samples
from auvmission.services.waypoint_parser import MissionFormatError, parse_mission_document


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/missions", tags=["missions"])

NOT_FOUND = {404: {"model": ErrorResponse}}


def _range(value_range: Optional[ValueRange]) -> Optional[ValueRangeResponse]:
    if value_range is None:
        return None
    return ValueRangeResponse(min=value_range.min, max=value_range.max)


def _box(box: BoundingBox) -> BoundingBoxResponse:
    return BoundingBoxResponse(
        min_lat=box.min_lat,
        max_lat=box.max_lat,
        min_long=box.min_long,
        max_long=box.max_long,
    )


def _incident(report: IncidentReport, with_members: bool) -> IncidentReportResponse:
    members = None
    if with_members:
        members = [
            IncidentFlagResponse(
                source_index=flag.source_index,
                timestamp=flag.timestamp,
                latitude=flag.latitude,
                longitude=flag.longitude,
                depth=flag.depth,
                reasons=list(flag.reasons),
            )
            for flag in report.members
        ]
    return IncidentReportResponse(
        latitude=report.latitude,
        longitude=report.longitude,
        timestamp=report.representative_timestamp,
        count=report.member_count,
        primary_reason=report.primary_reason,
        all_reasons=list(report.all_reasons),
        members=members,
    )


def _entry(entry: MissionEntry) -> MissionEntryResponse:
    return MissionEntryResponse(
        id=entry.id,
        name=entry.name,
        folder=str(entry.folder),
        route_file=entry.route_file.name,
        telemetry_file=entry.telemetry_file.name,
        usbl_file=entry.usbl_file.name if entry.usbl_file else None,
        start_time=entry.start_time,
        date=entry.date,
    )


def build_analysis_response(
    analysis: MissionAnalysis,
    mission_id: Optional[str] = None,
    name: Optional[str] = None,
    with_members: bool = False,
) -> AnalysisResponse:
    """Build the analysis response from a MissionAnalysis."""
    stats = analysis.stats
    return AnalysisResponse(
        mission_id=mission_id,
        name=name,
        stride=analysis.stride,
        cluster_window_s=analysis.cluster_window_s,
        bounding_box=_box(analysis.bounding_box),
        stats=MissionStatsResponse(
            sample_count=stats.sample_count,
            displayed_count=stats.displayed_count,
            waypoint_count=stats.waypoint_count,
            flagged_count=stats.flagged_count,
            incident_count=stats.incident_count,
            duration_s=stats.duration_s,
            path_length_m=stats.path_length_m,
            depth_range=_range(stats.depth_range),
        ),
        depth_range=_range(analysis.depth_range),
        speed_range=_range(analysis.speed_range),
        battery_range=_range(analysis.battery_range),
        altimeter_range=_range(analysis.altimeter_range),
        incidents=[_incident(r, with_members) for r in analysis.incidents],
    )


def build_scene_response(scene: RenderScene) -> SceneResponse:
    """Build the scene response from a RenderScene."""
    return SceneResponse(
        width=scene.width,
        height=scene.height,
        bounding_box=_box(scene.bounding_box),
        actual=[
            ScenePointResponse(
                x=p.x, y=p.y, depth=p.depth, color=p.color,
                nav_color=p.nav_color, sample_index=p.sample_index,
            )
            for p in scene.actual
        ],
        planned=[SceneWaypointResponse(x=p.x, y=p.y, index=p.index) for p in scene.planned],
        incidents=[
            SceneMarkerResponse(
                x=m.x, y=m.y, count=m.count, label=m.label, primary_reason=m.primary_reason,
            )
            for m in scene.incidents
        ],
        attitude=[
            AttitudeTickResponse(x=t.x, y=t.y, roll_end=t.roll_end, pitch_end=t.pitch_end)
            for t in scene.attitude
        ],
        color_by=scene.color_by,
    )


def _config(window_s: Optional[float]) -> AnalysisConfig:
    return AnalysisConfig.from_env().with_window(window_s)


def _analyze_or_404(mission_id: str, window_s: Optional[float]) -> MissionAnalysis:
    repo = get_repository()
    try:
        analysis = repo.analyze(mission_id, _config(window_s))
    except (TelemetryFormatError, MissionFormatError) as e:
        logger.error(f"Failed to load mission {mission_id}: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    if analysis is None:
        raise HTTPException(status_code=404, detail=f"Mission not found: {mission_id}")
    return analysis


@router.get("", response_model=list[MissionEntryResponse])
async def list_missions():
    """
    List all indexed missions.

    Sorted by mission date (newest first).
    """
    repo = get_repository()
    return [_entry(e) for e in repo.list_missions()]


@router.get("/{mission_id}", response_model=AnalysisResponse, responses=NOT_FOUND)
async def get_mission_analysis(
    mission_id: str,
    window_s: Optional[float] = Query(None, ge=0.0, description="Incident grouping window (seconds)"),
):
    """
    Analysis summary for a mission: stats, shared bounding box,
    color ranges and incident reports.
    """
    analysis = _analyze_or_404(mission_id, window_s)
    entry = get_repository().get_entry(mission_id)
    return build_analysis_response(analysis, mission_id=mission_id, name=entry.name if entry else None)


@router.get("/{mission_id}/incidents", response_model=list[IncidentReportResponse], responses=NOT_FOUND)
async def get_mission_incidents(
    mission_id: str,
    window_s: Optional[float] = Query(None, ge=0.0, description="Incident grouping window (seconds)"),
):
    """Incident reports including their member flags."""
    analysis = _analyze_or_404(mission_id, window_s)
    return [_incident(r, with_members=True) for r in analysis.incidents]


@router.get("/{mission_id}/scene", response_model=SceneResponse, responses=NOT_FOUND)
async def get_mission_scene(
    mission_id: str,
    width: float = Query(800.0, gt=0.0, description="Canvas width"),
    height: float = Query(600.0, gt=0.0, description="Canvas height"),
    attitude: bool = Query(False, description="Include roll/pitch indicators"),
    window_s: Optional[float] = Query(None, ge=0.0, description="Incident grouping window (seconds)"),
    color_by: ColorChannel = Query("depth", description="Channel used to color the actual path"),
):
    """
    Canvas-space layers for rendering the planned route, the actual
    path and incident markers.
    """
    config = _config(window_s)
    analysis = _analyze_or_404(mission_id, window_s)
    scene = render_scene(analysis, width, height, attitude=attitude, config=config, color_by=color_by)
    return build_scene_response(scene)


# ============================================================================
# Direct analysis of uploaded contents
# ============================================================================

analyze_router = APIRouter(prefix="/analyze", tags=["analyze"])


@analyze_router.post("", response_model=AnalysisResponse)
async def analyze_uploaded(request: AnalyzeRequest):
    """
    Analyze telemetry rows and a route document sent in the request body.
    """
    try:
        samples = records_to_samples(request.telemetry)
        waypoints = parse_mission_document(request.mission)
    except (TelemetryFormatError, MissionFormatError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    config = _config(request.cluster_window_s)
    analysis = analyze_mission(samples, waypoints, config)
    return build_analysis_response(analysis, name=request.mission.get("name"), with_members=True)


# ============================================================================
# Folder Management Routes
# ============================================================================

folder_router = APIRouter(prefix="/folder", tags=["folder"])


@folder_router.get("", response_model=FolderInfoResponse)
async def get_folder_info():
    """Get information about the current data folder."""
    repo = get_repository()

    return FolderInfoResponse(
        path=str(repo.data_folder) if repo.data_folder else None,
        mission_count=repo.mission_count,
    )


@folder_router.post("", response_model=FolderInfoResponse)
async def set_folder(request: SetFolderRequest):
    """
    Set the data folder to scan for mission folders.

    This will clear the current cache and re-scan.
    """
    repo = get_repository()

    path = Path(request.path)
    if not path.exists():
        raise HTTPException(status_code=400, detail=f"Folder does not exist: {request.path}")
    if not path.is_dir():
        raise HTTPException(status_code=400, detail=f"Path is not a directory: {request.path}")

    count = repo.set_data_folder(path)

    return FolderInfoResponse(
        path=str(path),
        mission_count=count,
    )


@folder_router.post("/rescan", response_model=FolderInfoResponse)
async def rescan_folder():
    """
    Rescan the current data folder for new missions.
    """
    repo = get_repository()

    if repo.data_folder is None:
        raise HTTPException(status_code=400, detail="No data folder set")

    count = repo.rescan()

    return FolderInfoResponse(
        path=str(repo.data_folder),
        mission_count=count,
    )
