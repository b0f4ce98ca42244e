"""
Mission analysis pipeline.

Composes the core steps into one pure pass over a loaded mission:

    sample()  -> displayed telemetry
    detect()  -> incident flags (full telemetry)
    cluster() -> incident reports
    compute_bounding_box() -> one shared projection frame

render_scene() projects an analysis onto a canvas for the renderer.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from auvmission.config import AnalysisConfig
from auvmission.models.mission import (
    AttitudeTick,
    MissionAnalysis,
    MissionStats,
    RenderScene,
    SceneMarker,
    ScenePoint,
    SceneWaypoint,
)
from auvmission.models.telemetry import TelemetrySample, ValueRange, Waypoint
from auvmission.services.incidents import cluster, detect
from auvmission.services.sampler import compute_stride, sample
from auvmission.utils.colors import (
    NEUTRAL_GRAY,
    HslColor,
    color_for_altimeter,
    color_for_battery,
    color_for_depth,
    color_for_nav_mode,
    color_for_velocity,
)
from auvmission.utils.coordinates import CanvasProjection, compute_bounding_box, path_length


logger = logging.getLogger(__name__)


MAX_MARKER_COUNT = 9  # larger clusters are labelled "!"

COLOR_CHANNELS = ("depth", "velocity", "battery", "altimeter", "nav")


def analyze_mission(
    samples: Sequence[TelemetrySample],
    waypoints: Sequence[Waypoint],
    config: Optional[AnalysisConfig] = None,
) -> MissionAnalysis:
    """
    Run the full analysis for one mission load.

    Args:
        samples: Validated telemetry, in recorded order
        waypoints: Planned route, in traversal order
        config: Analysis configuration (defaults if omitted)

    Returns:
        MissionAnalysis holding every derived value
    """
    config = config or AnalysisConfig.default()
    if not samples:
        raise ValueError("Cannot analyze mission without telemetry samples")

    stride = compute_stride(len(samples), config.sample_cap)
    displayed = sample(samples, config.sample_cap)

    flags = detect(samples, config.thresholds)
    incidents = cluster(flags, config.cluster_window_s)

    box = compute_bounding_box(displayed, waypoints, incidents, padding=config.bounds_padding)

    depth_range = ValueRange.from_values(s.depth for s in displayed)
    speed_range = ValueRange.from_values(s.speed for s in displayed)
    battery_range = ValueRange.from_values(s.battery_volts for s in displayed)
    altimeter_range = ValueRange.from_values(s.altimeter for s in displayed)

    stats = MissionStats(
        sample_count=len(samples),
        displayed_count=len(displayed),
        waypoint_count=len(waypoints),
        flagged_count=len(flags),
        incident_count=len(incidents),
        duration_s=_duration(samples),
        path_length_m=path_length(
            [s.latitude for s in samples],
            [s.longitude for s in samples],
        ),
        depth_range=depth_range,
    )

    logger.info(
        f"Analyzed {len(samples)} samples (stride {stride}, {len(displayed)} displayed), "
        f"{len(flags)} flags -> {len(incidents)} incidents, {len(waypoints)} waypoints"
    )

    return MissionAnalysis(
        displayed=tuple(displayed),
        waypoints=tuple(waypoints),
        flags=tuple(flags),
        incidents=tuple(incidents),
        bounding_box=box,
        stride=stride,
        stats=stats,
        cluster_window_s=config.cluster_window_s,
        depth_range=depth_range,
        speed_range=speed_range,
        battery_range=battery_range,
        altimeter_range=altimeter_range,
    )


def render_scene(
    analysis: MissionAnalysis,
    width: Optional[float] = None,
    height: Optional[float] = None,
    attitude: bool = False,
    config: Optional[AnalysisConfig] = None,
    color_by: str = "depth",
) -> RenderScene:
    """
    Project every layer of an analysis onto a width x height canvas.

    All layers use the analysis' single bounding box. Path points are
    colored by the color_by channel against the analysis' range for it.
    """
    if color_by not in COLOR_CHANNELS:
        raise ValueError(f"Unknown color channel: {color_by}")
    config = config or AnalysisConfig.default()
    width = config.canvas_width if width is None else width
    height = config.canvas_height if height is None else height
    projection = CanvasProjection(analysis.bounding_box, width, height)

    actual = []
    for i, s in enumerate(analysis.displayed):
        x, y = projection.to_canvas(s.latitude, s.longitude)
        actual.append(ScenePoint(
            x=x,
            y=y,
            depth=s.depth,
            color=point_color(s, analysis, color_by).css(),
            nav_color=color_for_nav_mode(s.nav_mode).css(),
            sample_index=i * analysis.stride,
        ))

    planned = []
    for wp in analysis.waypoints:
        x, y = projection.to_canvas(wp.latitude, wp.longitude)
        planned.append(SceneWaypoint(x=x, y=y, index=wp.index))

    markers = []
    for report in analysis.incidents:
        x, y = projection.to_canvas(report.latitude, report.longitude)
        label = "!" if report.member_count > MAX_MARKER_COUNT else str(report.member_count)
        markers.append(SceneMarker(
            x=x,
            y=y,
            count=report.member_count,
            label=label,
            primary_reason=report.primary_reason,
        ))

    ticks: tuple[AttitudeTick, ...] = ()
    if attitude:
        ticks = tuple(attitude_ticks(
            analysis.displayed,
            actual,
            every=config.attitude_every,
            length=config.attitude_length,
        ))

    return RenderScene(
        width=width,
        height=height,
        bounding_box=analysis.bounding_box,
        actual=tuple(actual),
        planned=tuple(planned),
        incidents=tuple(markers),
        attitude=ticks,
        color_by=color_by,
    )


def point_color(sample: TelemetrySample, analysis: MissionAnalysis, channel: str) -> HslColor:
    """Color of one path sample on the given channel; gray without a range."""
    if channel == "nav":
        return color_for_nav_mode(sample.nav_mode)
    if channel == "depth":
        value_range, mapper, value = analysis.depth_range, color_for_depth, sample.depth
    elif channel == "velocity":
        value_range, mapper, value = analysis.speed_range, color_for_velocity, sample.velocity
    elif channel == "battery":
        value_range, mapper, value = analysis.battery_range, color_for_battery, sample.battery_volts
    elif channel == "altimeter":
        value_range, mapper, value = analysis.altimeter_range, color_for_altimeter, sample.altimeter
    else:
        raise ValueError(f"Unknown color channel: {channel}")

    if value_range is None:
        return NEUTRAL_GRAY
    return mapper(value, value_range)


def attitude_ticks(
    samples: Sequence[TelemetrySample],
    points: Sequence[ScenePoint],
    every: int = 20,
    length: float = 10.0,
) -> list[AttitudeTick]:
    """
    Roll/pitch indicator lines on every `every`-th projected point.

    Points without both roll and pitch are skipped.
    """
    if every < 1:
        raise ValueError(f"Attitude interval must be at least 1, got {every}")

    ticks = []
    for s, p in list(zip(samples, points))[::every]:
        if s.roll is None or s.pitch is None:
            continue
        roll = math.radians(s.roll)
        pitch = math.radians(s.pitch)
        ticks.append(AttitudeTick(
            x=p.x,
            y=p.y,
            roll_end=(p.x + length * math.sin(roll), p.y + length * math.cos(roll)),
            pitch_end=(p.x + length * math.sin(pitch), p.y - length * math.cos(pitch)),
        ))
    return ticks


def _duration(samples: Sequence[TelemetrySample]) -> float:
    times = [s.timestamp for s in samples if s.has_timestamp]
    if len(times) < 2:
        return 0.0
    return float(max(times) - min(times))
