"""
Mission route (waypoint) document loader.

The route file is a JSON document holding a `waypoints` array. Each
waypoint needs at least latitude, longitude and a 1-based waypoint number.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from auvmission.models.telemetry import Waypoint


logger = logging.getLogger(__name__)


class MissionFormatError(ValueError):
    """Route document is malformed."""


Scalar = Union[str, float, int, bool, None]


class WaypointRecord(BaseModel):
    """One waypoint as found in the route document."""
    waypoint_number: int = Field(
        validation_alias=AliasChoices("waypoint_number", "index", "number"),
        ge=1,
    )
    latitude: float
    longitude: float
    speed: float = 0.0
    radius: float = 0.0
    additional_data: dict[str, Scalar] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("additional_data", "metadata"),
    )


class MissionDocument(BaseModel):
    """Route document; unknown top-level keys are ignored."""
    waypoints: list[WaypointRecord]
    name: Optional[str] = None


def parse_mission_document(data: Any) -> list[Waypoint]:
    """
    Validate a decoded route document and return its waypoints.

    Waypoints keep document order.

    Raises:
        MissionFormatError: no waypoints array, or a waypoint lacks
            required fields
    """
    if not isinstance(data, dict) or not isinstance(data.get("waypoints"), list):
        raise MissionFormatError("Invalid mission file format: missing waypoints array")

    try:
        document = MissionDocument.model_validate(data)
    except ValidationError as e:
        raise MissionFormatError(f"Invalid waypoint data: {_summarize(e)}") from e

    return [
        Waypoint(
            index=record.waypoint_number,
            latitude=record.latitude,
            longitude=record.longitude,
            speed=record.speed,
            radius=record.radius,
            metadata=dict(record.additional_data),
        )
        for record in document.waypoints
    ]


def parse_mission_file(filepath: Path) -> list[Waypoint]:
    """Load and validate a route JSON file."""
    filepath = Path(filepath)
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise MissionFormatError(f"Mission file not found: {filepath}") from None
    except json.JSONDecodeError as e:
        raise MissionFormatError(f"Error parsing JSON file {filepath.name}: {e}") from e

    waypoints = parse_mission_document(data)
    logger.info(f"Loaded {len(waypoints)} waypoints from {filepath.name}")
    return waypoints


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors()[:3]:
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}")
    if error.error_count() > 3:
        parts.append(f"... {error.error_count() - 3} more")
    return "; ".join(parts)
