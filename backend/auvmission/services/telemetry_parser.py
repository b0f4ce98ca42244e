"""
Vehicle telemetry CSV loader.

Reads the mission travel path CSV into TelemetrySample records. Column
names vary between vehicle software versions, so each field is looked up
through a list of accepted aliases. Rows missing latitude, longitude or
depth are dropped here, before any analysis runs.
"""

import io
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd

from auvmission.models.telemetry import TelemetrySample, Velocity


logger = logging.getLogger(__name__)


class TelemetryFormatError(ValueError):
    """Telemetry source cannot be turned into samples."""


# Column name mappings - first match wins
COLUMN_MAPPINGS = {
    "timestamp": ["timestamp_ros", "timestamp", "Timestamp", "time", "Time"],
    "latitude": ["latitude", "Latitude", "lat", "Lat"],
    "longitude": ["longitude", "Longitude", "lon", "Lon", "long", "Long"],
    "depth": ["depth", "Depth", "depth_m"],
    # Attitude
    "roll": ["roll", "Roll"],
    "pitch": ["pitch", "Pitch"],
    "yaw": ["yaw", "Yaw", "heading"],
    "error_state": ["errorState", "error_state", "ErrorState"],
    "distance_to_floor": [
        "distance_to_ocean_floor",
        "distanceToFloor",
        "distance_to_floor",
    ],
    # Velocity components (m/s)
    "velocity_x": ["velocity_x", "vel_x", "vx", "velocityX"],
    "velocity_y": ["velocity_y", "vel_y", "vy", "velocityY"],
    "velocity_z": ["velocity_z", "vel_z", "vz", "velocityZ"],
    "battery_volts": ["battery", "battery_voltage", "batteryVolts", "battery_volts"],
    "nav_mode": ["navMode", "nav_mode", "NavMode"],
    "altimeter": ["altimeter", "Altimeter", "altimeter_m"],
}

REQUIRED_FIELDS = ("latitude", "longitude", "depth")


def map_columns(columns: Iterable[str]) -> dict[str, Optional[str]]:
    """Resolve each canonical field to the first matching source column."""
    columns = list(columns)
    col_map: dict[str, Optional[str]] = {}
    for std_name, variants in COLUMN_MAPPINGS.items():
        col_map[std_name] = None
        for variant in variants:
            if variant in columns:
                col_map[std_name] = variant
                break
    return col_map


def parse_telemetry_csv(filepath: Path) -> list[TelemetrySample]:
    """Parse a telemetry CSV file."""
    filepath = Path(filepath)
    if not filepath.is_file():
        raise TelemetryFormatError(f"Telemetry file not found: {filepath}")

    try:
        df = pd.read_csv(filepath, encoding="utf-8-sig", skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise TelemetryFormatError(f"Telemetry file is empty: {filepath}") from None

    samples = parse_dataframe(df)
    logger.info(f"Loaded {len(samples)} telemetry samples from {filepath.name}")
    return samples


def parse_telemetry_text(text: str) -> list[TelemetrySample]:
    """Parse telemetry CSV content already held in memory."""
    if not text.strip():
        raise TelemetryFormatError("Telemetry content is empty")
    df = pd.read_csv(io.StringIO(text), skip_blank_lines=True)
    return parse_dataframe(df)


def parse_dataframe(df: pd.DataFrame) -> list[TelemetrySample]:
    """
    Convert a telemetry table into samples.

    Non-numeric or infinite cells become missing values. Rows without
    latitude, longitude or depth are dropped.

    Raises:
        TelemetryFormatError: required columns are absent or no row is valid
    """
    df = df.copy()
    df.columns = df.columns.astype(str).str.strip()
    col_map = map_columns(df.columns)

    missing = [name for name in REQUIRED_FIELDS if col_map[name] is None]
    if missing:
        raise TelemetryFormatError(f"Missing required telemetry columns: {', '.join(missing)}")

    columns = {
        std_name: _numeric_column(df, col)
        for std_name, col in col_map.items()
    }

    valid = np.ones(len(df), dtype=np.bool_)
    for name in REQUIRED_FIELDS:
        valid &= np.isfinite(columns[name])

    dropped = int(np.count_nonzero(~valid))
    if dropped:
        logger.warning(f"Dropped {dropped} telemetry rows missing position or depth")

    if not np.any(valid):
        raise TelemetryFormatError("No valid data points found in telemetry")

    samples = []
    for i in np.flatnonzero(valid):
        samples.append(_build_sample({name: values[i] for name, values in columns.items()}))
    return samples


def records_to_samples(records: Iterable[Mapping[str, Any]]) -> list[TelemetrySample]:
    """
    Convert already-decoded telemetry rows (e.g. JSON objects) into samples.

    The same column aliases as the CSV loader apply.
    """
    records = list(records)
    if not records:
        raise TelemetryFormatError("No telemetry records supplied")
    return parse_dataframe(pd.DataFrame.from_records(records))


def decimate_csv(src: Path, dst: Path, every: int = 10) -> tuple[int, int]:
    """
    Write every N-th data row of a telemetry CSV to a new file.

    Returns:
        Tuple of (input row count, output row count)
    """
    if every < 1:
        raise ValueError(f"Decimation factor must be at least 1, got {every}")

    df = pd.read_csv(src, skip_blank_lines=True)
    reduced = df.iloc[::every]

    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    reduced.to_csv(dst, index=False)

    logger.info(f"Reduced {src} from {len(df)} to {len(reduced)} rows")
    return len(df), len(reduced)


def _numeric_column(df: pd.DataFrame, col: Optional[str]) -> np.ndarray:
    if col is None or col not in df.columns:
        return np.full(len(df), np.nan, dtype=np.float64)
    return pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=np.float64)


def _opt_float(value: float) -> Optional[float]:
    if not math.isfinite(value):
        return None
    return float(value)


def _opt_code(value: float) -> Optional[Union[int, float]]:
    """Status code as recorded: int when integral, raw float otherwise."""
    if not math.isfinite(value):
        return None
    if float(value).is_integer():
        return int(value)
    return float(value)


def _build_sample(row: dict[str, float]) -> TelemetrySample:
    vx, vy, vz = (_opt_float(row[k]) for k in ("velocity_x", "velocity_y", "velocity_z"))
    velocity = None
    if not (vx is None and vy is None and vz is None):
        # Partially recorded vectors treat absent components as zero
        velocity = Velocity(x=vx or 0.0, y=vy or 0.0, z=vz or 0.0)

    return TelemetrySample(
        timestamp=_opt_float(row["timestamp"]),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        depth=float(row["depth"]),
        roll=_opt_float(row["roll"]),
        pitch=_opt_float(row["pitch"]),
        yaw=_opt_float(row["yaw"]),
        error_state=_opt_code(row["error_state"]),
        distance_to_floor=_opt_float(row["distance_to_floor"]),
        velocity=velocity,
        battery_volts=_opt_float(row["battery_volts"]),
        nav_mode=_opt_code(row["nav_mode"]),
        altimeter=_opt_float(row["altimeter"]),
    )

