"""
Sample data generator for testing.

Generates realistic-looking survey missions: a planned lawn-mower route
(JSON), the vehicle's travel path (CSV) and a mission summary.
"""

import json
import math
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import numpy as np


TELEMETRY_COLUMNS = [
    "timestamp_ros", "latitude", "longitude", "depth",
    "roll", "pitch", "yaw", "errorState", "distance_to_ocean_floor",
    "velocity_x", "velocity_y", "velocity_z",
    "battery", "navMode", "altimeter",
]


def lawnmower_waypoints(
    center_lat: float = 18.3506,
    center_lon: float = -64.6992,
    n_legs: int = 6,
    leg_length_m: float = 60.0,
    leg_spacing_m: float = 10.0,
    desired_depth: float = 20.0,
) -> list[dict]:
    """Route document waypoints for a lawn-mower survey pattern."""
    meters_per_deg_lat = 111000
    meters_per_deg_lon = 111000 * np.cos(np.radians(center_lat))

    waypoints = []
    number = 1
    for leg in range(n_legs):
        east = (leg - (n_legs - 1) / 2) * leg_spacing_m
        ends = (-leg_length_m / 2, leg_length_m / 2)
        if leg % 2:
            ends = ends[::-1]
        for north in ends:
            surface = number == 1
            additional = {"transect_type": "Surface", "Light Power %": 100.0}
            if not surface:
                additional = {
                    "transect_type": "Submarine",
                    "Desired Depth": desired_depth,
                    "Altitude": 1.0,
                    "Search for Coral": True,
                    "Light Power %": 0.0,
                }
            waypoints.append({
                "waypoint_number": number,
                "latitude": center_lat + north / meters_per_deg_lat,
                "longitude": center_lon + east / meters_per_deg_lon,
                "speed": 1.0,
                "radius": 5.0,
                "additional_data": additional,
            })
            number += 1
    return waypoints


def generate_travel_path(
    waypoints: list[dict],
    sample_rate_hz: float = 1.0,
    speed_ms: float = 1.0,
    start_time: float = 1740497617.719,
    desired_depth: float = 20.0,
    floor_depth: float = 24.0,
    incidents: Optional[dict[int, dict]] = None,
    seed: int = 0,
) -> list[dict]:
    """
    Telemetry rows following the waypoints at constant speed.

    Args:
        incidents: Row index -> field overrides (e.g. {"pitch": 50.0}),
            used to inject anomalies at known positions
        seed: Noise seed, for reproducible output
    """
    rng = np.random.default_rng(seed)
    meters_per_deg_lat = 111000

    # Resample route into evenly spaced positions
    lats, lons = [], []
    for a, b in zip(waypoints, waypoints[1:]):
        meters_per_deg_lon = 111000 * math.cos(math.radians(a["latitude"]))
        d_north = (b["latitude"] - a["latitude"]) * meters_per_deg_lat
        d_east = (b["longitude"] - a["longitude"]) * meters_per_deg_lon
        steps = max(1, int(math.hypot(d_north, d_east) / (speed_ms / sample_rate_hz)))
        for t in np.linspace(0, 1, steps, endpoint=False):
            lats.append(a["latitude"] + t * (b["latitude"] - a["latitude"]))
            lons.append(a["longitude"] + t * (b["longitude"] - a["longitude"]))
    lats.append(waypoints[-1]["latitude"])
    lons.append(waypoints[-1]["longitude"])

    n_samples = len(lats)
    dt = 1.0 / sample_rate_hz

    # Dive to depth over the first minute, surface over the last
    ramp = min(60, n_samples // 4) or 1
    depth = np.full(n_samples, desired_depth)
    depth[:ramp] = np.linspace(0.2, desired_depth, ramp)
    depth[-ramp:] = np.linspace(desired_depth, 0.2, ramp)
    depth += rng.normal(0, 0.1, n_samples)
    depth = np.clip(depth, 0.0, None)

    battery = np.linspace(16.8, 14.2, n_samples)
    rows = []
    for i in range(n_samples):
        j = min(i + 1, n_samples - 1)
        k = max(j - 1, 0)
        heading = math.degrees(math.atan2(lons[j] - lons[k], lats[j] - lats[k])) % 360
        rows.append({
            "timestamp_ros": round(start_time + i * dt, 3),
            "latitude": round(lats[i] + rng.normal(0, 2e-6), 7),
            "longitude": round(lons[i] + rng.normal(0, 2e-6), 7),
            "depth": round(float(depth[i]), 3),
            "roll": round(float(rng.normal(0, 4)), 2),
            "pitch": round(float(rng.normal(0, 4)), 2),
            "yaw": round(heading, 2),
            "errorState": 0,
            "distance_to_ocean_floor": round(floor_depth - float(depth[i]), 2),
            "velocity_x": round(speed_ms * math.sin(math.radians(heading)), 3),
            "velocity_y": round(speed_ms * math.cos(math.radians(heading)), 3),
            "velocity_z": round(float(rng.normal(0, 0.02)), 3),
            "battery": round(float(battery[i]), 3),
            "navMode": 0 if depth[i] > 1.0 else 1,
            "altimeter": round(floor_depth - float(depth[i]), 2),
        })

    for index, overrides in (incidents or {}).items():
        rows[index].update(overrides)
    return rows


def write_mission_folder(
    output_folder: Path,
    name: str,
    waypoints: list[dict],
    rows: list[dict],
    started_at: Optional[datetime] = None,
    usbl: bool = False,
) -> Path:
    """Write a mission folder laid out like the vehicle's exports."""
    started_at = started_at or datetime(2025, 2, 25, 15, 33, 37)
    stamp = started_at.strftime("%Y%m%d%H%M%S")
    folder = output_folder / f"{stamp}-{name}"
    folder.mkdir(parents=True, exist_ok=True)

    (folder / f"{name}.json").write_text(json.dumps({"name": name, "waypoints": waypoints}, indent=2))
    (folder / "mission_summary.json").write_text(json.dumps({
        "mission_start_sys_time": f"{stamp}.{started_at.microsecond:06d}",
    }))

    lines = [",".join(TELEMETRY_COLUMNS)]
    for row in rows:
        lines.append(",".join("" if row.get(c) is None else str(row[c]) for c in TELEMETRY_COLUMNS))
    (folder / "mission_travel_path.csv").write_text("\n".join(lines) + "\n")

    if usbl:
        usbl_lines = ["timestamp,latitude,longitude"]
        for row in rows[::10]:
            usbl_lines.append(f"{row['timestamp_ros']},{row['latitude']},{row['longitude']}")
        (folder / "usbl_fixes.csv").write_text("\n".join(usbl_lines) + "\n")

    return folder


def generate_test_data_set(output_folder: Path) -> list[Path]:
    """Generate a set of sample mission folders."""
    output_folder.mkdir(parents=True, exist_ok=True)
    base = datetime(2025, 2, 25, 9, 0, 0)

    folders = []

    route = lawnmower_waypoints()
    rows = generate_travel_path(route, incidents={
        120: {"pitch": 48.5},
        122: {"pitch": 51.2, "roll": -47.0},
        300: {"errorState": 3},
    })
    folders.append(write_mission_folder(output_folder, "Runway", route, rows, started_at=base, usbl=True))

    route = lawnmower_waypoints(n_legs=4, leg_length_m=40.0)
    rows = generate_travel_path(route, floor_depth=21.0, seed=1)
    folders.append(write_mission_folder(
        output_folder, "ReefEdge", route, rows, started_at=base + timedelta(hours=3),
    ))

    return folders


if __name__ == "__main__":
    # Generate sample missions when run directly
    output = Path("./data/missions")
    folders = generate_test_data_set(output)
    print(f"Generated {len(folders)} sample missions in {output}")
    for f in folders:
        print(f"  - {f.name}")
