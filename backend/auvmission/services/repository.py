"""
Mission Repository - indexes mission folders and caches loaded missions.

A mission folder holds a route JSON file and a telemetry CSV, plus an
optional secondary tracking (USBL) CSV and mission_summary.json. The
analysis core never touches the file system; this layer resolves files
and hands decoded records to it.
"""

import functools
import json
import logging
import re
from pathlib import Path
from typing import Optional

from auvmission.config import AnalysisConfig
from auvmission.models.mission import MissionAnalysis, MissionData, MissionEntry
from auvmission.services.analyzer import analyze_mission
from auvmission.services.telemetry_parser import parse_telemetry_csv
from auvmission.services.waypoint_parser import parse_mission_file


logger = logging.getLogger(__name__)


TELEMETRY_FILENAME = "mission_travel_path.csv"
SUMMARY_FILENAME = "mission_summary.json"
MANIFEST_FILENAME = "missions.json"

_FOLDER_TIMESTAMP = re.compile(r"^\d{14}$")


class MissionRepository:
    """
    Repository for mission data.

    Scans a data folder for mission sub-folders and caches parsed
    missions in memory.
    """

    def __init__(self, data_folder: Optional[Path] = None):
        """
        Initialize the repository.

        Args:
            data_folder: Folder containing mission folders. If None, must be set later.
        """
        self._data_folder: Optional[Path] = data_folder
        self._cache: dict[str, MissionData] = {}
        self._index: dict[str, MissionEntry] = {}

        if data_folder is not None:
            self.scan_folder(data_folder)

    @property
    def data_folder(self) -> Optional[Path]:
        return self._data_folder

    @property
    def mission_count(self) -> int:
        return len(self._index)

    def set_data_folder(self, folder: Path) -> int:
        """
        Set the data folder and scan it.

        Returns:
            Number of missions found
        """
        self._data_folder = folder
        self._cache.clear()
        self._index.clear()
        return self.scan_folder(folder)

    def scan_folder(self, folder: Path) -> int:
        """
        Scan a folder for mission sub-folders and build the index.

        Folders without both a route file and a telemetry file are skipped.

        Returns:
            Number of missions indexed
        """
        if not folder.exists():
            logger.warning(f"Data folder does not exist: {folder}")
            return 0

        count = 0
        for mission_dir in sorted(p for p in folder.iterdir() if p.is_dir()):
            entry = build_entry(mission_dir)
            if entry is None:
                logger.debug(f"Skipping folder without mission files: {mission_dir.name}")
                continue
            self._index[entry.id] = entry
            count += 1

        logger.info(f"Scanned {count} missions in {folder}")
        return count

    def list_missions(self) -> list[MissionEntry]:
        """Index entries, newest first."""
        return sort_entries(self._index.values())

    def get_entry(self, mission_id: str) -> Optional[MissionEntry]:
        return self._index.get(mission_id)

    def get_mission(self, mission_id: str) -> Optional[MissionData]:
        """
        Load (or fetch from cache) a mission's telemetry and route.

        Returns:
            MissionData if the id is indexed, None otherwise

        Raises:
            TelemetryFormatError, MissionFormatError: mission files are malformed
        """
        if mission_id in self._cache:
            return self._cache[mission_id]

        entry = self._index.get(mission_id)
        if entry is None:
            return None

        data = MissionData(
            samples=tuple(parse_telemetry_csv(entry.telemetry_file)),
            waypoints=tuple(parse_mission_file(entry.route_file)),
            name=entry.name,
        )
        self._cache[mission_id] = data
        logger.debug(f"Loaded and cached mission: {mission_id}")
        return data

    def analyze(
        self,
        mission_id: str,
        config: Optional[AnalysisConfig] = None,
    ) -> Optional[MissionAnalysis]:
        """Analyze a mission; None if the id is unknown."""
        data = self.get_mission(mission_id)
        if data is None:
            return None
        return analyze_mission(data.samples, data.waypoints, config)

    def clear_cache(self) -> None:
        """Clear the in-memory cache."""
        self._cache.clear()
        logger.info("Mission cache cleared")

    def rescan(self) -> int:
        """Drop the index and cache and scan the current folder again."""
        if self._data_folder is None:
            return 0
        self._cache.clear()
        self._index.clear()
        return self.scan_folder(self._data_folder)

    def write_manifest(self, path: Optional[Path] = None) -> Path:
        """
        Write the sorted mission index as JSON.

        Defaults to missions.json inside the data folder.
        """
        if path is None:
            if self._data_folder is None:
                raise ValueError("No data folder set and no manifest path given")
            path = self._data_folder / MANIFEST_FILENAME

        manifest = [entry.to_manifest() for entry in self.list_missions()]
        path.write_text(json.dumps(manifest, indent=2))
        logger.info(f"Wrote manifest with {len(manifest)} missions to {path}")
        return path


def expected_mission_name(folder_name: str) -> str:
    """
    Mission name encoded in a folder name.

    Folder format: YYYYMMDDHHMMSS-MissionName or just MissionName.
    """
    parts = folder_name.split("-")
    if len(parts) > 1 and _FOLDER_TIMESTAMP.match(parts[0]):
        return "-".join(parts[1:])
    return folder_name


def build_entry(mission_dir: Path) -> Optional[MissionEntry]:
    """Index entry for one mission folder, or None if files are missing."""
    files = sorted(p.name for p in mission_dir.iterdir() if p.is_file())
    expected = expected_mission_name(mission_dir.name)

    # Prefer the expected route name, fall back to any non-summary JSON
    route = f"{expected}.json" if f"{expected}.json" in files else None
    if route is None:
        route = next((f for f in files if f.endswith(".json") and f != SUMMARY_FILENAME), None)

    telemetry = TELEMETRY_FILENAME if TELEMETRY_FILENAME in files else None
    usbl = next((f for f in files if f.endswith(".csv") and f != TELEMETRY_FILENAME), None)

    if route is None or telemetry is None:
        return None

    start_time, date = _read_summary(mission_dir / SUMMARY_FILENAME)

    return MissionEntry(
        id=mission_dir.name,
        name=route[: -len(".json")],
        folder=mission_dir,
        route_file=mission_dir / route,
        telemetry_file=mission_dir / telemetry,
        usbl_file=mission_dir / usbl if usbl else None,
        start_time=start_time,
        date=date,
    )


def _read_summary(path: Path) -> tuple[Optional[str], Optional[str]]:
    """Mission start time and YYYYMMDD date from mission_summary.json."""
    if not path.exists():
        return None, None
    try:
        summary = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read mission summary {path}: {e}")
        return None, None

    start = summary.get("mission_start_sys_time") if isinstance(summary, dict) else None
    if not start:
        return None, None
    start = str(start)
    return start, start.split(".")[0][:8]


def _compare_entries(a: MissionEntry, b: MissionEntry) -> int:
    if a.date and b.date:
        if a.date != b.date:
            return _cmp(b.date, a.date)
        if a.start_time and b.start_time:
            return _cmp(b.start_time, a.start_time)
    return _cmp(b.folder.name, a.folder.name)


def _cmp(a: str, b: str) -> int:
    return (a > b) - (a < b)


def sort_entries(entries) -> list[MissionEntry]:
    """Newest date first, then newest start time, then folder name descending."""
    return sorted(entries, key=functools.cmp_to_key(_compare_entries))


# Global repository instance (set up by app initialization)
_repository: Optional[MissionRepository] = None


def get_repository() -> MissionRepository:
    """Get the global repository instance."""
    global _repository
    if _repository is None:
        _repository = MissionRepository()
    return _repository


def init_repository(data_folder: Path) -> MissionRepository:
    """Initialize the global repository with a data folder."""
    global _repository
    _repository = MissionRepository(data_folder)
    return _repository
