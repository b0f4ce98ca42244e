"""
Tests for the mission folder index.
"""

import json
from pathlib import Path

import pytest

from auvmission.services.repository import (
    MissionRepository,
    build_entry,
    expected_mission_name,
    sort_entries,
)
from auvmission.services.telemetry_parser import TelemetryFormatError
from auvmission.utils.sample_data import generate_test_data_set


TELEMETRY = """timestamp_ros,latitude,longitude,depth,pitch
100.0,18.3506,-64.6992,1.0,2.0
101.0,18.3507,-64.6991,2.0,50.0
102.0,18.3508,-64.6990,3.0,1.0
"""

ROUTE = {"waypoints": [
    {"waypoint_number": 1, "latitude": 18.3505, "longitude": -64.6993},
    {"waypoint_number": 2, "latitude": 18.3509, "longitude": -64.6989},
]}


def make_mission(root: Path, folder: str, route_name: str, start: str = None, usbl: bool = False) -> Path:
    mission_dir = root / folder
    mission_dir.mkdir(parents=True)
    (mission_dir / f"{route_name}.json").write_text(json.dumps(ROUTE))
    (mission_dir / "mission_travel_path.csv").write_text(TELEMETRY)
    if start:
        (mission_dir / "mission_summary.json").write_text(json.dumps({"mission_start_sys_time": start}))
    if usbl:
        (mission_dir / "usbl_fixes.csv").write_text("timestamp,latitude,longitude\n")
    return mission_dir


@pytest.fixture
def data_folder(tmp_path):
    root = tmp_path / "missions"
    make_mission(root, "20250225153337-Runway", "Runway", start="20250225153337.123456", usbl=True)
    make_mission(root, "20250301090000-Reef", "Reef", start="20250301090000.000000")
    make_mission(root, "Harbor", "Harbor")
    (root / "empty_folder").mkdir()
    (root / "notes.txt").write_text("not a mission")
    return root


class TestFolderNames:
    """Tests for folder name parsing."""

    def test_timestamped(self):
        assert expected_mission_name("20250225153337-Runway") == "Runway"

    def test_name_with_dashes(self):
        assert expected_mission_name("20250225153337-North-Reef") == "North-Reef"

    def test_plain(self):
        assert expected_mission_name("Harbor") == "Harbor"

    def test_short_prefix_not_a_timestamp(self):
        assert expected_mission_name("2025-Runway") == "2025-Runway"


class TestBuildEntry:
    """Tests for single-folder indexing."""

    def test_full_entry(self, data_folder):
        entry = build_entry(data_folder / "20250225153337-Runway")

        assert entry.id == "20250225153337-Runway"
        assert entry.name == "Runway"
        assert entry.route_file.name == "Runway.json"
        assert entry.telemetry_file.name == "mission_travel_path.csv"
        assert entry.usbl_file.name == "usbl_fixes.csv"
        assert entry.start_time == "20250225153337.123456"
        assert entry.date == "20250225"

    def test_fallback_route_file(self, tmp_path):
        mission_dir = make_mission(tmp_path, "20250101000000-Planned", "Renamed")

        entry = build_entry(mission_dir)

        assert entry.name == "Renamed"

    def test_summary_is_not_a_route(self, tmp_path):
        mission_dir = tmp_path / "Only-Summary"
        mission_dir.mkdir()
        (mission_dir / "mission_summary.json").write_text("{}")
        (mission_dir / "mission_travel_path.csv").write_text(TELEMETRY)

        assert build_entry(mission_dir) is None

    def test_missing_telemetry(self, tmp_path):
        mission_dir = tmp_path / "NoTelemetry"
        mission_dir.mkdir()
        (mission_dir / "NoTelemetry.json").write_text(json.dumps(ROUTE))

        assert build_entry(mission_dir) is None

    def test_unreadable_summary(self, tmp_path):
        mission_dir = make_mission(tmp_path, "Broken", "Broken")
        (mission_dir / "mission_summary.json").write_text("{oops")

        entry = build_entry(mission_dir)

        assert entry.start_time is None
        assert entry.date is None

    def test_manifest_keys(self, data_folder):
        manifest = build_entry(data_folder / "Harbor").to_manifest()

        assert manifest == {
            "id": "Harbor",
            "name": "Harbor",
            "folder": "Harbor",
            "jsonFile": "Harbor.json",
            "csvFile": "mission_travel_path.csv",
            "usblFile": None,
            "startTime": None,
            "date": None,
        }


class TestMissionRepository:
    """Tests for MissionRepository."""

    def test_scan(self, data_folder):
        repo = MissionRepository(data_folder)
        assert repo.mission_count == 3

    def test_newest_first(self, data_folder):
        repo = MissionRepository(data_folder)

        ids = [e.id for e in repo.list_missions()]

        # Undated folders fall back to folder name order against dated ones
        assert ids == ["Harbor", "20250301090000-Reef", "20250225153337-Runway"]

    def test_sort_same_day_by_start_time(self, tmp_path):
        make_mission(tmp_path, "B-Early", "B", start="20250225080000.000000")
        make_mission(tmp_path, "A-Late", "A", start="20250225170000.000000")

        entries = sort_entries([build_entry(tmp_path / "B-Early"), build_entry(tmp_path / "A-Late")])

        assert [e.id for e in entries] == ["A-Late", "B-Early"]

    def test_sort_without_dates_by_folder(self, tmp_path):
        make_mission(tmp_path, "Alpha", "Alpha")
        make_mission(tmp_path, "Bravo", "Bravo")

        entries = sort_entries([build_entry(tmp_path / "Alpha"), build_entry(tmp_path / "Bravo")])

        assert [e.id for e in entries] == ["Bravo", "Alpha"]

    def test_get_mission_cached(self, data_folder):
        repo = MissionRepository(data_folder)

        first = repo.get_mission("Harbor")
        second = repo.get_mission("Harbor")

        assert first is second
        assert len(first.samples) == 3
        assert len(first.waypoints) == 2

    def test_unknown_mission(self, data_folder):
        repo = MissionRepository(data_folder)

        assert repo.get_mission("missing") is None
        assert repo.analyze("missing") is None

    def test_analyze(self, data_folder):
        repo = MissionRepository(data_folder)

        analysis = repo.analyze("Harbor")

        assert analysis.stats.sample_count == 3
        assert len(analysis.incidents) == 1
        assert analysis.incidents[0].primary_reason == "Extreme pitch: 50.00°"

    def test_malformed_telemetry_propagates(self, data_folder):
        (data_folder / "Harbor" / "mission_travel_path.csv").write_text("a,b\n1,2\n")
        repo = MissionRepository(data_folder)

        with pytest.raises(TelemetryFormatError):
            repo.get_mission("Harbor")

    def test_rescan(self, data_folder):
        repo = MissionRepository(data_folder)
        make_mission(data_folder, "20250401000000-New", "New")

        assert repo.rescan() == 4

    def test_no_folder(self):
        repo = MissionRepository()

        assert repo.data_folder is None
        assert repo.mission_count == 0
        assert repo.rescan() == 0

    def test_missing_folder(self, tmp_path):
        assert MissionRepository().scan_folder(tmp_path / "missing") == 0

    def test_write_manifest(self, data_folder):
        repo = MissionRepository(data_folder)

        path = repo.write_manifest()

        assert path == data_folder / "missions.json"
        manifest = json.loads(path.read_text())
        assert [m["id"] for m in manifest] == [e.id for e in repo.list_missions()]
        runway = next(m for m in manifest if m["name"] == "Runway")
        assert runway["usblFile"] == "usbl_fixes.csv"
        assert runway["date"] == "20250225"

    def test_write_manifest_needs_path(self):
        with pytest.raises(ValueError):
            MissionRepository().write_manifest()


class TestSampleData:
    """Tests for generated sample missions."""

    def test_generated_missions_load(self, tmp_path):
        folders = generate_test_data_set(tmp_path)
        repo = MissionRepository(tmp_path)

        assert repo.mission_count == len(folders) == 2
        newest = repo.list_missions()[0]
        assert newest.name == "ReefEdge"

        runway = repo.analyze(folders[0].name)
        assert runway.stats.waypoint_count == 12
        assert runway.stats.incident_count >= 1
        reasons = {r for report in runway.incidents for r in report.all_reasons}
        assert any("pitch" in r for r in reasons)
        assert any(r.startswith("Error state") for r in reasons)
