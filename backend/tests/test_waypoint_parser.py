"""
Tests for the route document loader.
"""

import json

import pytest

from auvmission.services.waypoint_parser import (
    MissionFormatError,
    parse_mission_document,
    parse_mission_file,
)


@pytest.fixture
def route_document():
    """Route document as exported by the mission planner."""
    return {
        "name": "Runway",
        "waypoints": [
            {
                "waypoint_number": 1,
                "latitude": 18.3506,
                "longitude": -64.6992,
                "speed": 1.0,
                "radius": 5.0,
                "additional_data": {"transect_type": "Surface", "Light Power %": 100.0},
            },
            {
                "waypoint_number": 2,
                "latitude": 18.3512,
                "longitude": -64.6988,
                "additional_data": {"transect_type": "Submarine", "Desired Depth": 20.0, "Search for Coral": True},
            },
        ],
    }


class TestParseMissionDocument:
    """Tests for route validation."""

    def test_parse(self, route_document):
        waypoints = parse_mission_document(route_document)

        assert len(waypoints) == 2
        first = waypoints[0]
        assert first.index == 1
        assert first.latitude == 18.3506
        assert first.longitude == -64.6992
        assert first.speed == 1.0
        assert first.radius == 5.0
        assert first.metadata["transect_type"] == "Surface"

    def test_defaults(self, route_document):
        second = parse_mission_document(route_document)[1]

        assert second.speed == 0.0
        assert second.radius == 0.0
        assert second.metadata["Search for Coral"] is True

    def test_keeps_document_order(self):
        document = {"waypoints": [
            {"waypoint_number": 3, "latitude": 1.0, "longitude": 1.0},
            {"waypoint_number": 1, "latitude": 2.0, "longitude": 2.0},
        ]}

        assert [w.index for w in parse_mission_document(document)] == [3, 1]

    def test_index_alias(self):
        document = {"waypoints": [{"index": 4, "latitude": 1.0, "longitude": 2.0}]}
        assert parse_mission_document(document)[0].index == 4

    def test_unknown_keys_ignored(self, route_document):
        route_document["planner_version"] = "2.1"
        route_document["waypoints"][0]["heading"] = 90

        assert len(parse_mission_document(route_document)) == 2

    def test_empty_waypoints(self):
        assert parse_mission_document({"waypoints": []}) == []

    def test_missing_waypoints_array(self):
        with pytest.raises(MissionFormatError, match="missing waypoints array"):
            parse_mission_document({"name": "Runway"})

    def test_waypoints_not_a_list(self):
        with pytest.raises(MissionFormatError):
            parse_mission_document({"waypoints": {"latitude": 1.0}})

    def test_not_an_object(self):
        with pytest.raises(MissionFormatError):
            parse_mission_document([1, 2, 3])

    def test_waypoint_missing_latitude(self):
        document = {"waypoints": [{"waypoint_number": 1, "longitude": 2.0}]}

        with pytest.raises(MissionFormatError, match="latitude"):
            parse_mission_document(document)

    def test_waypoint_number_is_one_based(self):
        document = {"waypoints": [{"waypoint_number": 0, "latitude": 1.0, "longitude": 2.0}]}

        with pytest.raises(MissionFormatError):
            parse_mission_document(document)


class TestParseMissionFile:
    """Tests for loading route files from disk."""

    def test_load(self, route_document, tmp_path):
        path = tmp_path / "Runway.json"
        path.write_text(json.dumps(route_document))

        waypoints = parse_mission_file(path)

        assert [w.index for w in waypoints] == [1, 2]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "Broken.json"
        path.write_text("{not json")

        with pytest.raises(MissionFormatError, match="Error parsing JSON"):
            parse_mission_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissionFormatError):
            parse_mission_file(tmp_path / "Nope.json")
