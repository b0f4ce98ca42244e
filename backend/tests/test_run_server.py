"""
Tests for the server launch script.
"""

import sys

import uvicorn

import run_server
from auvmission.config import DATA_FOLDER_ENV
from auvmission.main import app


def test_listed_endpoints_exist(tmp_path, monkeypatch, capsys):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setattr(sys, "argv", ["run_server.py", str(tmp_path), "--port", "5000"])
    monkeypatch.setenv(DATA_FOLDER_ENV, "unused")

    run_server.main()

    out = capsys.readouterr().out
    listed = [line.split()[:2] for line in out.splitlines() if line.startswith("  GET ") or line.startswith("  POST ")]
    routes = {
        (method, route.path.replace("{mission_id}", "{id}"))
        for route in app.routes
        for method in getattr(route, "methods", ())
    }

    assert 0 < len(listed) <= 8
    for method, path in listed:
        assert (method, path) in routes
    assert calls[0][1]["port"] == 5000
