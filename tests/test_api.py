from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import access_router.walk_graph as walk_graph_module
from access_router.main import app
from access_router.walk_graph import load_walk_graph

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "walk_network.json"


@pytest.fixture()
def client(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(walk_graph_module.settings, "network_asset_path", str(FIXTURE))
    monkeypatch.setattr(walk_graph_module.settings, "out_dir", str(tmp_path))
    load_walk_graph.cache_clear()
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        load_walk_graph.cache_clear()


def test_health_and_profiles(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    payload = client.get("/profiles").json()
    assert [p["mobilityType"] for p in payload["profiles"]] == [
        "wheelchair",
        "wheelchair_assisted",
        "stroller",
        "crutches",
    ]
    assert payload["speeds_m_per_min"]["crutches"] == 30.0


def test_network_status_reports_counts(client: TestClient) -> None:
    payload = client.get("/network/status").json()
    assert payload["ok"] is True
    assert payload["node_count"] == 6
    assert payload["edge_count"] == 5
    assert payload["barrier_count"] == 2
    assert payload["component_count"] == 2
    assert payload["largest_component_nodes"] == 5


def test_route_by_node_ids_avoids_blocked_curb(client: TestClient) -> None:
    resp = client.post("/route", json={"start": "a", "end": "c", "profile": {"mobilityType": "wheelchair"}})
    assert resp.status_code == 200
    payload = resp.json()
    result = payload["result"]
    assert result["path"] == ["a", "b", "c"]
    assert result["total_distance"] == 180.0
    assert result["accessibility_score"] == 80
    assert result["not_found"] is False
    assert len(result["issues"]) == 1
    issue = result["issues"][0]
    assert issue["edge"]["from"] == "b"
    assert issue["level"] == "partial"
    assert issue["reasons"] == ["rough_surface", "no_ramp"]
    assert payload["distance_label"] == "180 m"
    assert payload["estimated_minutes"] == 5
    assert payload["geometry"]["coordinates"][0] == [37.6173, 55.7558]


def test_route_by_coordinates_snaps_to_nodes(client: TestClient) -> None:
    resp = client.post(
        "/route",
        json={
            "start": {"lat": 55.75581, "lng": 37.61731},
            "end": {"lat": 55.75739, "lng": 37.61869},
            "profile": {"mobilityType": "stroller", "maxCurbHeight": 8},
        },
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["start_node"] == "a"
    assert payload["end_node"] == "e"
    assert payload["result"]["path"] == ["a", "b", "c", "e"]


def test_route_blocked_by_repair_for_wheelchair(client: TestClient) -> None:
    resp = client.post("/route", json={"start": "a", "end": "e"})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["not_found"] is True
    assert result["path"] == []


def test_route_unknown_node_and_unsnappable_point(client: TestClient) -> None:
    unknown = client.post("/route", json={"start": "a", "end": "nope"}).json()
    assert unknown["result"]["path"] == []
    assert unknown["result"]["not_found"] is False

    far = client.post("/route", json={"start": {"lat": 10.0, "lng": 10.0}, "end": "a"})
    assert far.status_code == 404


def test_network_levels_and_barriers(client: TestClient) -> None:
    levels = client.post("/network/levels", json={"profile": {"mobilityType": "wheelchair"}}).json()
    assert levels["counts"] == {"accessible": 2, "partial": 1, "inaccessible": 2}
    assert [item["level"] for item in levels["edges"]] == [
        "accessible",
        "partial",
        "inaccessible",
        "accessible",
        "inaccessible",
    ]
    barriers = client.get("/barriers").json()["barriers"]
    assert [b["id"] for b in barriers] == ["bar-1", "bar-2"]


def test_missing_network_returns_503(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(walk_graph_module.settings, "network_asset_path", str(tmp_path / "none.json"))
    load_walk_graph.cache_clear()
    try:
        with TestClient(app) as client:
            assert client.post("/route", json={"start": "a", "end": "b"}).status_code == 503
            assert client.get("/network/status").json() == {
                "ok": False,
                "reason": "network_unavailable",
                "node_count": 0,
                "edge_count": 0,
                "barrier_count": 0,
                "component_count": 0,
                "largest_component_nodes": 0,
            }
    finally:
        load_walk_graph.cache_clear()
