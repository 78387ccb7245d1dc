"""
HTTP surface tests using FastAPI's TestClient (requires httpx).
"""
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from subwaymap.api import routes
from subwaymap.catalog.registry import get_map_registry
from subwaymap.ir.topology import ServiceStatus
from subwaymap.main import app
from subwaymap.simulation.status import StatusSimulator


@pytest.fixture
def client():
    return TestClient(app)


class TestMapData:
    def test_list_maps(self, client):
        resp = client.get("/api/maps")
        assert resp.status_code == 200
        data = resp.json()
        assert data["default"] == "wmap"
        summaries = {m["id"]: m for m in data["maps"]}
        assert set(summaries) == {"wmap", "wmap-auto", "dataflow"}
        assert summaries["wmap"]["node_count"] == 62
        assert summaries["wmap"]["cluster_count"] == 9
        assert summaries["wmap"]["auto_layout"] is False
        assert summaries["dataflow"]["auto_layout"] is True

    def test_get_map(self, client):
        data = client.get("/api/maps/wmap").json()
        assert data["id"] == "wmap"
        assert data["positions"]["ubs"] == {"x": 50, "y": 600}
        assert len(data["edges"]) == 70
        assert data["nodes"][0]["kind"] == "engine"
        assert data["nodes"][0]["status"] == "healthy"
        assert data["clusters"][0]["name"] == "Workstation"
        assert data["validation"]["is_valid"] is True

    def test_unknown_map_is_404(self, client):
        for path in ("/api/maps/nope", "/api/maps/nope/svg", "/maps/nope"):
            resp = client.get(path)
            assert resp.status_code == 404
            assert resp.json()["detail"] == "Map 'nope' is not registered"
        assert client.post("/api/maps/nope/tick").status_code == 404

    def test_svg(self, client):
        resp = client.get("/api/maps/wmap/svg")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("image/svg+xml")
        assert resp.text.startswith("<svg")

    def test_d2(self, client):
        resp = client.get("/api/maps/dataflow/d2")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "direction: right" in resp.text

    def test_validation(self, client):
        data = client.get("/api/maps/dataflow/validation").json()
        assert data["status"] == "success"
        assert data["summary"].startswith("Valid")
        # msk topics and the spare MQ queue are not wired into the flow
        orphans = {i["node_id"] for i in data["issues"] if i["code"] == "ORPHANED_NODE"}
        assert "mq-payments-1" in orphans


class TestStatus:
    def test_randomize(self, client):
        data = client.post("/api/maps/wmap/randomize").json()
        assert data["map_id"] == "wmap"
        assert "ubs" not in data["statuses"]
        assert "G" not in data["statuses"]
        assert data["changed"] == len(data["statuses"]) == 60
        assert set(data["statuses"].values()) <= {"healthy", "warning", "critical"}

    def test_randomize_mutates_registered_map(self, client):
        data = client.post("/api/maps/wmap/randomize").json()
        topology = get_map_registry().get("wmap")
        for node_id, status in data["statuses"].items():
            assert topology.get_node(node_id).status.value == status

    def test_tick_reports_only_redrawn_nodes(self, client):
        routes.reset_simulator(StatusSimulator(seed=1, change_probability=0.0))
        data = client.post("/api/maps/wmap/tick").json()
        assert data == {"map_id": "wmap", "statuses": {}, "changed": 0}

    def test_tick_all(self, client):
        routes.reset_simulator(StatusSimulator(seed=1, change_probability=1.0))
        data = client.post("/api/maps/dataflow/tick").json()
        assert data["changed"] == 25

    def test_reset(self, client):
        client.post("/api/maps/wmap/randomize")
        data = client.post("/api/maps/wmap/reset").json()
        assert set(data["statuses"].values()) == {"healthy"}
        topology = get_map_registry().get("wmap")
        assert set(topology.status_map().values()) == {ServiceStatus.HEALTHY}

    def test_status_shows_in_svg(self, client):
        routes.reset_simulator(StatusSimulator(seed=1, change_probability=1.0, weights=(0, 0, 1)))
        client.post("/api/maps/wmap/tick")
        svg = client.get("/api/maps/wmap/svg").text
        assert 'data-status="healthy"' not in svg
        assert 'data-status="critical"' in svg


class TestPages:
    def test_index_renders_default_map(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "WMAP Mag 7" in resp.text
        assert "/api/maps/wmap" in resp.text

    def test_map_page(self, client):
        resp = client.get("/maps/dataflow")
        assert resp.status_code == 200
        assert "Service Data Flow" in resp.text
        assert "<h2>Flow</h2>" in resp.text


class TestSharedSimulator:
    def test_concurrent_first_lookups_share_one_simulator(self):
        routes.reset_simulator()
        with ThreadPoolExecutor(max_workers=8) as pool:
            simulators = list(pool.map(lambda _: routes.get_simulator(), range(16)))
        assert len({id(s) for s in simulators}) == 1
