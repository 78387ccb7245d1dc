import threading
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Response
from fastapi.responses import HTMLResponse

from subwaymap.api.serializers import serialize_compiled_map
from subwaymap.catalog.registry import get_map_registry
from subwaymap.compiler.compiler import compile_map
from subwaymap.compiler.render_d2 import render_d2
from subwaymap.config import SUBWAY_MAP_DEFAULT
from subwaymap.ir.errors import UnknownMapError
from subwaymap.ir.topology import ServiceStatus, Topology
from subwaymap.renderer.html_page import render_page
from subwaymap.renderer.svg_renderer import render_svg
from subwaymap.schemas import MapListResponse, MapSummary, StatusUpdateResponse
from subwaymap.simulation.status import StatusSimulator

router = APIRouter()

_simulator: Optional[StatusSimulator] = None
_simulator_lock = threading.Lock()


def get_simulator() -> StatusSimulator:
    """Get or create the shared status simulator"""
    global _simulator
    with _simulator_lock:
        if _simulator is None:
            _simulator = StatusSimulator()
        return _simulator


def reset_simulator(simulator: Optional[StatusSimulator] = None) -> None:
    global _simulator
    with _simulator_lock:
        _simulator = simulator


def _get_topology(map_id: str) -> Topology:
    try:
        return get_map_registry().get(map_id)
    except UnknownMapError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _summary(topology: Topology) -> MapSummary:
    return MapSummary(
        id=topology.id,
        title=topology.title,
        subtitle=topology.subtitle,
        node_count=len(topology.nodes),
        edge_count=len(topology.edges),
        cluster_count=len(topology.clusters),
        auto_layout=topology.layout is not None,
    )


def _status_response(map_id: str, statuses: Dict[str, ServiceStatus]) -> StatusUpdateResponse:
    return StatusUpdateResponse(
        map_id=map_id,
        statuses={node_id: status.value for node_id, status in statuses.items()},
        changed=len(statuses),
    )


# ============================================================
# MAP DATA
# ============================================================

@router.get("/api/maps", response_model=MapListResponse)
def list_maps():
    """List all registered subway maps"""
    registry = get_map_registry()
    return MapListResponse(
        default=SUBWAY_MAP_DEFAULT,
        maps=[_summary(t) for t in registry.list_all()],
    )


@router.get("/api/maps/{map_id}")
def get_map(map_id: str):
    """Positioned nodes, kept edges, cluster boxes and validation for one map"""
    topology = _get_topology(map_id)
    return serialize_compiled_map(compile_map(topology))


@router.get("/api/maps/{map_id}/svg")
def get_map_svg(map_id: str):
    topology = _get_topology(map_id)
    svg = render_svg(compile_map(topology))
    return Response(svg, media_type="image/svg+xml")


@router.get("/api/maps/{map_id}/d2")
def get_map_d2(map_id: str):
    topology = _get_topology(map_id)
    return Response(render_d2(compile_map(topology)), media_type="text/plain")


@router.get("/api/maps/{map_id}/validation")
def get_map_validation(map_id: str):
    topology = _get_topology(map_id)
    result = compile_map(topology).validation
    return {
        "status": "success" if result.is_valid else "invalid",
        "summary": result.get_summary(),
        **result.to_dict(),
    }


# ============================================================
# STATUS SIMULATION
# ============================================================

@router.post("/api/maps/{map_id}/randomize", response_model=StatusUpdateResponse)
def randomize_map(map_id: str):
    """Assign every status-tracking node a random status"""
    topology = _get_topology(map_id)
    return _status_response(map_id, get_simulator().randomize(topology))


@router.post("/api/maps/{map_id}/tick", response_model=StatusUpdateResponse)
def tick_map(map_id: str):
    """One timer step; only re-drawn nodes are returned"""
    topology = _get_topology(map_id)
    return _status_response(map_id, get_simulator().tick(topology))


@router.post("/api/maps/{map_id}/reset", response_model=StatusUpdateResponse)
def reset_map(map_id: str):
    topology = _get_topology(map_id)
    return _status_response(map_id, get_simulator().reset(topology))


# ============================================================
# PAGES
# ============================================================

@router.get("/", response_class=HTMLResponse)
def index_page():
    return map_page(SUBWAY_MAP_DEFAULT)


@router.get("/maps/{map_id}", response_class=HTMLResponse)
def map_page(map_id: str):
    topology = _get_topology(map_id)
    simulator = get_simulator()
    return HTMLResponse(render_page(compile_map(topology), simulator.interval_ms))
