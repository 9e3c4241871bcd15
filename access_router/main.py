from __future__ import annotations

import time
import uuid
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .errors import NetworkDataError
from .logging_utils import log_event
from .models import (
    AccessibilityProfile,
    BarrierListResponse,
    EdgeLevel,
    GeoJSONLineString,
    LatLng,
    NetworkLevelsRequest,
    NetworkLevelsResponse,
    NetworkStatusResponse,
    ProfileListResponse,
    RouteRequest,
    RouteResponse,
)
from .routing import classify_network, find_accessible_route, level_counts
from .settings import settings
from .summary import SPEED_M_PER_MIN, estimate_time_minutes, format_distance
from .walk_graph import WalkGraph, load_walk_graph, nearest_node, route_coordinates, walk_graph_status

DEFAULT_PROFILES: tuple[AccessibilityProfile, ...] = (
    AccessibilityProfile(mobility_type="wheelchair", max_curb_height=5, max_slope=8, min_width=90),
    AccessibilityProfile(mobility_type="wheelchair_assisted", max_curb_height=10, max_slope=10, min_width=90),
    AccessibilityProfile(mobility_type="stroller", max_curb_height=8, max_slope=10, min_width=70),
    AccessibilityProfile(mobility_type="crutches", max_curb_height=15, max_slope=12, min_width=60),
)

app = FastAPI(title="Accessible Walking Router", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def walk_graph() -> WalkGraph:
    try:
        graph = load_walk_graph()
    except NetworkDataError as e:
        raise HTTPException(status_code=503, detail=f"{e.reason_code}: {e.message}") from e
    if graph is None:
        raise HTTPException(status_code=503, detail="network_unavailable")
    return graph


GraphDep = Annotated[WalkGraph, Depends(walk_graph)]


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/profiles", response_model=ProfileListResponse)
async def list_profiles() -> ProfileListResponse:
    return ProfileListResponse(profiles=list(DEFAULT_PROFILES), speeds_m_per_min=dict(SPEED_M_PER_MIN))


@app.get("/network/status", response_model=NetworkStatusResponse)
def network_status() -> NetworkStatusResponse:
    ok, reason = walk_graph_status()
    graph = load_walk_graph() if ok else None
    if graph is None:
        return NetworkStatusResponse(ok=False, reason=reason)
    return NetworkStatusResponse(
        ok=True,
        reason=reason,
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        barrier_count=len(graph.barriers),
        component_count=graph.component_count,
        largest_component_nodes=graph.largest_component_nodes,
    )


@app.get("/barriers", response_model=BarrierListResponse)
async def list_barriers(graph: GraphDep) -> BarrierListResponse:
    return BarrierListResponse(barriers=list(graph.barriers))


def _resolve_endpoint(graph: WalkGraph, point: str | LatLng, *, label: str) -> str:
    if isinstance(point, str):
        return point
    node_id, dist_m = nearest_node(
        graph,
        lat=point.lat,
        lng=point.lng,
        max_distance_m=float(settings.nearest_node_max_distance_m),
    )
    if node_id is None:
        raise HTTPException(
            status_code=404,
            detail=f"no network node within {settings.nearest_node_max_distance_m:.0f} m of {label}",
        )
    return node_id


@app.post("/route", response_model=RouteResponse)
def compute_route(req: RouteRequest, graph: GraphDep) -> RouteResponse:
    request_id = str(uuid.uuid4())
    t0 = time.perf_counter()

    start_id = _resolve_endpoint(graph, req.start, label="start")
    end_id = _resolve_endpoint(graph, req.end, label="end")
    result = find_accessible_route(graph, start_id, end_id, req.profile)

    geometry = None
    if result.path:
        geometry = GeoJSONLineString(
            type="LineString",
            coordinates=[(lng, lat) for lat, lng in route_coordinates(graph, result.path)],
        )

    log_event(
        "route_request",
        request_id=request_id,
        start=start_id,
        end=end_id,
        profile=req.profile.model_dump(),
        found=result.found,
        not_found=result.not_found,
        total_distance_m=round(result.total_distance, 2),
        accessibility_score=result.accessibility_score,
        duration_ms=round((time.perf_counter() - t0) * 1000, 2),
    )

    return RouteResponse(
        start_node=start_id,
        end_node=end_id,
        result=result,
        geometry=geometry,
        distance_label=format_distance(result.total_distance),
        estimated_minutes=estimate_time_minutes(result.total_distance, req.profile.mobility_type),
    )


@app.post("/network/levels", response_model=NetworkLevelsResponse)
def network_levels(req: NetworkLevelsRequest, graph: GraphDep) -> NetworkLevelsResponse:
    levels = classify_network(graph, req.profile)
    return NetworkLevelsResponse(
        edges=[EdgeLevel(edge=edge, level=level) for edge, level in levels],
        counts=level_counts(levels),
    )
