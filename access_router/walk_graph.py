from __future__ import annotations

import json
import math
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import NetworkDataError, normalize_reason_code
from .geo import haversine_m
from .logging_utils import log_event
from .models import Barrier, Edge, Node
from .settings import settings

Adjacency = dict[str, tuple[tuple[str, Edge], ...]]

# Recorded lengths may undershoot the great-circle span by rounding only.
EDGE_SPAN_TOLERANCE_M = 1.0


@dataclass(frozen=True)
class WalkGraph:
    version: str
    source: str
    nodes: dict[str, Node]
    edges: tuple[Edge, ...]
    adjacency: Adjacency
    barriers: tuple[Barrier, ...]
    component_by_node: dict[str, int]
    component_sizes: dict[int, int]
    component_count: int

    def neighbors(self, node_id: str) -> tuple[tuple[str, Edge], ...]:
        return self.adjacency.get(node_id, ())

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def connected(self, a: str, b: str) -> bool:
        comp = self.component_by_node.get(a)
        return comp is not None and comp == self.component_by_node.get(b)

    @property
    def largest_component_nodes(self) -> int:
        return max(self.component_sizes.values(), default=0)


def _validation_messages(exc: ValidationError) -> list[str]:
    out: list[str] = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = str(err.get("msg", "invalid value"))
        out.append(f"{loc}: {msg}" if loc else msg)
    return out


def _coerce_records(
    raw_items: Iterable[object],
    model: type[BaseModel],
    *,
    kind: str,
    reason_code: str,
) -> list[Any]:
    out: list[Any] = []
    for idx, raw in enumerate(raw_items):
        if isinstance(raw, model):
            out.append(raw)
            continue
        try:
            out.append(model.model_validate(raw))
        except ValidationError as exc:
            raise NetworkDataError(
                reason_code=reason_code,
                message=f"{kind} #{idx} is malformed",
                details={"index": idx, "errors": _validation_messages(exc)},
            ) from exc
    return out


def _compute_component_index(
    nodes: Mapping[str, Node],
    adjacency: Adjacency,
) -> tuple[dict[str, int], dict[int, int], int]:
    component_by_node: dict[str, int] = {}
    component_sizes: dict[int, int] = {}
    component_idx = 0
    for node_id in nodes:
        if node_id in component_by_node:
            continue
        component_idx += 1
        q: deque[str] = deque([node_id])
        size = 0
        while q:
            current = q.popleft()
            if current in component_by_node:
                continue
            component_by_node[current] = component_idx
            size += 1
            for nxt, _edge in adjacency.get(current, ()):
                if nxt not in component_by_node:
                    q.append(nxt)
        component_sizes[component_idx] = size
    return component_by_node, component_sizes, component_idx


def build_walk_graph(
    nodes: Iterable[Node | Mapping[str, Any]],
    edges: Iterable[Edge | Mapping[str, Any]],
    barriers: Iterable[Barrier | Mapping[str, Any]] = (),
    *,
    version: str = "unknown",
    source: str = "memory",
) -> WalkGraph:
    """Validate raw network records and build the read-only adjacency index.

    Both traversal directions of an edge point at the same ``Edge`` record.
    Malformed data raises ``NetworkDataError`` instead of yielding a partial graph.
    """
    node_list: list[Node] = _coerce_records(nodes, Node, kind="node", reason_code="node_invalid")
    edge_list: list[Edge] = _coerce_records(edges, Edge, kind="edge", reason_code="edge_invalid")
    barrier_list: list[Barrier] = _coerce_records(
        barriers, Barrier, kind="barrier", reason_code="barrier_invalid"
    )

    node_by_id: dict[str, Node] = {}
    for node in node_list:
        if node.id in node_by_id:
            raise NetworkDataError(
                reason_code="node_duplicate",
                message=f"duplicate node id '{node.id}'",
                details={"node_id": node.id},
            )
        node_by_id[node.id] = node

    adjacency_mut: dict[str, list[tuple[str, Edge]]] = {node_id: [] for node_id in node_by_id}
    for idx, edge in enumerate(edge_list):
        if edge.from_node == edge.to_node:
            raise NetworkDataError(
                reason_code="edge_self_loop",
                message=f"edge #{idx} starts and ends at node '{edge.from_node}'",
                details={"index": idx, "node_id": edge.from_node},
            )
        missing = [n for n in (edge.from_node, edge.to_node) if n not in node_by_id]
        if missing:
            raise NetworkDataError(
                reason_code="edge_unknown_node",
                message=f"edge #{idx} references unknown node(s): {', '.join(missing)}",
                details={"index": idx, "missing": missing},
            )
        if edge.distance <= 0:
            raise NetworkDataError(
                reason_code="edge_invalid",
                message=f"edge #{idx} between distinct nodes has non-positive distance {edge.distance}",
                details={"index": idx, "distance": edge.distance},
            )
        u, v = node_by_id[edge.from_node], node_by_id[edge.to_node]
        span_m = haversine_m(u.lat, u.lng, v.lat, v.lng)
        if edge.distance < span_m - EDGE_SPAN_TOLERANCE_M:
            raise NetworkDataError(
                reason_code="edge_invalid",
                message=(
                    f"edge #{idx} distance {edge.distance:.1f} m is shorter than the "
                    f"{span_m:.1f} m straight line between its endpoints"
                ),
                details={"index": idx, "distance": edge.distance, "span_m": round(span_m, 2)},
            )
        adjacency_mut[edge.from_node].append((edge.to_node, edge))
        adjacency_mut[edge.to_node].append((edge.from_node, edge))

    adjacency: Adjacency = {node_id: tuple(items) for node_id, items in adjacency_mut.items()}
    component_by_node, component_sizes, component_count = _compute_component_index(node_by_id, adjacency)
    return WalkGraph(
        version=version,
        source=source,
        nodes=node_by_id,
        edges=tuple(edge_list),
        adjacency=adjacency,
        barriers=tuple(barrier_list),
        component_by_node=component_by_node,
        component_sizes=component_sizes,
        component_count=component_count,
    )


def walk_graph_from_payload(payload: object, *, source: str = "memory") -> WalkGraph:
    if not isinstance(payload, dict):
        raise NetworkDataError(
            reason_code="network_payload_invalid",
            message="network payload is not a JSON object",
        )
    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges", [])
    raw_barriers = payload.get("barriers", [])
    for key, value in (("nodes", raw_nodes), ("edges", raw_edges), ("barriers", raw_barriers)):
        if not isinstance(value, list):
            raise NetworkDataError(
                reason_code="network_payload_invalid",
                message=f"network payload field '{key}' must be a list",
                details={"field": key},
            )
    return build_walk_graph(
        raw_nodes,
        raw_edges,
        raw_barriers,
        version=str(payload.get("version", "unknown")),
        source=str(payload.get("source", source)),
    )


def _network_asset_path() -> Path:
    explicit = str(settings.network_asset_path or "").strip()
    if explicit:
        return Path(explicit)
    return Path(settings.out_dir) / "network" / "walk_network.json"


@lru_cache(maxsize=1)
def load_walk_graph() -> WalkGraph | None:
    path = _network_asset_path()
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        log_event("network_rejected", path=str(path), reason_code="network_payload_invalid", error=str(exc))
        raise NetworkDataError(
            reason_code="network_payload_invalid",
            message=f"cannot read network file {path}",
            details={"path": str(path)},
        ) from exc
    try:
        graph = walk_graph_from_payload(payload, source=str(path))
    except NetworkDataError as exc:
        log_event("network_rejected", path=str(path), reason_code=exc.reason_code, error=exc.message)
        raise
    log_event(
        "network_loaded",
        path=str(path),
        version=graph.version,
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        barrier_count=len(graph.barriers),
        component_count=graph.component_count,
        largest_component_nodes=graph.largest_component_nodes,
    )
    return graph


def walk_graph_status() -> tuple[bool, str]:
    try:
        graph = load_walk_graph()
    except NetworkDataError as exc:
        return False, normalize_reason_code(exc.reason_code)
    if graph is None:
        return False, "network_unavailable"
    if not graph.nodes:
        return False, "network_empty"
    return True, "ok"


def nearest_node(
    graph: WalkGraph,
    *,
    lat: float,
    lng: float,
    max_distance_m: float | None = None,
) -> tuple[str | None, float]:
    best_id: str | None = None
    best_dist = math.inf
    for node_id, node in graph.nodes.items():
        dist = haversine_m(lat, lng, node.lat, node.lng)
        if not math.isfinite(dist):
            continue
        if dist < best_dist:
            best_id = node_id
            best_dist = dist
    if best_id is None:
        return None, math.inf
    if max_distance_m is not None and best_dist > max_distance_m:
        return None, best_dist
    return best_id, best_dist


def route_coordinates(graph: WalkGraph, path: Iterable[str]) -> list[tuple[float, float]]:
    coords: list[tuple[float, float]] = []
    for node_id in path:
        node = graph.nodes.get(node_id)
        if node is not None:
            coords.append((node.lat, node.lng))
    return coords
