from __future__ import annotations

import time
from collections import Counter

from .accessibility import classify, is_accessible
from .astar import PathNotFoundError, astar_search, normalize_no_path_reason
from .edge_cost import edge_weight
from .errors import normalize_reason_code
from .geo import haversine_m
from .logging_utils import log_event
from .models import AccessibilityProfile, AccessLevel, Edge, RouteResult
from .route_scoring import accessibility_score, collect_issues, path_distance_m, reconstruct_path
from .settings import settings
from .walk_graph import WalkGraph


def _default_max_expansions() -> int | None:
    limit = int(settings.route_search_max_expansions)
    return limit if limit > 0 else None


def _default_deadline() -> float | None:
    timeout_ms = int(settings.route_search_timeout_ms)
    if timeout_ms <= 0:
        return None
    return time.monotonic() + (timeout_ms / 1000.0)


def find_accessible_route(
    graph: WalkGraph,
    start: str,
    end: str,
    profile: AccessibilityProfile,
    *,
    max_expansions: int | None = None,
    deadline_monotonic_s: float | None = None,
) -> RouteResult:
    """Least-cost route from ``start`` to ``end`` for one rider profile.

    Never raises for well-formed input. Unknown endpoints give an empty result
    with ``not_found`` unset; an exhausted or aborted search sets ``not_found``.
    """
    if not graph.has_node(start) or not graph.has_node(end):
        log_event(
            "route_search",
            start=start,
            end=end,
            mobility_type=profile.mobility_type,
            outcome="endpoint_unknown",
            reason_code=normalize_reason_code("route_endpoint_unknown"),
        )
        return RouteResult()

    if not graph.connected(start, end):
        log_event(
            "route_search",
            start=start,
            end=end,
            mobility_type=profile.mobility_type,
            outcome="disconnected",
            reason_code=normalize_reason_code("route_no_path"),
        )
        return RouteResult(not_found=True, accessibility_score=0)

    goal_node = graph.nodes[end]

    def _heuristic(node_id: str) -> float:
        node = graph.nodes[node_id]
        return haversine_m(node.lat, node.lng, goal_node.lat, goal_node.lng)

    t0 = time.perf_counter()
    try:
        found = astar_search(
            neighbors=graph.neighbors,
            start=start,
            goal=end,
            is_passable=lambda edge: is_accessible(edge, profile),
            weight=lambda edge: edge_weight(edge, profile),
            heuristic=_heuristic,
            max_expansions=max_expansions if max_expansions is not None else _default_max_expansions(),
            deadline_monotonic_s=(
                deadline_monotonic_s if deadline_monotonic_s is not None else _default_deadline()
            ),
        )
    except PathNotFoundError as exc:
        reason = normalize_no_path_reason(str(exc))
        log_event(
            "route_search_aborted" if reason != "no_path" else "route_search",
            start=start,
            end=end,
            mobility_type=profile.mobility_type,
            outcome=reason,
            reason_code=normalize_reason_code("route_no_path"),
            duration_ms=round((time.perf_counter() - t0) * 1000, 2),
        )
        return RouteResult(not_found=True, accessibility_score=0)

    path, edges = reconstruct_path(found.came_from, start=start, goal=end)
    levels, issues = collect_issues(edges, profile)
    result = RouteResult(
        path=path,
        edges=edges,
        total_distance=path_distance_m(edges),
        total_weight=float(found.cost),
        accessibility_score=accessibility_score(levels),
        issues=issues,
        not_found=False,
    )
    log_event(
        "route_search",
        start=start,
        end=end,
        mobility_type=profile.mobility_type,
        outcome="found",
        hops=len(edges),
        explored_states=found.explored_states,
        total_distance_m=round(result.total_distance, 2),
        accessibility_score=result.accessibility_score,
        issue_count=len(issues),
        duration_ms=round((time.perf_counter() - t0) * 1000, 2),
    )
    return result


def classify_network(graph: WalkGraph, profile: AccessibilityProfile) -> list[tuple[Edge, AccessLevel]]:
    return [(edge, classify(edge, profile)) for edge in graph.edges]


def level_counts(levels: list[tuple[Edge, AccessLevel]]) -> dict[str, int]:
    counts = Counter(level for _edge, level in levels)
    return {level: int(counts.get(level, 0)) for level in ("accessible", "partial", "inaccessible")}
