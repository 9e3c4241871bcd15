from __future__ import annotations

import heapq
import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass

from .models import Edge

CameFrom = dict[str, tuple[str, Edge]]
NeighborsFn = Callable[[str], tuple[tuple[str, Edge], ...]]
EdgeGateFn = Callable[[Edge], bool]
EdgeWeightFn = Callable[[Edge], float]
HeuristicFn = Callable[[str], float]


@dataclass(frozen=True)
class SearchResult:
    goal: str
    cost: float
    came_from: CameFrom
    explored_states: int


class PathNotFoundError(ValueError):
    pass


def astar_search(
    *,
    neighbors: NeighborsFn,
    start: str,
    goal: str,
    is_passable: EdgeGateFn,
    weight: EdgeWeightFn,
    heuristic: HeuristicFn,
    max_expansions: int | None = None,
    deadline_monotonic_s: float | None = None,
) -> SearchResult:
    """Best-first search from ``start`` to ``goal``.

    Edges rejected by ``is_passable`` are never costed or enqueued. Stale heap
    entries stand in for decrease-key and are dropped on extraction. Raises
    ``PathNotFoundError`` when the frontier empties or a bound is hit.
    """
    seq = itertools.count()
    heap: list[tuple[float, int, float, str]] = [(heuristic(start), next(seq), 0.0, start)]
    best_cost: dict[str, float] = {start: 0.0}
    came_from: CameFrom = {}
    explored = 0
    while heap:
        if deadline_monotonic_s is not None and time.monotonic() >= float(deadline_monotonic_s):
            raise PathNotFoundError("search deadline exceeded")
        if max_expansions is not None and max_expansions > 0 and explored >= max_expansions:
            raise PathNotFoundError("expansion budget exceeded")
        _f_score, _order, g_score, node = heapq.heappop(heap)
        if g_score > best_cost[node]:
            continue
        explored += 1
        if node == goal:
            return SearchResult(goal=goal, cost=g_score, came_from=came_from, explored_states=explored)
        for nxt, edge in neighbors(node):
            if not is_passable(edge):
                continue
            tentative = g_score + weight(edge)
            prev_best = best_cost.get(nxt)
            if prev_best is not None and tentative >= prev_best:
                continue
            best_cost[nxt] = tentative
            came_from[nxt] = (node, edge)
            heapq.heappush(heap, (tentative + heuristic(nxt), next(seq), tentative, nxt))
    raise PathNotFoundError("no path")


def normalize_no_path_reason(message: str) -> str:
    lowered = str(message or "").strip().lower()
    if "expansion budget" in lowered:
        return "expansion_budget_exceeded"
    if "search deadline exceeded" in lowered:
        return "search_deadline_exceeded"
    if "no path" in lowered:
        return "no_path"
    return "path_search_exhausted"
