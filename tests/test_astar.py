from __future__ import annotations

import time

import pytest

from access_router.astar import PathNotFoundError, astar_search, normalize_no_path_reason
from access_router.models import Edge


def _edge(u: str, v: str, distance: float, **extra: object) -> Edge:
    return Edge(from_node=u, to_node=v, distance=distance, **extra)


def _adjacency(edges: list[Edge]) -> dict[str, tuple[tuple[str, Edge], ...]]:
    out: dict[str, list[tuple[str, Edge]]] = {}
    for edge in edges:
        out.setdefault(edge.from_node, []).append((edge.to_node, edge))
        out.setdefault(edge.to_node, []).append((edge.from_node, edge))
    return {k: tuple(v) for k, v in out.items()}


def _search(adjacency, start: str, goal: str, **kwargs):
    return astar_search(
        neighbors=lambda n: adjacency.get(n, ()),
        start=start,
        goal=goal,
        is_passable=kwargs.pop("is_passable", lambda e: True),
        weight=kwargs.pop("weight", lambda e: e.distance),
        heuristic=kwargs.pop("heuristic", lambda n: 0.0),
        **kwargs,
    )


def test_astar_finds_cheapest_path_and_back_pointers() -> None:
    adjacency = _adjacency(
        [
            _edge("A", "B", 1.0),
            _edge("B", "D", 1.0),
            _edge("A", "C", 1.0),
            _edge("C", "D", 3.0),
        ]
    )
    found = _search(adjacency, "A", "D")
    assert found.cost == pytest.approx(2.0)
    assert found.came_from["D"][0] == "B"
    assert found.came_from["B"][0] == "A"
    assert found.explored_states >= 3


def test_astar_start_equals_goal() -> None:
    found = _search(_adjacency([_edge("A", "B", 5.0)]), "A", "A")
    assert found.cost == 0.0
    assert found.came_from == {}
    assert found.explored_states == 1


def test_astar_never_costs_rejected_edges() -> None:
    blocked = _edge("A", "B", 1.0, curb=20)
    adjacency = _adjacency([blocked, _edge("A", "C", 5.0), _edge("C", "B", 5.0)])
    costed: list[Edge] = []

    def _weight(edge: Edge) -> float:
        costed.append(edge)
        return edge.distance

    found = _search(adjacency, "A", "B", is_passable=lambda e: e.curb == 0, weight=_weight)
    assert found.cost == pytest.approx(10.0)
    assert blocked not in costed


def test_astar_raises_when_frontier_empties() -> None:
    adjacency = _adjacency([_edge("A", "B", 1.0), _edge("C", "D", 1.0)])
    with pytest.raises(PathNotFoundError, match="no path"):
        _search(adjacency, "A", "D")


def test_astar_updates_improved_neighbor() -> None:
    # C is first reached via the expensive direct edge, then improved through B.
    adjacency = _adjacency(
        [
            _edge("A", "C", 10.0),
            _edge("A", "B", 1.0),
            _edge("B", "C", 1.0),
            _edge("C", "D", 1.0),
        ]
    )
    found = _search(adjacency, "A", "D")
    assert found.cost == pytest.approx(3.0)
    assert found.came_from["C"][0] == "B"


def test_astar_bounds_abort_search() -> None:
    adjacency = _adjacency([_edge(str(i), str(i + 1), 1.0) for i in range(50)])
    with pytest.raises(PathNotFoundError) as budget:
        _search(adjacency, "0", "50", max_expansions=5)
    assert normalize_no_path_reason(str(budget.value)) == "expansion_budget_exceeded"

    with pytest.raises(PathNotFoundError) as deadline:
        _search(adjacency, "0", "50", deadline_monotonic_s=time.monotonic() - 1.0)
    assert normalize_no_path_reason(str(deadline.value)) == "search_deadline_exceeded"


def test_normalize_no_path_reason_defaults() -> None:
    assert normalize_no_path_reason("no path") == "no_path"
    assert normalize_no_path_reason("") == "path_search_exhausted"
