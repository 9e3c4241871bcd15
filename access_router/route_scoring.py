from __future__ import annotations

import math
from collections.abc import Sequence

from .accessibility import classify, issue_reasons
from .astar import CameFrom
from .models import AccessibilityProfile, AccessLevel, Edge, RouteIssue

LEVEL_POINTS: dict[str, float] = {
    "accessible": 100.0,
    "partial": 60.0,
    "inaccessible": 0.0,
}


def reconstruct_path(came_from: CameFrom, *, start: str, goal: str) -> tuple[list[str], list[Edge]]:
    """Walk back-pointers from goal to start; returns forward node and edge sequences."""
    nodes: list[str] = [goal]
    edges: list[Edge] = []
    current = goal
    while current != start:
        prev, edge = came_from[current]
        nodes.append(prev)
        edges.append(edge)
        current = prev
    nodes.reverse()
    edges.reverse()
    return nodes, edges


def path_distance_m(edges: Sequence[Edge]) -> float:
    return float(sum(edge.distance for edge in edges))


def accessibility_score(levels: Sequence[AccessLevel]) -> int:
    # An empty route (start == goal) counts as fully accessible.
    if not levels:
        return 100
    mean = sum(LEVEL_POINTS[level] for level in levels) / len(levels)
    return int(math.floor(mean + 0.5))


def collect_issues(edges: Sequence[Edge], profile: AccessibilityProfile) -> tuple[list[AccessLevel], list[RouteIssue]]:
    levels: list[AccessLevel] = []
    issues: list[RouteIssue] = []
    for edge in edges:
        level = classify(edge, profile)
        levels.append(level)
        if level == "accessible":
            continue
        issues.append(RouteIssue(edge=edge, level=level, reasons=issue_reasons(edge)))
    return levels, issues
