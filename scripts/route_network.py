from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

from access_router.models import AccessibilityProfile
from access_router.routing import classify_network, find_accessible_route, level_counts
from access_router.summary import estimate_time_minutes, format_distance
from access_router.walk_graph import WalkGraph, walk_graph_from_payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate a walking network file and optionally route between two nodes."
    )
    parser.add_argument("--network", type=Path, required=True, help="Network JSON path.")
    parser.add_argument("--start", default=None)
    parser.add_argument("--end", default=None)
    parser.add_argument("--mobility-type", default="wheelchair")
    parser.add_argument("--max-curb-height", type=float, default=5.0)
    parser.add_argument("--max-slope", type=float, default=8.0)
    parser.add_argument("--min-width", type=float, default=90.0)
    return parser


def load_network(path: Path) -> WalkGraph:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return walk_graph_from_payload(payload, source=str(path))


def network_summary(graph: WalkGraph, profile: AccessibilityProfile) -> dict[str, Any]:
    return {
        "version": graph.version,
        "source": graph.source,
        "node_count": len(graph.nodes),
        "edge_count": len(graph.edges),
        "barrier_count": len(graph.barriers),
        "component_count": graph.component_count,
        "largest_component_nodes": graph.largest_component_nodes,
        "levels": level_counts(classify_network(graph, profile)),
    }


def run(args: argparse.Namespace) -> dict[str, Any]:
    graph = load_network(args.network)
    profile = AccessibilityProfile(
        mobility_type=args.mobility_type,
        max_curb_height=args.max_curb_height,
        max_slope=args.max_slope,
        min_width=args.min_width,
    )
    report: dict[str, Any] = {"network": network_summary(graph, profile)}
    if args.start is not None and args.end is not None:
        result = find_accessible_route(graph, str(args.start), str(args.end), profile)
        report["route"] = result.model_dump(mode="json", by_alias=True)
        report["distance_label"] = format_distance(result.total_distance)
        report["estimated_minutes"] = estimate_time_minutes(result.total_distance, profile.mobility_type)
    return report


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    report = run(args)
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
