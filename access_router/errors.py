from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "network_unavailable",
        "network_payload_invalid",
        "node_invalid",
        "node_duplicate",
        "edge_invalid",
        "edge_self_loop",
        "edge_unknown_node",
        "barrier_invalid",
        "route_endpoint_unknown",
        "route_no_path",
        "network_empty",
    }
)


@dataclass
class NetworkDataError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


def normalize_reason_code(reason_code: str, *, default: str = "network_payload_invalid") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
