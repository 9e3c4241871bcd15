from __future__ import annotations

import math

SPEED_M_PER_MIN: dict[str, float] = {
    "wheelchair": 40.0,
    "wheelchair_assisted": 50.0,
    "stroller": 60.0,
    "crutches": 30.0,
}
DEFAULT_SPEED_M_PER_MIN = 50.0


def speed_m_per_min(mobility_type: str) -> float:
    return SPEED_M_PER_MIN.get(str(mobility_type), DEFAULT_SPEED_M_PER_MIN)


def estimate_time_minutes(total_distance_m: float, mobility_type: str) -> int:
    if total_distance_m <= 0:
        return 0
    return int(math.ceil(total_distance_m / speed_m_per_min(mobility_type)))


def format_distance(meters: float) -> str:
    rounded = int(round(meters))
    if rounded < 1000:
        return f"{rounded} m"
    return f"{meters / 1000.0:.1f} km"
