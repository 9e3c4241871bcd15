from __future__ import annotations

from .models import AccessibilityProfile, Edge

SURFACE_PENALTY: dict[str, float] = {
    "asphalt": 1.0,
    "concrete": 1.0,
    "wood": 1.1,
    "gravel": 1.5,
    "cobblestone": 1.8,
    "stone": 2.0,
    "sand": 2.5,
}
UNKNOWN_SURFACE_PENALTY = 1.2
WHEELCHAIR_STEEP_SLOPE_PCT = 5.0
WHEELCHAIR_STEEP_SLOPE_MULT = 1.5
COMFORT_WIDTH_CM = 150.0
TEMPORARY_RESTRICTION_MULT = 2.0


def surface_multiplier(surface: str) -> float:
    return SURFACE_PENALTY.get(surface, UNKNOWN_SURFACE_PENALTY)


def slope_multiplier(slope: float, profile: AccessibilityProfile) -> float:
    grade = abs(slope)
    if grade <= 0:
        return 1.0
    mult = 1.0 + grade / 10.0
    if profile.mobility_type == "wheelchair" and grade > WHEELCHAIR_STEEP_SLOPE_PCT:
        mult *= WHEELCHAIR_STEEP_SLOPE_MULT
    return mult


def curb_multiplier(curb: float, has_ramp: bool) -> float:
    if curb <= 0 or has_ramp:
        return 1.0
    return 1.0 + curb / 5.0


def width_multiplier(width: float) -> float:
    if width >= COMFORT_WIDTH_CM:
        return 1.0
    return 1.0 + (COMFORT_WIDTH_CM - width) / 100.0


def edge_weight(edge: Edge, profile: AccessibilityProfile) -> float:
    """Search weight for one edge; never below its physical distance."""
    weight = float(edge.distance)
    weight *= surface_multiplier(edge.surface)
    weight *= slope_multiplier(edge.slope, profile)
    weight *= curb_multiplier(edge.curb, edge.has_ramp)
    weight *= width_multiplier(edge.width)
    if edge.temporary is not None:
        weight *= TEMPORARY_RESTRICTION_MULT
    return weight
