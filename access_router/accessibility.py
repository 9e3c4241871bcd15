from __future__ import annotations

from .models import AccessibilityProfile, AccessLevel, Edge

PARTIAL_CURB_CM = 3.0
PARTIAL_SLOPE_PCT = 5.0
ROUGH_SURFACES: frozenset[str] = frozenset({"cobblestone", "gravel"})

REASON_CURB = "curb_over_3cm"
REASON_SLOPE = "slope_over_5pct"
REASON_SURFACE = "rough_surface"
REASON_TEMPORARY = "temporary_restriction"
REASON_NO_RAMP = "no_ramp"


def is_accessible(edge: Edge, profile: AccessibilityProfile) -> bool:
    """Hard gate: any single failing limit makes the edge impassable."""
    if edge.curb > profile.max_curb_height and not edge.has_ramp:
        return False
    if abs(edge.slope) > profile.max_slope:
        return False
    if edge.width < profile.min_width:
        return False
    if edge.temporary == "repair" and profile.mobility_type == "wheelchair":
        return False
    return True


def classify(edge: Edge, profile: AccessibilityProfile) -> AccessLevel:
    if not is_accessible(edge, profile):
        return "inaccessible"
    if (
        edge.curb > PARTIAL_CURB_CM
        or abs(edge.slope) > PARTIAL_SLOPE_PCT
        or edge.surface in ROUGH_SURFACES
        or edge.temporary is not None
    ):
        return "partial"
    return "accessible"


def issue_reasons(edge: Edge) -> list[str]:
    """All reason tags that apply to the edge, in a fixed order."""
    reasons: list[str] = []
    if edge.curb > PARTIAL_CURB_CM:
        reasons.append(REASON_CURB)
    if abs(edge.slope) > PARTIAL_SLOPE_PCT:
        reasons.append(REASON_SLOPE)
    if edge.surface in ROUGH_SURFACES:
        reasons.append(REASON_SURFACE)
    if edge.temporary is not None:
        reasons.append(REASON_TEMPORARY)
    if edge.curb > 0 and not edge.has_ramp:
        reasons.append(REASON_NO_RAMP)
    return reasons
