from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MobilityType = Literal["wheelchair", "wheelchair_assisted", "stroller", "crutches"]
AccessLevel = Literal["accessible", "partial", "inaccessible"]
IssueLevel = Literal["partial", "inaccessible"]
BarrierSeverity = Literal["none", "low", "medium", "high"]

MOBILITY_ALIASES: dict[str, str] = {
    "wheelchair-assisted": "wheelchair_assisted",
    "wheelchair_helper": "wheelchair_assisted",
    "wheelchair-helper": "wheelchair_assisted",
    "cane": "crutches",
}


def _coerce_id(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


class LatLng(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return _coerce_id(value)


class Edge(BaseModel):
    """One undirected walkway segment, stored once as a directed record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_node: str = Field(..., alias="from", min_length=1)
    to_node: str = Field(..., alias="to", min_length=1)
    distance: float = Field(..., ge=0)
    surface: str = "asphalt"
    curb: float = Field(default=0.0, ge=0)
    has_ramp: bool = Field(default=False, alias="hasRamp")
    slope: float = 0.0
    width: float = Field(default=200.0, ge=0)
    temporary: str | None = None

    @field_validator("from_node", "to_node", mode="before")
    @classmethod
    def _stringify_endpoint(cls, value: object) -> object:
        return _coerce_id(value)

    @field_validator("surface", mode="before")
    @classmethod
    def _normalize_surface(cls, value: object) -> object:
        if value is None:
            return "asphalt"
        if isinstance(value, str):
            return value.strip().lower() or "asphalt"
        return value

    @field_validator("temporary", mode="before")
    @classmethod
    def _blank_temporary_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("distance", "curb", "slope", "width")
    @classmethod
    def finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("edge attributes must be finite")
        return v


class Barrier(BaseModel):
    """Point annotation shown on the map; never consulted by the search."""

    model_config = ConfigDict(frozen=True)

    id: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    type: str = "barrier"
    severity: BarrierSeverity = "medium"
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return _coerce_id(value)


class AccessibilityProfile(BaseModel):
    """Rider limits. Passed into every query, never mutated by the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mobility_type: MobilityType = Field(default="wheelchair", alias="mobilityType")
    max_curb_height: float = Field(default=5.0, ge=0, alias="maxCurbHeight")
    max_slope: float = Field(default=8.0, ge=0, alias="maxSlope")
    min_width: float = Field(default=90.0, ge=0, alias="minWidth")

    @model_validator(mode="before")
    @classmethod
    def accept_mobility_aliases(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        data = dict(value)
        for key in ("mobility_type", "mobilityType"):
            raw = data.get(key)
            if isinstance(raw, str):
                normalized = raw.strip().lower()
                data[key] = MOBILITY_ALIASES.get(normalized, normalized)
        return data


class RouteIssue(BaseModel):
    edge: Edge
    level: IssueLevel
    reasons: list[str] = Field(default_factory=list)


class RouteResult(BaseModel):
    path: list[str] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    total_distance: float = 0.0
    total_weight: float = 0.0
    accessibility_score: int = Field(default=0, ge=0, le=100)
    issues: list[RouteIssue] = Field(default_factory=list)
    not_found: bool = False

    @property
    def found(self) -> bool:
        return bool(self.path) and not self.not_found


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"]
    coordinates: list[tuple[float, float]]  # [lng, lat]


class RouteRequest(BaseModel):
    start: str | LatLng
    end: str | LatLng
    profile: AccessibilityProfile = Field(default_factory=AccessibilityProfile)


class RouteResponse(BaseModel):
    start_node: str | None = None
    end_node: str | None = None
    result: RouteResult
    geometry: GeoJSONLineString | None = None
    distance_label: str = ""
    estimated_minutes: int = 0


class EdgeLevel(BaseModel):
    edge: Edge
    level: AccessLevel


class NetworkLevelsRequest(BaseModel):
    profile: AccessibilityProfile = Field(default_factory=AccessibilityProfile)


class NetworkLevelsResponse(BaseModel):
    edges: list[EdgeLevel]
    counts: dict[str, int]


class ProfileListResponse(BaseModel):
    profiles: list[AccessibilityProfile]
    speeds_m_per_min: dict[str, float]


class NetworkStatusResponse(BaseModel):
    ok: bool
    reason: str
    node_count: int = 0
    edge_count: int = 0
    barrier_count: int = 0
    component_count: int = 0
    largest_component_nodes: int = 0


class BarrierListResponse(BaseModel):
    barriers: list[Barrier]
