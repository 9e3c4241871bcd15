from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _running_in_docker() -> bool:
    """Best-effort check for container execution.

    Used only to pick sensible defaults. Environment variables always win.
    """
    return Path("/.dockerenv").exists() or os.environ.get("RUNNING_IN_DOCKER") == "1"


def _default_out_dir() -> str:
    if _running_in_docker():
        return "/app/out"
    return str(Path(__file__).resolve().parents[1] / "out")


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping config out of code for easy extension."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    out_dir: str = Field(default_factory=_default_out_dir, alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Empty means "<OUT_DIR>/network/walk_network.json".
    network_asset_path: str = Field(default="", alias="NETWORK_ASSET_PATH")

    # Search bounds; 0 disables the bound. Exceeding one yields a not-found result.
    route_search_max_expansions: int = Field(default=0, ge=0, alias="ROUTE_SEARCH_MAX_EXPANSIONS")
    route_search_timeout_ms: int = Field(default=0, ge=0, le=600_000, alias="ROUTE_SEARCH_TIMEOUT_MS")

    # Coordinate queries farther than this from every node are not snapped.
    nearest_node_max_distance_m: float = Field(
        default=250.0,
        gt=0.0,
        alias="NEAREST_NODE_MAX_DISTANCE_M",
    )

    @model_validator(mode="after")
    def _normalize_log_level(self) -> "Settings":
        self.log_level = str(self.log_level or "INFO").strip().upper() or "INFO"
        return self


settings = Settings()
