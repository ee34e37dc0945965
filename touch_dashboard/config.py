"""Dashboard configuration."""

from __future__ import annotations

from dataclasses import dataclass

from touch_dashboard.schema import PLACEHOLDER_DATE


@dataclass
class DashboardConfig:
    """Connection and display settings for one dashboard session."""

    server_url: str = "http://localhost:8080"
    # Shown as "Total Stations"; a fleet size, not something the events tell us.
    total_stations: int = 100
    placeholder_date: str = PLACEHOLDER_DATE
    request_timeout: float = 10.0
    refresh_seconds: float = 2.0

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")

    @property
    def snapshot_url(self) -> str:
        return f"{self.base_url}/getData"
