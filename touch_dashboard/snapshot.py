"""One-shot retrieval of the full event collection."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from touch_dashboard.adapters import json_adapter
from touch_dashboard.schema import DashboardState, TouchEvent

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class SnapshotFetchError(Exception):
    """Raised when the snapshot endpoint answers non-2xx or cannot be reached."""

    def __init__(self, status: Optional[int] = None, message: Optional[str] = None):
        self.status = status
        self.message = message
        if status is not None:
            text = f"Server responded with status: {status}"
        else:
            text = message or "Failed to fetch data"
        super().__init__(text)


class SnapshotLoader:
    """Fetches ``GET {server}/getData`` and toggles ``state.loading`` around the call."""

    def __init__(
        self,
        snapshot_url: str,
        state: DashboardState,
        timeout: float = 10.0,
        http: Any = None,
    ):
        self.snapshot_url = snapshot_url
        self.state = state
        self.timeout = timeout
        self._http = http if http is not None else requests

    def fetch_snapshot(self) -> list[TouchEvent]:
        self.state.loading = True
        try:
            try:
                response = self._http.get(self.snapshot_url, headers=NO_CACHE_HEADERS, timeout=self.timeout)
            except requests.RequestException as exc:
                raise SnapshotFetchError(message=str(exc)) from exc

            if not 200 <= response.status_code < 300:
                raise SnapshotFetchError(status=response.status_code)

            try:
                events = json_adapter.parse_payload(response.json())
            except ValueError as exc:
                raise SnapshotFetchError(message=f"Invalid snapshot body: {exc}") from exc

            logger.info("fetched %d events from %s", len(events), self.snapshot_url)
            return events
        finally:
            self.state.loading = False
