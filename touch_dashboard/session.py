"""Dashboard session: the store, its two producers and the view state."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Any, Optional

from socketio import exceptions as socketio_exceptions

from touch_dashboard.config import DashboardConfig
from touch_dashboard.live_feed import LiveFeedSubscriber
from touch_dashboard.metrics import build_summary
from touch_dashboard.schema import AggregateViews, DailyActivity, DashboardState
from touch_dashboard.snapshot import SnapshotFetchError, SnapshotLoader
from touch_dashboard.store import EventStore

logger = logging.getLogger(__name__)


class DashboardSession:
    """Explicit state container for one dashboard view.

    Use as a context manager (or call ``open``/``close``) so the push
    subscription is always torn down with the view. The feed connects on a
    background thread unless ``background_connect`` is false, so an
    unreachable server never blocks the snapshot.
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        client: Any = None,
        http: Any = None,
        tz: Optional[tzinfo] = None,
        background_connect: bool = True,
    ):
        self.config = config or DashboardConfig()
        self.background_connect = background_connect
        self.tz = tz
        self.state = DashboardState()
        self.store = EventStore(tz=tz)
        self.loader = SnapshotLoader(
            self.config.snapshot_url, self.state, timeout=self.config.request_timeout, http=http
        )
        self.feed = LiveFeedSubscriber(self.config.base_url, self.store, self.state, client=client)

    def open(self) -> "DashboardSession":
        try:
            self.feed.start(background=self.background_connect)
        except socketio_exceptions.ConnectionError as exc:
            logger.warning("live feed unavailable: %s", exc)
        self.refresh()
        return self

    def refresh(self) -> bool:
        """Load a fresh snapshot; on failure set the banner and keep the current data."""

        try:
            events = self.loader.fetch_snapshot()
        except SnapshotFetchError as exc:
            self.state.error = f"Connection error: {exc}"
            logger.warning("snapshot fetch failed: %s", exc)
            return False
        self.store.load_snapshot(events)
        self.state.error = None
        return True

    def close(self) -> None:
        self.feed.close()

    def __enter__(self) -> "DashboardSession":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def views(self) -> AggregateViews:
        return self.store.views

    def summary(self) -> dict:
        return build_summary(
            self.store.events, self.config.total_stations, self.config.placeholder_date, self.tz
        )

    def select_device(self, device_id: str) -> None:
        self.state.selected_device = device_id

    def clear_selection(self) -> None:
        self.state.selected_device = None

    def selected_activity(self, reference_date: Optional[date] = None) -> Optional[DailyActivity]:
        if self.state.selected_device is None:
            return None
        if reference_date is None:
            reference_date = datetime.now(self.tz).date()
        return self.store.daily_activity(self.state.selected_device, reference_date)
