"""In-memory event store with derived chart views."""

from __future__ import annotations

import logging
import threading
from datetime import date, tzinfo
from typing import Callable, Iterable, Optional

from touch_dashboard.metrics import compute_views, daily_activity
from touch_dashboard.schema import AggregateViews, DailyActivity, TouchEvent

logger = logging.getLogger(__name__)

Listener = Callable[["EventStore"], None]


class EventStore:
    """Owns the session's touch events, unique by id and ordered newest first.

    Every mutation recomputes the aggregate views before it returns and then
    notifies subscribed listeners. Mutations hold a lock, so the live feed
    reader and a snapshot fetch on another thread never interleave.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz
        self._lock = threading.RLock()
        self._events: list[TouchEvent] = []
        self._ids: set[str] = set()
        self._live_ids: set[str] = set()
        self._views = AggregateViews()
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._ids

    @property
    def events(self) -> list[TouchEvent]:
        with self._lock:
            return list(self._events)

    @property
    def views(self) -> AggregateViews:
        return self._views

    def latest(self) -> Optional[TouchEvent]:
        with self._lock:
            return self._events[0] if self._events else None

    def device_ids(self) -> list[str]:
        with self._lock:
            return sorted({event.device_id for event in self._events})

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every mutation; returns an unsubscribe function."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load_snapshot(self, events: Iterable[TouchEvent]) -> None:
        """Replace the contents with a server snapshot.

        The first occurrence of a duplicated id wins. Events that arrived over
        the live feed and are missing from the snapshot are kept, so a push
        delivered while the snapshot was in flight is not lost.
        """

        with self._lock:
            merged: list[TouchEvent] = []
            ids: set[str] = set()
            for event in events:
                if event.event_id in ids:
                    continue
                ids.add(event.event_id)
                merged.append(event)

            kept_live = [e for e in self._events if e.event_id in self._live_ids and e.event_id not in ids]
            for event in kept_live:
                ids.add(event.event_id)
                merged.append(event)

            self._events = merged
            self._ids = ids
            self._live_ids = {event.event_id for event in kept_live}
            self._refresh()
            logger.info("loaded snapshot: %d events (%d kept from live feed)", len(merged), len(kept_live))
        self._notify()

    def ingest(self, event: TouchEvent) -> bool:
        """Add one event unless its id is already stored; returns whether it was added."""

        with self._lock:
            if event.event_id in self._ids:
                logger.debug("duplicate event %s ignored", event.event_id)
                return False
            self._ids.add(event.event_id)
            self._live_ids.add(event.event_id)
            self._events.append(event)
            self._refresh()
        self._notify()
        return True

    def daily_activity(self, device_id: str, reference_date: date) -> DailyActivity:
        with self._lock:
            return daily_activity(self._events, device_id, reference_date, self._tz)

    def _refresh(self) -> None:
        self._events.sort(key=lambda e: e.created_at, reverse=True)
        self._views = compute_views(self._events, self._tz)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
