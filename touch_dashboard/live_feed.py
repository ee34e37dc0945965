"""Socket.IO subscription that feeds pushed events into the store."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Optional

import socketio
from socketio import exceptions as socketio_exceptions

from touch_dashboard.adapters import json_adapter
from touch_dashboard.schema import DashboardState
from touch_dashboard.store import EventStore

logger = logging.getLogger(__name__)

NEW_DATA_EVENT = "new-data"
_STOP = object()


class LiveFeedSubscriber:
    """Owns one push connection and the single thread that ingests its messages.

    Socket.IO handlers only enqueue payloads; the reader thread parses them and
    calls ``store.ingest`` one at a time. The client retries the first connect
    and reconnects on its own after a drop.
    """

    def __init__(
        self,
        server_url: str,
        store: EventStore,
        state: DashboardState,
        client: Any = None,
    ):
        self.server_url = server_url
        self.store = store
        self.state = state
        self._client = client if client is not None else socketio.Client()
        self._messages: queue.Queue = queue.Queue()
        self._reader: Optional[threading.Thread] = None
        self._connector: Optional[threading.Thread] = None
        self._closed = False

        self._client.on("connect", self._on_connect)
        self._client.on("disconnect", self._on_disconnect)
        self._client.on(NEW_DATA_EVENT, self._on_new_data)

    @property
    def connected(self) -> bool:
        return self.state.connected

    def start(self, background: bool = False) -> None:
        """Start the reader thread and connect.

        With ``background`` the connect (and its retries) runs on its own thread
        and failures are only logged; otherwise connection errors propagate.
        """

        if self._reader is None:
            self._reader = threading.Thread(target=self._read_loop, name="live-feed-reader", daemon=True)
            self._reader.start()
        if background:
            self._connector = threading.Thread(target=self._connect_logged, name="live-feed-connect", daemon=True)
            self._connector.start()
        else:
            self._connect()

    def close(self, timeout: float = 5.0) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._client.disconnect()
        finally:
            self.state.connected = False
            self._messages.put(_STOP)
            if self._reader is not None:
                self._reader.join(timeout)
            if self._connector is not None:
                self._connector.join(timeout)

    def __enter__(self) -> "LiveFeedSubscriber":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _connect(self) -> None:
        if self._closed:
            return
        logger.info("connecting to %s", self.server_url)
        self._client.connect(self.server_url, retry=True)

    def _connect_logged(self) -> None:
        try:
            self._connect()
        except socketio_exceptions.ConnectionError as exc:
            logger.warning("live feed unavailable: %s", exc)

    def _on_connect(self) -> None:
        self.state.connected = True
        logger.info("live feed connected")

    def _on_disconnect(self, *args) -> None:
        self.state.connected = False
        logger.info("live feed disconnected")

    def _on_new_data(self, data: Any) -> None:
        self._messages.put(data)

    def _read_loop(self) -> None:
        while True:
            message = self._messages.get()
            if message is _STOP:
                break
            try:
                event = json_adapter.parse_message(message)
            except ValueError as exc:
                logger.warning("dropping malformed %s message: %s", NEW_DATA_EVENT, exc)
                continue
            try:
                self.store.ingest(event)
            except Exception:  # noqa: BLE001
                logger.exception("ingest of event %s failed", event.event_id)
