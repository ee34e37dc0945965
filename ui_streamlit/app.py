"""Streamlit dashboard for device touch events."""

from __future__ import annotations

import atexit
import tempfile
from pathlib import Path
from typing import Any, Callable, MutableMapping

import pandas as pd

from touch_dashboard.adapters.files import load_events
from touch_dashboard.config import DashboardConfig
from touch_dashboard.metrics import format_datetime
from touch_dashboard.session import DashboardSession

STAT_CARDS = [
    ("Total Stations", "total_stations"),
    ("Active Stations", "active_stations"),
    ("Total Jobs Finished", "total_events"),
    ("Last Event", "last_event"),
]


def _series_frame(series: dict[str, int], key: str, value: str) -> pd.DataFrame:
    return pd.DataFrame({key: list(series.keys()), value: list(series.values())})


def _events_frame(session: DashboardSession) -> pd.DataFrame:
    rows = [
        {
            "Device ID": event.device_id,
            "Event Date": event.date,
            "Event Time": event.time,
            "Touch Detected": event.touch_detected,
            "Received At": format_datetime(event.created_at, session.tz),
        }
        for event in session.store.events
    ]
    return pd.DataFrame(rows, columns=["Device ID", "Event Date", "Event Time", "Touch Detected", "Received At"])


def build_payload(session: DashboardSession) -> dict[str, Any]:
    """Collect everything one render needs from the session."""

    views = session.views
    return {
        "summary": session.summary(),
        "time_series": _series_frame(views.time_series, "date", "Events"),
        "distribution": _series_frame(views.category_distribution, "touch_detected", "count"),
        "monthly": _series_frame(views.monthly_active_devices, "month", "Active Devices"),
        "events": _events_frame(session),
    }


def _parse_uploaded(uploaded_file) -> list:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    try:
        return load_events(temp_path)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def _drop_session(session_state: MutableMapping) -> None:
    session = session_state.pop("session", None)
    if session is not None:
        session.close()
        atexit.unregister(session.close)


def _get_session(
    session_state: MutableMapping,
    config: DashboardConfig,
    factory: Callable[[DashboardConfig], DashboardSession] = DashboardSession,
) -> DashboardSession:
    """Reuse the open session unless the server URL changed."""

    session = session_state.get("session")
    if session is None or session.config.server_url != config.server_url:
        _drop_session(session_state)
        session = factory(config).open()
        atexit.register(session.close)
        session_state["session"] = session
    return session


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Device Events Dashboard", layout="wide")
    st.title("Device Events Dashboard")
    st.caption("Real-time monitoring and analytics")

    with st.sidebar:
        st.header("Controls")
        server_url = st.text_input("Server URL", value=DashboardConfig.server_url)
        total_stations = st.number_input("Total stations", min_value=0, value=DashboardConfig.total_stations, step=1)
        refresh_seconds = st.slider("Refresh every (s)", min_value=1, max_value=30, value=2)
        reload_clicked = st.button("Reload snapshot")
        uploaded = st.file_uploader("Import saved events", type=["csv", "json"])
        disconnect_clicked = st.button("Disconnect")

    config = DashboardConfig(
        server_url=server_url,
        total_stations=int(total_stations),
        refresh_seconds=float(refresh_seconds),
    )

    session = _get_session(st.session_state, config)
    session.config.total_stations = config.total_stations

    if disconnect_clicked:
        _drop_session(st.session_state)
        st.info("Disconnected. Reload the page to reconnect.")
        return
    if reload_clicked:
        session.refresh()
    if uploaded is not None and st.session_state.get("imported") != uploaded.name:
        try:
            events = _parse_uploaded(uploaded)
        except ValueError as exc:
            st.error(f"Input error: {exc}")
        else:
            session.store.load_snapshot(events)
            st.session_state["imported"] = uploaded.name
            st.success(f"Imported {len(events)} events from {uploaded.name}.")

    @st.dialog("Operator activity (today)")
    def device_dialog(device_id: str) -> None:
        session.select_device(device_id)
        activity = session.selected_activity()
        st.write(f"Device: **{device_id}**")
        rows = [
            ("Total Touches Today", str(activity.touch_count)),
            ("Operator Login Time", activity.first_touch_time),
            ("Device Start Time", activity.first_touch_time),
            ("Device End Time", activity.last_touch_time),
            ("Operator Logout Time", activity.last_touch_time),
        ]
        st.table([{"": label, "Value": value} for label, value in rows])
        if st.button("Close"):
            session.clear_selection()
            st.rerun()

    @st.fragment(run_every=config.refresh_seconds)
    def live_panel() -> None:
        state = session.state
        if state.connected:
            st.success("Connected")
        else:
            st.warning("Disconnected")
        if state.error:
            st.error(state.error)
        if state.loading:
            st.info("Loading data...")

        payload = build_payload(session)

        columns = st.columns(len(STAT_CARDS))
        for column, (title, key) in zip(columns, STAT_CARDS):
            column.metric(title, payload["summary"][key])

        c1, c2, c3 = st.columns(3)
        with c1:
            st.subheader("Events Over Time")
            if not payload["time_series"].empty:
                st.line_chart(payload["time_series"], x="date", y="Events")
        with c2:
            st.subheader("Touch Detection Distribution")
            if not payload["distribution"].empty:
                st.vega_lite_chart(
                    payload["distribution"],
                    {
                        "mark": {"type": "arc"},
                        "encoding": {
                            "theta": {"field": "count", "type": "quantitative"},
                            "color": {"field": "touch_detected", "type": "nominal"},
                        },
                    },
                    width="stretch",
                )
        with c3:
            st.subheader("Active Devices Per Month")
            if not payload["monthly"].empty:
                st.bar_chart(payload["monthly"], x="month", y="Active Devices")

        st.subheader("Recent Events")
        st.dataframe(payload["events"], hide_index=True, width="stretch")

    live_panel()

    device_ids = session.store.device_ids()
    if device_ids:
        device_id = st.selectbox("Device", options=device_ids)
        if st.button("Show operator activity"):
            device_dialog(device_id)


if __name__ == "__main__":
    main()
