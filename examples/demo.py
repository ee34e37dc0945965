"""Offline demo: load a saved snapshot or CSV export and print the dashboard aggregates."""

import sys
from datetime import timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from touch_dashboard.adapters.files import load_events
from touch_dashboard.metrics import build_summary
from touch_dashboard.store import EventStore


def main() -> None:
    path = sys.argv[1] if len(sys.argv) > 1 else "examples/sample_events.json"
    store = EventStore(tz=timezone.utc)
    store.load_snapshot(load_events(path))
    views = store.views
    print("Summary:", build_summary(store.events, total_stations=100, tz=timezone.utc))
    print("Events by date:", views.time_series)
    print("Touch distribution:", views.category_distribution)
    print("Active devices per month:", views.monthly_active_devices)
    latest = store.latest()
    if latest is not None:
        print(f"Activity of {latest.device_id}:", store.daily_activity(latest.device_id, latest.created_at.date()))


if __name__ == "__main__":
    main()
