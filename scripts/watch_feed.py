"""Watch a touch event server and print the dashboard aggregates as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from touch_dashboard.config import DashboardConfig
from touch_dashboard.metrics import events_by_date_sorted
from touch_dashboard.session import DashboardSession


def main() -> None:
    parser = argparse.ArgumentParser(description="Follow the touch event feed and report aggregates")
    parser.add_argument("--server-url", default=DashboardConfig.server_url, help="Base URL of the event server")
    parser.add_argument("--seconds", type=float, default=10.0, help="How long to listen to the live feed")
    parser.add_argument("--total-stations", type=int, default=DashboardConfig.total_stations)
    parser.add_argument("--sorted", action="store_true", help="Report the time series in date order")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = DashboardConfig(server_url=args.server_url, total_stations=args.total_stations)
    with DashboardSession(config) as session:
        time.sleep(max(args.seconds, 0.0))
        views = asdict(session.views)
        if args.sorted:
            views["time_series"] = events_by_date_sorted(session.store.events)
        report = {
            "connected": session.state.connected,
            "error": session.state.error,
            "summary": session.summary(),
            "views": views,
        }

    print(json.dumps(report, indent=2))
    if report["error"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
