"""CSV adapter for exported touch event tables."""

from __future__ import annotations

import csv

from touch_dashboard.adapters.json_adapter import parse_timestamp
from touch_dashboard.schema import TouchEvent

_REQUIRED_FIELDS = ("_id", "device_id", "createdAt")


def _parse_row(row: dict, row_number: int) -> TouchEvent:
    missing = [field for field in _REQUIRED_FIELDS if not row.get(field)]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        created_at = parse_timestamp(row["createdAt"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed createdAt") from exc

    return TouchEvent(
        event_id=row["_id"].strip(),
        device_id=row["device_id"].strip(),
        created_at=created_at,
        date=(row.get("date") or "").strip(),
        time=(row.get("time") or "").strip(),
        touch_detected=(row.get("touch_detected") or "").strip(),
    )


def parse(file_path: str) -> list[TouchEvent]:
    """Parse CSV file into a list of touch events."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        events: list[TouchEvent] = []
        for row_number, row in enumerate(reader, start=2):
            events.append(_parse_row(row, row_number))
        return events
