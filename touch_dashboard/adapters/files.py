"""Load saved or exported event files by extension."""

from __future__ import annotations

from pathlib import Path

from touch_dashboard.adapters import csv_adapter, json_adapter
from touch_dashboard.schema import TouchEvent


def load_events(file_path: str) -> list[TouchEvent]:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path)
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")
