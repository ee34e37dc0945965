"""JSON adapter for touch events (snapshot bodies, push messages, saved files)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from touch_dashboard.schema import TouchEvent

_REQUIRED_FIELDS = ("_id", "device_id", "createdAt")


def parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 ``createdAt`` value into an aware datetime."""

    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def parse_item(item: dict, index: int) -> TouchEvent:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")

    missing = [name for name in _REQUIRED_FIELDS if not item.get(name)]
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    try:
        created_at = parse_timestamp(item["createdAt"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: malformed createdAt") from exc

    return TouchEvent(
        event_id=str(item["_id"]),
        device_id=str(item["device_id"]).strip(),
        created_at=created_at,
        date=str(item.get("date") or ""),
        time=str(item.get("time") or ""),
        touch_detected=str(item.get("touch_detected") or "").strip(),
    )


def parse_payload(payload: Any) -> list[TouchEvent]:
    """Parse a snapshot body ``{"data": [...]}`` (a bare list is accepted too)."""

    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise ValueError("Snapshot payload must contain a 'data' list")
    return [parse_item(item, i) for i, item in enumerate(payload, start=1)]


def parse_message(message: Any) -> TouchEvent:
    """Parse one ``new-data`` push message, either decoded or as a JSON string."""

    if isinstance(message, (str, bytes)):
        try:
            message = json.loads(message)
        except json.JSONDecodeError as exc:
            raise ValueError("Message is not valid JSON") from exc
    return parse_item(message, 1)


def parse(file_path: str) -> list[TouchEvent]:
    """Parse a saved snapshot file into touch events."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)
    return parse_payload(payload)
