"""Aggregate views over touch events.

Every function is a single pass over the event list. Calendar rendering uses
``tz`` when given and the host's local timezone otherwise, so a dashboard in
one timezone groups events by that timezone's calendar days.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, datetime, tzinfo
from typing import Optional

from touch_dashboard.schema import (
    NOT_AVAILABLE,
    PLACEHOLDER_DATE,
    TOUCH_YES,
    AggregateViews,
    DailyActivity,
    TouchEvent,
)


def _local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    return value.astimezone(tz)


def locale_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Render a date the en-US way, e.g. ``1/5/2024``."""

    local = _local(value, tz)
    return f"{local.month}/{local.day}/{local.year}"


def format_datetime(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Render a timestamp the en-US way, e.g. ``1/5/2024, 10:00:00 AM``."""

    local = _local(value, tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {suffix}"


def events_by_date(events: list[TouchEvent], tz: Optional[tzinfo] = None) -> dict[str, int]:
    """Count events per calendar date.

    Keys keep first-seen order. On a store sorted newest first the most recent
    day comes first; use :func:`events_by_date_sorted` for a chronological axis.
    """

    counts: dict[str, int] = {}
    for event in events:
        key = locale_date(event.created_at, tz)
        counts[key] = counts.get(key, 0) + 1
    return counts


def events_by_date_sorted(events: list[TouchEvent], tz: Optional[tzinfo] = None) -> dict[str, int]:
    """Count events per calendar date, oldest date first."""

    by_day = Counter(_local(event.created_at, tz).date() for event in events)
    return {f"{day.month}/{day.day}/{day.year}": by_day[day] for day in sorted(by_day)}


def touch_distribution(events: list[TouchEvent]) -> dict[str, int]:
    return dict(Counter(event.touch_detected for event in events))


def active_devices_by_month(events: list[TouchEvent], tz: Optional[tzinfo] = None) -> dict[str, int]:
    """Count distinct devices per ``YYYY-MM``."""

    devices = defaultdict(set)
    for event in events:
        local = _local(event.created_at, tz)
        devices[f"{local.year}-{local.month:02d}"].add(event.device_id)
    return {month: len(seen) for month, seen in devices.items()}


def active_device_count(events: list[TouchEvent], placeholder_date: str = PLACEHOLDER_DATE) -> int:
    """Count distinct devices, ignoring events stamped with the placeholder date."""

    return len({event.device_id for event in events if event.date != placeholder_date})


def compute_views(events: list[TouchEvent], tz: Optional[tzinfo] = None) -> AggregateViews:
    return AggregateViews(
        time_series=events_by_date(events, tz),
        category_distribution=touch_distribution(events),
        monthly_active_devices=active_devices_by_month(events, tz),
    )


def daily_activity(
    events: list[TouchEvent],
    device_id: str,
    reference_date: date,
    tz: Optional[tzinfo] = None,
) -> DailyActivity:
    """Summarize one device's touches on one local calendar day.

    ``events`` must be ordered newest first. The earliest touch of the day
    stands in for the operator login and the latest for the logout, since the
    feed carries no explicit session events.
    """

    touches = [
        event
        for event in events
        if event.device_id == device_id
        and event.touch_detected == TOUCH_YES
        and _local(event.created_at, tz).date() == reference_date
    ]
    if not touches:
        return DailyActivity(touch_count=0)

    return DailyActivity(
        touch_count=len(touches),
        first_touch_time=format_datetime(touches[-1].created_at, tz),
        last_touch_time=format_datetime(touches[0].created_at, tz),
    )


def build_summary(
    events: list[TouchEvent],
    total_stations: int,
    placeholder_date: str = PLACEHOLDER_DATE,
    tz: Optional[tzinfo] = None,
) -> dict:
    """Compute the stat card values; ``events`` must be ordered newest first."""

    return {
        "total_stations": total_stations,
        "active_stations": active_device_count(events, placeholder_date),
        "total_events": len(events),
        "last_event": format_datetime(events[0].created_at, tz) if events else NOT_AVAILABLE,
    }
