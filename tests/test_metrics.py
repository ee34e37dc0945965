from datetime import date, datetime, timedelta, timezone

from touch_dashboard.metrics import (
    active_device_count,
    active_devices_by_month,
    build_summary,
    daily_activity,
    events_by_date,
    events_by_date_sorted,
    format_datetime,
    locale_date,
    touch_distribution,
)
from touch_dashboard.schema import NOT_AVAILABLE, TouchEvent

UTC = timezone.utc


def make_event(event_id, device_id, created_at, touch="YES", day=None):
    stamp = datetime.fromisoformat(created_at).replace(tzinfo=UTC)
    return TouchEvent(event_id, device_id, stamp, day or stamp.date().isoformat(), stamp.strftime("%H:%M"), touch)


def sample_events():
    # newest first, as the store keeps them
    return [
        make_event("e5", "D2", "2024-02-01T09:00:00"),
        make_event("e4", "D1", "2024-01-06T12:00:00", touch="NO"),
        make_event("e3", "D1", "2024-01-05T17:30:00"),
        make_event("e2", "D2", "2024-01-05T11:00:00", touch="NO"),
        make_event("e1", "D1", "2024-01-05T08:15:00"),
    ]


def test_locale_rendering():
    stamp = datetime(2024, 1, 5, 15, 4, 9, tzinfo=UTC)
    assert locale_date(stamp, UTC) == "1/5/2024"
    assert format_datetime(stamp, UTC) == "1/5/2024, 3:04:09 PM"
    assert format_datetime(stamp.replace(hour=0), UTC) == "1/5/2024, 12:04:09 AM"


def test_locale_rendering_follows_timezone():
    stamp = datetime(2024, 1, 5, 23, 30, tzinfo=UTC)
    assert locale_date(stamp, timezone(timedelta(hours=2))) == "1/6/2024"


def test_events_by_date_keeps_first_seen_order():
    series = events_by_date(sample_events(), UTC)
    assert list(series) == ["2/1/2024", "1/6/2024", "1/5/2024"]
    assert series["1/5/2024"] == 3


def test_events_by_date_sorted_is_chronological():
    series = events_by_date_sorted(sample_events(), UTC)
    assert list(series) == ["1/5/2024", "1/6/2024", "2/1/2024"]
    assert sum(series.values()) == 5


def test_touch_distribution_counts_categories():
    assert touch_distribution(sample_events()) == {"YES": 3, "NO": 2}
    assert touch_distribution([]) == {}


def test_active_devices_by_month_counts_distinct():
    assert active_devices_by_month(sample_events(), UTC) == {"2024-02": 1, "2024-01": 2}


def test_active_device_count_skips_placeholder_dates():
    events = sample_events() + [make_event("p", "D3", "2024-01-05T09:00:00", day="1970-01-01")]
    assert active_device_count(events) == 2


def test_daily_activity_boundaries():
    activity = daily_activity(sample_events(), "D1", date(2024, 1, 5), UTC)
    assert activity.touch_count == 2
    assert activity.first_touch_time == "1/5/2024, 8:15:00 AM"
    assert activity.last_touch_time == "1/5/2024, 5:30:00 PM"


def test_daily_activity_ignores_no_touch_and_other_days():
    activity = daily_activity(sample_events(), "D2", date(2024, 1, 5), UTC)
    assert activity.touch_count == 0
    assert activity.first_touch_time == NOT_AVAILABLE
    assert activity.last_touch_time == NOT_AVAILABLE


def test_build_summary():
    summary = build_summary(sample_events(), total_stations=100, tz=UTC)
    assert summary == {
        "total_stations": 100,
        "active_stations": 2,
        "total_events": 5,
        "last_event": "2/1/2024, 9:00:00 AM",
    }
    assert build_summary([], total_stations=100)["last_event"] == NOT_AVAILABLE
