"""Core data schema for device touch events."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

NOT_AVAILABLE = "N/A"
PLACEHOLDER_DATE = "1970-01-01"
TOUCH_YES = "YES"


@dataclass(frozen=True)
class TouchEvent:
    """One touch/no-touch observation reported by a device."""

    event_id: str
    device_id: str
    created_at: datetime
    date: str
    time: str
    touch_detected: str


@dataclass(frozen=True)
class DailyActivity:
    """Touch activity of one device on one calendar day."""

    touch_count: int
    first_touch_time: str = NOT_AVAILABLE
    last_touch_time: str = NOT_AVAILABLE


@dataclass
class AggregateViews:
    """Chart inputs derived from the full event collection."""

    time_series: dict[str, int] = field(default_factory=dict)
    category_distribution: dict[str, int] = field(default_factory=dict)
    monthly_active_devices: dict[str, int] = field(default_factory=dict)


@dataclass
class DashboardState:
    """Status flags shown next to the data: feed connection, loading, banner, selection."""

    connected: bool = False
    loading: bool = False
    error: Optional[str] = None
    selected_device: Optional[str] = None
