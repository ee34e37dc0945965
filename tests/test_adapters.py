import json
from datetime import datetime, timezone

import pytest

from touch_dashboard.adapters.csv_adapter import parse as parse_csv
from touch_dashboard.adapters.files import load_events
from touch_dashboard.adapters.json_adapter import parse as parse_json
from touch_dashboard.adapters.json_adapter import parse_message, parse_payload


def test_csv_parse_success(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(
        "_id,device_id,date,time,touch_detected,createdAt\n"
        "a,D1,2024-01-05,10:00,YES,2024-01-05T10:00:00Z\n"
        "b,D2,2024-01-05,11:00,NO,2024-01-05T11:00:00Z\n",
        encoding="utf-8",
    )
    events = parse_csv(str(path))
    assert len(events) == 2
    assert events[1].touch_detected == "NO"
    assert events[0].created_at == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("_id,device_id,createdAt\na,D1,bad\n", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_csv(str(path))


def test_csv_parse_empty_file(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("", encoding="utf-8")
    assert parse_csv(str(path)) == []


def test_json_parse_success(tmp_path):
    path = tmp_path / "snapshot.json"
    payload = {
        "data": [
            {"_id": "a", "device_id": "D1", "date": "2024-01-05", "time": "10:00",
             "touch_detected": "YES", "createdAt": "2024-01-05T10:00:00Z"},
            {"_id": "b", "device_id": "D1", "date": "2024-01-05", "time": "10:05",
             "touch_detected": "NO", "createdAt": "2024-01-05T10:05:00+00:00"},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    events = parse_json(str(path))
    assert [e.event_id for e in events] == ["a", "b"]
    assert events[1].created_at.tzinfo is not None


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"data": [{"_id": "a", "device_id": "D1", "createdAt": "bad"}]}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_parse_payload_requires_data_list():
    with pytest.raises(ValueError):
        parse_payload({"items": []})
    assert parse_payload({"data": []}) == []


def test_parse_message_accepts_json_string_and_naive_timestamp():
    event = parse_message('{"_id": "x", "device_id": "D9", "touch_detected": "YES", "createdAt": "2024-03-01T08:00:00"}')
    assert event.event_id == "x"
    assert event.created_at.tzinfo == timezone.utc
    assert event.date == ""


def test_parse_message_missing_id():
    with pytest.raises(ValueError, match="_id"):
        parse_message({"device_id": "D1", "createdAt": "2024-01-05T10:00:00Z"})


def test_load_events_picks_adapter_by_suffix(tmp_path):
    csv_path = tmp_path / "export.CSV"
    csv_path.write_text(
        "_id,device_id,date,time,touch_detected,createdAt\n"
        "a,D1,2024-01-05,10:00,YES,2024-01-05T10:00:00Z\n",
        encoding="utf-8",
    )
    json_path = tmp_path / "snapshot.json"
    json_path.write_text(json.dumps({"data": [{"_id": "b", "device_id": "D2", "createdAt": "2024-01-05T11:00:00Z"}]}),
                         encoding="utf-8")
    assert [e.event_id for e in load_events(str(csv_path))] == ["a"]
    assert [e.event_id for e in load_events(str(json_path))] == ["b"]


def test_load_events_rejects_unknown_suffix_and_bad_rows(tmp_path):
    other = tmp_path / "events.txt"
    other.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        load_events(str(other))

    broken = tmp_path / "events.csv"
    broken.write_text("_id,device_id,createdAt\na,D1,not-a-date\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        load_events(str(broken))
