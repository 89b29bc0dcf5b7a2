from datetime import date, datetime, timezone

from app.core.config import settings
from app.core.time import current_month_key, month_key_of, month_label


def test_date_only_string_is_a_calendar_date():
    assert month_key_of("2024-03-01") == "2024-03"
    assert month_key_of("2024-12-31") == "2024-12"


def test_aware_datetime_uses_local_calendar(monkeypatch):
    monkeypatch.setattr(settings, "default_timezone", "Asia/Kolkata")
    # 20:00 UTC on Mar 31 is already Apr 1 in Asia/Kolkata (+05:30)
    assert month_key_of("2024-03-31T20:00:00Z") == "2024-04"
    assert month_key_of("2024-03-31T20:00:00+00:00") == "2024-04"
    assert month_key_of(datetime(2024, 3, 31, 20, 0, tzinfo=timezone.utc)) == "2024-04"


def test_naive_datetime_is_local_wall_time():
    assert month_key_of("2024-03-31T23:59:59") == "2024-03"
    assert month_key_of(datetime(2024, 1, 31, 23, 0)) == "2024-01"


def test_date_object():
    assert month_key_of(date(2023, 7, 4)) == "2023-07"


def test_unparseable_values_yield_none():
    assert month_key_of(None) is None
    assert month_key_of("") is None
    assert month_key_of("   ") is None
    assert month_key_of("not-a-date") is None
    assert month_key_of("2024-13-01") is None
    assert month_key_of("9999-12-31T23:00:00-05:00") is None
    assert month_key_of("0001-01-01T00:00:00+14:00") is None


def test_current_month_key_with_explicit_now():
    assert current_month_key(datetime(2025, 9, 14, 10, 0)) == "2025-09"


def test_month_label():
    assert month_label("2024-03") == "Mar 2024"
    assert month_label("2023-12") == "Dec 2023"
