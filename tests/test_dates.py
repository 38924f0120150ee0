"""
Local-day helpers.
"""

from datetime import date, datetime, timedelta, timezone

from quranki import dates


def test_local_day_in_review_zone():
    late_utc = datetime(2024, 1, 15, 3, 0, tzinfo=timezone.utc)

    assert dates.local_day(late_utc, "America/New_York") == date(2024, 1, 14)
    assert dates.local_day(late_utc, "UTC") == date(2024, 1, 15)


def test_day_bounds_cover_the_local_day():
    start, end = dates.day_bounds(datetime(2024, 5, 1, 16, 0, tzinfo=timezone.utc), "America/New_York")

    assert start == datetime(2024, 5, 1, 4, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1) - timedelta(microseconds=1)


def test_naive_timestamps_are_treated_as_utc():
    value = dates.as_utc(datetime(2024, 5, 1, 12, 0))

    assert value.tzinfo == timezone.utc
    assert value.hour == 12


def test_default_zone_comes_from_environment(monkeypatch):
    monkeypatch.setenv("QURANKI_TIMEZONE", "Asia/Karachi")

    assert dates.resolve_tz().key == "Asia/Karachi"


def test_default_zone_fallback(monkeypatch):
    monkeypatch.delenv("QURANKI_TIMEZONE", raising=False)

    assert dates.resolve_tz().key == "America/New_York"


def test_date_strings():
    assert dates.to_date_string(date(2024, 5, 1)) == "2024-05-01"
    assert dates.parse_date_string("2024-05-01") == date(2024, 5, 1)
