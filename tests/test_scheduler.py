"""
SM-2 scheduler: interval staircase, ease bounds, failure resets.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from quranki import sm2
from quranki.sm2 import Quality, ReviewItem, ScopeKind, next_state


def _graded(now, **overrides) -> ReviewItem:
    item = ReviewItem(
        user_id="u",
        surah_no=2,
        ayah_no_surah=255,
        scope_kind=ScopeKind.SECTION,
        last_reviewed_at=now - timedelta(days=1),
        due_at=now,
    )
    return replace(item, **overrides)


def test_first_success_starts_staircase(now, tz):
    item = next_state(
        None, Quality.SUCCESS, now,
        user_id="u", key=(2, 255), scope_kind=ScopeKind.SECTION, tz=tz
    )

    assert item.repetitions == 1
    assert item.interval == 1
    assert item.ease_factor == pytest.approx(2.6)
    assert item.last_reviewed_at == now
    assert item.due_at == now + timedelta(days=1)
    assert item.key == (2, 255)


def test_interval_staircase_one_six_then_ease(now, tz):
    item = next_state(None, Quality.SUCCESS, now, user_id="u", key=(1, 1),
                      scope_kind=ScopeKind.SECTION, tz=tz)
    item = next_state(item, Quality.SUCCESS, item.due_at, tz=tz)
    assert (item.repetitions, item.interval) == (2, 6)
    assert item.ease_factor == pytest.approx(2.7)

    item = next_state(item, Quality.SUCCESS, item.due_at, tz=tz)
    # round(6 * 2.7) = round(16.2)
    assert (item.repetitions, item.interval) == (3, 16)
    assert item.ease_factor == pytest.approx(2.8)


def test_third_success_uses_previous_ease_and_rounds_half_up(now, tz):
    item = _graded(now, repetitions=2, interval=5, ease_factor=2.5)

    updated = next_state(item, Quality.SUCCESS, now, tz=tz)

    # 5 * 2.5 = 12.5 rounds up, not to even
    assert updated.interval == 13
    assert updated.ease_factor == pytest.approx(2.6)


def test_failure_resets_repetitions_and_interval(now, tz):
    item = _graded(now, repetitions=5, interval=40, ease_factor=2.6)

    updated = next_state(item, Quality.FAILURE, now, tz=tz)

    assert updated.repetitions == 0
    assert updated.interval == 1
    assert updated.ease_factor == pytest.approx(2.4)
    assert updated.due_at == now + timedelta(days=1)


@pytest.mark.parametrize("ease", [1.3, 1.35, 1.4])
def test_ease_never_drops_below_floor(now, tz, ease):
    item = _graded(now, repetitions=1, interval=1, ease_factor=ease)

    updated = next_state(item, Quality.FAILURE, now, tz=tz)

    assert updated.ease_factor == pytest.approx(sm2.MIN_EASE_FACTOR)


def test_ease_has_no_upper_bound(now, tz):
    item = _graded(now, repetitions=10, interval=100, ease_factor=5.0)

    updated = next_state(item, Quality.SUCCESS, now, tz=tz)

    assert updated.ease_factor == pytest.approx(5.1)
    assert updated.interval == 500


def test_input_item_is_not_mutated(now, tz):
    item = _graded(now, repetitions=3, interval=10, ease_factor=2.5)
    snapshot = replace(item)

    next_state(item, Quality.FAILURE, now, tz=tz)

    assert item == snapshot


def test_first_grading_requires_identity(now, tz):
    with pytest.raises(ValueError):
        next_state(None, Quality.SUCCESS, now, tz=tz, user_id="u")


def test_review_date_uses_local_day(tz):
    # 02:00 UTC is still the previous evening in New York
    late = datetime(2024, 5, 1, 2, 0, tzinfo=timezone.utc)

    item = next_state(None, Quality.SUCCESS, late, user_id="u", key=(1, 1),
                      scope_kind=ScopeKind.SECTION, tz=tz)

    assert item.review_date == "2024-04-30"


def test_time_zone_is_never_read_from_environment(monkeypatch, now):
    monkeypatch.setenv("QURANKI_TIMEZONE", "UTC")

    with pytest.raises(ValueError):
        next_state(None, Quality.SUCCESS, now, tz=None, user_id="u", key=(1, 1),
                   scope_kind=ScopeKind.SECTION)
    with pytest.raises(TypeError):
        next_state(None, Quality.SUCCESS, now, user_id="u", key=(1, 1),
                   scope_kind=ScopeKind.SECTION)


def test_scope_kind_retags_existing_item(now, tz):
    item = _graded(now, repetitions=1, interval=1)

    updated = next_state(item, Quality.SUCCESS, now, tz=tz, scope_kind=ScopeKind.NAMED_UNIT)

    assert updated.scope_kind == ScopeKind.NAMED_UNIT


def test_quality_accepts_string_values(now, tz):
    item = _graded(now, repetitions=0, interval=1)

    assert next_state(item, "success", now, tz=tz).repetitions == 1


def test_round_half_up():
    assert sm2.round_half_up(2.5) == 3
    assert sm2.round_half_up(2.49) == 2
    assert sm2.round_half_up(16.2) == 16


def test_ayah_key_helpers():
    assert sm2.format_ayah_key((2, 255)) == "2_255"
    assert sm2.parse_ayah_key("2_255") == (2, 255)
    with pytest.raises(ValueError):
        sm2.parse_ayah_key("2255")
