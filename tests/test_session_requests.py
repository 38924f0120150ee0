"""
Session request normalization and saved settings.
"""

import pytest
from pydantic import ValidationError

from quranki.schemas import ReviewSettings
from quranki.session_requests import SessionRequest, normalize_session_request
from quranki.sm2 import ScopeKind


def test_normalize_clamps_and_dedupes():
    request = normalize_session_request(SessionRequest(
        scope_kind=ScopeKind.SECTION,
        scope_ids=(30, 29, 30),
        desired_count=-3,
        ayahs_after=-1,
    ))

    assert request.scope_ids == (30, 29)
    assert request.desired_count == 0
    assert request.ayahs_after == 0
    assert request.ayahs_before == 0


def test_mushaf_mode_defaults_to_two_ayahs_before():
    request = normalize_session_request(SessionRequest(
        scope_kind=ScopeKind.NAMED_UNIT, scope_ids=(2,), presentation_mode="mushaf"
    ))

    assert request.ayahs_before == 2


def test_unknown_presentation_mode_is_rejected():
    with pytest.raises(ValueError):
        normalize_session_request(SessionRequest(
            scope_kind=ScopeKind.SECTION, scope_ids=(1,), presentation_mode="audio"
        ))


def test_settings_defaults():
    settings = ReviewSettings()

    assert settings.selected_juzaa == [30]
    assert settings.selection_type == ScopeKind.SECTION
    assert settings.ayahs_after == 2
    assert settings.prompts_per_session == 20
    assert settings.new_ayahs_per_day == 5


def test_settings_to_session_request():
    settings = ReviewSettings(
        selection_type="surah",
        selected_surahs=[18, 36, 18],
        prompts_per_session=10,
        ayahs_after=3,
    )

    request = settings.to_session_request("mushaf")

    assert request.scope_kind == ScopeKind.NAMED_UNIT
    assert request.scope_ids == (18, 36)
    assert request.desired_count == 10
    assert request.ayahs_after == 3
    assert request.ayahs_before == 2


def test_settings_reject_bad_juz():
    with pytest.raises(ValidationError):
        ReviewSettings(selected_juzaa=[31])
