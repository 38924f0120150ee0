"""
Pydantic models for the Quran corpus and review settings.

These models define the structure of MongoDB corpus documents (one per ayah,
with the columns of quran.csv) and of a user's saved review settings.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quranki.session_requests import SessionRequest, normalize_session_request
from quranki.sm2.constants import AYAHS_AFTER, NEW_AYAHS_PER_DAY, SESSION_SIZE
from quranki.sm2.review_state import AyahKey, ScopeKind


PresentationMode = Literal["text", "mushaf"]


# ---- Corpus ----

class Ayah(BaseModel):
    """
    A single ayah of the corpus.

    One document per (surah_no, ayah_no_surah).
    """
    surah_no: int = Field(..., ge=1, description="Surah number (1-114)")
    surah_name_en: str = ""
    surah_name_ar: str = ""
    surah_name_roman: str = ""
    ayah_no_surah: int = Field(..., ge=1, description="Ayah number within the surah")
    ayah_no_quran: int = Field(..., ge=1, description="Ayah number across the whole corpus")
    ayah_ar: str = ""
    ayah_en: str = ""
    ruko_no: Optional[int] = None
    juz_no: int = Field(..., ge=1, le=30)
    page_no: Optional[int] = None  # Mushaf page, filled from the page mapping

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> AyahKey:
        return (self.surah_no, self.ayah_no_surah)


class SurahInfo(BaseModel):
    """Summary row for surah pickers."""
    surah_no: int
    surah_name_en: str = ""
    surah_name_ar: str = ""
    surah_name_roman: str = ""
    ayah_count: int


# ---- Settings ----

class ReviewSettings(BaseModel):
    """
    A user's saved review settings.

    Defaults match what a new account starts with.
    """
    selected_juzaa: list[int] = Field(default_factory=lambda: [30])
    selected_surahs: list[int] = Field(default_factory=list)
    selection_type: ScopeKind = ScopeKind.SECTION
    ayahs_after: int = Field(default=AYAHS_AFTER, ge=0)
    prompts_per_session: int = Field(default=SESSION_SIZE, ge=0)
    new_ayahs_per_day: int = Field(default=NEW_AYAHS_PER_DAY, ge=0)

    @field_validator("selected_juzaa")
    @classmethod
    def _check_juz_numbers(cls, value: list[int]) -> list[int]:
        for juz in value:
            if not 1 <= juz <= 30:
                raise ValueError(f"Juz number out of range: {juz}")
        return value

    @property
    def scope_ids(self) -> list[int]:
        """Ids selected for the active selection type."""
        if self.selection_type == ScopeKind.NAMED_UNIT:
            return list(self.selected_surahs)
        return list(self.selected_juzaa)

    def to_session_request(self, presentation_mode: PresentationMode = "text") -> SessionRequest:
        """
        Build a SessionRequest from these settings.

        Args:
            presentation_mode: "text" or "mushaf" (mushaf shows 2 ayahs before the prompt)

        Returns:
            Normalized SessionRequest
        """
        return normalize_session_request(
            SessionRequest(
                scope_kind=ScopeKind(self.selection_type),
                scope_ids=tuple(self.scope_ids),
                desired_count=self.prompts_per_session,
                ayahs_after=self.ayahs_after,
                presentation_mode=presentation_mode,
            )
        )
