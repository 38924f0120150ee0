"""
Shared fixtures: a small synthetic corpus, an in-memory review database,
a temp-file local store and fixed clocks.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from quranki.corpus import AyahCorpus
from quranki.schemas import Ayah
from quranki.sm2.database import create_db_engine, init_db, make_session_factory
from quranki.stores import (
    LocalDailyLogStore,
    LocalReviewItemStore,
    LocalStorage,
    SqlDailyLogStore,
    SqlReviewItemStore,
)


TZ = "America/New_York"
USER = "user-1"

# (surah_no, ayah count, juz of each ayah)
SURAH_LAYOUT = [
    (1, 7, lambda ayah: 1),
    (2, 20, lambda ayah: 1 if ayah <= 10 else 2),
    (3, 5, lambda ayah: 2),
]


def make_ayahs() -> list[Ayah]:
    ayahs = []
    quran_no = 0
    for surah_no, count, juz_of in SURAH_LAYOUT:
        for ayah_no in range(1, count + 1):
            quran_no += 1
            ayahs.append(Ayah(
                surah_no=surah_no,
                surah_name_en=f"Surah {surah_no}",
                surah_name_roman=f"surah-{surah_no}",
                ayah_no_surah=ayah_no,
                ayah_no_quran=quran_no,
                ayah_ar=f"ar {surah_no}:{ayah_no}",
                ayah_en=f"en {surah_no}:{ayah_no}",
                juz_no=juz_of(ayah_no),
            ))
    return ayahs


@pytest.fixture
def tz() -> str:
    return TZ


@pytest.fixture
def user_id() -> str:
    return USER


@pytest.fixture
def corpus() -> AyahCorpus:
    # Surah 2 pages: 10 ayahs per page starting at page 2
    page_mapping = {(2, n): 2 + (n - 1) // 10 for n in range(1, 21)}
    return AyahCorpus(make_ayahs(), page_mapping)


@pytest.fixture
def now() -> datetime:
    # Noon in New York
    return datetime(2024, 5, 1, 16, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


# ---- Stores ----

@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def sql_items(session_factory) -> SqlReviewItemStore:
    return SqlReviewItemStore(session_factory)


@pytest.fixture
def sql_logs(session_factory) -> SqlDailyLogStore:
    return SqlDailyLogStore(session_factory)


@pytest.fixture
def local_storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "local_store.json")


@pytest.fixture
def local_items(local_storage) -> LocalReviewItemStore:
    return LocalReviewItemStore(local_storage)


@pytest.fixture
def local_logs(local_storage) -> LocalDailyLogStore:
    return LocalDailyLogStore(local_storage)
