"""
Content Corpus - in-memory ayah index.

Answers the structural questions the session assembler asks: which ayahs
belong to a scope, where a surah ends, and which ayahs surround a prompt.
Every neighbour lookup stays inside the prompt's surah.

Loaders:
- load_corpus_csv(): quran.csv (+ optional ayah-page-mapping.csv) via pandas
- corpus_repo.load_corpus(): the MongoDB `ayahs` collection
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

import pandas as pd

from quranki.errors import CorpusLookupError
from quranki.schemas import Ayah, SurahInfo
from quranki.sm2.review_state import AyahKey, ScopeKind


CORPUS_INT_COLUMNS = ["surah_no", "ayah_no_surah", "ayah_no_quran", "ruko_no", "juz_no"]


class AyahCorpus:
    """
    Ordered, read-only collection of ayahs.

    Args:
        ayahs: Ayah documents in any order (sorted by surah, then ayah)
        page_mapping: Optional {(surah_no, ayah_no_surah): page_number}
    """

    def __init__(
        self,
        ayahs: Iterable[Ayah],
        page_mapping: Optional[dict[AyahKey, int]] = None
    ):
        self._ayahs: list[Ayah] = sorted(ayahs, key=lambda a: (a.surah_no, a.ayah_no_surah))
        self._page_mapping = dict(page_mapping or {})

        self._position: dict[AyahKey, int] = {}
        self._surah_ranges: dict[int, tuple[int, int]] = {}  # surah -> [first, last] positions
        for pos, ayah in enumerate(self._ayahs):
            if ayah.key in self._position:
                raise ValueError(f"Duplicate ayah in corpus: {ayah.key}")
            self._position[ayah.key] = pos
            first, _ = self._surah_ranges.get(ayah.surah_no, (pos, pos))
            self._surah_ranges[ayah.surah_no] = (first, pos)

    def __len__(self) -> int:
        return len(self._ayahs)

    def __iter__(self) -> Iterator[Ayah]:
        return iter(self._ayahs)

    # ---- Lookups ----

    def _pos(self, key: AyahKey) -> int:
        try:
            return self._position[tuple(key)]
        except KeyError:
            raise CorpusLookupError(f"Unknown ayah: {key[0]}:{key[1]}") from None

    def _range(self, surah_no: int) -> tuple[int, int]:
        try:
            return self._surah_ranges[surah_no]
        except KeyError:
            raise CorpusLookupError(f"Unknown surah: {surah_no}") from None

    def get(self, key: AyahKey) -> Ayah:
        return self._ayahs[self._pos(key)]

    def order_of(self, key: AyahKey) -> int:
        """Corpus (reading) order of an ayah."""
        return self._pos(key)

    def resolve_scope(self, kind: ScopeKind, ids: Iterable[int]) -> list[Ayah]:
        """
        Ayahs in the selected juz or surah numbers, in corpus order.

        Unknown ids contribute nothing.
        """
        wanted = set(ids)
        if ScopeKind(kind) == ScopeKind.SECTION:
            return [a for a in self._ayahs if a.juz_no in wanted]
        return [a for a in self._ayahs if a.surah_no in wanted]

    def surah_ayah_count(self, surah_no: int) -> int:
        first, last = self._range(surah_no)
        return last - first + 1

    def is_last_in_surah(self, key: AyahKey) -> bool:
        pos = self._pos(key)
        _, last = self._range(self._ayahs[pos].surah_no)
        return pos == last

    def following(self, key: AyahKey, n: int) -> list[Ayah]:
        """Up to `n` ayahs after `key`, stopping at the end of its surah."""
        pos = self._pos(key)
        _, last = self._range(self._ayahs[pos].surah_no)
        end = min(last, pos + max(0, n))
        return self._ayahs[pos + 1:end + 1]

    def preceding(self, key: AyahKey, n: int) -> list[Ayah]:
        """Up to `n` ayahs before `key` (reading order), stopping at the start of its surah."""
        pos = self._pos(key)
        first, _ = self._range(self._ayahs[pos].surah_no)
        start = max(first, pos - max(0, n))
        return self._ayahs[start:pos]

    def page_number(self, key: AyahKey) -> Optional[int]:
        """Mushaf page of an ayah, None when the mapping does not know it."""
        page = self._page_mapping.get(tuple(key))
        if page is not None:
            return page
        return self.get(key).page_no

    def surahs(self) -> list[SurahInfo]:
        result = []
        for surah_no, (first, last) in sorted(self._surah_ranges.items()):
            head = self._ayahs[first]
            result.append(SurahInfo(
                surah_no=surah_no,
                surah_name_en=head.surah_name_en,
                surah_name_ar=head.surah_name_ar,
                surah_name_roman=head.surah_name_roman,
                ayah_count=last - first + 1,
            ))
        return result


# ---- Loaders ----

def _clean_record(record: dict) -> dict:
    """Drop NaN cells and cast numeric columns read as floats back to int."""
    cleaned = {}
    for column, value in record.items():
        if pd.isna(value):
            continue
        if column in CORPUS_INT_COLUMNS or column == "page_no":
            value = int(value)
        cleaned[column] = value
    return cleaned


def load_page_mapping(path: Union[str, Path]) -> dict[AyahKey, int]:
    """
    Load ayah-page-mapping.csv.

    Expects a header row and three columns: surah, ayah, page.
    """
    df = pd.read_csv(path)
    if df.shape[1] < 3:
        raise ValueError(f"Page mapping needs 3 columns, got {df.shape[1]}: {path}")
    df = df.iloc[:, :3].dropna()
    df.columns = ["surah_no", "ayah_no_surah", "page_no"]
    df = df.astype("int64")
    return {
        (int(row.surah_no), int(row.ayah_no_surah)): int(row.page_no)
        for row in df.itertuples(index=False)
    }


def load_corpus_csv(
    path: Union[str, Path],
    page_mapping_path: Union[str, Path, None] = None
) -> AyahCorpus:
    """
    Load the corpus from quran.csv.

    Args:
        path: CSV with the Ayah columns (surah_no, ayah_no_surah, juz_no, ...)
        page_mapping_path: Optional ayah-page-mapping.csv for mushaf mode

    Returns:
        AyahCorpus
    """
    df = pd.read_csv(path)
    missing = {"surah_no", "ayah_no_surah", "ayah_no_quran", "juz_no"} - set(df.columns)
    if missing:
        raise ValueError(f"Corpus CSV is missing columns: {sorted(missing)}")

    known = set(Ayah.model_fields)
    df = df[[c for c in df.columns if c in known]]
    ayahs = [Ayah(**_clean_record(record)) for record in df.to_dict(orient="records")]

    page_mapping = load_page_mapping(page_mapping_path) if page_mapping_path else None
    return AyahCorpus(ayahs, page_mapping)
