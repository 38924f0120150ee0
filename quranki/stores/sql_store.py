"""
Remote stores - SQLAlchemy adapters for review items and daily logs.

Upserts use the dialect's INSERT ... ON CONFLICT DO UPDATE so that two
concurrent gradings of the same (user, ayah) resolve as last-write-wins and
daily counters are incremented inside the database.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from quranki import dates
from quranki.errors import StoreUnavailableError
from quranki.sm2 import database
from quranki.sm2.models import DailyLogModel, ReviewItemModel
from quranki.sm2.review_state import AyahKey, ReviewItem, ScopeKind
from quranki.stores.base import DailyLogEntry, DailyLogStore, ReviewItemStore


_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_ITEM_PK = ["user_id", "surah_no", "ayah_no_surah"]
_LOG_PK = ["user_id", "date", "ayah_key"]


class _SqlStore:
    """Shared session handling for the SQL adapters."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or database.make_session_factory()

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreUnavailableError(f"Review database error: {exc}") from exc
        finally:
            session.close()

    @staticmethod
    def _dialect_insert(session: Session):
        return _UPSERT_INSERTS.get(session.get_bind().dialect.name)


def _to_review_item(row: ReviewItemModel) -> ReviewItem:
    return ReviewItem(
        user_id=row.user_id,
        surah_no=row.surah_no,
        ayah_no_surah=row.ayah_no_surah,
        scope_kind=ScopeKind(row.scope_kind),
        interval=row.interval,
        repetitions=row.repetitions,
        ease_factor=row.ease_factor,
        last_reviewed_at=dates.as_utc(row.last_reviewed_at),
        due_at=dates.as_utc(row.due_at),
        review_date=row.review_date,
    )


def _item_values(user_id: str, key: AyahKey, item: ReviewItem) -> dict:
    if item.last_reviewed_at is None or item.due_at is None:
        raise ValueError("Only graded items can be stored")
    return {
        "user_id": user_id,
        "surah_no": key[0],
        "ayah_no_surah": key[1],
        "scope_kind": ScopeKind(item.scope_kind).value,
        "interval": item.interval,
        "repetitions": item.repetitions,
        "ease_factor": item.ease_factor,
        "last_reviewed_at": dates.as_utc(item.last_reviewed_at),
        "due_at": dates.as_utc(item.due_at),
        "review_date": item.review_date,
    }


class SqlReviewItemStore(_SqlStore, ReviewItemStore):
    """Review items in the `review_items` table."""

    def get(self, user_id: str, scope_kind: ScopeKind) -> list[ReviewItem]:
        with self._session_scope() as session:
            rows = session.scalars(
                select(ReviewItemModel).where(
                    ReviewItemModel.user_id == user_id,
                    ReviewItemModel.scope_kind == ScopeKind(scope_kind).value,
                ).order_by(ReviewItemModel.due_at.asc())
            ).all()
            return [_to_review_item(row) for row in rows]

    def get_one(self, user_id: str, key: AyahKey) -> Optional[ReviewItem]:
        with self._session_scope() as session:
            row = session.get(ReviewItemModel, (user_id, key[0], key[1]))
            return _to_review_item(row) if row is not None else None

    def list_by_user(self, user_id: str) -> list[ReviewItem]:
        with self._session_scope() as session:
            rows = session.scalars(
                select(ReviewItemModel)
                .where(ReviewItemModel.user_id == user_id)
                .order_by(ReviewItemModel.due_at.asc())
            ).all()
            return [_to_review_item(row) for row in rows]

    def upsert(self, user_id: str, key: AyahKey, item: ReviewItem) -> None:
        values = _item_values(user_id, key, item)
        with self._session_scope() as session:
            insert = self._dialect_insert(session)
            if insert is None:
                self._locking_upsert(session, values)
                return

            stmt = insert(ReviewItemModel).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=_ITEM_PK,
                set_={
                    name: stmt.excluded[name]
                    for name in values
                    if name not in _ITEM_PK
                },
            )
            session.execute(stmt)

    @staticmethod
    def _locking_upsert(session: Session, values: dict) -> None:
        # Dialects without ON CONFLICT: row lock, then update or insert
        row = session.get(
            ReviewItemModel,
            (values["user_id"], values["surah_no"], values["ayah_no_surah"]),
            with_for_update=True,
        )
        if row is None:
            session.add(ReviewItemModel(**values))
            return
        for name, value in values.items():
            setattr(row, name, value)

    def delete(self, user_id: str, key: AyahKey) -> bool:
        with self._session_scope() as session:
            result = session.execute(
                delete(ReviewItemModel).where(
                    ReviewItemModel.user_id == user_id,
                    ReviewItemModel.surah_no == key[0],
                    ReviewItemModel.ayah_no_surah == key[1],
                )
            )
            return bool(result.rowcount)

    def delete_user(self, user_id: str) -> int:
        with self._session_scope() as session:
            result = session.execute(
                delete(ReviewItemModel).where(ReviewItemModel.user_id == user_id)
            )
            return result.rowcount or 0


class SqlDailyLogStore(_SqlStore, DailyLogStore):
    """Daily grading counters in the `daily_logs` table."""

    def add(self, user_id: str, day: date, ayah_key: str, count: int) -> None:
        if count < 0:
            raise ValueError("Daily log counts are never decremented")

        values = {
            "user_id": user_id,
            "date": dates.to_date_string(day),
            "ayah_key": ayah_key,
            "count": count,
        }
        with self._session_scope() as session:
            insert = self._dialect_insert(session)
            if insert is None:
                row = session.get(
                    DailyLogModel,
                    (user_id, values["date"], ayah_key),
                    with_for_update=True,
                )
                if row is None:
                    session.add(DailyLogModel(**values))
                else:
                    row.count = row.count + count
                return

            stmt = insert(DailyLogModel).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=_LOG_PK,
                set_={"count": DailyLogModel.count + stmt.excluded["count"]},
            )
            session.execute(stmt)

    def list_by_user(self, user_id: str) -> list[DailyLogEntry]:
        with self._session_scope() as session:
            rows = session.scalars(
                select(DailyLogModel)
                .where(DailyLogModel.user_id == user_id)
                .order_by(DailyLogModel.date.desc())
            ).all()
            return [_to_entry(row) for row in rows]

    def list_by_user_and_date_range(
        self,
        user_id: str,
        start: date,
        end: date
    ) -> list[DailyLogEntry]:
        # ISO date strings sort chronologically
        with self._session_scope() as session:
            rows = session.scalars(
                select(DailyLogModel).where(
                    DailyLogModel.user_id == user_id,
                    DailyLogModel.date >= dates.to_date_string(start),
                    DailyLogModel.date <= dates.to_date_string(end),
                ).order_by(DailyLogModel.date.desc())
            ).all()
            return [_to_entry(row) for row in rows]

    def delete_user(self, user_id: str) -> int:
        with self._session_scope() as session:
            result = session.execute(
                delete(DailyLogModel).where(DailyLogModel.user_id == user_id)
            )
            return result.rowcount or 0


def _to_entry(row: DailyLogModel) -> DailyLogEntry:
    return DailyLogEntry(
        user_id=row.user_id,
        date=dates.parse_date_string(row.date),
        ayah_key=row.ayah_key,
        count=row.count,
    )
