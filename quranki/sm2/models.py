"""
SQLAlchemy ORM Models for the Review Database

Defines ReviewItem and DailyLog models for Postgres (or SQLite) persistence.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewItemModel(Base):
    """
    Persistent SM-2 state for a single ayah.

    Primary key: composite of user_id, surah_no and ayah_no_surah, so an
    upsert is atomic per (user, ayah).
    """
    __tablename__ = 'review_items'

    user_id = Column(String(255), primary_key=True, nullable=False)
    surah_no = Column(Integer, primary_key=True, nullable=False)
    ayah_no_surah = Column(Integer, primary_key=True, nullable=False)

    # Scope mode the item was graded under ("juzaa" or "surah")
    scope_kind = Column(String(16), nullable=False, index=True)

    # SM-2 parameters
    interval = Column(Integer, nullable=False, default=1)
    repetitions = Column(Integer, nullable=False, default=0)
    ease_factor = Column(Float, nullable=False, default=2.5)

    # Scheduling
    last_reviewed_at = Column(DateTime(timezone=True), nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False, index=True)
    review_date = Column(String(10), nullable=True)

    def __repr__(self):
        return f"<ReviewItemModel({self.user_id}, {self.surah_no}:{self.ayah_no_surah})>"


class DailyLogModel(Base):
    """
    Number of gradings of one ayah on one local calendar day.
    """
    __tablename__ = 'daily_logs'

    user_id = Column(String(255), primary_key=True, nullable=False)
    date = Column(String(10), primary_key=True, nullable=False)  # YYYY-MM-DD
    ayah_key = Column(String(16), primary_key=True, nullable=False)  # "surah_ayah"

    count = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<DailyLogModel({self.user_id}, {self.date}, {self.ayah_key}, count={self.count})>"
