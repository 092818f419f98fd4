from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Integer, String, create_engine, delete, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

import config
from models import HistoryItem, Mode

_connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(config.DATABASE_URL, pool_pre_ping=True, future=True, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass


class StudyHistoryEntry(Base):
    __tablename__ = "study_history"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    topic: Mapped[str] = mapped_column(String(1024), nullable=False)
    mode: Mapped[str] = mapped_column(String(16), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)


def init_db(bind=engine):
    """Initialize database tables. Creates tables if they don't exist."""
    Base.metadata.create_all(bind=bind)


def _to_item(row: StudyHistoryEntry) -> HistoryItem:
    return HistoryItem(id=row.id, topic=row.topic, mode=Mode(row.mode), timestamp=row.timestamp)


class HistoryStore:
    """
    Per-user study history: newest first, trimmed to the newest `limit` entries on every append.
    """

    def __init__(self, session_factory=SessionLocal, limit: int = config.HISTORY_LIMIT) -> None:
        self.session_factory = session_factory
        self.limit = limit

    def append(self, user_id: str, topic: str, mode: Mode, timestamp: Optional[datetime] = None) -> HistoryItem:
        db = self.session_factory()
        try:
            row = StudyHistoryEntry(
                user_id=user_id,
                topic=topic,
                mode=mode.value,
                timestamp=(timestamp or datetime.now(timezone.utc)).replace(tzinfo=None),
            )
            db.add(row)
            db.flush()

            stale = db.scalars(
                select(StudyHistoryEntry.id)
                .where(StudyHistoryEntry.user_id == user_id)
                .order_by(StudyHistoryEntry.timestamp.desc(), StudyHistoryEntry.id.desc())
                .offset(self.limit)
            ).all()
            if stale:
                db.execute(delete(StudyHistoryEntry).where(StudyHistoryEntry.id.in_(stale)))
            db.commit()
            db.refresh(row)
            return _to_item(row)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list(self, user_id: str) -> List[HistoryItem]:
        db = self.session_factory()
        try:
            rows = db.scalars(
                select(StudyHistoryEntry)
                .where(StudyHistoryEntry.user_id == user_id)
                .order_by(StudyHistoryEntry.timestamp.desc(), StudyHistoryEntry.id.desc())
            ).all()
            return [_to_item(r) for r in rows]
        finally:
            db.close()

    def delete(self, user_id: str, entry_id: int) -> bool:
        db = self.session_factory()
        try:
            result = db.execute(
                delete(StudyHistoryEntry)
                .where(StudyHistoryEntry.user_id == user_id)
                .where(StudyHistoryEntry.id == entry_id)
            )
            db.commit()
            return result.rowcount > 0
        finally:
            db.close()

    def clear(self, user_id: str) -> int:
        db = self.session_factory()
        try:
            result = db.execute(delete(StudyHistoryEntry).where(StudyHistoryEntry.user_id == user_id))
            db.commit()
            return result.rowcount
        finally:
            db.close()
