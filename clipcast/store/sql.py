"""
SQLAlchemy-backed document store.

Clip records live in an ordered table indexed by number; documents live in a
key/value table with a JSON column. SQLite is the default backend.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Float, Integer, String, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from clipcast.errors import StoreIOError
from clipcast.scheduling.state import ClipRecord
from clipcast.store.base import DocumentStore

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class ClipRow(Base):
    """Clip record table, one row per ingested clip."""

    __tablename__ = "clips"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_seconds: Mapped[float] = mapped_column(Float, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)

    def to_record(self) -> ClipRecord:
        published_at = self.published_at
        # SQLite drops tzinfo; values are always written in UTC
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        return ClipRecord(
            id=self.id,
            title=self.title,
            published_at=published_at,
            duration=timedelta(seconds=self.duration_seconds),
            number=self.number,
        )


class DocumentRow(Base):
    """Key/value document table."""

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)


class SQLDocumentStore(DocumentStore):
    """
    Store backed by a relational database.

    Usage:
        store = SQLDocumentStore("sqlite:///./clipcast.db")
        records = store.range_query(start_at=100, limit=100)
    """

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url == "sqlite://":
                engine_kwargs["poolclass"] = StaticPool

        self._engine = create_engine(url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        Base.metadata.create_all(bind=self._engine)
        logger.info(f"SQL document store ready: {self._engine.url.render_as_string(hide_password=True)}")

    def range_query(
        self,
        order_key: str = "number",
        start_at: int = 0,
        limit: int = 100,
    ) -> List[ClipRecord]:
        if order_key != "number":
            raise ValueError(f"Unsupported order key: {order_key}")
        if limit <= 0:
            return []

        stmt = (
            select(ClipRow)
            .where(ClipRow.number >= start_at)
            .order_by(ClipRow.number)
            .limit(limit)
        )
        try:
            with self._session_factory() as session:
                return [row.to_record() for row in session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            raise StoreIOError(f"range query failed: {e}", start_at=start_at, limit=limit) from e

    def get_document(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            with self._session_factory() as session:
                row = session.get(DocumentRow, key)
                return dict(row.value) if row is not None else None
        except SQLAlchemyError as e:
            raise StoreIOError(f"document read failed: {e}", key=key) from e

    def set_document(self, key: str, value: Dict[str, Any]) -> None:
        try:
            with self._session_factory() as session:
                session.merge(DocumentRow(key=key, value=value))
                session.commit()
        except SQLAlchemyError as e:
            raise StoreIOError(f"document write failed: {e}", key=key) from e

    def put_clip(self, record: ClipRecord) -> None:
        row = ClipRow(
            id=record.id,
            title=record.title,
            published_at=record.published_at.astimezone(timezone.utc),
            duration_seconds=record.duration.total_seconds(),
            number=record.number,
        )
        try:
            with self._session_factory() as session:
                session.merge(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StoreIOError(f"clip write failed: {e}", clip_id=record.id) from e

    def close(self) -> None:
        self._engine.dispose()
