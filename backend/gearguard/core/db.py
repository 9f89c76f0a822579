# backend/gearguard/core/db.py
import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import Column, DateTime, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive values are UTC (SQLite drops the offset); aware values are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimestampMixin:
    CreatedAt = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    UpdatedAt = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


def _enable_sqlite_fks(dbapi_conn, _record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Database:
    """Owns the engine and the session factory for one application instance."""

    def __init__(self, dsn: str, echo: bool = False):
        url = make_url(dsn)
        engine_kwargs = dict(pool_pre_ping=True, echo=echo)

        # per-dialect engine options
        backend = url.get_backend_name()
        if backend.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # in-memory: every session must share the one connection
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(pool_size=5, max_overflow=10, pool_recycle=3600)

        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        if backend.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_fks)

        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def create_all(self) -> None:
        from .. import models  # noqa: F401  (registers tables on Base.metadata)

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured on %s", self.url.render_as_string(hide_password=True))

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
