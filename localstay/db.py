import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine, DateTime, String
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, mapped_column
from .config import settings

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def new_id() -> str:
    """Opaque record identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # Naive UTC, matching what DateTime columns hand back on SQLite.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordMixin:
    """Identifier plus the two system-managed timestamps shared by every record."""

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


def touch_timestamps(record: RecordMixin, now: datetime | None = None) -> None:
    """
    Pre-write hook called by the store facades.
    Stamps created_at on first write only; updated_at on every write.
    """
    now = now or utcnow()
    if record.created_at is None:
        record.created_at = now
    # Never move updated_at backwards, even if the clock does.
    if record.updated_at is None or now >= record.updated_at:
        record.updated_at = now


def ensure_schema():
    """
    Best-effort table and index creation for environments without Alembic.
    Never fails app startup; failures are logged.
    """
    # Imported for its side effect of registering tables on Base.metadata
    from . import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.warning("Schema creation failed; run 'alembic upgrade head'", exc_info=True)


def page_size(limit: int | None) -> int:
    """Clamp a caller-supplied limit to [1, MAX_PAGE_SIZE]; None means the default."""
    if limit is None:
        return settings.DEFAULT_PAGE_SIZE
    return max(1, min(limit, settings.MAX_PAGE_SIZE))
