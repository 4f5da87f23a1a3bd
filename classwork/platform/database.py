from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import settings

_database_url = settings.resolved_database_url

_engine_kw: dict = {}
if "sqlite" in _database_url:
    # Same file may be shared by the request thread pool (tests, local dev)
    _engine_kw = {"connect_args": {"check_same_thread": False, "timeout": 30}}
else:
    _engine_kw = {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
    }
engine = create_engine(_database_url, **_engine_kw)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency that yields a sync database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction_scope(db: Session) -> Iterator[Session]:
    """Run a unit of work on ``db``: commit on clean exit, roll back otherwise.

    The rollback also covers BaseException (task cancellation, KeyboardInterrupt)
    so a transaction is never left open on the connection.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


class Base(DeclarativeBase):
    pass
