from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from orgdrill.core.errors import StoreUnavailable
from orgdrill.db.models.base import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, making the parent directory of a SQLite file if needed."""
    try:
        url = make_url(database_url)
    except Exception as e:  # SQLAlchemy raises ArgumentError or ValueError depending on the input
        raise StoreUnavailable(f"Invalid database URL {database_url!r}: {e}") from e

    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = Path(url.database).expanduser().parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailable(f"Cannot create database directory {directory}: {e}") from e

    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create tables that do not exist yet."""
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        raise StoreUnavailable(f"Cannot initialise rating store at {engine.url}: {e}") from e
    logger.debug(f"Database tables initialized at {engine.url}")


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:  # Intentionally broad - rollback on any error before re-raising
        session.rollback()
        raise
    finally:
        session.close()
