"""
Database engine, session factory and the per-request session dependency.

The engine is built by the application factory and kept on ``app.state``;
route handlers receive a session through :func:`get_db` instead of reaching
for a module-level handle.
"""

import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for ``database_url``.

    SQLite connections are shared across the threadpool FastAPI runs sync
    handlers in; an in-memory SQLite database additionally needs a single
    shared connection or every session would see an empty database.
    """
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    # Imported for its side effect of registering the tables on Base.
    from tranquilstay import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized: %s", engine.url.render_as_string(hide_password=True))


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency provider that yields a DB session.

    Creates a new session per request and always closes it.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
