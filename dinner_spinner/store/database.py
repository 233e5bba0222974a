from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def create_session_factory(database_url: str) -> sessionmaker:
    """Build the engine and session factory for one app instance."""
    # SQLite connections are shared across the threadpool FastAPI runs sync routes in
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine_kwargs = {}
    if database_url in _MEMORY_URLS:
        # every connection must see the same in-memory database
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session from the factory attached to the running app."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
