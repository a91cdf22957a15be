from __future__ import annotations

import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from contact_api.core.errors import PersistenceError
from contact_api.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Store handle: owns the engine and hands out sessions.

    Nothing connects until :meth:`open` is called, and :meth:`close` disposes
    the connection pool. The application opens one at startup and closes it at
    shutdown; scripts and tests manage their own.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None
        self.available = False

    def _build_engine(self) -> Engine:
        url = make_url(self.url)
        kwargs: dict = {"pool_pre_ping": True}
        if url.get_backend_name() == "sqlite":
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        return create_engine(self.url, **kwargs)

    def open(self) -> bool:
        """Create the engine and the tables. Returns False if the store is unreachable."""
        import contact_api.models  # noqa: F401  register tables on Base.metadata

        try:
            if self.engine is None:
                self.engine = self._build_engine()
                self._sessionmaker = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
            Base.metadata.create_all(bind=self.engine)
        except (SQLAlchemyError, ImportError):
            logger.exception("Database connection error")
            self.available = False
            return False

        self.available = True
        logger.info("Database connected")
        return True

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._sessionmaker = None
        self.available = False

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        return self._sessionmaker()


def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.db
    try:
        db = database.session()
    except RuntimeError:
        logger.error("Database is not available")
        raise PersistenceError()
    try:
        yield db
    finally:
        db.close()
