"""Storage handle for the wiki engine.

The :class:`Database` owns the SQLAlchemy engine.  It is opened once at
startup, handed explicitly to every component that touches storage and closed
at shutdown.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tome.core.settings import WikiSettings

logger = logging.getLogger(__name__)

_MEMORY_URIS = {"sqlite://", "sqlite:///:memory:"}


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class DatabaseNotOpenError(RuntimeError):
    """Raised when the storage handle is used before :meth:`Database.open`."""


class Database:
    """Engine and session factory with an explicit lifecycle."""

    def __init__(self, settings: Optional[WikiSettings] = None) -> None:
        self.settings = settings or WikiSettings()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker[Session]] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseNotOpenError("database has not been opened")
        return self._engine

    def open(self) -> "Database":
        """Create the engine.  Calling ``open`` twice is a no-op."""

        if self._engine is not None:
            return self

        uri = self.settings.database_uri
        options = self.settings.engine_options()
        if uri in _MEMORY_URIS:
            # every session has to see the same in-memory database
            options.setdefault("poolclass", StaticPool)
            options.setdefault("connect_args", {"check_same_thread": False})

        engine = create_engine(uri, **options)
        if self.settings.is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info("Opened wiki database", extra={"event": "wiki.db.open", "dialect": engine.dialect.name})
        return self

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""

        if self._engine is None:
            return
        self._engine.dispose()
        logger.info("Closed wiki database", extra={"event": "wiki.db.close"})
        self._engine = None
        self._session_factory = None

    def create_schema(self) -> None:
        """Create every table known to the wiki models."""

        from tome.core.models import Base

        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        from tome.core.models import Base

        Base.metadata.drop_all(self.engine)

    def _new_session(self) -> Session:
        if self._session_factory is None:
            raise DatabaseNotOpenError("database has not been opened")
        return self._session_factory()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session for read-only work; it is always closed afterwards."""

        session = self._new_session()
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session whose work is committed on success.

        Any exception rolls the transaction back before it propagates.
        """

        session = self._new_session()
        try:
            yield session
            session.commit()
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["Database", "DatabaseNotOpenError"]
