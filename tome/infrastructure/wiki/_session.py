"""Helpers for running repository work inside an optional caller session."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from tome.core.db import Database


@contextmanager
def reading(database: Database, session: Optional[Session] = None) -> Iterator[Session]:
    """Reuse *session* when given, otherwise open a short-lived read session."""

    if session is not None:
        yield session
        return
    with database.session() as own_session:
        yield own_session


@contextmanager
def writing(database: Database, session: Optional[Session] = None) -> Iterator[Session]:
    """Reuse the caller's transaction when given, otherwise open a new one."""

    if session is not None:
        yield session
        return
    with database.transaction() as own_session:
        yield own_session
