import pytest
from sqlalchemy import select, text

from tome.core.db import Database, DatabaseNotOpenError
from tome.core.models.wiki import Page, Revision
from tome.core.settings import WikiSettings


def test_unopened_database_cannot_be_used():
    database = Database(WikiSettings())

    assert database.is_open is False
    with pytest.raises(DatabaseNotOpenError):
        database.engine
    with pytest.raises(DatabaseNotOpenError):
        with database.session():
            pass


def test_context_manager_opens_and_closes():
    with Database(WikiSettings()) as database:
        assert database.is_open is True
    assert database.is_open is False


def test_open_is_idempotent(database):
    engine = database.engine

    assert database.open() is database
    assert database.engine is engine


def test_transaction_commits(database):
    with database.transaction() as session:
        session.add(Page(path="/", title="Root", action_view="*", action_modify="*"))

    with database.session() as session:
        assert session.execute(select(Page.path)).scalars().all() == ["/"]


def test_transaction_rolls_back_on_error(database):
    with pytest.raises(RuntimeError):
        with database.transaction() as session:
            session.add(Page(path="/", title="Root", action_view="*", action_modify="*"))
            session.flush()
            raise RuntimeError("boom")

    with database.session() as session:
        assert session.execute(select(Page.path)).scalars().all() == []


def test_sqlite_foreign_keys_are_enforced(database):
    with database.session() as session:
        assert session.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_file_database_is_shared_between_handles(tmp_path):
    settings = WikiSettings(database_uri=f"sqlite:///{tmp_path / 'wiki.db'}")
    with Database(settings) as first:
        first.create_schema()
        with first.transaction() as session:
            page = Page(path="/", title="Root", action_view="*", action_modify="*")
            session.add(page)
            session.flush()
            session.add(Revision(page_id=page.page_id, body="hello"))

    with Database(settings) as second:
        with second.session() as session:
            assert session.execute(select(Revision.body)).scalars().all() == ["hello"]
