"""Tests for database session scopes."""
import pytest
from sqlalchemy import insert, text

from ..db.session import SessionManager


def _insert_home(store, session, label='Home'):
    session.execute(insert(store.table).values(owner_type='customer', owner_id=1, label=label))


def test_nested_scopes_use_separate_sessions(store, session_manager):
    with session_manager.scope() as outer:
        _insert_home(store, outer)
        with session_manager.scope() as inner:
            assert inner is not outer
        # Closing the inner scope leaves the outer one usable
        _insert_home(store, outer, label='Work')

    assert sorted(address.label for address in store.query().all()) == ['Home', 'Work']


def test_scope_rolls_back_on_error(store, session_manager):
    with pytest.raises(RuntimeError):
        with session_manager.scope() as session:
            _insert_home(store, session)
            raise RuntimeError('boom')

    assert store.query().with_trashed().count() == 0


def test_in_memory_database_survives_between_scopes():
    manager = SessionManager('sqlite://')
    try:
        with manager.scope() as session:
            session.execute(text('CREATE TABLE notes (body TEXT)'))
            session.execute(text("INSERT INTO notes VALUES ('kept')"))
        with manager.scope() as session:
            assert session.execute(text('SELECT body FROM notes')).scalar_one() == 'kept'
    finally:
        manager.dispose()
