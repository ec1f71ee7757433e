"""Database session management."""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool


class SessionManager:
    """Owns the engine and hands out committed-or-rolled-back sessions.

    Each ``scope()`` opens its own session, so scopes can nest without
    sharing state.
    """

    def __init__(self, database_url: str):
        url = make_url(database_url)
        # In-memory SQLite lives only as long as its connection
        if url.get_backend_name() == 'sqlite' and url.database in (None, '', ':memory:'):
            self.engine = create_engine(
                database_url,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool
            )
        else:
            self.engine = create_engine(database_url)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)
        self.logger = logging.getLogger(__name__)

    def get_session(self) -> Session:
        """Get a new database session; the caller closes it."""
        session = self.SessionLocal()
        self.logger.debug(f"Created new session: {id(session)}")
        return session

    @contextmanager
    def scope(self) -> Iterator[Session]:
        """Yield a session, committing on success and rolling back on error."""
        session = self.get_session()
        try:
            yield session
            self.logger.debug(f"Committing session: {id(session)}")
            session.commit()
        except BaseException:
            self.logger.debug(f"Rolling back session: {id(session)}")
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
