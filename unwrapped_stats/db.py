"""Database connection and session management"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from unwrapped_stats.models.db import Base

logger = logging.getLogger(__name__)

class Database:
    """Connection and session manager for the local cache database"""

    def __init__(self, url: str):
        """Initialize database manager state"""
        if not url:
            raise ValueError("Database URL cannot be empty")
        self.url = url
        self._engine = None
        self._SessionLocal = None

    @property
    def initialized(self) -> bool:
        return self._SessionLocal is not None

    def init(self) -> None:
        """
        Initialize database connection and create tables.
        """
        try:
            self._engine = create_engine(self.url)
            Base.metadata.create_all(self._engine)
            self._SessionLocal = sessionmaker(bind=self._engine)
            logger.info(f"Database initialized at {self._engine.url.render_as_string(hide_password=True)}")

        except SQLAlchemyError as e:
            logger.error(f"Database initialization failed: {e}")
            raise

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations"""
        if not self._SessionLocal:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """
        Clean up database connections.
        Should be called during application shutdown.
        """
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._SessionLocal = None
