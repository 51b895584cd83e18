"""
Database configuration and session management
"""
import logging
from threading import Lock

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Create base class for models
Base = declarative_base()


class Database:
    """Engine plus session factory for one store URL"""

    def __init__(self, url: str):
        self.url = url
        # SQLite needs special connect args; Postgres does not
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(
            url,
            future=True,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)
        self._initialized = False
        self._init_lock = Lock()

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def init_schema(self) -> None:
        """Create tables if missing. Safe to call multiple times."""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            # Make sure all models are imported so Base.metadata is populated
            from . import models  # noqa: F401
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables ready", extra={"component": "db"})
            self._initialized = True

    def dispose(self) -> None:
        self.engine.dispose()
