"""
Database connection and session management.

This module handles:
- A process-wide database handle with explicit init/teardown
- Engine creation with connection pooling
- Session factory setup
- Connection health checks
"""

from typing import Generator, Dict, Any, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
import logging

from calendar_backend.core.config import get_settings, Settings
from calendar_backend.core.exceptions import DatabaseException

logger = logging.getLogger('CORE_DATABASE')


def _engine_config(url: str, settings: Settings) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        config: Dict[str, Any] = {
            'connect_args': {'check_same_thread': False},
            'echo': settings.db_echo,
        }
        # In-memory databases live in a single connection
        if make_url(url).database in (None, "", ":memory:"):
            config['poolclass'] = StaticPool
        return config

    return {
        'poolclass': QueuePool,
        'pool_size': settings.db_pool_size,
        'max_overflow': settings.db_max_overflow,
        'pool_timeout': settings.db_pool_timeout,
        'pool_recycle': settings.db_pool_recycle,
        'pool_pre_ping': settings.db_pool_pre_ping,
        'echo': settings.db_echo,
    }


class Database:
    """
    Process-wide database handle.

    ``init()`` connects once and is safe to call repeatedly; ``dispose()``
    releases the pool so a later ``init()`` can connect again (possibly to a
    different URL, which is how the tests swap in SQLite).
    """

    def __init__(self):
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None
        self.url: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def init(self, url: Optional[str] = None, settings: Optional[Settings] = None) -> Engine:
        """
        Connect to the database if not already connected.

        Args:
            url: Database URL (defaults to settings.database_url)
            settings: Settings providing pool configuration

        Returns:
            Engine: The shared engine

        Raises:
            DatabaseException: If the connection check fails
        """
        if self.engine is not None:
            return self.engine

        settings = settings or get_settings()
        url = url or settings.database_url
        safe_url = make_url(url).render_as_string(hide_password=True)
        logger.info(f"Initializing database connection to: {safe_url}")

        engine = create_engine(url, **_engine_config(url, settings))
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            engine.dispose()
            logger.error(f"Could not connect to the database at {safe_url}: {e}")
            raise DatabaseException(f"Could not connect to the database: {e}") from e

        self.engine = engine
        self.url = url
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("Database connection established")
        return engine

    def dispose(self) -> None:
        """Close all pooled connections and forget the engine."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection pool disposed")
        self.engine = None
        self.session_factory = None
        self.url = None

    def session(self) -> Session:
        """Open a new session, connecting first if needed."""
        if self.session_factory is None:
            self.init()
        return self.session_factory()

    def health(self) -> Dict[str, Any]:
        """
        Check database connection health and return status.

        Returns:
            dict: Health status with connection pool information
        """
        if self.engine is None:
            return {"status": "uninitialized"}

        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return {
                "status": "healthy",
                "connection_pool": self.engine.pool.status(),
                "dialect": self.engine.dialect.name,
            }
        except SQLAlchemyError as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "dialect": self.engine.dialect.name,
            }


database = Database()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session

    Example:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = database.session()
    try:
        yield db
    finally:
        db.close()


def get_database_health() -> Dict[str, Any]:
    """Health of the shared database handle."""
    return database.health()


def init_db(url: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Initialize the database connection and create tables.

    Safe to call on every startup: the connection is established once and
    ``create_all`` only creates missing tables.
    """
    from calendar_backend.models import Base

    try:
        engine = database.init(url, settings)
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
    except SQLAlchemyError as e:
        logger.error(f"Error during database initialization: {e}")
        raise DatabaseException(f"Database initialization failed: {e}") from e


def close_db() -> None:
    """Tear down the shared database handle."""
    database.dispose()
