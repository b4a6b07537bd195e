from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
import logging
import os

logger = logging.getLogger(__name__)

Base = declarative_base()


def _ensure_sqlite_directory(database_url: str):
    database = make_url(database_url).database
    if database and database != ":memory:" and not database.startswith("file:"):
        directory = os.path.dirname(os.path.abspath(database))
        os.makedirs(directory, exist_ok=True)


def create_db_engine(database_url: str, echo: bool = False):
    """Create an engine configured for the given database type."""
    if "sqlite" in database_url:
        _ensure_sqlite_directory(database_url)
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    elif "mysql" in database_url:
        engine = create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=10,
            pool_recycle=3600,
            pool_pre_ping=True,  # Verify connections before using
            echo=echo,
        )
    else:
        # Generic configuration for other databases
        engine = create_engine(database_url, echo=echo)

    return engine


def create_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine):
    """Initialize database tables."""
    # Register models on Base.metadata before creating tables
    import prompt_vault.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")
