import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from scenebook.core.config import settings

logger = logging.getLogger(__name__)

logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    """
    Make SQLite behave like the production database for our purposes:
    enforce foreign keys, and let SQLAlchemy own BEGIN so that
    SAVEPOINT-based nested transactions roll back correctly.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Disable the driver's implicit transaction handling
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying SQLite hooks when needed."""
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        kwargs = {"echo": echo, "future": True}
        if parsed.database in (None, "", ":memory:"):
            # A single shared connection keeps the in-memory database alive
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        engine = create_async_engine(url, **kwargs)
        _install_sqlite_hooks(engine)
        return engine

    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_timeout=10,
    )


engine = create_engine_for_url(settings.DATABASE_URL, echo=settings.DB_ECHO)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
