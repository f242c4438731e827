"""
core/database.py -- Async SQLAlchemy engine factory shared by every store.

One AsyncEngine is the process-wide connection factory. It is created in the
app lifespan (or by the CLI), handed to DealerStore and CarStore, and
disposed on shutdown. Stores open a connection per operation and release it
on every exit path via `async with`.

SQLite note: in-memory databases get a StaticPool from the aiosqlite dialect,
so both stores see the same schema when they share this engine.

Layer rule: core/ may not import from api/, auth/, or inventory/.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_store_engine(database_url: str) -> AsyncEngine:
    """Return an AsyncEngine for database_url.

    Usage:
        engine = create_store_engine("sqlite+aiosqlite:///carstock.db")
        engine = create_store_engine("postgresql+asyncpg://user:pw@host/db")
    """
    engine = create_async_engine(database_url)
    if database_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _set_wal_mode)
    return engine
