"""Database engine and sessions.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for development and
tests. The URL comes from `DATABASE_URL`; pool sizing from
DATABASE_POOL_SIZE and DATABASE_MAX_OVERFLOW, which SQLite ignores.

SQLite leaves foreign keys off unless asked, and the cascades in
`farm_time.database.models` rely on them, so each SQLite connection runs
`PRAGMA foreign_keys=ON`.

## Usage

```python
await init_db(settings)

async with get_db() as session:
    event = await session.get(Event, event_id)
    ...
    await session.commit()

await close_db()
```

Sessions do not expire objects on commit, so response models can be built
from ORM rows after the transaction ends.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from farm_time.config import Settings, get_settings
from farm_time.database.models import Base

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """Create an engine for `settings.database_url`."""
    options: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    engine = create_async_engine(settings.database_url, **options)
    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def init_db(settings: Settings | None = None) -> None:
    """Open the engine and session factory. Call once at startup."""
    global _engine, _session_factory

    settings = settings or get_settings()
    _engine = build_engine(settings)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info(f"Database ready ({_engine.url.get_backend_name()})")


async def close_db() -> None:
    """Dispose of the connection pool. Safe to call when not initialized."""
    global _engine, _session_factory

    if _engine is None:
        return

    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    _session_factory = None


async def create_tables() -> None:
    """Create missing tables. Existing tables are left untouched."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Open a session; roll back if the block raises.

    Nothing is committed implicitly. Services commit their own writes.
    """
    _require_engine()
    assert _session_factory is not None

    session = _session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    ```python
    @router.get("/{event_id}")
    async def get_event(event_id: str, db: AsyncSession = Depends(get_db_session)):
        return await EventService(db).get_event(event_id)
    ```
    """
    async with get_db() as session:
        yield session
