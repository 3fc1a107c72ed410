"""
importhub/database.py - SQLAlchemy declarative base and the process-wide connection pool.

`Database` owns one AsyncEngine (and therefore one connection pool) for the lifetime of
the process. The app factory calls `connect()` on startup and `dispose()` on shutdown;
request handlers receive a fresh AsyncSession through the `get_session` dependency.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("importhub.database")

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY / ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.sessionmaker: Optional[async_sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    def connect(self) -> AsyncEngine:
        if self.engine is not None:
            return self.engine

        kwargs = {"echo": self.echo}
        if self.is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            db_path = make_url(self.url).database
            if db_path in (None, "", ":memory:"):
                # in-memory databases only live as long as their single connection
                kwargs["poolclass"] = StaticPool
            else:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_async_engine(self.url, **kwargs)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
        logger.info("Database engine created for %s", make_url(self.url).render_as_string(hide_password=True))
        return self.engine

    async def create_all(self) -> None:
        """Create missing tables. Importing the model package registers every table on Base."""
        from importhub.model import import_order, product, supplier, user  # noqa: F401

        engine = self.connect()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        logger.info("Database engine disposed")
        self.engine = None
        self.sessionmaker = None

    def session(self) -> AsyncSession:
        if self.sessionmaker is None:
            raise RuntimeError("Database.connect() must be called before opening sessions")
        return self.sessionmaker()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Explicit unit of work: BEGIN ... COMMIT, or ROLLBACK of everything on any error.
    Reads already done on the session (auth lookup, validation) are closed first so the
    writes always start on a fresh transaction.
    """
    if session.in_transaction():
        await session.commit()
    async with session.begin():
        yield session


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one AsyncSession per request, closed when the response is sent."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
