"""Async engine, session factory and FastAPI DB dependency."""
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import get_settings

Base = declarative_base()

settings = get_settings()


def make_engine(url: str, echo: bool = False):
    engine = create_async_engine(url, echo=echo, future=True)
    if url.startswith("sqlite"):
        # SQLite ignores FOREIGN KEY clauses unless asked
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_fks(dbapi_conn, conn_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def make_session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, class_=AsyncSession)


engine = make_engine(settings.database_url, echo=settings.debug)
AsyncSessionLocal = make_session_factory(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as db:
        yield db
