"""
Database connection for PostgreSQL with a SQLite fallback.

Env vars (set in the hosting dashboard or .env):
    DATABASE_URL  -- full postgres:// connection string
    DATABASE_URL_FALLBACK -- optional sqlite+aiosqlite:///./local.db for local dev
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from rating_api import config

logger = logging.getLogger(__name__)

# libpq-only options asyncpg does not understand
_STRIPPED_PARAMS = ("channel_binding", "sslmode")


def normalise_url(raw_url: str) -> tuple[str, dict]:
    """
    Turn a hosting-provider Postgres URL into an asyncpg URL.

    Returns the URL and the ``connect_args`` the engine needs.
    """
    # Providers hand out postgres:// but asyncpg needs postgresql+asyncpg://
    if raw_url.startswith("postgres://"):
        raw_url = raw_url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif raw_url.startswith("postgresql://"):
        raw_url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    parts = urlsplit(raw_url)
    params = parse_qsl(parts.query, keep_blank_values=True)
    sslmode = next((v for k, v in params if k == "sslmode"), None)
    kept = [(k, v) for k, v in params if k not in _STRIPPED_PARAMS]
    url = urlunsplit(parts._replace(query=urlencode(kept)))

    connect_args = {}
    if sslmode and sslmode != "disable":
        connect_args["ssl"] = "require"
    return url, connect_args


if config.DATABASE_URL:
    DATABASE_URL, _connect_args = normalise_url(config.DATABASE_URL)
else:
    # Local fallback: async sqlite via aiosqlite
    DATABASE_URL, _connect_args = config.DATABASE_URL_FALLBACK, {}

_engine_kwargs = {"echo": False, "connect_args": _connect_args}
if DATABASE_URL.startswith("sqlite"):
    # aiosqlite connections are bound to the loop that opened them
    _engine_kwargs["poolclass"] = NullPool
else:
    _engine_kwargs["pool_pre_ping"] = True

engine = create_async_engine(DATABASE_URL, **_engine_kwargs)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def init_db():
    """Create all tables and seed the roster (safe to call multiple times)."""
    # Import models so they register on Base.metadata
    from rating_api import models  # noqa: F401
    from rating_api.bootstrap import ensure_current_match, seed_roster

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        added = await seed_roster(session, config.ROSTER)
        match = await ensure_current_match(session)
        await session.commit()

    logger.info(
        "Database ready (%s): %d roster players added, current match #%d",
        engine.url.get_backend_name(), added, match.id,
    )


async def check_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return False


async def get_session() -> AsyncSession:
    async with async_session() as session:
        yield session
