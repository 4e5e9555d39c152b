from __future__ import annotations

import logging
import re

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from eduplatform.core.config import settings

log = logging.getLogger("eduplatform.db")

DRIVER = "asyncpg"
DRIVER_SCHEME = f"postgresql+{DRIVER}://"

_BARE_POSTGRES = re.compile(r"^postgres(ql)?://")
_QUALIFIED = re.compile(r"^postgresql\+\w+://")

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


class DatabaseConfigError(RuntimeError):
    pass


def resolve_database_url(raw: str | None = None) -> str:
    """
    Turn DATABASE_URL into something SQLAlchemy can hand to asyncpg.

    postgres://u:p@h/db     -> postgresql+asyncpg://u:p@h/db
    postgresql://u:p@h/db   -> postgresql+asyncpg://u:p@h/db
    postgresql+psycopg://.. -> unchanged (already names a driver)
    u:p@h:5432/db           -> postgresql+asyncpg://u:p@h:5432/db
    """
    url = settings.DATABASE_URL if raw is None else raw
    if not url or not url.strip():
        raise DatabaseConfigError("DATABASE_URL environment variable is not set")

    if _QUALIFIED.match(url):
        return url
    if _BARE_POSTGRES.match(url):
        return _BARE_POSTGRES.sub(DRIVER_SCHEME, url, count=1)
    return DRIVER_SCHEME + url


def build_engine(url: str | None = None) -> AsyncEngine:
    # nothing connects here; a bad host shows up on first checkout
    resolved = resolve_database_url(url)
    connect_args = {}
    if make_url(resolved).get_driver_name() == DRIVER:
        connect_args["server_settings"] = {"statement_timeout": "30000"}  # 30s

    engine = create_async_engine(
        resolved,
        pool_size=5,
        max_overflow=5,
        pool_recycle=1800,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    log.info("database engine created", extra={"driver": engine.dialect.driver})
    return engine


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _sessionmaker
    if _sessionmaker is None:
        _sessionmaker = async_sessionmaker(get_engine(), expire_on_commit=False, class_=AsyncSession)
    return _sessionmaker


async def get_session() -> AsyncSession:
    async with get_sessionmaker()() as session:
        yield session


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None
