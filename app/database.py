"""Async engine, session factory and the per-request session dependency"""

import re
import ssl
from typing import AsyncGenerator, Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import settings

_SSLMODE_RE = re.compile(r"[?&]sslmode=([^&]+)", re.I)


def normalize_database_url(url: str) -> Tuple[str, Dict]:
    """
    Switch postgresql:// to the asyncpg driver and translate sslmode.

    asyncpg takes ssl=SSLContext instead of the libpq sslmode parameter
    (asyncpg#737), so sslmode is stripped from the URL and turned into
    connect_args. SQLite URLs pass through untouched.
    """
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]

    connect_args: Dict = {}
    match = _SSLMODE_RE.search(url)
    if match:
        if match.group(1).lower() in ("require", "required", "verify-full"):
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            connect_args["ssl"] = ctx
        url = _SSLMODE_RE.sub("", url)
        url = url.replace("?&", "?").rstrip("?")
        if "?" not in url and "&" in url:
            url = url.replace("&", "?", 1)
    return url, connect_args


database_url, connect_args = normalize_database_url(settings.DATABASE_URL)

# SQLite does not take queue pool arguments
engine_kwargs = {}
if not settings.is_sqlite:
    engine_kwargs = {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }

engine = create_async_engine(
    database_url,
    connect_args=connect_args,
    echo=settings.DEBUG,
    **engine_kwargs,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session and one transaction per request.

    Services only flush; the bill, its items and any payment change are
    committed together when the endpoint returns, or rolled back if it
    raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """create_all for development; other environments run alembic upgrade head"""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
