"""
Async engine and per-request sessions for the listing store.

A request touches the store at most twice for writes (the export log row
and the exported_at marker); ``get_db`` commits both together or neither.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from channelkit.config import Settings, get_settings


def engine_options(settings: Settings) -> dict:
    """Keyword arguments for ``create_async_engine``. SQLite URLs get no pool sizing."""
    options: dict = {"echo": settings.app_debug}
    if settings.database_url.startswith("sqlite"):
        return options

    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=settings.database_pool_pre_ping,
        pool_timeout=settings.database_pool_timeout,
    )
    return options


def create_engine():
    settings = get_settings()
    return create_async_engine(settings.database_url, **engine_options(settings))


engine = create_engine()

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
