from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from travelplan.config import Settings, settings


def pool_options(config: Settings) -> dict:
    """Connection pool arguments for the engine.

    Every in-flight backfill update holds its own connection, so the pool
    must fit ``backfill_max_concurrency`` checkouts. SQLite keeps the
    dialect's default pool.
    """
    if config.database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": config.db_pool_size,
        "max_overflow": max(
            config.db_max_overflow,
            config.backfill_max_concurrency - config.db_pool_size,
        ),
        "pool_pre_ping": True,
    }


# Do not log SQL statement parameters outside development; expense titles
# are user-entered text.
async_engine = create_async_engine(
    settings.database_url,
    echo=(settings.db_echo if settings.app_env.lower() == "development" else False),
    future=True,
    **pool_options(settings),
)

AsyncSessionLocal = async_sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that needs one session per concurrent task."""
    return AsyncSessionLocal
