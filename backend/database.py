"""Database engine, session factory and the request-scoped session dependency."""
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from backend.config import Settings, get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def engine_options(config: Settings) -> dict:
    """Keyword arguments for ``create_async_engine`` suited to the configured backend.

    SQLite gets a busy timeout so concurrent writers queue on the file lock
    instead of failing. Hosted PostgreSQL gets SSL and a pool kept small
    enough for hobby-tier connection limits.
    """
    options = {
        "echo": config.environment == "development",
        "pool_pre_ping": True,
    }

    if config.is_sqlite:
        options["connect_args"] = {"timeout": config.sqlite_busy_timeout}
        return options

    parsed_url = make_url(config.database_url)
    if not parsed_url.password:
        logger.warning("No password found in DATABASE_URL!")

    needs_ssl = (
        "heroku" in config.database_url or
        "amazonaws" in config.database_url or
        config.environment == "production"
    )
    if needs_ssl:
        options["connect_args"] = {"ssl": "require"}
        logger.debug("SSL connection enabled (ssl=require)")

    pool_size = max(1, config.db_pool_size)
    max_overflow = max(0, config.db_max_overflow)
    if config.environment == "production":
        pool_size = min(pool_size, 2)
        max_overflow = min(max_overflow, 2)

    options.update(pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600)
    return options


try:
    engine = create_async_engine(settings.database_url, **engine_options(settings))
    logger.debug("Database engine created successfully")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db():
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
