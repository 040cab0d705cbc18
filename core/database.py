from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from core.config import settings
from core.logger import get_logger

logger = get_logger(__name__)


def _engine_options() -> dict:
    # sqlite pools reject the sizing arguments
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": settings.db_pool_size, "max_overflow": settings.db_max_overflow}


engine = create_async_engine(settings.database_url_async, echo=settings.debug and not settings.is_sqlite,
                             future=True, **_engine_options())

async_session_maker = async_sessionmaker(engine,class_=AsyncSession,expire_on_commit=False,autocommit = False, autoflush=False)

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def init_db():

    logger.info("Verifying database connection...")
    import models  # noqa: F401  registers every table on Base.metadata
    try:
        async with engine.begin() as conn:
            # Test connection
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Database connection verified")
    except Exception as e:
        logger.critical(f"❌ Database connection failed: {e}")
        raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def close_db():

    logger.info("Closing database connections...")
    await engine.dispose()
    logger.info("✅ Database connections closed")
