# /app/db/session.py
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import text
from fastapi import HTTPException, status
import asyncio
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def _async_database_uri(uri: str) -> str:
    if uri.startswith("postgresql://"):
        return uri.replace("postgresql://", "postgresql+asyncpg://", 1)
    return uri


DATABASE_URI = _async_database_uri(settings.SQLALCHEMY_DATABASE_URI)

engine_kwargs = {"echo": False, "pool_pre_ping": True}
if DATABASE_URI.startswith("postgresql+asyncpg://"):
    engine_kwargs["connect_args"] = {"server_settings": {"application_name": "ik_proje"}}

engine = create_async_engine(DATABASE_URI, **engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def get_db():
    db = AsyncSessionLocal()
    try:
        retry_count = 3
        retry_delay = 1  # seconds

        for attempt in range(retry_count):
            try:
                await db.execute(text("SELECT 1"))
                logger.debug("Database connection successful")
                break
            except Exception as e:
                logger.warning(f"Database connection attempt {attempt + 1}/{retry_count} failed: {str(e)}")
                if attempt == retry_count - 1:
                    logger.error(f"All {retry_count} connection attempts failed")
                    raise HTTPException(
                        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                        detail="Database connection error. Please check that PostgreSQL is running and accessible.",
                    )
                await asyncio.sleep(retry_delay)
                retry_delay *= 2

        yield db
    finally:
        await db.close()
