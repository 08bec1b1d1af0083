"""
Database configuration with async support
"""

import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel
from typing import AsyncGenerator

from app.core.config import settings

# Configure logging based on environment
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Log environment information
logger.info(f"Environment: {settings.ENVIRONMENT}")


def build_engine_kwargs(url: str) -> dict:
    """Pool tuning only applies to server databases; sqlite uses its own pool"""
    kwargs = {
        "echo": settings.SQL_ECHO,
        "future": True,
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql+asyncpg"):
        kwargs.update(
            pool_size=20,  # Number of connections to maintain
            max_overflow=30,  # Additional connections that can be created
            pool_recycle=3600,  # Recycle connections after 1 hour
            connect_args={
                "server_settings": {
                    "application_name": "social_graph_api",
                }
            },
        )
    return kwargs


async_engine = create_async_engine(
    settings.ASYNC_DATABASE_URL,
    **build_engine_kwargs(settings.ASYNC_DATABASE_URL)
)

# Async session factory
AsyncSessionLocal = sessionmaker(
    bind=async_engine,
    class_=AsyncSessionSQLModel,
    expire_on_commit=False,
    autoflush=False
)

async def init_db():
    """Initialize database tables"""
    # Register every table on the metadata before create_all
    import app.models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session dependency
    Usage:
    async def some_endpoint(db: AsyncSession = Depends(get_db)):
        ...
    """
    async with AsyncSessionLocal() as session:
        yield session
