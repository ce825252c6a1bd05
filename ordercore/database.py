"""Database engine and session management"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ordercore.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.api_debug,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    """Dependency that yields a database session per request"""
    async with SessionLocal() as session:
        yield session
