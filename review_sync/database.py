from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from review_sync.config import settings

DATABASE_URL = settings.DATABASE_URL

# Async engine shared by the whole process
engine = create_async_engine(DATABASE_URL, echo=settings.DATABASE_ECHO)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Base class for every mapped table
Base = declarative_base()


async def get_db():
    db = AsyncSessionLocal()
    try:
        yield db
    finally:
        await db.close()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
