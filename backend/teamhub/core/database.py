from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Normalize a datetime to UTC before it is stored or compared.

    SQLite drops the offset of ``DateTime(timezone=True)`` columns, so values
    are always written as UTC and naive values read back are taken as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def init_db(bind=engine):
    # Import models so every table is registered on Base.metadata
    from teamhub.models import comment, project, task, team, user  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
