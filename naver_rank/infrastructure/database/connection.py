from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from naver_rank.config import settings


class Base(DeclarativeBase):
    pass


def async_database_url(url: str) -> str:
    # Convert postgresql:// to postgresql+asyncpg://
    return url.replace("postgresql://", "postgresql+asyncpg://", 1)


engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker | None = None  # type: ignore[type-arg]

# Without a database the balance service and history store run as no-ops
if settings.database_url:
    engine = create_async_engine(
        async_database_url(settings.database_url),
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )

    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
