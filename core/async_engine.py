from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from core.settings import settings

engine_options = {
    "pool_pre_ping": True,
    "pool_recycle": 600,
}
if settings.SQLALCHEMY_DATABASE_URI.startswith("postgresql"):
    engine_options.update(
        pool_size=settings.POSTGRES_POOL_SIZE,
        max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        pool_use_lifo=True,
    )

async_engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, **engine_options)
AsyncSessionLocal = async_sessionmaker(async_engine, autocommit=False, expire_on_commit=False)
