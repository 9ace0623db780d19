from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

from sysviz.core.config import settings

# Базовый класс для моделей
Base = declarative_base()


def _engine_options(database_url: str) -> dict:
    # aiosqlite не держит соединения между циклами событий
    if database_url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_pre_ping": True}


# Асинхронный движок
engine = create_async_engine(
    settings.database_url,
    future=True,
    echo=settings.sql_echo,
    **_engine_options(settings.database_url)
)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models():
    """Создание таблиц по метаданным моделей"""
    import sysviz.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_models():
    """Удаление всех таблиц"""
    import sysviz.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
