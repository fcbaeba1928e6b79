from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from codedpad.core.config import settings

# Базовый класс для моделей
Base = declarative_base()

# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.sql_echo)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine = engine) -> None:
    """Создание таблиц, если их еще нет"""
    # Регистрируем модели в метаданных
    import codedpad.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
