"""
Подключение к хранилищу AssetDesk.

Движок и фабрика сессий принадлежат объекту Database, который создаётся
при сборке приложения и живёт в app.state. Сессия выдаётся на один запрос.
"""
import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Базовый класс для всех моделей
Base = declarative_base()


def _engine_kwargs(database_url: str, echo: bool) -> dict:
    if database_url.startswith("sqlite"):
        kwargs = {"echo": echo, "connect_args": {"check_same_thread": False}}
        # In-memory SQLite живёт ровно одно соединение
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    # PostgreSQL connection with pool settings
    return {
        "echo": echo,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


class Database:
    """Движок + фабрика сессий с явным жизненным циклом."""

    def __init__(self, database_url: str, echo: bool = False):
        self.url = database_url
        self.engine = create_engine(database_url, **_engine_kwargs(database_url, echo))
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def create_all(self) -> None:
        """Создаёт таблицы всех моделей (идемпотентно)."""
        # Импорт регистрирует модели в Base.metadata
        from assetdesk.modules.assets import models as _assets_models  # noqa: F401
        from assetdesk.modules.billing import models as _billing_models  # noqa: F401
        from assetdesk.modules.hr import models as _hr_models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Схема БД проверена: %s", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Соединения с БД закрыты")


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency для получения сессии БД.

    Usage:
        @router.get("/")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
