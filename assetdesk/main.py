"""
Главный файл сервиса AssetDesk
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from assetdesk.core import auth_routes
from assetdesk.core.config import Settings, settings
from assetdesk.core.database import Database
from assetdesk.modules.assets import api as assets_api
from assetdesk.modules.billing import api as billing_api
from assetdesk.modules.billing.services.payments import seed_packages
from assetdesk.modules.billing.services.stripe_gateway import StripeGateway
from assetdesk.modules.hr import api as hr_api

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Собирает приложение: БД, шлюз оплаты, роутеры, обработчики ошибок."""
    cfg = app_settings or settings

    app = FastAPI(
        title=cfg.app_name,
        description="Учёт активов компании: склад, заявки, выдача, пакеты",
        version="1.0.0",
    )
    app.state.settings = cfg
    app.state.db = Database(cfg.database_url, echo=cfg.debug)
    app.state.payment_gateway = StripeGateway(cfg)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Ошибки отдаются как {"message": ...}
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"422 {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"message": "Ошибка валидации запроса", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Необработанная ошибка {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"message": "Внутренняя ошибка сервера"})

    # Подключаем роутеры модулей
    app.include_router(auth_routes.router)
    app.include_router(hr_api.router)
    app.include_router(assets_api.router)
    app.include_router(billing_api.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "assetdesk"}

    @app.on_event("startup")
    async def on_startup():
        """Инициализация при старте приложения"""
        logger.info("Запуск AssetDesk...")
        db_state: Database = app.state.db
        db_state.create_all()
        db = db_state.session()
        try:
            seed_packages(db)
        finally:
            db.close()
        logger.info("AssetDesk запущен успешно")

    @app.on_event("shutdown")
    async def on_shutdown():
        """Очистка при остановке приложения"""
        app.state.db.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
