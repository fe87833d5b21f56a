"""
Главный файл приложения
Здесь инициализируются FastAPI-приложения сервисов и подключаются маршруты:

- post_app - сервис постов и комментариев (uvicorn adventures.main:post_app)
- user_app - сервис пользователей (uvicorn adventures.main:user_app)
- app      - оба сервиса в одном процессе, для локальной разработки
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv
load_dotenv()

from adventures.config import settings
from adventures.models import Base
from adventures.routes import comments, posts, users
from adventures.services.cache import cache
from adventures.services.events import publisher
from adventures.utils.database import engine
from adventures.utils.exceptions import (
    app_error_handler,
    http_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
    AppError,
    rate_limit_exceeded_handler,
)

# Логирование
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# =============================
# Ограничитель частоты запросов
# =============================
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from adventures.utils.limiter import limiter


def _lifespan(declare_broker: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        # Подключаем кэширование
        await cache.connect()
        if declare_broker:
            await run_in_threadpool(publisher.declare_topology)
        yield
        await cache.close()

    return lifespan


def create_app(
        title: str,
        description: str,
        routers: list[APIRouter],
        declare_broker: bool = False,
) -> FastAPI:
    """
    Собрать приложение сервиса: обработчики ошибок, лимитер, CORS, маршруты.
    """
    application = FastAPI(
        title=title,
        description=description,
        version="1.0.0",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=_lifespan(declare_broker),
    )

    # Глобальные обработчики ошибок
    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.state.limiter = limiter
    application.add_middleware(SlowAPIMiddleware)
    application.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # CORS (чтобы фронтенд мог обращаться к API)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.DEBUG else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==============
    # HEALTH-CHECKING
    # ==============

    @application.get("/health")
    async def health_check():
        """Проверка, что приложение живо"""
        return {"status": "ok"}

    for router in routers:
        application.include_router(router)

    return application


post_app = create_app(
    title="Post Service",
    description="Adventure posts, photos, likes, feed and comments",
    routers=[posts.router, comments.router],
    declare_broker=True,
)

user_app = create_app(
    title="User Service",
    description="Registration, login and follows",
    routers=[users.router],
)

app = create_app(
    title="Adventures API",
    description="Post and user services in one process",
    routers=[posts.router, comments.router, users.router],
    declare_broker=True,
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
