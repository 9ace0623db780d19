from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sysviz.api.router import api_router
from sysviz.core.config import settings
from sysviz.core.db import init_models

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        await init_models()
        logger.info("Database tables ensured")
    yield


app = FastAPI(
    title="SysViz Collab",
    description="Совместное редактирование диаграмм системного дизайна в реальном времени",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Ошибки БД отдаются клиенту без подробностей"""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})


app.include_router(api_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "SysViz Collab API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "websocket": "/ws"
    }


def run():
    import uvicorn

    uvicorn.run("sysviz.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
