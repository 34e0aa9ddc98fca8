# main.py
"""Main application: app factory, lifespan and middleware"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.error_handlers import register_exception_handlers
from api.routes import router
from config import settings
from database.session import Database
from infrastructure.genai_client import GeminiClient
from services.logger_config import setup_logging

logger = logging.getLogger(settings.LOGGER_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging()
    logger.info("Starting application...")

    # Database initialization
    database = Database.from_settings()
    await database.init_schema()
    app.state.database = database

    app.state.genai_client = GeminiClient.from_settings()

    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    logger.info(f"Services initialized ({settings.ENVIRONMENT}, port {settings.PORT})")

    yield

    logger.info("Shutting down application...")
    await app.state.genai_client.aclose()
    await database.dispose()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_TITLE,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Donation slips; the directory is created at startup
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")

    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
