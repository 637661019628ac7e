# FastAPI application factory
import time
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blog_api.config import Settings, get_settings
from blog_api.database import build_engine, build_session_factory, init_db
from blog_api.errors import register_exception_handlers
from blog_api.logging_config import configure_logging
from blog_api.routes import router as blog_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    settings = app.state.settings
    logger.info("app_starting", app_name=settings.app_name, environment=settings.environment)
    init_db(app.state.engine)
    logger.info("database_ready")
    yield
    app.state.engine.dispose()
    logger.info("app_stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory function to create FastAPI app"""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Blog posts with photo attachments",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response

    register_exception_handlers(app)
    app.include_router(blog_router)

    # Photos are linked as {backend_server_path}/storage/{filename}
    Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/storage", StaticFiles(directory=settings.storage_dir), name="storage")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check for monitoring systems"""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "version": settings.version,
        }

    return app
