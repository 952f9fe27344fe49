"""
FastAPI application factory for the Gig Guide API
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import config
from .db import init_db, test_connection
from .exceptions import (
    GigGuideError,
    gig_guide_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from .logging_config import RequestIDMiddleware, setup_logging
from .middleware.error_handler import database_error_handler
from .middleware.request_size_limit import RequestSizeLimitMiddleware
from . import (
    admin_routes,
    artist_routes,
    auth_routes,
    event_routes,
    favorite_routes,
    feature_routes,
    notification_routes,
    organiser_routes,
    rating_routes,
    venue_routes,
)

logger = logging.getLogger(__name__)

ROUTERS = (
    auth_routes.router,
    artist_routes.router,
    organiser_routes.router,
    venue_routes.router,
    event_routes.router,
    favorite_routes.router,
    feature_routes.router,
    rating_routes.router,
    notification_routes.router,
    admin_routes.router,
)


def create_app(init_database: bool = True) -> FastAPI:
    """
    Build the API application.

    Args:
        init_database: Create tables on startup for SQLite databases.
            Non-SQLite databases are managed with Alembic.
    """
    setup_logging(env=config.ENV, log_level=config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database and config.is_sqlite:
            init_db()
        logger.info(f"Gig Guide API started (env={config.ENV}, version={config.BUILD_VERSION})")
        yield
        logger.info("Gig Guide API stopped")

    app = FastAPI(title="Gig Guide API", version=config.BUILD_VERSION, lifespan=lifespan)

    # Middleware added last runs first, so request IDs exist before size checks log
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_request_bytes=config.max_request_bytes,
        max_upload_bytes=config.max_upload_bytes,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(GigGuideError, gig_guide_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    for router in ROUTERS:
        app.include_router(router)

    uploads_root = Path(config.UPLOADS_ROOT)
    uploads_root.mkdir(parents=True, exist_ok=True)
    app.mount(config.UPLOADS_URL_PREFIX, StaticFiles(directory=str(uploads_root)), name="uploads")

    @app.get("/")
    def root():
        return {"message": "Gig Guide API", "status": "running"}

    @app.get("/health")
    def health():
        """Health check for load balancers and monitoring"""
        database = "ok" if test_connection() else "unavailable"
        return {
            "status": "healthy" if database == "ok" else "degraded",
            "service": "gig-guide",
            "version": config.BUILD_VERSION,
            "database": database,
        }

    return app
