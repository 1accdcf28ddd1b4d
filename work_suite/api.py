"""
FastAPI application for the Work Suite API.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .auth_routes import router as auth_router
from .config import Settings, get_settings
from .content.llm_routes import router as llm_router
from .content.routes import router as items_router
from .db.base import Database
from .errors import SuiteError
from .logging_config import configure_logging
from .realtime import ConnectionManager
from .realtime import router as realtime_router
from .storage import FileStore
from .themes.routes import router as themes_router
from .workspace.client import WorkspaceClient
from .workspace.routes import router as workspace_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open storage and the workspace client; close them on shutdown."""
    settings: Settings = app.state.settings
    configure_logging(settings)
    logger.info("Starting Work Suite API", environment=settings.environment)

    settings.data_path.mkdir(parents=True, exist_ok=True)
    files = FileStore(settings.files_path)
    files.ensure_structure()

    database = Database(settings.resolved_database_url)
    try:
        database.init()
    except SQLAlchemyError as e:
        logger.error("Failed to initialize database", error=str(e))
        raise
    logger.info("Database initialized")

    workspace = WorkspaceClient(
        settings.workspace_service_url,
        api_key=settings.workspace_service_api_key,
        timeout=settings.workspace_timeout_seconds,
    )
    if not workspace.enabled:
        logger.info("Workspace service not configured; item linkage disabled")

    app.state.files = files
    app.state.database = database
    app.state.workspace = workspace
    app.state.connections = ConnectionManager()

    yield

    logger.info("Shutting down Work Suite API")
    workspace.close()
    database.close()
    logger.info("Shutdown complete")


async def suite_error_handler(request: Request, exc: SuiteError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            code=exc.code,
            error=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Tests pass their own settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Content backend for the Work Suite apps",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SuiteError, suite_error_handler)

    @app.get("/health", tags=["system"])
    async def health(request: Request) -> Dict[str, Any]:
        """Confirm the API is up and the database answers."""
        storage = "ok"
        try:
            with request.app.state.database.session() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Health check storage probe failed", error=str(e))
            storage = "unavailable"
        return {"status": "ok", "version": __version__, "storage": storage}

    @app.get("/version", tags=["system"])
    def version() -> Dict[str, str]:
        return {"version": __version__}

    app.include_router(auth_router)
    app.include_router(items_router)
    app.include_router(llm_router)
    app.include_router(workspace_router)
    app.include_router(themes_router)
    app.include_router(realtime_router)

    return app


app = create_app()
