"""FieldOps — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from fieldops.adapters.persistence.database import engine
from fieldops.config import settings
from fieldops.infrastructure.api.errors import register_error_handlers
from fieldops.infrastructure.api.routes_clients import router as clients_router
from fieldops.infrastructure.api.routes_dashboard import router as dashboard_router
from fieldops.infrastructure.api.routes_documents import router as documents_router
from fieldops.infrastructure.api.routes_health import router as health_router
from fieldops.infrastructure.api.routes_maintenance import router as maintenance_router
from fieldops.infrastructure.api.routes_modules import router as modules_router
from fieldops.infrastructure.api.routes_tickets import router as tickets_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="FieldOps",
        description="Clients, installed modules, maintenance tickets and visit planning",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")
    app.include_router(clients_router, prefix="/api")
    app.include_router(modules_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")
    app.include_router(documents_router, prefix="/api")
    app.include_router(maintenance_router, prefix="/api")

    if settings.storage_backend == "local":
        # Uploaded files are served by the app itself
        app.mount("/files", StaticFiles(directory=settings.storage_dir, check_dir=False), name="files")

    return app


app = create_app()
