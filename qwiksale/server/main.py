"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request tracing), registers the exception handlers and includes all
API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qwiksale import __version__
from qwiksale.core.database import init_db
from qwiksale.core.logging_config import get_logger, setup_logging
from qwiksale.core.monitoring import initialize_logfire

from .api.v1 import (
    admin_carriers,
    admin_listings,
    admin_metrics,
    admin_moderation,
    admin_users,
    health,
    products,
    search,
    services,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    try:
        logger.info(f"Starting up QwikSale API {__version__} ({settings.environment})...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down QwikSale API...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    QwikSale Marketplace API

    Public product and service search for the marketplace, plus the admin
    console endpoints for listings, users, carriers and dashboard metrics.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_STR}/openapi.json",
    docs_url=f"{constant.API_STR}/docs",
    redoc_url=f"{constant.API_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(products.router, prefix=constant.API_STR, tags=["catalog"])
app.include_router(services.router, prefix=constant.API_STR, tags=["catalog"])
app.include_router(search.router, prefix=constant.API_STR, tags=["catalog"])
app.include_router(admin_listings.router, prefix=constant.ADMIN_STR, tags=["admin"])
app.include_router(admin_metrics.router, prefix=constant.ADMIN_STR, tags=["admin"])
app.include_router(admin_users.router, prefix=constant.ADMIN_STR, tags=["admin-users"])
app.include_router(admin_carriers.router, prefix=constant.ADMIN_STR, tags=["admin-carriers"])
app.include_router(admin_moderation.router, prefix=constant.ADMIN_STR, tags=["admin-moderation"])


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "qwiksale.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
