"""Storefront API main application module.

This module initializes the FastAPI application and configures
logging, middleware, exception handlers, routers and the database
lifecycle.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.categories import router as categories_router
from storefront.api.errors import register_exception_handlers
from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.orders import router as orders_router
from storefront.api.products import router as products_router
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import create_engine, create_session_factory
from storefront.infrastructure.logging import configure_logging

# Register every table on the shared metadata
import storefront.infrastructure.models  # noqa: F401
import storefront.orders.models  # noqa: F401

configure_logging(settings.log_level, settings.log_json)

logger = structlog.get_logger()

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Storefront API",
        version=settings.api_version,
        debug=settings.debug,
    )

    engine = create_engine(settings.database_url, echo=settings.debug)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    yield

    # Shutdown
    logger.info("Shutting down Storefront API")
    await engine.dispose()


app = FastAPI(
    title="Storefront API",
    description="Product catalog, category and order management backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

register_exception_handlers(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router, prefix=API_PREFIX)
app.include_router(categories_router, prefix=API_PREFIX)
app.include_router(orders_router, prefix=API_PREFIX)
