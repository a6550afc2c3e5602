"""
ChannelKit ASGI application.

``create_app()`` wires logging, Sentry, middleware, the v1 routers and the
exception handlers; ``app`` is what gunicorn's uvicorn workers serve.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from channelkit import __version__
from channelkit.config import Settings, get_settings
from channelkit.core.logging_config import setup_logging
from channelkit.core.sentry_config import init_sentry
from channelkit.exporters.exporter_registry import ExporterRegistry
from channelkit.middleware.logging_middleware import LoggingMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Exports",
        "description": "Generate channel CSVs, Word documents and upload packages, "
                       "and run preflight checks without generating anything.",
    },
    {"name": "Listings", "description": "Readiness of a listing across all of its channels."},
    {"name": "Channels", "description": "Supported marketplaces and their content rules."},
    {"name": "System", "description": "Health checks."},
]

DESCRIPTION = (
    "ChannelKit turns one canonical product listing into marketplace-specific "
    "export files (Shopify, eBay, Facebook & Instagram, Etsy, TikTok Shop), "
    "scores how ready the listing is for each channel, and blocks exports "
    "that would be rejected.\n\n"
    "Files are returned base64-encoded in JSON; nothing is published to the "
    "marketplaces themselves."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        f"Starting {settings.app_name} v{__version__} ({settings.app_env.value}), "
        f"exporters: {', '.join(ExporterRegistry.available_channels())}"
    )
    yield
    from channelkit.db.database import engine

    await engine.dispose()
    logger.info(f"{settings.app_name} stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Added innermost first: CORS ends up outermost, logging innermost
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )


def _add_routes(app: FastAPI, settings: Settings) -> None:
    # Deferred: importing the routers creates the database engine
    from channelkit.api.v1 import channels, exports, listings
    from channelkit.core.health import get_health_status
    from channelkit.db.database import get_db

    @app.get("/health", tags=["System"])
    async def health_check(db: AsyncSession = Depends(get_db)):
        return await get_health_status(
            app_name=settings.app_name,
            app_version=__version__,
            app_env=settings.app_env.value,
            db_session=db,
        )

    for module in (exports, listings, channels):
        app.include_router(module.router, prefix=API_PREFIX)


def create_app() -> FastAPI:
    settings = get_settings()

    # Logging before anything logs; Sentry before the app so its ASGI hooks attach
    setup_logging(
        app_env=settings.app_env,
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
    init_sentry(
        dsn=settings.sentry_dsn,
        app_env=settings.app_env,
        app_version=__version__,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        profiles_sample_rate=settings.sentry_profiles_sample_rate,
    )

    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        redirect_slashes=False,
    )

    _add_middleware(app, settings)
    _add_routes(app, settings)

    from channelkit.middleware.exception_handler import register_exception_handlers

    register_exception_handlers(app)
    return app


app = create_app()
