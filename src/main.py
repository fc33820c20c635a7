"""
FastAPI application entry point.

`create_app` wires settings, CORS, routers and the catch-all error
handler; the module-level `app` is what the ASGI server imports.

For local development (no Snowflake or R2 needed):
    SNOWFLAKE_MOCK_MODE=true R2_MOCK_MODE=true \
    uvicorn src.main:app --reload

For production:
    gunicorn src.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import catalog, health, performance, users
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs on startup and shutdown. Logs the configuration mode and any
    missing settings so a misconfigured deployment is obvious in the logs.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(
        "TalentTrack API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {
                "snowflake": settings.snowflake_mock_mode,
                "r2": settings.r2_mock_mode,
            }
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("TalentTrack API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Athlete performance tracking and talent discovery.

        ## Features

        - Register athletes and coaches
        - Log performance measurements over time
        - Summary statistics, chart data and CSV export per athlete
        - Search athletes by sport, district, maximum age and name

        ## Authentication

        All endpoints require an API key in the `X-API-Key` header.
        Writes to a performance series also require `X-User-Id` to be
        the owning athlete.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        catalog.router,
        prefix="/api/v1/catalog",
        tags=["Catalog"],
    )

    app.include_router(
        users.router,
        prefix="/api/v1/users",
        tags=["Users"],
    )

    app.include_router(
        performance.router,
        prefix="/api/v1/performance",
        tags=["Performance"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - point at the docs."""
        return {
            "message": "TalentTrack API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message,
        so stack traces never reach clients.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
