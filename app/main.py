"""
Unified FastAPI application for disaster-hub.

Serves the four dashboard panels behind one API:
- /agent     AI query agent (grounded answers)
- /water     water-level monitor (simulation)
- /forecast  outbreak forecast
- /registry  reconstruction portal (aid registry)
- /session   identity session

Usage:
    uvicorn app.main:app --reload --port 8000
    python -m app.main          (APP_HOST / APP_PORT from settings)
"""

from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.agent.routes import router as agent_router
from app.context import AppContext, build_app_context
from app.forecast.routes import router as forecast_router
from app.registry.routes import router as registry_router
from app.session.routes import router as session_router
from app.water.routes import router as water_router
from disaster_core.config import Settings, settings
from disaster_core.infrastructure.rate_limiter import _rate_limit_exceeded_handler, limiter
from disaster_core.logging import setup_logging

VERSION = "1.0.0"

# Navigation shell: tab ids in display order; the first one opens by default
PANELS = [
    {"id": "AskGemini", "title": "AI Query Agent", "path": "/agent/ask"},
    {"id": "WaterMonitor", "title": "Water Level Monitor", "path": "/water/levels"},
    {"id": "Forecasting", "title": "Outbreak Forecast", "path": "/forecast"},
    {"id": "Donations", "title": "Reconstruction Portal", "path": "/registry/properties"},
]
DEFAULT_PANEL = PANELS[0]["id"]


def create_app(
    app_settings: Settings = settings,
    context_factory: Callable[[Settings], AppContext] = build_app_context,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Startup configuration.
        context_factory: Builds the AppContext; tests pass one wired to fakes.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = context_factory(app_settings)
        await context.start()
        app.state.context = context
        try:
            yield
        finally:
            await context.aclose()

    app = FastAPI(
        title="Disaster Hub",
        description="Disaster information dashboard: grounded Q&A, river levels, outbreak forecast, aid registry",
        version=VERSION,
        lifespan=lifespan,
    )

    # Rate limiter setup
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # NOTE: CORS must be the last middleware added so it runs FIRST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(agent_router, prefix="/agent", tags=["Agent"])
    app.include_router(water_router, prefix="/water", tags=["Water"])
    app.include_router(forecast_router, prefix="/forecast", tags=["Forecast"])
    app.include_router(registry_router, prefix="/registry", tags=["Registry"])
    app.include_router(session_router, prefix="/session", tags=["Session"])

    @app.get("/health")
    def health():
        """
        Health check endpoint.

        Returns:
            dict: Status and service information.
        """
        return {"status": "ok", "service": app_settings.SERVICE_NAME, "version": VERSION}

    @app.get("/panels")
    def panels():
        """Dashboard tabs in display order and the one opened by default."""
        return {"panels": PANELS, "default": DEFAULT_PANEL}

    return app


setup_logging()
logger.info(f"Starting {settings.SERVICE_NAME} {VERSION}")

app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
