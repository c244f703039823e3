"""
FastAPI server exposing the arbitrage scan.

Routes:
- GET /arbitrage     run a scan and return the opportunities
- GET /api/status    configuration, last scan report and metrics
- /                  optional static files (STATIC_DIR)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import orjson
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from crossarb import __version__
from crossarb.config.constants import (
    ENDPOINT_ARBITRAGE,
    ENDPOINT_STATUS,
    INTERNAL_ERROR_BODY,
)
from crossarb.config.settings import Settings, get_settings
from crossarb.core.engine import ScanOrchestrator
from crossarb.exchange.registry import VenueRegistry
from crossarb.telemetry.metrics import MetricsCollector


logger = logging.getLogger(__name__)


def json_response(content: Any, status_code: int = 200) -> Response:
    """Serialize content with orjson."""
    return Response(
        content=orjson.dumps(content),
        status_code=status_code,
        media_type="application/json",
    )


async def get_arbitrage(request: Request) -> Response:
    """Run one scan and return the opportunities as a JSON list."""
    orchestrator: ScanOrchestrator = request.app.state.orchestrator
    try:
        opportunities = await orchestrator.run_serialized()
    except Exception as e:
        logger.error(f"Error in {ENDPOINT_ARBITRAGE} route: {e!r}")
        return PlainTextResponse(INTERNAL_ERROR_BODY, status_code=500)
    return json_response(opportunities)


async def get_status(request: Request) -> Response:
    """Report configuration and the outcome of the last scan."""
    settings: Settings = request.app.state.settings
    orchestrator: ScanOrchestrator = request.app.state.orchestrator
    report = orchestrator.last_report

    return json_response(
        {
            "version": __version__,
            "venues": request.app.state.registry.ids,
            "threshold_pct": orchestrator.threshold_pct,
            "max_concurrency": settings.max_concurrency,
            "last_scan": report.to_dict() if report else None,
            "metrics": orchestrator.metrics.to_dict(),
        }
    )


def create_app(
    settings: Settings | None = None,
    registry: VenueRegistry | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (default: cached environment settings).
        registry: Pre-built venues. When omitted, ccxt venues are opened on
            startup and closed on shutdown.

    Returns:
        Configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = registry is None
        venues = await VenueRegistry.open(settings) if owned else registry

        app.state.settings = settings
        app.state.registry = venues
        app.state.orchestrator = ScanOrchestrator.from_settings(
            settings, venues, metrics=MetricsCollector()
        )
        logger.info(f"Serving {ENDPOINT_ARBITRAGE} for {len(venues)} venues")

        try:
            yield
        finally:
            if owned:
                await venues.close()

    app = FastAPI(title="Cross-Venue Arbitrage Scanner", version=__version__, lifespan=lifespan)
    app.get(ENDPOINT_ARBITRAGE)(get_arbitrage)
    app.get(ENDPOINT_STATUS)(get_status)

    if settings.static_dir is not None:
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app

