"""FastAPI application factory for the scanner JSON API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scanner.api import routes
from scanner.categories import CategoryMapper
from scanner.engine import PriceEngine
from scanner.exceptions import UnknownExchangeError


async def _unknown_exchange_handler(request: Request, exc: UnknownExchangeError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


def create_app(
    engine: PriceEngine,
    categories: CategoryMapper | None = None,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: The running price engine queried by every route.
        categories: Optional category mapper; items are tagged when it is ready.
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to start and stop the engine.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(title="Crypto Scanner", lifespan=lifespan)

    app.state.engine = engine
    app.state.categories = categories

    app.add_exception_handler(UnknownExchangeError, _unknown_exchange_handler)
    app.include_router(routes.router, prefix="/api/scanner")

    return app
