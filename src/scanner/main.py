"""Entry point for the crypto price scanner.

Wires all components together and serves the JSON API. The pollers, the
category refresher and the API share a single asyncio event loop via
uvicorn's programmatic API and FastAPI's lifespan context manager.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. Exchange adapters (one per enabled exchange)
4. PriceEngine (snapshot stores, high/low trackers, pollers)
5. CategoryMapper (optional CoinGecko tagging)
"""

import asyncio
import signal
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from scanner.categories import CategoryMapper
from scanner.config import AppSettings
from scanner.engine import PriceEngine
from scanner.exchange import build_adapters
from scanner.logging import get_logger, setup_logging


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build the engine and its collaborators from settings.

    Note: Does NOT start polling -- that happens in the lifespan (API mode)
    or run() (headless mode).
    """
    adapters = build_adapters(settings.exchanges, settings.engine)
    engine = PriceEngine(adapters, settings.engine)

    categories = None
    if settings.categories.enabled:
        categories = CategoryMapper(settings.categories, settings.exchanges.user_agent)

    return {"engine": engine, "categories": categories}


async def _start(components: dict[str, Any]) -> None:
    await components["engine"].start()
    if components["categories"] is not None:
        await components["categories"].start()


async def _stop(components: dict[str, Any]) -> None:
    if components["categories"] is not None:
        await components["categories"].stop()
    await components["engine"].stop()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start pollers and category refresh on startup; stop them on shutdown."""
    logger = get_logger("scanner.main")
    components = app.state.components

    await _start(components)
    logger.info("lifespan_started", exchanges=components["engine"].exchange_ids)

    yield

    await _stop(components)
    logger.info("crypto_scanner_stopped")


async def run() -> None:
    """Run the scanner.

    When the API is enabled (API_ENABLED=true, the default), uvicorn serves
    the FastAPI app and the lifespan manages component startup/shutdown.
    Otherwise the engine polls headless until SIGINT/SIGTERM.
    """
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("scanner.main")

    # 3-5. Build components
    components = _build_components(settings)

    if settings.api.enabled:
        from scanner.api.app import create_app

        app = create_app(
            components["engine"], components["categories"], lifespan=lifespan
        )
        app.state.components = components

        logger.info(
            "starting_with_api",
            host=settings.api.host,
            port=settings.api.port,
            exchanges=settings.exchanges.enabled,
        )

        config = uvicorn.Config(
            app,
            host=settings.api.host,
            port=settings.api.port,
            log_config=None,  # uvicorn records go through the structlog root handler
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop_event.set)

        logger.info("starting_headless", exchanges=settings.exchanges.enabled)
        await _start(components)
        try:
            await stop_event.wait()
        finally:
            await _stop(components)
            logger.info("crypto_scanner_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
