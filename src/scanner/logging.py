"""structlog setup for the scanner, routed through stdlib logging.

Every record carries the exchange it concerns when it was emitted inside
``poll_context``, so adapter-level debug lines ("kraken_ticker_skipped")
don't need to pass the exchange id around themselves.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Chatty per-request loggers from the HTTP stack; raised to WARNING unless
# the scanner itself runs at DEBUG.
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "uvicorn.access")


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog and the root stdlib handler.

    Args:
        log_level: Root level name ("DEBUG", "INFO", ...). Unknown names mean INFO.
        log_format: "json" for one JSON object per line, anything else for
            the colored console renderer.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if log_format.lower() == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Foreign records (uvicorn, aiohttp) get the same pre-chain so both
    # renderers see one event shape.
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))


@contextmanager
def poll_context(exchange: str) -> Iterator[None]:
    """Bind ``exchange`` to every log event emitted inside the block."""
    with structlog.contextvars.bound_contextvars(exchange=exchange):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
