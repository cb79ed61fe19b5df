"""HTTP API -- FastAPI routes over the price engine."""

from scanner.api.app import create_app

__all__ = ["create_app"]
