"""Tests for logging setup and per-poll context binding."""

import logging

import structlog

from scanner.logging import NOISY_LOGGERS, poll_context, setup_logging


class TestSetupLogging:
    def test_root_level_and_single_handler(self) -> None:
        setup_logging("warning", "json")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_noisy_loggers_quieted(self) -> None:
        setup_logging("INFO")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_unknown_level_means_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO


class TestPollContext:
    def test_binds_and_unbinds_exchange(self) -> None:
        with poll_context("kraken"):
            assert structlog.contextvars.get_contextvars()["exchange"] == "kraken"
        assert "exchange" not in structlog.contextvars.get_contextvars()
