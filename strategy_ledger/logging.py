"""Logging configuration helpers (structlog)."""

from __future__ import annotations

import logging
import os
import sys

import structlog

from strategy_ledger.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV


def configure_structlog(level: str | None = None) -> None:
    """
    Configure structlog for strategy_ledger.

    Logs go to stderr so CSV exports on stdout stay clean. The level comes from
    *level*, else the ``STRATEGY_LEDGER_LOG_LEVEL`` environment variable,
    else WARNING.
    """
    level_name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    numeric_level = getattr(logging, level_name, logging.WARNING)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.__stderr__),
        cache_logger_on_first_use=True,
    )
