"""Logging setup built on loguru.

Level policy:
- DEBUG: request assembly details, attempt timings, probe results
- INFO: lifecycle steps (initialization, request start/finish, fallbacks)
- WARNING: degraded paths (transport switch, non-STOP finish, failed probes)
- ERROR: failures surfaced to the caller or converted into a fallback

Usage:
    from vysper.logger import get_logger

    log = get_logger("llm")
    log.info("message")
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[service]}</cyan> | "
    "{message}"
)

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install the stderr sink; later calls only change the level."""
    global _configured
    resolved = (level or os.getenv("VYSPER_LOG_LEVEL", "INFO")).upper()
    logger.remove()
    logger.configure(extra={"service": "vysper"})
    logger.add(sys.stderr, format=LOG_FORMAT, level=resolved, colorize=None)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True


def get_logger(service: str) -> Any:
    if not _configured:
        configure_logging()
    return logger.bind(service=service)


def log_performance(log: Any, operation: str, started: float, **fields: Any) -> int:
    elapsed_ms = int((time.monotonic() - started) * 1000)
    details = " ".join(f"{key}={value}" for key, value in fields.items())
    log.info(f"{operation} completed in {elapsed_ms}ms {details}".rstrip())
    return elapsed_ms
