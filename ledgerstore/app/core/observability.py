"""
Logging setup and structured timing of engine operations.
"""

import logging
import time
from contextlib import asynccontextmanager

from ledgerstore.app.core.config import Settings

logger = logging.getLogger("ledgerstore")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level and format to the package logger."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


@asynccontextmanager
async def log_operation(operation: str, backend: str):
    """
    Log one structured record for an engine operation.

    INFO with the duration on success, ERROR on failure (the error is re-raised).
    """
    start_time = time.perf_counter()
    log_data = {"operation": operation, "backend": backend}

    try:
        yield log_data
    except Exception as e:
        log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
        log_data["error"] = f"{type(e).__name__}: {e}"
        logger.error("Engine operation failed", extra=log_data)
        raise

    log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
    logger.info("Engine operation", extra=log_data)
