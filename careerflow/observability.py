"""Logging setup and remote-call timing for Careerflow."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Iterator, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("careerflow.services")


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> logging.Logger:
    """Configure the ``careerflow`` logger tree once."""
    root = logging.getLogger("careerflow")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(handler)
    root.setLevel(level if level is not None else (logging.INFO if verbose else logging.WARNING))
    return root


@contextmanager
def service_call(service: str, **fields: object) -> Iterator[None]:
    """Log duration and outcome of one remote call.

    Exceptions are logged and re-raised unchanged.
    """
    start = perf_counter()
    extra = " ".join(f"{k}={v}" for k, v in fields.items())
    try:
        yield
    except Exception as exc:
        duration_ms = (perf_counter() - start) * 1000
        logger.warning(
            "service_call service=%s status=error duration_ms=%.2f error=%s %s",
            service,
            duration_ms,
            type(exc).__name__,
            extra,
        )
        raise
    duration_ms = (perf_counter() - start) * 1000
    logger.info("service_call service=%s status=ok duration_ms=%.2f %s", service, duration_ms, extra)
