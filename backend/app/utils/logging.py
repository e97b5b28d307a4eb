"""Logging setup and structured log helper."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once at application startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **fields: Any,
) -> None:
    """Log a message with structured data attached under `structured`.

    None-valued fields are dropped so the payload only carries what is known.
    """
    log_data = {key: value for key, value in fields.items() if value is not None}
    if "latency_ms" in log_data:
        log_data["latency_ms"] = round(log_data["latency_ms"], 2)
    logger.log(level, message, extra={"structured": log_data})
