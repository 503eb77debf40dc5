# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/client_config_validator

import logging
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger
from opentelemetry import trace

__all__ = ["logger", "configure_logging", "InterceptHandler"]

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


# Third-party loggers whose INFO output is per-request noise; shown only at DEBUG.
NOISY_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging messages (e.g. from httpx) to Loguru, keeping the origin
    (logger name, function, line) recorded by the standard library.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        def _origin(entry: Any) -> None:
            entry.update(name=record.name, function=record.funcName, line=record.lineno)

        logger.patch(_origin).opt(exception=record.exc_info).log(level, record.getMessage())


def trace_id_injector(record: dict[str, Any]) -> None:
    """
    Loguru patcher adding the active OpenTelemetry trace_id and span_id to ``extra``.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        record["extra"]["trace_id"] = format(ctx.trace_id, "032x")
        record["extra"]["span_id"] = format(ctx.span_id, "016x")


def configure_logging() -> None:
    """
    Configures the logger from environment variables.

    CLIENT_VALIDATOR_LOG_LEVEL (default INFO), CLIENT_VALIDATOR_LOG_JSON (default false)
    and CLIENT_VALIDATOR_LOG_FILE (default logs/app.log, empty disables the file sink).
    Call again to reload configuration if the variables change.
    """
    log_level = os.getenv("CLIENT_VALIDATOR_LOG_LEVEL", "INFO").upper()
    log_json = os.getenv("CLIENT_VALIDATOR_LOG_JSON", "false").lower() == "true"
    log_file = os.getenv("CLIENT_VALIDATOR_LOG_FILE", "logs/app.log")

    try:
        logger.level(log_level)
    except ValueError:
        log_level = "INFO"

    logger.configure(handlers=[], patcher=trace_id_injector)

    if log_json:
        logger.add(sys.stdout, level=log_level, serialize=True)
    else:
        logger.add(sys.stderr, level=log_level, format=LOG_FORMAT)

    # File sink is always JSON; skipped on read-only filesystems
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_file,
                rotation="500 MB",
                retention="10 days",
                serialize=True,
                enqueue=True,
                level=log_level,
            )
        except (PermissionError, OSError):
            pass

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    numeric_level = logging.getLevelName(log_level)
    if isinstance(numeric_level, int):
        logging.getLogger().setLevel(numeric_level)
    else:
        logging.getLogger().setLevel(logging.INFO)

    noisy_level = logging.DEBUG if log_level in ("TRACE", "DEBUG") else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


# Initialize on import
configure_logging()
