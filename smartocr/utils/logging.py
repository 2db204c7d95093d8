"""Structured logging setup using structlog.

The same shared processor chain (context vars, log level, timestamps, stack
info) feeds into either a coloured ConsoleRenderer for local development or
a JSONRenderer for production.  The renderer is selected by *app_env*
(falling back to the ``APP_ENV`` environment variable), or forced via the
``json_output`` flag.

Standard-library ``logging`` is rewired through the same formatter so that
httpx and openai log lines match the orchestrator's own events.
"""

import logging
import os
import sys
from typing import TextIO

import structlog


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
    app_env: str | None = None,
) -> structlog.BoundLogger:
    """Configure structlog with environment-appropriate rendering.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. When False, uses console rendering in
                     development and JSON in production (detected via APP_ENV).
        stream: File object to write to. Defaults to ``sys.stdout``.
        app_env: Deployment environment, usually ``Settings.app_env``.
                 ``"production"`` selects JSON output.

    Returns:
        A configured structlog BoundLogger.
    """
    app_env = app_env or os.environ.get("APP_ENV", "development")
    use_json = json_output or app_env == "production"
    stream = stream or sys.stdout

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    # httpx logs every request at INFO; keep it out of the orchestrator's stream.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger.

    Never configures logging itself; that is left to the host application
    (or the CLI entry point).  Until then structlog's defaults apply and the
    host's stdlib handlers are left untouched.
    """
    return structlog.get_logger(logger_name=name)
