"""Structured logging for the dashboard, built on structlog over stdlib logging."""

import logging
import os

import structlog

# Third-party loggers that are noisy at INFO and carry nothing the dashboard needs
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite")


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Route stdlib and structlog records through one ProcessorFormatter.

    ``log_format`` falls back to the LOG_FORMAT environment variable:
    "json" renders machine-readable lines, anything else renders for a
    terminal. Context bound with structlog.contextvars (for example the
    chart request tag) is merged into every record.
    """
    if log_format is None:
        log_format = os.environ.get("LOG_FORMAT", "console")

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
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

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
