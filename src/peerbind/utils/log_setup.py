"""
structlog configuration shared by the CLI and embedding applications.
"""
import logging as py_logging
import sys

import structlog

from ..config import LoggingConfig


def configure_logging(logging_config: LoggingConfig) -> None:
    """Configure stdlib logging and structlog from ``logging_config``."""
    handlers: list[py_logging.Handler] = [py_logging.StreamHandler(sys.stderr)]
    if logging_config.file:
        handlers.append(py_logging.FileHandler(logging_config.file, encoding="utf-8"))

    py_logging.basicConfig(
        level=getattr(py_logging, logging_config.level.upper()),
        format="%(message)s",
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False) if logging_config.format.lower() == "console"
            else structlog.processors.JSONRenderer(sort_keys=True)
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
