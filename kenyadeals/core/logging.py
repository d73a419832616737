"""structlog setup shared by the CLI and the scheduler."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog for the current process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_output: Render one JSON object per line instead of console output
    """
    min_level = logging.getLevelName(level.upper())
    if not isinstance(min_level, int):
        min_level = logging.INFO

    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso" if json_output else "%H:%M:%S"),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
