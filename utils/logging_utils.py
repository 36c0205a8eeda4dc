# utils/logging_utils.py
import logging

import structlog
from structlog.stdlib import add_log_level, add_logger_name

LEVEL_NAMES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(name: str | int | None, default: int = logging.INFO) -> int:
    """Translate a level name ("debug", "INFO", ...) into a logging level."""
    if isinstance(name, int):
        return name
    if not name:
        return default
    return LEVEL_NAMES.get(str(name).strip().lower(), default)


def setup_logging(level: int | str = logging.INFO, colors: bool = True) -> None:
    """Configure structlog on top of standard logging for console output."""
    numeric_level = parse_level(level)
    logging.basicConfig(level=numeric_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
