import logging
import sys
from typing import Optional

import structlog

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine", "uvicorn.access")


def init_logging(log_level: str = "INFO", json_logs: Optional[bool] = None) -> structlog.BoundLogger:
    """Configure structlog on top of stdlib logging for the whole process.

    Events are rendered as JSON lines unless `json_logs` is False; when left
    as None, DEBUG level switches to the console renderer. Values bound with
    `structlog.contextvars` (e.g. the request id) are merged into every event.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()
