import logging

import structlog

from .config import settings


def configure_logging(level: str | None = None) -> None:
    """Route structlog through stdlib logging and emit one JSON object per line."""

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format="%(message)s")
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str | None = None):
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


def bind_request_context(**values: object) -> None:
    """Attach values to every log line emitted while handling the current request."""

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
