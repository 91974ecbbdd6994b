"""
Logging configuration
"""

import logging
import sys
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class ContextFormatter(logging.Formatter):
    """
    Appends structured error context to the line.

    Callers attach it with extra={"error_context": {...}}, e.g. the ids a
    failed clone created and whether they were cleaned up.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "error_context", None)
        if context:
            pairs = ", ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} | {pairs}"
        return message


def setup_logging(level: str = None):
    """Configure application logging on the root logger"""

    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.basicConfig(level=log_level, handlers=[handler])

    # SQLAlchemy is chatty at INFO; request lines come from our middleware
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level_name} level")
