"""Logging configuration helpers."""

import logging

_ROOT_LOGGER = "shoot_planner"


class _CorrelationFilter(logging.Filter):
    """Make sure every record has a correlation_id attribute."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(_CorrelationFilter())
    handler.setFormatter(
        logging.Formatter("%(levelname)s: %(name)s: [%(correlation_id)s] %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False


def request_logger(
    correlation_id: str, name: str = f"{_ROOT_LOGGER}.pipeline"
) -> logging.LoggerAdapter:
    """Return a logger bound to one pipeline invocation."""
    return logging.LoggerAdapter(
        logging.getLogger(name), {"correlation_id": correlation_id}
    )
