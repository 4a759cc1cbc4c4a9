"""
Opt-in loguru output for pscale-client.

The package disables its own loguru records on import, as a library should.
``setup_logging`` turns them on for one sink, optionally together with the
standard library records of the HTTP stack (httpx, httpcore).
"""

import logging
import sys
from typing import Any, TextIO

from loguru import logger

from pscale_client.config import settings

PACKAGE = "pscale_client"
HTTP_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{source}</cyan> - <level>{message}</level>\n{exception}"
)

_handler_id: int | None = None


class InterceptHandler(logging.Handler):
    """Forward standard library records into loguru, tagged with their logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.bind(source=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def _source(record: dict[str, Any]) -> str:
    return record["extra"].get("source") or record["name"] or ""


def _accepts(record: dict[str, Any]) -> bool:
    # Only this package and the HTTP stack reach the sink
    root = _source(record).partition(".")[0]
    return root == PACKAGE or root in HTTP_LOGGERS


def _format(record: dict[str, Any]) -> str:
    source = "{extra[source]}" if "source" in record["extra"] else "{name}"
    return LOG_FORMAT.replace("{source}", source)


def setup_logging(
    level: str | None = None,
    sink: TextIO = sys.stderr,
    capture_http: bool = True,
) -> int:
    """
    Enable pscale-client logging on ``sink``.

    Calling it again replaces the previous sink, so output is never doubled.

    Args:
        level: Minimum level. Defaults to ``settings.LOG_LEVEL``.
        sink: Stream (or any loguru sink) receiving the records.
        capture_http: Also route the httpx and httpcore loggers to the sink.

    Returns:
        The loguru handler id of the installed sink.
    """
    global _handler_id

    level = (level or settings.LOG_LEVEL).upper()
    disable_logging()

    logger.enable(PACKAGE)
    _handler_id = logger.add(
        sink,
        format=_format,
        level=level,
        filter=_accepts,
        colorize=sink in (sys.stdout, sys.stderr),
    )

    if capture_http:
        for name in HTTP_LOGGERS:
            http_logger = logging.getLogger(name)
            http_logger.handlers = [InterceptHandler()]
            http_logger.setLevel(logger.level(level).no)
            http_logger.propagate = False

    logger.info(f"pscale-client logging enabled at {level}.")
    return _handler_id


def disable_logging() -> None:
    """Remove the sink installed by ``setup_logging`` and silence the package again."""
    global _handler_id

    if _handler_id is not None:
        logger.remove(_handler_id)
        _handler_id = None

    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        http_logger.handlers = [
            h for h in http_logger.handlers if not isinstance(h, InterceptHandler)
        ]
        http_logger.setLevel(logging.NOTSET)
        http_logger.propagate = True

    logger.disable(PACKAGE)
