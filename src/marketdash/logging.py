"""Structured logging for the analytics service.

structlog renders through the stdlib ``logging`` root handler, so records from
ccxt, httpx and uvicorn share one output stream with ours. Request handlers
wrap their work in ``request_context`` and every event emitted underneath
(fetcher pages, cache hits and misses) carries the endpoint, symbol and
exchange of the request that caused it.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

# Third-party loggers that are chatty at DEBUG: ccxt logs every request,
# httpx every connection.
_QUIET_LIBRARIES = ("ccxt", "httpx", "httpcore")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Route structlog and stdlib records through one formatter.

    Args:
        log_level: Root level name ("DEBUG", "INFO", ...).
        log_format: "json" for machine-readable lines, anything else for the
            console renderer.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(max(root_logger.level, logging.INFO))


@contextmanager
def request_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every log event emitted inside the block.

    ``None`` values are dropped. Bindings are restored on exit, so nested
    or concurrent requests never see each other's context.
    """
    bound = {k: v for k, v in fields.items() if v is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
