"""Structured logging for etymology lookups.

Every line is tied to the lookup that produced it. The HTTP layer binds a
request id, a query binds its word and language, and each extractor run binds
its source tag. ``add_source_tier`` then stamps the tag's priority tier, so a
rejected dictionary guess reads differently from a rejected Etymonline edge.

Dev and DEBUG runs render to a colored console; everything else is JSON.
"""

import inspect
import logging
import sys
from contextlib import contextmanager
from functools import wraps
from time import perf_counter
from typing import Iterator, Optional, Union

import structlog
from structlog.contextvars import (
    bind_contextvars,
    bound_contextvars,
    clear_contextvars,
)
from structlog.typing import EventDict, WrappedLogger

from etymos.config import get_settings
from etymos.core.types import SourceTag


_TIERS = {tag.value: tag.tier.value for tag in SourceTag}


# ═════════════════════════════════════════════════════════════════════════════
# Processor chain
# ═════════════════════════════════════════════════════════════════════════════

def add_source_tier(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add ``tier`` next to any known ``source`` tag."""
    source = event_dict.get("source")
    tier = _TIERS.get(getattr(source, "value", source))
    if tier is not None:
        event_dict.setdefault("tier", tier)
    return event_dict


def configure_logging() -> None:
    settings = get_settings()
    level = settings.log_level.upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO)
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_source_tier,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.debug or level == "DEBUG":
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# ═════════════════════════════════════════════════════════════════════════════
# Lookup context
# ═════════════════════════════════════════════════════════════════════════════

def set_request_id(request_id: str) -> None:
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()


@contextmanager
def query_context(word: str, language: str) -> Iterator[None]:
    """Bind the query word and language for the duration of one lookup.

    Nested lookups restore the outer query on exit.
    """
    with bound_contextvars(query_word=word, query_language=language):
        yield


@contextmanager
def extracting(source: Union[SourceTag, str]) -> Iterator[None]:
    """Bind the source tag while one extractor runs."""
    with bound_contextvars(source=getattr(source, "value", source)):
        yield


# ═════════════════════════════════════════════════════════════════════════════
# Timing
# ═════════════════════════════════════════════════════════════════════════════

def _elapsed_ms(start: float) -> float:
    return round((perf_counter() - start) * 1000, 2)


def _log_outcome(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    start: float,
    error: Optional[BaseException] = None,
    level: str = "debug",
    **context
) -> None:
    if error is None:
        getattr(logger, level)(f"{operation}_completed", duration_ms=_elapsed_ms(start), **context)
    else:
        logger.error(
            f"{operation}_failed",
            duration_ms=_elapsed_ms(start),
            error=str(error),
            error_type=type(error).__name__,
            **context
        )


def timed(logger: Optional[structlog.stdlib.BoundLogger] = None):
    """Log how long each call of the wrapped function takes.

    Works on plain and async functions alike. Failures are logged and
    re-raised.
    """
    def decorator(func):
        log = logger or get_logger(func.__module__)
        operation = func.__name__

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _log_outcome(log, operation, start, error=e)
                    raise
                _log_outcome(log, operation, start)
                return result
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_outcome(log, operation, start, error=e)
                raise
            _log_outcome(log, operation, start)
            return result
        return sync_wrapper

    return decorator


class timer:
    """Time a block and log ``<operation>_completed`` or ``<operation>_failed``.

    Example:
        with timer(logger, "etymology_pipeline", word="water"):
            connections = engine.merge(candidates, source_word)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, operation: str, **context):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start = 0.0

    def __enter__(self) -> "timer":
        self.start = perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        _log_outcome(self.logger, self.operation, self.start, error=exc_val, level="info", **self.context)
        return False


# ═════════════════════════════════════════════════════════════════════════════
# Boundary events
# ═════════════════════════════════════════════════════════════════════════════

def log_api_request(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float
) -> None:
    """Caller errors log at warning, server errors at error."""
    level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
    getattr(logger, level)(
        "api_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration_ms, 2)
    )


def log_service_call(
    logger: structlog.stdlib.BoundLogger,
    service: str,
    operation: str,
    duration_ms: float,
    error: Optional[BaseException] = None,
    found: bool = False
) -> None:
    """One collaborator fetch.

    A failed fetch logs at warning: the lookup carries on without that
    document.
    """
    if error is not None:
        logger.warning(
            "service_call",
            service=service,
            operation=operation,
            duration_ms=round(duration_ms, 2),
            success=False,
            error=str(error),
            error_type=type(error).__name__
        )
        return

    logger.info(
        "service_call",
        service=service,
        operation=operation,
        duration_ms=round(duration_ms, 2),
        success=True,
        found=found
    )
