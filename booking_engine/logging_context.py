"""Request ID logging context for tracing a booking across modules.

Every public operation of the lifecycle manager runs inside a
``request_scope``, so one create, confirm or cancel (and the expirations
its reads trigger) logs under a single correlation ID, and the next
operation starts with a fresh one.

Usage:
    from booking_engine.logging_context import get_request_logger, request_scope

    logger = get_request_logger(__name__)
    with request_scope() as request_id:
        logger.info("Creating reservation")  # record.request_id == request_id
"""

import functools
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, TypeVar

NO_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)

F = TypeVar("F", bound=Callable)


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current request context.

    For callers (a web middleware, a job runner) that own the request
    lifetime; the ID stays set until they change it.
    """
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


def new_request_id(prefix: str = "REQ") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@contextmanager
def request_scope(prefix: str = "REQ") -> Iterator[str]:
    """Run a block under a request ID and restore the previous one on exit.

    An ID already set by the caller or an enclosing scope is reused, so
    nested operations stay on the same request.
    """
    current = _request_id.get()
    if current != NO_REQUEST_ID:
        yield current
        return

    token = _request_id.set(new_request_id(prefix))
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


def in_request_scope(func: F) -> F:
    """Decorator form of :func:`request_scope`."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with request_scope():
            return func(*args, **kwargs)
    return wrapper  # type: ignore[return-value]


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
