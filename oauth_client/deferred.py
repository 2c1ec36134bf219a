"""Packaging of token operations as futures."""

import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def run_deferred(executor: Optional[Executor], fn: Callable[..., T], *args: Any) -> "Future[T]":
    """
    Run ``fn(*args)`` as one unit of deferred work.

    Args:
        executor: Where to run the work; ``None`` runs it in the calling
            thread and returns an already resolved future
        fn: The work
        *args: Arguments for ``fn``

    Returns:
        A future resolving to the result, or failing with whatever ``fn`` raised
    """
    if executor is not None:
        return executor.submit(fn, *args)

    future: "Future[T]" = Future()
    try:
        result = fn(*args)
    except Exception as exc:
        logger.debug("Deferred %s failed: %s", getattr(fn, "__name__", fn), exc)
        future.set_exception(exc)
    else:
        future.set_result(result)
    return future


def failed(exc: BaseException) -> "Future[Any]":
    """Return a future already failed with ``exc``."""
    future: "Future[Any]" = Future()
    future.set_exception(exc)
    return future
