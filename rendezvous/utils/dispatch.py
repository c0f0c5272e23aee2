# rendezvous/utils/dispatch.py
"""
Thread dispatch utilities for callbacks that must not run on the caller's thread.
"""

import logging
import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def _log_failure(name: str, exc: BaseException) -> None:
    logger.error(f"[Dispatch:{name}] Unhandled exception: {exc}", exc_info=exc)


def run_detached(
    fn: Callable[..., Any],
    *args: Any,
    name: Optional[str] = None,
    **kwargs: Any,
) -> threading.Thread:
    """
    Run a callable on a fresh daemon thread, logging anything it raises.

    Unlike a raw threading.Thread, a failure here is never silently lost.

    Args:
        fn: The callable to run
        *args: Positional arguments for fn
        name: Optional thread name (also used in log lines)
        **kwargs: Keyword arguments for fn

    Returns:
        The started thread (join it if you need to know when fn returned)
    """
    label = name or getattr(fn, "__name__", "callback")

    def _runner():
        try:
            fn(*args, **kwargs)
        except Exception as e:
            _log_failure(label, e)

    thread = threading.Thread(target=_runner, name=label, daemon=True)
    thread.start()
    return thread


def submit_logged(
    executor: Executor,
    fn: Callable[..., Any],
    *args: Any,
    name: Optional[str] = None,
    **kwargs: Any,
) -> Future:
    """
    Submit a callable to an executor with automatic error logging.

    The returned future still carries the exception for callers who inspect it.
    """
    label = name or getattr(fn, "__name__", "callback")
    future = executor.submit(fn, *args, **kwargs)

    def _handle_exception(f: Future):
        if f.cancelled():
            return
        exc = f.exception()
        if exc is not None:
            _log_failure(label, exc)

    future.add_done_callback(_handle_exception)
    return future


def dispatch(
    fn: Callable[..., Any],
    *args: Any,
    executor: Optional[Executor] = None,
    name: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Schedule fn on the executor when one is given, otherwise on a detached thread."""
    if executor is not None:
        submit_logged(executor, fn, *args, name=name, **kwargs)
    else:
        run_detached(fn, *args, name=name, **kwargs)
