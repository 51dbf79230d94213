"""
logging_config.py
------------------

This module defines a shared logging configuration and utilities for
structured logging throughout the catalog service.  It uses Python's
built‑in ``logging`` module rather than ``print`` so that log output
can be captured by standard logging handlers or external systems such
as ELK, Grafana or Datadog.  Messages are serialised as JSON to make
them easier to parse downstream.

To use this module, import ``logger`` and call its methods with a
``json.dumps`` payload carrying an ``event`` key.  The ``log_call``
decorator can be applied to route handlers to record entry and exit
points at the DEBUG level without leaking sensitive values.
"""

from __future__ import annotations

import inspect
import json
import logging
import sys
from functools import wraps
from typing import Any, Callable, Dict

# -----------------------------------------------------------------------------
# Configure global logging
# -----------------------------------------------------------------------------

# Set up the root logger once.  Output goes to stdout with a timestamp and
# level; the message itself is a JSON string.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("catalog")


def configure_level(level: str) -> None:
    """Apply the configured level to the ``catalog`` logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def _sanitize(obj: Any) -> Any:
    """Recursively sanitise objects for logging.

    Dictionaries lose keys containing 'token', 'password' or 'secret'.
    Lists and tuples are processed element‑wise.  Pydantic models are
    dumped first.  Anything that still is not JSON serialisable is
    replaced by its ``str``.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, dict):
        clean: Dict[str, Any] = {}
        for k, v in obj.items():
            if any(keyword in str(k).lower() for keyword in ("token", "password", "secret")):
                continue
            clean[k] = _sanitize(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if hasattr(obj, "model_dump"):
        return _sanitize(obj.model_dump())
    try:
        return json.loads(json.dumps(obj))
    except (TypeError, ValueError):
        return str(obj)


def _log_start(name: str, args: Any, kwargs: Any) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(json.dumps({
        "event": "call_start",
        "function": name,
        "args": _sanitize(args),
        "kwargs": _sanitize(kwargs),
    }))


def _log_end(name: str, result: Any) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(json.dumps({
        "event": "call_end",
        "function": name,
        "result": _sanitize(result),
    }))


def log_call(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log entry and exit of functions.

    This decorator logs a DEBUG level message before a function is executed
    and another after it returns.  Coroutine functions get a coroutine
    wrapper so FastAPI keeps awaiting them on the event loop.

    Examples
    --------

    >>> @log_call
    ... async def read_stats(service):
    ...     return await service.get_stats()
    """

    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            _log_start(func.__name__, args, kwargs)
            result = await func(*args, **kwargs)
            _log_end(func.__name__, result)
            return result

        wrapper: Callable[..., Any] = async_wrapper
    else:
        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _log_start(func.__name__, args, kwargs)
            result = func(*args, **kwargs)
            _log_end(func.__name__, result)
            return result

        wrapper = sync_wrapper

    # FastAPI and other introspection tools must see the original parameters.
    wrapper.__signature__ = inspect.signature(func)  # type: ignore[attr-defined]
    return wrapper
