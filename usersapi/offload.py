from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import anyio
import anyio.to_thread

from usersapi.errors import ApiError, OffloadError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_limiter: anyio.CapacityLimiter | None = None


def configure_workers(total_tokens: int) -> None:
    """Bound the number of blocking calls that may run at once."""
    global _limiter
    _limiter = anyio.CapacityLimiter(total_tokens)
    logger.info("Blocking worker pool sized to %d threads", total_tokens)


def _get_limiter() -> anyio.CapacityLimiter | None:
    # None falls back to anyio's default thread limiter.
    return _limiter


async def run_blocking(func: Callable[..., T], *args: object) -> T:
    """Run ``func(*args)`` on a worker thread and await its result.

    Failures the work reports itself (``ApiError`` subclasses such as
    ``QueryError``) are re-raised untouched. Anything else that goes wrong,
    in the worker or in the work, surfaces as ``OffloadError``.
    """
    try:
        return await anyio.to_thread.run_sync(func, *args, limiter=_get_limiter())
    except ApiError:
        raise
    except Exception as exc:
        logger.error("Blocking call %s failed on worker: %r", getattr(func, "__qualname__", func), exc)
        raise OffloadError(exc) from exc
