"""Bounded execution of synchronous store calls from async code."""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from food_recommender.domain.errors import PersistenceError, PipelineError

_T = TypeVar("_T")

_logger = logging.getLogger(__name__)


async def call_store(
    func: Callable[..., _T], *args: object, timeout_seconds: float, action: str
) -> _T:
    """Run a blocking repository call in a worker thread with a deadline."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args), timeout=timeout_seconds
        )
    except TimeoutError as exc:
        _logger.warning("Store call timed out: %s", action)
        raise PersistenceError(
            f"{action} timed out after {timeout_seconds:g}s"
        ) from exc
    except PipelineError:
        raise
    except Exception as exc:
        raise PersistenceError(f"{action} failed: {exc}") from exc
