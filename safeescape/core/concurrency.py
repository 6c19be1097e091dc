"""
@file concurrency.py
@brief Fan-out helper with per-unit failure isolation

@details
Runs one coroutine per unit of work (a place category, a candidate route),
each under its own timeout, and collects an Outcome per unit in submission
order. A failing or timed-out unit never cancels its siblings; callers decide
what to do once every unit has settled.

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, List, Optional, Sequence, TypeVar

from safeescape.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one fan-out unit: either a value or the error that ended it."""
    label: str
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _settle(label: str, awaitable: Awaitable[T], timeout: Optional[float]) -> Outcome[T]:
    try:
        if timeout is None:
            value = await awaitable
        else:
            value = await asyncio.wait_for(awaitable, timeout)
        return Outcome(label=label, value=value)
    except asyncio.TimeoutError:
        logger.warning(f"{label}: timed out after {timeout}s")
        return Outcome(label=label, error=ProviderError(f"{label} timed out after {timeout}s"))
    except Exception as e:
        logger.warning(f"{label}: {e}")
        return Outcome(label=label, error=e)


async def gather_isolated(
    labels: Sequence[str],
    awaitables: Sequence[Awaitable[Any]],
    timeout: Optional[float] = None
) -> List[Outcome[Any]]:
    """
    @brief Await every unit concurrently and return outcomes in input order

    @param labels Human-readable name per unit, used in logs and errors
    @param awaitables One awaitable per unit
    @param timeout Per-unit timeout in seconds, None for no limit
    @return List of Outcome, same length and order as the inputs
    """
    if len(labels) != len(awaitables):
        raise ValueError("labels and awaitables must have the same length")
    return list(await asyncio.gather(
        *(_settle(label, aw, timeout) for label, aw in zip(labels, awaitables))
    ))
