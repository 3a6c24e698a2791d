"""Concurrent fan-out that keeps one branch's failure from aborting the rest."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def settle(
    awaitable: Awaitable[T],
    on_failure: Callable[[Exception], T],
    label: str = "task",
) -> T:
    """Await ``awaitable``; if it raises, return ``on_failure(exc)`` instead."""
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"{label} failed, recording as failure result: {e}")
        return on_failure(e)


async def gather_settled(
    branches: Sequence[Awaitable[T]],
    on_failure: Sequence[Callable[[Exception], T]],
    labels: Sequence[str] = (),
) -> List[T]:
    """Run all branches concurrently and return their results in input order.

    A branch that raises is replaced by the value its matching ``on_failure``
    callback builds from the exception; the other branches always complete.
    """
    if len(branches) != len(on_failure):
        raise ValueError("Each branch needs exactly one failure handler")
    labels = list(labels) or [f"branch {i}" for i in range(len(branches))]
    return list(
        await asyncio.gather(
            *(settle(branch, handler, label) for branch, handler, label in zip(branches, on_failure, labels))
        )
    )
