"""Fan-out barriers — run many units of work concurrently, join, merge faults.

WHY
───
``run_catching`` protects one unit of work.  Fan-out runs N of them at the
same time, waits for every one (strict join) and reports all of their faults
as a single value.

ARCHITECTURE
────────────
::

    run_all_catching(w0, w1, w2)          arun_all_catching(c0, c1, c2)
      ThreadPoolExecutor(max_workers=3)     asyncio.gather
      submit run_catching(wi)               arun_catching(ci)
      shutdown(wait=True)   ◄── join ──►    await gather
      [f0, None, f2]        ◄── launch-ordered slots ──►
                    │
                    ▼
      FaultGroup("2 of 3 units of work faulted", [f0, f2], indices=(0, 2))

Merge policy: every fault is kept, in launch order.  ``None`` means no unit
faulted.  There are no timeouts; a unit that never returns blocks the join.

Example::

    fault = run_all_catching(
        lambda: refresh_prices(),
        lambda: refresh_rates(),
    )
    if fault is not None:
        for failure in fault.exceptions:
            logger.warning("refresh.failed", error=str(failure))
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from faultline.core.errors import FaultGroup
from faultline.core.logging import get_logger
from faultline.core.settings import resolve_setting
from faultline.execution.barrier import UnitOfWork, absorb, run_catching

logger = get_logger(__name__)

AsyncUnitOfWork = Callable[[], Awaitable[object]] | Awaitable[object]


def merge_faults(slots: Sequence[Exception | None]) -> FaultGroup | None:
    """Merge launch-ordered barrier results into one ``FaultGroup`` (or None)."""
    indices = [i for i, fault in enumerate(slots) if fault is not None]
    if not indices:
        return None
    return FaultGroup(
        f"{len(indices)} of {len(slots)} units of work faulted",
        [slots[i] for i in indices],
        indices,
    )


def run_all_catching(*works: UnitOfWork) -> FaultGroup | None:
    """Run every unit of work on its own thread and wait for all of them.

    Returns:
        ``None`` if no unit faulted, otherwise a ``FaultGroup`` with every
        captured fault ordered by launch position (``FaultGroup.indices``).
    """
    if not works:
        return None

    started = time.monotonic()
    logger.debug("fanout.start", units=len(works))

    with ThreadPoolExecutor(
        max_workers=len(works),
        thread_name_prefix=resolve_setting("thread_name_prefix"),
    ) as pool:
        futures = [pool.submit(run_catching, work) for work in works]
    # leaving the with-block waits for every worker

    slots = [future.result() for future in futures]
    merged = merge_faults(slots)
    logger.debug(
        "fanout.joined",
        units=len(works),
        faulted=0 if merged is None else len(merged.exceptions),
        duration_seconds=round(time.monotonic() - started, 6),
    )
    return merged


async def arun_catching(work: AsyncUnitOfWork) -> Exception | None:
    """Await a coroutine (or a zero-argument coroutine factory) behind a barrier.

    A factory that returns something other than an awaitable (a plain sync
    callable, say) has already run by the time that is known; the misuse is
    reported as a fault wrapping a ``TypeError``. ``asyncio.CancelledError``
    is not absorbed.
    """
    try:
        awaitable = work if inspect.isawaitable(work) else work()
        if not inspect.isawaitable(awaitable):
            raise TypeError(
                f"async unit of work returned {type(awaitable).__name__}, expected an awaitable"
            )
        await awaitable
    except Exception as exc:
        return absorb(exc)
    return None


async def arun_all_catching(*works: AsyncUnitOfWork) -> FaultGroup | None:
    """Run every unit concurrently on the running loop and wait for all of them."""
    if not works:
        return None

    started = time.monotonic()
    logger.debug("fanout.start", units=len(works), mode="asyncio")
    slots = await asyncio.gather(*(arun_catching(work) for work in works))
    merged = merge_faults(slots)
    logger.debug(
        "fanout.joined",
        units=len(works),
        mode="asyncio",
        faulted=0 if merged is None else len(merged.exceptions),
        duration_seconds=round(time.monotonic() - started, 6),
    )
    return merged


__all__ = [
    "AsyncUnitOfWork",
    "merge_faults",
    "run_all_catching",
    "arun_catching",
    "arun_all_catching",
]
