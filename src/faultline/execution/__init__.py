"""faultline execution - fault barriers and concurrent fan-out.

::

    run_catching(work)          -> fault | None     same thread
    catching() / muted()                            with-block barriers
    run_catching_async(work)    -> None             daemon thread (alias: go)
    run_all_catching(*works)    -> FaultGroup | None    threads, strict join
    arun_catching(coro)         -> fault | None     asyncio
    arun_all_catching(*coros)   -> FaultGroup | None    asyncio.gather
"""

from faultline.execution.barrier import (
    FaultTrap,
    UnitOfWork,
    absorb,
    catching,
    go,
    muted,
    run_catching,
    run_catching_async,
)
from faultline.execution.fanout import (
    AsyncUnitOfWork,
    arun_all_catching,
    arun_catching,
    merge_faults,
    run_all_catching,
)

__all__ = [
    "AsyncUnitOfWork",
    "FaultTrap",
    "UnitOfWork",
    "absorb",
    "arun_all_catching",
    "arun_catching",
    "catching",
    "go",
    "merge_faults",
    "muted",
    "run_all_catching",
    "run_catching",
    "run_catching_async",
]
