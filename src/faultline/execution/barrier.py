"""Fault barriers — absorb exceptions and hand them back as values.

WHY
───
Code at a trust boundary (request handlers, background-job dispatch) wants
"did it fail, and why" as data it can branch on, not as an exception that
may or may not be caught further up.  A barrier runs a unit of work, absorbs
any ``Exception`` it raises, and returns the captured fault (see
``faultline.core.errors.capture_fault``).

ARCHITECTURE
────────────
::

    run_catching(work)         ─ call in this thread, return fault | None
    catching()                 ─ with-block form, fault lands on FaultTrap
    muted()                    ─ with-block that discards the fault
    run_catching_async(work)   ─ daemon thread, fire and forget  (alias: go)

Only ``Exception`` subclasses are absorbed.  ``KeyboardInterrupt``,
``SystemExit`` and other bare ``BaseException``s always propagate.

Related modules:
    fanout.py      — concurrent fan-out with join (threads and asyncio)
    core/guards.py — assert_that / must / ok, the aborts barriers absorb

Example::

    fault = run_catching(lambda: sync_account(account_id))
    if fault is not None:
        mark_for_retry(account_id, reason=str(fault))
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from faultline.core.errors import capture_fault, join_faults
from faultline.core.logging import get_logger
from faultline.core.settings import resolve_setting

logger = get_logger(__name__)

UnitOfWork = Callable[[], object]


def absorb(exc: Exception) -> Exception:
    """Capture ``exc`` as a fault and log it at DEBUG."""
    fault = capture_fault(exc, capture_location=resolve_setting("capture_location"))
    logger.debug(
        "fault.captured",
        error_type=type(exc).__name__,
        fault_type=type(fault).__name__,
        thread=threading.current_thread().name,
    )
    return fault


def run_catching(work: UnitOfWork) -> Exception | None:
    """Run ``work()`` in the current thread behind a fault barrier.

    Returns:
        ``None`` if ``work`` returned normally, otherwise the captured fault.
        The return value of ``work`` is discarded; use ``try_result`` when
        it matters.
    """
    try:
        work()
    except Exception as exc:
        return absorb(exc)
    return None


@dataclass
class FaultTrap:
    """Holds the fault(s) absorbed by one or more ``catching()`` blocks."""

    error: Exception | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, exc: Exception) -> Exception:
        """Capture ``exc`` and join it with anything already trapped.

        The first fault is stored as-is, so a ``FaultGroup`` raised into an
        empty trap keeps its message and ``indices``.
        """
        fault = absorb(exc)
        with self._lock:
            if self.error is None:
                self.error = fault
            else:
                self.error = join_faults(self.error, fault)
            return self.error

    def raise_if_faulted(self) -> None:
        """Re-raise the trapped fault, if any."""
        if self.error is not None:
            raise self.error


@contextmanager
def catching(trap: FaultTrap | None = None) -> Iterator[FaultTrap]:
    """Absorb an exception raised in the block onto a ``FaultTrap``.

    Passing the same trap to several blocks accumulates their faults into
    one ``FaultGroup``.

    Example::

        with catching() as trap:
            publish(event)
        if trap.error is not None:
            ...
    """
    if trap is None:
        trap = FaultTrap()
    try:
        yield trap
    except Exception as exc:
        trap.record(exc)


@contextmanager
def muted() -> Iterator[None]:
    """Absorb and discard an exception raised in the block."""
    try:
        yield
    except Exception as exc:
        logger.debug("fault.muted", error_type=type(exc).__name__, error=str(exc))


def run_catching_async(work: UnitOfWork) -> None:
    """Run ``work`` behind a barrier on a daemon thread and return at once.

    The fault, if any, is absorbed and not reported to the caller. Daemon
    threads do not keep the interpreter alive, so work still running at
    shutdown is abandoned.
    """
    thread = threading.Thread(
        target=run_catching,
        args=(work,),
        name=f"{resolve_setting('thread_name_prefix')}-detached",
        daemon=True,
    )
    thread.start()


go = run_catching_async


__all__ = [
    "UnitOfWork",
    "absorb",
    "run_catching",
    "FaultTrap",
    "catching",
    "muted",
    "run_catching_async",
    "go",
]
