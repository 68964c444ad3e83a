"""
Structured fault types for faultline.

Provides the small hierarchy of errors that fault barriers hand back to their
callers. Every exception intercepted by a barrier is normalised into one of
these types so callers branch on ordinary values instead of on whatever a unit
of work happened to raise.

A captured fault carries:
- **Category:** ASSERTION (raised deliberately by a guard), INCIDENTAL (any
  other exception caught at a barrier) or AGGREGATE (a group of faults)
- **Context:** Where the fault was raised (file, line, function, thread) plus
  free-form metadata
- **Cause:** The original exception, chained onto ``__cause__``

Manifesto:
    - **One shape for every failure:** Assertion and incidental faults are
      handled identically once intercepted
    - **Nothing is lost:** The original exception is always reachable through
      ``cause``; concurrent faults are joined, never dropped
    - **Location over message noise:** Source location lives in the context,
      so ``str(fault)`` stays exactly the payload text

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                         FaultError                               │
        │              (category, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   AssertionFault                 IncidentalFault                 │
        │   (ASSERTION)                    (INCIDENTAL)                    │
        │   raised by guards               wraps foreign exceptions        │
        │                                                                  │
        ├─────────────────────────────────────────────────────────────────┤
        │   FaultGroup(ExceptionGroup)     (AGGREGATE)                     │
        │   every fault of a fan-out, in launch order                      │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    Normalising a foreign exception:

    >>> fault = capture_fault(ValueError("bad input"))
    >>> str(fault)
    'bad input'
    >>> fault.cause
    ValueError('bad input')

    Inspecting a chain:

    >>> fault_matches(fault, ValueError)
    True
    >>> root_cause(fault)
    ValueError('bad input')

Guardrails:
    ❌ DON'T: Parse ``str(fault)`` to find the original exception
    ✅ DO: Use ``unwrap()``, ``root_cause()`` or ``fault_matches()``

    ❌ DON'T: Compare a FaultGroup's length to the number of launched units
    ✅ DO: Use ``FaultGroup.indices`` to map faults back to launch positions

Tags:
    error-handling, exception-hierarchy, fault-barrier, exception-group,
    faultline

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

import threading
import traceback
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import FrameType
from typing import Any


_LOCATION_FIELDS = ("filename", "lineno", "function", "thread")


class FaultCategory(str, Enum):
    """
    Classification of captured faults.

    Attributes:
        ASSERTION: A guard rejected a precondition (assert_that, ok, must, ...)
        INCIDENTAL: Any other exception intercepted at a barrier
        AGGREGATE: Several faults joined into a FaultGroup
    """

    ASSERTION = "ASSERTION"
    INCIDENTAL = "INCIDENTAL"
    AGGREGATE = "AGGREGATE"


@dataclass
class FaultContext:
    """
    Where a fault was raised, plus free-form metadata.

    Location fields are ``None`` when location capture is disabled or when the
    fault was built without a traceback.

    Examples:
        >>> ctx = FaultContext(filename="jobs.py", lineno=12, function="sync")
        >>> ctx.to_dict()
        {'filename': 'jobs.py', 'lineno': 12, 'function': 'sync'}
        >>> ctx.location
        'jobs.py:12'
    """

    filename: str | None = None
    lineno: int | None = None
    function: str | None = None
    thread: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_frame(cls, frame: FrameType) -> FaultContext:
        """Build a context from a live stack frame."""
        return cls(
            filename=frame.f_code.co_filename,
            lineno=frame.f_lineno,
            function=frame.f_code.co_name,
            thread=threading.current_thread().name,
        )

    @classmethod
    def from_traceback(cls, exc: BaseException) -> FaultContext:
        """Build a context from the innermost frame of ``exc``'s traceback."""
        if exc.__traceback__ is None:
            return cls(thread=threading.current_thread().name)
        summary = traceback.extract_tb(exc.__traceback__)[-1]
        return cls(
            filename=summary.filename,
            lineno=summary.lineno,
            function=summary.name,
            thread=threading.current_thread().name,
        )

    @property
    def location(self) -> str | None:
        """``file:line`` if known."""
        if self.filename is None:
            return None
        return f"{self.filename}:{self.lineno}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in _LOCATION_FIELDS:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class FaultError(Exception):
    """
    Base class for every fault a barrier returns.

    Subclasses set ``default_category``. The message passed in is exactly what
    ``str()`` returns; location is kept on ``context`` so it never pollutes the
    message.

    Examples:
        >>> err = FaultError("boom", cause=KeyError("k"))
        >>> err.category
        <FaultCategory.INCIDENTAL: 'INCIDENTAL'>
        >>> err.with_context(job="nightly").context.metadata
        {'job': 'nightly'}
    """

    default_category: FaultCategory = FaultCategory.INCIDENTAL

    def __init__(
        self,
        message: str,
        *,
        category: FaultCategory | None = None,
        context: FaultContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or FaultContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FaultError:
        """Add context to this fault (fluent API)."""
        for key, value in kwargs.items():
            if key in _LOCATION_FIELDS:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert fault to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class AssertionFault(FaultError):
    """A guard rejected a precondition."""

    default_category = FaultCategory.ASSERTION

    @classmethod
    def from_payload(
        cls, payload: Any, *, context: FaultContext | None = None
    ) -> AssertionFault:
        """Build a fault from an exception or any formattable payload."""
        if isinstance(payload, BaseException):
            return cls(_describe(payload), context=context, cause=payload)
        return cls(str(payload), context=context)


class IncidentalFault(FaultError):
    """A foreign exception intercepted at a barrier."""

    default_category = FaultCategory.INCIDENTAL

    @classmethod
    def from_exception(
        cls, exc: BaseException, *, context: FaultContext | None = None
    ) -> IncidentalFault:
        return cls(_describe(exc), context=context, cause=exc)


class FaultGroup(ExceptionGroup):
    """
    Every fault captured by one fan-out, in launch order.

    ``indices[i]`` is the launch position of ``exceptions[i]``. Groups derived
    through ``split()``/``subgroup()`` no longer map to launch positions and
    carry ``indices=None``.

    Examples:
        >>> group = FaultGroup("1 of 2 units of work faulted", [ValueError("x")], [1])
        >>> group.indices
        (1,)
        >>> group.category
        <FaultCategory.AGGREGATE: 'AGGREGATE'>
    """

    category = FaultCategory.AGGREGATE

    def __new__(
        cls,
        message: str,
        exceptions: Sequence[Exception],
        indices: Sequence[int] | None = None,
    ):
        obj = super().__new__(cls, message, exceptions)
        if indices is not None and len(indices) != len(obj.exceptions):
            raise ValueError("indices must have one entry per exception")
        obj.indices = tuple(indices) if indices is not None else None
        return obj

    def __init__(
        self,
        message: str,
        exceptions: Sequence[Exception],
        indices: Sequence[int] | None = None,
    ):
        super().__init__(message, exceptions)

    def derive(self, excs):
        return FaultGroup(self.message, excs)

    def to_dict(self) -> dict[str, Any]:
        """Convert group to dictionary for logging/serialization."""
        faults = []
        for exc in self.exceptions:
            if isinstance(exc, (FaultError, FaultGroup)):
                faults.append(exc.to_dict())
            else:
                faults.append({"error_type": type(exc).__name__, "message": str(exc)})
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "faults": faults,
        }
        if self.indices is not None:
            result["indices"] = list(self.indices)
        return result


# =============================================================================
# UTILITIES
# =============================================================================


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def capture_fault(exc: Exception, *, capture_location: bool = True) -> Exception:
    """
    Normalise an intercepted exception into a captured fault.

    ``FaultError`` and ``FaultGroup`` instances, whether raised by a guard, a
    nested barrier or user code, are returned unchanged, so for them the round
    trip is ``capture_fault(e) is e``. Anything else, a plain
    ``ExceptionGroup`` included, is wrapped in ``IncidentalFault`` with the
    original exception as ``cause``, so ``unwrap(capture_fault(e)) is e``.
    """
    if isinstance(exc, (FaultError, FaultGroup)):
        return exc
    context = FaultContext.from_traceback(exc) if capture_location else None
    return IncidentalFault.from_exception(exc, context=context)


def join_faults(*faults: Exception | None) -> Exception | None:
    """
    Join faults into one error value.

    ``None`` entries are skipped. One fault comes back as-is; several are
    joined into a FaultGroup, flattening any FaultGroup among them.
    """
    members: list[Exception] = []
    for fault in faults:
        if fault is None:
            continue
        if isinstance(fault, FaultGroup):
            members.extend(fault.exceptions)
        else:
            members.append(fault)
    if not members:
        return None
    if len(members) == 1:
        return members[0]
    return FaultGroup(f"{len(members)} faults", members)


def unwrap(err: BaseException | None) -> BaseException | None:
    """Return the error ``err`` wraps, or ``None``."""
    if err is None:
        return None
    if isinstance(err, FaultError) and err.cause is not None:
        return err.cause
    return err.__cause__


def root_cause(err: BaseException) -> BaseException:
    """Follow ``unwrap`` to the innermost error."""
    seen = {id(err)}
    current = err
    while (inner := unwrap(current)) is not None and id(inner) not in seen:
        seen.add(id(inner))
        current = inner
    return current


def unwrap_all(err: BaseException | None) -> list[BaseException]:
    """Flatten (nested) groups into their leaf faults."""
    if err is None:
        return []
    if isinstance(err, BaseExceptionGroup):
        leaves: list[BaseException] = []
        for member in err.exceptions:
            leaves.extend(unwrap_all(member))
        return leaves
    return [err]


def _walk(err: BaseException, seen: set[int]) -> Iterator[BaseException]:
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, BaseExceptionGroup):
            for member in current.exceptions:
                yield from _walk(member, seen)
        current = unwrap(current)


def fault_matches(
    err: BaseException | None, exc_type: type[BaseException] | tuple[type[BaseException], ...]
) -> bool:
    """
    True if ``err``, anything in its cause chain, or any member of a group is
    an instance of ``exc_type``.
    """
    if err is None:
        return False
    return any(isinstance(e, exc_type) for e in _walk(err, set()))


__all__ = [
    "FaultCategory",
    "FaultContext",
    "FaultError",
    "AssertionFault",
    "IncidentalFault",
    "FaultGroup",
    "capture_fault",
    "join_faults",
    "unwrap",
    "root_cause",
    "unwrap_all",
    "fault_matches",
]
