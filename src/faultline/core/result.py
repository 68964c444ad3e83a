"""
Result envelope for value-returning units of work.

The barriers in ``faultline.execution`` only report *whether* a unit of work
faulted. When the unit also produces a value, ``try_result`` runs it behind
the same barrier and hands back ``Ok(value)`` or ``Err(fault)``; the guard
``require_ok`` turns an ``Err`` back into an abort further down a call chain.

Examples:
    >>> from faultline.core.result import Ok, Err, try_result
    >>> try_result(lambda: int("42")).unwrap()
    42
    >>> result = try_result(lambda: int("x"))
    >>> result.is_err()
    True
    >>> type(result.error).__name__
    'IncidentalFault'

Tags:
    result-pattern, error-handling, faultline

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from faultline.core.errors import FaultGroup, capture_fault
from faultline.core.settings import resolve_setting


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A unit of work returned ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """A unit of work faulted; ``error`` is the captured fault."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Re-raise the captured fault outside any barrier."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default


# Type alias for Result
Result = Ok[T] | Err[T]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Run a value-returning unit of work behind a fault barrier.

    Returns ``Ok`` with the return value, or ``Err`` with the captured fault
    (see ``capture_fault``). Only ``Exception`` subclasses are absorbed.

    Args:
        f: Zero-argument callable that may raise

    Returns:
        Ok[T] if f() returns, Err[T] with the captured fault if it raises
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(capture_fault(e, capture_location=resolve_setting("capture_location")))


def collect_all_errors(results: list[Result[T]]) -> Result[list[T]]:
    """
    Collect results, keeping every error.

    All successes give ``Ok`` with the values in order. A single failure gives
    that error unchanged; several are joined into a ``FaultGroup`` whose
    ``indices`` are the positions of the failed results.

    Examples:
        >>> collect_all_errors([Ok(1), Ok(2)]).unwrap()
        [1, 2]
        >>> err = collect_all_errors([Ok(1), Err(ValueError("a")), Err(ValueError("b"))])
        >>> err.error.indices
        (1, 2)
    """
    values = []
    errors = []
    indices = []
    for position, result in enumerate(results):
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
                indices.append(position)

    if not errors:
        return Ok(values)
    if len(errors) == 1:
        return Err(errors[0])
    return Err(
        FaultGroup(f"{len(errors)} of {len(results)} results failed", errors, indices)
    )


def partition_results(
    results: list[Result[T]],
) -> tuple[list[T], list[Exception]]:
    """Split results into (values, errors), preserving order within each."""
    values: list[T] = []
    errors: list[Exception] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


__all__ = [
    "Ok",
    "Err",
    "Result",
    "try_result",
    "collect_all_errors",
    "partition_results",
]
