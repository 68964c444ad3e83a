"""
Guards: abort the current unit of work when a precondition fails.

A guard raises ``AssertionFault``. It is fatal to the unit of work that calls
it and is meant to run underneath a barrier (``run_catching``,
``run_all_catching``, ``catching``, ``try_result``) that turns the abort into
an ordinary returned error. Without an enclosing barrier the fault propagates
like any other uncaught exception.

Every fault records the line that called the guard (not the guard itself)
when ``FaultlineSettings.capture_location`` is on.

Examples:
    >>> from faultline import run_catching
    >>> from faultline.core.guards import assert_that, must
    >>> def load():
    ...     assert_that(False, "config missing")
    >>> str(run_catching(load))
    'config missing'

    >>> def parse(text):
    ...     value, err = (None, ValueError(text)) if not text.isdigit() else (int(text), None)
    ...     return must(value, err)
    >>> run_catching(lambda: parse("12")) is None
    True

Tags:
    guards, assertions, preconditions, faultline

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import inspect
from typing import Any, NoReturn, TypeVar

from faultline.core.errors import AssertionFault, FaultContext
from faultline.core.result import Err, Ok, Result
from faultline.core.settings import resolve_setting

T = TypeVar("T")


def _abort(payload: Any, stacklevel: int) -> NoReturn:
    """Raise an AssertionFault located ``stacklevel`` frames above ``_abort``."""
    context = None
    if resolve_setting("capture_location"):
        frame = inspect.currentframe()
        for _ in range(stacklevel):
            if frame is None or frame.f_back is None:
                break
            frame = frame.f_back
        if frame is not None:
            context = FaultContext.from_frame(frame)
        del frame
    raise AssertionFault.from_payload(payload, context=context)


def assert_that(condition: Any, payload: Any = "assertion failed") -> None:
    """Abort with ``payload`` if ``condition`` is falsy.

    ``payload`` may be an exception (it becomes the fault's cause) or any
    value whose ``str()`` becomes the fault message.
    """
    if not condition:
        _abort(payload, stacklevel=2)


def fail(payload: Any) -> NoReturn:
    """Abort unconditionally with ``payload``."""
    _abort(payload, stacklevel=2)


def require_no_error(err: BaseException | None) -> None:
    """Abort if ``err`` is not None."""
    if err is not None:
        _abort(err, stacklevel=2)


# Short spellings for call sites that check many errors in a row.
ok = require_no_error
no_err = require_no_error


def must(value: T, err: BaseException | None) -> T:
    """Return ``value``, or abort if ``err`` is not None.

    Several values travel as one tuple: ``a, b = must((a, b), err)``.
    """
    if err is not None:
        _abort(err, stacklevel=2)
    return value


def safe_value(value: T, err: BaseException | None) -> T:
    """Return ``value`` and ignore ``err``."""
    return value


def require_ok(result: Result[T]) -> T:
    """Unwrap an ``Ok``, or abort with the ``Err``'s error as cause."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            _abort(error, stacklevel=2)
    raise TypeError(f"expected Ok or Err, got {type(result).__name__}")


__all__ = [
    "assert_that",
    "fail",
    "require_no_error",
    "ok",
    "no_err",
    "must",
    "safe_value",
    "require_ok",
]
