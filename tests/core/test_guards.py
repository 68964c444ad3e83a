"""Tests for faultline.core.guards — aborts that barriers turn into values."""

import inspect

import pytest

from faultline.core.errors import AssertionFault, FaultCategory
from faultline.core.guards import (
    assert_that,
    fail,
    must,
    no_err,
    ok,
    require_no_error,
    require_ok,
    safe_value,
)
from faultline.core.result import Err, Ok
from faultline.execution.barrier import run_catching


def _line() -> int:
    """Line number of the caller."""
    return inspect.currentframe().f_back.f_lineno


class TestAssertThat:
    """Tests for assert_that."""

    @pytest.mark.parametrize("condition", [True, 1, "yes", [0]])
    def test_truthy_never_aborts(self, condition):
        assert_that(condition, "unused")

    @pytest.mark.parametrize("condition", [False, 0, "", None, []])
    def test_falsy_aborts(self, condition):
        with pytest.raises(AssertionFault):
            assert_that(condition, "nope")

    def test_plain_payload_message(self):
        with pytest.raises(AssertionFault) as exc_info:
            assert_that(False, {"field": "email"})
        assert str(exc_info.value) == "{'field': 'email'}"
        assert exc_info.value.cause is None
        assert exc_info.value.category == FaultCategory.ASSERTION

    def test_exception_payload_becomes_cause(self):
        payload = PermissionError("denied")
        with pytest.raises(AssertionFault) as exc_info:
            assert_that(False, payload)
        assert exc_info.value.cause is payload
        assert str(exc_info.value) == "denied"

    def test_default_payload(self):
        with pytest.raises(AssertionFault, match="assertion failed"):
            assert_that(False)

    def test_records_caller_location(self):
        with pytest.raises(AssertionFault) as exc_info:
            line = _line() + 1
            assert_that(False, "here")
        ctx = exc_info.value.context
        assert ctx.filename.endswith("test_guards.py")
        assert ctx.lineno == line
        assert ctx.function == "test_records_caller_location"

    def test_location_capture_disabled(self, monkeypatch):
        from faultline.core.settings import reset_settings

        monkeypatch.setenv("FAULTLINE_CAPTURE_LOCATION", "false")
        reset_settings()
        with pytest.raises(AssertionFault) as exc_info:
            assert_that(False, "here")
        assert exc_info.value.context.filename is None

    def test_recovered_by_barrier(self):
        err = ValueError("bad")
        fault = run_catching(lambda: assert_that(False, err))
        assert isinstance(fault, AssertionFault)
        assert fault.cause is err


class TestFail:
    """Tests for fail."""

    def test_always_aborts(self):
        with pytest.raises(AssertionFault, match="stop"):
            fail("stop")

    def test_non_error_payload_round_trips_through_barrier(self):
        fault = run_catching(lambda: fail(404))
        assert str(fault) == "404"


class TestRequireNoError:
    """Tests for require_no_error and its short spellings."""

    def test_none_passes(self):
        require_no_error(None)
        ok(None)
        no_err(None)

    @pytest.mark.parametrize("guard", [require_no_error, ok, no_err])
    def test_error_aborts_with_cause(self, guard):
        err = OSError("disk full")
        with pytest.raises(AssertionFault) as exc_info:
            guard(err)
        assert exc_info.value.cause is err
        assert str(exc_info.value) == "disk full"

    def test_aliases_share_implementation(self):
        assert ok is require_no_error
        assert no_err is require_no_error

    def test_records_caller_location(self):
        with pytest.raises(AssertionFault) as exc_info:
            line = _line() + 1
            ok(OSError("x"))
        assert exc_info.value.context.lineno == line


class TestMust:
    """Tests for must and safe_value."""

    def test_returns_value(self):
        assert must(5, None) == 5

    def test_returns_tuple_of_values(self):
        a, b = must(("a", "b"), None)
        assert (a, b) == ("a", "b")

    def test_aborts_on_error(self):
        err = ValueError("parse")
        with pytest.raises(AssertionFault) as exc_info:
            must(None, err)
        assert exc_info.value.cause is err

    def test_safe_value_ignores_error(self):
        assert safe_value(7, ValueError("ignored")) == 7
        assert safe_value(None, None) is None


class TestRequireOk:
    """Tests for require_ok."""

    def test_unwraps_ok(self):
        assert require_ok(Ok("value")) == "value"

    def test_aborts_on_err(self):
        err = KeyError("missing")
        with pytest.raises(AssertionFault) as exc_info:
            require_ok(Err(err))
        assert exc_info.value.cause is err

    def test_rejects_non_result(self):
        with pytest.raises(TypeError, match="expected Ok or Err"):
            require_ok("not a result")
