"""faultline core primitives.

- errors:   FaultError hierarchy, FaultGroup, unwrap helpers
- guards:   assert_that, fail, ok/no_err/require_no_error, must, safe_value, require_ok
- result:   Ok/Err envelope and try_result
- logging:  structlog configuration
- settings: FAULTLINE_* environment settings
"""

from faultline.core.errors import (
    AssertionFault,
    FaultCategory,
    FaultContext,
    FaultError,
    FaultGroup,
    IncidentalFault,
    capture_fault,
    fault_matches,
    join_faults,
    root_cause,
    unwrap,
    unwrap_all,
)
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
from faultline.core.logging import configure_logging, get_logger
from faultline.core.result import (
    Err,
    Ok,
    Result,
    collect_all_errors,
    partition_results,
    try_result,
)
from faultline.core.settings import (
    FaultlineSettings,
    get_settings,
    reset_settings,
    resolve_setting,
)

__all__ = [
    # errors
    "AssertionFault",
    "FaultCategory",
    "FaultContext",
    "FaultError",
    "FaultGroup",
    "IncidentalFault",
    "capture_fault",
    "fault_matches",
    "join_faults",
    "root_cause",
    "unwrap",
    "unwrap_all",
    # guards
    "assert_that",
    "fail",
    "must",
    "no_err",
    "ok",
    "require_no_error",
    "require_ok",
    "safe_value",
    # logging
    "configure_logging",
    "get_logger",
    # result
    "Err",
    "Ok",
    "Result",
    "collect_all_errors",
    "partition_results",
    "try_result",
    # settings
    "FaultlineSettings",
    "get_settings",
    "reset_settings",
    "resolve_setting",
]
