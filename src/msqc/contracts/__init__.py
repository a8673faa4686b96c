"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly. Two kinds of failures exist:

- ConfigurationError: inputs do not fit together (user must fix them)
- ContractViolation: a pipeline stage broke its promise (bug)

Missing optional inputs are not contract failures; the scheduler skips
the affected metrics.
"""

from msqc.contracts.failure import (
    ConfigurationError,
    ContractViolation,
    ExitCode,
    FailurePolicy,
    InputFileCorrupt,
)
from msqc.contracts.base import require, require_input
from msqc.contracts.identification import assert_has_unique_id
from msqc.contracts.metric import assert_metric_output

__all__ = [
    "ConfigurationError",
    "ContractViolation",
    "ExitCode",
    "FailurePolicy",
    "InputFileCorrupt",
    "require",
    "require_input",
    "assert_has_unique_id",
    "assert_metric_output",
]
