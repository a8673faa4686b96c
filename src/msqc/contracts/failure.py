"""Centralized failure policy for the QC pipeline.

Everything fatal raises one of the exceptions below and aborts the run.
The CLI maps each of them to an ``ExitCode`` so callers can tell
"bad parameters" from "successful execution".
"""

from enum import Enum, IntEnum
from typing import Optional


class FailurePolicy(str, Enum):
    """Failure policy for fatal pipeline conditions.

    FAIL_FAST (default): Raise immediately, no partial-result salvage

    Missing optional inputs are not failures; affected metrics are
    skipped with a warning by the scheduler.
    """
    FAIL_FAST = "fail_fast"


class ExitCode(IntEnum):
    """Process exit codes returned by the command line entry point."""
    EXECUTION_OK = 0
    INPUT_FILE_NOT_FOUND = 1
    INPUT_FILE_CORRUPT = 3
    ILLEGAL_PARAMETERS = 6
    INTERNAL_ERROR = 12


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad user input. It means
    a stage (e.g. a QC metric) did not produce what it promised.

    Key distinction:
    - ConfigurationError: inconsistent parameters or input files (user error)
    - InputFileCorrupt: a file could not be parsed into its schema
    - ContractViolation: pipeline bug (programmer error)
    """
    pass


class ConfigurationError(ValueError):
    """Inconsistent parameters or input files.

    Parameters
    ----------
    message : str
        What went wrong.
    parameter : str, optional
        Name of the offending input parameter (e.g. ``in_postfdr``).
    """

    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        if parameter:
            message = f"{parameter}: {message}"
        super().__init__(message)


class InputFileCorrupt(ValueError):
    """An input file exists but does not match its expected format."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {reason}")
