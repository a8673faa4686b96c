"""Availability of optional inputs and the number of runs.

Every per-run input is a list with one file per run. Lists may be empty
(input not supplied), but all non-empty lists must describe the same runs
and therefore have the same length. The first non-empty list fixes the
number of runs.
"""

import logging
from typing import Sequence

from msqc.contracts.base import require_input
from msqc.metrics.base import Requirement, Status

__all__ = ['RunInputRegistry']

logger = logging.getLogger(__name__)


class RunInputRegistry:
    """Tracks which input categories are present and how many runs exist.

    Example usage::

        registry = RunInputRegistry()
        in_raw = registry.update_file_status("in_raw", config.inputs.in_raw, Requirement.RAW_MZML)
        in_postfdr = registry.update_file_status("in_postfdr", config.inputs.in_postfdr,
                                                 Requirement.POSTFDR_FEATURES)
        registry.note_availability(Requirement.CONTAMINANTS, bool(config.inputs.in_contaminants))

        for i in range(registry.number_exps):
            ...
    """

    def __init__(self):
        self.status = Status()
        self.number_exps = 0

    def note_availability(self, requirement: Requirement, present: bool) -> Status:
        """Mark ``requirement`` present if ``present``; absence is not an error."""
        if present:
            self.status.add(requirement)
            logger.debug("Input available: %s", requirement.label)
        return self.status

    def update_file_status(self, parameter: str, files: Sequence[str], requirement: Requirement) -> list[str]:
        """Validate one per-run file list and record its requirement.

        Parameters
        ----------
        parameter : str
            Name of the input (used in error messages).
        files : sequence of str
            One file per run, or empty if not supplied.
        requirement : Requirement
            Input category the list provides.

        Returns
        -------
        list of str
            The files, unchanged.

        Raises
        ------
        ConfigurationError
            If the list is non-empty and its length differs from the number
            of runs established by an earlier list.
        """
        files = list(files)
        if not files:
            return files

        if self.number_exps == 0:
            self.number_exps = len(files)
        require_input(
            len(files) == self.number_exps,
            f"invalid number of files. Expected were {self.number_exps}, got {len(files)}.",
            parameter=parameter,
        )
        self.note_availability(requirement, True)
        return files

    def check_output_files(self, parameter: str, files: Sequence[str]) -> list[str]:
        """Per-run output lists must be empty or match the number of runs."""
        files = list(files)
        if files:
            require_input(
                len(files) == self.number_exps,
                f"invalid number of files. Expected were {self.number_exps}, got {len(files)}.",
                parameter=parameter,
            )
        return files
