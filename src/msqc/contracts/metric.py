"""Metric output contract.

A metric's ``run`` either returns nothing or a list of newly synthesized
identifications. Anything else is a bug in the metric.
"""

from msqc.contracts.base import require
from msqc.ms.structures import PeptideIdentification


def assert_metric_output(metric_name: str, output) -> None:
    """Enforce the metric output contract.

    Raises
    ------
    ContractViolation
        If ``output`` is neither None nor a list of PeptideIdentification.
    """
    if output is None:
        return
    require(
        isinstance(output, list),
        f"Metric contract violated: '{metric_name}' returned {type(output).__name__}, expected list"
    )
    for pep_id in output:
        require(
            isinstance(pep_id, PeptideIdentification),
            f"Metric contract violated: '{metric_name}' returned {type(pep_id).__name__} in its ID list"
        )
