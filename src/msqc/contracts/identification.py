"""Identification contract.

Every identification taking part in the identity join must carry a
persisted unique ID. Without it nothing can be correlated between a
feature map and the consensus map.
"""

from msqc.contracts.base import require_input
from msqc.ms.structures import UNIQUE_ID_KEY, PeptideIdentification

MISSING_UID_MESSAGE = (
    "No unique ID at peptide identifications found. "
    "Please run PeptideIndexer with '-addUID'."
)


def assert_has_unique_id(pep_id: PeptideIdentification, parameter: str) -> str:
    """Return the identification's unique ID or fail.

    Parameters
    ----------
    pep_id : PeptideIdentification
        Record from the consensus map or a feature map.
    parameter : str
        Input the record came from (``in_cm`` or ``in_postfdr``).

    Raises
    ------
    ConfigurationError
        If the ``UID`` meta value is missing, null or empty.
    """
    uid = pep_id.unique_id if pep_id.meta_value_exists(UNIQUE_ID_KEY) else None
    require_input(bool(uid), MISSING_UID_MESSAGE, parameter=parameter)
    return uid
