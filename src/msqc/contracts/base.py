"""Base contract enforcement utilities.

``require`` guards pipeline invariants (raises ContractViolation),
``require_input`` guards user-supplied inputs (raises ConfigurationError).
"""

from typing import Optional

from msqc.contracts.failure import ConfigurationError, ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in pipeline logic.

    Examples
    --------
    >>> require(isinstance(new_ids, list), "TopNoverRT must return a list")
    """
    if not condition:
        raise ContractViolation(message)


def require_input(condition: bool, message: str, parameter: Optional[str] = None) -> None:
    """Enforce consistency of user inputs.

    Raises
    ------
    ConfigurationError
        If condition is False. The message is prefixed with ``parameter``.

    Examples
    --------
    >>> require_input(len(files) == n, f"expected {n} files", parameter="in_trafo")
    """
    if not condition:
        raise ConfigurationError(message, parameter=parameter)
