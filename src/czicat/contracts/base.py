"""Base contract enforcement utility.

The require() function is the single enforcement mechanism for all contracts.
"""

from czicat.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a catalog contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation.

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require(len(descriptors) == count, "Catalog contract: count mismatch")
    """
    if not condition:
        raise ContractViolation(message)
