"""Failure type for catalog contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, so a broken catalog build is never mistaken for a normal
lookup miss.
"""


class ContractViolation(RuntimeError):
    """Raised when a freshly built catalog breaks one of its invariants.

    This indicates a bug in the catalog build or a backend that reported
    inconsistent data, not bad user input.

    Key distinction:
    - CatalogError: expected outcomes callers handle (not found, closed, ...)
    - ContractViolation: catalog bug (programmer error)
    """
    pass
