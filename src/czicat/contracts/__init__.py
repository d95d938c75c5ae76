"""Catalog contracts - fail-fast enforcement of build invariants.

Contracts fail immediately and loudly when a catalog build does not produce
its promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate catalog correctness
- CatalogError covers expected outcomes (not found, closed, decode failure)
"""

from czicat.contracts.failure import ContractViolation
from czicat.contracts.base import require
from czicat.contracts.catalog import assert_catalog_consistent

__all__ = [
    "ContractViolation",
    "require",
    "assert_catalog_consistent",
]
