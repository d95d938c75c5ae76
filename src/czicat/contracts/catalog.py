"""Catalog build contract.

Enforces the guarantees a freshly built catalog makes to its callers:
dense catalog indices in enumeration order, a level-0 view that is a true
subset of the full list, and non-empty dimension ranges.
"""

from typing import Sequence

from czicat.contracts.base import require
from czicat.model.enums import Dimension
from czicat.model.subblock import SubblockDescriptor


def assert_catalog_consistent(
    descriptors: Sequence[SubblockDescriptor],
    level0: Sequence[SubblockDescriptor],
    ranges,
) -> None:
    """Enforce catalog contract.

    Called once after the enumeration pass (when ``verify_contracts`` is on).

    Parameters
    ----------
    descriptors : sequence of SubblockDescriptor
        Full catalog in enumeration order.

    level0 : sequence of SubblockDescriptor
        The level-0 view of the same catalog.

    ranges : DimensionRangeTable
        Range table built during the same pass.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    for position, descriptor in enumerate(descriptors):
        require(
            descriptor.catalog_index == position,
            f"Catalog contract violated: entry {position} carries index {descriptor.catalog_index}"
        )

    require(
        len(level0) <= len(descriptors),
        f"Catalog contract violated: {len(level0)} level-0 entries exceed {len(descriptors)} total"
    )
    for descriptor in level0:
        require(
            descriptor.is_level0 and descriptors[descriptor.catalog_index] is descriptor,
            f"Catalog contract violated: level-0 entry {descriptor.catalog_index} not in catalog"
        )

    for dim, interval in ranges.items():
        if dim in (Dimension.X, Dimension.Y):
            continue
        require(
            interval.start < interval.end,
            f"Catalog contract violated: empty range for {dim.value} {tuple(interval)}"
        )
    if not descriptors:
        require(
            all(dim in (Dimension.X, Dimension.Y) for dim in ranges),
            "Catalog contract violated: empty catalog reports coordinate ranges"
        )
