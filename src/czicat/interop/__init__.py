"""Boundary API for foreign callers.

- records: Fixed-layout numpy record dtypes
- boundary: Integer-handle facade returning error codes
"""

from czicat.interop.boundary import NULL_HANDLE, CatalogBoundary, ErrorCode
from czicat.interop.records import (
    DIMENSION_RANGES_DTYPE,
    FILE_HEADER_DTYPE,
    SCENE_BOUNDING_BOX_DTYPE,
    SUBBLOCK_RECORD_DTYPE,
)

__all__ = [
    "CatalogBoundary",
    "ErrorCode",
    "NULL_HANDLE",
    "DIMENSION_RANGES_DTYPE",
    "FILE_HEADER_DTYPE",
    "SCENE_BOUNDING_BOX_DTYPE",
    "SUBBLOCK_RECORD_DTYPE",
]
