"""Value types of the subblock catalog.

- enums: Dimension symbols and format enumerations
- geometry: Rect, Size, Interval
- coordinate: Sparse subblock coordinate
- guid: File and attachment GUIDs
- subblock: Subblock and attachment descriptors, file header
"""

from czicat.model.enums import (
    COORDINATE_DIMENSIONS,
    RANGE_DIMENSIONS,
    CompressionMode,
    Dimension,
    PixelType,
    PyramidType,
    SegmentKind,
)
from czicat.model.geometry import EMPTY_RECT, Interval, Rect, Size
from czicat.model.coordinate import Coordinate
from czicat.model.guid import Guid
from czicat.model.subblock import (
    FILE_POSITION_UNAVAILABLE,
    AttachmentDescriptor,
    FileHeader,
    SubblockDescriptor,
)

__all__ = [
    "COORDINATE_DIMENSIONS",
    "RANGE_DIMENSIONS",
    "CompressionMode",
    "Dimension",
    "PixelType",
    "PyramidType",
    "SegmentKind",
    "EMPTY_RECT",
    "Interval",
    "Rect",
    "Size",
    "Coordinate",
    "Guid",
    "FILE_POSITION_UNAVAILABLE",
    "AttachmentDescriptor",
    "FileHeader",
    "SubblockDescriptor",
]
