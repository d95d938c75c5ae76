"""Fixed-layout records exchanged across the boundary API.

All numeric fields are explicit little-endian fixed-width types, so the
records can be handed to foreign code as raw bytes. Dimension symbols are
single ASCII bytes.
"""

from typing import Optional

import numpy as np

from czicat.model.enums import COORDINATE_DIMENSIONS, RANGE_DIMENSIONS

__all__ = [
    'DIMENSION_RANGE_ENTRY_DTYPE',
    'DIMENSION_RANGES_DTYPE',
    'SCENE_BOUNDING_BOX_DTYPE',
    'FILE_HEADER_DTYPE',
    'SUBBLOCK_RECORD_DTYPE',
    'dimension_ranges_record',
    'scene_bounding_box_record',
    'file_header_record',
    'fill_subblock_records',
]

DIMENSION_RANGE_ENTRY_DTYPE = np.dtype([
    ("symbol", "S1"),
    ("present", "u1"),
    ("start", "<i4"),
    ("end", "<i4"),
])

DIMENSION_RANGES_DTYPE = np.dtype([
    ("entries", DIMENSION_RANGE_ENTRY_DTYPE, (len(RANGE_DIMENSIONS),)),
])

SCENE_BOUNDING_BOX_DTYPE = np.dtype([
    ("found", "u1"),
    ("native", "<i4", (4,)),      # x, y, w, h
    ("coarsest", "<i4", (4,)),
])

FILE_HEADER_DTYPE = np.dtype([
    ("guid", "u1", (16,)),
    ("major", "<i4"),
    ("minor", "<i4"),
])

# Bit i of ``coordinate_valid`` marks COORDINATE_DIMENSIONS[i] as present.
SUBBLOCK_RECORD_DTYPE = np.dtype([
    ("catalog_index", "<u8"),
    ("coordinate_valid", "<u4"),
    ("coordinate", "<i4", (len(COORDINATE_DIMENSIONS),)),
    ("mosaic_index", "<i4"),
    ("logical_rect", "<i4", (4,)),
    ("physical_size", "<i4", (2,)),
    ("pixel_type", "<i4"),
    ("compression", "<i4"),
    ("pyramid_type", "u1"),
    ("file_position", "<u8"),
])


def dimension_ranges_record(ranges) -> np.ndarray:
    """Twelve entries in fixed symbol order; absent dimensions have ``present == 0``."""
    record = np.zeros((), dtype=DIMENSION_RANGES_DTYPE)
    entries = record["entries"]
    for i, dim in enumerate(RANGE_DIMENSIONS):
        entries["symbol"][i] = dim.value.encode("ascii")
        interval = ranges.get(dim)
        if interval is not None:
            entries["present"][i] = 1
            entries["start"][i] = interval.start
            entries["end"][i] = interval.end
    return record


def scene_bounding_box_record(box) -> np.ndarray:
    record = np.zeros((), dtype=SCENE_BOUNDING_BOX_DTYPE)
    if box is not None:
        record["found"] = 1
        record["native"] = tuple(box.native)
        record["coarsest"] = tuple(box.coarsest)
    return record


def file_header_record(header) -> np.ndarray:
    record = np.zeros((), dtype=FILE_HEADER_DTYPE)
    record["guid"] = np.frombuffer(header.guid.raw, dtype=np.uint8)
    record["major"] = header.major_version
    record["minor"] = header.minor_version
    return record


def _encode_subblock(records: np.ndarray, i: int, descriptor) -> None:
    valid = 0
    for j, dim in enumerate(COORDINATE_DIMENSIONS):
        position: Optional[int] = descriptor.coordinate.get(dim)
        if position is not None:
            valid |= 1 << j
            records["coordinate"][i, j] = position
    records["catalog_index"][i] = descriptor.catalog_index
    records["coordinate_valid"][i] = valid
    records["mosaic_index"][i] = -1 if descriptor.mosaic_index is None else descriptor.mosaic_index
    records["logical_rect"][i] = tuple(descriptor.logical_rect)
    records["physical_size"][i] = tuple(descriptor.physical_size)
    records["pixel_type"][i] = int(descriptor.pixel_type)
    records["compression"][i] = int(descriptor.compression)
    records["pyramid_type"][i] = int(descriptor.pyramid_type)
    records["file_position"][i] = descriptor.file_position


def fill_subblock_records(descriptors, destination: np.ndarray) -> int:
    """Write up to ``len(destination)`` records in catalog order.

    Returns
    -------
    int
        Number of records written.

    Raises
    ------
    TypeError
        If ``destination`` is not a 1-D array of ``SUBBLOCK_RECORD_DTYPE``.
    """
    if not isinstance(destination, np.ndarray) or destination.dtype != SUBBLOCK_RECORD_DTYPE:
        raise TypeError("Destination must be a numpy array of SUBBLOCK_RECORD_DTYPE")
    if destination.ndim != 1:
        raise TypeError(f"Destination must be 1-D, got shape {destination.shape}")

    written = min(len(descriptors), len(destination))
    destination[:written] = np.zeros(written, dtype=SUBBLOCK_RECORD_DTYPE)
    for i in range(written):
        _encode_subblock(destination, i, descriptors[i])
    return written
