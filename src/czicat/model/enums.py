"""Closed enumerations of the container format.

Numeric values match the identifiers stored in the file (and used by libCZI),
so raw values coming from a decode backend map directly onto members. Values
a backend reports that are not in a table map onto the ``INVALID`` member.
"""

import logging
import re
from enum import Enum, IntEnum

import numpy as np

__all__ = [
    "Dimension",
    "COORDINATE_DIMENSIONS",
    "RANGE_DIMENSIONS",
    "PixelType",
    "CompressionMode",
    "PyramidType",
    "SegmentKind",
]

logger = logging.getLogger(__name__)


def _normalize_name(name: str) -> str:
    return re.sub(r"[^0-9a-z]", "", name.lower())


class Dimension(str, Enum):
    """Dimension symbols.

    Z, C, T, R, S, I, H, V and B are coordinate dimensions a subblock may
    carry a position in. M (mosaic index), X and Y are synthetic: they are
    derived from geometry and never part of a ``Coordinate``.
    """
    X = "X"
    Y = "Y"
    Z = "Z"
    C = "C"
    T = "T"
    R = "R"
    S = "S"
    I = "I"  # noqa: E741
    H = "H"
    V = "V"
    B = "B"
    M = "M"

    @property
    def is_synthetic(self) -> bool:
        return self in (Dimension.X, Dimension.Y, Dimension.M)

    @classmethod
    def parse(cls, value) -> "Dimension":
        """Accept a member, a one-letter symbol (any case) or its ASCII byte."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("ascii")
        if isinstance(value, str) and len(value.strip()) == 1:
            return cls(value.strip().upper())
        raise ValueError(f"Not a dimension symbol: {value!r}")


COORDINATE_DIMENSIONS = (
    Dimension.Z, Dimension.C, Dimension.T, Dimension.R, Dimension.S,
    Dimension.I, Dimension.H, Dimension.V, Dimension.B,
)

# Fixed order of the dimension range table and its boundary record.
RANGE_DIMENSIONS = (Dimension.X, Dimension.Y) + COORDINATE_DIMENSIONS + (Dimension.M,)


class _RawEnum(IntEnum):
    """IntEnum that can be built from raw ids or backend-specific names."""

    @classmethod
    def _aliases(cls) -> dict:
        return {}

    @classmethod
    def from_raw(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, (int, np.integer)):
            try:
                return cls(int(value))
            except ValueError:
                logger.warning("Unknown %s id %s, using INVALID", cls.__name__, value)
                return cls.INVALID
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("ascii", errors="replace")
        if isinstance(value, str):
            key = _normalize_name(value)
            for member in cls:
                if _normalize_name(member.name) == key:
                    return member
            aliased = cls._aliases().get(key)
            if aliased is not None:
                return aliased
            logger.warning("Unknown %s name %r, using INVALID", cls.__name__, value)
            return cls.INVALID
        raise TypeError(f"Cannot interpret {value!r} as {cls.__name__}")


class PixelType(_RawEnum):
    """Pixel formats of decoded subblock bitmaps."""
    INVALID = 0xFF
    GRAY8 = 0
    GRAY16 = 1
    GRAY32_FLOAT = 2
    BGR24 = 3
    BGR48 = 4
    BGR96_FLOAT = 8
    BGRA32 = 9
    GRAY64_COMPLEX_FLOAT = 10
    BGR192_COMPLEX_FLOAT = 11
    GRAY32 = 12
    GRAY64_FLOAT = 13

    @classmethod
    def _aliases(cls):
        return {"gray64": cls.GRAY64_FLOAT}

    @property
    def bytes_per_pixel(self) -> int:
        return _PIXEL_LAYOUT[self][0] * _PIXEL_LAYOUT[self][1].itemsize

    @property
    def samples_per_pixel(self) -> int:
        return _PIXEL_LAYOUT[self][0]

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype of one sample."""
        return _PIXEL_LAYOUT[self][1]


# (samples per pixel, sample dtype)
_PIXEL_LAYOUT = {
    PixelType.INVALID: (0, np.dtype(np.uint8)),
    PixelType.GRAY8: (1, np.dtype("<u1")),
    PixelType.GRAY16: (1, np.dtype("<u2")),
    PixelType.GRAY32_FLOAT: (1, np.dtype("<f4")),
    PixelType.BGR24: (3, np.dtype("<u1")),
    PixelType.BGR48: (3, np.dtype("<u2")),
    PixelType.BGR96_FLOAT: (3, np.dtype("<f4")),
    PixelType.BGRA32: (4, np.dtype("<u1")),
    PixelType.GRAY64_COMPLEX_FLOAT: (1, np.dtype("<c8")),
    PixelType.BGR192_COMPLEX_FLOAT: (3, np.dtype("<c8")),
    PixelType.GRAY32: (1, np.dtype("<u4")),
    PixelType.GRAY64_FLOAT: (1, np.dtype("<f8")),
}


class CompressionMode(_RawEnum):
    """Compression of a subblock's pixel data."""
    INVALID = 0xFF
    UNCOMPRESSED = 0
    JPG = 1
    JPG_XR = 4
    ZSTD0 = 5
    ZSTD1 = 6

    @classmethod
    def _aliases(cls):
        return {
            "none": cls.UNCOMPRESSED,
            "raw": cls.UNCOMPRESSED,
            "jpeg": cls.JPG,
            "jpgfile": cls.JPG,
            "jpegfile": cls.JPG,
            "jpegxr": cls.JPG_XR,
            "jpgxrfile": cls.JPG_XR,
            "jpegxrfile": cls.JPG_XR,
            "jxr": cls.JPG_XR,
        }


class PyramidType(_RawEnum):
    """Pyramid classification of a subblock; NONE marks a level-0 tile."""
    INVALID = 0xFF
    NONE = 0
    SINGLE_SUBBLOCK = 1
    MULTI_SUBBLOCK = 2


class SegmentKind(str, Enum):
    """Raw data blobs embedded in a subblock next to its pixel data."""
    METADATA = "metadata"
    ATTACHMENT = "attachment"
