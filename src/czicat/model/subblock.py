"""Catalog entries: subblock and attachment descriptors, file header.

Descriptors are immutable snapshots. They are copied out of a catalog and
stay valid after the catalog is closed.
"""

from dataclasses import dataclass
from typing import Optional

from czicat.model.coordinate import Coordinate
from czicat.model.enums import CompressionMode, PixelType, PyramidType
from czicat.model.geometry import Rect, Size
from czicat.model.guid import Guid

__all__ = [
    "FILE_POSITION_UNAVAILABLE",
    "SubblockDescriptor",
    "AttachmentDescriptor",
    "FileHeader",
]

# Reported when a subblock was not enumerated from the subblock directory.
FILE_POSITION_UNAVAILABLE = 2**64 - 1


@dataclass(frozen=True, slots=True)
class SubblockDescriptor:
    """One subblock catalog entry.

    Attributes:
        coordinate: positions in the coordinate dimensions (sparse).
        mosaic_index: M index, or None when the subblock has none.
        logical_rect: placement in specimen pixel space.
        physical_size: stored pixel size; smaller than the logical size for
            down-sampled pyramid tiles.
        pixel_type, compression, pyramid_type: format enums.
        file_position: byte offset of the subblock segment, or
            FILE_POSITION_UNAVAILABLE.
        catalog_index: dense 0-based position in enumeration order; the key
            for random access within one open catalog.
    """
    coordinate: Coordinate
    mosaic_index: Optional[int]
    logical_rect: Rect
    physical_size: Size
    pixel_type: PixelType
    compression: CompressionMode
    pyramid_type: PyramidType
    file_position: int
    catalog_index: int

    @property
    def is_level0(self) -> bool:
        """True for native-resolution tiles that are not part of a pyramid."""
        return self.pyramid_type == PyramidType.NONE

    @property
    def downscale_factor(self) -> int:
        """Integer minification of the stored pixels against the logical rect."""
        ratios = []
        if self.physical_size.w > 0:
            ratios.append(self.logical_rect.w / self.physical_size.w)
        if self.physical_size.h > 0:
            ratios.append(self.logical_rect.h / self.physical_size.h)
        if not ratios:
            return 1
        return max(1, round(max(ratios)))

    @property
    def is_native_resolution(self) -> bool:
        """True when the stored size equals the logical size exactly."""
        return (self.physical_size.w, self.physical_size.h) == (self.logical_rect.w, self.logical_rect.h)

    @property
    def scene(self) -> Optional[int]:
        return self.coordinate.s

    @property
    def has_file_position(self) -> bool:
        return self.file_position != FILE_POSITION_UNAVAILABLE


@dataclass(frozen=True, slots=True)
class AttachmentDescriptor:
    """Attachment directory entry; ``index`` has its own index space."""
    content_guid: Guid
    content_file_type: str
    name: str
    index: int

    def __post_init__(self):
        if len(self.content_file_type) > 8:
            raise ValueError(
                f"Content file type is limited to 8 characters, got {self.content_file_type!r}"
            )


@dataclass(frozen=True, slots=True)
class FileHeader:
    guid: Guid
    major_version: int
    minor_version: int

    @property
    def version(self) -> tuple[int, int]:
        return (self.major_version, self.minor_version)
