"""Decode-collaborator protocol.

The catalog never parses the container's segment layout, runs a pixel codec
or parses XML itself. Those jobs belong to a backend, which supplies:

1. ``ContainerBackend.open(path)`` - OpenContainer
2. ``ContainerHandle.enumerate_subblocks(visit)`` - EnumerateSubblocks, a
   finite single-pass sequence; ``visit`` returns False to stop early
3. ``ContainerHandle.decode_pixels(raw)`` - DecodePixels

plus the auxiliary reads a catalog needs (raw segments, metadata XML, file
header, attachment directory and data). Backends report raw enum values
(ids or names); the catalog maps them onto ``czicat.model`` enums.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol, Union

import numpy as np

from czicat.model.enums import SegmentKind

__all__ = [
    "RawSubblockDescriptor",
    "RawAttachmentInfo",
    "RawFileHeader",
    "SubblockVisitor",
    "AttachmentVisitor",
    "ContainerHandle",
    "ContainerBackend",
]

RawEnumValue = Union[int, str]


@dataclass(frozen=True)
class RawSubblockDescriptor:
    """A subblock directory entry as the backend reports it.

    ``coordinate`` only holds the coordinate dimensions (Z C T R S I H V B)
    that are present. ``file_position`` is None when the backend did not
    enumerate from the subblock directory.
    """
    logical_rect: tuple[int, int, int, int]
    physical_size: tuple[int, int]
    pixel_type: RawEnumValue
    compression: RawEnumValue
    pyramid_type: RawEnumValue = 0
    coordinate: Mapping[str, int] = field(default_factory=dict)
    mosaic_index: Optional[int] = None
    file_position: Optional[int] = None


@dataclass(frozen=True)
class RawAttachmentInfo:
    content_guid: bytes
    content_file_type: str
    name: str


@dataclass(frozen=True)
class RawFileHeader:
    guid: bytes
    major_version: int
    minor_version: int


SubblockVisitor = Callable[[int, RawSubblockDescriptor], bool]
AttachmentVisitor = Callable[[int, RawAttachmentInfo], bool]


class ContainerHandle(Protocol):
    """An open container. Not thread-safe."""

    def enumerate_subblocks(self, visit: SubblockVisitor) -> None:
        """Call ``visit(index, descriptor)`` for each subblock in directory order.

        ``index`` is the backend's own key for ``read_subblock``. Enumeration
        stops when ``visit`` returns False. I/O errors propagate.
        """
        ...

    def read_subblock(self, index: int) -> Optional[Any]:
        """Load the subblock segment at ``index``; None if it cannot be located."""
        ...

    def decode_pixels(self, raw: Any) -> np.ndarray:
        """Decode a loaded subblock to a ``(height, width[, samples])`` array."""
        ...

    def read_raw_segment(self, raw: Any, kind: SegmentKind) -> bytes:
        """Raw metadata or attachment bytes embedded in a loaded subblock."""
        ...

    def read_metadata_xml(self) -> str:
        ...

    def read_file_header(self) -> RawFileHeader:
        ...

    def enumerate_attachments(self, visit: AttachmentVisitor) -> None:
        ...

    def read_attachment(self, index: int) -> Optional[bytes]:
        ...

    def close(self) -> None:
        ...


class ContainerBackend(Protocol):
    """Factory for container handles."""

    name: str

    def open(self, path: Path) -> ContainerHandle:
        """Open ``path``; raise if it is not a well-formed container."""
        ...
