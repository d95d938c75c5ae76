"""In-memory container backend for catalog tests.

Tiles are described with ``make_tile`` and served by ``FakeHandle``, which
implements the ``ContainerHandle`` protocol without touching the file
system. Only uncompressed tiles can be decoded; any other compression
raises, which lets tests exercise ``DecodeFailed``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import uuid

import numpy as np

from czicat.backends import RawAttachmentInfo, RawFileHeader, RawSubblockDescriptor
from czicat.model import PixelType, SegmentKind

FILE_GUID = uuid.UUID("4b0b2a6e-1c0d-4d7e-9f10-2233445566aa")


@dataclass
class FakeTile:
    raw: RawSubblockDescriptor
    pixels: np.ndarray
    metadata: bytes = b""
    attachment: bytes = b""
    readable: bool = True


@dataclass
class FakeAttachment:
    name: str
    content_file_type: str
    data: bytes
    content_guid: bytes = field(default_factory=lambda: uuid.uuid4().bytes_le)


def make_pixels(width: int, height: int, pixel_type=PixelType.GRAY8, seed: int = 0) -> np.ndarray:
    """Deterministic bitmap of the given stored size and pixel type."""
    pixel_type = PixelType(pixel_type)
    samples = pixel_type.samples_per_pixel
    shape = (height, width) if samples == 1 else (height, width, samples)
    values = (np.arange(int(np.prod(shape))) + seed) % 251
    return values.reshape(shape).astype(pixel_type.dtype)


def make_tile(
    x=0, y=0, w=4, h=4,
    stored=None,
    pixel_type=PixelType.GRAY8,
    compression=0,
    pyramid_type=0,
    mosaic_index=None,
    file_position=None,
    metadata=b"",
    attachment=b"",
    readable=True,
    pixels=None,
    **coordinate,
) -> FakeTile:
    """Build a tile; keyword arguments Z=, C=, S=, ... set its coordinate."""
    stored_w, stored_h = stored if stored is not None else (w, h)
    raw = RawSubblockDescriptor(
        logical_rect=(x, y, w, h),
        physical_size=(stored_w, stored_h),
        pixel_type=int(pixel_type),
        compression=compression,
        pyramid_type=pyramid_type,
        coordinate=dict(coordinate),
        mosaic_index=mosaic_index,
        file_position=file_position,
    )
    if pixels is None:
        pixels = make_pixels(stored_w, stored_h, pixel_type, seed=x + y)
    return FakeTile(raw, pixels, metadata, attachment, readable)


class FakeHandle:
    """``ContainerHandle`` over a list of ``FakeTile``."""

    def __init__(
        self,
        tiles,
        metadata_xml: str = "<ImageDocument/>",
        attachments=(),
        version=(1, 0),
        fail_at: Optional[int] = None,
    ):
        self.tiles = list(tiles)
        self.metadata_xml = metadata_xml
        self.attachments = list(attachments)
        self.version = version
        self.fail_at = fail_at
        self.closed = False
        self.enumerations = 0
        self.decode_calls = 0

    def enumerate_subblocks(self, visit) -> None:
        self.enumerations += 1
        for index, tile in enumerate(self.tiles):
            if self.fail_at is not None and index == self.fail_at:
                raise OSError("unexpected end of subblock directory")
            if not visit(index, tile.raw):
                break

    def read_subblock(self, index):
        if not 0 <= index < len(self.tiles) or not self.tiles[index].readable:
            return None
        return self.tiles[index]

    def decode_pixels(self, raw: FakeTile) -> np.ndarray:
        self.decode_calls += 1
        if raw.raw.compression not in (0, "uncompressed"):
            raise ValueError(f"no codec for compression {raw.raw.compression!r}")
        return raw.pixels

    def read_raw_segment(self, raw: FakeTile, kind: SegmentKind) -> bytes:
        return raw.metadata if kind == SegmentKind.METADATA else raw.attachment

    def read_metadata_xml(self) -> str:
        return self.metadata_xml

    def read_file_header(self) -> RawFileHeader:
        return RawFileHeader(FILE_GUID.bytes_le, *self.version)

    def enumerate_attachments(self, visit) -> None:
        for index, att in enumerate(self.attachments):
            info = RawAttachmentInfo(att.content_guid, att.content_file_type, att.name)
            if not visit(index, info):
                break

    def read_attachment(self, index):
        if not 0 <= index < len(self.attachments):
            return None
        return self.attachments[index].data

    def close(self) -> None:
        self.closed = True


class FakeBackend:
    """Backend returning a prepared ``FakeHandle`` (or raising ``error``)."""

    name = "fake"

    def __init__(self, handle: Optional[FakeHandle] = None, error: Optional[Exception] = None):
        self.handle = handle
        self.error = error
        self.opened = []

    def open(self, path: Path) -> FakeHandle:
        if self.error is not None:
            raise self.error
        self.opened.append(path)
        return self.handle


def write_container_file(directory: Path, name: str = "slide.czi") -> Path:
    """Create a placeholder file so the catalog's path check succeeds."""
    path = Path(directory) / name
    path.write_bytes(b"ZISRAWFILE")
    return path


def two_scene_tiles():
    """Four native tiles: scenes 0 and 1, Z in {0, 1}, C = 0, no mosaic index."""
    return [
        make_tile(0, 0, 10, 10, Z=0, C=0, S=0),
        make_tile(0, 0, 10, 10, Z=1, C=0, S=0),
        make_tile(20, 0, 10, 10, Z=0, C=0, S=1),
        make_tile(30, 5, 10, 10, Z=1, C=0, S=1),
    ]
