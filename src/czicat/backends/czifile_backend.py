"""Container backend over the ``czifile`` package.

``czifile`` parses the subblock directory and the metadata segment, and
decodes JPEG and JPEG-XR tiles. Uncompressed and Zstd tiles, raw subblock
segments, the file header and attachments are read straight from the
segment layout, so the bytes handed out are exactly the bytes stored.

Notes
-----
- Subblocks are enumerated from the subblock directory, so file positions
  are always available.
- Pyramid tiles are decoded at their stored (physical) size; no resizing
  to the logical rectangle takes place.
- Multi-sample tiles keep the stored BGR / BGRA channel order.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import czifile
import imagecodecs
import numpy as np

from czicat.backends.base import (
    AttachmentVisitor,
    RawAttachmentInfo,
    RawFileHeader,
    RawSubblockDescriptor,
    SubblockVisitor,
)
from czicat.model.enums import COORDINATE_DIMENSIONS, CompressionMode, PixelType, SegmentKind

__all__ = [
    "CzifileBackend",
    "CzifileHandle",
    "SubblockSegment",
    "decompress",
    "restore_channel_order",
]

logger = logging.getLogger(__name__)

_COORDINATE_SYMBOLS = frozenset(dim.value for dim in COORDINATE_DIMENSIONS)

SEGMENT_HEADER = struct.Struct("<16sqq")
FILE_HEADER = struct.Struct("<iiii16s16siqqiq")
SUBBLOCK_SIZES = struct.Struct("<iiq")
DIRECTORY_ENTRY_DV = struct.Struct("<2siqiiB5si")
DIMENSION_ENTRY_DV = struct.Struct("<4siifi")
ATTACHMENT_ENTRY_A1 = struct.Struct("<2s10sqi16s8s80s")
ATTACHMENT_DIRECTORY_HEADER_SIZE = 256
ATTACHMENT_SEGMENT_HEADER_SIZE = 256
SUBBLOCK_MIN_HEADER_SIZE = 256

# Decoded here rather than by czifile.
_DIRECT_CODECS = (CompressionMode.UNCOMPRESSED, CompressionMode.ZSTD0, CompressionMode.ZSTD1)


def _symbol(dimension) -> str:
    if isinstance(dimension, bytes):
        dimension = dimension.rstrip(b"\0").decode("ascii")
    return dimension.strip()


def _text(value) -> str:
    if isinstance(value, bytes):
        value = value.rstrip(b"\0").decode("utf-8", errors="replace")
    return value


def _stored_extent(entry, symbol: str) -> tuple[int, int, int]:
    """(start, logical size, stored size) of the X or Y dimension entry."""
    for dim_entry in entry.dimension_entries:
        if _symbol(dim_entry.dimension) == symbol:
            stored = dim_entry.stored_size or dim_entry.size
            return int(dim_entry.start), int(dim_entry.size), int(stored)
    return 0, 0, 0


def directory_entry_to_raw(entry) -> RawSubblockDescriptor:
    """Translate a ``czifile.DirectoryEntryDV`` into a raw descriptor."""
    coordinate = {}
    mosaic_index = None
    for dim_entry in entry.dimension_entries:
        symbol = _symbol(dim_entry.dimension)
        if symbol == "M":
            mosaic_index = int(dim_entry.start)
        elif symbol in _COORDINATE_SYMBOLS:
            coordinate[symbol] = int(dim_entry.start)

    x, w, stored_w = _stored_extent(entry, "X")
    y, h, stored_h = _stored_extent(entry, "Y")
    return RawSubblockDescriptor(
        logical_rect=(x, y, w, h),
        physical_size=(stored_w, stored_h),
        pixel_type=entry.pixel_type,
        compression=entry.compression,
        pyramid_type=entry.pyramid_type,
        coordinate=coordinate,
        mosaic_index=mosaic_index,
        file_position=int(entry.file_position),
    )


def restore_channel_order(data: np.ndarray, samples: int) -> np.ndarray:
    """Undo czifile's BGR -> RGB (and BGRA -> RGBA) reordering."""
    if samples not in (3, 4) or data.ndim == 0 or data.shape[-1] != samples:
        return data
    order = [2, 1, 0] if samples == 3 else [2, 1, 0, 3]
    return data[..., order]


def _zstd1_header(payload: bytes) -> tuple[int, bool]:
    """(header size, hi/lo byte packing) of a Zstd1 tile."""
    if not payload:
        raise ValueError("Empty Zstd1 payload")
    size = payload[0]
    if size == 1:
        return 1, False
    if size == 3 and len(payload) >= 3 and payload[1] == 1:
        return 3, bool(payload[2] & 1)
    raise ValueError(f"Unsupported Zstd1 header: {bytes(payload[:size])!r}")


def _unpack_hilo(buffer: bytes) -> bytes:
    # Packed as all low bytes followed by all high bytes.
    packed = np.frombuffer(buffer, dtype=np.uint8)
    if packed.size % 2:
        raise ValueError(f"Hi/lo packed buffer has odd length {packed.size}")
    half = packed.size // 2
    out = np.empty_like(packed)
    out[0::2] = packed[:half]
    out[1::2] = packed[half:]
    return out.tobytes()


def decompress(compression: int, payload: bytes) -> bytes:
    """Pixel bytes of an uncompressed, Zstd0 or Zstd1 tile."""
    if compression == CompressionMode.UNCOMPRESSED:
        return bytes(payload)
    if compression == CompressionMode.ZSTD0:
        return imagecodecs.zstd_decode(payload)
    if compression == CompressionMode.ZSTD1:
        header_size, hilo = _zstd1_header(payload)
        buffer = imagecodecs.zstd_decode(payload[header_size:])
        return _unpack_hilo(buffer) if hilo else buffer
    raise ValueError(f"No direct codec for compression {compression}")


@dataclass(frozen=True)
class SubblockSegment:
    """Byte layout of one subblock segment.

    Attributes:
        entry: the ``czifile`` directory entry of the subblock.
        metadata_offset: file offset of the embedded metadata blob, which is
            followed by the pixel data and then the attachment blob.
    """
    entry: object
    metadata_offset: int
    metadata_size: int
    data_size: int
    attachment_size: int

    @property
    def data_offset(self) -> int:
        return self.metadata_offset + self.metadata_size

    @property
    def attachment_offset(self) -> int:
        return self.data_offset + self.data_size


@dataclass(frozen=True)
class _AttachmentEntry:
    content_guid: bytes
    content_file_type: str
    name: str
    file_position: int


class CzifileHandle:
    """``ContainerHandle`` over an open ``czifile.CziFile``.

    Parameters
    ----------
    czi : czifile.CziFile
        Opened over ``fh``.
    fh : binary file object
        Shared with ``czi``; every read seeks first.
    """

    def __init__(self, czi, fh):
        self._czi = czi
        self._fh = fh
        self._header = FILE_HEADER.unpack(
            self._read_at(self._segment_data_offset(0, b"ZISRAWFILE"), FILE_HEADER.size)
        )
        self._directory = list(czi.subblock_directory)
        self._attachments = self._read_attachment_directory(self._header[10])
        logger.debug(
            "czifile directory: %d subblocks, %d attachments",
            len(self._directory), len(self._attachments),
        )

    def _read_at(self, offset: int, size: int) -> bytes:
        self._fh.seek(offset)
        data = self._fh.read(size)
        if len(data) != size:
            raise OSError(f"Short read at offset {offset}: {len(data)} of {size} bytes")
        return data

    def _segment_data_offset(self, position: int, segment_id: bytes) -> int:
        sid, _, _ = SEGMENT_HEADER.unpack(self._read_at(position, SEGMENT_HEADER.size))
        if sid.rstrip(b"\0") != segment_id:
            raise ValueError(f"Expected {segment_id.decode()} segment at {position}, found {sid!r}")
        return position + SEGMENT_HEADER.size

    def _read_attachment_directory(self, position: int) -> list[_AttachmentEntry]:
        if not position:
            return []
        start = self._segment_data_offset(position, b"ZISRAWATTDIR")
        (count,) = struct.unpack("<i", self._read_at(start, 4))
        data = self._read_at(start + ATTACHMENT_DIRECTORY_HEADER_SIZE, count * ATTACHMENT_ENTRY_A1.size)
        entries = []
        for schema, _, file_position, _, guid, file_type, name in ATTACHMENT_ENTRY_A1.iter_unpack(data):
            if schema != b"A1":
                raise ValueError(f"Invalid attachment entry schema {schema!r}")
            entries.append(_AttachmentEntry(guid, _text(file_type), _text(name), file_position))
        return entries

    def _locate_subblock(self, entry) -> SubblockSegment:
        start = self._segment_data_offset(int(entry.file_position), b"ZISRAWSUBBLOCK")
        head = self._read_at(start, SUBBLOCK_SIZES.size + DIRECTORY_ENTRY_DV.size)
        metadata_size, attachment_size, data_size = SUBBLOCK_SIZES.unpack_from(head)
        schema, *_, dimension_count = DIRECTORY_ENTRY_DV.unpack_from(head, SUBBLOCK_SIZES.size)
        if schema != b"DV" or dimension_count < 0:
            raise ValueError(f"Invalid subblock directory entry at {entry.file_position}")
        if min(metadata_size, attachment_size, data_size) < 0:
            raise ValueError(f"Negative segment size in subblock at {entry.file_position}")
        header_size = max(
            SUBBLOCK_MIN_HEADER_SIZE,
            SUBBLOCK_SIZES.size + DIRECTORY_ENTRY_DV.size + dimension_count * DIMENSION_ENTRY_DV.size,
        )
        return SubblockSegment(entry, start + header_size, metadata_size, data_size, attachment_size)

    def enumerate_subblocks(self, visit: SubblockVisitor) -> None:
        for index, entry in enumerate(self._directory):
            if not visit(index, directory_entry_to_raw(entry)):
                break

    def read_subblock(self, index: int) -> Optional[SubblockSegment]:
        if not 0 <= index < len(self._directory):
            return None
        entry = self._directory[index]
        try:
            return self._locate_subblock(entry)
        except (ValueError, struct.error) as e:
            logger.warning("Subblock %d at offset %d is unreadable: %s", index, entry.file_position, e)
            return None

    def decode_pixels(self, raw: SubblockSegment) -> np.ndarray:
        entry = raw.entry
        pixel_type = PixelType.from_raw(entry.pixel_type)
        compression = int(entry.compression)
        if compression in _DIRECT_CODECS:
            buffer = decompress(compression, self._read_at(raw.data_offset, raw.data_size))
            data = np.frombuffer(buffer, dtype=pixel_type.dtype)
        else:
            data = np.asarray(entry.data_segment().data(resize=False))
            if compression != CompressionMode.JPG_XR:
                data = restore_channel_order(data, pixel_type.samples_per_pixel)

        _, _, height = _stored_extent(entry, "Y")
        _, _, width = _stored_extent(entry, "X")
        if width * height == 0:
            raise ValueError("Subblock has no X/Y extent")
        samples = data.size // (width * height)
        shape = (height, width) if samples == 1 else (height, width, samples)
        return np.ascontiguousarray(data.reshape(shape))

    def read_raw_segment(self, raw: SubblockSegment, kind: SegmentKind) -> bytes:
        if kind == SegmentKind.METADATA:
            return self._read_at(raw.metadata_offset, raw.metadata_size)
        return self._read_at(raw.attachment_offset, raw.attachment_size)

    def read_metadata_xml(self) -> str:
        return _text(self._czi.metadata(raw=True) or "")

    def read_file_header(self) -> RawFileHeader:
        major, minor, _, _, _, file_guid = self._header[:6]
        return RawFileHeader(guid=file_guid, major_version=major, minor_version=minor)

    def enumerate_attachments(self, visit: AttachmentVisitor) -> None:
        for index, entry in enumerate(self._attachments):
            info = RawAttachmentInfo(
                content_guid=entry.content_guid,
                content_file_type=entry.content_file_type[:8],
                name=entry.name,
            )
            if not visit(index, info):
                break

    def read_attachment(self, index: int) -> Optional[bytes]:
        if not 0 <= index < len(self._attachments):
            return None
        position = self._attachments[index].file_position
        try:
            start = self._segment_data_offset(position, b"ZISRAWATTACH")
            (size,) = struct.unpack("<q", self._read_at(start, 8))
        except (ValueError, struct.error) as e:
            logger.warning("Attachment %d at offset %d is unreadable: %s", index, position, e)
            return None
        return self._read_at(start + ATTACHMENT_SEGMENT_HEADER_SIZE, size)

    def close(self) -> None:
        self._czi.close()
        self._fh.close()


class CzifileBackend:
    """Opens ``.czi`` files with ``czifile.CziFile``."""

    name = "czifile"

    def open(self, path: Path) -> CzifileHandle:
        fh = open(path, "rb")
        try:
            czi = czifile.CziFile(fh)
        except Exception:
            fh.close()
            raise
        try:
            return CzifileHandle(czi, fh)
        except Exception:
            czi.close()
            fh.close()
            raise
