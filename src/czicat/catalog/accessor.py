"""Bounded retrieval of one subblock's pixels, metadata and attachment bytes.

Every copy follows the same two-call protocol: ask for the size, then copy
into a caller-supplied buffer. A copy either transfers the whole payload or
nothing; a destination that is too small yields ``0`` instead of an
exception, so the caller can reallocate and retry.
"""

import logging
import weakref
from typing import Optional

import numpy as np
import xarray as xr

from czicat.errors import Closed, DecodeFailed
from czicat.model.enums import PixelType, SegmentKind
from czicat.model.subblock import SubblockDescriptor

__all__ = ["SubblockAccessor", "bounded_copy"]

logger = logging.getLogger(__name__)


def _writable_bytes(destination) -> np.ndarray:
    try:
        view = np.frombuffer(destination, dtype=np.uint8)
    except (TypeError, ValueError, BufferError) as exc:
        raise TypeError(f"Destination must be a contiguous buffer, got {type(destination).__name__}") from exc
    if not view.flags.writeable:
        raise TypeError("Destination buffer is read-only")
    return view


def bounded_copy(source, destination, capacity: Optional[int] = None) -> int:
    """Copy all of ``source`` into ``destination`` or nothing.

    Parameters
    ----------
    source : bytes-like or numpy array
        Payload; numpy arrays are copied as their raw C-order bytes.
    destination : writable buffer
        ``bytearray``, writable ``memoryview`` or contiguous numpy array.
    capacity : int, optional
        Usable bytes of ``destination``. The effective capacity never exceeds
        the destination's real size.

    Returns
    -------
    int
        Number of bytes copied: ``len(source)`` on success, ``0`` when the
        effective capacity is smaller than the payload.
    """
    if isinstance(source, np.ndarray):
        payload = np.ascontiguousarray(source).reshape(-1).view(np.uint8)
    else:
        payload = np.frombuffer(bytes(source), dtype=np.uint8)
    target = _writable_bytes(destination)

    available = target.size if capacity is None else min(max(int(capacity), 0), target.size)
    if available < payload.size:
        return 0
    target[:payload.size] = payload
    return int(payload.size)


class SubblockAccessor:
    """Short-lived handle bound to one catalog index.

    Holds a weak, non-owning reference to its catalog and never opens the
    container itself. Every operation checks that the catalog is still open
    and raises ``Closed`` otherwise. Pixel decoding is lazy and happens at
    most once per accessor until ``release()``.

    Examples
    --------
    >>> with ContainerCatalog.open("slide.czi") as catalog:
    ...     sb = catalog.subblock(0)
    ...     buf = bytearray(sb.decoded_pixel_byte_size())
    ...     assert sb.copy_pixels(buf) == len(buf)
    """

    def __init__(self, catalog, descriptor: SubblockDescriptor, raw):
        self._catalog_ref = weakref.ref(catalog)
        self._descriptor = descriptor
        self._raw = raw
        self._pixels: Optional[np.ndarray] = None
        self._segments: dict[SegmentKind, bytes] = {}

    @property
    def descriptor(self) -> SubblockDescriptor:
        self._live_handle()
        return self._descriptor

    @property
    def catalog_index(self) -> int:
        return self._descriptor.catalog_index

    def _live_handle(self):
        catalog = self._catalog_ref()
        if catalog is None or catalog.closed:
            raise Closed(f"Subblock {self.catalog_index} used after its catalog was closed")
        return catalog._require_handle()

    def _validated(self, pixels) -> np.ndarray:
        pixels = np.asarray(pixels)
        pixel_type = self._descriptor.pixel_type
        if pixel_type == PixelType.INVALID:
            raise DecodeFailed(f"Subblock {self.catalog_index} has an invalid pixel type")
        if pixels.ndim not in (2, 3):
            raise DecodeFailed(
                f"Subblock {self.catalog_index} decoded to {pixels.ndim} dims, expected 2 or 3"
            )
        height, width = pixels.shape[:2]
        expected = width * height * pixel_type.bytes_per_pixel
        if pixels.nbytes != expected:
            raise DecodeFailed(
                f"Subblock {self.catalog_index} decoded to {pixels.nbytes} bytes, "
                f"expected {expected} for {width}x{height} {pixel_type.name}"
            )
        return np.ascontiguousarray(pixels)

    def _decoded(self) -> np.ndarray:
        handle = self._live_handle()
        if self._pixels is None:
            try:
                pixels = handle.decode_pixels(self._raw)
            except Exception as exc:
                raise DecodeFailed(
                    f"Subblock {self.catalog_index} ({self._descriptor.compression.name}) "
                    f"could not be decoded: {exc}"
                ) from exc
            self._pixels = self._validated(pixels)
            logger.debug("Decoded subblock %d: %d bytes", self.catalog_index, self._pixels.nbytes)
        return self._pixels

    def decoded_pixel_byte_size(self) -> int:
        """``width * height * bytes_per_pixel`` of the decoded tile.

        Raises
        ------
        DecodeFailed
            If the codec fails or produces a buffer inconsistent with the
            pixel type.
        Closed
            If the catalog was closed.
        """
        return int(self._decoded().nbytes)

    def copy_pixels(self, destination, capacity: Optional[int] = None) -> int:
        """Copy the decoded tile; returns bytes copied or 0 if it does not fit."""
        return bounded_copy(self._decoded(), destination, capacity)

    def _segment(self, kind) -> bytes:
        kind = SegmentKind(kind)
        handle = self._live_handle()
        if kind not in self._segments:
            self._segments[kind] = bytes(handle.read_raw_segment(self._raw, kind))
        return self._segments[kind]

    def raw_segment_size(self, kind) -> int:
        """Size of the embedded metadata or attachment blob (0 when absent)."""
        return len(self._segment(kind))

    def copy_raw_segment(self, kind, destination, capacity: Optional[int] = None) -> int:
        """Copy a raw segment; returns bytes copied or 0 if it does not fit."""
        return bounded_copy(self._segment(kind), destination, capacity)

    def pixels(self) -> np.ndarray:
        """Copy of the decoded tile as a ``(height, width[, samples])`` array."""
        return self._decoded().copy()

    def to_dataarray(self) -> xr.DataArray:
        """Decoded tile labelled with logical pixel-space ``y``/``x`` coordinates.

        For pyramid tiles the coordinate step is the downscale factor, so the
        array spans the tile's logical rectangle.
        """
        data = self.pixels()
        desc = self._descriptor
        rect = desc.logical_rect
        height, width = data.shape[:2]
        step_y = rect.h / height if height else 1.0
        step_x = rect.w / width if width else 1.0
        dims = ("y", "x") if data.ndim == 2 else ("y", "x", "sample")
        attrs = {
            "catalog_index": desc.catalog_index,
            "pixel_type": desc.pixel_type.name,
            "compression": desc.compression.name,
            "pyramid_type": desc.pyramid_type.name,
            "mosaic_index": -1 if desc.mosaic_index is None else desc.mosaic_index,
        }
        attrs.update(desc.coordinate.to_dict())
        return xr.DataArray(
            data,
            dims=dims,
            coords={
                "y": rect.y + np.arange(height) * step_y,
                "x": rect.x + np.arange(width) * step_x,
            },
            attrs=attrs,
            name=f"subblock_{desc.catalog_index}",
        )

    def release(self) -> None:
        """Drop memoized pixel and segment buffers; safe to call repeatedly."""
        self._pixels = None
        self._segments.clear()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()

    def __repr__(self) -> str:
        return f"SubblockAccessor(index={self.catalog_index}, decoded={self._pixels is not None})"
