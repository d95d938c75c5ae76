"""Handle-based boundary API for foreign callers.

Catalogs and subblock accessors are referred to by positive integer handles
(``0`` is the null handle). No method raises: each returns an ``ErrorCode``
first, followed by its value when it produces one. Structured results are
fixed-layout numpy records from ``czicat.interop.records``.

Examples
--------
>>> api = CatalogBoundary()
>>> code, handle = api.open("slide.czi")
>>> code, count = api.subblock_count(handle)
>>> code, sb = api.acquire_subblock(handle, 0)
>>> code, size = api.pixel_size(sb)
>>> buf = bytearray(size)
>>> code, copied = api.copy_pixels(sb, buf)
>>> api.release_subblock(sb)
>>> api.close(handle)
"""

import functools
import itertools
import logging
from enum import IntEnum
from typing import Optional

import numpy as np

from czicat.backends import ContainerBackend
from czicat.catalog import ContainerCatalog, SubblockAccessor, bounded_copy
from czicat.errors import Closed, DecodeFailed, NotFound, OpenFailed
from czicat.interop.records import (
    dimension_ranges_record,
    file_header_record,
    fill_subblock_records,
    scene_bounding_box_record,
)
from czicat.schemas import InternalConfig

__all__ = ['ErrorCode', 'CatalogBoundary', 'NULL_HANDLE']

logger = logging.getLogger(__name__)

NULL_HANDLE = 0


class ErrorCode(IntEnum):
    OK = 0
    OPEN_FAILED = 1
    NOT_FOUND = 2
    DECODE_FAILED = 3
    CLOSED = 4
    INVALID_HANDLE = 5
    IO_ERROR = 6
    INTERNAL = 7


class InvalidHandle(LookupError):
    """Raised internally when a handle is null, unknown or already released."""


# Order matters: NotFound is also a LookupError.
_ERROR_CODES = (
    (OpenFailed, ErrorCode.OPEN_FAILED),
    (NotFound, ErrorCode.NOT_FOUND),
    (DecodeFailed, ErrorCode.DECODE_FAILED),
    (Closed, ErrorCode.CLOSED),
    (InvalidHandle, ErrorCode.INVALID_HANDLE),
    (OSError, ErrorCode.IO_ERROR),
)


def error_code_for(exc: BaseException) -> ErrorCode:
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL


def _boundary(returns_value: bool = True, default=None):
    """Translate exceptions raised by a boundary method into error codes."""
    def decorate(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                value = method(self, *args, **kwargs)
            except Exception as e:
                code = error_code_for(e)
                logger.exception("%s failed with %s", method.__name__, code.name)
                return (code, default) if returns_value else code
            return (ErrorCode.OK, value) if returns_value else ErrorCode.OK
        return wrapper
    return decorate


class CatalogBoundary:
    """Integer-handle facade over ``ContainerCatalog`` and ``SubblockAccessor``.

    Parameters
    ----------
    backend : ContainerBackend, optional
        Passed to every ``ContainerCatalog.open``.
    config : InternalConfig, optional
        Passed to every ``ContainerCatalog.open``.

    Notes
    -----
    - Closing a catalog keeps its handle valid; later calls report ``CLOSED``
    - Releasing an accessor retires its handle; later calls report
      ``INVALID_HANDLE``
    - Not thread-safe, like the catalog it wraps
    """

    def __init__(self, backend: Optional[ContainerBackend] = None, config: Optional[InternalConfig] = None):
        self._backend = backend
        self._config = config
        self._next_handle = itertools.count(1)
        self._catalogs: dict[int, ContainerCatalog] = {}
        self._accessors: dict[int, SubblockAccessor] = {}
        self._metadata_xml: dict[int, bytes] = {}

    def _catalog(self, handle: int) -> ContainerCatalog:
        try:
            return self._catalogs[handle]
        except KeyError:
            raise InvalidHandle(f"Unknown catalog handle {handle}") from None

    def _accessor(self, handle: int) -> SubblockAccessor:
        try:
            return self._accessors[handle]
        except KeyError:
            raise InvalidHandle(f"Unknown subblock handle {handle}") from None

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @_boundary(default=NULL_HANDLE)
    def open(self, path) -> int:
        catalog = ContainerCatalog.open(path, backend=self._backend, config=self._config)
        handle = next(self._next_handle)
        self._catalogs[handle] = catalog
        return handle

    @_boundary(returns_value=False)
    def close(self, handle: int) -> None:
        self._catalog(handle).close()
        self._metadata_xml.pop(handle, None)

    @_boundary()
    def dimension_ranges(self, handle: int) -> np.ndarray:
        return dimension_ranges_record(self._catalog(handle).dimension_ranges())

    @_boundary()
    def _scene_box(self, handle: int, scene: int):
        return self._catalog(handle).scene_bounding_box(scene)

    def scene_bounding_box(self, handle: int, scene: int) -> tuple[ErrorCode, Optional[np.ndarray]]:
        """NOT_FOUND with a ``found == 0`` record when the scene is absent."""
        code, box = self._scene_box(handle, scene)
        if code != ErrorCode.OK:
            return code, None
        if box is None:
            return ErrorCode.NOT_FOUND, scene_bounding_box_record(None)
        return code, scene_bounding_box_record(box)

    @_boundary(default=0)
    def subblock_count(self, handle: int) -> int:
        return self._catalog(handle).subblock_count()

    @_boundary()
    def file_header(self, handle: int) -> np.ndarray:
        return file_header_record(self._catalog(handle).file_header())

    @_boundary(default=0)
    def copy_subblocks(self, handle: int, destination: np.ndarray) -> int:
        """Fill ``destination`` with descriptor records; returns records written."""
        return fill_subblock_records(self._catalog(handle).subblocks(), destination)

    @_boundary(default=0)
    def metadata_xml_size(self, handle: int) -> int:
        return len(self._xml_bytes(handle))

    @_boundary(default=0)
    def copy_metadata_xml(self, handle: int, destination, capacity: Optional[int] = None) -> int:
        return bounded_copy(self._xml_bytes(handle), destination, capacity)

    def _xml_bytes(self, handle: int) -> bytes:
        catalog = self._catalog(handle)
        if catalog.closed:
            raise Closed("Catalog is closed")
        if handle not in self._metadata_xml:
            self._metadata_xml[handle] = catalog.metadata_xml().encode("utf-8")
        return self._metadata_xml[handle]

    # ------------------------------------------------------------------
    # Subblocks
    # ------------------------------------------------------------------

    @_boundary(default=NULL_HANDLE)
    def acquire_subblock(self, handle: int, index: int) -> int:
        accessor = self._catalog(handle).subblock(index)
        sb_handle = next(self._next_handle)
        self._accessors[sb_handle] = accessor
        return sb_handle

    @_boundary(returns_value=False)
    def release_subblock(self, sb_handle: int) -> None:
        self._accessor(sb_handle).release()
        del self._accessors[sb_handle]

    @_boundary(default=0)
    def pixel_size(self, sb_handle: int) -> int:
        return self._accessor(sb_handle).decoded_pixel_byte_size()

    @_boundary(default=0)
    def copy_pixels(self, sb_handle: int, destination, capacity: Optional[int] = None) -> int:
        return self._accessor(sb_handle).copy_pixels(destination, capacity)

    @_boundary(default=0)
    def segment_size(self, sb_handle: int, kind) -> int:
        return self._accessor(sb_handle).raw_segment_size(kind)

    @_boundary(default=0)
    def copy_segment(self, sb_handle: int, kind, destination, capacity: Optional[int] = None) -> int:
        return self._accessor(sb_handle).copy_raw_segment(kind, destination, capacity)
