"""Build and query the subblock catalog of one open container.

``ContainerCatalog.open`` enumerates the container's subblocks exactly once.
During that single pass it converts each backend entry into an immutable
``SubblockDescriptor`` and feeds it to the dimension-range and scene
bounding-box accumulators, so every query afterwards is answered from
in-memory tables.

Key capabilities:
- Dimension ranges (coordinate dims, M, and X/Y of the native bounding box)
- Per-scene native and coarsest-layer bounding boxes
- Full and level-0 subblock lists with dense catalog indices
- Random access to one subblock through a ``SubblockAccessor``
- Whole-file metadata XML, file header and attachments
"""

import logging
import operator
import weakref
from pathlib import Path
from typing import Optional

from czicat.backends import ContainerBackend, ContainerHandle, RawSubblockDescriptor, get_backend
from czicat.catalog.accessor import SubblockAccessor
from czicat.catalog.bounding_boxes import (
    SceneBoundingBox,
    SceneBoundingBoxAccumulator,
    SceneBoundingBoxTable,
)
from czicat.catalog.ranges import DimensionRangeAccumulator, DimensionRangeTable
from czicat.contracts import assert_catalog_consistent
from czicat.errors import Closed, NotFound, OpenFailed
from czicat.model import (
    FILE_POSITION_UNAVAILABLE,
    AttachmentDescriptor,
    CompressionMode,
    Coordinate,
    FileHeader,
    Guid,
    PixelType,
    PyramidType,
    Rect,
    Size,
    SubblockDescriptor,
)
from czicat.schemas import InternalConfig, resolve_config

__all__ = ['ContainerCatalog', 'descriptor_from_raw']

logger = logging.getLogger(__name__)


def descriptor_from_raw(raw: RawSubblockDescriptor, catalog_index: int) -> SubblockDescriptor:
    """Map a backend directory entry onto a catalog descriptor."""
    mosaic_index = raw.mosaic_index
    if mosaic_index is not None and mosaic_index < 0:
        mosaic_index = None
    file_position = raw.file_position
    if file_position is None:
        file_position = FILE_POSITION_UNAVAILABLE
    return SubblockDescriptor(
        coordinate=Coordinate.from_pairs(raw.coordinate.items()),
        mosaic_index=mosaic_index,
        logical_rect=Rect(*(int(v) for v in raw.logical_rect)),
        physical_size=Size(*(int(v) for v in raw.physical_size)),
        pixel_type=PixelType.from_raw(raw.pixel_type),
        compression=CompressionMode.from_raw(raw.compression),
        pyramid_type=PyramidType.from_raw(raw.pyramid_type),
        file_position=int(file_position),
        catalog_index=catalog_index,
    )


class ContainerCatalog:
    """In-memory catalog of every subblock in one container.

    Owns the backend handle exclusively. Accessors returned by
    ``subblock()`` hold only a weak back-reference and fail with ``Closed``
    once the catalog is closed.

    Notes
    -----
    - Not thread-safe: use one catalog per thread, or serialize calls
    - Construct with ``ContainerCatalog.open``, not the initializer
    - Usable as a context manager; ``close()`` is idempotent
    - A catalog garbage-collected without ``close()`` still closes its handle

    Examples
    --------
    >>> with ContainerCatalog.open("slide.czi") as catalog:
    ...     print(catalog.dimension_ranges())
    ...     box = catalog.scene_bounding_box(0)
    ...     tiles = catalog.subblocks_level0()
    """

    def __init__(
        self,
        path: Path,
        handle: ContainerHandle,
        descriptors: tuple[SubblockDescriptor, ...],
        backend_indices: tuple[int, ...],
        ranges: DimensionRangeTable,
        scenes: SceneBoundingBoxTable,
        config: InternalConfig,
    ):
        self._path = path
        self._handle: Optional[ContainerHandle] = handle
        self._descriptors = descriptors
        self._backend_indices = backend_indices
        self._ranges = ranges
        self._scenes = scenes
        self._config = config
        self._level0: Optional[tuple[SubblockDescriptor, ...]] = None
        self._attachments: Optional[tuple[AttachmentDescriptor, ...]] = None
        self._attachment_indices: tuple[int, ...] = ()
        self._file_header: Optional[FileHeader] = None
        # Closes the handle if the catalog is collected without close().
        self._finalizer = weakref.finalize(self, handle.close)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        path,
        backend: Optional[ContainerBackend] = None,
        config: Optional[InternalConfig] = None,
    ) -> "ContainerCatalog":
        """Open a container and build its catalog in one enumeration pass.

        Parameters
        ----------
        path : str or Path
            Container file. ``~`` is expanded.
        backend : ContainerBackend, optional
            Decode collaborator. Defaults to the one named by
            ``config.reader.backend``.
        config : InternalConfig, optional
            Runtime configuration; ``resolve_config()`` defaults when omitted.

        Returns
        -------
        ContainerCatalog

        Raises
        ------
        OpenFailed
            If the path does not exist or the backend rejects the file.
        OSError
            If reading the subblock directory fails part way. The handle is
            closed before the error propagates.
        """
        if config is None:
            config = resolve_config()
        path = Path(path).expanduser()
        if not path.is_file():
            logger.error("Container not found: %s", path)
            raise OpenFailed(path, "no such file")
        path = path.resolve()

        if backend is None:
            backend = get_backend(config.reader.backend)

        try:
            handle = backend.open(path)
        except Exception as e:
            logger.error("Backend %s failed to open %s: %s", getattr(backend, "name", backend), path, e)
            raise OpenFailed(path, str(e)) from e

        try:
            catalog = cls._build(path, handle, config)
        except Exception:
            handle.close()
            raise

        logger.info(
            "Opened %s: %d subblocks (%d scenes)",
            path.name, catalog.subblock_count(), len(catalog._scenes),
        )
        return catalog

    @classmethod
    def _build(cls, path: Path, handle: ContainerHandle, config: InternalConfig) -> "ContainerCatalog":
        descriptors: list[SubblockDescriptor] = []
        backend_indices: list[int] = []
        ranges = DimensionRangeAccumulator()
        boxes = SceneBoundingBoxAccumulator()

        def visit(backend_index: int, raw: RawSubblockDescriptor) -> bool:
            descriptor = descriptor_from_raw(raw, len(descriptors))
            descriptors.append(descriptor)
            backend_indices.append(backend_index)
            ranges.add(descriptor)
            boxes.add(descriptor)
            return True

        handle.enumerate_subblocks(visit)
        logger.debug("Enumerated %d subblocks from %s", len(descriptors), path.name)

        catalog = cls(
            path=path,
            handle=handle,
            descriptors=tuple(descriptors),
            backend_indices=tuple(backend_indices),
            ranges=ranges.finish(boxes.native_bounding_box),
            scenes=boxes.finish(),
            config=config,
        )
        if config.catalog.verify_contracts:
            assert_catalog_consistent(catalog._descriptors, catalog.subblocks_level0(), catalog._ranges)
        return catalog

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _check_open(self) -> None:
        if self._handle is None:
            raise Closed(f"Catalog for {self._path.name} is closed")

    def _require_handle(self) -> ContainerHandle:
        self._check_open()
        return self._handle

    def close(self) -> None:
        """Release the backend handle. Safe to call more than once."""
        if self._handle is None:
            return
        self._handle = None
        self._finalizer()
        logger.info("Closed %s", self._path.name)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{len(self._descriptors)} subblocks"
        return f"ContainerCatalog({str(self._path)!r}, {state})"

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def dimension_ranges(self) -> DimensionRangeTable:
        self._check_open()
        return self._ranges

    def scene_bounding_boxes(self) -> SceneBoundingBoxTable:
        self._check_open()
        return self._scenes

    def scene_bounding_box(self, scene: int) -> Optional[SceneBoundingBox]:
        """Native and coarsest-layer bounding boxes of one scene.

        Returns None when no subblock carries scene index ``scene``.
        """
        self._check_open()
        return self._scenes.lookup(scene)

    def subblocks(self) -> tuple[SubblockDescriptor, ...]:
        """All descriptors in enumeration order; ``result[i].catalog_index == i``."""
        self._check_open()
        return self._descriptors

    def subblocks_level0(self) -> tuple[SubblockDescriptor, ...]:
        """Descriptors of native-resolution tiles that are not pyramid tiles.

        Order is preserved and catalog indices refer into ``subblocks()``.
        """
        self._check_open()
        if self._level0 is None:
            self._level0 = tuple(d for d in self._descriptors if d.is_level0)
        return self._level0

    def subblock_count(self) -> int:
        self._check_open()
        return len(self._descriptors)

    def __len__(self) -> int:
        return self.subblock_count()

    def descriptor(self, index: int) -> SubblockDescriptor:
        self._check_open()
        index = operator.index(index)
        if not 0 <= index < len(self._descriptors):
            raise NotFound(f"Subblock index {index} out of range [0, {len(self._descriptors)})")
        return self._descriptors[index]

    # ------------------------------------------------------------------
    # Subblock access
    # ------------------------------------------------------------------

    def subblock(self, index: int) -> SubblockAccessor:
        """Accessor for the subblock at ``index``.

        Raises
        ------
        NotFound
            If ``index`` is out of range or the subblock's data cannot be
            located in the file.
        Closed
            If the catalog was closed.
        """
        descriptor = self.descriptor(index)
        backend_index = self._backend_indices[descriptor.catalog_index]
        try:
            raw = self._handle.read_subblock(backend_index)
        except OSError as e:
            raise NotFound(f"Subblock {descriptor.catalog_index} cannot be read: {e}") from e
        if raw is None:
            raise NotFound(f"Subblock {descriptor.catalog_index} has no readable data")
        return SubblockAccessor(self, descriptor, raw)

    # ------------------------------------------------------------------
    # Whole-file reads
    # ------------------------------------------------------------------

    def metadata_xml(self) -> str:
        """The container's XML metadata document, unparsed."""
        self._check_open()
        return self._handle.read_metadata_xml()

    def file_header(self) -> FileHeader:
        self._check_open()
        if self._file_header is None:
            raw = self._handle.read_file_header()
            self._file_header = FileHeader(
                guid=Guid(bytes(raw.guid)),
                major_version=int(raw.major_version),
                minor_version=int(raw.minor_version),
            )
        return self._file_header

    def attachments(self) -> tuple[AttachmentDescriptor, ...]:
        """Attachment directory; enumerated on first use."""
        self._check_open()
        if self._attachments is None:
            entries: list[AttachmentDescriptor] = []
            indices: list[int] = []

            def visit(backend_index, info) -> bool:
                entries.append(AttachmentDescriptor(
                    content_guid=Guid(bytes(info.content_guid)),
                    content_file_type=info.content_file_type,
                    name=info.name,
                    index=len(entries),
                ))
                indices.append(backend_index)
                return True

            self._handle.enumerate_attachments(visit)
            self._attachments = tuple(entries)
            self._attachment_indices = tuple(indices)
            logger.debug("%s: %d attachments", self._path.name, len(entries))
        return self._attachments

    def read_attachment(self, index: int) -> bytes:
        """Data of the attachment at ``index`` of ``attachments()``."""
        attachments = self.attachments()
        index = operator.index(index)
        if not 0 <= index < len(attachments):
            raise NotFound(f"Attachment index {index} out of range [0, {len(attachments)})")
        data = self._handle.read_attachment(self._attachment_indices[index])
        if data is None:
            raise NotFound(f"Attachment {index} has no readable data")
        return bytes(data)
