"""Container decode backends.

- base: Protocol every backend implements
- czifile_backend: Backend over the ``czifile`` package (default)
"""

from czicat.backends.base import (
    ContainerBackend,
    ContainerHandle,
    RawAttachmentInfo,
    RawFileHeader,
    RawSubblockDescriptor,
)

__all__ = [
    "ContainerBackend",
    "ContainerHandle",
    "RawAttachmentInfo",
    "RawFileHeader",
    "RawSubblockDescriptor",
    "get_backend",
]


def get_backend(name: str) -> ContainerBackend:
    """Return a backend instance by its configured name."""
    if name == "czifile":
        # czifile pulls in tifffile/imagecodecs; import only when a file is opened
        from czicat.backends.czifile_backend import CzifileBackend
        return CzifileBackend()
    raise ValueError(f"Unknown container backend: {name!r}")
