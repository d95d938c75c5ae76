"""`czicat` - subblock catalog for tiled, pyramidal CZI image containers.

Subpackages:
- model: Coordinates, geometry, enum tables, descriptors
- backends: Container decode collaborators (czifile)
- catalog: ContainerCatalog, SubblockAccessor, range and bounding-box tables
- interop: Handle-based boundary API with fixed-layout records
- schemas: Configuration layers
- cli: Command-line inspector
"""

from czicat.catalog import ContainerCatalog, SubblockAccessor
from czicat.errors import CatalogError, OpenFailed, NotFound, DecodeFailed, Closed

__version__ = "0.1.0"

__all__ = [
    "ContainerCatalog",
    "SubblockAccessor",
    "CatalogError",
    "OpenFailed",
    "NotFound",
    "DecodeFailed",
    "Closed",
]


def open_container(path, **kwargs) -> ContainerCatalog:
    """Open a container and build its catalog. See ``ContainerCatalog.open``."""
    return ContainerCatalog.open(path, **kwargs)
