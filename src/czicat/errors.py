"""Catalog error kinds.

Every failure a caller is expected to handle derives from ``CatalogError``.
A short destination buffer is not an error: copy operations report it by
returning ``0``.

Key distinction:
- OpenFailed: the container could not be opened (fatal to that catalog)
- NotFound: an index or scene lookup missed (normal outcome)
- DecodeFailed: the pixel codec could not produce a buffer
- Closed: the catalog was used after ``close()`` (programmer error)
"""


class CatalogError(RuntimeError):
    """Base class for all catalog errors."""


class OpenFailed(CatalogError):
    """Raised when a path does not resolve to a readable container."""

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Cannot open container {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotFound(CatalogError, LookupError):
    """Raised when a subblock, attachment or scene index is not present."""


class DecodeFailed(CatalogError):
    """Raised when a subblock's pixel data could not be decoded."""


class Closed(CatalogError):
    """Raised when a catalog or one of its accessors is used after close()."""
