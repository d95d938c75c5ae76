"""16-byte identifiers stored in file headers and attachment entries."""

import uuid
from dataclasses import dataclass

__all__ = ["Guid"]


@dataclass(frozen=True, slots=True)
class Guid:
    """GUID kept as its 16 raw bytes in file order.

    The file stores Windows-style GUIDs: Data1 (uint32), Data2 and Data3
    (uint16) little-endian, followed by the 8 bytes of Data4. Equality is
    byte-wise over all 16 bytes.
    """
    raw: bytes = bytes(16)

    def __post_init__(self):
        if len(self.raw) != 16:
            raise ValueError(f"GUID needs 16 bytes, got {len(self.raw)}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def parse(cls, text: str) -> "Guid":
        """Inverse of ``str()``; braces and upper case are accepted."""
        return cls(uuid.UUID(text.strip().strip("{}")).bytes_le)

    @classmethod
    def from_uuid(cls, value: uuid.UUID) -> "Guid":
        """From a UUID built over the raw file bytes (``uuid.UUID(bytes=raw)``)."""
        return cls(value.bytes)

    @property
    def data1(self) -> int:
        return int.from_bytes(self.raw[0:4], "little")

    @property
    def data2(self) -> int:
        return int.from_bytes(self.raw[4:6], "little")

    @property
    def data3(self) -> int:
        return int.from_bytes(self.raw[6:8], "little")

    @property
    def data4(self) -> bytes:
        return self.raw[8:16]

    def is_null(self) -> bool:
        return not any(self.raw)

    def __str__(self) -> str:
        return str(uuid.UUID(bytes_le=self.raw))
