"""Sparse subblock coordinates.

A coordinate holds at most one position for each of the nine coordinate
dimensions. A dimension without a position is *undefined*, which is a
different state from position zero.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from czicat.model.enums import COORDINATE_DIMENSIONS, Dimension

__all__ = ["Coordinate"]


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Fixed record of optional positions, one slot per coordinate dimension.

    Examples
    --------
    >>> c = Coordinate.from_pairs([("C", 1), ("Z", 4)])
    >>> c.get("Z"), c.get("T")
    (4, None)
    >>> c == Coordinate(z=4, c=1)
    True
    """
    z: Optional[int] = None
    c: Optional[int] = None
    t: Optional[int] = None
    r: Optional[int] = None
    s: Optional[int] = None
    i: Optional[int] = None
    h: Optional[int] = None
    v: Optional[int] = None
    b: Optional[int] = None

    @classmethod
    def from_pairs(cls, pairs: Iterable) -> "Coordinate":
        """Build from ``(dimension, position)`` pairs in any order.

        Raises
        ------
        ValueError
            If a dimension is repeated or is not a coordinate dimension.
        """
        values = {}
        for dim, position in pairs:
            dim = Dimension.parse(dim)
            if dim.is_synthetic:
                raise ValueError(f"{dim.value} is not a coordinate dimension")
            slot = dim.value.lower()
            if slot in values:
                raise ValueError(f"Dimension {dim.value} given more than once")
            values[slot] = int(position)
        return cls(**values)

    def get(self, dimension) -> Optional[int]:
        """Position in ``dimension``, or None when undefined."""
        dim = Dimension.parse(dimension)
        if dim.is_synthetic:
            raise ValueError(f"{dim.value} is not a coordinate dimension")
        return getattr(self, dim.value.lower())

    def is_defined(self, dimension) -> bool:
        return self.get(dimension) is not None

    def items(self) -> Iterator[tuple[Dimension, int]]:
        """Defined ``(dimension, position)`` pairs in Z C T R S I H V B order."""
        for dim in COORDINATE_DIMENSIONS:
            position = getattr(self, dim.value.lower())
            if position is not None:
                yield dim, position

    def to_dict(self) -> dict[str, int]:
        return {dim.value: position for dim, position in self.items()}

    def __str__(self) -> str:
        return "".join(f"{dim.value}{position}" for dim, position in self.items())
