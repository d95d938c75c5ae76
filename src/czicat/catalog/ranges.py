"""Dimension range table.

Maps each dimension symbol to the half-open interval it occupies across the
whole container. Built by ``DimensionRangeAccumulator`` as a running
reduction while the catalog enumerates subblocks, so no second pass over the
descriptor list is needed.
"""

from typing import Iterator, Mapping, Optional

from czicat.model.enums import COORDINATE_DIMENSIONS, RANGE_DIMENSIONS, Dimension
from czicat.model.geometry import Interval, Rect
from czicat.model.subblock import SubblockDescriptor

__all__ = ["DimensionRangeTable", "DimensionRangeAccumulator"]


class DimensionRangeTable(Mapping):
    """Read-only ``Dimension -> Interval`` mapping.

    Coordinate dimensions appear only if at least one subblock has a position
    in them. ``M`` appears only if some subblock has a mosaic index. ``X`` and
    ``Y`` are always present as ``[0, width)`` and ``[0, height)`` of the
    native-resolution bounding box.

    Keys may be given as ``Dimension`` members or one-letter strings.
    Iteration follows the fixed order X Y Z C T R S I H V B M.
    """

    def __init__(self, intervals: Mapping[Dimension, Interval]):
        self._intervals = {
            dim: intervals[dim] for dim in RANGE_DIMENSIONS if dim in intervals
        }

    def __getitem__(self, dimension) -> Interval:
        return self._intervals[Dimension.parse(dimension)]

    def __contains__(self, dimension) -> bool:
        try:
            return Dimension.parse(dimension) in self._intervals
        except ValueError:
            return False

    def __iter__(self) -> Iterator[Dimension]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def get(self, dimension, default=None) -> Optional[Interval]:
        if dimension in self:
            return self[dimension]
        return default

    def to_dict(self) -> dict[str, tuple[int, int]]:
        return {dim.value: tuple(interval) for dim, interval in self._intervals.items()}

    def __repr__(self) -> str:
        body = ", ".join(f"{dim.value}:[{iv.start},{iv.end})" for dim, iv in self._intervals.items())
        return f"DimensionRangeTable({body})"


class DimensionRangeAccumulator:
    """Streaming min/max reduction over subblock coordinates."""

    def __init__(self):
        self._low: dict[Dimension, int] = {}
        self._high: dict[Dimension, int] = {}

    def _observe(self, dim: Dimension, position: int) -> None:
        if dim in self._low:
            self._low[dim] = min(self._low[dim], position)
            self._high[dim] = max(self._high[dim], position + 1)
        else:
            self._low[dim] = position
            self._high[dim] = position + 1

    def add(self, descriptor: SubblockDescriptor) -> None:
        for dim, position in descriptor.coordinate.items():
            self._observe(dim, position)
        if descriptor.mosaic_index is not None:
            self._observe(Dimension.M, descriptor.mosaic_index)

    def finish(self, native_bounding_box: Optional[Rect]) -> DimensionRangeTable:
        """Freeze into a table; X/Y come from the whole-container native box."""
        intervals = {
            dim: Interval(self._low[dim], self._high[dim])
            for dim in COORDINATE_DIMENSIONS + (Dimension.M,)
            if dim in self._low
        }
        width = native_bounding_box.w if native_bounding_box is not None else 0
        height = native_bounding_box.h if native_bounding_box is not None else 0
        intervals[Dimension.X] = Interval(0, width)
        intervals[Dimension.Y] = Interval(0, height)
        return DimensionRangeTable(intervals)
