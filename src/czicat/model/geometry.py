"""Integer pixel-space value types."""

from typing import NamedTuple, Optional

__all__ = ["Rect", "Size", "Interval", "EMPTY_RECT", "union_rect"]


class Size(NamedTuple):
    """Width and height in pixels."""
    w: int
    h: int


class Rect(NamedTuple):
    """Axis-aligned rectangle ``(x, y, w, h)`` in specimen pixel space."""
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def size(self) -> Size:
        return Size(self.w, self.h)

    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle containing both; empty rectangles are ignored."""
        if other.is_empty():
            return self
        if self.is_empty():
            return other
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)


EMPTY_RECT = Rect(0, 0, 0, 0)


def union_rect(current: Optional[Rect], other: Rect) -> Rect:
    """Fold ``other`` into a running union that may not have started yet."""
    if current is None:
        return other
    return current.union(other)


class Interval(NamedTuple):
    """Half-open integer interval ``[start, end)``."""
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def __contains__(self, value) -> bool:
        return self.start <= value < self.end
