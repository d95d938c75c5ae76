"""Per-scene bounding boxes.

For every scene index observed during enumeration the table keeps two union
rectangles: one over native-resolution tiles and one over the tiles of the
coarsest pyramid layer seen in that scene. Unions are idempotent, so
duplicate tile coverage does not change the result.
"""

from typing import Iterator, Mapping, NamedTuple, Optional

from czicat.model.geometry import EMPTY_RECT, Rect, union_rect
from czicat.model.subblock import SubblockDescriptor

__all__ = ["SceneBoundingBox", "SceneBoundingBoxTable", "SceneBoundingBoxAccumulator"]


class SceneBoundingBox(NamedTuple):
    """Native-resolution and coarsest-layer union rectangles of one scene.

    ``native`` is an empty rectangle when the scene only holds pyramid tiles.
    """
    native: Rect
    coarsest: Rect


class SceneBoundingBoxTable(Mapping):
    """Sparse read-only ``scene index -> SceneBoundingBox`` mapping."""

    def __init__(self, boxes: Mapping[int, SceneBoundingBox]):
        self._boxes = dict(sorted(boxes.items()))

    def __getitem__(self, scene: int) -> SceneBoundingBox:
        return self._boxes[scene]

    def __iter__(self) -> Iterator[int]:
        return iter(self._boxes)

    def __len__(self) -> int:
        return len(self._boxes)

    def lookup(self, scene: int) -> Optional[SceneBoundingBox]:
        """Bounding boxes of ``scene``, or None when no tile carries it."""
        return self._boxes.get(scene)

    def __repr__(self) -> str:
        return f"SceneBoundingBoxTable({self._boxes!r})"


class _SceneAccumulator:
    __slots__ = ("native", "coarsest", "coarsest_factor")

    def __init__(self):
        self.native: Optional[Rect] = None
        self.coarsest: Optional[Rect] = None
        self.coarsest_factor = 0


class SceneBoundingBoxAccumulator:
    """Streaming union of tile rectangles, grouped by scene.

    Tiles without a scene position contribute only to the whole-container
    native bounding box.
    """

    def __init__(self):
        self._scenes: dict[int, _SceneAccumulator] = {}
        self._native_total: Optional[Rect] = None

    def add(self, descriptor: SubblockDescriptor) -> None:
        rect = descriptor.logical_rect
        factor = descriptor.downscale_factor
        native = descriptor.is_native_resolution
        if native:
            self._native_total = union_rect(self._native_total, rect)

        scene = descriptor.scene
        if scene is None:
            return
        acc = self._scenes.get(scene)
        if acc is None:
            acc = self._scenes[scene] = _SceneAccumulator()

        if native:
            acc.native = union_rect(acc.native, rect)
        if factor > acc.coarsest_factor:
            acc.coarsest = rect
            acc.coarsest_factor = factor
        elif factor == acc.coarsest_factor:
            acc.coarsest = union_rect(acc.coarsest, rect)

    @property
    def native_bounding_box(self) -> Optional[Rect]:
        """Union over all native-resolution tiles, or None if there were none."""
        return self._native_total

    def finish(self) -> SceneBoundingBoxTable:
        return SceneBoundingBoxTable({
            scene: SceneBoundingBox(
                native=acc.native if acc.native is not None else EMPTY_RECT,
                coarsest=acc.coarsest,
            )
            for scene, acc in self._scenes.items()
        })
