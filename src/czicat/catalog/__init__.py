"""Subblock catalog.

- container: ContainerCatalog (open, query, close)
- accessor: SubblockAccessor and the bounded-copy protocol
- ranges: Dimension range table
- bounding_boxes: Per-scene bounding boxes
- tables: pandas views for inspection and export
"""

from czicat.catalog.accessor import SubblockAccessor, bounded_copy
from czicat.catalog.bounding_boxes import SceneBoundingBox, SceneBoundingBoxTable
from czicat.catalog.container import ContainerCatalog
from czicat.catalog.ranges import DimensionRangeTable
from czicat.catalog.tables import dimension_table, scene_table, subblock_table

__all__ = [
    "ContainerCatalog",
    "SubblockAccessor",
    "bounded_copy",
    "DimensionRangeTable",
    "SceneBoundingBox",
    "SceneBoundingBoxTable",
    "subblock_table",
    "dimension_table",
    "scene_table",
]
