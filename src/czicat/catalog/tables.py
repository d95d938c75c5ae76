"""Tabular views of a catalog as ``pandas.DataFrame``.

Optional coordinates and the mosaic index use the nullable ``Int64`` dtype,
so a missing position is ``<NA>`` rather than a float NaN.
"""

from typing import Iterable, Mapping

import pandas as pd

from czicat.model.enums import COORDINATE_DIMENSIONS
from czicat.model.subblock import SubblockDescriptor

__all__ = ['subblock_table', 'dimension_table', 'scene_table']

_SUBBLOCK_COLUMNS = (
    ["catalog_index"]
    + [dim.value for dim in COORDINATE_DIMENSIONS]
    + ["M", "x", "y", "width", "height", "stored_width", "stored_height",
       "downscale", "pixel_type", "compression", "pyramid_type", "level0", "file_position"]
)


def subblock_table(descriptors: Iterable[SubblockDescriptor]) -> pd.DataFrame:
    """One row per subblock, indexed by ``catalog_index``."""
    rows = []
    for d in descriptors:
        row = {"catalog_index": d.catalog_index}
        for dim in COORDINATE_DIMENSIONS:
            row[dim.value] = d.coordinate.get(dim)
        row.update({
            "M": d.mosaic_index,
            "x": d.logical_rect.x,
            "y": d.logical_rect.y,
            "width": d.logical_rect.w,
            "height": d.logical_rect.h,
            "stored_width": d.physical_size.w,
            "stored_height": d.physical_size.h,
            "downscale": d.downscale_factor,
            "pixel_type": d.pixel_type.name,
            "compression": d.compression.name,
            "pyramid_type": d.pyramid_type.name,
            "level0": d.is_level0,
            # uint64 sentinel does not fit Int64
            "file_position": d.file_position if d.has_file_position else None,
        })
        rows.append(row)

    df = pd.DataFrame(rows, columns=_SUBBLOCK_COLUMNS)
    nullable = [dim.value for dim in COORDINATE_DIMENSIONS] + ["M", "file_position"]
    df[nullable] = df[nullable].astype("Int64")
    return df.set_index("catalog_index")


def dimension_table(ranges: Mapping) -> pd.DataFrame:
    """One row per present dimension with ``start``, ``end`` and ``size``."""
    rows = [
        {"dimension": dim.value, "start": iv.start, "end": iv.end, "size": iv.size}
        for dim, iv in ranges.items()
    ]
    return pd.DataFrame(rows, columns=["dimension", "start", "end", "size"]).set_index("dimension")


def scene_table(boxes: Mapping) -> pd.DataFrame:
    """One row per scene with its native and coarsest-layer rectangles."""
    rows = []
    for scene, box in boxes.items():
        rows.append({
            "scene": scene,
            "native_x": box.native.x, "native_y": box.native.y,
            "native_w": box.native.w, "native_h": box.native.h,
            "coarsest_x": box.coarsest.x, "coarsest_y": box.coarsest.y,
            "coarsest_w": box.coarsest.w, "coarsest_h": box.coarsest.h,
        })
    columns = ["scene", "native_x", "native_y", "native_w", "native_h",
               "coarsest_x", "coarsest_y", "coarsest_w", "coarsest_h"]
    return pd.DataFrame(rows, columns=columns).set_index("scene")
