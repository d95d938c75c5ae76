"""Tests for rectangles, intervals and subblock descriptor helpers."""

import pytest

from czicat.model import (
    EMPTY_RECT,
    FILE_POSITION_UNAVAILABLE,
    AttachmentDescriptor,
    CompressionMode,
    Coordinate,
    Guid,
    Interval,
    PixelType,
    PyramidType,
    Rect,
    Size,
    SubblockDescriptor,
)
from czicat.model.geometry import union_rect

pytestmark = pytest.mark.unit


def _descriptor(rect=Rect(0, 0, 8, 8), stored=Size(8, 8), pyramid=PyramidType.NONE, **kwargs):
    fields = dict(
        coordinate=Coordinate(z=0),
        mosaic_index=None,
        logical_rect=rect,
        physical_size=stored,
        pixel_type=PixelType.GRAY8,
        compression=CompressionMode.UNCOMPRESSED,
        pyramid_type=pyramid,
        file_position=FILE_POSITION_UNAVAILABLE,
        catalog_index=0,
    )
    fields.update(kwargs)
    return SubblockDescriptor(**fields)


class TestRect:

    def test_union(self):
        assert Rect(0, 0, 10, 10).union(Rect(20, 5, 10, 10)) == Rect(0, 0, 30, 15)

    def test_union_is_idempotent(self):
        r = Rect(3, 4, 5, 6)
        assert r.union(r) == r

    def test_union_ignores_empty(self):
        r = Rect(3, 4, 5, 6)
        assert r.union(EMPTY_RECT) == r
        assert EMPTY_RECT.union(r) == r

    def test_union_rect_starts_from_none(self):
        assert union_rect(None, Rect(1, 2, 3, 4)) == Rect(1, 2, 3, 4)

    def test_negative_origin(self):
        assert Rect(-10, -10, 5, 5).union(Rect(0, 0, 5, 5)) == Rect(-10, -10, 15, 15)

    def test_edges(self):
        r = Rect(2, 3, 4, 5)
        assert (r.right, r.bottom, r.size) == (6, 8, Size(4, 5))


class TestInterval:

    def test_half_open(self):
        iv = Interval(0, 2)
        assert iv.size == 2
        assert 0 in iv and 1 in iv
        assert 2 not in iv


class TestSubblockDescriptor:

    def test_native_tile(self):
        d = _descriptor()
        assert d.downscale_factor == 1
        assert d.is_native_resolution
        assert d.is_level0

    def test_pyramid_tile(self):
        d = _descriptor(rect=Rect(0, 0, 1024, 1024), stored=Size(256, 256),
                        pyramid=PyramidType.SINGLE_SUBBLOCK)
        assert d.downscale_factor == 4
        assert not d.is_native_resolution
        assert not d.is_level0

    def test_edge_pyramid_tile_rounds(self):
        # truncated edge tiles do not divide evenly
        d = _descriptor(rect=Rect(0, 0, 1000, 301), stored=Size(500, 150))
        assert d.downscale_factor == 2

    def test_zero_stored_size_has_unit_factor(self):
        assert _descriptor(stored=Size(0, 0)).downscale_factor == 1

    def test_off_by_one_stored_size_is_not_native(self):
        d = _descriptor(rect=Rect(0, 0, 1025, 1024), stored=Size(1024, 1024))
        assert d.downscale_factor == 1
        assert not d.is_native_resolution

    def test_file_position_sentinel(self):
        assert not _descriptor().has_file_position
        assert _descriptor(file_position=4096).has_file_position

    def test_scene(self):
        assert _descriptor(coordinate=Coordinate(s=2)).scene == 2
        assert _descriptor().scene is None


class TestAttachmentDescriptor:

    def test_content_type_limited_to_eight_characters(self):
        AttachmentDescriptor(Guid(), "CZTIMS", "TimeStamps", 0)
        with pytest.raises(ValueError, match="8 characters"):
            AttachmentDescriptor(Guid(), "TOOLONGTYPE", "x", 0)
