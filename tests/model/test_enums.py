"""Tests for dimension symbols and format enums."""

import logging

import numpy as np
import pytest

from czicat.model import (
    COORDINATE_DIMENSIONS,
    RANGE_DIMENSIONS,
    CompressionMode,
    Dimension,
    PixelType,
    PyramidType,
)

pytestmark = pytest.mark.unit


class TestDimension:

    def test_fixed_orders(self):
        assert "".join(d.value for d in COORDINATE_DIMENSIONS) == "ZCTRSIHVB"
        assert "".join(d.value for d in RANGE_DIMENSIONS) == "XYZCTRSIHVBM"

    @pytest.mark.parametrize("value", ["z", "Z", b"Z", Dimension.Z, " z "])
    def test_parse(self, value):
        assert Dimension.parse(value) is Dimension.Z

    @pytest.mark.parametrize("value", ["", "ZZ", "Q", 3])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            Dimension.parse(value)

    def test_synthetic(self):
        assert {d for d in Dimension if d.is_synthetic} == {Dimension.X, Dimension.Y, Dimension.M}


class TestPixelType:

    @pytest.mark.parametrize("pixel_type, nbytes", [
        (PixelType.GRAY8, 1),
        (PixelType.GRAY16, 2),
        (PixelType.GRAY32_FLOAT, 4),
        (PixelType.BGR24, 3),
        (PixelType.BGR48, 6),
        (PixelType.BGR96_FLOAT, 12),
        (PixelType.BGRA32, 4),
        (PixelType.GRAY64_COMPLEX_FLOAT, 8),
        (PixelType.BGR192_COMPLEX_FLOAT, 24),
        (PixelType.GRAY32, 4),
        (PixelType.GRAY64_FLOAT, 8),
    ])
    def test_bytes_per_pixel(self, pixel_type, nbytes):
        assert pixel_type.bytes_per_pixel == nbytes

    def test_dtype(self):
        assert PixelType.BGR48.dtype == np.dtype("<u2")
        assert PixelType.BGR48.samples_per_pixel == 3

    def test_from_raw_id_and_name(self):
        assert PixelType.from_raw(3) is PixelType.BGR24
        assert PixelType.from_raw(np.int32(1)) is PixelType.GRAY16
        assert PixelType.from_raw("Gray32Float") is PixelType.GRAY32_FLOAT
        assert PixelType.from_raw(b"Bgr24") is PixelType.BGR24
        assert PixelType.from_raw("gray64") is PixelType.GRAY64_FLOAT

    def test_unknown_maps_to_invalid_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="czicat.model.enums"):
            assert PixelType.from_raw(77) is PixelType.INVALID
            assert PixelType.from_raw("Gray1") is PixelType.INVALID
        assert "Unknown PixelType" in caplog.text

    def test_from_raw_rejects_other_types(self):
        with pytest.raises(TypeError):
            PixelType.from_raw(1.5)


class TestCompressionAndPyramid:

    @pytest.mark.parametrize("raw, expected", [
        (0, CompressionMode.UNCOMPRESSED),
        ("uncompressed", CompressionMode.UNCOMPRESSED),
        ("JpgFile", CompressionMode.JPG),
        ("jpeg", CompressionMode.JPG),
        ("JpgXrFile", CompressionMode.JPG_XR),
        (4, CompressionMode.JPG_XR),
        ("zstd1", CompressionMode.ZSTD1),
        (99, CompressionMode.INVALID),
    ])
    def test_compression_from_raw(self, raw, expected):
        assert CompressionMode.from_raw(raw) is expected

    def test_pyramid_from_raw(self):
        assert PyramidType.from_raw(0) is PyramidType.NONE
        assert PyramidType.from_raw("MultiSubblock") is PyramidType.MULTI_SUBBLOCK
        assert PyramidType.from_raw(2) is PyramidType.MULTI_SUBBLOCK
