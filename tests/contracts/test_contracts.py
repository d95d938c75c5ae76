"""Tests for catalog contracts.

These tests verify that the catalog build invariants are enforced. They
build descriptor lists by hand, including broken ones a correct catalog
never produces.
"""

import pytest

pytestmark = pytest.mark.unit

from czicat.catalog.container import descriptor_from_raw
from czicat.catalog.ranges import DimensionRangeTable
from czicat.contracts import ContractViolation, assert_catalog_consistent, require
from czicat.model import Dimension, Interval
from tests.helpers.fake_container import make_tile


def _catalog(*tiles):
    descriptors = tuple(descriptor_from_raw(t.raw, i) for i, t in enumerate(tiles))
    level0 = tuple(d for d in descriptors if d.is_level0)
    return descriptors, level0


XY = {Dimension.X: Interval(0, 4), Dimension.Y: Interval(0, 4)}


class TestRequire:

    def test_passes(self):
        require(True, "never raised")

    def test_raises_with_message(self):
        with pytest.raises(ContractViolation, match="count mismatch"):
            require(False, "Catalog contract: count mismatch")

    def test_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)


class TestCatalogContract:

    def test_consistent_catalog_passes(self):
        descriptors, level0 = _catalog(make_tile(Z=0), make_tile(Z=1))
        ranges = DimensionRangeTable({**XY, Dimension.Z: Interval(0, 2)})
        # Should not raise
        assert_catalog_consistent(descriptors, level0, ranges)

    def test_gap_in_indices_fails(self):
        descriptors, level0 = _catalog(make_tile(), make_tile())
        broken = (descriptors[0], descriptor_from_raw(make_tile().raw, 5))
        with pytest.raises(ContractViolation, match="entry 1 carries index 5"):
            assert_catalog_consistent(broken, level0[:1], DimensionRangeTable(XY))

    def test_level0_not_subset_fails(self):
        descriptors, _ = _catalog(make_tile())
        stranger = descriptor_from_raw(make_tile().raw, 0)
        with pytest.raises(ContractViolation, match="not in catalog"):
            assert_catalog_consistent(descriptors, (stranger,), DimensionRangeTable(XY))

    def test_pyramid_tile_in_level0_fails(self):
        descriptors, _ = _catalog(make_tile(0, 0, 8, 8, stored=(4, 4), pyramid_type=1))
        with pytest.raises(ContractViolation):
            assert_catalog_consistent(descriptors, descriptors, DimensionRangeTable(XY))

    def test_empty_range_fails(self):
        descriptors, level0 = _catalog(make_tile(Z=0))
        ranges = DimensionRangeTable({**XY, Dimension.Z: Interval(3, 3)})
        with pytest.raises(ContractViolation, match="empty range for Z"):
            assert_catalog_consistent(descriptors, level0, ranges)

    def test_empty_catalog_with_coordinate_ranges_fails(self):
        ranges = DimensionRangeTable({**XY, Dimension.C: Interval(0, 1)})
        with pytest.raises(ContractViolation, match="empty catalog"):
            assert_catalog_consistent((), (), ranges)

    def test_empty_catalog_passes(self):
        zero = {Dimension.X: Interval(0, 0), Dimension.Y: Interval(0, 0)}
        assert_catalog_consistent((), (), DimensionRangeTable(zero))
