"""Tests for sparse subblock coordinates."""

import pytest

from czicat.model import Coordinate, Dimension

pytestmark = pytest.mark.unit


class TestCoordinateConstruction:
    """Building coordinates from dimension/position pairs."""

    def test_pairs_in_any_order_compare_equal(self):
        a = Coordinate.from_pairs([("Z", 4), ("C", 1), ("S", 0)])
        b = Coordinate.from_pairs([("S", 0), ("Z", 4), ("C", 1)])
        assert a == b
        assert hash(a) == hash(b)

    def test_keyword_and_pair_forms_agree(self):
        assert Coordinate.from_pairs([(Dimension.T, 7)]) == Coordinate(t=7)

    def test_lowercase_and_bytes_symbols_accepted(self):
        assert Coordinate.from_pairs([("z", 2), (b"C", 3)]) == Coordinate(z=2, c=3)

    def test_repeated_dimension_rejected(self):
        with pytest.raises(ValueError, match="more than once"):
            Coordinate.from_pairs([("Z", 0), ("z", 1)])

    @pytest.mark.parametrize("symbol", ["M", "X", "Y"])
    def test_synthetic_dimensions_rejected(self, symbol):
        with pytest.raises(ValueError, match="not a coordinate dimension"):
            Coordinate.from_pairs([(symbol, 0)])

    def test_unknown_symbol_rejected(self):
        with pytest.raises(ValueError):
            Coordinate.from_pairs([("Q", 0)])


class TestCoordinateQueries:
    """Undefined is distinct from zero."""

    def test_get_undefined_is_none(self):
        c = Coordinate(z=0)
        assert c.get("Z") == 0
        assert c.get("T") is None
        assert c.is_defined("Z")
        assert not c.is_defined("T")

    def test_zero_differs_from_undefined(self):
        assert Coordinate(c=0) != Coordinate()

    def test_get_synthetic_dimension_raises(self):
        with pytest.raises(ValueError):
            Coordinate(z=1).get("M")

    def test_items_in_fixed_order(self):
        c = Coordinate.from_pairs([("B", 2), ("Z", 1), ("S", 3)])
        assert [dim.value for dim, _ in c.items()] == ["Z", "S", "B"]
        assert c.to_dict() == {"Z": 1, "S": 3, "B": 2}

    def test_str(self):
        assert str(Coordinate(z=4, c=1)) == "Z4C1"
        assert str(Coordinate()) == ""

    def test_empty_coordinate_is_truthy_object(self):
        # dataclass without __len__ so an empty coordinate is still truthy
        assert Coordinate()

    def test_frozen(self):
        c = Coordinate(z=1)
        with pytest.raises(AttributeError):
            c.z = 2
