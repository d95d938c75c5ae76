"""Tests for file-order GUIDs."""

import uuid

import pytest

from czicat.model import Guid

pytestmark = pytest.mark.unit

# Data1..Data3 little-endian, then Data4 as stored
RAW = bytes([
    0x78, 0x56, 0x34, 0x12,
    0x34, 0x12,
    0x78, 0x56,
    0x9A, 0xBC, 0xDE, 0xF0, 0x12, 0x34, 0x56, 0x78,
])
TEXT = "12345678-1234-5678-9abc-def012345678"


class TestGuid:

    def test_canonical_string(self):
        assert str(Guid(RAW)) == TEXT

    def test_fields(self):
        g = Guid(RAW)
        assert g.data1 == 0x12345678
        assert g.data2 == 0x1234
        assert g.data3 == 0x5678
        assert g.data4 == bytes.fromhex("9abcdef012345678")

    def test_round_trip_through_string(self):
        g = Guid(RAW)
        assert Guid.parse(str(g)).raw == RAW
        assert Guid.parse(str(g)) == g

    def test_parse_accepts_braces_and_upper_case(self):
        assert Guid.parse("{" + TEXT.upper() + "}") == Guid(RAW)

    def test_random_guids_round_trip(self):
        for _ in range(20):
            raw = uuid.uuid4().bytes
            assert Guid.parse(str(Guid(raw))).raw == raw

    def test_byte_wise_equality(self):
        other = bytearray(RAW)
        other[15] ^= 0xFF
        assert Guid(RAW) != Guid(bytes(other))

    def test_null(self):
        assert Guid().is_null()
        assert not Guid(RAW).is_null()
        assert str(Guid()) == "00000000-0000-0000-0000-000000000000"

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError, match="16 bytes"):
            Guid(b"\x00" * 15)

    def test_from_uuid_keeps_file_bytes(self):
        assert Guid.from_uuid(uuid.UUID(bytes=RAW)).raw == RAW
