# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Tests for attribute type UUIDs."""

from __future__ import annotations

import uuid

import pytest

from gatt_conformance.errors import InvalidSpecification
from gatt_conformance.uuids import GAP, PRIMARY_SERVICE, AttUuid


class TestParse:
    """AttUuid.parse accepts the textual forms used in specifications."""

    def test_short_hex(self) -> None:
        """Bare 16-bit hex."""
        u = AttUuid.parse("1800")
        assert u.size == 16
        assert u.value == 0x1800

    def test_prefixed_hex(self) -> None:
        """``0x`` prefix and upper case are accepted."""
        assert AttUuid.parse("0x2A0D") == AttUuid(0x2A0D)

    def test_int_is_16_bit(self) -> None:
        """Integers are 16-bit shorthand."""
        assert AttUuid.parse(0x2800) == PRIMARY_SERVICE

    def test_passthrough(self) -> None:
        """An AttUuid is returned unchanged."""
        assert AttUuid.parse(GAP) is GAP

    def test_base_uuid_collapses_to_16_bit(self) -> None:
        """A 128-bit UUID on the base with a 16-bit alias uses the short form."""
        u = AttUuid.parse("00001800-0000-1000-8000-00805f9b34fb")
        assert u.size == 16
        assert u == GAP

    def test_vendor_uuid_stays_128_bit(self) -> None:
        """Vendor UUIDs keep their full width."""
        u = AttUuid.parse("0000a00c-0000-0000-0123-456789abcdef")
        assert u.size == 128
        assert str(u) == "0000a00c-0000-0000-0123-456789abcdef"

    @pytest.mark.parametrize("text", ["", "xyz", "1800-", "not-a-uuid-at-all"])
    def test_invalid(self, text: str) -> None:
        """Malformed text is rejected."""
        with pytest.raises(InvalidSpecification):
            AttUuid.parse(text)


class TestConstruction:
    """Range checks in the constructor."""

    def test_16_bit_out_of_range(self) -> None:
        """A 16-bit value must fit in 16 bits."""
        with pytest.raises(InvalidSpecification):
            AttUuid(0x10000)

    def test_bad_size(self) -> None:
        """Only 16 and 128 are valid sizes."""
        with pytest.raises(InvalidSpecification):
            AttUuid(1, 32)


class TestEncoding:
    """Wire encoding, equality and rendering."""

    def test_16_bit_little_endian(self) -> None:
        """16-bit UUIDs encode as two little-endian bytes."""
        assert AttUuid(0x2A0D).to_bytes() == b"\x0d\x2a"

    def test_explicit_128_bit_on_base_keeps_width(self) -> None:
        """An explicitly 128-bit UUID encodes all 16 bytes even on the base."""
        u = AttUuid(0x0000180D_0000_1000_8000_00805F9B34FB, 128)
        assert u.to_bytes() == bytes.fromhex("fb349b5f80000080001000000d180000")
        assert u == AttUuid(0x180D)

    def test_hash_follows_equality(self) -> None:
        """Equal UUIDs of different widths hash alike."""
        assert len({AttUuid(0x1800), AttUuid.parse("00001800-0000-1000-8000-00805f9b34fb")}) == 1

    def test_to_uuid(self) -> None:
        """The 128-bit expansion is available as uuid.UUID."""
        assert AttUuid(0x1800).to_uuid() == uuid.UUID("00001800-0000-1000-8000-00805f9b34fb")

    def test_str_and_repr(self) -> None:
        """16-bit UUIDs render as four hex digits."""
        assert str(AttUuid(0x2A0D)) == "2a0d"
        assert repr(AttUuid(0x2A0D)) == "AttUuid('2a0d')"

    def test_not_equal_to_other_types(self) -> None:
        """Comparison with non-UUIDs is not supported."""
        assert AttUuid(0x1800) != 0x1800
