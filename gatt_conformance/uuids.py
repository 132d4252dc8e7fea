# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Attribute type identifiers.

Attribute types are either 16-bit UUIDs (shorthand for a UUID on the
Bluetooth base) or full 128-bit UUIDs.  Comparison always happens on the
128-bit expansion, so ``AttUuid.parse("1800")`` equals
``AttUuid.parse("00001800-0000-1000-8000-00805f9b34fb")``.
"""

from __future__ import annotations

import uuid
from typing import Final

from gatt_conformance.errors import InvalidSpecification

__all__ = [
    "APPEARANCE",
    "CHARACTERISTIC",
    "CHARACTERISTIC_AGGREGATE_FORMAT",
    "CHARACTERISTIC_EXTENDED_PROPERTIES",
    "CHARACTERISTIC_PRESENTATION_FORMAT",
    "CHARACTERISTIC_USER_DESCRIPTION",
    "CLIENT_CHARACTERISTIC_CONFIG",
    "DEVICE_INFORMATION",
    "DEVICE_NAME",
    "GAP",
    "GATT",
    "HEART_RATE",
    "INCLUDE",
    "MANUFACTURER_NAME_STRING",
    "PERIPHERAL_PREFERRED_CONNECTION_PARAMETERS",
    "PRIMARY_SERVICE",
    "SECONDARY_SERVICE",
    "SERVER_CHARACTERISTIC_CONFIG",
    "SERVICE_CHANGED",
    "AttUuid",
]

_BASE_UUID: Final[int] = 0x0000_0000_0000_1000_8000_00805F9B34FB


class AttUuid:
    """A 16-bit or 128-bit attribute type.

    Instances are immutable and hashable.  Equality and hashing use the
    128-bit expansion; ``size`` only affects the wire encoding.
    """

    __slots__ = ("_size", "_value")

    def __init__(self, value: int, size: int = 16) -> None:
        """Initialize from an integer value.

        Args:
            value: The UUID value (16-bit shorthand or full 128-bit).
            size: ``16`` or ``128``.

        Raises:
            InvalidSpecification: If the value does not fit the size.

        """
        if size == 16:
            if not 0 <= value <= 0xFFFF:
                raise InvalidSpecification(f"16-bit UUID out of range: {value:#x}")
        elif size == 128:
            if not 0 <= value < 1 << 128:
                raise InvalidSpecification(f"128-bit UUID out of range: {value:#x}")
        else:
            raise InvalidSpecification(f"UUID size must be 16 or 128, got {size}")
        self._value = value
        self._size = size

    @classmethod
    def parse(cls, text: str | int | AttUuid) -> AttUuid:
        """Parse ``"1800"``, ``"0x2a0d"``, or canonical 128-bit text.

        Integers are taken as 16-bit shorthand.  A 128-bit UUID that lies on
        the base UUID and has a 16-bit alias is stored in its 16-bit form.

        Raises:
            InvalidSpecification: If the text is not a UUID.

        """
        if isinstance(text, AttUuid):
            return text
        if isinstance(text, int):
            return cls(text, 16)
        raw = text.strip().lower()
        if raw.startswith("0x"):
            raw = raw[2:]
        try:
            if len(raw) <= 8 and "-" not in raw:
                full = (int(raw, 16) << 96) | _BASE_UUID
            else:
                full = uuid.UUID(raw).int
        except ValueError as e:
            raise InvalidSpecification(f"Invalid UUID: {text!r}") from e
        # UUIDs on the base with a 16-bit alias always use the short form
        if full & ((1 << 96) - 1) == _BASE_UUID and full >> 96 <= 0xFFFF:
            return cls(full >> 96, 16)
        return cls(full, 128)

    @property
    def size(self) -> int:
        """Declared width in bits (16 or 128)."""
        return self._size

    @property
    def value(self) -> int:
        """The declared value (16-bit shorthand or 128-bit integer)."""
        return self._value

    def to_int128(self) -> int:
        """Return the 128-bit expansion."""
        if self._size == 16:
            return (self._value << 96) | _BASE_UUID
        return self._value

    def to_uuid(self) -> uuid.UUID:
        """Return the 128-bit expansion as a :class:`uuid.UUID`."""
        return uuid.UUID(int=self.to_int128())

    def to_bytes(self) -> bytes:
        """Little-endian wire encoding (2 or 16 bytes)."""
        return self._value.to_bytes(self._size // 8, "little")

    def __eq__(self, other: object) -> bool:
        """Compare on the 128-bit expansion."""
        if not isinstance(other, AttUuid):
            return NotImplemented
        return self.to_int128() == other.to_int128()

    def __hash__(self) -> int:
        """Hash the 128-bit expansion."""
        return hash(self.to_int128())

    def __str__(self) -> str:
        """Short hex for 16-bit, canonical text for 128-bit."""
        if self._size == 16:
            return f"{self._value:04x}"
        return str(self.to_uuid())

    def __repr__(self) -> str:
        """Return ``AttUuid('1800')``."""
        return f"AttUuid({str(self)!r})"


# ---------------------------------------------------------------------------
# Well-known attribute types
# ---------------------------------------------------------------------------

PRIMARY_SERVICE = AttUuid(0x2800)
SECONDARY_SERVICE = AttUuid(0x2801)
INCLUDE = AttUuid(0x2802)
CHARACTERISTIC = AttUuid(0x2803)

CHARACTERISTIC_EXTENDED_PROPERTIES = AttUuid(0x2900)
CHARACTERISTIC_USER_DESCRIPTION = AttUuid(0x2901)
CLIENT_CHARACTERISTIC_CONFIG = AttUuid(0x2902)
SERVER_CHARACTERISTIC_CONFIG = AttUuid(0x2903)
CHARACTERISTIC_PRESENTATION_FORMAT = AttUuid(0x2904)
CHARACTERISTIC_AGGREGATE_FORMAT = AttUuid(0x2905)

GAP = AttUuid(0x1800)
GATT = AttUuid(0x1801)
DEVICE_INFORMATION = AttUuid(0x180A)
HEART_RATE = AttUuid(0x180D)

DEVICE_NAME = AttUuid(0x2A00)
APPEARANCE = AttUuid(0x2A01)
PERIPHERAL_PREFERRED_CONNECTION_PARAMETERS = AttUuid(0x2A04)
SERVICE_CHANGED = AttUuid(0x2A05)
MANUFACTURER_NAME_STRING = AttUuid(0x2A29)
