# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Standard attribute databases used by the scenario tables.

``ts_small_db`` and ``ts_large_db_1`` follow the layouts defined for the
qualification test suite: between them they cover a primary service at
the maximum handle, secondary services, includes that point backwards and
forwards, repeated 16-bit and 128-bit UUIDs, characteristics with and
without descriptors, and values longer than a single PDU.
"""

from __future__ import annotations

import functools

from gatt_conformance.db import (
    AttributeDatabase,
    Characteristic,
    Descriptor,
    Include,
    Permission,
    PrimaryService,
    Property,
    SecondaryService,
    SpecEntry,
    build,
)
from gatt_conformance.uuids import (
    APPEARANCE,
    CHARACTERISTIC_AGGREGATE_FORMAT,
    CHARACTERISTIC_EXTENDED_PROPERTIES,
    CHARACTERISTIC_PRESENTATION_FORMAT,
    CHARACTERISTIC_USER_DESCRIPTION,
    CLIENT_CHARACTERISTIC_CONFIG,
    DEVICE_INFORMATION,
    DEVICE_NAME,
    GAP,
    GATT,
    HEART_RATE,
    MANUFACTURER_NAME_STRING,
    PERIPHERAL_PREFERRED_CONNECTION_PARAMETERS,
    SERVER_CHARACTERISTIC_CONFIG,
    SERVICE_CHANGED,
)

__all__ = [
    "SERVICE_DATA_1",
    "STRING_512BYTES",
    "TS_LARGE_DB_1",
    "TS_SMALL_DB",
    "database_spec",
    "list_databases",
    "standard_database",
]

R = Permission.READ
W = Permission.WRITE
RW = Permission.READ | Permission.WRITE

STRING_512BYTES = "11111222223333344444555556666677777888889999900000" * 10 + "111112222233"
"""A characteristic value longer than any single read response."""


def _repeat_value(count: int) -> bytes:
    return (bytes.fromhex("11223344556677889900") * 5)[:count]


def _long_desc(tail: bytes) -> bytes:
    return _repeat_value(10) + bytes.fromhex("1234567890") * 4 + _repeat_value(13) + tail


_DESC_16 = _repeat_value(10) + bytes.fromhex("123456789011")
_DESC_43 = _repeat_value(43)


# ---------------------------------------------------------------------------
# service_data_1
# ---------------------------------------------------------------------------

SERVICE_DATA_1: tuple[SpecEntry, ...] = (
    PrimaryService(0x0001, GATT, 4),
    Characteristic(DEVICE_NAME, R, Property.READ, "BlueZ"),
    Descriptor(CHARACTERISTIC_USER_DESCRIPTION, R, "Device Name"),
    PrimaryService(0x0005, HEART_RATE, 4),
    Characteristic(MANUFACTURER_NAME_STRING, R, Property.READ, ""),
    Descriptor(CHARACTERISTIC_USER_DESCRIPTION, R, "Manufacturer Name"),
)

# ---------------------------------------------------------------------------
# ts_small_db: fits into a single minimum-sized PDU
# ---------------------------------------------------------------------------

TS_SMALL_DB: tuple[SpecEntry, ...] = (
    SecondaryService(0x0001, DEVICE_INFORMATION, 16),
    Characteristic(MANUFACTURER_NAME_STRING, R, Property.READ, "BlueZ"),
    Descriptor(CLIENT_CHARACTERISTIC_CONFIG, R, b"\x00\x00"),
    Descriptor(CHARACTERISTIC_USER_DESCRIPTION, R, "Manufacturer Name"),
    PrimaryService(0xF010, GAP, 8),
    Include(0x0001),
    Characteristic(DEVICE_NAME, R, Property.READ, "BlueZ Unit Tester"),
    Characteristic("0000B009-0000-0000-0123-456789abcdef", R, Property.READ, b"\x09"),
    Characteristic(APPEARANCE, R, Property.READ, b"\x00\x00"),
    PrimaryService(0xFFFF, DEVICE_INFORMATION, 1),
)

# ---------------------------------------------------------------------------
# ts_large_db_1: 128-bit services at the end
# ---------------------------------------------------------------------------

_RW_PROPS = Property.READ | Property.WRITE

TS_LARGE_DB_1: tuple[SpecEntry, ...] = (
    PrimaryService(0x0080, "a00b", 6),
    Characteristic("b008", RW, _RW_PROPS, b"\x08"),
    Descriptor("b015", RW, b"\x01"),
    Descriptor("b016", RW, b"\x02"),
    Descriptor("b017", RW | Permission.ENCRYPT, b"\x03"),
    SecondaryService(0x0001, "a00d", 6),
    Include(0x0080),
    Characteristic("b00c", R, Property.READ, b"\x0c"),
    Characteristic("0000b00b-0000-0000-0123-456789abcdef", R, Property.READ, b"\x0b"),
    PrimaryService(0x0010, GATT, 4),
    Characteristic(SERVICE_CHANGED, R, Property.INDICATE, b"\x01\x00\xff\xff"),
    Descriptor(CLIENT_CHARACTERISTIC_CONFIG, RW, b"\x00\x00"),
    PrimaryService(0x0020, "a00a", 10),
    Include(0x0001),
    Characteristic("b001", R, Property.READ, b"\x01"),
    Characteristic("b002", RW, _RW_PROPS, STRING_512BYTES),
    Characteristic("b002", W, Property.WRITE, "11111222223333344444555556666677777888889999900000"),
    Characteristic("b003", W, Property.WRITE, b"\x03"),
    PrimaryService(0x0030, "a00b", 3),
    Characteristic("b007", W, Property.WRITE, b"\x07"),
    PrimaryService(0x0040, GAP, 7),
    Characteristic(DEVICE_NAME, R, Property.READ, "Test Database"),
    Characteristic(APPEARANCE, R, Property.READ, bytes([17])),
    Characteristic(
        PERIPHERAL_PREFERRED_CONNECTION_PARAMETERS,
        R,
        Property.READ,
        b"\x64\x00\xc8\x00\x00\x00\x07\xd0",
    ),
    PrimaryService(0x0050, "a00b", 3),
    Characteristic(
        "b006",
        RW,
        _RW_PROPS | Property.WRITE_WITHOUT_RESP | Property.NOTIFY | Property.INDICATE,
        b"\x06",
    ),
    PrimaryService(0x0060, "a00b", 12),
    Characteristic("b004", RW, _RW_PROPS, b"\x04"),
    Characteristic("b004", RW, _RW_PROPS, b"\x04"),
    Descriptor(SERVER_CHARACTERISTIC_CONFIG, RW, b"\x00\x00"),
    Characteristic("b004", Permission(0), Property(0), b"\x04"),
    Descriptor("b012", Permission(0), _DESC_43),
    Characteristic("b004", R, Property.READ, b"\x04"),
    Descriptor("b012", R, _DESC_43),
    PrimaryService(0x0070, "a00b", 7),
    Characteristic("b005", RW, _RW_PROPS | Property.EXT_PROP, b"\x05"),
    Descriptor(CHARACTERISTIC_EXTENDED_PROPERTIES, R, b"\x03\x00"),
    Descriptor(CHARACTERISTIC_USER_DESCRIPTION, RW, "ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
    Descriptor(CHARACTERISTIC_PRESENTATION_FORMAT, Permission.READ_ENCRYPT, b"\x00\x01\x30\x01\x11\x31"),
    Descriptor("0000d5d4-0000-0000-0123-456789abcdef", R, b"\x44"),
    # 0x0080 is declared first and included by 0x0001
    PrimaryService(0x0090, "0000a00c-0000-0000-0123-456789abcdef", 7),
    Include(0x0001),
    Characteristic("0000b009-0000-0000-0123-456789abcdef", RW, _RW_PROPS | Property.EXT_PROP, b"\x09"),
    Descriptor(CHARACTERISTIC_EXTENDED_PROPERTIES, R, b"\x01\x00"),
    Descriptor("0000d9d2-0000-0000-0123-456789abcdef", RW, b"\x22"),
    Descriptor("0000d9d3-0000-0000-0123-456789abcdef", W, b"\x33"),
    PrimaryService(0x00A0, "a00f", 18),
    Characteristic("b00e", R, Property.READ, "Length is "),
    Descriptor(CHARACTERISTIC_PRESENTATION_FORMAT, R, b"\x19\x00\x00\x30\x01\x00\x00"),
    Characteristic("b00f", RW, _RW_PROPS, b"\x65"),
    Descriptor(CHARACTERISTIC_PRESENTATION_FORMAT, R, b"\x04\x00\x01\x27\x01\x01\x00"),
    Characteristic("b006", RW, _RW_PROPS, b"\x34\x12"),
    Descriptor(CHARACTERISTIC_PRESENTATION_FORMAT, R, b"\x06\x00\x10\x27\x01\x02\x00"),
    Characteristic("b007", RW, _RW_PROPS, b"\x04\x03\x02\x01"),
    Descriptor(CHARACTERISTIC_PRESENTATION_FORMAT, R, b"\x08\x00\x17\x27\x01\x03\x00"),
    Characteristic("b010", R, Property.READ, b"\x65\x34\x12\x04\x03\x02\x01"),
    Descriptor(CHARACTERISTIC_AGGREGATE_FORMAT, R, b"\xa6\x00\xa9\x00\xac\x00"),
    Characteristic("b011", RW, Property.READ | Property.AUTH, b"\x12"),
    PrimaryService(0x00C0, "0000a00c-0000-0000-0123-456789abcdef", 30),
    Characteristic("b00a", R, Property.READ, b"\x0a"),
    Characteristic("b002", RW, _RW_PROPS, "111112222233333444445"),
    Descriptor("b012", RW, _DESC_16),
    Characteristic("b002", RW, _RW_PROPS, "2222233333444445555566"),
    Descriptor("b013", RW, _DESC_16 + b"\x22"),
    Characteristic("b002", RW, _RW_PROPS, "33333444445555566666777"),
    Descriptor("b014", RW, _DESC_16 + b"\x22\x33"),
    Characteristic("b002", RW, _RW_PROPS, _repeat_value(43)),
    Descriptor("b012", RW, _long_desc(b"")),
    Characteristic("b002", RW, _RW_PROPS, _repeat_value(44)),
    Descriptor("b013", RW, _long_desc(b"\x44")),
    Characteristic("b002", RW, _RW_PROPS, _repeat_value(45)),
    Descriptor("b014", RW, _long_desc(b"\x44\x55")),
    Characteristic("b002", RW, _RW_PROPS, "1111122222333334444455555666667777788888999"),
    Descriptor("b012", RW, _long_desc(b"")),
    Characteristic("b002", RW, _RW_PROPS, "22222333334444455555666667777788888999990000"),
    Descriptor("b013", RW, _long_desc(b"\x44")),
    Characteristic("b002", RW, _RW_PROPS, "333334444455555666667777788888999990000011111"),
    Descriptor("b014", RW, _long_desc(b"\x44\x55")),
)

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_DATABASES: dict[str, tuple[SpecEntry, ...]] = {
    "service_data_1": SERVICE_DATA_1,
    "ts_small_db": TS_SMALL_DB,
    "ts_large_db_1": TS_LARGE_DB_1,
}


def list_databases() -> list[str]:
    """Return the names of the standard databases, sorted."""
    return sorted(_DATABASES)


def database_spec(name: str) -> tuple[SpecEntry, ...]:
    """Return the spec entries of a standard database.

    Raises:
        KeyError: If ``name`` is not a standard database.

    """
    try:
        return _DATABASES[name]
    except KeyError:
        raise KeyError(f"Unknown database {name!r}; known: {', '.join(list_databases())}") from None


@functools.cache
def standard_database(name: str) -> AttributeDatabase:
    """Build (once) and return a standard database by name.

    Databases are immutable, so the cached instance is shared.

    Raises:
        KeyError: If ``name`` is not a standard database.

    """
    return build(database_spec(name))

