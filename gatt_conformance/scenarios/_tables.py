# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scenario tables, grouped by test purpose.

Every PDU list starts with a message the harness expects to receive and
then alternates.  Server scenarios are preceded by the MTU exchange
request (see :data:`~gatt_conformance.scenarios._pdus.SERVER_MTU_EXCHANGE`).
"""

from __future__ import annotations

from gatt_conformance.scenarios._engine import Role
from gatt_conformance.scenarios._pdus import (
    MTU_EXCHANGE_CLIENT,
    PRIMARY_DISC_LARGE_DB_1,
    PRIMARY_DISC_SMALL_DB,
    SERVICE_DATA_1_DISCOVERY,
    pdu,
)
from gatt_conformance.scenarios._scenario import Scenario, register
from gatt_conformance.scenarios._steps import (
    DiscoverCharacteristics,
    DiscoverDescriptors,
    DiscoverIncludedServices,
    DiscoverPrimaryServices,
    ReadByType,
    ReadMultiple,
    ReadValue,
    Step,
)
from gatt_conformance.transcript import Script
from gatt_conformance.uuids import AttUuid

UUID_16 = AttUuid(0x1800)
UUID_CHAR_16 = AttUuid(0x2A0D)
# spelled out in full on the wire even though it lies on the base UUID
UUID_128 = AttUuid(0x0000180D_0000_1000_8000_00805F9B34FB, 128)
UUID_CHAR_128 = AttUuid(0x00010203_0405_0607_0809_0A0B0C0D0E0F, 128)

READ_DATA_1 = b"\x01\x02\x03"


def _att(name: str, *pdus: bytes, step: Step) -> None:
    register(Scenario(name, Role.ATT, Script.from_pdus(pdus), step=step))


def _client(name: str, database: str | None, *pdus: bytes, step: Step | None = None) -> None:
    register(Scenario(name, Role.CLIENT, Script.from_pdus(pdus), database=database, step=step))


def _server(name: str, database: str, *pdus: bytes) -> None:
    register(Scenario(name, Role.SERVER, Script.from_pdus(pdus), database=database))


_MTU_RSP = pdu(0x03, 0x00, 0x02)

# ---------------------------------------------------------------------------
# GAC: server configuration
# ---------------------------------------------------------------------------

_client("/TP/GAC/CL/BV-01-C", None, pdu(0x02, 0x00, 0x02))

_server("/TP/GAC/SR/BV-01-C", "service_data_1", _MTU_RSP)

# ---------------------------------------------------------------------------
# GAD: discovery
# ---------------------------------------------------------------------------

_att(
    "/TP/GAD/CL/BV-01-C",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x06,
        0x10, 0x00, 0x13, 0x00, 0x00, 0x18,
        0x20, 0x00, 0x29, 0x00, 0xB0, 0x68,
        0x30, 0x00, 0x32, 0x00, 0x19, 0x18,
    ),  # fmt: skip
    pdu(0x10, 0x33, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x14, 0x90, 0x00, 0x96, 0x00,
        0xEF, 0xCD, 0xAB, 0x89, 0x67, 0x45, 0x23, 0x01,
        0x00, 0x00, 0x00, 0x00, 0x85, 0x60, 0x00, 0x00,
    ),  # fmt: skip
    pdu(0x10, 0x97, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x01, 0x10, 0x97, 0x00, 0x0A),
    step=DiscoverPrimaryServices(),
)

_att(
    "/TP/GAD/CL/BV-01-C-small",
    *MTU_EXCHANGE_CLIENT,
    *PRIMARY_DISC_SMALL_DB,
    step=DiscoverPrimaryServices(),
)

_server(
    "/TP/GAD/SR/BV-01-C",
    "service_data_1",
    _MTU_RSP,
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x11, 0x06, 0x01, 0x00, 0x04, 0x00, 0x01, 0x18, 0x05, 0x00, 0x08, 0x00, 0x0D, 0x18),
    pdu(0x10, 0x06, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x01, 0x10, 0x06, 0x00, 0x0A),
)

_server("/TP/GAD/SR/BV-01-C-small", "ts_small_db", _MTU_RSP, *PRIMARY_DISC_SMALL_DB)

_server("/TP/GAD/SR/BV-01-C-large-1", "ts_large_db_1", _MTU_RSP, *PRIMARY_DISC_LARGE_DB_1)

_att(
    "/TP/GAD/CL/BV-02-C-1",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x00, 0x18),
    pdu(0x07, 0x01, 0x00, 0x07, 0x00),
    pdu(0x06, 0x08, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x00, 0x18),
    pdu(0x01, 0x06, 0x08, 0x00, 0x0A),
    step=DiscoverPrimaryServices(UUID_16),
)

_att(
    "/TP/GAD/CL/BV-02-C-2",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28) + UUID_128.to_bytes(),
    pdu(0x07, 0x10, 0x00, 0x17, 0x00),
    pdu(0x06, 0x18, 0x00, 0xFF, 0xFF, 0x00, 0x28) + UUID_128.to_bytes(),
    pdu(0x01, 0x06, 0x18, 0x00, 0x0A),
    step=DiscoverPrimaryServices(UUID_128),
)

_server(
    "/TP/GAD/SR/BV-02-C/exists-16/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x00, 0x18),
    pdu(0x07, 0x10, 0xF0, 0x17, 0xF0),
    pdu(0x06, 0x18, 0xF0, 0xFF, 0xFF, 0x00, 0x28, 0x00, 0x18),
    pdu(0x01, 0x06, 0x18, 0xF0, 0x0A),
)

_server(
    "/TP/GAD/SR/BV-02-C/exists-16/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x0B, 0xA0),
    pdu(
        0x07,
        0x30, 0x00, 0x32, 0x00,
        0x50, 0x00, 0x52, 0x00,
        0x60, 0x00, 0x6B, 0x00,
        0x70, 0x00, 0x76, 0x00,
        0x80, 0x00, 0x85, 0x00,
    ),  # fmt: skip
    pdu(0x06, 0x86, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x0B, 0xA0),
    pdu(0x01, 0x06, 0x86, 0x00, 0x0A),
)

_server(
    "/TP/GAD/SR/BV-02-C/missing-16/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x01, 0x18),
    pdu(0x01, 0x06, 0x01, 0x00, 0x0A),
)

_server(
    "/TP/GAD/SR/BV-02-C/missing-16/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0x0F, 0xF0),
    pdu(0x01, 0x06, 0x01, 0x00, 0x0A),
)

_A00C_128 = AttUuid.parse("0000a00c-0000-0000-0123-456789abcdef").to_bytes()

_server(
    "/TP/GAD/SR/BV-02-C/exists-128/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28) + _A00C_128,
    pdu(0x07, 0x90, 0x00, 0x96, 0x00, 0xC0, 0x00, 0xDD, 0x00),
    pdu(0x06, 0xDE, 0x00, 0xFF, 0xFF, 0x00, 0x28) + _A00C_128,
    pdu(0x01, 0x06, 0xDE, 0x00, 0x0A),
)

_server(
    "/TP/GAD/SR/BV-02-C/missing-128/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x06, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28, 0xFF) + _A00C_128[1:],
    pdu(0x01, 0x06, 0x01, 0x00, 0x0A),
)

_att(
    "/TP/GAD/CL/BV-03-C",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x09, 0x08, 0x02, 0x00, 0x10, 0x00, 0x1F, 0x00, 0x0F, 0x18),
    pdu(0x08, 0x03, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x09, 0x06, 0x03, 0x00, 0x20, 0x00, 0x2F, 0x00, 0x04, 0x00, 0x30, 0x00, 0x3F, 0x00),
    pdu(0x0A, 0x20, 0x00),
    pdu(0x0B, 0x00, 0x00, 0x3E, 0x39, 0x00, 0x00, 0x00, 0x00, 0x01, 0x23, 0x45, 0x67, 0x89, 0xAB, 0xCD, 0xEF),
    pdu(0x0A, 0x30, 0x00),
    pdu(0x0B, 0x00, 0x00, 0x3B, 0x39, 0x00, 0x00, 0x00, 0x00, 0x01, 0x23, 0x45, 0x67, 0x89, 0xAB, 0xCD, 0xEF),
    pdu(0x08, 0x05, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x09, 0x08, 0x05, 0x00, 0x40, 0x00, 0x4F, 0x00, 0x0A, 0x18),
    pdu(0x08, 0x06, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x01, 0x08, 0x06, 0x00, 0x0A),
    step=DiscoverIncludedServices(0x0001, 0xFFFF),
)

_server(
    "/TP/GAD/SR/BV-03-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x09, 0x08, 0x11, 0xF0, 0x01, 0x00, 0x10, 0x00, 0x0A, 0x18),
    pdu(0x08, 0x12, 0xF0, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x01, 0x08, 0x12, 0xF0, 0x0A),
)

_server(
    "/TP/GAD/SR/BV-03-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(
        0x09, 0x08,
        0x02, 0x00, 0x80, 0x00, 0x85, 0x00, 0x0B, 0xA0,
        0x21, 0x00, 0x01, 0x00, 0x06, 0x00, 0x0D, 0xA0,
    ),  # fmt: skip
    pdu(0x08, 0x22, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x09, 0x08, 0x91, 0x00, 0x01, 0x00, 0x06, 0x00, 0x0D, 0xA0),
    pdu(0x08, 0x92, 0x00, 0xFF, 0xFF, 0x02, 0x28),
    pdu(0x01, 0x08, 0x92, 0x00, 0x0A),
)

_CL_CHARS = (
    *MTU_EXCHANGE_CLIENT,
    pdu(0x08, 0x10, 0x00, 0x20, 0x00, 0x03, 0x28),
    pdu(0x09, 0x07, 0x11, 0x00, 0x02, 0x12, 0x00, 0x25, 0x2A),
    pdu(0x08, 0x12, 0x00, 0x20, 0x00, 0x03, 0x28),
    pdu(
        0x09, 0x15, 0x13, 0x00, 0x02, 0x14, 0x00,
        0x85, 0x00, 0xEF, 0xCD, 0xAB, 0x89, 0x67, 0x45, 0x23, 0x01,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ),  # fmt: skip
    pdu(0x08, 0x14, 0x00, 0x20, 0x00, 0x03, 0x28),
    pdu(0x01, 0x08, 0x12, 0x00, 0x0A),
)

_SR_CHARS_SMALL_1 = (
    _MTU_RSP,
    pdu(0x08, 0x10, 0xF0, 0x17, 0xF0, 0x03, 0x28),
    pdu(0x09, 0x07, 0x12, 0xF0, 0x02, 0x13, 0xF0, 0x00, 0x2A),
    pdu(0x08, 0x13, 0xF0, 0x17, 0xF0, 0x03, 0x28),
    pdu(
        0x09, 0x15, 0x14, 0xF0, 0x02, 0x15, 0xF0,
        0xEF, 0xCD, 0xAB, 0x89, 0x67, 0x45, 0x23, 0x01,
        0x00, 0x00, 0x00, 0x00, 0x09, 0xB0, 0x00, 0x00,
    ),  # fmt: skip
    pdu(0x08, 0x15, 0xF0, 0x17, 0xF0, 0x03, 0x28),
    pdu(0x09, 0x07, 0x16, 0xF0, 0x02, 0x17, 0xF0, 0x01, 0x2A),
    pdu(0x08, 0x17, 0xF0, 0x17, 0xF0, 0x03, 0x28),
    pdu(0x01, 0x08, 0x17, 0xF0, 0x0A),
)

_SR_CHARS_SMALL_2 = (
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0x0F, 0x00, 0x03, 0x28),
    pdu(0x09, 0x07, 0x02, 0x00, 0x02, 0x03, 0x00, 0x29, 0x2A),
    pdu(0x08, 0x03, 0x00, 0x0F, 0x00, 0x03, 0x28),
    pdu(0x01, 0x08, 0x03, 0x00, 0x0A),
)

_SR_CHARS_LARGE_1 = (
    _MTU_RSP,
    pdu(0x08, 0x20, 0x00, 0x29, 0x00, 0x03, 0x28),
    pdu(
        0x09, 0x07,
        0x22, 0x00, 0x02, 0x23, 0x00, 0x01, 0xB0,
        0x24, 0x00, 0x0A, 0x25, 0x00, 0x02, 0xB0,
        0x26, 0x00, 0x08, 0x27, 0x00, 0x02, 0xB0,
    ),  # fmt: skip
    pdu(0x08, 0x27, 0x00, 0x29, 0x00, 0x03, 0x28),
    pdu(0x09, 0x07, 0x28, 0x00, 0x08, 0x29, 0x00, 0x03, 0xB0),
    pdu(0x08, 0x29, 0x00, 0x29, 0x00, 0x03, 0x28),
    pdu(0x01, 0x08, 0x29, 0x00, 0x0A),
)

# BV-04 (all characteristics) and BV-05 (by UUID) share their transcripts
for _purpose in ("BV-04-C", "BV-05-C"):
    _att(f"/TP/GAD/CL/{_purpose}", *_CL_CHARS, step=DiscoverCharacteristics(0x0010, 0x0020))
    _server(f"/TP/GAD/SR/{_purpose}/small/1", "ts_small_db", *_SR_CHARS_SMALL_1)
    _server(f"/TP/GAD/SR/{_purpose}/small/2", "ts_small_db", *_SR_CHARS_SMALL_2)
    _server(f"/TP/GAD/SR/{_purpose}/large-1", "ts_large_db_1", *_SR_CHARS_LARGE_1)

_att(
    "/TP/GAD/CL/BV-06-C",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x04, 0x13, 0x00, 0x16, 0x00),
    pdu(0x05, 0x01, 0x13, 0x00, 0x02, 0x29, 0x14, 0x00, 0x03, 0x29),
    pdu(0x04, 0x15, 0x00, 0x16, 0x00),
    pdu(0x05, 0x01, 0x15, 0x00, 0x04, 0x29, 0x16, 0x00, 0x05, 0x29),
    step=DiscoverDescriptors(0x0013, 0x0016),
)

_server(
    "/TP/GAD/SR/BV-06-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x04, 0x04, 0x00, 0x05, 0x00),
    pdu(0x05, 0x01, 0x04, 0x00, 0x02, 0x29, 0x05, 0x00, 0x01, 0x29),
)

_server(
    "/TP/GAD/SR/BV-06-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x04, 0x73, 0x00, 0x76, 0x00),
    pdu(0x05, 0x01, 0x73, 0x00, 0x00, 0x29, 0x74, 0x00, 0x01, 0x29, 0x75, 0x00, 0x04, 0x29),
    pdu(0x04, 0x76, 0x00, 0x76, 0x00),
    pdu(0x05, 0x02, 0x76, 0x00) + AttUuid.parse("0000d5d4-0000-0000-0123-456789abcdef").to_bytes(),
)

# ---------------------------------------------------------------------------
# GAR: reading
# ---------------------------------------------------------------------------

_client(
    "/TP/GAR/CL/BV-01-C",
    "service_data_1",
    *SERVICE_DATA_1_DISCOVERY,
    pdu(0x0A, 0x03, 0x00),
    pdu(0x0B, 0x01, 0x02, 0x03),
    step=ReadValue(0x0003, expected_value=READ_DATA_1),
)

for _name, _handle, _ecode in (
    ("/TP/GAR/CL/BI-01-C", 0x0000, 0x01),
    ("/TP/GAR/CL/BI-02-C", 0x0003, 0x02),
    ("/TP/GAR/CL/BI-03-C", 0x0003, 0x08),
):
    _client(
        _name,
        "service_data_1",
        *SERVICE_DATA_1_DISCOVERY,
        pdu(0x0A, _handle & 0xFF, _handle >> 8),
        pdu(0x01, 0x0A, _handle & 0xFF, _handle >> 8, _ecode),
        step=ReadValue(_handle, expected_ecode=_ecode),
    )

_server(
    "/TP/GAR/SR/BV-01-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0A, 0x03, 0x00),
    pdu(0x0B) + b"BlueZ",
)

_server(
    "/TP/GAR/SR/BV-01-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0A, 0xC4, 0x00),
    pdu(0x0B) + b"111112222233333444445",
    pdu(0x0A, 0xCA, 0x00),
    pdu(0x0B) + b"3333344444555556666677",
)

_server(
    "/TP/GAR/SR/BI-02-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0A, 0x00, 0x00),
    pdu(0x01, 0x0A, 0x00, 0x00, 0x01),
)

_server(
    "/TP/GAR/SR/BI-02-C/large",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0A, 0x0F, 0xF0),
    pdu(0x01, 0x0A, 0x0F, 0xF0, 0x01),
)

_att(
    "/TP/GAR/CL/BV-03-C-1",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x0D, 0x2A),
    pdu(0x09, 0x05, 0x0A, 0x00, 0x01, 0x02, 0x03),
    pdu(0x08, 0x0B, 0x00, 0xFF, 0xFF, 0x0D, 0x2A),
    pdu(0x01, 0x08, 0x0B, 0x00, 0x0A),
    step=ReadByType(UUID_CHAR_16, expected_ecode=0x0A, expected_value=READ_DATA_1),
)

_att(
    "/TP/GAR/CL/BV-03-C-2",
    *MTU_EXCHANGE_CLIENT,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF) + UUID_CHAR_128.to_bytes(),
    pdu(0x09, 0x05, 0x0A, 0x00, 0x01, 0x02, 0x03),
    pdu(0x08, 0x0B, 0x00, 0xFF, 0xFF) + UUID_CHAR_128.to_bytes(),
    pdu(0x01, 0x08, 0x0B, 0x00, 0x0A),
    step=ReadByType(UUID_CHAR_128, expected_ecode=0x0A, expected_value=READ_DATA_1),
)

for _name, _ecode in (
    ("/TP/GAR/CL/BI-06-C", 0x02),
    ("/TP/GAR/CL/BI-07-C", 0x0A),
    ("/TP/GAR/CL/BI-09-C", 0x08),
    ("/TP/GAR/CL/BI-10-C", 0x05),
    ("/TP/GAR/CL/BI-11-C", 0x0C),
):
    _att(
        _name,
        *MTU_EXCHANGE_CLIENT,
        pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x0D, 0x2A),
        pdu(0x01, 0x08, 0x0B, 0x00, _ecode),
        step=ReadByType(UUID_CHAR_16, expected_ecode=_ecode),
    )

_B009_128 = AttUuid.parse("0000b009-0000-0000-0123-456789abcdef").to_bytes()
_D5D4_128 = AttUuid.parse("0000d5d4-0000-0000-0123-456789abcdef").to_bytes()

_server(
    "/TP/GAR/SR/BV-03-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF) + _B009_128,
    pdu(0x09, 0x03, 0x15, 0xF0, 0x09),
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x01, 0x2A),
    pdu(0x09, 0x04, 0x17, 0xF0, 0x00, 0x00),
)

_server(
    "/TP/GAR/SR/BV-03-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF) + _D5D4_128,
    pdu(0x09, 0x03, 0x76, 0x00, 0x44),
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x02, 0xB0),
    pdu(0x09, 0x15, 0x25, 0x00) + b"1111122222333334444",
)

_server(
    "/TP/GAR/SR/BI-06-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0x07, 0xB0),
    pdu(0x01, 0x08, 0x32, 0x00, 0x02),
)

for _db in ("small", "large-1"):
    _db_name = "ts_small_db" if _db == "small" else "ts_large_db_1"
    _server(
        f"/TP/GAR/SR/BI-07-C/{_db}",
        _db_name,
        _MTU_RSP,
        pdu(0x08, 0x01, 0x00, 0xFF, 0xFF, 0xF0, 0x0F),
        pdu(0x01, 0x08, 0x01, 0x00, 0x0A),
    )
    _server(
        f"/TP/GAR/SR/BI-08-C/{_db}",
        _db_name,
        _MTU_RSP,
        pdu(0x08, 0x02, 0x00, 0x01, 0x00, 0x00, 0x28),
        pdu(0x01, 0x08, 0x02, 0x00, 0x01),
    )
    _server(
        f"/TP/GAR/SR/BI-14-C/{_db}",
        _db_name,
        _MTU_RSP,
        pdu(0x0C, 0xF0, 0x0F, 0x00, 0x00),
        pdu(0x01, 0x0C, 0xF0, 0x0F, 0x01),
    )
    _server(
        f"/TP/GAR/SR/BI-24-C/{_db}",
        _db_name,
        _MTU_RSP,
        pdu(0x0A, 0xF0, 0x0F),
        pdu(0x01, 0x0A, 0xF0, 0x0F, 0x01),
    )

_server(
    "/TP/GAR/SR/BV-04-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0C, 0xD3, 0x00, 0x00, 0x00),
    pdu(0x0D) + bytes.fromhex("11223344556677889900112233445566778899001122"),
    pdu(0x0C, 0xD3, 0x00, 0x16, 0x00),
    pdu(0x0D) + bytes.fromhex("33445566778899001122334455667788990011223344"),
    pdu(0x0C, 0xD3, 0x00, 0x2C, 0x00),
    pdu(0x0D, 0x55),
    pdu(0x0C, 0xD3, 0x00, 0x2D, 0x00),
    pdu(0x0D),
)

_server(
    "/TP/GAR/SR/BI-12-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0C, 0x27, 0x00, 0x00, 0x00),
    pdu(0x01, 0x0C, 0x27, 0x00, 0x02),
)

_server(
    "/TP/GAR/SR/BI-13-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0C, 0x13, 0xF0, 0xF0, 0x00),
    pdu(0x01, 0x0C, 0x13, 0xF0, 0x07),
)

_server(
    "/TP/GAR/SR/BI-13-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0C, 0xD3, 0x00, 0xF0, 0x00),
    pdu(0x01, 0x0C, 0xD3, 0x00, 0x07),
)

_client(
    "/TP/GAR/CL/BV-05-C",
    "service_data_1",
    *SERVICE_DATA_1_DISCOVERY,
    pdu(0x0E, 0x03, 0x00, 0x07, 0x00),
    pdu(0x0F, 0x01, 0x02, 0x03),
    step=ReadMultiple((0x0003, 0x0007), expected_value=READ_DATA_1),
)

for _name, _ecode in (
    ("/TP/GAR/CL/BI-18-C", 0x02),
    ("/TP/GAR/CL/BI-19-C", 0x01),
    ("/TP/GAR/CL/BI-20-C", 0x08),
    ("/TP/GAR/CL/BI-21-C", 0x05),
    ("/TP/GAR/CL/BI-21-C-2", 0x0C),
):
    _client(
        _name,
        "service_data_1",
        *SERVICE_DATA_1_DISCOVERY,
        pdu(0x0E, 0x03, 0x00, 0x07, 0x00),
        pdu(0x01, 0x0E, 0x03, 0x00, _ecode),
        step=ReadMultiple((0x0003, 0x0007), expected_ecode=_ecode),
    )

_server(
    "/TP/GAR/SR/BV-05-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0E, 0x15, 0xF0, 0x03, 0x00),
    pdu(0x0F, 0x09) + b"BlueZ",
)

_server(
    "/TP/GAR/SR/BV-05-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0E, 0x44, 0x00, 0x06, 0x00, 0xC4, 0x00),
    pdu(0x0F, 0x11, 0x0B) + b"1111122222333334444",
)

_server(
    "/TP/GAR/SR/BI-18-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0E, 0x44, 0x00, 0x06, 0x00, 0x27, 0x00),
    pdu(0x01, 0x0E, 0x27, 0x00, 0x02),
)

_server(
    "/TP/GAR/SR/BI-19-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0E, 0x15, 0xF0, 0xF0, 0x0F),
    pdu(0x01, 0x0E, 0xF0, 0x0F, 0x01),
)

_server(
    "/TP/GAR/SR/BI-19-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0E, 0x44, 0x00, 0xF0, 0x0F),
    pdu(0x01, 0x0E, 0xF0, 0x0F, 0x01),
)

_server(
    "/TP/GAR/SR/BV-06-C/small",
    "ts_small_db",
    _MTU_RSP,
    pdu(0x0A, 0x05, 0x00),
    pdu(0x0B) + b"Manufacturer Name",
)

_server(
    "/TP/GAR/SR/BV-06-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0A, 0xD4, 0x00),
    pdu(0x0B) + bytes.fromhex("112233445566778899001234567890123456789012") + b"\x34",
)

_server(
    "/TP/GAR/SR/BI-23-C/large-1",
    "ts_large_db_1",
    _MTU_RSP,
    pdu(0x0A, 0x96, 0x00),
    pdu(0x01, 0x0A, 0x96, 0x00, 0x02),
)
