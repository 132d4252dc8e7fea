# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""PDU groups shared by several scenarios.

Each group is a flat tuple of PDUs in conversation order, starting with
one the harness expects to receive; alternate entries are the harness's
replies.
"""

from __future__ import annotations

__all__ = [
    "MTU_EXCHANGE_CLIENT",
    "PRIMARY_DISC_LARGE_DB_1",
    "PRIMARY_DISC_SMALL_DB",
    "SECONDARY_DISC_SMALL_DB",
    "SERVER_MTU_EXCHANGE",
    "SERVICE_DATA_1_DISCOVERY",
    "pdu",
]


def pdu(*octets: int) -> bytes:
    """Build a PDU from individual octets."""
    return bytes(octets)


SERVER_MTU_EXCHANGE = pdu(0x02, 0x17, 0x00)
"""Exchange MTU request the harness sends to a server before its script."""

MTU_EXCHANGE_CLIENT: tuple[bytes, ...] = (
    pdu(0x02, 0x00, 0x02),
    pdu(0x03, 0x00, 0x02),
)

SERVICE_DATA_1_DISCOVERY: tuple[bytes, ...] = (
    *MTU_EXCHANGE_CLIENT,
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x11, 0x06, 0x01, 0x00, 0x04, 0x00, 0x01, 0x18),
    pdu(0x10, 0x05, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x11, 0x06, 0x05, 0x00, 0x08, 0x00, 0x0D, 0x18),
    pdu(0x10, 0x09, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x01, 0x10, 0x09, 0x00, 0x0A),
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x01, 0x28),
    pdu(0x01, 0x10, 0x01, 0x00, 0x0A),
    pdu(0x08, 0x01, 0x00, 0x04, 0x00, 0x02, 0x28),
    pdu(0x01, 0x08, 0x01, 0x00, 0x0A),
    pdu(0x08, 0x05, 0x00, 0x08, 0x00, 0x02, 0x28),
    pdu(0x01, 0x08, 0x05, 0x00, 0x0A),
    pdu(0x08, 0x01, 0x00, 0x04, 0x00, 0x03, 0x28),
    pdu(0x09, 0x07, 0x02, 0x00, 0x02, 0x03, 0x00, 0x00, 0x2A),
    pdu(0x08, 0x03, 0x00, 0x04, 0x00, 0x03, 0x28),
    pdu(0x01, 0x08, 0x03, 0x00, 0x0A),
    pdu(0x04, 0x04, 0x00, 0x04, 0x00),
    pdu(0x05, 0x01, 0x04, 0x00, 0x01, 0x29),
    pdu(0x08, 0x05, 0x00, 0x08, 0x00, 0x03, 0x28),
    pdu(0x09, 0x07, 0x06, 0x00, 0x02, 0x07, 0x00, 0x29, 0x2A),
    pdu(0x08, 0x07, 0x00, 0x08, 0x00, 0x03, 0x28),
    pdu(0x01, 0x08, 0x07, 0x00, 0x0A),
    pdu(0x04, 0x08, 0x00, 0x08, 0x00),
    pdu(0x05, 0x01, 0x08, 0x00, 0x01, 0x29),
)
"""Full client discovery of ``service_data_1``."""

PRIMARY_DISC_SMALL_DB: tuple[bytes, ...] = (
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x11, 0x06, 0x10, 0xF0, 0x17, 0xF0, 0x00, 0x18, 0xFF, 0xFF, 0xFF, 0xFF, 0x0A, 0x18),
)

PRIMARY_DISC_LARGE_DB_1: tuple[bytes, ...] = (
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x06,
        0x10, 0x00, 0x13, 0x00, 0x01, 0x18,
        0x20, 0x00, 0x29, 0x00, 0x0A, 0xA0,
        0x30, 0x00, 0x32, 0x00, 0x0B, 0xA0,
    ),  # fmt: skip
    pdu(0x10, 0x33, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x06,
        0x40, 0x00, 0x46, 0x00, 0x00, 0x18,
        0x50, 0x00, 0x52, 0x00, 0x0B, 0xA0,
        0x60, 0x00, 0x6B, 0x00, 0x0B, 0xA0,
    ),  # fmt: skip
    pdu(0x10, 0x6C, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x06,
        0x70, 0x00, 0x76, 0x00, 0x0B, 0xA0,
        0x80, 0x00, 0x85, 0x00, 0x0B, 0xA0,
    ),  # fmt: skip
    pdu(0x10, 0x86, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x14, 0x90, 0x00, 0x96, 0x00,
        0xEF, 0xCD, 0xAB, 0x89, 0x67, 0x45, 0x23, 0x01,
        0x00, 0x00, 0x00, 0x00, 0x0C, 0xA0, 0x00, 0x00,
    ),  # fmt: skip
    pdu(0x10, 0x97, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x11, 0x06, 0xA0, 0x00, 0xB1, 0x00, 0x0F, 0xA0),
    pdu(0x10, 0xB2, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(
        0x11, 0x14, 0xC0, 0x00, 0xDD, 0x00,
        0xEF, 0xCD, 0xAB, 0x89, 0x67, 0x45, 0x23, 0x01,
        0x00, 0x00, 0x00, 0x00, 0x0C, 0xA0, 0x00, 0x00,
    ),  # fmt: skip
    pdu(0x10, 0xDE, 0x00, 0xFF, 0xFF, 0x00, 0x28),
    pdu(0x01, 0x10, 0xDE, 0x00, 0x0A),
)

SECONDARY_DISC_SMALL_DB: tuple[bytes, ...] = (
    pdu(0x10, 0x01, 0x00, 0xFF, 0xFF, 0x01, 0x28),
    pdu(0x11, 0x06, 0x01, 0x00, 0x0F, 0x00, 0x0A, 0x18),
    pdu(0x10, 0x10, 0x00, 0xFF, 0xFF, 0x01, 0x28),
    pdu(0x01, 0x10, 0x10, 0x00, 0x0A),
)
