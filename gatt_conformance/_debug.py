# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Debug logging infrastructure for transcript diagnostics.

Provides logger instances under the ``gatt_conformance.*`` hierarchy and
formatting helpers for PDUs.  Enabling
``logging.getLogger("gatt_conformance.wire").setLevel(logging.DEBUG)`` dumps
every message that crosses the channel, ``<`` for what the harness sent and
``>`` for what it received.

All formatting helpers return ``str`` and never log directly.
They are designed to be called inside ``isEnabledFor`` guards so
there is zero overhead when debug logging is disabled.
"""

from __future__ import annotations

import logging

# ---------------------------------------------------------------------------
# Logger hierarchy: gatt_conformance.*
# ---------------------------------------------------------------------------

db_logger = logging.getLogger("gatt_conformance.db")
"""Database construction and handle allocation."""

transcript_logger = logging.getLogger("gatt_conformance.transcript")
"""Transcript player state transitions and verdicts."""

wire_logger = logging.getLogger("gatt_conformance.wire")
"""Hexdump of every message sent or received by a player."""

scenario_logger = logging.getLogger("gatt_conformance.scenario")
"""Scenario driver lifecycle."""

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

_HEXDUMP_WIDTH = 16
"""Bytes per hexdump line."""

_MAX_PDU_LEN = 32
"""Maximum number of bytes shown by fmt_pdu before truncating."""


def fmt_pdu(data: bytes) -> str:
    """Format a PDU compactly on one line.

    Returns:
        ``"[3] 02 00 02"``, truncated with ``...`` past 32 bytes.

    """
    shown = data[:_MAX_PDU_LEN].hex(" ")
    if len(data) > _MAX_PDU_LEN:
        shown += " ..."
    return f"[{len(data)}] {shown}"


def fmt_hexdump(direction: str, data: bytes) -> list[str]:
    """Format a PDU as hexdump lines with a direction marker.

    Each line carries the marker, the offset, the hex bytes and a printable
    rendering::

        < 0000: 0b 42 6c 75 65 5a                                .BlueZ

    Args:
        direction: ``"<"`` for sent, ``">"`` for received.
        data: The message bytes.

    Returns:
        One string per line; a single line for an empty message.

    """
    if not data:
        return [f"{direction} 0000: (empty)"]
    lines: list[str] = []
    for offset in range(0, len(data), _HEXDUMP_WIDTH):
        chunk = data[offset : offset + _HEXDUMP_WIDTH]
        hex_part = chunk.hex(" ").ljust(_HEXDUMP_WIDTH * 3 - 1)
        text_part = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{direction} {offset:04x}: {hex_part}  {text_part}")
    return lines
