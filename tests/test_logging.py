# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Tests for debug formatting helpers, wire logging and the JSON formatter."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from gatt_conformance._debug import fmt_hexdump, fmt_pdu
from gatt_conformance.logging_utils import HarnessJsonFormatter
from gatt_conformance.transcript import ManualScheduler, PlayerState, Script, SocketChannel, TranscriptPlayer

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


class TestFmtPdu:
    """Tests for fmt_pdu."""

    def test_short(self) -> None:
        """Length prefix and spaced hex."""
        assert fmt_pdu(b"\x02\x00\x02") == "[3] 02 00 02"

    def test_empty(self) -> None:
        """Empty PDUs still show the length."""
        assert fmt_pdu(b"") == "[0] "

    def test_truncated(self) -> None:
        """Long PDUs are cut after 32 bytes."""
        result = fmt_pdu(bytes(40))
        assert result.startswith("[40] 00 00")
        assert result.endswith(" ...")
        assert result.count("00") == 32


class TestFmtHexdump:
    """Tests for fmt_hexdump."""

    def test_single_line(self) -> None:
        """Printable bytes are rendered beside the hex."""
        (line,) = fmt_hexdump("<", b"\x0bBlueZ")
        assert line.startswith("< 0000: 0b 42 6c 75 65 5a")
        assert line.endswith(".BlueZ")

    def test_multiple_lines(self) -> None:
        """Sixteen bytes per line with running offsets."""
        lines = fmt_hexdump(">", bytes(range(20)))
        assert len(lines) == 2
        assert lines[1].startswith("> 0010: 10 11 12 13")

    def test_empty(self) -> None:
        """Empty messages get a marker line."""
        assert fmt_hexdump("<", b"") == ["< 0000: (empty)"]


# ---------------------------------------------------------------------------
# Wire and transcript logging
# ---------------------------------------------------------------------------


class TestWireLogging:
    """The player dumps traffic on the wire logger."""

    def test_both_directions_dumped(
        self,
        caplog: pytest.LogCaptureFixture,
        manual_scheduler: ManualScheduler,
        channel_pair: tuple[SocketChannel, SocketChannel],
    ) -> None:
        """Received and sent messages carry their direction marker."""
        harness_end, engine_end = channel_pair
        player = TranscriptPlayer(harness_end, Script.from_pdus([b"\x02\x00\x02", b"\x03\x00\x02"]), manual_scheduler)
        with caplog.at_level(logging.DEBUG, logger="gatt_conformance.wire"):
            player.start()
            engine_end.send(b"\x02\x00\x02")
            manual_scheduler.run_until_idle()
        wire = [r.getMessage() for r in caplog.records if r.name == "gatt_conformance.wire"]
        assert wire[0].startswith("> 0000: 02 00 02")
        assert wire[1].startswith("< 0000: 03 00 02")

    def test_silent_when_disabled(
        self,
        caplog: pytest.LogCaptureFixture,
        manual_scheduler: ManualScheduler,
        channel_pair: tuple[SocketChannel, SocketChannel],
    ) -> None:
        """Nothing is dumped above DEBUG."""
        harness_end, engine_end = channel_pair
        player = TranscriptPlayer(harness_end, Script.from_pdus([b"\x02\x00\x02"]), manual_scheduler)
        with caplog.at_level(logging.INFO, logger="gatt_conformance.wire"):
            player.start()
            engine_end.send(b"\x02\x00\x02")
            manual_scheduler.run_until_idle()
        assert not [r for r in caplog.records if r.name == "gatt_conformance.wire"]

    def test_failure_logged_with_index(
        self,
        caplog: pytest.LogCaptureFixture,
        manual_scheduler: ManualScheduler,
        channel_pair: tuple[SocketChannel, SocketChannel],
    ) -> None:
        """A failed transcript is reported at INFO with structured fields."""
        harness_end, engine_end = channel_pair
        player = TranscriptPlayer(harness_end, Script.from_pdus([b"\x02\x00\x02"]), manual_scheduler)
        with caplog.at_level(logging.INFO, logger="gatt_conformance.transcript"):
            player.start()
            engine_end.send(b"\x02\x00\x01")
            manual_scheduler.run_until_idle()
        (record,) = [r for r in caplog.records if r.name == "gatt_conformance.transcript"]
        assert record.levelno == logging.INFO
        assert record.__dict__["index"] == 0
        assert record.__dict__["reason"] == "ContentMismatch"


# ---------------------------------------------------------------------------
# HarnessJsonFormatter
# ---------------------------------------------------------------------------


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("gatt_conformance.scenario", logging.WARNING, __file__, 1, msg, (), None)
    record.__dict__.update(extra)
    return record


class TestHarnessJsonFormatter:
    """Tests for HarnessJsonFormatter."""

    def test_standard_fields(self) -> None:
        """Level, logger and message are always present."""
        data = json.loads(HarnessJsonFormatter().format(_record("hello")))
        assert data["level"] == "WARNING"
        assert data["logger"] == "gatt_conformance.scenario"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("+00:00")
        assert "extra" not in data

    def test_context_lifted_in_order(self) -> None:
        """Harness context keys come first, in a fixed order, after the standard fields."""
        record = _record("x", index=3, scenario="/TP/GAR/CL/BV-01-C", state=PlayerState.SENDING)
        data = json.loads(HarnessJsonFormatter().format(record))
        assert list(data)[4:] == ["scenario", "index", "state"]
        assert data["state"] == "sending"

    def test_other_extras_nested(self) -> None:
        """Unknown extras go under "extra"; bytes as hex."""
        data = json.loads(HarnessJsonFormatter().format(_record("x", pdu=b"\x0a\x03", attempt=2)))
        assert data["extra"] == {"pdu": "0a03", "attempt": 2}

    def test_none_context_omitted(self) -> None:
        """A context key logged as None is left out."""
        data = json.loads(HarnessJsonFormatter().format(_record("x", reason=None, index=0)))
        assert "reason" not in data
        assert data["index"] == 0

    def test_reserved_keys_not_overwritten(self) -> None:
        """An extra named like a standard field does not replace it."""
        data = json.loads(HarnessJsonFormatter().format(_record("real", level="fake")))
        assert data["level"] == "WARNING"

    def test_local_time(self) -> None:
        """utc=False falls back to formatTime."""
        record = _record("x")
        formatter = HarnessJsonFormatter(utc=False)
        assert json.loads(formatter.format(record))["timestamp"] == formatter.formatTime(record)

    def test_exception_included(self) -> None:
        """exc_info is rendered."""
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        data = json.loads(HarnessJsonFormatter().format(record))
        assert "ValueError: bad" in data["exception"]
