# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scripted mock peer for byte-exact conversation checks.

Usage::

    from gatt_conformance.transcript import ManualScheduler, Script, TranscriptPlayer, make_channel_pair

    harness_end, engine_end = make_channel_pair()
    scheduler = ManualScheduler()
    script = Script.from_pdus([b"\\x02\\x00\\x02", b"\\x03\\x00\\x02"])
    player = TranscriptPlayer(harness_end, script, scheduler)
    player.start()
    engine_end.send(b"\\x02\\x00\\x02")
    scheduler.run_until_idle()
    assert engine_end.recv() == b"\\x03\\x00\\x02"
    assert player.verdict is not None and player.verdict.passed

"""

from gatt_conformance.transcript._channel import DEFAULT_MAX_MESSAGE, Channel, SocketChannel, make_channel_pair
from gatt_conformance.transcript._player import (
    FailureReason,
    PlayerState,
    TranscriptEvent,
    TranscriptPlayer,
    Verdict,
    play,
)
from gatt_conformance.transcript._scheduler import EventLoopScheduler, Handle, ManualScheduler, Scheduler
from gatt_conformance.transcript._script import Entry, Expectation, Script, Stimulus

__all__ = [
    "DEFAULT_MAX_MESSAGE",
    "Channel",
    "Entry",
    "EventLoopScheduler",
    "Expectation",
    "FailureReason",
    "Handle",
    "ManualScheduler",
    "PlayerState",
    "Scheduler",
    "Script",
    "SocketChannel",
    "Stimulus",
    "TranscriptEvent",
    "TranscriptPlayer",
    "Verdict",
    "make_channel_pair",
    "play",
]
