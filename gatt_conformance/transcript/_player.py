# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""The scripted mock peer.

A :class:`TranscriptPlayer` owns one end of a channel.  It walks its
:class:`~gatt_conformance.transcript.Script` entry by entry: an
:class:`~gatt_conformance.transcript.Expectation` waits for the next
inbound message and compares it byte for byte, a
:class:`~gatt_conformance.transcript.Stimulus` is written on the next
scheduler tick (never from inside the read handler, so the engine has
returned from its own send before the reply can arrive).

A leading Stimulus is a priming write that the caller performs before
starting the player; the player skips it and waits for the reply.

The first divergence is terminal: the reader is detached, any pending
write is cancelled, and the failed :class:`Verdict` is reported through
``on_finished``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from gatt_conformance._debug import fmt_hexdump, fmt_pdu, transcript_logger, wire_logger
from gatt_conformance.errors import ChannelError, TranscriptMismatch
from gatt_conformance.transcript._channel import Channel
from gatt_conformance.transcript._scheduler import EventLoopScheduler, Handle, Scheduler
from gatt_conformance.transcript._script import Expectation, Script

__all__ = [
    "FailureReason",
    "PlayerState",
    "TranscriptEvent",
    "TranscriptPlayer",
    "Verdict",
    "play",
]


class PlayerState(Enum):
    """Lifecycle of a :class:`TranscriptPlayer`."""

    IDLE = "idle"
    AWAITING_INBOUND = "awaiting_inbound"
    SENDING = "sending"
    DONE = "done"
    ERRORED = "errored"
    STOPPED = "stopped"


class FailureReason(Enum):
    """Why a transcript failed."""

    CONTENT_MISMATCH = "ContentMismatch"
    LENGTH_MISMATCH = "LengthMismatch"
    UNEXPECTED_CLOSE = "UnexpectedClose"
    UNEXPECTED_MESSAGE = "UnexpectedMessage"


@dataclass(frozen=True)
class Verdict:
    """Outcome of a transcript.

    Attributes:
        passed: Whether every entry was honoured.
        reason: Failure category, ``None`` when passed.
        index: Script index at which the failure happened.
        detail: Human-readable description.

    """

    passed: bool
    reason: FailureReason | None = None
    index: int | None = None
    detail: str = ""

    def __str__(self) -> str:
        """Return a one-line summary."""
        if self.passed:
            return "passed"
        reason = self.reason.value if self.reason is not None else "Failed"
        where = f" at entry {self.index}" if self.index is not None else ""
        return f"{reason}{where}: {self.detail}" if self.detail else f"{reason}{where}"

    def raise_for_failure(self) -> None:
        """Raise :class:`TranscriptMismatch` unless the verdict passed."""
        if not self.passed:
            raise TranscriptMismatch(self)


@dataclass(frozen=True)
class TranscriptEvent:
    """One message exchanged by the player.

    Attributes:
        direction: ``"<"`` for sent, ``">"`` for received.
        index: Script index current when the message crossed the channel.
        data: The message bytes.

    """

    direction: str
    index: int
    data: bytes


class TranscriptPlayer:
    """Validates inbound messages against a script and sends scripted replies.

    Args:
        channel: The player's end of the channel.  Closed by :meth:`stop`.
        script: The conversation to enforce.
        scheduler: Loop shared with whatever sits on the other end.
        on_finished: Called with the verdict once the script is exhausted
            or the first failure happens.  If a message arrives after a
            passing verdict it is called again with the failure.

    """

    def __init__(
        self,
        channel: Channel,
        script: Script,
        scheduler: Scheduler,
        on_finished: Callable[[Verdict], None] | None = None,
    ) -> None:
        """Initialize an idle player."""
        self._channel = channel
        self._script = script
        self._scheduler = scheduler
        self._on_finished = on_finished
        self._state = PlayerState.IDLE
        self._index = 0
        self._pending: Handle | None = None
        self._reading = False
        self._verdict: Verdict | None = None
        self._transcript: list[TranscriptEvent] = []

    # -- inspection ---------------------------------------------------------

    @property
    def state(self) -> PlayerState:
        """Current lifecycle state."""
        return self._state

    @property
    def index(self) -> int:
        """Index of the entry being processed (``len(script)`` once done)."""
        return self._index

    @property
    def script(self) -> Script:
        """The script being played."""
        return self._script

    @property
    def verdict(self) -> Verdict | None:
        """Final verdict, ``None`` while the conversation is in progress."""
        return self._verdict

    @property
    def transcript(self) -> tuple[TranscriptEvent, ...]:
        """Every message sent or received so far."""
        return tuple(self._transcript)

    @property
    def remaining(self) -> int:
        """Number of entries not yet honoured."""
        return len(self._script) - self._index

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Attach to the channel and enter the state of the first entry.

        A leading Stimulus is not written; the caller must already have sent
        it.  The player starts awaiting the entry after it.

        Raises:
            RuntimeError: If the player was already started.

        """
        if self._state is not PlayerState.IDLE:
            raise RuntimeError(f"TranscriptPlayer already started (state={self._state.value})")
        self._scheduler.add_reader(self._channel.fileno(), self._on_readable)
        self._reading = True
        if transcript_logger.isEnabledFor(logging.DEBUG):
            transcript_logger.debug("Player started with %d entries", len(self._script))
        if self._script and not isinstance(self._script[0], Expectation):
            self._index = 1
        self._enter_current()

    def stop(self) -> None:
        """Cancel pending work, detach and close the channel.

        A verdict already reached is kept; an unfinished conversation is
        left without one.
        """
        self._cancel_pending()
        self._detach()
        self._channel.close()
        if self._state not in (PlayerState.DONE, PlayerState.ERRORED):
            self._set_state(PlayerState.STOPPED)

    def run(self) -> Verdict:
        """Start, run the scheduler until a verdict is reached, and stop.

        Raises:
            RuntimeError: If the scheduler returned without a verdict.

        """
        user_callback = self._on_finished
        running = False

        def _finished(verdict: Verdict) -> None:
            if user_callback is not None:
                user_callback(verdict)
            if running:
                self._scheduler.stop()

        self._on_finished = _finished
        try:
            self.start()
            if self._verdict is None:
                running = True
                self._scheduler.run()
        finally:
            self._on_finished = user_callback
            self.stop()
        if self._verdict is None:
            raise RuntimeError("Scheduler stopped before the transcript finished")
        return self._verdict

    # -- state machine ------------------------------------------------------

    def _set_state(self, state: PlayerState) -> None:
        if transcript_logger.isEnabledFor(logging.DEBUG):
            transcript_logger.debug(
                "Player %s -> %s at entry %d",
                self._state.value,
                state.value,
                self._index,
                extra={"index": self._index, "state": state.value},
            )
        self._state = state

    def _enter_current(self) -> None:
        if self._index >= len(self._script):
            self._finish(Verdict(passed=True))
            return
        if isinstance(self._script[self._index], Expectation):
            self._set_state(PlayerState.AWAITING_INBOUND)
        else:
            self._set_state(PlayerState.SENDING)
            self._pending = self._scheduler.call_soon(self._send_current)

    def _advance(self) -> None:
        self._index += 1
        self._enter_current()

    def _on_readable(self) -> None:
        try:
            data = self._channel.recv()
        except ChannelError as exc:
            self._fail(FailureReason.UNEXPECTED_CLOSE, str(exc))
            return

        if not data:
            if self._state is PlayerState.DONE:
                self._detach()
            else:
                self._fail(FailureReason.UNEXPECTED_CLOSE, "peer closed the channel")
            return

        self._record(">", data)
        if self._state is PlayerState.AWAITING_INBOUND:
            expected = self._script[self._index].data
            if data != expected:
                self._fail(
                    FailureReason.CONTENT_MISMATCH,
                    f"expected {fmt_pdu(expected)}, received {fmt_pdu(data)}",
                )
                return
            self._advance()
        else:
            self._fail(
                FailureReason.UNEXPECTED_MESSAGE,
                f"received {fmt_pdu(data)} while {self._state.value}",
            )

    def _send_current(self) -> None:
        self._pending = None
        if self._state is not PlayerState.SENDING:
            return
        data = self._script[self._index].data
        try:
            written = self._channel.send(data)
        except ChannelError as exc:
            self._fail(FailureReason.UNEXPECTED_CLOSE, str(exc))
            return
        self._record("<", data[:written])
        if written != len(data):
            self._fail(FailureReason.LENGTH_MISMATCH, f"wrote {written} of {len(data)} bytes")
            return
        self._advance()

    def _record(self, direction: str, data: bytes) -> None:
        self._transcript.append(TranscriptEvent(direction, self._index, data))
        if wire_logger.isEnabledFor(logging.DEBUG):
            for line in fmt_hexdump(direction, data):
                wire_logger.debug(line)

    def _finish(self, verdict: Verdict) -> None:
        self._verdict = verdict
        self._set_state(PlayerState.DONE if verdict.passed else PlayerState.ERRORED)
        if verdict.passed:
            transcript_logger.debug("Transcript passed after %d entries", len(self._script))
        else:
            transcript_logger.info(
                "Transcript failed: %s",
                verdict,
                extra={"index": verdict.index, "reason": verdict.reason.value if verdict.reason else None},
            )
        if self._on_finished is not None:
            self._on_finished(verdict)

    def _fail(self, reason: FailureReason, detail: str) -> None:
        self._cancel_pending()
        self._detach()
        self._finish(Verdict(passed=False, reason=reason, index=self._index, detail=detail))

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _detach(self) -> None:
        if self._reading:
            self._reading = False
            self._scheduler.remove_reader(self._channel.fileno())


def play(channel: Channel, script: Script, scheduler: Scheduler | None = None) -> Verdict:
    """Play ``script`` over ``channel`` to completion.

    Args:
        channel: The player's end of the channel; closed on return.
        script: The conversation to enforce.
        scheduler: Loop to run on; a private :class:`EventLoopScheduler`
            is created and closed when omitted.

    Returns:
        The final verdict.

    """
    owned = scheduler is None
    sched: Scheduler = scheduler if scheduler is not None else EventLoopScheduler()
    try:
        return TranscriptPlayer(channel, script, sched).run()
    finally:
        if owned:
            sched.close()
