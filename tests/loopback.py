# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Loopback engine that replays the other side of a scenario script.

The engine plays the mirror image of the scenario's script on the engine
end of the channel: what the harness expects, the engine sends, and what
the harness sends, the engine checks.  Requests issued by a step unpause
the conversation; once the last message arrives the engine decodes the
final response(s) and reports the outcome through the step's callback, the
same way a real ATT client would.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from gatt_conformance.db import AttributeDatabase
from gatt_conformance.scenarios import (
    SERVER_MTU_EXCHANGE,
    SERVICE_DATA_1_DISCOVERY,
    ReadyCallback,
    Role,
    Scenario,
    get_scenario,
    standard_database,
)
from gatt_conformance.transcript import Channel, Expectation, Scheduler, Script, Stimulus
from gatt_conformance.uuids import AttUuid

_ERROR_RSP = 0x01
_READ_BY_TYPE_RSP = 0x09
_ATTRIBUTE_NOT_FOUND = 0x0A


def engine_script(scenario: Scenario) -> Script:
    """The scenario's conversation seen from the engine's end."""
    script = scenario.script
    if scenario.role is Role.SERVER:
        script = script.prepend(Stimulus(SERVER_MTU_EXCHANGE))
    return script.mirrored()


def _error_code(pdu: bytes) -> int:
    return pdu[4] if pdu and pdu[0] == _ERROR_RSP else 0


class LoopbackEngine:
    """Engine for every role, driven by a mirrored script.

    Args:
        scenario: Scenario whose script is mirrored.
        channel: Engine end of the channel.
        scheduler: Scheduler shared with the harness.
        discovered: Database reported by a client once ready.
        corrupt_at: Engine-side script index whose outbound bytes are
            altered before sending.
        outcome: Replaces the decoded ``(success, ecode, payload)``.
        complete_early: Report the step outcome as soon as it is requested.
        guard_callbacks: Catch and record exceptions raised by the step
            callback instead of letting them propagate.

    """

    def __init__(
        self,
        scenario: Scenario,
        channel: Channel,
        scheduler: Scheduler,
        *,
        discovered: AttributeDatabase | None = None,
        corrupt_at: int | None = None,
        outcome: tuple[bool, int, Any] | None = None,
        complete_early: bool = False,
        guard_callbacks: bool = False,
    ) -> None:
        """Attach to the channel and start the scripted conversation."""
        self.scenario = scenario
        self._channel = channel
        self._scheduler = scheduler
        self._entries = list(engine_script(scenario))
        self._index = 0
        self._received: list[bytes] = []
        self._database = discovered
        self._corrupt_at = corrupt_at
        self._outcome = outcome
        self._complete_early = complete_early
        self._guard_callbacks = guard_callbacks
        self._ready_handler: ReadyCallback | None = None
        self._callback: Callable[..., None] | None = None
        self._decode: Callable[[], tuple[bool, int, Any]] | None = None
        self._reading = True
        self.closed = False
        self.mtu_requested: int | None = None
        self.problems: list[str] = []
        self.swallowed: list[BaseException] = []

        self._ready_at: int | None = None
        self._pause_at: int | None = None
        if scenario.role is Role.ATT:
            self._pause_at = 0
        elif scenario.role is Role.CLIENT and scenario.database is not None:
            self._ready_at = len(SERVICE_DATA_1_DISCOVERY)
            self._pause_at = self._ready_at

        scheduler.add_reader(channel.fileno(), self._on_readable)
        scheduler.call_soon(self._pump)

    # -- Engine -------------------------------------------------------------

    def close(self) -> None:
        """Detach from the channel."""
        if self.closed:
            return
        self.closed = True
        self._detach()
        self._channel.close()

    @property
    def received(self) -> tuple[bytes, ...]:
        """Messages received from the harness so far."""
        return tuple(self._received)

    # -- ClientEngine -------------------------------------------------------

    @property
    def database(self) -> AttributeDatabase | None:
        """The database reported as discovered."""
        return self._database

    def set_ready_handler(self, callback: ReadyCallback) -> None:
        """Register the ready callback."""
        self._ready_handler = callback

    def read_value(self, handle: int, callback: Callable[[bool, int, bytes], None]) -> bool:
        """Issue a read."""
        return self._request(callback, self._decode_read)

    def read_multiple(self, handles: Sequence[int], callback: Callable[[bool, int, bytes], None]) -> bool:
        """Issue a multiple read."""
        return self._request(callback, self._decode_read)

    # -- AttEngine ----------------------------------------------------------

    def exchange_mtu(self, mtu: int) -> None:
        """Record the MTU; the exchange itself is part of the script."""
        self.mtu_requested = mtu

    def discover_primary_services(self, uuid: AttUuid | None, callback: Callable[..., None]) -> bool:
        """Start primary service discovery."""
        return self._request(callback, self._decode_search)

    def discover_included_services(self, start: int, end: int, callback: Callable[..., None]) -> bool:
        """Start included service discovery."""
        return self._request(callback, self._decode_search)

    def discover_characteristics(self, start: int, end: int, callback: Callable[..., None]) -> bool:
        """Start characteristic discovery."""
        return self._request(callback, self._decode_search)

    def discover_descriptors(self, start: int, end: int, callback: Callable[..., None]) -> bool:
        """Start descriptor discovery."""
        return self._request(callback, self._decode_search)

    def read_by_type(self, start: int, end: int, uuid: AttUuid, callback: Callable[..., None]) -> bool:
        """Start a read by type."""
        return self._request(callback, self._decode_read_by_type)

    # -- conversation -------------------------------------------------------

    def _request(self, callback: Callable[..., None], decode: Callable[[], tuple[bool, int, Any]]) -> bool:
        if self._callback is not None or self.closed:
            return False
        self._callback = callback
        self._decode = decode
        self._pause_at = None
        if self._complete_early:
            self._scheduler.call_soon(self._report)
            return True
        self._pump()
        return True

    def _pump(self) -> None:
        while not self.closed and self._index < len(self._entries) and self._index != self._pause_at:
            entry = self._entries[self._index]
            if isinstance(entry, Expectation):
                return
            data = entry.data
            if self._index == self._corrupt_at:
                data = bytes([data[0] ^ 0xFF]) + data[1:]
            self._channel.send(data)
            self._index += 1

    def _on_readable(self) -> None:
        data = self._channel.recv()
        if not data:
            self._detach()
            return
        entry = self._entries[self._index] if self._index < len(self._entries) else None
        if not isinstance(entry, Expectation) or entry.data != data:
            self.problems.append(f"unexpected {data.hex(' ')} at {self._index}")
            self._detach()
            return
        self._received.append(data)
        self._index += 1
        if self._index == self._ready_at and self._ready_handler is not None:
            self._ready_handler(True, 0)
        if self._index == len(self._entries):
            if self._callback is not None:
                self._report()
            return
        self._pump()

    def _report(self) -> None:
        callback, decode = self._callback, self._decode
        if callback is None or decode is None:
            return
        self._callback = None
        outcome = self._outcome if self._outcome is not None else decode()
        if not self._guard_callbacks:
            callback(*outcome)
            return
        try:
            callback(*outcome)
        except Exception as exc:
            self.swallowed.append(exc)

    def _detach(self) -> None:
        if self._reading:
            self._reading = False
            self._scheduler.remove_reader(self._channel.fileno())

    # -- outcome decoding ---------------------------------------------------

    def _decode_read(self) -> tuple[bool, int, bytes]:
        last = self._received[-1] if self._received else b""
        ecode = _error_code(last)
        if ecode:
            return False, ecode, b""
        return True, 0, last[1:]

    def _decode_search(self) -> tuple[bool, int, list[object]]:
        ecode = _error_code(self._received[-1] if self._received else b"")
        if ecode in (0, _ATTRIBUTE_NOT_FOUND):
            return True, 0, []
        return False, ecode, []

    def _decode_read_by_type(self) -> tuple[bool, int, list[tuple[int, bytes]]]:
        results: list[tuple[int, bytes]] = []
        for pdu in self._received:
            if pdu[0] != _READ_BY_TYPE_RSP:
                continue
            length = pdu[1]
            for offset in range(2, len(pdu) - length + 1, length):
                handle = int.from_bytes(pdu[offset : offset + 2], "little")
                results.append((handle, pdu[offset + 2 : offset + length]))
        ecode = _error_code(self._received[-1] if self._received else b"")
        success = ecode == 0 or (ecode == _ATTRIBUTE_NOT_FOUND and bool(results))
        return success, ecode, results


class LoopbackFactory:
    """Engine factory serving scenarios in the order they are run.

    ``run_scenarios`` runs scenarios sorted by name, so pass the same
    filtered list.  Extra keyword arguments go to every engine.
    """

    def __init__(self, scenarios: Iterable[Scenario], **engine_options: Any) -> None:
        """Queue the scenarios to serve."""
        self._pending: deque[Scenario] = deque(scenarios)
        self._options = engine_options
        self.engines: list[LoopbackEngine] = []
        self.calls: list[dict[str, Any]] = []

    def __call__(
        self,
        role: Role,
        channel: Channel,
        scheduler: Scheduler,
        *,
        mtu: int,
        database: AttributeDatabase | None,
    ) -> LoopbackEngine:
        """Build the engine for the next scenario."""
        scenario = self._pending.popleft()
        if scenario.role is not role:
            raise AssertionError(f"{scenario.name}: factory called for {role.value}, expected {scenario.role.value}")
        self.calls.append({"name": scenario.name, "role": role, "mtu": mtu, "database": database})
        options = dict(self._options)
        if "discovered" not in options and role is Role.CLIENT and scenario.database is not None:
            options["discovered"] = standard_database(scenario.database)
        engine = LoopbackEngine(scenario, channel, scheduler, **options)
        self.engines.append(engine)
        return engine


GAR_READ = "/TP/GAR/CL/BV-01-C"


def gar_read_factory(
    role: Role,
    channel: Channel,
    scheduler: Scheduler,
    *,
    mtu: int,
    database: AttributeDatabase | None,
) -> LoopbackEngine:
    """Stateless factory for the ``/TP/GAR/CL/BV-01-C`` scenario."""
    return LoopbackFactory([get_scenario(GAR_READ)])(role, channel, scheduler, mtu=mtu, database=database)


def gar_read_wrong_value_factory(
    role: Role,
    channel: Channel,
    scheduler: Scheduler,
    *,
    mtu: int,
    database: AttributeDatabase | None,
) -> LoopbackEngine:
    """Like :func:`gar_read_factory`, but the read reports the wrong value."""
    factory = LoopbackFactory([get_scenario(GAR_READ)], outcome=(True, 0, b"\xff"))
    return factory(role, channel, scheduler, mtu=mtu, database=database)
