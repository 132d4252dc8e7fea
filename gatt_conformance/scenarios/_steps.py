# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scenario steps: the procedure the engine is asked to perform.

A step is started once the engine is ready (client scenarios) or right
after it is attached (att scenarios).  It issues one request and, when
the engine reports back, checks the outcome and calls ``done``.  A wrong
outcome is passed to ``done`` as a
:class:`~gatt_conformance.errors.ScenarioError` rather than raised, so an
engine that catches exceptions from its own callbacks cannot hide it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar, Protocol, cast

from gatt_conformance._debug import fmt_pdu
from gatt_conformance.errors import HarnessError, ScenarioError
from gatt_conformance.scenarios._engine import AttEngine, ClientEngine, Engine, Role
from gatt_conformance.uuids import AttUuid

__all__ = [
    "DiscoverCharacteristics",
    "DiscoverDescriptors",
    "DiscoverIncludedServices",
    "DiscoverPrimaryServices",
    "ReadByType",
    "ReadMultiple",
    "ReadValue",
    "Step",
]

Done = Callable[[HarnessError | None], None]


class Step(Protocol):
    """Something a scenario asks the engine to do."""

    role: ClassVar[Role]

    def run(self, engine: Engine, done: Done) -> None:
        """Issue the request; call ``done`` with ``None`` or the failed check."""
        ...


def _check_outcome(what: str, expected_ecode: int, ecode: int) -> ScenarioError | None:
    if ecode != expected_ecode:
        return ScenarioError(f"{what}: expected att_ecode {expected_ecode:#04x}, got {ecode:#04x}")
    return None


def _check_value(what: str, expected: bytes, value: bytes) -> ScenarioError | None:
    if value != expected:
        return ScenarioError(f"{what}: expected value {fmt_pdu(expected)}, got {fmt_pdu(value)}")
    return None


def _issued(what: str, queued: bool, done: Done) -> None:
    if not queued:
        done(ScenarioError(f"{what}: engine refused the request"))


# ---------------------------------------------------------------------------
# Client reads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReadValue:
    """Read one handle through the client.

    Attributes:
        handle: Attribute to read.
        expected_ecode: ATT error code the read must report (``0`` for none).
        expected_value: Value a successful read must return.

    """

    handle: int
    expected_ecode: int = 0
    expected_value: bytes = b""

    role: ClassVar[Role] = Role.CLIENT

    def run(self, engine: Engine, done: Done) -> None:
        """Issue the read and check the result."""
        what = f"read {self.handle:#06x}"

        def _on_read(success: bool, ecode: int, value: bytes) -> None:
            error = _check_outcome(what, self.expected_ecode, ecode)
            if error is None and success:
                error = _check_value(what, self.expected_value, bytes(value))
            done(error)

        _issued(what, cast(ClientEngine, engine).read_value(self.handle, _on_read), done)


@dataclass(frozen=True)
class ReadMultiple:
    """Read several handles in one request through the client."""

    handles: tuple[int, ...]
    expected_ecode: int = 0
    expected_value: bytes = b""

    role: ClassVar[Role] = Role.CLIENT

    def run(self, engine: Engine, done: Done) -> None:
        """Issue the read and check the result."""
        what = "read multiple " + ",".join(f"{h:#06x}" for h in self.handles)

        def _on_read(success: bool, ecode: int, value: bytes) -> None:
            error = _check_outcome(what, self.expected_ecode, ecode)
            if error is None and success:
                error = _check_value(what, self.expected_value, bytes(value))
            done(error)

        _issued(what, cast(ClientEngine, engine).read_multiple(self.handles, _on_read), done)


# ---------------------------------------------------------------------------
# ATT procedures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReadByType:
    """Read by type over a handle range.

    A successful read must yield exactly one ``(handle, value)`` pair
    carrying ``expected_value``.
    """

    uuid: AttUuid
    start: int = 0x0001
    end: int = 0xFFFF
    expected_ecode: int = 0
    expected_value: bytes = b""

    role: ClassVar[Role] = Role.ATT

    def run(self, engine: Engine, done: Done) -> None:
        """Issue the read and check the result."""
        what = f"read by type {self.uuid} {self.start:#06x}..{self.end:#06x}"

        def _on_read(success: bool, ecode: int, results: Sequence[tuple[int, bytes]]) -> None:
            error = _check_outcome(what, self.expected_ecode, ecode)
            if error is None and success:
                if len(results) != 1:
                    error = ScenarioError(f"{what}: expected exactly one result, got {len(results)}")
                else:
                    error = _check_value(what, self.expected_value, bytes(results[0][1]))
            done(error)

        att = cast(AttEngine, engine)
        _issued(what, att.read_by_type(self.start, self.end, self.uuid, _on_read), done)


def _search_done(what: str, done: Done) -> Callable[[bool, int, Sequence[object]], None]:
    def _on_search(success: bool, ecode: int, results: Sequence[object]) -> None:
        done(None if success else ScenarioError(f"{what}: failed with att_ecode {ecode:#04x}"))

    return _on_search


@dataclass(frozen=True)
class DiscoverPrimaryServices:
    """Discover all primary services, or only those of ``uuid``."""

    uuid: AttUuid | None = None

    role: ClassVar[Role] = Role.ATT

    def run(self, engine: Engine, done: Done) -> None:
        """Start discovery; it must succeed."""
        what = "discover primary services" + (f" {self.uuid}" if self.uuid is not None else "")
        att = cast(AttEngine, engine)
        _issued(what, att.discover_primary_services(self.uuid, _search_done(what, done)), done)


@dataclass(frozen=True)
class _RangeDiscovery:
    start: int = 0x0001
    end: int = 0xFFFF

    role: ClassVar[Role] = Role.ATT
    _procedure: ClassVar[str] = ""

    def run(self, engine: Engine, done: Done) -> None:
        """Start discovery over the range; it must succeed."""
        what = f"{self._procedure.replace('_', ' ')} {self.start:#06x}..{self.end:#06x}"
        method = getattr(cast(AttEngine, engine), self._procedure)
        _issued(what, method(self.start, self.end, _search_done(what, done)), done)


@dataclass(frozen=True)
class DiscoverIncludedServices(_RangeDiscovery):
    """Discover include declarations in a range."""

    _procedure: ClassVar[str] = "discover_included_services"


@dataclass(frozen=True)
class DiscoverCharacteristics(_RangeDiscovery):
    """Discover characteristic declarations in a range."""

    _procedure: ClassVar[str] = "discover_characteristics"


@dataclass(frozen=True)
class DiscoverDescriptors(_RangeDiscovery):
    """Discover descriptors in a range."""

    _procedure: ClassVar[str] = "discover_descriptors"
