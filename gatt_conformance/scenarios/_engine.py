# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""The contract an engine under test must satisfy.

The harness never implements the protocol.  An engine factory builds one
engine instance per scenario, attached to the engine end of a fresh
channel and sharing the scenario's scheduler; the harness then talks to it
through the methods below and through the bytes it writes.

Callbacks follow one shape: ``success`` first, then the ATT error code
(``0`` when none), then the payload.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

from gatt_conformance.db import AttributeDatabase
from gatt_conformance.transcript import Channel, Scheduler
from gatt_conformance.uuids import AttUuid

__all__ = [
    "AttEngine",
    "ClientEngine",
    "Engine",
    "EngineFactory",
    "ReadByTypeCallback",
    "ReadCallback",
    "ReadyCallback",
    "Role",
    "SearchCallback",
    "load_engine_factory",
]


class Role(Enum):
    """Which part of the protocol stack the engine plays."""

    ATT = "att"
    CLIENT = "client"
    SERVER = "server"


ReadyCallback = Callable[[bool, int], None]
"""``(success, att_ecode)`` once client discovery has finished."""

ReadCallback = Callable[[bool, int, bytes], None]
"""``(success, att_ecode, value)`` for value reads."""

ReadByTypeCallback = Callable[[bool, int, Sequence[tuple[int, bytes]]], None]
"""``(success, att_ecode, [(handle, value), ...])``."""

SearchCallback = Callable[[bool, int, Sequence[object]], None]
"""``(success, att_ecode, results)``; results are engine-defined."""


@runtime_checkable
class Engine(Protocol):
    """Common surface of every engine role."""

    def close(self) -> None:
        """Detach from the channel and release resources."""
        ...


@runtime_checkable
class ClientEngine(Engine, Protocol):
    """A GATT client that discovers the remote database on its own."""

    @property
    def database(self) -> AttributeDatabase | None:
        """The database discovered so far."""
        ...

    def set_ready_handler(self, callback: ReadyCallback) -> None:
        """Register the callback fired when discovery completes."""
        ...

    def read_value(self, handle: int, callback: ReadCallback) -> bool:
        """Issue a read; returns whether the request was queued."""
        ...

    def read_multiple(self, handles: Sequence[int], callback: ReadCallback) -> bool:
        """Issue a multiple-handle read; returns whether it was queued."""
        ...


@runtime_checkable
class AttEngine(Engine, Protocol):
    """A bare ATT bearer offering the discovery procedures."""

    def exchange_mtu(self, mtu: int) -> None:
        """Start the MTU exchange."""
        ...

    def discover_primary_services(self, uuid: AttUuid | None, callback: SearchCallback) -> bool:
        """Discover all primary services, or those with ``uuid``."""
        ...

    def discover_included_services(self, start: int, end: int, callback: SearchCallback) -> bool:
        """Discover include declarations in ``[start, end]``."""
        ...

    def discover_characteristics(self, start: int, end: int, callback: SearchCallback) -> bool:
        """Discover characteristic declarations in ``[start, end]``."""
        ...

    def discover_descriptors(self, start: int, end: int, callback: SearchCallback) -> bool:
        """Discover descriptors in ``[start, end]``."""
        ...

    def read_by_type(self, start: int, end: int, uuid: AttUuid, callback: ReadByTypeCallback) -> bool:
        """Read attributes of type ``uuid`` in ``[start, end]``."""
        ...


class EngineFactory(Protocol):
    """Builds one engine per scenario.

    ``database`` is the database to serve for :attr:`Role.SERVER` and
    ``None`` otherwise.
    """

    def __call__(
        self,
        role: Role,
        channel: Channel,
        scheduler: Scheduler,
        *,
        mtu: int,
        database: AttributeDatabase | None,
    ) -> Engine:
        """Create an engine attached to ``channel``."""
        ...


def load_engine_factory(spec: str) -> EngineFactory:
    """Resolve ``"package.module:attribute"`` to an engine factory.

    Raises:
        ValueError: If ``spec`` is malformed or the attribute is not callable.
        ImportError: If the module cannot be imported.

    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Engine factory must look like 'module:attribute', got {spec!r}")
    module = importlib.import_module(module_name)
    factory = module
    for part in attr.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError:
            raise ValueError(f"Module {module_name!r} has no attribute {attr!r}") from None
    if not callable(factory):
        raise ValueError(f"{spec!r} is not callable")
    return factory  # type: ignore[return-value]
