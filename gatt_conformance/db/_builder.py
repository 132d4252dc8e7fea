# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Declarative attribute-database builder.

A database is described as a flat, ordered list of spec entries::

    build([
        PrimaryService(0x0001, "1800", 4),
        Characteristic("2a0d", Permission.READ, Property.READ, b"\\x01\\x02\\x03"),
    ])

Services place themselves at their declared start handle and span exactly
``handle_count`` handles; the builder never auto-sizes.  Children take the
next free handle of the current service (or characteristic, for
descriptors).  Include targets are resolved only when the build is
finalized, so a service may include one declared later in the list.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable
from dataclasses import dataclass, field

from gatt_conformance._debug import db_logger
from gatt_conformance.db._types import (
    Attribute,
    AttributeDatabase,
    Characteristic as CharacteristicNode,
    Descriptor as DescriptorNode,
    IncludedService,
    Permission,
    Property,
    Service,
    ServiceKind,
)
from gatt_conformance.errors import InvalidSpecification
from gatt_conformance.uuids import CHARACTERISTIC, INCLUDE, PRIMARY_SERVICE, SECONDARY_SERVICE, AttUuid

__all__ = [
    "Characteristic",
    "DatabaseBuilder",
    "Descriptor",
    "Include",
    "PrimaryService",
    "SecondaryService",
    "SpecEntry",
    "build",
]

_MAX_HANDLE = 0xFFFF


def _as_bytes(value: bytes | bytearray | str | Iterable[int]) -> bytes:
    """Accept raw bytes, a text string (UTF-8), or an iterable of ints."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


# ---------------------------------------------------------------------------
# Spec entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimaryService:
    """Start a primary service spanning ``handle_count`` handles."""

    start_handle: int
    uuid: AttUuid | str | int
    handle_count: int


@dataclass(frozen=True)
class SecondaryService:
    """Start a secondary service spanning ``handle_count`` handles."""

    start_handle: int
    uuid: AttUuid | str | int
    handle_count: int


@dataclass(frozen=True)
class Include:
    """Include the service whose declaration is at ``target_handle``."""

    target_handle: int


@dataclass(frozen=True)
class Characteristic:
    """Add a characteristic (declaration + value) to the current service."""

    uuid: AttUuid | str | int
    permissions: Permission = Permission(0)
    properties: Property = Property(0)
    value: bytes | str = b""


@dataclass(frozen=True)
class Descriptor:
    """Add a descriptor to the current characteristic."""

    uuid: AttUuid | str | int
    permissions: Permission = Permission(0)
    value: bytes | str = b""


SpecEntry = PrimaryService | SecondaryService | Include | Characteristic | Descriptor
"""One record of a database specification."""


# ---------------------------------------------------------------------------
# Drafts (mutable, internal to a build)
# ---------------------------------------------------------------------------


@dataclass
class _CharacteristicDraft:
    declaration_handle: int
    uuid: AttUuid
    permissions: Permission
    properties: Property
    value: bytes
    descriptors: list[Attribute] = field(default_factory=list)


@dataclass
class _ServiceDraft:
    start_handle: int
    end_handle: int
    kind: ServiceKind
    uuid: AttUuid
    next_handle: int
    includes: list[tuple[int, int]] = field(default_factory=list)
    characteristics: list[_CharacteristicDraft] = field(default_factory=list)
    active: bool = False

    def allocate(self, count: int, what: str) -> int:
        """Reserve ``count`` consecutive handles and return the first."""
        if self.active:
            raise InvalidSpecification(f"Service at {self.start_handle:#06x} is sealed; cannot add {what}")
        first = self.next_handle
        if first + count - 1 > self.end_handle:
            raise InvalidSpecification(
                f"Service at {self.start_handle:#06x} spans {self.end_handle - self.start_handle + 1} handles "
                f"but needs more to fit {what}"
            )
        self.next_handle += count
        return first


class DatabaseBuilder:
    """Incrementally expands spec entries into an :class:`AttributeDatabase`.

    Use :func:`build` for the common one-shot case.  A builder can be
    finalized once; afterwards it rejects further entries.
    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._services: list[_ServiceDraft] = []
        self._current: _ServiceDraft | None = None
        self._current_char: _CharacteristicDraft | None = None
        self._finished = False

    def add(self, entry: SpecEntry) -> None:
        """Apply one spec entry.

        Raises:
            InvalidSpecification: If the entry cannot be placed.

        """
        if self._finished:
            raise InvalidSpecification("Builder already finalized")
        if isinstance(entry, (PrimaryService, SecondaryService)):
            kind = ServiceKind.PRIMARY if isinstance(entry, PrimaryService) else ServiceKind.SECONDARY
            self._add_service(entry.start_handle, AttUuid.parse(entry.uuid), kind, entry.handle_count)
        elif isinstance(entry, Include):
            self._add_include(entry.target_handle)
        elif isinstance(entry, Characteristic):
            self._add_characteristic(entry)
        elif isinstance(entry, Descriptor):
            self._add_descriptor(entry)
        else:
            raise InvalidSpecification(f"Unknown spec entry: {entry!r}")

    def extend(self, entries: Iterable[SpecEntry]) -> None:
        """Apply every entry in order."""
        for entry in entries:
            self.add(entry)

    def _require_service(self, what: str) -> _ServiceDraft:
        if self._current is None:
            raise InvalidSpecification(f"{what} declared before any service")
        return self._current

    def _seal_current(self) -> None:
        if self._current is not None:
            self._current.active = True
        self._current = None
        self._current_char = None

    def _add_service(self, start: int, uuid: AttUuid, kind: ServiceKind, count: int) -> None:
        if count < 1:
            raise InvalidSpecification(f"Service at {start:#06x} must span at least one handle, got {count}")
        end = start + count - 1
        if start < 1 or end > _MAX_HANDLE:
            raise InvalidSpecification(f"Service range {start:#06x}..{end:#06x} outside 0x0001..0xffff")
        for other in self._services:
            if start <= other.end_handle and other.start_handle <= end:
                raise InvalidSpecification(
                    f"Service range {start:#06x}..{end:#06x} overlaps "
                    f"{other.start_handle:#06x}..{other.end_handle:#06x}"
                )
        self._seal_current()
        draft = _ServiceDraft(start_handle=start, end_handle=end, kind=kind, uuid=uuid, next_handle=start + 1)
        self._services.append(draft)
        self._services.sort(key=lambda s: s.start_handle)
        self._current = draft
        if db_logger.isEnabledFor(logging.DEBUG):
            db_logger.debug("%s service %s at %#06x..%#06x", kind.value, uuid, start, end)

    def _add_include(self, target: int) -> None:
        service = self._require_service("Include")
        handle = service.allocate(1, f"include of {target:#06x}")
        service.includes.append((handle, target))
        # descriptors cannot follow an include declaration
        self._current_char = None

    def _add_characteristic(self, entry: Characteristic) -> None:
        service = self._require_service("Characteristic")
        uuid = AttUuid.parse(entry.uuid)
        decl = service.allocate(2, f"characteristic {uuid}")
        chrc = _CharacteristicDraft(
            declaration_handle=decl,
            uuid=uuid,
            permissions=Permission(entry.permissions),
            properties=Property(entry.properties),
            value=_as_bytes(entry.value),
        )
        service.characteristics.append(chrc)
        self._current_char = chrc
        if db_logger.isEnabledFor(logging.DEBUG):
            db_logger.debug("characteristic %s decl=%#06x value=%#06x", uuid, decl, decl + 1)

    def _add_descriptor(self, entry: Descriptor) -> None:
        service = self._require_service("Descriptor")
        if self._current_char is None:
            raise InvalidSpecification(f"Descriptor {entry.uuid} declared before any characteristic")
        uuid = AttUuid.parse(entry.uuid)
        handle = service.allocate(1, f"descriptor {uuid}")
        self._current_char.descriptors.append(
            Attribute(handle=handle, type=uuid, value=_as_bytes(entry.value), permissions=Permission(entry.permissions))
        )

    def finish(self) -> AttributeDatabase:
        """Seal the last service, resolve includes and return the database.

        Raises:
            InvalidSpecification: If an include target is not a service.

        """
        self._seal_current()
        self._finished = True
        by_start = {draft.start_handle: draft for draft in self._services}
        return AttributeDatabase(services=tuple(self._freeze(draft, by_start) for draft in self._services))

    def _freeze(self, draft: _ServiceDraft, by_start: dict[int, _ServiceDraft]) -> Service:
        decl_type = PRIMARY_SERVICE if draft.kind is ServiceKind.PRIMARY else SECONDARY_SERVICE
        declaration = Attribute(
            handle=draft.start_handle, type=decl_type, value=draft.uuid.to_bytes(), permissions=Permission.READ
        )

        includes: list[IncludedService] = []
        for handle, target in draft.includes:
            included = by_start.get(target)
            if included is None:
                raise InvalidSpecification(
                    f"Include at {handle:#06x} references {target:#06x}, which is not a service declaration"
                )
            value = struct.pack("<HH", included.start_handle, included.end_handle)
            if included.uuid.size == 16:
                value += included.uuid.to_bytes()
            includes.append(
                IncludedService(
                    attribute=Attribute(handle=handle, type=INCLUDE, value=value, permissions=Permission.READ),
                    start_handle=included.start_handle,
                    end_handle=included.end_handle,
                    uuid=included.uuid,
                )
            )

        characteristics: list[CharacteristicNode] = []
        for chrc in draft.characteristics:
            decl_value = struct.pack("<BH", chrc.properties, chrc.declaration_handle + 1) + chrc.uuid.to_bytes()
            characteristics.append(
                CharacteristicNode(
                    declaration=Attribute(
                        handle=chrc.declaration_handle,
                        type=CHARACTERISTIC,
                        value=decl_value,
                        permissions=Permission.READ,
                    ),
                    value_attribute=Attribute(
                        handle=chrc.declaration_handle + 1,
                        type=chrc.uuid,
                        value=chrc.value,
                        permissions=chrc.permissions,
                    ),
                    uuid=chrc.uuid,
                    properties=chrc.properties,
                    descriptors=tuple(DescriptorNode(attribute=attr) for attr in chrc.descriptors),
                )
            )

        return Service(
            declaration=declaration,
            end_handle=draft.end_handle,
            kind=draft.kind,
            uuid=draft.uuid,
            includes=tuple(includes),
            characteristics=tuple(characteristics),
        )


def build(spec: Iterable[SpecEntry]) -> AttributeDatabase:
    """Expand a database specification into an :class:`AttributeDatabase`.

    Args:
        spec: Ordered spec entries.

    Returns:
        The finished, immutable database.

    Raises:
        InvalidSpecification: If a service range is too small for its
            children, ranges overlap, an entry has no enclosing service, or
            an include target never resolves.

    """
    builder = DatabaseBuilder()
    builder.extend(spec)
    return builder.finish()
