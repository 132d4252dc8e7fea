# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Attribute database data model.

A database is an ordered collection of services, each owning
characteristics, each owning descriptors, plus a flat handle index for
direct lookup.  Everything here is frozen: a database is built once by
:mod:`gatt_conformance.db._builder` and never mutated afterwards, so it can
be shared by reference between whatever serves it and whatever inspects it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from types import MappingProxyType

import pyarrow as pa

from gatt_conformance.uuids import AttUuid

__all__ = [
    "Attribute",
    "AttributeDatabase",
    "Characteristic",
    "Descriptor",
    "IncludedService",
    "Permission",
    "Property",
    "Service",
    "ServiceKind",
]


class Permission(IntFlag):
    """Attribute access permissions."""

    READ = 0x01
    WRITE = 0x02
    READ_ENCRYPT = 0x04
    WRITE_ENCRYPT = 0x08
    ENCRYPT = READ_ENCRYPT | WRITE_ENCRYPT
    READ_AUTHEN = 0x10
    WRITE_AUTHEN = 0x20
    AUTHEN = READ_AUTHEN | WRITE_AUTHEN
    AUTHOR = 0x40
    NONE = 0x80


class Property(IntFlag):
    """Characteristic properties, as carried in the declaration value."""

    BROADCAST = 0x01
    READ = 0x02
    WRITE_WITHOUT_RESP = 0x04
    WRITE = 0x08
    NOTIFY = 0x10
    INDICATE = 0x20
    AUTH = 0x40
    EXT_PROP = 0x80


class ServiceKind(Enum):
    """Whether a service is primary or secondary."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Attribute:
    """The base addressable unit of a database."""

    handle: int
    type: AttUuid
    value: bytes = b""
    permissions: Permission = Permission(0)


@dataclass(frozen=True)
class Descriptor:
    """Metadata attribute attached to a characteristic."""

    attribute: Attribute

    @property
    def handle(self) -> int:
        """Descriptor handle."""
        return self.attribute.handle

    @property
    def uuid(self) -> AttUuid:
        """Descriptor type."""
        return self.attribute.type

    @property
    def value(self) -> bytes:
        """Descriptor value."""
        return self.attribute.value

    @property
    def permissions(self) -> Permission:
        """Descriptor permissions."""
        return self.attribute.permissions


@dataclass(frozen=True)
class Characteristic:
    """A typed, permissioned value exposed under a service.

    Attributes:
        declaration: The declaration attribute (properties, value handle, uuid).
        value_attribute: The attribute holding the actual value, always at
            ``declaration.handle + 1``.
        uuid: Characteristic type.
        properties: Declared properties.
        descriptors: Descriptors in handle order.

    """

    declaration: Attribute
    value_attribute: Attribute
    uuid: AttUuid
    properties: Property
    descriptors: tuple[Descriptor, ...] = ()

    @property
    def handle(self) -> int:
        """Declaration handle."""
        return self.declaration.handle

    @property
    def value_handle(self) -> int:
        """Value handle."""
        return self.value_attribute.handle

    @property
    def end_handle(self) -> int:
        """Last handle owned by this characteristic (value or last descriptor)."""
        if self.descriptors:
            return self.descriptors[-1].handle
        return self.value_attribute.handle


@dataclass(frozen=True)
class IncludedService:
    """Reference from one service to another, resolved at build time."""

    attribute: Attribute
    start_handle: int
    end_handle: int
    uuid: AttUuid

    @property
    def handle(self) -> int:
        """Handle of the include declaration itself."""
        return self.attribute.handle


@dataclass(frozen=True)
class Service:
    """A contiguous handle range grouping related characteristics.

    Attributes:
        declaration: The service declaration attribute at ``start_handle``.
        end_handle: Last handle of the declared range (inclusive).
        kind: Primary or secondary.
        uuid: Service type.
        includes: Included-service references in declaration order.
        characteristics: Characteristics in handle order.

    """

    declaration: Attribute
    end_handle: int
    kind: ServiceKind
    uuid: AttUuid
    includes: tuple[IncludedService, ...] = ()
    characteristics: tuple[Characteristic, ...] = ()

    @property
    def start_handle(self) -> int:
        """First handle of the range (the declaration)."""
        return self.declaration.handle

    @property
    def primary(self) -> bool:
        """Whether this is a primary service."""
        return self.kind is ServiceKind.PRIMARY

    def attributes(self) -> Iterator[tuple[str, Attribute]]:
        """Yield ``(role, attribute)`` for every attribute in handle order."""
        children: list[tuple[str, Attribute]] = [("include", inc.attribute) for inc in self.includes]
        for chrc in self.characteristics:
            children.append(("characteristic", chrc.declaration))
            children.append(("value", chrc.value_attribute))
            children.extend(("descriptor", desc.attribute) for desc in chrc.descriptors)
        children.sort(key=lambda item: item[1].handle)
        yield f"{self.kind.value}_service", self.declaration
        yield from children


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

_ATTRIBUTE_FIELDS: list[pa.Field[pa.DataType]] = [
    pa.field("handle", pa.uint16()),
    pa.field("type", pa.utf8()),
    pa.field("value", pa.binary()),
    pa.field("permissions", pa.uint8()),
    pa.field("service", pa.uint16()),
    pa.field("role", pa.utf8()),
]
ATTRIBUTE_SCHEMA = pa.schema(_ATTRIBUTE_FIELDS)
"""Arrow schema of :meth:`AttributeDatabase.to_arrow`."""


@dataclass(frozen=True)
class AttributeDatabase:
    """Immutable, handle-addressed hierarchy of services.

    Attributes:
        services: Services ordered by start handle.

    """

    services: tuple[Service, ...] = ()
    _index: Mapping[int, Attribute] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Build the flat handle index."""
        index: dict[int, Attribute] = {}
        for service in self.services:
            for _, attr in service.attributes():
                index[attr.handle] = attr
        object.__setattr__(self, "_index", MappingProxyType(dict(sorted(index.items()))))

    def __len__(self) -> int:
        """Number of attributes."""
        return len(self._index)

    def __iter__(self) -> Iterator[Attribute]:
        """Iterate attributes in handle order."""
        return iter(self._index.values())

    def __contains__(self, handle: object) -> bool:
        """Whether an attribute exists at ``handle``."""
        return handle in self._index

    @property
    def handles(self) -> tuple[int, ...]:
        """All attribute handles in ascending order."""
        return tuple(self._index)

    def get_attribute(self, handle: int) -> Attribute | None:
        """Return the attribute at ``handle``, or ``None``."""
        return self._index.get(handle)

    def read(self, handle: int) -> bytes:
        """Return the value stored at ``handle``.

        Raises:
            KeyError: If no attribute has that handle.

        """
        try:
            return self._index[handle].value
        except KeyError:
            raise KeyError(f"No attribute at handle {handle:#06x}") from None

    def get_service(self, start_handle: int) -> Service | None:
        """Return the service whose declaration is at ``start_handle``."""
        for service in self.services:
            if service.start_handle == start_handle:
                return service
        return None

    def service_for_handle(self, handle: int) -> Service | None:
        """Return the service whose range contains ``handle``."""
        for service in self.services:
            if service.start_handle <= handle <= service.end_handle:
                return service
        return None

    def to_arrow(self) -> pa.RecordBatch:
        """Export every attribute as one row of an Arrow record batch."""
        columns: dict[str, list[object]] = {f.name: [] for f in ATTRIBUTE_SCHEMA}
        for service in self.services:
            for role, attr in service.attributes():
                columns["handle"].append(attr.handle)
                columns["type"].append(str(attr.type))
                columns["value"].append(attr.value)
                columns["permissions"].append(int(attr.permissions))
                columns["service"].append(service.start_handle)
                columns["role"].append(role)
        return pa.RecordBatch.from_pydict(columns, schema=ATTRIBUTE_SCHEMA)
