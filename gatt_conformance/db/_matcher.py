# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Structural equivalence between two attribute databases.

The check is unordered: for every service of the reference database, the
candidate is searched for *some* service with the same
``(start, end, kind, uuid)``.  The first match wins and its characteristics
are compared the same way, ``(declaration handle, value handle, properties,
uuid)``, and then its descriptors, ``(handle, uuid)``.  There is no
backtracking: a failure below the first matching service is a failure.

Values and permissions are not compared.  This is a shape check, not a
value audit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from gatt_conformance.db._types import AttributeDatabase, Characteristic, Descriptor, Service
from gatt_conformance.errors import StructuralMismatch

__all__ = [
    "Mismatch",
    "MismatchLevel",
    "assert_equivalent",
    "find_mismatch",
    "matches",
]

_T = TypeVar("_T")


class MismatchLevel(Enum):
    """Which level of the hierarchy had no counterpart."""

    SERVICE = "service"
    CHARACTERISTIC = "characteristic"
    DESCRIPTOR = "descriptor"


@dataclass(frozen=True)
class Mismatch:
    """The first reference entity with no counterpart in the candidate.

    Attributes:
        level: Hierarchy level of the unmatched entity.
        handle: Its handle (service start, characteristic declaration, or
            descriptor handle).
        description: Human-readable identity of the entity.
        service_handle: Start handle of the enclosing service.
        characteristic_handle: Declaration handle of the enclosing
            characteristic, for descriptor mismatches.

    """

    level: MismatchLevel
    handle: int
    description: str
    service_handle: int
    characteristic_handle: int | None = None

    def __str__(self) -> str:
        """Return a one-line summary."""
        where = f"service {self.service_handle:#06x}"
        if self.characteristic_handle is not None:
            where += f", characteristic {self.characteristic_handle:#06x}"
        if self.level is MismatchLevel.SERVICE:
            return f"No matching service for {self.description}"
        return f"No matching {self.level.value} for {self.description} in {where}"


def _service_key(service: Service) -> tuple[object, ...]:
    return (service.start_handle, service.end_handle, service.kind, service.uuid)


def _characteristic_key(chrc: Characteristic) -> tuple[object, ...]:
    return (chrc.handle, chrc.value_handle, chrc.properties, chrc.uuid)


def _descriptor_key(desc: Descriptor) -> tuple[object, ...]:
    return (desc.handle, desc.uuid)


def _first_match(wanted: _T, candidates: Iterable[_T], key: Callable[[_T], tuple[object, ...]]) -> _T | None:
    target = key(wanted)
    for candidate in candidates:
        if key(candidate) == target:
            return candidate
    return None


def _describe_service(service: Service) -> str:
    return (
        f"{service.kind.value} service {service.uuid} at {service.start_handle:#06x}..{service.end_handle:#06x}"
    )


def _describe_characteristic(chrc: Characteristic) -> str:
    return (
        f"characteristic {chrc.uuid} decl={chrc.handle:#06x} value={chrc.value_handle:#06x} "
        f"properties={int(chrc.properties):#04x}"
    )


def _match_characteristic(ref: Characteristic, cand: Characteristic, service_handle: int) -> Mismatch | None:
    for desc in ref.descriptors:
        if _first_match(desc, cand.descriptors, _descriptor_key) is None:
            return Mismatch(
                level=MismatchLevel.DESCRIPTOR,
                handle=desc.handle,
                description=f"descriptor {desc.uuid} at {desc.handle:#06x}",
                service_handle=service_handle,
                characteristic_handle=ref.handle,
            )
    return None


def _match_service(ref: Service, cand: Service) -> Mismatch | None:
    for chrc in ref.characteristics:
        found = _first_match(chrc, cand.characteristics, _characteristic_key)
        if found is None:
            return Mismatch(
                level=MismatchLevel.CHARACTERISTIC,
                handle=chrc.handle,
                description=_describe_characteristic(chrc),
                service_handle=ref.start_handle,
            )
        mismatch = _match_characteristic(chrc, found, ref.start_handle)
        if mismatch is not None:
            return mismatch
    return None


def find_mismatch(reference: AttributeDatabase, candidate: AttributeDatabase) -> Mismatch | None:
    """Search ``candidate`` for a counterpart of every entity of ``reference``.

    This is one-directional: entities present only in ``candidate`` are
    not reported.

    Returns:
        ``None`` when every reference entity has a counterpart, otherwise
        the first one that does not.

    """
    for service in reference.services:
        found = _first_match(service, candidate.services, _service_key)
        if found is None:
            return Mismatch(
                level=MismatchLevel.SERVICE,
                handle=service.start_handle,
                description=_describe_service(service),
                service_handle=service.start_handle,
            )
        mismatch = _match_service(service, found)
        if mismatch is not None:
            return mismatch
    return None


def assert_equivalent(reference: AttributeDatabase, candidate: AttributeDatabase) -> None:
    """Raise if some entity of ``reference`` has no counterpart in ``candidate``.

    Raises:
        StructuralMismatch: Identifying the first unmatched entity.

    """
    mismatch = find_mismatch(reference, candidate)
    if mismatch is not None:
        raise StructuralMismatch(mismatch)


def matches(reference: AttributeDatabase, candidate: AttributeDatabase) -> bool:
    """Whether the two databases have the same structure.

    The search runs in both directions, so the result does not depend on
    argument order and an entity missing from either side is detected.
    """
    return find_mismatch(reference, candidate) is None and find_mismatch(candidate, reference) is None
