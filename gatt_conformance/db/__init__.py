# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Attribute databases: building them and comparing their structure.

Usage::

    from gatt_conformance.db import PrimaryService, Characteristic, Permission, Property, build, matches

    db = build([
        PrimaryService(0x0001, "1800", 4),
        Characteristic("2a0d", Permission.READ, Property.READ, b"\\x01\\x02\\x03"),
    ])
    assert db.read(0x0003) == b"\\x01\\x02\\x03"
    assert matches(db, db)

``Characteristic`` and ``Descriptor`` exported here are the *spec entries*
accepted by :func:`build`; the built nodes live in
:mod:`gatt_conformance.db._types` and are reached through
:attr:`AttributeDatabase.services`.
"""

from gatt_conformance.db._builder import (
    Characteristic,
    DatabaseBuilder,
    Descriptor,
    Include,
    PrimaryService,
    SecondaryService,
    SpecEntry,
    build,
)
from gatt_conformance.db._matcher import Mismatch, MismatchLevel, assert_equivalent, find_mismatch, matches
from gatt_conformance.db._types import (
    ATTRIBUTE_SCHEMA,
    Attribute,
    AttributeDatabase,
    IncludedService,
    Permission,
    Property,
    Service,
    ServiceKind,
)

__all__ = [
    "ATTRIBUTE_SCHEMA",
    "Attribute",
    "AttributeDatabase",
    "Characteristic",
    "DatabaseBuilder",
    "Descriptor",
    "Include",
    "IncludedService",
    "Mismatch",
    "MismatchLevel",
    "Permission",
    "PrimaryService",
    "Property",
    "SecondaryService",
    "Service",
    "ServiceKind",
    "SpecEntry",
    "assert_equivalent",
    "build",
    "find_mismatch",
    "matches",
]
