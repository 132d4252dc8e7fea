# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""gatt_conformance: scripted conformance harness for GATT/ATT engines.

Builds reference attribute databases, compares databases structurally and
plays byte-exact transcripts against an engine under test.
"""

from gatt_conformance.db import (
    AttributeDatabase,
    DatabaseBuilder,
    Include,
    Mismatch,
    Permission,
    PrimaryService,
    Property,
    SecondaryService,
    assert_equivalent,
    build,
    find_mismatch,
    matches,
)
from gatt_conformance.errors import (
    ChannelError,
    HarnessError,
    InvalidSpecification,
    ScenarioError,
    StructuralMismatch,
    TranscriptMismatch,
)
from gatt_conformance.transcript import (
    EventLoopScheduler,
    Expectation,
    ManualScheduler,
    Script,
    Stimulus,
    TranscriptPlayer,
    Verdict,
    make_channel_pair,
    play,
)
from gatt_conformance.uuids import AttUuid

__all__ = [
    "AttUuid",
    "AttributeDatabase",
    "ChannelError",
    "DatabaseBuilder",
    "EventLoopScheduler",
    "Expectation",
    "HarnessError",
    "Include",
    "InvalidSpecification",
    "ManualScheduler",
    "Mismatch",
    "Permission",
    "PrimaryService",
    "Property",
    "ScenarioError",
    "Script",
    "SecondaryService",
    "Stimulus",
    "StructuralMismatch",
    "TranscriptMismatch",
    "TranscriptPlayer",
    "Verdict",
    "assert_equivalent",
    "build",
    "find_mismatch",
    "make_channel_pair",
    "play",
]
