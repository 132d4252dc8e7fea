# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Exception taxonomy for the conformance harness.

None of these are retried: every one represents either a test-authoring
defect or a genuine divergence in the engine under test.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gatt_conformance.db._matcher import Mismatch
    from gatt_conformance.transcript._player import Verdict

__all__ = [
    "ChannelError",
    "HarnessError",
    "InvalidSpecification",
    "ScenarioError",
    "StructuralMismatch",
    "TranscriptMismatch",
]


class HarnessError(Exception):
    """Base class for all harness errors."""


class InvalidSpecification(HarnessError):
    """A database specification cannot be built as written."""


class StructuralMismatch(HarnessError):
    """An attribute in one database has no counterpart in the other.

    Attributes:
        mismatch: The first entity that failed to match.

    """

    def __init__(self, mismatch: Mismatch) -> None:
        """Initialize from the mismatch detail."""
        super().__init__(str(mismatch))
        self.mismatch = mismatch


class TranscriptMismatch(HarnessError):
    """The conversation diverged from its script.

    Attributes:
        verdict: The failed verdict produced by the player.

    """

    def __init__(self, verdict: Verdict) -> None:
        """Initialize from a failed verdict."""
        super().__init__(str(verdict))
        self.verdict = verdict


class ChannelError(HarnessError):
    """The underlying message channel misbehaved (e.g. a truncated message)."""


class ScenarioError(HarnessError):
    """A scenario failed outside the transcript itself."""
