# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scripted conversations.

A :class:`Script` is what the mock peer expects to receive and what it
sends back, in order.  Entries strictly alternate between
:class:`Expectation` and :class:`Stimulus`; the end of the sequence is the
terminal marker.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

__all__ = [
    "Entry",
    "Expectation",
    "Script",
    "Stimulus",
]


@dataclass(frozen=True)
class Expectation:
    """Bytes the peer must receive next, compared exactly."""

    data: bytes

    def __post_init__(self) -> None:
        """Normalize bytes-like input."""
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Stimulus:
    """Bytes the peer sends next."""

    data: bytes

    def __post_init__(self) -> None:
        """Normalize bytes-like input."""
        object.__setattr__(self, "data", bytes(self.data))


Entry = Expectation | Stimulus


def _flip(entry: Entry) -> Entry:
    if isinstance(entry, Expectation):
        return Stimulus(entry.data)
    return Expectation(entry.data)


@dataclass(frozen=True)
class Script(Sequence[Entry]):
    """An immutable, strictly alternating list of entries.

    Raises:
        ValueError: If two consecutive entries share a polarity.

    """

    entries: tuple[Entry, ...] = ()

    def __post_init__(self) -> None:
        """Validate alternation."""
        entries = tuple(self.entries)
        object.__setattr__(self, "entries", entries)
        for index in range(1, len(entries)):
            if type(entries[index]) is type(entries[index - 1]):
                raise ValueError(
                    f"Script entries must alternate: entries {index - 1} and {index} are both "
                    f"{type(entries[index]).__name__}"
                )

    @classmethod
    def from_pdus(cls, pdus: Iterable[bytes | Sequence[int]], *, first: type[Entry] = Expectation) -> Script:
        """Build an alternating script from a flat list of PDUs.

        Args:
            pdus: Raw PDUs in conversation order.
            first: Polarity of the first PDU; the rest alternate.

        """
        entries: list[Entry] = []
        kind: type[Entry] = first
        for pdu in pdus:
            entries.append(kind(bytes(pdu)))
            kind = Stimulus if kind is Expectation else Expectation
        return cls(tuple(entries))

    def mirrored(self) -> Script:
        """The same conversation seen from the other end."""
        return Script(tuple(_flip(entry) for entry in self.entries))

    def prepend(self, *entries: Entry) -> Script:
        """Return a new script with ``entries`` placed before this one's."""
        return Script(tuple(entries) + self.entries)

    @overload
    def __getitem__(self, index: int) -> Entry: ...

    @overload
    def __getitem__(self, index: slice) -> Script: ...

    def __getitem__(self, index: int | slice) -> Entry | Script:
        """Index an entry, or slice a sub-script."""
        if isinstance(index, slice):
            return Script(self.entries[index])
        return self.entries[index]

    def __len__(self) -> int:
        """Number of entries."""
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        """Iterate entries in order."""
        return iter(self.entries)
