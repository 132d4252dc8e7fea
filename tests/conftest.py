# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Shared test fixtures for gatt_conformance tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from gatt_conformance.db import (
    AttributeDatabase,
    Characteristic,
    Descriptor,
    Permission,
    PrimaryService,
    Property,
    build,
)
from gatt_conformance.transcript import EventLoopScheduler, ManualScheduler, Scheduler, SocketChannel, make_channel_pair

READ_DATA = b"\x01\x02\x03"


@pytest.fixture
def channel_pair() -> Iterator[tuple[SocketChannel, SocketChannel]]:
    """A connected ``(harness_end, engine_end)`` pair, closed afterwards."""
    harness_end, engine_end = make_channel_pair()
    try:
        yield harness_end, engine_end
    finally:
        harness_end.close()
        engine_end.close()


@pytest.fixture
def manual_scheduler() -> Iterator[ManualScheduler]:
    """A steppable scheduler."""
    scheduler = ManualScheduler()
    try:
        yield scheduler
    finally:
        scheduler.close()


@pytest.fixture(params=["manual", "asyncio"])
def scheduler(request: pytest.FixtureRequest) -> Iterator[Scheduler]:
    """Each scheduler implementation in turn."""
    sched: Scheduler = ManualScheduler() if request.param == "manual" else EventLoopScheduler()
    try:
        yield sched
    finally:
        sched.close()


@pytest.fixture
def small_db() -> AttributeDatabase:
    """One GAP service with a readable device name and a user description."""
    return build(
        [
            PrimaryService(0x0001, "1800", 5),
            Characteristic("2a0d", Permission.READ, Property.READ, READ_DATA),
            Descriptor("2901", Permission.READ, "name"),
        ]
    )
