# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Runs one scenario against an engine.

The driver wires a fresh channel pair, a :class:`TranscriptPlayer` and the
engine onto one scheduler, then lets the conversation run until it
completes, fails, or the deadline expires.
For server scenarios the driver itself writes the MTU-exchange request that
opens the script before starting the player.

Completion rules:

* a failed transcript fails the scenario with
  :class:`~gatt_conformance.errors.TranscriptMismatch`;
* a transcript that passes on an expectation completes the scenario;
* a transcript that ends on a stimulus waits for the engine (its step) to
  report back;
* an engine reporting back while script entries remain is a
  :class:`~gatt_conformance.errors.ScenarioError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeVar

from gatt_conformance._debug import fmt_hexdump, scenario_logger, wire_logger
from gatt_conformance.db import AttributeDatabase, find_mismatch
from gatt_conformance.errors import HarnessError, ScenarioError, StructuralMismatch, TranscriptMismatch
from gatt_conformance.scenarios._databases import standard_database
from gatt_conformance.scenarios._engine import AttEngine, ClientEngine, Engine, EngineFactory, Role
from gatt_conformance.scenarios._pdus import SERVER_MTU_EXCHANGE
from gatt_conformance.scenarios._scenario import Scenario
from gatt_conformance.transcript import (
    Channel,
    EventLoopScheduler,
    Expectation,
    Handle,
    Scheduler,
    Stimulus,
    TranscriptPlayer,
    Verdict,
    make_channel_pair,
)

__all__ = [
    "DEFAULT_MTU",
    "DEFAULT_SCENARIO_TIMEOUT",
    "ScenarioDriver",
    "ScenarioOptions",
]

# Default per-scenario deadline in seconds.
DEFAULT_SCENARIO_TIMEOUT: float = 5.0

DEFAULT_MTU: int = 512

_E = TypeVar("_E")


def _require(engine: Engine | None, kind: type[_E], role: Role) -> _E:
    """Narrow ``engine`` to the protocol its role requires."""
    if not isinstance(engine, kind):
        raise ScenarioError(f"engine {type(engine).__name__} does not implement {kind.__name__} for role {role.value}")
    return engine


@dataclass(frozen=True)
class ScenarioOptions:
    """Knobs shared by every scenario of a run.

    Attributes:
        mtu: MTU handed to the engine factory.
        timeout: Deadline in seconds; ``0`` disables it.

    """

    mtu: int = DEFAULT_MTU
    timeout: float = DEFAULT_SCENARIO_TIMEOUT


class ScenarioDriver:
    """Drives a single scenario to a verdict.

    Args:
        scenario: What to run.
        engine_factory: Builds the engine under test.
        options: MTU and deadline.
        scheduler: Loop to run on.  When omitted a private
            :class:`EventLoopScheduler` is created and closed afterwards.

    """

    def __init__(
        self,
        scenario: Scenario,
        engine_factory: EngineFactory,
        options: ScenarioOptions | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize the driver; nothing is created until :meth:`run`."""
        self._scenario = scenario
        self._factory = engine_factory
        self._options = options if options is not None else ScenarioOptions()
        self._scheduler = scheduler
        self._source_db: AttributeDatabase | None = None
        self._player: TranscriptPlayer | None = None
        self._engine: Engine | None = None
        self._active: Scheduler | None = None
        self._running = False
        self._finished = False
        self._error: HarnessError | None = None

    @property
    def player(self) -> TranscriptPlayer | None:
        """The player of the last run, for inspecting the transcript."""
        return self._player

    def run(self) -> None:
        """Run the scenario.

        Raises:
            TranscriptMismatch: If the engine diverged from the script.
            StructuralMismatch: If a client discovered the wrong database.
            ScenarioError: On timeout, a failed step, or an engine that
                finished early.

        """
        scenario = self._scenario
        options = self._options
        self._running = False
        self._finished = False
        self._error = None
        self._source_db = standard_database(scenario.database) if scenario.database is not None else None

        script = scenario.script
        if scenario.role is Role.SERVER:
            script = script.prepend(Stimulus(SERVER_MTU_EXCHANGE))

        owned = self._scheduler is None
        scheduler: Scheduler = self._scheduler if self._scheduler is not None else EventLoopScheduler()
        self._active = scheduler
        harness_end, engine_end = make_channel_pair()
        self._player = TranscriptPlayer(harness_end, script, scheduler, on_finished=self._on_player_finished)
        self._engine = None
        deadline: Handle | None = None

        scenario_logger.debug(
            "Starting %s (%s, %d entries)",
            scenario.name,
            scenario.role.value,
            len(script),
            extra={"scenario": scenario.name, "role": scenario.role.value},
        )
        try:
            self._engine = self._factory(
                scenario.role,
                engine_end,
                scheduler,
                mtu=options.mtu,
                database=self._source_db if scenario.role is Role.SERVER else None,
            )
            if scenario.role is Role.CLIENT:
                _require(self._engine, ClientEngine, scenario.role).set_ready_handler(self._on_ready)
            if scenario.role is Role.SERVER:
                self._prime(harness_end)
            self._player.start()
            if scenario.role is Role.ATT:
                att = _require(self._engine, AttEngine, scenario.role)
                att.exchange_mtu(options.mtu)
                if scenario.step is not None:
                    scenario.step.run(att, self._on_engine_done)
            if options.timeout > 0:
                deadline = scheduler.call_later(options.timeout, self._on_timeout)
            if not self._finished:
                self._running = True
                scheduler.run()
        finally:
            self._running = False
            if deadline is not None:
                deadline.cancel()
            self._player.stop()
            if self._engine is not None:
                self._engine.close()
            engine_end.close()
            if owned:
                scheduler.close()
            self._active = None

        if self._error is not None:
            raise self._error
        if not self._finished:
            raise ScenarioError(f"{scenario.name}: scheduler stopped before the scenario completed")
        scenario_logger.debug("Completed %s", scenario.name, extra={"scenario": scenario.name})

    def _prime(self, channel: Channel) -> None:
        """Write the server MTU-exchange request the script starts with."""
        written = channel.send(SERVER_MTU_EXCHANGE)
        if wire_logger.isEnabledFor(logging.DEBUG):
            for line in fmt_hexdump("<", SERVER_MTU_EXCHANGE):
                wire_logger.debug(line)
        if written != len(SERVER_MTU_EXCHANGE):
            raise ScenarioError(f"priming write sent {written} of {len(SERVER_MTU_EXCHANGE)} bytes")

    # -- completion ---------------------------------------------------------

    def _finish(self, error: HarnessError | None = None) -> None:
        if self._finished:
            return
        self._finished = True
        self._error = error
        if self._running and self._active is not None:
            self._active.stop()

    def _on_player_finished(self, verdict: Verdict) -> None:
        if not verdict.passed:
            # a late failure overrides an earlier completion
            self._finished = False
            self._finish(TranscriptMismatch(verdict))
            return
        script = self._player.script if self._player is not None else None
        if not script or isinstance(script[-1], Expectation):
            self._finish()
        elif scenario_logger.isEnabledFor(logging.DEBUG):
            scenario_logger.debug("Transcript done, waiting for the engine", extra={"scenario": self._scenario.name})

    def _on_engine_done(self, error: HarnessError | None = None) -> None:
        if error is not None:
            self._finish(error)
            return
        player = self._player
        if player is None or player.verdict is None:
            remaining = player.remaining if player is not None else 0
            self._finish(ScenarioError(f"engine completed with {remaining} entries remaining"))
            return
        self._finish()

    def _on_ready(self, success: bool, ecode: int) -> None:
        if not success:
            self._finish(ScenarioError(f"client discovery failed with att_ecode {ecode:#04x}"))
            return
        engine = _require(self._engine, ClientEngine, Role.CLIENT)
        if self._source_db is not None:
            discovered = engine.database
            if discovered is None:
                self._finish(ScenarioError("client reported ready without a database"))
                return
            mismatch = find_mismatch(discovered, self._source_db)
            if mismatch is not None:
                self._finish(StructuralMismatch(mismatch))
                return
        step = self._scenario.step
        if step is None:
            self._on_engine_done()
            return
        step.run(engine, self._on_engine_done)

    def _on_timeout(self) -> None:
        index = self._player.index if self._player is not None else 0
        self._finish(ScenarioError(f"timed out after {self._options.timeout:g}s at entry {index}"))
